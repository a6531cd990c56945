"""NCloud SDK client configuration.

Every NCloud service lives under its own path on the API Gateway:

  https://ncloud.apigw.ntruss.com/server/v2
  https://ncloud.apigw.ntruss.com/vmysql/v2

Set NCLOUD_API_GW to point every service at another gateway host.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


SITE_GATEWAYS = {
    "public": "https://ncloud.apigw.ntruss.com",
    "gov": "https://ncloud.apigw.gov-ntruss.com",
    "fin": "https://fin-ncloud.apigw.fin-ntruss.com",
}

SERVICES = ("server", "vmysql")
API_VERSION = "v2"
SDK_VERSION = "1.0.0"


@dataclass
class APIKey:
    access_key: str
    secret_key: str = field(repr=False)


@dataclass
class Configuration:
    base_path: str
    user_agent: str
    api_key: Optional[APIKey] = None
    default_header: dict = field(default_factory=dict)
    timeout: float = 30.0


def gateway_for_site(site: str) -> str:
    """Return the API Gateway host for a site (public, gov, fin)."""
    try:
        return SITE_GATEWAYS[site]
    except KeyError:
        raise ValueError(f"site must be one of {tuple(SITE_GATEWAYS)}, got {site!r}") from None


def new_configuration(
    service: str,
    api_key: Optional[APIKey],
    site: str = "public",
    environ: Optional[dict] = None,
) -> Configuration:
    """Build the client configuration for one NCloud service."""
    if service not in SERVICES:
        raise ValueError(f"unknown NCloud service {service!r}")
    env = os.environ if environ is None else environ

    gateway = env.get("NCLOUD_API_GW") or gateway_for_site(site)
    return Configuration(
        base_path=f"{gateway.rstrip('/')}/{service}/{API_VERSION}",
        user_agent=f"{service}/{SDK_VERSION}/python",
        api_key=api_key,
    )
