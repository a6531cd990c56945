"""Provider configuration: credentials, region and the NCloud client.

Values come from a YAML file (NCLOUD_CONFIG_PATH, default
config/provider.yaml) and are overridden by environment variables:

  NCLOUD_ACCESS_KEY, NCLOUD_SECRET_KEY, NCLOUD_REGION, NCLOUD_SITE,
  NCLOUD_API_GW
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

import yaml

from internal.ncloud.configuration import APIKey, SITE_GATEWAYS
from internal.ncloud.vmysql import NcloudClient

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/provider.yaml"

_ENV_KEYS = {
    "NCLOUD_ACCESS_KEY": "access_key",
    "NCLOUD_SECRET_KEY": "secret_key",
    "NCLOUD_REGION": "region",
    "NCLOUD_SITE": "site",
    "NCLOUD_API_GW": "api_gateway",
}


class ConfigError(Exception):
    pass


@dataclass
class ProviderConfig:
    access_key: str
    secret_key: str = field(repr=False)
    region_code: str = "KR"
    site: str = "public"
    support_vpc: bool = True
    api_gateway: Optional[str] = None
    timeout: float = 30.0
    client: Optional[NcloudClient] = field(default=None, repr=False)


def _read_yaml(path: str, explicit: bool) -> dict:
    if not os.path.exists(path):
        if explicit:
            raise ConfigError(f"provider config file not found: {path}")
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def load_provider_config(path: Optional[str] = None, environ: Optional[dict] = None,
                         session=None) -> ProviderConfig:
    """Load the provider configuration and build its NCloud client.

    Raises:
        ConfigError: Missing credentials, unknown site, or an unreadable file.
    """
    env = os.environ if environ is None else environ
    explicit = path is not None or bool(env.get("NCLOUD_CONFIG_PATH"))
    path = path or env.get("NCLOUD_CONFIG_PATH") or DEFAULT_CONFIG_PATH

    values = _read_yaml(path, explicit)
    for env_key, name in _ENV_KEYS.items():
        if env.get(env_key):
            values[name] = env[env_key]

    missing = [k for k in ("access_key", "secret_key") if not values.get(k)]
    if missing:
        raise ConfigError(
            f"missing provider settings: {', '.join(missing)} "
            "(set them in the config file or NCLOUD_ACCESS_KEY / NCLOUD_SECRET_KEY)"
        )

    site = values.get("site", "public")
    if site not in SITE_GATEWAYS:
        raise ConfigError(f"site must be one of {tuple(SITE_GATEWAYS)}, got {site!r}")

    support_vpc = values.get("support_vpc", True)
    if not isinstance(support_vpc, bool):
        raise ConfigError("support_vpc must be a boolean")
    if not support_vpc:
        raise ConfigError("Cloud DB for MySQL data sources require support_vpc = true")

    try:
        timeout = float(values.get("timeout", 30))
    except (TypeError, ValueError):
        raise ConfigError("timeout must be a number of seconds") from None

    cfg = ProviderConfig(
        access_key=str(values["access_key"]),
        secret_key=str(values["secret_key"]),
        region_code=str(values.get("region", "KR")),
        site=site,
        support_vpc=support_vpc,
        api_gateway=values.get("api_gateway"),
        timeout=timeout,
    )

    client_env = dict(env)
    if cfg.api_gateway:
        client_env["NCLOUD_API_GW"] = cfg.api_gateway
    cfg.client = NcloudClient(
        APIKey(cfg.access_key, cfg.secret_key),
        site=cfg.site,
        timeout=cfg.timeout,
        environ=client_env,
        session=session,
    )
    logger.info("Loaded provider config: region=%s site=%s", cfg.region_code, cfg.site)
    return cfg
