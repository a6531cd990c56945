"""Cloud DB for MySQL (VPC) API: typed models and the v2 operations.

Every vendor field is optional. A field the API leaves out stays None;
it is never replaced with "" or 0.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from internal.ncloud.client import APIClient, NcloudAPIError
from internal.ncloud.configuration import APIKey, new_configuration


@dataclass
class CommonCode:
    code: Optional[str] = None
    code_name: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["CommonCode"]:
        if data is None:
            return None
        return cls(code=data.get("code"), code_name=data.get("codeName"))

    def to_dict(self) -> dict:
        return {"code": self.code, "codeName": self.code_name}


def code_value(value: Optional[CommonCode]) -> Optional[str]:
    return value.code if value is not None else None


def _int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return int(value)


@dataclass
class Product:
    product_code: Optional[str] = None
    product_name: Optional[str] = None
    product_type: Optional[CommonCode] = None
    product_description: Optional[str] = None
    infra_resource_type: Optional[CommonCode] = None
    cpu_count: Optional[int] = None
    memory_size: Optional[int] = None
    disk_type: Optional[CommonCode] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        return cls(
            product_code=data.get("productCode"),
            product_name=data.get("productName"),
            product_type=CommonCode.from_dict(data.get("productType")),
            product_description=data.get("productDescription"),
            infra_resource_type=CommonCode.from_dict(data.get("infraResourceType")),
            cpu_count=_int(data.get("cpuCount")),
            memory_size=_int(data.get("memorySize")),
            disk_type=CommonCode.from_dict(data.get("diskType")),
        )


@dataclass
class ImageProduct:
    product_code: Optional[str] = None
    generation_code: Optional[str] = None
    product_name: Optional[str] = None
    product_type: Optional[CommonCode] = None
    platform_type: Optional[CommonCode] = None
    os_information: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ImageProduct":
        return cls(
            product_code=data.get("productCode"),
            generation_code=data.get("generationCode"),
            product_name=data.get("productName"),
            product_type=CommonCode.from_dict(data.get("productType")),
            platform_type=CommonCode.from_dict(data.get("platformType")),
            os_information=data.get("osInformation"),
        )


# ── Requests ─────────────────────────────────────────────────────────────────

@dataclass
class GetCloudMysqlProductListRequest:
    cloud_mysql_image_product_code: str
    region_code: Optional[str] = None
    product_code: Optional[str] = None
    exclusion_product_code: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        return {
            "regionCode": self.region_code,
            "cloudMysqlImageProductCode": self.cloud_mysql_image_product_code,
            "productCode": self.product_code,
            "exclusionProductCode": self.exclusion_product_code,
        }


@dataclass
class GetCloudMysqlImageProductListRequest:
    region_code: Optional[str] = None
    product_code: Optional[str] = None
    generation_code: Optional[str] = None

    def to_params(self) -> Dict[str, Any]:
        return {
            "regionCode": self.region_code,
            "productCode": self.product_code,
            "generationCode": self.generation_code,
        }


# ── Responses ────────────────────────────────────────────────────────────────

@dataclass
class ProductListResponse:
    request_id: Optional[str] = None
    return_code: Optional[str] = None
    return_message: Optional[str] = None
    total_rows: Optional[int] = None
    product_list: List[Any] = field(default_factory=list)


def _unwrap(body: Dict[str, Any], envelope: str, operation: str) -> Dict[str, Any]:
    inner = body.get(envelope) if isinstance(body, dict) else None
    if not isinstance(inner, dict):
        raise NcloudAPIError(f"{operation}: response has no {envelope!r} envelope")
    return inner


def _list_response(inner: Dict[str, Any], item_type, operation: str) -> ProductListResponse:
    try:
        return ProductListResponse(
            request_id=inner.get("requestId"),
            return_code=inner.get("returnCode"),
            return_message=inner.get("returnMessage"),
            total_rows=_int(inner.get("totalRows")),
            product_list=[item_type.from_dict(p) for p in inner.get("productList") or []],
        )
    except (ValueError, TypeError, AttributeError) as exc:
        raise NcloudAPIError(f"{operation}: malformed response: {exc}") from exc


# ── API ──────────────────────────────────────────────────────────────────────

class V2Api:
    def __init__(self, api_client: APIClient):
        self.api_client = api_client

    def get_cloud_mysql_product_list(self, req: GetCloudMysqlProductListRequest) -> ProductListResponse:
        """List the server specs available for a MySQL image."""
        op = "getCloudMysqlProductList"
        body = self.api_client.call_api("POST", op, req.to_params())
        return _list_response(_unwrap(body, op + "Response", op), Product, op)

    def get_cloud_mysql_image_product_list(
        self, req: GetCloudMysqlImageProductListRequest,
    ) -> ProductListResponse:
        """List the MySQL images (engine version + OS) that can be launched."""
        op = "getCloudMysqlImageProductList"
        body = self.api_client.call_api("POST", op, req.to_params())
        return _list_response(_unwrap(body, op + "Response", op), ImageProduct, op)


class NcloudClient:
    """Entry point to the per-service APIs used by the provider."""

    def __init__(self, api_key: APIKey, site: str = "public", timeout: float = 30.0,
                 environ: Optional[dict] = None, session=None):
        cfg = new_configuration("vmysql", api_key, site=site, environ=environ)
        cfg.timeout = timeout
        self.vmysql = V2Api(APIClient(cfg, session=session))
