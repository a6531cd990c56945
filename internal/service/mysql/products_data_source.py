"""ncloud_mysql_products: server specs available for a Cloud DB for MySQL image.

Example config:

  {
    "cloud_mysql_image_product_code": "SW.VMYSL.OS.LNX64.ROCKY.0810.MYSQL.B050",
    "filter": [{"name": "product_type", "values": ["STAND"]}],
    "output_file": "mysql_products.json"
  }
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from internal.common.filters import data_source_filters_block, filter_models, parse_filters
from internal.common.output import marshal_unchecked_string
from internal.datasource.framework import Attribute, ReadResponse, Schema
from internal.ncloud.client import NcloudAPIError
from internal.ncloud.vmysql import GetCloudMysqlProductListRequest, Product, code_value
from internal.service.mysql.common import ConfiguredDataSource, is_set

logger = logging.getLogger(__name__)


@dataclass
class MysqlProductModel:
    product_code: Optional[str]
    product_name: Optional[str]
    product_type: Optional[str]
    product_description: Optional[str]
    infra_resource_type: Optional[str]
    cpu_count: Optional[int]
    memory_size: Optional[int]
    disk_type: Optional[str]

    @classmethod
    def from_product(cls, p: Product) -> "MysqlProductModel":
        return cls(
            product_code=p.product_code,
            product_name=p.product_name,
            product_type=code_value(p.product_type),
            product_description=p.product_description,
            infra_resource_type=code_value(p.infra_resource_type),
            cpu_count=p.cpu_count,
            memory_size=p.memory_size,
            disk_type=code_value(p.disk_type),
        )


def flatten_mysql_products(products: List[Product]) -> List[MysqlProductModel]:
    return [MysqlProductModel.from_product(p) for p in products]


class MysqlProductsDataSource(ConfiguredDataSource):
    type_suffix = "mysql_products"
    list_attribute = "product_list"

    def schema(self) -> Schema:
        product = {
            "product_code": Attribute("string", computed=True),
            "product_name": Attribute("string", computed=True),
            "product_type": Attribute("string", computed=True),
            "product_description": Attribute("string", computed=True),
            "infra_resource_type": Attribute("string", computed=True),
            "cpu_count": Attribute("int64", computed=True),
            "memory_size": Attribute("int64", computed=True),
            "disk_type": Attribute("string", computed=True),
        }
        return Schema(
            description="Server specs (products) available for a Cloud DB for MySQL image.",
            attributes={
                "id": Attribute("string", computed=True),
                "cloud_mysql_image_product_code": Attribute("string", required=True),
                "product_code": Attribute("string", optional=True),
                "exclusion_product_code": Attribute("string", optional=True),
                "output_file": Attribute("string", optional=True),
                "product_list": Attribute("list_nested", computed=True, nested=product),
            },
            blocks={"filter": data_source_filters_block()},
        )

    def read(self, config: Dict[str, Any]) -> ReadResponse:
        resp = ReadResponse()
        if not self.check_configured(resp.diagnostics):
            return resp

        req = GetCloudMysqlProductListRequest(
            region_code=self.config.region_code,
            cloud_mysql_image_product_code=config["cloud_mysql_image_product_code"],
        )
        if is_set(config.get("product_code")):
            req.product_code = config["product_code"]
        if is_set(config.get("exclusion_product_code")):
            req.exclusion_product_code = config["exclusion_product_code"]

        logger.info("GetMysqlProductList reqParams=%s", marshal_unchecked_string(req))

        try:
            api_resp = self.config.client.vmysql.get_cloud_mysql_product_list(req)
        except NcloudAPIError as exc:
            resp.diagnostics.add_error(
                "GetMysqlProductList",
                f"error: {exc}, reqParams: {marshal_unchecked_string(req)}",
            )
            return resp

        logger.info("GetMysqlProductList response=%s", marshal_unchecked_string(api_resp))

        products = flatten_mysql_products(api_resp.product_list)
        try:
            filtered = filter_models(parse_filters(config.get("filter")), products, MysqlProductModel)
        except ValueError as exc:
            resp.diagnostics.add_error("Invalid filter", str(exc))
            resp.failed_stage = "validate"
            return resp

        state = self.initial_state(config)
        self.refresh_from_output(state, filtered)

        self.dump_output(config, state["product_list"], resp)
        if resp.diagnostics.has_error():
            return resp

        resp.state = state
        return resp
