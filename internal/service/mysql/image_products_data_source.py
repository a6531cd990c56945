"""ncloud_mysql_image_products: MySQL images (engine version + OS).

The product_code of an image is the cloud_mysql_image_product_code that
ncloud_mysql_products needs.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from internal.common.filters import data_source_filters_block, filter_models, parse_filters
from internal.common.output import marshal_unchecked_string
from internal.datasource.framework import Attribute, ReadResponse, Schema
from internal.ncloud.client import NcloudAPIError
from internal.ncloud.vmysql import GetCloudMysqlImageProductListRequest, ImageProduct, code_value
from internal.service.mysql.common import ConfiguredDataSource, is_set

logger = logging.getLogger(__name__)


@dataclass
class MysqlImageProductModel:
    product_code: Optional[str]
    generation_code: Optional[str]
    product_name: Optional[str]
    product_type: Optional[str]
    platform_type: Optional[str]
    os_information: Optional[str]

    @classmethod
    def from_image(cls, p: ImageProduct) -> "MysqlImageProductModel":
        return cls(
            product_code=p.product_code,
            generation_code=p.generation_code,
            product_name=p.product_name,
            product_type=code_value(p.product_type),
            platform_type=code_value(p.platform_type),
            os_information=p.os_information,
        )


class MysqlImageProductsDataSource(ConfiguredDataSource):
    type_suffix = "mysql_image_products"
    list_attribute = "image_product_list"

    def schema(self) -> Schema:
        image = {
            "product_code": Attribute("string", computed=True),
            "generation_code": Attribute("string", computed=True),
            "product_name": Attribute("string", computed=True),
            "product_type": Attribute("string", computed=True),
            "platform_type": Attribute("string", computed=True),
            "os_information": Attribute("string", computed=True),
        }
        return Schema(
            description="Cloud DB for MySQL images.",
            attributes={
                "id": Attribute("string", computed=True),
                "product_code": Attribute("string", optional=True),
                "generation_code": Attribute("string", optional=True),
                "output_file": Attribute("string", optional=True),
                "image_product_list": Attribute("list_nested", computed=True, nested=image),
            },
            blocks={"filter": data_source_filters_block()},
        )

    def read(self, config: Dict[str, Any]) -> ReadResponse:
        resp = ReadResponse()
        if not self.check_configured(resp.diagnostics):
            return resp

        req = GetCloudMysqlImageProductListRequest(region_code=self.config.region_code)
        if is_set(config.get("product_code")):
            req.product_code = config["product_code"]
        if is_set(config.get("generation_code")):
            req.generation_code = config["generation_code"]

        logger.info("GetMysqlImageProductList reqParams=%s", marshal_unchecked_string(req))

        try:
            api_resp = self.config.client.vmysql.get_cloud_mysql_image_product_list(req)
        except NcloudAPIError as exc:
            resp.diagnostics.add_error(
                "GetMysqlImageProductList",
                f"error: {exc}, reqParams: {marshal_unchecked_string(req)}",
            )
            return resp

        logger.info("GetMysqlImageProductList response=%s", marshal_unchecked_string(api_resp))

        images = [MysqlImageProductModel.from_image(p) for p in api_resp.product_list]
        try:
            filtered = filter_models(parse_filters(config.get("filter")), images, MysqlImageProductModel)
        except ValueError as exc:
            resp.diagnostics.add_error("Invalid filter", str(exc))
            resp.failed_stage = "validate"
            return resp

        state = self.initial_state(config)
        self.refresh_from_output(state, filtered)

        self.dump_output(config, state["image_product_list"], resp)
        if resp.diagnostics.has_error():
            return resp

        resp.state = state
        return resp
