"""Shared fakes: an in-memory HTTP session and a canned vmysql API."""

import json

import pytest

from internal.conn.config import ProviderConfig
from internal.ncloud.client import NcloudAPIError
from internal.ncloud.vmysql import CommonCode, ImageProduct, Product, ProductListResponse


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None, reason="OK"):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else (json.dumps(body) if body is not None else "")
        self.reason = reason

    def json(self):
        if self._body is None:
            return json.loads(self.text)
        return self._body


class FakeSession:
    """Records requests and replies with queued FakeResponses."""

    def __init__(self, *responses, error=None):
        self.responses = list(responses)
        self.error = error
        self.calls = []

    def request(self, method, url, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "headers": headers or {}, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


def sample_products():
    return [
        Product(
            product_code="SVR.VDBAS.STAND.C002.M008.NET.SSD.B050.G002",
            product_name="vCPU 2EA, Memory 8GB",
            product_type=CommonCode("STAND", "Standard"),
            product_description="vCPU 2EA, Memory 8GB",
            infra_resource_type=CommonCode("VMYSL", "Cloud DB for MySQL(VPC)"),
            cpu_count=2,
            memory_size=8589934592,
            disk_type=CommonCode("NET", "Network Storage"),
        ),
        Product(
            product_code="SVR.VDBAS.HICPU.C004.M008.NET.SSD.B050.G002",
            product_name="vCPU 4EA, Memory 8GB",
            product_type=CommonCode("HICPU", "High CPU"),
            product_description="vCPU 4EA, Memory 8GB",
            infra_resource_type=CommonCode("VMYSL", "Cloud DB for MySQL(VPC)"),
            cpu_count=4,
            memory_size=8589934592,
            disk_type=CommonCode("NET", "Network Storage"),
        ),
        Product(product_code="SVR.VDBAS.PARTIAL", product_name="partial"),
    ]


def sample_images():
    return [
        ImageProduct(
            product_code="SW.VMYSL.OS.LNX64.ROCKY.0810.MYSQL.B050",
            generation_code="G2",
            product_name="mysql(8.0.36)",
            product_type=CommonCode("LINUX", "Linux"),
            platform_type=CommonCode("LNX64", "Linux 64 Bit"),
            os_information="Rocky Linux 8.10 with MySQL 8.0.36",
        ),
        ImageProduct(
            product_code="SW.VMYSL.OS.LNX64.CNTOS.0708.MYSQL.B050",
            generation_code="G2",
            product_name="mysql(5.7.44)",
            product_type=CommonCode("LINUX", "Linux"),
            platform_type=CommonCode("LNX64", "Linux 64 Bit"),
            os_information="CentOS 7.8 with MySQL 5.7.44",
        ),
    ]


class DummyVmysql:
    """Stands in for V2Api; records the last request."""

    def __init__(self, products=None, images=None, error=None):
        self.products = sample_products() if products is None else products
        self.images = sample_images() if images is None else images
        self.error = error
        self.requests = []

    def get_cloud_mysql_product_list(self, req):
        self.requests.append(req)
        if self.error:
            raise self.error
        return ProductListResponse(return_code="0", total_rows=len(self.products),
                                   product_list=list(self.products))

    def get_cloud_mysql_image_product_list(self, req):
        self.requests.append(req)
        if self.error:
            raise self.error
        return ProductListResponse(return_code="0", total_rows=len(self.images),
                                   product_list=list(self.images))


class DummyClient:
    def __init__(self, vmysql):
        self.vmysql = vmysql


def make_provider_config(vmysql=None, region="KR"):
    return ProviderConfig(
        access_key="AK", secret_key="SK", region_code=region,
        client=DummyClient(vmysql or DummyVmysql()),
    )


@pytest.fixture
def vmysql():
    return DummyVmysql()


@pytest.fixture
def provider_config(vmysql):
    return make_provider_config(vmysql)


@pytest.fixture
def api_error():
    return NcloudAPIError("getCloudMysqlProductList: status 400, returnCode 5001017, invalid image",
                          status=400, return_code="5001017", return_message="invalid image")
