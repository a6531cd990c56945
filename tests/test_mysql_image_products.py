"""Tests for the ncloud_mysql_image_products data source."""

import json

from internal.datasource.framework import Diagnostics
from internal.service.mysql.image_products_data_source import MysqlImageProductsDataSource

from conftest import DummyVmysql, make_provider_config


def _data_source(vmysql):
    ds = MysqlImageProductsDataSource(id_func=lambda: "fixed-id")
    ds.configure(make_provider_config(vmysql), Diagnostics())
    return ds


def test_metadata():
    assert MysqlImageProductsDataSource().metadata("ncloud") == "ncloud_mysql_image_products"


def test_read_images():
    vmysql = DummyVmysql()
    resp = _data_source(vmysql).read({})
    assert not resp.diagnostics.has_error()
    images = resp.state["image_product_list"]
    assert resp.state["id"] == "fixed-id"
    assert images[0] == {
        "product_code": "SW.VMYSL.OS.LNX64.ROCKY.0810.MYSQL.B050",
        "generation_code": "G2",
        "product_name": "mysql(8.0.36)",
        "product_type": "LINUX",
        "platform_type": "LNX64",
        "os_information": "Rocky Linux 8.10 with MySQL 8.0.36",
    }
    req = vmysql.requests[0]
    assert req.region_code == "KR"
    assert req.product_code is None
    assert req.generation_code is None


def test_inputs_are_sent():
    vmysql = DummyVmysql()
    _data_source(vmysql).read({"product_code": "SW.X", "generation_code": "G3"})
    assert vmysql.requests[0].product_code == "SW.X"
    assert vmysql.requests[0].generation_code == "G3"


def test_regex_filter_on_os_information():
    resp = _data_source(DummyVmysql()).read({
        "filter": [{"name": "os_information", "values": ["Rocky"], "regex": True}],
    })
    assert [i["product_name"] for i in resp.state["image_product_list"]] == ["mysql(8.0.36)"]


def test_api_error(api_error):
    resp = _data_source(DummyVmysql(error=api_error)).read({})
    assert resp.state is None
    assert resp.diagnostics.errors()[0].summary == "GetMysqlImageProductList"


def test_output_file(tmp_path):
    out = tmp_path / "images.json"
    resp = _data_source(DummyVmysql()).read({"output_file": str(out)})
    assert json.loads(out.read_text(encoding="utf-8")) == resp.state["image_product_list"]


def test_output_file_error(tmp_path):
    resp = _data_source(DummyVmysql()).read({"output_file": str(tmp_path / "missing" / "images.json")})
    assert resp.state is None
    assert resp.failed_stage == "output"
    assert resp.diagnostics.errors()[0].summary == "WriteToFile"


def test_each_read_refreshes_id():
    ids = iter(["id-1", "id-2"])
    ds = MysqlImageProductsDataSource(id_func=lambda: next(ids))
    ds.configure(make_provider_config(DummyVmysql()), Diagnostics())
    assert ds.read({}).state["id"] == "id-1"
    assert ds.read({}).state["id"] == "id-2"
