"""Data-source catalog: every data source the provider serves.

To add a new data source, implement it under internal/service/<name>/ and
register its factory here.
"""

from internal.datasource.registry import register_data_source
from internal.service.mysql.image_products_data_source import MysqlImageProductsDataSource
from internal.service.mysql.products_data_source import MysqlProductsDataSource

register_data_source(MysqlProductsDataSource)
register_data_source(MysqlImageProductsDataSource)
