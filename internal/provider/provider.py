"""The ncloud provider: configuration plus the data-source lifecycle.

read_data_source() runs the hooks in the order the host calls them:
configure -> schema validation -> read.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import internal.service.catalog  # noqa: F401
from internal.conn.config import ConfigError, ProviderConfig, load_provider_config
from internal.datasource.framework import DataSource, Diagnostics, ReadResponse
from internal.datasource.registry import get_data_source, list_data_sources

logger = logging.getLogger(__name__)

PROVIDER_TYPE_NAME = "ncloud"


class UnknownDataSourceError(KeyError):
    pass


class NcloudProvider:
    def __init__(self, config_loader: Callable[[], ProviderConfig] = load_provider_config):
        self._config_loader = config_loader
        self._config: Optional[ProviderConfig] = None

    @property
    def type_name(self) -> str:
        return PROVIDER_TYPE_NAME

    def configure(self, diags: Diagnostics) -> Optional[ProviderConfig]:
        """Load the provider config once; later calls reuse it."""
        if self._config is None:
            try:
                self._config = self._config_loader()
            except ConfigError as exc:
                logger.error("Provider configuration failed: %s", exc)
                diags.add_error("Provider configuration error", str(exc))
                return None
        return self._config

    def data_sources(self) -> List[str]:
        return [f"{PROVIDER_TYPE_NAME}_{suffix}" for suffix in list_data_sources()]

    def new_data_source(self, type_name: str) -> DataSource:
        prefix = PROVIDER_TYPE_NAME + "_"
        factory = None
        if type_name.startswith(prefix):
            factory = get_data_source(type_name[len(prefix):])
        if factory is None:
            raise UnknownDataSourceError(type_name)
        ds = factory()
        return ds

    def schemas(self) -> Dict[str, dict]:
        return {name: self.new_data_source(name).schema().to_dict() for name in self.data_sources()}

    def read_data_source(self, type_name: str, config: Dict[str, Any]) -> ReadResponse:
        """Configure, validate and read one data source.

        Raises:
            UnknownDataSourceError: type_name is not served by this provider.
        """
        ds = self.new_data_source(type_name)
        resp = ReadResponse()

        resp.diagnostics.append(ds.schema().validate_config(config))
        if resp.diagnostics.has_error():
            resp.failed_stage = "validate"
            return resp

        provider_data = self.configure(resp.diagnostics)
        if resp.diagnostics.has_error():
            resp.failed_stage = "configure"
            return resp

        ds.configure(provider_data, resp.diagnostics)
        if resp.diagnostics.has_error():
            resp.failed_stage = "configure"
            return resp

        logger.info("Reading data source %s", type_name)
        result = ds.read(config)
        resp.diagnostics.append(result.diagnostics)
        if resp.diagnostics.has_error():
            resp.failed_stage = result.failed_stage or "read"
        resp.state = result.state
        return resp
