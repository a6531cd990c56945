"""Pieces shared by the Cloud DB for MySQL data sources."""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from internal.common.output import write_to_file
from internal.conn.config import ProviderConfig
from internal.datasource.framework import DataSource, Diagnostics, ReadResponse


def utc_now_id() -> str:
    """Synthetic id for list data sources: the read time in UTC."""
    return str(datetime.now(timezone.utc))


def is_set(value) -> bool:
    return value is not None and value != ""


class ConfiguredDataSource(DataSource):
    """A data source that needs the provider's ProviderConfig to read."""

    list_attribute = ""

    def __init__(self, id_func=utc_now_id):
        self.config: Optional[ProviderConfig] = None
        self._id_func = id_func

    def configure(self, provider_data, diags: Diagnostics):
        if provider_data is None:
            return
        if not isinstance(provider_data, ProviderConfig):
            diags.add_error(
                "Unexpected Data Source Configure Type",
                f"Expected ProviderConfig, got: {type(provider_data).__name__}. "
                "Please report this issue to the provider developers.",
            )
            return
        self.config = provider_data

    def check_configured(self, diags: Diagnostics) -> bool:
        if self.config is None or self.config.client is None:
            diags.add_error(
                "Unconfigured Data Source",
                "The provider has not been configured; cannot call the NCloud API.",
            )
            return False
        return True

    def initial_state(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Start the state from the config, with every argument present."""
        state = {
            name: None
            for name, attr in self.schema().attributes.items()
            if attr.optional or attr.required
        }
        state.update(config)
        state.setdefault("filter", None)
        return state

    def refresh_from_output(self, state: Dict[str, Any], models: List[Any]):
        """Replace the computed list with models and assign a fresh id."""
        state[self.list_attribute] = [asdict(m) for m in models]
        state["id"] = self._id_func()

    def dump_output(self, config: Dict[str, Any], items, resp: ReadResponse):
        output_file = config.get("output_file")
        if not is_set(output_file):
            return
        try:
            write_to_file(output_file, items)
        except OSError as exc:
            resp.diagnostics.add_error("WriteToFile", f"output_file {output_file}: {exc}")
            resp.failed_stage = "output"
