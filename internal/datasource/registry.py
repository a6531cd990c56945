"""Data-source registry.

To add a new data source:
  1. Subclass DataSource (schema + read)
  2. Call register_data_source() with its factory
  3. The provider and /api/datasources/<type_name> pick it up
"""

from typing import Callable, Dict, List, Optional

from internal.datasource.framework import DataSource

_factories: Dict[str, Callable[[], DataSource]] = {}


def register_data_source(factory: Callable[[], DataSource]):
    """Register a data source factory under its type suffix."""
    suffix = factory().type_suffix
    if not suffix:
        raise ValueError(f"{factory!r} has no type_suffix")
    _factories[suffix] = factory


def get_data_source(suffix: str) -> Optional[Callable[[], DataSource]]:
    return _factories.get(suffix)


def list_data_sources() -> List[str]:
    return sorted(_factories)
