"""Client-side filters for list data sources.

A data source accepts any number of filter blocks:

  filter {
    name   = "product_type"
    values = ["STAND", "HICPU"]
    regex  = false
  }

Filters are ANDed together. Within one filter the values are ORed. With
regex = true each value is a pattern searched in the attribute.
"""

import dataclasses
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, TypeVar

from internal.datasource.framework import Attribute, Block

T = TypeVar("T")


@dataclass
class Filter:
    name: str
    values: List[str]
    regex: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Filter":
        return cls(
            name=data["name"],
            values=[str(v) for v in data["values"]],
            regex=bool(data.get("regex") or False),
        )

    def matches(self, value) -> bool:
        if value is None:
            return False
        rendered = _render(value)
        if self.regex:
            return any(re.search(pattern, rendered) for pattern in self.values)
        return rendered in self.values


def data_source_filters_block() -> Block:
    """Schema block shared by every list data source."""
    return Block(
        nesting="set",
        attributes={
            "name": Attribute("string", required=True),
            "values": Attribute("list", required=True, element_type="string"),
            "regex": Attribute("bool", optional=True),
        },
    )


def _render(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_filters(raw: Optional[Sequence[dict]]) -> List[Filter]:
    if not raw:
        return []
    return [Filter.from_dict(f) for f in raw]


def filter_models(filters: Optional[Sequence[Filter]], models: List[T], model_type: type) -> List[T]:
    """Return the models that pass every filter, preserving order.

    Raises:
        ValueError: A filter names an attribute the models do not have, or
            carries an invalid regular expression.
    """
    if not filters:
        return list(models)

    attribute_names = {fld.name for fld in dataclasses.fields(model_type)}
    result = list(models)
    for f in filters:
        if f.name not in attribute_names:
            raise ValueError(f"filter name {f.name!r} is not an attribute of the list elements")
        if f.regex:
            for pattern in f.values:
                try:
                    re.compile(pattern)
                except re.error as exc:
                    raise ValueError(f"filter {f.name!r}: invalid regex {pattern!r}: {exc}") from exc
        result = [m for m in result if f.matches(getattr(m, f.name))]
    return result
