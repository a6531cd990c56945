"""Minimal data-source framework: schema, diagnostics and lifecycle.

A data source goes through the same hooks the provider host calls:

  configure(provider_data)   receive the provider's ProviderConfig
  metadata(provider_type)    report its type name, e.g. "ncloud_mysql_products"
  schema()                   describe its attributes and blocks
  read(config)               fetch, filter and return the new state

Errors never escape read(); they are reported as diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

ATTRIBUTE_TYPES = ("string", "int64", "bool", "list", "list_nested")


# ── Diagnostics ──────────────────────────────────────────────────────────────

@dataclass
class Diagnostic:
    severity: str
    summary: str
    detail: str = ""

    def to_dict(self) -> dict:
        return {"severity": self.severity, "summary": self.summary, "detail": self.detail}


class Diagnostics:
    def __init__(self):
        self._items: List[Diagnostic] = []

    def add_error(self, summary: str, detail: str = ""):
        self._items.append(Diagnostic(SEVERITY_ERROR, summary, detail))

    def add_warning(self, summary: str, detail: str = ""):
        self._items.append(Diagnostic(SEVERITY_WARNING, summary, detail))

    def append(self, other: "Diagnostics"):
        self._items.extend(other._items)

    def has_error(self) -> bool:
        return any(d.severity == SEVERITY_ERROR for d in self._items)

    def errors(self) -> List[Diagnostic]:
        return [d for d in self._items if d.severity == SEVERITY_ERROR]

    def to_list(self) -> List[dict]:
        return [d.to_dict() for d in self._items]

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)


# ── Schema ───────────────────────────────────────────────────────────────────

@dataclass
class Attribute:
    type: str
    required: bool = False
    optional: bool = False
    computed: bool = False
    element_type: Optional[str] = None          # for "list"
    nested: Optional[Dict[str, "Attribute"]] = None  # for "list_nested"
    description: str = ""

    def to_dict(self) -> dict:
        out: Dict[str, Any] = {"type": self.type}
        for flag in ("required", "optional", "computed"):
            if getattr(self, flag):
                out[flag] = True
        if self.element_type:
            out["element_type"] = self.element_type
        if self.nested:
            out["nested"] = {k: a.to_dict() for k, a in self.nested.items()}
        if self.description:
            out["description"] = self.description
        return out


@dataclass
class Block:
    attributes: Dict[str, Attribute]
    nesting: str = "set"   # set or list

    def to_dict(self) -> dict:
        return {
            "nesting": self.nesting,
            "attributes": {k: a.to_dict() for k, a in self.attributes.items()},
        }


@dataclass
class Schema:
    attributes: Dict[str, Attribute]
    blocks: Dict[str, Block] = field(default_factory=dict)
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "attributes": {k: a.to_dict() for k, a in self.attributes.items()},
            "blocks": {k: b.to_dict() for k, b in self.blocks.items()},
        }

    def validate_config(self, config: Dict[str, Any]) -> Diagnostics:
        """Check a user config against the schema (arguments only)."""
        diags = Diagnostics()
        if not isinstance(config, dict):
            diags.add_error("Invalid configuration", "configuration must be an object")
            return diags

        for key in config:
            if key not in self.attributes and key not in self.blocks:
                diags.add_error("Unsupported argument", f"An argument named {key!r} is not expected here.")

        _validate_attributes(self.attributes, config, "", diags)

        for name, block in self.blocks.items():
            raw = config.get(name)
            if raw is None:
                continue
            if not isinstance(raw, list):
                diags.add_error("Invalid block", f"{name} must be a list of blocks")
                continue
            for i, item in enumerate(raw):
                path = f"{name}[{i}]."
                if not isinstance(item, dict):
                    diags.add_error("Invalid block", f"{name}[{i}] must be an object")
                    continue
                for key in item:
                    if key not in block.attributes:
                        diags.add_error("Unsupported argument", f"An argument named {path}{key} is not expected here.")
                _validate_attributes(block.attributes, item, path, diags)
        return diags


def _validate_attributes(attributes: Dict[str, Attribute], values: dict, path: str, diags: Diagnostics):
    for name, attr in attributes.items():
        value = values.get(name)
        if value is None:
            if attr.required:
                diags.add_error("Missing required argument", f"The argument {path}{name!r} is required.")
            continue
        if attr.computed and not (attr.optional or attr.required):
            diags.add_error("Invalid configuration", f"{path}{name} is computed and cannot be set.")
            continue
        if not _type_ok(attr.type, value, attr.element_type):
            diags.add_error("Incorrect attribute value type", f"{path}{name} must be of type {attr.type}.")


def _type_ok(type_name: str, value, element_type: Optional[str] = None) -> bool:
    if type_name == "string":
        return isinstance(value, str)
    if type_name == "int64":
        return isinstance(value, int) and not isinstance(value, bool)
    if type_name == "bool":
        return isinstance(value, bool)
    if type_name in ("list", "list_nested"):
        if not isinstance(value, list):
            return False
        if element_type:
            return all(_type_ok(element_type, v) for v in value)
        return True
    return False


# ── Lifecycle ────────────────────────────────────────────────────────────────

@dataclass
class ReadResponse:
    state: Optional[Dict[str, Any]] = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    failed_stage: Optional[str] = None   # validate, configure, read or output


class DataSource:
    """Base class for data sources. Subclasses override schema() and read()."""

    type_suffix = ""

    def configure(self, provider_data, diags: Diagnostics):
        pass

    def metadata(self, provider_type_name: str) -> str:
        return f"{provider_type_name}_{self.type_suffix}"

    def schema(self) -> Schema:
        raise NotImplementedError

    def read(self, config: Dict[str, Any]) -> ReadResponse:
        raise NotImplementedError
