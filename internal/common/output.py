"""JSON helpers shared by the data sources."""

import dataclasses
import json
import logging
import os

logger = logging.getLogger(__name__)


def _default(value):
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    return str(value)


def marshal_unchecked_string(value) -> str:
    """Render a value as JSON for log lines. Never raises."""
    try:
        return json.dumps(value, default=_default, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        return f"<unserializable {type(value).__name__}: {exc}>"


def write_to_file(path: str, data) -> None:
    """Replace the file at path with data as indented JSON."""
    logger.info("Writing output file %s", path)
    try:
        os.remove(path)
    except FileNotFoundError:
        pass

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=_default)
