"""Serialization utilities."""

from dataclasses import asdict
from datetime import date
from typing import Any


def _convert(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _convert(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(v) for v in value]
    return value


def serialize_dataclass(obj) -> dict:
    """Serialize a dataclass to dict, converting dates and datetimes to ISO strings."""
    return _convert(asdict(obj))
