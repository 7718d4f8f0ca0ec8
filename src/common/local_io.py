"""Local file I/O utilities."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)


def save_json_local(record: Any, filepath: Path) -> Path:
    """
    Save a dataclass record (or list of them) as a JSON file.

    Parent directories are created as needed.

    Args:
        record: Dataclass object, list of dataclass objects, or plain JSON data
        filepath: Destination file

    Returns:
        Path to the created file.
    """
    if isinstance(record, list):
        data = [_to_json_data(r) for r in record]
    else:
        data = _to_json_data(record)

    filepath.parent.mkdir(parents=True, exist_ok=True)
    with filepath.open("w", encoding="utf-8") as f:
        json.dump(data, f, default=str, ensure_ascii=False, indent=2)
        f.write("\n")

    logger.debug("Saved %s", filepath)
    return filepath


def _to_json_data(record: Any) -> Any:
    if hasattr(record, "__dataclass_fields__"):
        return serialize_dataclass(record)
    return record
