"""Small string helpers shared by the builder, the connection, and logging."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any

from .config import MASK


def truncate(text: str | None, length: int) -> str | None:
    if text is None:
        return None
    return text[:length]


def ensure_trailing(text: str, suffix: str) -> str:
    """Return ``text`` ending with exactly one ``suffix``."""
    while text.endswith(suffix):
        text = text[: -len(suffix)]
    return text + suffix


def mask(value: Any) -> str:
    """Replace a secret with a fixed-length placeholder (empty stays empty)."""
    if value is None or value == "":
        return ""
    return MASK


def to_json(obj: Any) -> str:
    if is_dataclass(obj) and not isinstance(obj, type):
        obj = asdict(obj)
    return json.dumps(obj, indent=2, sort_keys=True, default=str)
