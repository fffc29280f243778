"""
Loads attribute data from JSON or YAML text.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import yaml


def _norm_text(data: bytes | bytearray | str, *, encoding: Optional[str] = None) -> str:
    if isinstance(data, (bytes, bytearray)):
        return data.decode(encoding or 'utf-8', errors='replace')
    if isinstance(data, str):
        return data
    return str(data)


def detect_format(content_type: Optional[str] = None, data_hint: Optional[str] = None) -> Optional[str]:
    """
    Returns 'json' or 'yaml'.
    Uses the content type or file suffix first; falls back to simple sniffing.
    """
    ct = (content_type or "").lower()
    if 'json' in ct:
        return 'json'
    if 'yaml' in ct or 'yml' in ct:
        return 'yaml'
    if data_hint is not None:
        s = data_hint.lstrip()
        if s.startswith('{') or s.startswith('['):
            return 'json'
        return 'yaml'
    return None


def deserialize(data: bytes | bytearray | str,
                *,
                content_type: Optional[str] = None,
                fmt: Optional[str] = None) -> Any:
    """
    Convert JSON or YAML text into Python values.
    If fmt is None, uses content_type, then sniffing. Unparseable input is
    returned as text.
    """
    text = _norm_text(data)
    f = (fmt or detect_format(content_type, text))
    if f == 'json':
        try:
            return json.loads(text)
        except ValueError:
            # Declared JSON may still be YAML-like
            try:
                return yaml.safe_load(text)
            except yaml.YAMLError:
                return text
    if f == 'yaml':
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError:
            return text
    return text


def load_attributes(path: str | Path) -> dict:
    """Read an attribute file; the format comes from the suffix (.json, .yaml, .yml)."""
    p = Path(path)
    data = deserialize(p.read_bytes(), content_type=p.suffix.lstrip('.'))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"attribute file must hold a mapping at the top level: {p}")
    return data


__all__ = [
    "deserialize",
    "detect_format",
    "load_attributes",
]
