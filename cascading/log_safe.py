"""
Log-safe truncation for large payloads (e.g. allowed-value lists, configurations).
Converts to string, trims if too long; on failure returns a placeholder.
"""

import json
from typing import Any

PLACEHOLDER = "<unloggable>"


def _trim(s: str, max_string_len: int, items_around: int) -> str:
    if len(s) <= max_string_len:
        return s
    parts = s.split(", ")
    first = ", ".join(parts[:items_around]) if parts else ""
    last = ", ".join(parts[-items_around:]) if parts else ""
    result = f"{first}...<len={len(s)}>...{last}"
    # Values without separators return the full string; fall back to char trim
    if len(result) > max_string_len:
        suffix = f"...<len={len(s)}>..."
        half = max(0, (max_string_len - len(suffix)) // 2)
        result = f"{s[:half]}{suffix}{s[-half:]}"
    return result


def log_safe_output(
    data: Any,
    max_string_len: int = 300,
    items_around: int = 10,
) -> str:
    """
    Produce a log-safe string: trim long strings, or try to stringify then trim.
    On conversion failure returns a fixed placeholder. Does not mutate the original.
    """
    if isinstance(data, str):
        return _trim(data, max_string_len, items_around)

    try:
        if isinstance(data, (dict, list, tuple)):
            s = json.dumps(data, default=str)
        else:
            s = str(data)
        return _trim(s, max_string_len, items_around)
    except (TypeError, ValueError):
        return PLACEHOLDER
