"""
Deterministic JSON serialization for reports and manifest digests.

Identical data always produces identical bytes regardless of dict
ordering, so digests over JSON are stable across runs.
"""

from __future__ import annotations

from typing import Any

import orjson


def canonical_json_bytes(obj: Any, *, indent: bool = False) -> bytes:
    """
    Serialize JSON-native data to canonical UTF-8 bytes with sorted keys.

    Args:
        obj: Object to serialize.
        indent: If True, pretty-print with 2-space indentation.

    Returns:
        Canonical JSON bytes.

    Examples:
        >>> canonical_json_bytes({"b": 2, "a": 1})
        b'{"a":1,"b":2}'
    """
    options = orjson.OPT_SORT_KEYS
    if indent:
        options |= orjson.OPT_INDENT_2
    return orjson.dumps(obj, option=options)
