"""Conversion of asset names into Python-safe identifiers."""

from __future__ import annotations

import re

_INVALID_CHARS = re.compile(r"[^a-z0-9_]")


def safe_function_name(name: str) -> str:
    """Return a lower-case identifier derived from ``name``.

    Every character outside ``[a-z0-9_]`` becomes an underscore, runs of
    underscores collapse to one, leading underscores are dropped unless they
    are the whole name, and a leading digit gains an underscore prefix.
    """
    if not name:
        raise ValueError("Cannot derive an identifier from an empty name")

    result = _INVALID_CHARS.sub("_", name.lower())

    while "__" in result:
        result = result.replace("__", "_")

    while len(result) > 1 and result[0] == "_":
        result = result[1:]

    if result[0].isdigit():
        result = "_" + result

    return result


__all__ = ["safe_function_name"]
