"""Hex color parsing."""

from __future__ import annotations


def hex_to_rgba(value: str) -> tuple[int, int, int, int]:
    """Parse ``#RRGGBBAA`` (or ``#RRGGBB``, opaque) into an RGBA tuple."""
    digits = value.strip().lstrip("#")
    if len(digits) == 6:
        digits += "ff"
    if len(digits) != 8:
        raise ValueError(f"Invalid color: {value!r}")
    try:
        return tuple(int(digits[i : i + 2], 16) for i in (0, 2, 4, 6))  # type: ignore[return-value]
    except ValueError:
        raise ValueError(f"Invalid color: {value!r}") from None
