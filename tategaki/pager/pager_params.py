"""Validation of the externally visible page and font-size parameters."""

from __future__ import annotations

from typing import Sequence


def _parse_int(value: object) -> int | None:
    """Return ``value`` as an int, or None when it is not numeric.

    Lists take their first element, matching repeated query parameters.

    Example:
        >>> _parse_int("12px"), _parse_int(["3", "4"]), _parse_int("x")
        (12, 3, None)
    """

    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    digits = ""
    for index, char in enumerate(text):
        if char.isdigit() or (index == 0 and char in "+-"):
            digits += char
        else:
            break
    try:
        return int(digits)
    except ValueError:
        return None


def clamp_page_index(page_index: int, page_count: int) -> int:
    """Clamp a zero-based index into ``[0, page_count - 1]``.

    An empty layout clamps to 0.

    Example:
        >>> clamp_page_index(7, 3), clamp_page_index(-2, 3), clamp_page_index(5, 0)
        (2, 0, 0)
    """

    return max(0, min(page_index, page_count - 1))


def page_index_from_param(value: object, page_count: int) -> int:
    """Convert a one-based page parameter to a clamped zero-based index.

    Missing or non-numeric values select the first page.

    Example:
        >>> page_index_from_param("3", 10), page_index_from_param(None, 10)
        (2, 0)
        >>> page_index_from_param("99", 10)
        9
    """

    parsed = _parse_int(value)
    index = 0 if parsed is None else parsed - 1
    return clamp_page_index(index, page_count)


def page_param(page_index: int) -> int:
    """Return the one-based page parameter for a zero-based index."""

    return page_index + 1


def font_size_from_param(value: object, allowed: Sequence[int], default: int) -> int:
    """Return the requested font size when it is one of ``allowed``.

    Example:
        >>> font_size_from_param("20", (16, 20), 16), font_size_from_param("19", (16, 20), 16)
        (20, 16)
    """

    parsed = _parse_int(value)
    if parsed is None or parsed not in allowed:
        return default
    return parsed
