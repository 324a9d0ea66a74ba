"""Relocate a reading position across a relayout."""

from __future__ import annotations

from typing import Sequence

DEFAULT_SAMPLE_LENGTH = 50


def fingerprint(page_html: str, length: int = DEFAULT_SAMPLE_LENGTH) -> str:
    """Return the leading sample of a page used to find it again.

    Example:
        >>> fingerprint("abcdef", length=3)
        'abc'
    """

    return page_html[:length]


def locate(sample: str, pages: Sequence[str]) -> int | None:
    """Return the first page containing ``sample``, or None.

    An empty sample never matches.

    Example:
        >>> locate("cd", ["ab", "xcdx", "cd"])
        1
        >>> locate("zz", ["ab"]) is None
        True
    """

    if not sample:
        return None
    for index, page in enumerate(pages):
        if sample in page:
            return index
    return None
