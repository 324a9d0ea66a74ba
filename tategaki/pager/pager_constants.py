"""Shared constants for page layout and navigation."""

from __future__ import annotations

import os

DIVIDER_TEXT = "＊＊＊"
CONVERSATION_OPENERS = ("「", "『", "（", "(", "“", '"')
TAIL_SUFFIX = "_tail"
NEUTRAL_OFFSET = 0.0
EPSILON = 1e-6
DEBUG_PAGINATION = os.getenv("DEBUG_PAGINATION", "0") not in {
    "",
    "0",
    "false",
    "False",
}


def _debug(*, msg: str) -> None:
    """Print pagination debug output when enabled.

    Args:
        msg: Message to print.
    Returns:
        None.
    """

    if DEBUG_PAGINATION:
        print(msg)
