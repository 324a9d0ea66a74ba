"""Viewport geometry and typography settings for pagination."""

from __future__ import annotations

from dataclasses import dataclass

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont

FONT_SIZES = (12, 14, 16, 18, 20, 22, 24)
DEFAULT_FONT_NAME = "HeiseiMin-W3"


@dataclass(slots=True)
class PagerSettings:
    """Geometry constants used during layout and navigation.

    Example:
        >>> settings = PagerSettings()
        >>> settings.page_width, settings.font_size
        (450.0, 18)
    """

    page_width: float = 450.0
    page_height: float = 600.0
    padding: float = 30.0
    font_size: int = 18
    font_sizes: tuple[int, ...] = FONT_SIZES
    line_height: float = 1.5
    carry_ratio: float = 1.5
    title_scale: float = 1.1
    title_fills_page: bool = True
    fingerprint_length: int = 50
    font_name: str = DEFAULT_FONT_NAME
    cache_prefix: str = "pagerCache"

    def carry(self, font_size: float) -> float:
        """Return the width carried onto a new page after a line split.

        Args:
            font_size: Active font size.
        Returns:
            Carry width in the same unit as ``page_width``.

        Example:
            >>> PagerSettings().carry(20)
            30.0
        """

        return self.carry_ratio * font_size

    def column_width(self, font_size: float) -> float:
        """Return the horizontal extent of one vertical text column."""

        return font_size * self.line_height


def register_cid_font(font_name: str = DEFAULT_FONT_NAME) -> str:
    """Register a built-in ReportLab CID font and return its name.

    Args:
        font_name: CID face name shipped with ReportLab.
    Returns:
        The registered font name.

    Example:
        >>> register_cid_font()
        'HeiseiMin-W3'
    """

    if font_name not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(UnicodeCIDFont(font_name))
    return font_name
