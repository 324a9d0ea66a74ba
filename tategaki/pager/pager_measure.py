"""Measurement oracles that report the rendered width of content units."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import FrozenSet, Protocol

from reportlab.pdfbase import pdfmetrics

from .pager_constants import EPSILON
from .pager_settings import PagerSettings, register_cid_font
from .pager_types import ContentUnit, StyleContext, UnitKind


class MeasurementOracle(Protocol):
    """Capability that measures a unit the way the reading surface renders it."""

    def measure(self, unit: ContentUnit, context: StyleContext) -> float | None:
        """Return the horizontal width consumed by ``unit``.

        Returns None when the unit cannot be resolved yet, e.g. before the
        surface is mounted.
        """


@dataclass(slots=True)
class VerticalTextOracle:
    """Measure vertical-rl text with ReportLab font metrics.

    Glyph advances run down a column of ``page_height``; a line longer than
    one column wraps into further columns, each ``font_size * line_height``
    wide.

    Args:
        settings: Pager settings providing font name and line height.
        mounted: False until the reading surface can be measured.

    Example:
        >>> oracle = VerticalTextOracle(PagerSettings())
        >>> unit = ContentUnit(UnitKind.LINE, "0_0_0", "あ" * 10, 0, 0, 0)
        >>> oracle.measure(unit, StyleContext(20, 450, 600))
        30.0
    """

    settings: PagerSettings
    mounted: bool = True

    def measure(self, unit: ContentUnit, context: StyleContext) -> float | None:
        if not self.mounted:
            return None
        font_size = context.font_size
        if unit.kind is UnitKind.TITLE:
            font_size *= self.settings.title_scale
        column = self.settings.column_width(font_size)
        if unit.kind is UnitKind.DIVIDER:
            # horizontal padding of one em on both sides
            return column + 2 * context.font_size
        if not unit.text:
            return column
        font_name = register_cid_font(self.settings.font_name)
        advance = pdfmetrics.stringWidth(unit.text, font_name, font_size)
        columns = max(1, math.ceil(advance / context.page_height - EPSILON))
        return columns * column


@dataclass(slots=True)
class CharacterCountOracle:
    """Synthetic oracle: every character advances by a fixed amount.

    Blank lines count as one character. Keys listed in ``missing_keys`` are
    reported as unmeasurable.

    Args:
        advance: Width per character at font size 1.
        missing_keys: Unit keys the oracle cannot resolve.

    Example:
        >>> unit = ContentUnit(UnitKind.LINE, "0_0_0", "line", 0, 0, 0)
        >>> CharacterCountOracle().measure(unit, StyleContext(10, 100, 100))
        40.0
    """

    advance: float = 1.0
    missing_keys: FrozenSet[str] = field(default_factory=frozenset)

    def measure(self, unit: ContentUnit, context: StyleContext) -> float | None:
        if unit.key in self.missing_keys:
            return None
        return float(max(len(unit.text), 1) * self.advance * context.font_size)
