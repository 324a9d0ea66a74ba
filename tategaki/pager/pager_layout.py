"""Fold the long logical column of chapter text into fixed-width pages."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence

from ..models import Chapter
from .pager_constants import EPSILON, _debug
from .pager_measure import MeasurementOracle
from .pager_settings import PagerSettings
from .pager_types import ContentUnit, LayoutResult, PagePlan, Placement, StyleContext, UnitKind
from .pager_units import flatten_chapters, serialize_unit


@dataclass(slots=True)
class _Cursor:
    """Running position along the logical column.

    Args:
        distance: Consumed width so far.
        page_width: Width of one page.
    """

    distance: float
    page_width: float

    @property
    def page(self) -> int:
        return math.floor(self.distance / self.page_width + EPSILON)

    @property
    def avail(self) -> float:
        """Return the room left on the current page."""

        used = self.distance - self.page * self.page_width
        return self.page_width - max(used, 0.0)

    @property
    def at_page_start(self) -> bool:
        return self.avail >= self.page_width - EPSILON

    def break_page(self) -> None:
        """Consume the remainder of the current page."""

        self.distance += self.avail


def _measure(
    *, oracle: MeasurementOracle, unit: ContentUnit, context: StyleContext
) -> float | None:
    width = oracle.measure(unit, context)
    if width is None:
        _debug(msg=f"unmeasurable unit {unit.key}")
    return width


def _fitting_prefix(
    *,
    oracle: MeasurementOracle,
    unit: ContentUnit,
    context: StyleContext,
    avail: float,
) -> int:
    """Binary search the longest prefix of ``unit.text`` that fits in ``avail``.

    Args:
        oracle: Measurement oracle.
        unit: Line unit to split.
        context: Style context for measuring.
        avail: Remaining width on the page.
    Returns:
        Character count of the longest fitting prefix (0 when none fits).
    """

    lo, hi = 0, len(unit.text)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        width = oracle.measure(unit.with_text(unit.text[:mid]), context)
        if width is not None and width <= avail + EPSILON:
            lo = mid
        else:
            hi = mid - 1
    return lo


def _place_line(
    *,
    plan: PagePlan,
    cursor: _Cursor,
    oracle: MeasurementOracle,
    unit: ContentUnit,
    used: float,
    context: StyleContext,
    carry: float,
) -> None:
    """Place a line, splitting it across a page boundary when it overflows."""

    if used <= cursor.avail + EPSILON:
        plan.placements.append(Placement(unit=unit, page=cursor.page))
        cursor.distance += used
        return
    lo = _fitting_prefix(oracle=oracle, unit=unit, context=context, avail=cursor.avail)
    if lo == 0 and not cursor.at_page_start:
        # nothing fits on the remainder; retry on a fresh page
        cursor.break_page()
        _place_line(
            plan=plan,
            cursor=cursor,
            oracle=oracle,
            unit=unit,
            used=used,
            context=context,
            carry=carry,
        )
        return
    if lo == 0 or lo == len(unit.text):
        # a single glyph wider than a page is placed whole
        plan.placements.append(Placement(unit=unit, page=cursor.page))
        cursor.distance += used
        return
    page = cursor.page
    _debug(msg=f"split {unit.key} at {lo}/{len(unit.text)} on page {page}")
    plan.placements.append(Placement(unit=unit.with_text(unit.text[:lo]), page=page))
    plan.placements.append(Placement(unit=unit.tail(unit.text[lo:]), page=page + 1))
    cursor.break_page()
    cursor.distance += carry


def _place_break_unit(
    *, plan: PagePlan, cursor: _Cursor, unit: ContentUnit, used: float, force: bool
) -> None:
    """Place a title or divider, starting a new page when required."""

    if (force or used > cursor.avail + EPSILON) and not cursor.at_page_start:
        cursor.break_page()
    plan.placements.append(Placement(unit=unit, page=cursor.page))
    cursor.distance += used


def plan_pages(
    *,
    chapters: Sequence[Chapter],
    page_width: float,
    page_height: float,
    font_size: float,
    oracle: MeasurementOracle,
    settings: PagerSettings | None = None,
) -> PagePlan:
    """Assign every content unit to a page.

    Args:
        chapters: Chapters in reading order.
        page_width: Width of one page.
        page_height: Column length of a page.
        font_size: Active font size.
        oracle: Measurement oracle.
        settings: Layout settings; defaults to PagerSettings().
    Returns:
        PagePlan with placements in processing order. The plan is empty when
        there is nothing to lay out or the first unit cannot be measured.
    """

    settings = settings or PagerSettings()
    plan = PagePlan()
    units = flatten_chapters(chapters)
    if not units or page_width <= 0 or font_size <= 0:
        return plan
    context = StyleContext(font_size=font_size, page_width=page_width, page_height=page_height)
    if _measure(oracle=oracle, unit=units[0], context=context) is None:
        return plan
    cursor = _Cursor(distance=0.0, page_width=page_width)
    carry = settings.carry(font_size)
    for index, unit in enumerate(units):
        used = _measure(oracle=oracle, unit=unit, context=context)
        if used is None:
            continue
        if unit.kind is UnitKind.TITLE:
            _place_break_unit(plan=plan, cursor=cursor, unit=unit, used=used, force=index > 0)
            if settings.title_fills_page and not cursor.at_page_start:
                cursor.break_page()
        elif unit.kind is UnitKind.DIVIDER:
            _place_break_unit(plan=plan, cursor=cursor, unit=unit, used=used, force=False)
        else:
            _place_line(
                plan=plan,
                cursor=cursor,
                oracle=oracle,
                unit=unit,
                used=used,
                context=context,
                carry=carry,
            )
    plan.distance = cursor.distance
    _debug(msg=f"planned {len(plan.placements)} units on {plan.page_count} pages at {font_size}")
    return plan


def render_plan(*, plan: PagePlan) -> LayoutResult:
    """Serialize a PagePlan into per-page HTML.

    Args:
        plan: Placements from plan_pages.
    Returns:
        LayoutResult with one HTML string per page.
    """

    if not plan.placements:
        return LayoutResult.empty()
    pages: List[str] = ["" for _ in range(plan.page_count)]
    for item in plan.placements:
        pages[item.page] += serialize_unit(item.unit)
    return LayoutResult(pages=pages, page_count=plan.page_count)


def layout(
    *,
    chapters: Sequence[Chapter],
    page_width: float,
    page_height: float,
    font_size: float,
    oracle: MeasurementOracle,
    settings: PagerSettings | None = None,
) -> LayoutResult:
    """Lay out chapters into pages.

    Example:
        >>> from tategaki.pager.pager_measure import CharacterCountOracle
        >>> result = layout(
        ...     chapters=[Chapter("Ch1", ("line",))],
        ...     page_width=100,
        ...     page_height=100,
        ...     font_size=10,
        ...     oracle=CharacterCountOracle(),
        ... )
        >>> result.page_count
        2
    """

    plan = plan_pages(
        chapters=chapters,
        page_width=page_width,
        page_height=page_height,
        font_size=font_size,
        oracle=oracle,
        settings=settings,
    )
    return render_plan(plan=plan)
