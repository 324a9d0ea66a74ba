"""Public entry points for paginating chapters and navigating the result."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Sequence

from ..models import Chapter
from .pager_cache import JsonFileStore, KeyValueStore, MemoryStore, PageCache
from .pager_layout import layout, plan_pages, render_plan
from .pager_locate import fingerprint, locate
from .pager_measure import CharacterCountOracle, MeasurementOracle, VerticalTextOracle
from .pager_navigation import NavigationController, Scheduler, TickQueue
from .pager_settings import PagerSettings
from .pager_types import LayoutResult

__all__ = [
    "CharacterCountOracle",
    "JsonFileStore",
    "LayoutResult",
    "MemoryStore",
    "NavigationController",
    "PageCache",
    "PagerSettings",
    "TickQueue",
    "VerticalTextOracle",
    "fingerprint",
    "layout",
    "locate",
    "open_reader",
    "paginate_all",
    "plan_pages",
    "render_plan",
]


def _store_for(cache_path: Path | None) -> KeyValueStore:
    """Return a file-backed store when a path is given, else an in-memory one."""

    if cache_path is None:
        return MemoryStore()
    return JsonFileStore(path=cache_path)


def paginate_all(
    *,
    chapters: Sequence[Chapter],
    settings: PagerSettings | None = None,
    oracle: MeasurementOracle | None = None,
    cache_path: Path | None = None,
    progress: bool = False,
) -> Dict[int, LayoutResult]:
    """Precompute layouts for every configured font size.

    Args:
        chapters: Chapters in reading order.
        settings: Pager settings.
        oracle: Measurement oracle; defaults to VerticalTextOracle.
        cache_path: Optional JSON file to persist the cache into.
        progress: Show a progress bar.
    Returns:
        Mapping of font size to LayoutResult.
    """

    settings = settings or PagerSettings()
    cache = PageCache(store=_store_for(cache_path), settings=settings)
    return cache.build_all(
        chapters=chapters,
        page_width=settings.page_width,
        page_height=settings.page_height,
        padding=settings.padding,
        font_sizes=settings.font_sizes,
        oracle=oracle or VerticalTextOracle(settings),
        progress=progress,
    )


def open_reader(
    *,
    chapters: Sequence[Chapter],
    settings: PagerSettings | None = None,
    oracle: MeasurementOracle | None = None,
    cache_path: Path | None = None,
    scheduler: Scheduler | None = None,
    page: object = None,
    font_size: int | None = None,
) -> NavigationController:
    """Create and mount a NavigationController.

    Args:
        chapters: Chapters in reading order.
        settings: Pager settings.
        oracle: Measurement oracle; defaults to VerticalTextOracle.
        cache_path: Optional JSON file backing the page cache.
        scheduler: Scheduler for deferred offset resets.
        page: One-based page parameter, validated after layout.
        font_size: Initial font size, validated against ``settings.font_sizes``.
    Returns:
        A mounted controller (not yet measurable when the oracle is not ready).
    """

    settings = settings or PagerSettings()
    controller = NavigationController(
        chapters=chapters,
        cache=PageCache(store=_store_for(cache_path), settings=settings),
        oracle=oracle or VerticalTextOracle(settings),
        settings=settings,
        scheduler=scheduler,
        font_size=font_size,
    )
    if controller.mount():
        controller.set_page_from_param(page)
    return controller
