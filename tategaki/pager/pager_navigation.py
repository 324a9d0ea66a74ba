"""Page navigation state machine and the font-size relocation protocol."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Protocol, Sequence

from ..models import Chapter
from .pager_cache import PageCache
from .pager_constants import NEUTRAL_OFFSET, _debug
from .pager_locate import fingerprint, locate
from .pager_measure import MeasurementOracle
from .pager_params import (
    clamp_page_index,
    font_size_from_param,
    page_index_from_param,
    page_param,
)
from .pager_settings import PagerSettings
from .pager_types import AnimationPhase, LayoutResult, NavigationState


class Scheduler(Protocol):
    """Anything that runs a callback on a later turn (an asyncio loop works)."""

    def call_soon(self, callback: Callable[[], object]) -> object:
        """Queue ``callback`` for the next scheduling turn."""


@dataclass(slots=True)
class TickQueue:
    """Synchronous scheduler whose turns are driven by ``run_pending``.

    Example:
        >>> queue = TickQueue()
        >>> queue.call_soon(lambda: None)
        >>> queue.run_pending()
        1
    """

    pending: List[Callable[[], object]] = field(default_factory=list)

    def call_soon(self, callback: Callable[[], object]) -> None:
        self.pending.append(callback)

    def run_pending(self) -> int:
        """Run callbacks queued before this turn and return how many ran."""

        batch, self.pending = self.pending, []
        for callback in batch:
            callback()
        return len(batch)


class NavigationController:
    """Track the current page and drive page transitions.

    The controller shows a strip of previous/current/next pages. A navigation
    request slides the strip by one page width; once the presentation layer
    reports the transition finished, the page index is committed and the strip
    is recentred on the following scheduler turn.

    Args:
        chapters: Chapters to paginate.
        cache: Page cache shared with other sessions.
        oracle: Measurement oracle of the reading surface.
        settings: Pager settings; defaults to the cache settings.
        scheduler: Scheduler for deferred offset resets.
        font_size: Initial font size; missing values and sizes outside
            ``settings.font_sizes`` select ``settings.font_size``.
        page_index: Initial zero-based page, applied to the first layout loaded.
    """

    def __init__(
        self,
        *,
        chapters: Sequence[Chapter],
        cache: PageCache,
        oracle: MeasurementOracle,
        settings: PagerSettings | None = None,
        scheduler: Scheduler | None = None,
        font_size: int | None = None,
        page_index: int = 0,
    ) -> None:
        self.chapters = list(chapters)
        self.cache = cache
        self.oracle = oracle
        self.settings = settings or cache.settings
        self.scheduler = scheduler if scheduler is not None else TickQueue()
        self.pages: List[str] = []
        self.state = NavigationState(
            page_index=0,
            page_count=0,
            font_size=font_size_from_param(
                font_size, self.settings.font_sizes, self.settings.font_size
            ),
        )
        self._restore_index: int | None = page_index
        self._generation = 0
        self._reset_pending = False

    def _load(self, font_size: int) -> LayoutResult | None:
        """Return the cached layout for a font size, building the batch on a miss."""

        dims = {
            "chapters": self.chapters,
            "page_width": self.settings.page_width,
            "padding": self.settings.padding,
        }
        result = self.cache.get(font_size=font_size, **dims)
        if result is None:
            sizes = list(self.settings.font_sizes)
            if font_size not in sizes:
                sizes.append(font_size)
            _debug(msg=f"cache miss at font size {font_size}; building {sizes}")
            built = self.cache.build_all(
                page_height=self.settings.page_height,
                font_sizes=sizes,
                oracle=self.oracle,
                **dims,
            )
            result = self.cache.get(font_size=font_size, **dims) or built.get(font_size)
        if result is None or result.is_empty:
            return None
        return result

    def _replace_layout(self, result: LayoutResult) -> None:
        self.pages = list(result.pages)
        self.state.page_count = result.page_count
        if self._restore_index is not None:
            self.state.page_index = self._restore_index
            self._restore_index = None
        self.state.page_index = clamp_page_index(self.state.page_index, result.page_count)

    def _relocate(self) -> None:
        sample = self.state.pending_fingerprint
        self.state.pending_fingerprint = None
        target = locate(sample or "", self.pages)
        if target is None:
            _debug(msg="fingerprint not found after relayout; keeping page index")
            return
        self.state.page_index = clamp_page_index(target, self.state.page_count)

    def mount(self) -> bool:
        """Load the layout for the active font size once the surface exists.

        Returns:
            False while the surface cannot be measured; call again later.
        """

        result = self._load(self.state.font_size)
        if result is None:
            return False
        self._replace_layout(result)
        if self.state.pending_fingerprint is not None:
            self._relocate()
        return True

    def change_font_size(self, font_size: int) -> int:
        """Switch font size and move to the page holding the current text.

        Args:
            font_size: New font size; sizes outside ``settings.font_sizes``
                keep the active size.
        Returns:
            The resulting zero-based page index.
        """

        font_size = font_size_from_param(
            font_size, self.settings.font_sizes, self.state.font_size
        )
        if font_size == self.state.font_size and self.pages:
            return self.state.page_index
        if self.pages:
            self.state.pending_fingerprint = fingerprint(
                self.current_page, self.settings.fingerprint_length
            )
        self._abandon_animation()
        self.state.font_size = font_size
        result = self._load(font_size)
        if result is None:
            # relocation resumes on the next successful mount
            self.pages = []
            self.state.page_count = 0
            return self.state.page_index
        self._replace_layout(result)
        self._relocate()
        return self.state.page_index

    @property
    def page_index(self) -> int:
        return self.state.page_index

    @property
    def page_count(self) -> int:
        return self.state.page_count

    def _page_at(self, index: int) -> str:
        if 0 <= index < len(self.pages):
            return self.pages[index]
        return ""

    @property
    def current_page(self) -> str:
        return self._page_at(self.state.page_index)

    @property
    def previous_page(self) -> str:
        return self._page_at(self.state.page_index - 1)

    @property
    def next_page(self) -> str:
        return self._page_at(self.state.page_index + 1)

    @property
    def page_label(self) -> str:
        """Return a ``current / total`` label for the page counter."""

        return f"{page_param(self.state.page_index)} / {self.state.page_count}"

    @property
    def page_param(self) -> int:
        return page_param(self.state.page_index)

    def set_page_from_param(self, value: object) -> int:
        """Jump to a one-based page parameter, clamped to the layout."""

        if not self.state.is_idle:
            return self.state.page_index
        self.state.page_index = page_index_from_param(value, self.state.page_count)
        return self.state.page_index

    def _accepts_requests(self) -> bool:
        return self.state.is_idle and not self._reset_pending

    def _start(self, phase: AnimationPhase, offset: float) -> None:
        self._generation += 1
        self.state.phase = phase
        self.state.transition_enabled = True
        self.state.offset = offset

    def request_forward(self) -> bool:
        """Start sliding to the next page.

        Returns:
            False when the request is dropped (animating, waiting for the
            offset reset, or at the last page).
        """

        if not self._accepts_requests() or self.state.page_index >= self.state.page_count - 1:
            return False
        self._start(AnimationPhase.SLIDING_FORWARD, self.settings.page_width)
        return True

    def request_backward(self) -> bool:
        """Start sliding to the previous page.

        Returns:
            False when the request is dropped (animating, waiting for the
            offset reset, or at the first page).
        """

        if not self._accepts_requests() or self.state.page_index <= 0:
            return False
        self._start(AnimationPhase.SLIDING_BACKWARD, -self.settings.page_width)
        return True

    def click(self, x: float, width: float) -> bool:
        """Handle a click on the page; vertical text reads right to left.

        Args:
            x: Click position from the left edge.
            width: Width of the clickable area.
        Returns:
            Whether a transition started.
        """

        if x > width / 2:
            return self.request_backward()
        return self.request_forward()

    def transition_finished(self) -> bool:
        """Commit the in-flight page change and schedule the offset reset.

        Returns:
            False when no transition was in flight.
        """

        if self.state.is_idle:
            return False
        step = 1 if self.state.phase is AnimationPhase.SLIDING_FORWARD else -1
        self.state.page_index = clamp_page_index(
            self.state.page_index + step, self.state.page_count
        )
        self.state.phase = AnimationPhase.IDLE
        self.state.transition_enabled = False
        self._reset_pending = True
        generation = self._generation

        def reset() -> None:
            if generation != self._generation:
                return
            self._reset_pending = False
            self.state.offset = NEUTRAL_OFFSET
            self.state.transition_enabled = True

        self.scheduler.call_soon(reset)
        return True

    def _abandon_animation(self) -> None:
        self._generation += 1
        self._reset_pending = False
        self.state.phase = AnimationPhase.IDLE
        self.state.offset = NEUTRAL_OFFSET
        self.state.transition_enabled = True
