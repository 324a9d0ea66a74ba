"""Data structures for page layout planning and navigation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List

from .pager_constants import NEUTRAL_OFFSET, TAIL_SUFFIX


class UnitKind(str, Enum):
    """Kinds of atomic layout items."""

    TITLE = "title"
    LINE = "mainText"
    LINE_TAIL = "mainTextTail"
    DIVIDER = "divider"


@dataclass(frozen=True, slots=True)
class ContentUnit:
    """A single renderable item in the long logical column.

    Args:
        kind: Unit kind.
        key: Address such as ``0_title``, ``0_2_1`` or ``0_2_sep``.
        text: Plain text for titles and lines; divider text for dividers.
        chapter: Chapter index.
        paragraph: Paragraph index, or None for titles.
        line: Line index within the paragraph, or None.
    """

    kind: UnitKind
    key: str
    text: str
    chapter: int
    paragraph: int | None = None
    line: int | None = None

    @property
    def is_title(self) -> bool:
        return self.kind is UnitKind.TITLE

    def with_text(self, text: str) -> "ContentUnit":
        """Return a copy holding a different text fragment."""

        return replace(self, text=text)

    def tail(self, text: str) -> "ContentUnit":
        """Return the continuation fragment of a split line.

        Example:
            >>> unit = ContentUnit(UnitKind.LINE, "0_0_0", "abcd", 0, 0, 0)
            >>> unit.tail("cd").key
            '0_0_0_tail'
        """

        return replace(self, kind=UnitKind.LINE_TAIL, key=f"{self.key}{TAIL_SUFFIX}", text=text)


@dataclass(frozen=True, slots=True)
class StyleContext:
    """Style information handed to the measurement oracle.

    Args:
        font_size: Active font size.
        page_width: Width of one page.
        page_height: Column length available to vertical text.
    """

    font_size: float
    page_width: float
    page_height: float


@dataclass(frozen=True, slots=True)
class Placement:
    """A content unit assigned to a page."""

    unit: ContentUnit
    page: int


@dataclass(slots=True)
class PagePlan:
    """Ordered placements produced by one layout pass.

    Args:
        placements: Units in processing order with their pages.
        distance: Final consumed width along the logical column.
    """

    placements: List[Placement] = field(default_factory=list)
    distance: float = 0.0

    @property
    def page_count(self) -> int:
        if not self.placements:
            return 0
        return self.placements[-1].page + 1

    def keys_on(self, page: int) -> List[str]:
        """Return the unit keys placed on a page, in order."""

        return [item.unit.key for item in self.placements if item.page == page]


@dataclass(slots=True)
class LayoutResult:
    """Serialized page contents for a full layout pass.

    Example:
        >>> LayoutResult.from_json(LayoutResult(["<p>a</p>"], 1).to_json()).pages
        ['<p>a</p>']
    """

    pages: List[str]
    page_count: int

    @classmethod
    def empty(cls) -> "LayoutResult":
        return cls(pages=[], page_count=0)

    @property
    def is_empty(self) -> bool:
        return self.page_count == 0

    def to_dict(self) -> Dict[str, Any]:
        return {"pageHTMLs": list(self.pages), "pageCount": self.page_count}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str) -> "LayoutResult":
        """Parse a stored entry.

        Raises:
            ValueError: When the payload is not a valid layout entry.
        """

        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("layout entry must be an object")
        pages = data.get("pageHTMLs")
        count = data.get("pageCount")
        if not isinstance(pages, list) or not isinstance(count, int):
            raise ValueError("layout entry is missing pageHTMLs/pageCount")
        if len(pages) != count:
            raise ValueError("layout entry page count does not match its pages")
        return cls(pages=[str(page) for page in pages], page_count=count)


class AnimationPhase(str, Enum):
    """Visual transition phases of the pager."""

    IDLE = "idle"
    SLIDING_FORWARD = "forward"
    SLIDING_BACKWARD = "backward"


@dataclass(slots=True)
class NavigationState:
    """Observable navigation state.

    Args:
        page_index: Zero-based current page.
        page_count: Pages in the active layout.
        font_size: Active font size.
        phase: Animation phase.
        offset: Visual offset of the previous/current/next strip.
        transition_enabled: Whether offset changes animate.
        pending_fingerprint: Sample captured during a font-size change.
    """

    page_index: int
    page_count: int
    font_size: int
    phase: AnimationPhase = AnimationPhase.IDLE
    offset: float = NEUTRAL_OFFSET
    transition_enabled: bool = True
    pending_fingerprint: str | None = None

    @property
    def is_idle(self) -> bool:
        return self.phase is AnimationPhase.IDLE
