"""Flatten chapters into content units and serialize them as HTML."""

from __future__ import annotations

from typing import List, Sequence

from bs4 import BeautifulSoup

from ..models import Chapter
from .pager_constants import CONVERSATION_OPENERS, DIVIDER_TEXT
from .pager_types import ContentUnit, UnitKind


def flatten_chapters(chapters: Sequence[Chapter]) -> List[ContentUnit]:
    """Expand chapters into units in chapter, paragraph, line order.

    A divider follows every paragraph except the last one of its chapter.

    Args:
        chapters: Chapters in reading order.
    Returns:
        Flat list of ContentUnit objects.

    Example:
        >>> [u.key for u in flatten_chapters([Chapter("T", ("a\\nb", "c"))])]
        ['0_title', '0_0_0', '0_0_1', '0_0_sep', '0_1_0']
    """

    units: List[ContentUnit] = []
    for chap_idx, chapter in enumerate(chapters):
        units.append(
            ContentUnit(
                kind=UnitKind.TITLE,
                key=f"{chap_idx}_title",
                text=chapter.title,
                chapter=chap_idx,
            )
        )
        last_para = len(chapter.body) - 1
        for para_idx, paragraph in enumerate(chapter.body):
            for line_idx, line in enumerate(paragraph.split("\n")):
                units.append(
                    ContentUnit(
                        kind=UnitKind.LINE,
                        key=f"{chap_idx}_{para_idx}_{line_idx}",
                        text=line,
                        chapter=chap_idx,
                        paragraph=para_idx,
                        line=line_idx,
                    )
                )
            if para_idx < last_para:
                units.append(
                    ContentUnit(
                        kind=UnitKind.DIVIDER,
                        key=f"{chap_idx}_{para_idx}_sep",
                        text=DIVIDER_TEXT,
                        chapter=chap_idx,
                        paragraph=para_idx,
                    )
                )
    return units


def line_style(text: str) -> str | None:
    """Return the paragraph class for a line, or None for blank lines.

    Example:
        >>> line_style("「はい」"), line_style("　地の文"), line_style("")
        ('conversation', 'descriptive', None)
    """

    stripped = text.strip()
    if not text:
        return None
    if stripped.startswith(CONVERSATION_OPENERS):
        return "conversation"
    return "descriptive"


def serialize_unit(unit: ContentUnit) -> str:
    """Return the HTML fragment for a unit.

    Args:
        unit: Unit or split fragment to serialize.
    Returns:
        HTML string wrapped in a ``div`` carrying the unit key.

    Example:
        >>> serialize_unit(ContentUnit(UnitKind.TITLE, "1_title", "Ch2", 1))
        '<div data-key="1_title"><h4>Ch2</h4></div>'
    """

    soup = BeautifulSoup("", "html.parser")
    wrapper = soup.new_tag("div", attrs={"data-key": unit.key})
    if unit.kind is UnitKind.TITLE:
        heading = soup.new_tag("h4")
        heading.string = unit.text
        wrapper.append(heading)
    elif unit.kind is UnitKind.DIVIDER:
        para = soup.new_tag("p", attrs={"class": "divider"})
        para.string = DIVIDER_TEXT
        wrapper.append(para)
    else:
        css_class = (
            "conversation" if unit.kind is UnitKind.LINE_TAIL else line_style(unit.text)
        )
        if css_class is None:
            wrapper.append(soup.new_tag("br"))
        else:
            para = soup.new_tag("p", attrs={"class": css_class})
            para.string = unit.text
            wrapper.append(para)
    soup.append(wrapper)
    return soup.decode()


def page_fragments(html: str) -> List[tuple[str, str]]:
    """Return ``(key, text)`` pairs for the units serialized on a page.

    Example:
        >>> page_fragments('<div data-key="0_0_0"><p class="descriptive">a</p></div>')
        [('0_0_0', 'a')]
    """

    soup = BeautifulSoup(html, "html.parser")
    return [
        (str(node.get("data-key", "")), node.get_text())
        for node in soup.find_all("div", attrs={"data-key": True})
    ]
