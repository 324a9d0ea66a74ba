"""
Typed containers for the chapter text handed to the pager.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Iterable, List, Sequence


@dataclass(frozen=True, slots=True)
class Chapter:
    """A chapter title followed by its body paragraphs.

    Attributes:
        title: Chapter heading text.
        body: Paragraph strings in reading order. Each paragraph may hold
            several lines separated by ``\\n``.
    """

    title: str
    body: tuple[str, ...] = ()


def make_chapter(title: str, body: Iterable[str]) -> Chapter:
    """Build a Chapter from any iterable of paragraphs.

    Example:
        >>> make_chapter("Ch1", ["line"]).body
        ('line',)
    """

    return Chapter(title=title, body=tuple(body))


def chapters_fingerprint_source(chapters: Sequence[Chapter]) -> str:
    """Return the canonical JSON text that identifies a chapter list.

    Only titles and body text take part, so two lists with identical text
    produce identical output.

    Example:
        >>> chapters_fingerprint_source([Chapter("A", ("b",))])
        '[{"title":"A","contents":["b"]}]'
    """

    payload: List[dict] = [
        {"title": chapter.title, "contents": list(chapter.body)} for chapter in chapters
    ]
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
