"""Shared fixtures for pager tests."""

from __future__ import annotations

from typing import List

import pytest

from tategaki.models import Chapter
from tategaki.pager.pager_cache import MemoryStore, PageCache
from tategaki.pager.pager_measure import CharacterCountOracle
from tategaki.pager.pager_settings import PagerSettings
from tategaki.pager.pager_types import ContentUnit, StyleContext


class CountingOracle:
    """Character-count oracle that records every measured text."""

    def __init__(self, advance: float = 1.0) -> None:
        self.inner = CharacterCountOracle(advance=advance)
        self.calls: List[str] = []

    def measure(self, unit: ContentUnit, context: StyleContext) -> float | None:
        self.calls.append(unit.text)
        return self.inner.measure(unit, context)


@pytest.fixture
def oracle() -> CharacterCountOracle:
    return CharacterCountOracle()


@pytest.fixture
def counting_oracle() -> CountingOracle:
    return CountingOracle()


@pytest.fixture
def small_settings() -> PagerSettings:
    """Settings for 100-wide pages precomputing only font size 16."""

    return PagerSettings(
        page_width=100.0,
        page_height=100.0,
        padding=0.0,
        font_size=16,
        font_sizes=(16,),
    )


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def cache(store: MemoryStore, small_settings: PagerSettings) -> PageCache:
    return PageCache(store=store, settings=small_settings)


@pytest.fixture
def four_chapters() -> List[Chapter]:
    """Four chapters whose body fits one page at 16 but splits at 20."""

    return [Chapter("C", ("ab\nab\nab",)) for _ in range(4)]


@pytest.fixture
def novel() -> List[Chapter]:
    """A multi-chapter text with blank lines, dialogue and long lines."""

    return [
        Chapter(
            "第一章",
            (
                "　吾輩は猫である。名前はまだ無い。\n「どこで生れたか」\n",
                "　とんと見当がつかぬ。何でも薄暗いじめじめした所でニャーニャー泣いていた事だけは記憶している。",
                "（ここで始めて人間というものを見た）",
            ),
        ),
        Chapter("第二章", ("　短い。",)),
        Chapter(
            "第三章",
            (
                "　" + "長" * 75,
                "「会話」\n\n　地の文が続く。",
            ),
        ),
    ]
