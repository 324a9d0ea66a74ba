"""Tests for the content-addressed page cache and its stores."""

import json

import pytest

from tategaki.models import Chapter
from tategaki.pager.pager_cache import (
    JsonFileStore,
    MemoryStore,
    PageCache,
    StoreError,
    StoreFullError,
    make_cache_key,
)
from tategaki.pager.pager_measure import CharacterCountOracle
from tategaki.pager.pager_settings import PagerSettings
from tategaki.pager.pager_types import LayoutResult

CHAPTERS = [Chapter("Ch1", ("line",))]
DIMS = {"chapters": CHAPTERS, "page_width": 100.0, "padding": 0.0}


class FailingStore:
    def get(self, key):
        raise OSError("storage unavailable")

    def set(self, key, value):
        raise StoreError("storage unavailable")


def test_key_is_content_addressed():
    key = make_cache_key(chapters=CHAPTERS, page_width=450, padding=30, font_size=18)
    same = make_cache_key(
        chapters=[Chapter("Ch1", ("line",))], page_width=450.0, padding=30.0, font_size=18
    )
    assert key == same
    assert key.startswith("pagerCache:")
    assert key.endswith(":450:30:18")
    assert key != make_cache_key(chapters=CHAPTERS, page_width=450, padding=30, font_size=20)
    assert key != make_cache_key(
        chapters=[Chapter("Ch1", ("other",))], page_width=450, padding=30, font_size=18
    )


def test_put_then_get_returns_equal_value(cache):
    result = LayoutResult(pages=["<p>a</p>", "<p>b</p>"], page_count=2)
    assert cache.get(font_size=16, **DIMS) is None

    cache.put(font_size=16, result=result, **DIMS)

    assert cache.get(font_size=16, **DIMS) == result


def test_put_overwrites_entry(cache):
    cache.put(font_size=16, result=LayoutResult(["old"], 1), **DIMS)
    cache.put(font_size=16, result=LayoutResult(["new", "x"], 2), **DIMS)
    assert cache.get(font_size=16, **DIMS) == LayoutResult(["new", "x"], 2)


def test_unreadable_entry_is_a_miss(cache, store):
    key = cache.key_for(font_size=16, **DIMS)
    store.set(key, "{not json")
    assert cache.get(font_size=16, **DIMS) is None
    store.set(key, json.dumps({"pageHTMLs": ["a"], "pageCount": 3}))
    assert cache.get(font_size=16, **DIMS) is None


def test_store_failures_are_swallowed(small_settings):
    cache = PageCache(store=FailingStore(), settings=small_settings)
    cache.put(font_size=16, result=LayoutResult(["a"], 1), **DIMS)
    assert cache.get(font_size=16, **DIMS) is None


def test_quota_exceeded_is_swallowed(small_settings):
    store = MemoryStore(quota=10)
    cache = PageCache(store=store, settings=small_settings)
    cache.put(font_size=16, result=LayoutResult(["a" * 50], 1), **DIMS)
    assert store.entries == {}
    with pytest.raises(StoreFullError):
        store.set("k", "x" * 11)


def test_build_all_stores_every_font_size(cache, store, oracle):
    results = cache.build_all(
        chapters=CHAPTERS,
        page_width=100.0,
        page_height=100.0,
        padding=0.0,
        font_sizes=[10, 12],
        oracle=oracle,
    )
    assert sorted(results) == [10, 12]
    assert len(store.entries) == 2
    for size in (10, 12):
        assert cache.get(font_size=size, **DIMS) == results[size]


def test_build_all_skips_unmeasurable_layouts(cache, store):
    oracle = CharacterCountOracle(missing_keys=frozenset({"0_title"}))
    results = cache.build_all(
        chapters=CHAPTERS,
        page_width=100.0,
        page_height=100.0,
        padding=0.0,
        font_sizes=[10],
        oracle=oracle,
    )
    assert results[10].is_empty
    assert store.entries == {}


def test_regeneration_is_idempotent(cache, store, oracle):
    kwargs = {
        "chapters": CHAPTERS,
        "page_width": 100.0,
        "page_height": 100.0,
        "padding": 0.0,
        "font_sizes": [10],
        "oracle": oracle,
    }
    cache.build_all(**kwargs)
    first = dict(store.entries)
    cache.build_all(**kwargs)
    assert store.entries == first


def test_json_file_store_persists_between_instances(tmp_path, oracle):
    path = tmp_path / "client" / "cache.json"
    settings = PagerSettings(page_width=100.0, padding=0.0)
    writer = PageCache(store=JsonFileStore(path=path), settings=settings)
    writer.build_all(
        chapters=CHAPTERS,
        page_width=100.0,
        page_height=100.0,
        padding=0.0,
        font_sizes=[10],
        oracle=oracle,
    )

    reader = PageCache(store=JsonFileStore(path=path), settings=settings)
    result = reader.get(font_size=10, **DIMS)
    assert result is not None
    assert result.page_count == 2


def test_json_file_store_tolerates_corrupt_file(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("garbage", encoding="utf-8")
    store = JsonFileStore(path=path)
    assert store.get("k") is None
    store.set("k", "v")
    assert store.get("k") == "v"
