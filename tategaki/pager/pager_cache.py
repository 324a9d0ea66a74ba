"""Content-addressed storage of layout results."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Protocol, Sequence

from tqdm import tqdm

from ..models import Chapter, chapters_fingerprint_source
from .pager_constants import _debug
from .pager_layout import layout
from .pager_measure import MeasurementOracle
from .pager_settings import PagerSettings
from .pager_types import LayoutResult


class StoreError(Exception):
    """Raised when a key/value store cannot persist an entry."""


class StoreFullError(StoreError):
    """Raised when a store has no room left for an entry."""


class KeyValueStore(Protocol):
    """Client-scoped string store."""

    def get(self, key: str) -> str | None:
        """Return the stored value or None."""

    def set(self, key: str, value: str) -> None:
        """Persist a value; may raise StoreError or OSError."""


@dataclass(slots=True)
class MemoryStore:
    """In-memory store with an optional byte quota.

    Args:
        quota: Maximum total UTF-8 size of stored values, or None.

    Example:
        >>> store = MemoryStore(quota=4)
        >>> store.set("a", "xyz")
        >>> store.get("a")
        'xyz'
    """

    quota: int | None = None
    entries: Dict[str, str] = field(default_factory=dict)

    def _size_without(self, key: str) -> int:
        return sum(len(value.encode("utf-8")) for k, value in self.entries.items() if k != key)

    def get(self, key: str) -> str | None:
        return self.entries.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota is not None:
            needed = self._size_without(key) + len(value.encode("utf-8"))
            if needed > self.quota:
                raise StoreFullError(f"quota of {self.quota} bytes exceeded")
        self.entries[key] = value


@dataclass(slots=True)
class JsonFileStore:
    """Store all entries of one client in a single JSON document.

    Args:
        path: JSON file path; created on first write.
    """

    path: Path

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")


def _format_dimension(value: float) -> str:
    """Return a stable text form of a dimension.

    Example:
        >>> _format_dimension(450.0), _format_dimension(12.5)
        ('450', '12.5')
    """

    return f"{float(value):g}"


def make_cache_key(
    *,
    chapters: Sequence[Chapter],
    page_width: float,
    padding: float,
    font_size: float,
    prefix: str = "pagerCache",
) -> str:
    """Return the content-addressed key for a layout.

    Args:
        chapters: Chapters whose title and body text identify the content.
        page_width: Page width.
        padding: Page padding.
        font_size: Font size.
        prefix: Namespace prefix inside the store.
    Returns:
        Deterministic key string.

    Example:
        >>> a = make_cache_key(chapters=[Chapter("A", ("b",))], page_width=450, padding=30, font_size=18)
        >>> a == make_cache_key(chapters=[Chapter("A", ("b",))], page_width=450.0, padding=30, font_size=18)
        True
    """

    digest = hashlib.sha1(chapters_fingerprint_source(chapters).encode("utf-8")).hexdigest()
    return ":".join(
        [
            prefix,
            digest,
            _format_dimension(page_width),
            _format_dimension(padding),
            _format_dimension(font_size),
        ]
    )


@dataclass(slots=True)
class PageCache:
    """Layout cache over a key/value store.

    Entries are only replaced, never patched. Store failures are swallowed so
    that layout still works without persistence.

    Args:
        store: Backing key/value store.
        settings: Settings supplying the key prefix and layout options.
    """

    store: KeyValueStore = field(default_factory=MemoryStore)
    settings: PagerSettings = field(default_factory=PagerSettings)

    def key_for(
        self, *, chapters: Sequence[Chapter], page_width: float, padding: float, font_size: float
    ) -> str:
        return make_cache_key(
            chapters=chapters,
            page_width=page_width,
            padding=padding,
            font_size=font_size,
            prefix=self.settings.cache_prefix,
        )

    def get(
        self, *, chapters: Sequence[Chapter], page_width: float, padding: float, font_size: float
    ) -> LayoutResult | None:
        """Return the cached layout, or None on a miss or unreadable entry."""

        key = self.key_for(
            chapters=chapters, page_width=page_width, padding=padding, font_size=font_size
        )
        try:
            raw = self.store.get(key)
        except (StoreError, OSError):
            return None
        if not raw:
            return None
        try:
            return LayoutResult.from_json(raw)
        except ValueError:
            _debug(msg=f"discarding unreadable cache entry {key}")
            return None

    def put(
        self,
        *,
        chapters: Sequence[Chapter],
        page_width: float,
        padding: float,
        font_size: float,
        result: LayoutResult,
    ) -> None:
        """Store a layout, overwriting any entry with the same key."""

        key = self.key_for(
            chapters=chapters, page_width=page_width, padding=padding, font_size=font_size
        )
        try:
            self.store.set(key, result.to_json())
        except (StoreError, OSError) as exc:
            _debug(msg=f"cache write skipped for {key}: {exc}")

    def build_all(
        self,
        *,
        chapters: Sequence[Chapter],
        page_width: float,
        page_height: float,
        padding: float,
        font_sizes: Iterable[int],
        oracle: MeasurementOracle,
        progress: bool = False,
    ) -> Dict[int, LayoutResult]:
        """Lay out and store every requested font size in one pass.

        Args:
            chapters: Chapters in reading order.
            page_width: Page width.
            page_height: Page height.
            padding: Page padding (part of the key only).
            font_sizes: Font sizes to precompute, in order.
            oracle: Measurement oracle.
            progress: Show a tqdm progress bar.
        Returns:
            Mapping of font size to the computed LayoutResult.
        """

        sizes = list(font_sizes)
        results: Dict[int, LayoutResult] = {}
        bar = tqdm(total=len(sizes), desc="Paginating", unit="size") if progress and sizes else None
        try:
            for font_size in sizes:
                result = layout(
                    chapters=chapters,
                    page_width=page_width,
                    page_height=page_height,
                    font_size=font_size,
                    oracle=oracle,
                    settings=self.settings,
                )
                results[font_size] = result
                if result.is_empty:
                    # not measurable yet; leave the key missing so a later pass retries
                    _debug(msg=f"skipping empty layout for font size {font_size}")
                else:
                    self.put(
                        chapters=chapters,
                        page_width=page_width,
                        padding=padding,
                        font_size=font_size,
                        result=result,
                    )
                if bar is not None:
                    bar.update(1)
        finally:
            if bar is not None:
                bar.close()
        return results
