"""
Paginate a chapters JSON file for every font size and report the page counts.
"""

import argparse
import json
from pathlib import Path
from typing import List, Sequence

from tategaki.models import Chapter, make_chapter
from tategaki.pager.reader import (
    CharacterCountOracle,
    PagerSettings,
    VerticalTextOracle,
    paginate_all,
)


def _parse_args() -> argparse.Namespace:
    """Return CLI arguments for the pagination script."""

    parser = argparse.ArgumentParser(
        description="Paginate chapters for every font size and cache the results."
    )
    parser.add_argument("chapters", type=Path, help="JSON file listing the chapters.")
    parser.add_argument(
        "--cache-file",
        type=Path,
        default=Path(".cache/pager-cache.json"),
        help="JSON file the page cache is persisted into.",
    )
    parser.add_argument("--page-width", type=float, default=450.0)
    parser.add_argument("--page-height", type=float, default=600.0)
    parser.add_argument("--padding", type=float, default=30.0)
    parser.add_argument(
        "--font-sizes",
        nargs="+",
        type=int,
        metavar="SIZE",
        help="Font sizes to precompute (default: 12 14 16 18 20 22 24).",
    )
    parser.add_argument(
        "--synthetic",
        action="store_true",
        help="Measure with a fixed advance per character instead of font metrics.",
    )
    parser.add_argument(
        "--dump",
        type=Path,
        default=None,
        help="Optional JSON file receiving the page HTML for every font size.",
    )
    return parser.parse_args()


def _chapter_from_record(record: object) -> Chapter:
    """Return a Chapter from a ``title/body`` or ``chapterTitle/chapterContents`` record.

    Args:
        record: Decoded JSON object.
    Returns:
        Chapter instance.

    Example:
        >>> _chapter_from_record({"chapterTitle": "A", "chapterContents": ["b"]}).title
        'A'
    """

    if not isinstance(record, dict):
        raise AssertionError(f"Chapter records must be objects, got {type(record).__name__}")
    title = record.get("title", record.get("chapterTitle"))
    body = record.get("body", record.get("chapterContents", []))
    if not isinstance(title, str) or not isinstance(body, list):
        raise AssertionError(f"Malformed chapter record: {record!r}")
    return make_chapter(title, [str(paragraph) for paragraph in body])


def _load_chapters(path: Path) -> List[Chapter]:
    """Return chapters listed in a JSON file.

    Args:
        path: JSON file containing a list of chapter records.
    Returns:
        Chapters in file order.
    """

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise AssertionError(f"{path} must contain a list of chapters")
    return [_chapter_from_record(record) for record in data]


def _settings_from_args(args: argparse.Namespace) -> PagerSettings:
    settings = PagerSettings(
        page_width=args.page_width,
        page_height=args.page_height,
        padding=args.padding,
    )
    if args.font_sizes:
        settings.font_sizes = tuple(args.font_sizes)
    return settings


def _summary_lines(counts: Sequence[tuple[int, int]]) -> List[str]:
    """Return printable ``size: pages`` lines.

    Example:
        >>> _summary_lines([(12, 3)])
        ['  12px: 3 pages']
    """

    return [f"  {size}px: {count} pages" for size, count in counts]


def main() -> None:
    """Paginate the chapters file and print a per-size summary.

    Example:
        >>> main()  # doctest: +SKIP
    """

    args = _parse_args()
    chapters = _load_chapters(args.chapters)
    settings = _settings_from_args(args)
    oracle = CharacterCountOracle() if args.synthetic else VerticalTextOracle(settings)
    results = paginate_all(
        chapters=chapters,
        settings=settings,
        oracle=oracle,
        cache_path=args.cache_file,
        progress=True,
    )
    print(f"Paginated {len(chapters)} chapters into {args.cache_file}")
    for line in _summary_lines([(size, result.page_count) for size, result in results.items()]):
        print(line)
    if args.dump:
        args.dump.parent.mkdir(parents=True, exist_ok=True)
        payload = {str(size): result.to_dict() for size, result in results.items()}
        args.dump.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        print(f"Wrote page HTML to {args.dump}")


if __name__ == "__main__":
    main()
