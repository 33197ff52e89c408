"""Entry file discovery for the rewrite pipeline."""

from pathlib import Path
from typing import Iterable, Iterator, Optional, Set

from log import get_logger


logger = get_logger("discovery")

DEFAULT_ENTRY_PATTERNS = ("index.html",)


def iter_entry_files(root: Path, patterns: Iterable[str]) -> Iterator[Path]:
    """
    Expand glob patterns into entry files below a root directory.

    Patterns are relative to root and support `**`. Matches are yielded in
    sorted order per pattern; a file matched by several patterns is only
    yielded once. Matches that resolve outside root are skipped.

    Args:
        root: Directory the patterns are relative to.
        patterns: Glob patterns such as "index.html" or "src/**/*.html".

    Yields:
        Paths of matching files, relative to root.
    """
    root = root.resolve()
    seen: Set[Path] = set()

    for pattern in patterns:
        pattern = pattern.replace("\\", "/").lstrip("/")
        if pattern.startswith("./"):
            pattern = pattern[2:]
        if not pattern:
            continue

        for match in sorted(root.glob(pattern)):
            if not match.is_file():
                continue
            relative = get_relative_path(match, root)
            if relative is None:
                logger.warning("Skipping %s: outside of %s", match, root)
                continue
            if relative in seen:
                continue
            seen.add(relative)
            yield relative


def get_relative_path(file_path: Path, root: Path) -> Optional[Path]:
    """Get the path relative to root, or None if it lies outside root."""
    try:
        return file_path.resolve().relative_to(root.resolve())
    except ValueError:
        return None
