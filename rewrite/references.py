"""Classification of markup references as local files or external packages."""

import re
from pathlib import Path
from typing import Optional, Tuple

from errors import AmbiguousRelativity


NETWORK_PATTERN = re.compile(r"^(?:[a-z][a-z0-9+.\-]*:)?//", re.IGNORECASE)
DEPENDENCY_NAME_PATTERN = re.compile(r"[^./]+")
DEPENDENCY_LOOKUP_PATTERN = re.compile(r"[^./]+/(.*)")


def is_network(reference: Optional[str]) -> bool:
    """Check if a reference points at a network location (http://, //cdn, ...)."""
    return bool(reference) and NETWORK_PATTERN.match(reference) is not None


def resolve_local_reference(
    source_root: Path,
    file_path: Path,
    reference: Optional[str],
) -> Optional[Path]:
    """
    Resolve a reference made by a file inside source_root.

    The reference is resolved against the referencing file's directory. If
    the result stays inside source_root it is a local (relative) reference.

    Args:
        source_root: Absolute root directory of the project being rewritten.
        file_path: Path of the referencing file, relative to source_root.
        reference: The raw href/src attribute value.

    Returns:
        The target path relative to source_root, or None if the reference
        leaves source_root (an external package reference).

    Raises:
        AmbiguousRelativity: If the reference is empty or not a usable path.
    """
    source = source_root / file_path
    if not reference or not reference.strip():
        raise AmbiguousRelativity(source, reference, "empty reference")
    if "\x00" in reference:
        raise AmbiguousRelativity(source, reference, "invalid character")

    try:
        resolved = (source.parent / reference).resolve()
    except (OSError, ValueError, RuntimeError) as e:
        raise AmbiguousRelativity(source, reference, str(e)) from e

    root = source_root.resolve()
    if resolved == root or not resolved.is_relative_to(root):
        return None
    return resolved.relative_to(root)


def parse_external_reference(source: Path, reference: str) -> Tuple[str, str]:
    """
    Split an external package reference into dependency name and lookup path.

    The name is the first path segment that isn't `.` or `..`; the lookup
    path is whatever follows it.

        >>> parse_external_reference(Path("x.html"), "../paper-button/paper-button.html")
        ('paper-button', 'paper-button.html')

    Raises:
        AmbiguousRelativity: If no name or lookup path can be extracted.
    """
    name_match = DEPENDENCY_NAME_PATTERN.search(reference)
    lookup_match = DEPENDENCY_LOOKUP_PATTERN.search(reference)
    if name_match is None or lookup_match is None or not lookup_match.group(1):
        raise AmbiguousRelativity(source, reference, "no package lookup path")
    return name_match.group(0), lookup_match.group(1)
