"""Asset rewrite pipeline for markup entry points."""

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Set

from bs4.element import Tag

from errors import (
    AmbiguousRelativity,
    FileNotFoundDuringRewrite,
    HandledError,
    ResourceCopyFailure,
)
from log import get_logger
from scanner.discovery import iter_entry_files
from .markup import MarkupDocument, inline_body, is_markup, rel_attribute
from .references import is_network, parse_external_reference, resolve_local_reference


logger = get_logger("rewrite")


@dataclass
class RewriteResult:
    """
    State and outcome of one rewrite run.

    Attributes:
        visited: Absolute source paths seen during the run.
        written: Output paths written, in order.
        handled_errors: Non-fatal problems recorded along the way.
        log_handled_errors: If True, handled errors are logged as warnings,
            otherwise at debug level.
    """

    visited: Set[Path] = field(default_factory=set)
    written: List[Path] = field(default_factory=list)
    handled_errors: List[HandledError] = field(default_factory=list)
    log_handled_errors: bool = True

    def mark_visited(self, path: Path) -> bool:
        """
        Record a path as visited.

        Returns:
            False if the path had already been visited.
        """
        if path in self.visited:
            return False
        self.visited.add(path)
        return True

    def record(self, error: HandledError) -> None:
        self.handled_errors.append(error)
        if self.log_handled_errors:
            logger.warning("%s", error)
        else:
            logger.debug("%s", error)


def rewrite(
    entry_globs: Iterable[str],
    project_root: Path,
    output_root: Path,
    log_handled_errors: bool = True,
) -> RewriteResult:
    """
    Rewrite every markup entry point matched by the given glob patterns.

    Args:
        entry_globs: Glob patterns relative to project_root.
        project_root: Root directory of the sources.
        output_root: Directory the rewritten tree is written under.
        log_handled_errors: Log handled errors as warnings.

    Returns:
        The RewriteResult for the run.
    """
    project_root = Path(project_root).resolve()
    output_root = Path(output_root).resolve()
    result = RewriteResult(log_handled_errors=log_handled_errors)

    for relative_path in iter_entry_files(project_root, entry_globs):
        process_file(project_root, output_root, relative_path, result)

    return result


def process_directory(
    source_root: Path,
    output_root: Path,
    relative_dir: Path,
    result: RewriteResult,
) -> None:
    """
    Process every file below a directory, one at a time.

    All descendant work has finished when this returns.
    """
    directory = source_root / relative_dir
    for entry in sorted(directory.iterdir()):
        relative_path = Path(relative_dir) / entry.name
        if entry.is_dir():
            process_directory(source_root, output_root, relative_path, result)
        else:
            process_file(source_root, output_root, relative_path, result)


def process_file(
    source_root: Path,
    output_root: Path,
    relative_path: Path,
    result: RewriteResult,
) -> None:
    """
    Rewrite or copy a single file into the output tree.

    Markup files have their imports followed and rewritten and their inline
    scripts extracted; every other file is copied unchanged. Each source
    path is processed at most once per run.

    Args:
        source_root: Absolute root of the source tree.
        output_root: Absolute root of the output tree.
        relative_path: File path relative to source_root.
        result: The run's shared state.

    Raises:
        ResourceCopyFailure: If a markup source cannot be read or the output
            cannot be written.
    """
    relative_path = Path(relative_path)
    # Output paths mirror the source tree and must stay below output_root
    if relative_path.is_absolute() or ".." in relative_path.parts:
        result.record(AmbiguousRelativity(
            source_root, str(relative_path), "outside of the source root"
        ))
        return

    source = (source_root / relative_path).resolve()

    # Marked before any recursion so converging references see it once
    if not result.mark_visited(source):
        return

    if not source.is_file():
        result.record(FileNotFoundDuringRewrite(source))
        return

    destination = output_root / relative_path
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ResourceCopyFailure(destination.parent, e, action="create") from e

    if is_markup(relative_path.name):
        _process_markup(source_root, output_root, relative_path, result)
    else:
        logger.debug("Copying %s", relative_path)
        _copy(source, destination, result)


def _process_markup(
    source_root: Path,
    output_root: Path,
    relative_path: Path,
    result: RewriteResult,
) -> None:
    source = source_root / relative_path
    logger.debug("Rewriting %s", relative_path)
    try:
        content = source.read_bytes()
    except OSError as e:
        raise ResourceCopyFailure(source, e, action="read") from e
    document = MarkupDocument.parse(content)

    for link in document.iter_import_links():
        _process_link(document, link, source_root, output_root, relative_path, result)

    scripts: List[str] = []
    for script in document.iter_scripts():
        body = _process_script(document, script, source_root, relative_path, result)
        if body is not None:
            scripts.append(body)

    # Extracted scripts run after the rest of the document
    if scripts:
        script_path = _available_script_path(source_root, output_root, relative_path, result)
        document.append(document.script_placeholder(script_path.name))
        _write(output_root / script_path, "".join(scripts), result)

    _write(output_root / relative_path, document.serialize(), result)


def _process_link(
    document: MarkupDocument,
    link: Tag,
    source_root: Path,
    output_root: Path,
    relative_path: Path,
    result: RewriteResult,
) -> None:
    href = link.get("href")
    try:
        target = resolve_local_reference(source_root, relative_path, href)
        if target is not None:
            process_file(source_root, output_root, target, result)
            return
        dependency, lookup = parse_external_reference(source_root / relative_path, href)
    except AmbiguousRelativity as e:
        result.record(e)
        return

    document.replace(link, document.link_placeholder(rel_attribute(link), dependency, lookup))


def _process_script(
    document: MarkupDocument,
    script: Tag,
    source_root: Path,
    relative_path: Path,
    result: RewriteResult,
) -> Optional[str]:
    """Return the script's inline body if it was extracted."""
    body = inline_body(script)
    if body is not None:
        document.remove(script)
        return body

    src = script.get("src")
    if src is None or is_network(src):
        return None

    try:
        target = resolve_local_reference(source_root, relative_path, src)
        if target is not None:
            # Relative script sources are rewritten but not copied
            document.replace(script, document.script_placeholder(src))
            return None
        dependency, lookup = parse_external_reference(source_root / relative_path, src)
    except AmbiguousRelativity as e:
        result.record(e)
        return None

    document.replace(script, document.script_placeholder(lookup, dependency))
    return None


def _available_script_path(
    source_root: Path,
    output_root: Path,
    relative_path: Path,
    result: RewriteResult,
) -> Path:
    """Pick a script name beside the markup file that is free in both trees."""
    stem = relative_path.stem
    candidate = relative_path.with_name(f"{stem}.js")
    index = 0
    while (source_root / candidate).exists() or output_root / candidate in result.written:
        index += 1
        candidate = relative_path.with_name(f"{stem}_{index}.js")
    return candidate


def _write(destination: Path, content: str, result: RewriteResult) -> None:
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ResourceCopyFailure(destination, e, action="write") from e
    result.written.append(destination)


def _copy(source: Path, destination: Path, result: RewriteResult) -> None:
    try:
        shutil.copy2(source, destination)
    except OSError as e:
        raise ResourceCopyFailure(destination, e, source=source) from e
    result.written.append(destination)
