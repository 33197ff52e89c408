"""Copies resolved packages into a versioned output tree."""

import shutil
from pathlib import Path
from typing import Optional

from errors import ResourceCopyFailure
from log import get_logger
from rewrite.pipeline import RewriteResult, process_directory, process_file
from .model import DependencyGraph, DependencyShorthand


logger = get_logger("materializer")


def remove_directory(directory: Path) -> None:
    """
    Recursively remove a directory, tolerating one that does not exist.

    Raises:
        ResourceCopyFailure: If the directory exists but cannot be removed.
    """
    directory = Path(directory)
    if not directory.exists():
        return
    logger.info("Removing directory at path: %s", directory)
    try:
        shutil.rmtree(directory)
    except OSError as e:
        raise ResourceCopyFailure(directory, e, action="remove") from e


def copy_module(package_path: Path, destination: Path) -> None:
    """
    Copy a package directory to destination, preserving its structure.

    Raises:
        ResourceCopyFailure: Wrapping any underlying filesystem error.
    """
    try:
        shutil.copytree(package_path, destination, dirs_exist_ok=True)
    except (OSError, shutil.Error) as e:
        raise ResourceCopyFailure(destination, e, source=package_path) from e


def materialize(
    graph: DependencyGraph,
    destination: Path,
    optimise: bool = False,
    log_handled_errors: bool = True,
) -> Optional[RewriteResult]:
    """
    Clear destination and repopulate it with every package in the graph.

    Each package lands in `destination/<name>/<version>/`. The operation is
    not atomic: a failure part way through leaves a partially populated
    destination.

    Args:
        graph: The resolved dependency graph.
        destination: Output directory; removed first if it exists.
        optimise: If True, run each package's entry points through the
            rewrite pipeline instead of copying the package verbatim.
        log_handled_errors: Log handled rewrite errors as warnings.

    Returns:
        The RewriteResult when optimising, otherwise None.

    Raises:
        ResourceCopyFailure: If removing or copying fails.
    """
    destination = Path(destination).resolve()
    remove_directory(destination)

    result = RewriteResult(log_handled_errors=log_handled_errors) if optimise else None

    for node in sorted(graph, key=lambda n: n.name.lower()):
        output = destination / node.name / node.version
        if result is None:
            logger.info("Copying module %s", node.pointer)
            copy_module(node.path, output)
        else:
            logger.info("Optimising module %s", node.pointer)
            _optimise_module(node, output, result)

    return result


def _optimise_module(node: DependencyShorthand, output: Path, result: RewriteResult) -> None:
    if not node.main:
        logger.warning(
            "'%s' has not declared an entry file, skipping optimisation", node.name
        )
        process_directory(node.path, output, Path(""), result)
        return

    for entry in node.main:
        if not (node.path / entry).exists():
            logger.warning(
                "'%s' has an entry file '%s' that does not exist, skipping optimisation",
                node.name,
                entry,
            )
            process_directory(node.path, output, Path(""), result)
            return

    for entry in node.main:
        process_file(node.path, output, Path(entry), result)
