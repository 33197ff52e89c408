"""Dependency graph builder that walks installed package manifests."""

from pathlib import Path
from typing import Optional

from graph.model import DependencyGraph, DependencyShorthand
from log import get_logger
from .manifest import Manifest, read_project_manifest, read_release_manifest


DEFAULT_PACKAGE_ROOT = "bower_components"

logger = get_logger("builder")


def build_graph(
    root_manifest: Manifest,
    package_root: Path,
    graph: Optional[DependencyGraph] = None,
) -> DependencyGraph:
    """
    Recursively resolve a manifest's declared dependencies into a graph.

    Traversal is depth-first and pre-order. Each newly discovered package is
    inserted into the graph before its own dependencies are visited, so a
    dependency that is already present (a diamond or a cycle) only has its
    reference count bumped and is never traversed twice.

    Args:
        root_manifest: The manifest whose dependencies start the traversal.
        package_root: Directory holding one subdirectory per package.
        graph: Optional graph to extend. A new one is created if omitted.

    Returns:
        The populated DependencyGraph.

    Raises:
        ManifestNotFound: If a package directory has no release manifest.
        ManifestError: If a release manifest is malformed.
    """
    if graph is None:
        graph = DependencyGraph()
    package_root = Path(package_root).resolve()

    for dependency_name in root_manifest.dependencies:
        logger.info('Inspecting "%s"', dependency_name)
        _traverse(dependency_name, package_root, graph)

    return graph


def resolve_project_dependencies(
    project_path: Path,
    package_root: str = DEFAULT_PACKAGE_ROOT,
) -> DependencyGraph:
    """
    Read a project's manifest and resolve all of its installed dependencies.

    Args:
        project_path: Directory containing the project's bower.json.
        package_root: Name of the directory packages are installed into.

    Returns:
        The populated DependencyGraph.
    """
    project_path = Path(project_path).resolve()
    manifest = read_project_manifest(project_path)
    logger.info("Traversing dependencies of %s", manifest.name)
    return build_graph(manifest, project_path / package_root)


def _traverse(dependency_name: str, package_root: Path, graph: DependencyGraph) -> None:
    if graph.has_dependency(dependency_name):
        graph.mark_reference(dependency_name)
        return

    package_path = package_root / dependency_name
    manifest = read_release_manifest(package_path)
    node = DependencyShorthand.from_manifest(manifest, package_path)

    # Insert before recursing so cycles terminate
    if not graph.add_dependency(node):
        # Declared name differs from the directory it was found under
        graph.mark_reference(node.name)
        return
    graph.mark_reference(node.name)
    if not graph.has_dependency(dependency_name):
        logger.warning(
            'Package directory "%s" declares the name "%s"', dependency_name, node.name
        )
    logger.info('New dependency found with the name "%s"', node.name)

    for child_name in manifest.dependencies:
        _traverse(child_name, package_root, graph)
