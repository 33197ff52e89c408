"""Scanner module for manifest reading and dependency discovery."""

from .discovery import iter_entry_files
from .manifest import Manifest, read_manifest, read_project_manifest, read_release_manifest
from .builder import build_graph, resolve_project_dependencies

__all__ = [
    "iter_entry_files",
    "Manifest",
    "read_manifest",
    "read_project_manifest",
    "read_release_manifest",
    "build_graph",
    "resolve_project_dependencies",
]
