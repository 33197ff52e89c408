"""Manifest reading and validation for Bower-style packages."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from errors import ManifestError, ManifestNotFound
from .parser import ParseError, parse_file


PROJECT_MANIFEST = "bower.json"
RELEASE_MANIFEST = ".bower.json"


@dataclass(frozen=True)
class Manifest:
    """
    A package's declared identity.

    Attributes:
        name: Package name as declared.
        main: Entry-point paths, relative to the package directory.
        dependencies: Mapping of dependency name to version specifier.
        release: Resolved release tag (only present on release manifests).
        path: The manifest file this was read from.
    """

    name: str
    main: Tuple[str, ...] = ()
    dependencies: Mapping[str, str] = field(default_factory=dict)
    release: Optional[str] = None
    path: Optional[Path] = None


def read_manifest(path: Path, require_release: bool = False) -> Manifest:
    """
    Load and validate the manifest at the given path.

    Args:
        path: Path to a JSON manifest file.
        require_release: If True, the manifest must carry a `_release` tag.

    Returns:
        The validated Manifest.

    Raises:
        ManifestNotFound: If no file exists at path.
        ManifestError: If the file is malformed or fails validation.
    """
    path = Path(path)
    if not path.is_file():
        raise ManifestNotFound(path)

    try:
        data = parse_file(path)
    except ParseError as e:
        raise ManifestError(path, str(e)) from e

    return manifest_from_dict(data, path, require_release=require_release)


def read_project_manifest(project_path: Path) -> Manifest:
    """Read the project manifest (bower.json) in a project directory."""
    return read_manifest(Path(project_path) / PROJECT_MANIFEST)


def read_release_manifest(package_path: Path) -> Manifest:
    """Read the release manifest (.bower.json) of an installed package."""
    return read_manifest(Path(package_path) / RELEASE_MANIFEST, require_release=True)


def manifest_from_dict(data: Any, path: Path, require_release: bool = False) -> Manifest:
    """
    Validate parsed manifest data and build a Manifest from it.

    Unknown keys are ignored; known keys must have the expected shape.
    """
    if not isinstance(data, dict):
        raise ManifestError(path, "expected a JSON object at the top level")

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ManifestError(path, "'name' must be a non-empty string")

    main = _validate_main(data.get("main"), path)
    dependencies = _validate_dependencies(data.get("dependencies"), path)

    release = data.get("_release")
    if release is not None and not isinstance(release, str):
        raise ManifestError(path, "'_release' must be a string")
    if require_release and not release:
        raise ManifestError(path, "release manifest has no '_release' tag")

    return Manifest(
        name=name,
        main=main,
        dependencies=dependencies,
        release=release,
        path=path,
    )


def _validate_main(value: Any, path: Path) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return tuple(value)
    raise ManifestError(path, "'main' must be a string or a list of strings")


def _validate_dependencies(value: Any, path: Path) -> Dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ManifestError(path, "'dependencies' must be an object")
    for dep_name, specifier in value.items():
        if not isinstance(specifier, str):
            raise ManifestError(
                path, f"dependency '{dep_name}' must map to a version string"
            )
    return dict(value)
