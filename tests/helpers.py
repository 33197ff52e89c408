"""Filesystem fixtures shared by the tests."""

import json
from pathlib import Path
from typing import Dict, Optional


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def write_text(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def make_project(root: Path, dependencies: Dict[str, str], name: str = "app") -> Path:
    """Create a project bower.json declaring the given dependencies."""
    write_json(root / "bower.json", {"name": name, "dependencies": dependencies})
    return root


def make_package(
    root: Path,
    directory: str,
    version: str,
    dependencies: Optional[Dict[str, str]] = None,
    name: Optional[str] = None,
    main=None,
) -> Path:
    """Create an installed package under root/bower_components/<directory>."""
    package = root / "bower_components" / directory
    data = {
        "name": name or directory,
        "_release": version,
        "dependencies": dependencies or {},
    }
    if main is not None:
        data["main"] = main
    write_json(package / ".bower.json", data)
    return package
