"""Parsers for structured manifest and configuration files."""

import json
import tomllib
from pathlib import Path
from typing import Any

import yaml


STRUCTURED_EXTENSIONS = {".yaml", ".yml", ".json", ".toml"}


class ParseError(ValueError):
    """Raised when a structured file cannot be read or decoded."""


def parse_file(file_path: Path) -> Any:
    """
    Parse a structured file and return its contents.

    The format is chosen by suffix: YAML, JSON or TOML. Files with any
    other suffix are tried as JSON first, then YAML.

    Args:
        file_path: Path to the file to parse.

    Returns:
        Parsed data structure.

    Raises:
        ParseError: If the file cannot be read or is not well-formed.
    """
    suffix = file_path.suffix.lower()

    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"unable to read {file_path}: {e}") from e

    try:
        if suffix in {".yaml", ".yml"}:
            return yaml.safe_load(content)

        elif suffix == ".json":
            return json.loads(content)

        elif suffix == ".toml":
            return tomllib.loads(content)

        else:
            try:
                return json.loads(content)
            except json.JSONDecodeError:
                return yaml.safe_load(content)

    except (json.JSONDecodeError, yaml.YAMLError, tomllib.TOMLDecodeError) as e:
        raise ParseError(f"malformed content in {file_path}: {e}") from e
