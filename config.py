"""Project configuration loading (wcm.yml / wcm.json / wcm.toml)."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from errors import ConfigError, ManifestNotFound
from log import LOG_LEVELS
from scanner.builder import DEFAULT_PACKAGE_ROOT
from scanner.discovery import DEFAULT_ENTRY_PATTERNS
from scanner.manifest import read_project_manifest
from scanner.parser import ParseError, parse_file


CONFIG_FILENAMES = ("wcm.yml", "wcm.yaml", "wcm.json", "wcm.toml")
DEFAULT_MODULES_DIR = "web_components"
DEFAULT_OUT_DIR = "dist"


@dataclass
class ComponentOptions:
    """Where the project's own components live and where they are written."""

    main: List[str] = field(default_factory=list)
    root_dir: Optional[Path] = None
    out_dir: Optional[Path] = None


@dataclass
class WcmConfig:
    """
    Settings for one wcm invocation.

    Built once by load_config and passed explicitly to whatever needs it.
    """

    project_path: Path
    log_level: str = "INFO"
    log_handled_errors: bool = True
    debug: bool = False
    package_root: str = DEFAULT_PACKAGE_ROOT
    modules_dir: str = DEFAULT_MODULES_DIR
    component: ComponentOptions = field(default_factory=ComponentOptions)
    source: Optional[Path] = None

    @property
    def package_path(self) -> Path:
        """Directory holding the installed packages."""
        return self.project_path / self.package_root

    @property
    def modules_path(self) -> Path:
        """Default destination for materialized packages."""
        return self.project_path / self.modules_dir


def find_config_file(project_path: Path) -> Optional[Path]:
    """Return the first configuration file present in the project, if any."""
    for name in CONFIG_FILENAMES:
        candidate = project_path / name
        if candidate.is_file():
            return candidate
    return None


def load_config(
    project_path: Path,
    overrides: Optional[Mapping[str, Any]] = None,
) -> WcmConfig:
    """
    Load the configuration for a project.

    Values come from the project's configuration file, then from overrides
    (typically command-line options); None-valued overrides are ignored.

    Args:
        project_path: The project directory.
        overrides: Flat mapping of keys such as "log_level", "main",
            "root_dir" or "out_dir".

    Returns:
        The validated WcmConfig.

    Raises:
        ConfigError: If the file is malformed or a value is invalid.
    """
    project_path = Path(project_path).resolve()
    if not project_path.is_dir():
        raise ConfigError(f"'{project_path}' is not a directory")

    data: Dict[str, Any] = {}
    config_file = find_config_file(project_path)
    if config_file is not None:
        try:
            loaded = parse_file(config_file)
        except ParseError as e:
            raise ConfigError(str(e)) from e
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"{config_file} must contain a mapping")
        data = dict(loaded)

    component_data = data.pop("component", None) or {}
    if not isinstance(component_data, dict):
        raise ConfigError("'component' must be a mapping")

    # Command line wins over the file
    for key, value in (overrides or {}).items():
        if value is None:
            continue
        if key in ("main", "root_dir", "out_dir"):
            component_data[key] = value
        else:
            data[key] = value

    unknown = set(data) - {
        "log_level", "log_handled_errors", "debug", "package_root", "modules_dir",
    }
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    log_level = str(data.get("log_level", "INFO")).upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(
            f"Invalid log_level '{log_level}' (expected one of {', '.join(LOG_LEVELS)})"
        )

    config = WcmConfig(
        project_path=project_path,
        log_level=log_level,
        log_handled_errors=_as_bool(data.get("log_handled_errors", True), "log_handled_errors"),
        debug=_as_bool(data.get("debug", False), "debug"),
        package_root=_as_str(data.get("package_root", DEFAULT_PACKAGE_ROOT), "package_root"),
        modules_dir=_as_str(data.get("modules_dir", DEFAULT_MODULES_DIR), "modules_dir"),
        source=config_file,
    )
    config.component = _load_component(component_data, project_path)
    return config


def _load_component(data: Dict[str, Any], project_path: Path) -> ComponentOptions:
    main = data.get("main")
    if main is None:
        main = _manifest_entries(project_path)
    elif isinstance(main, str):
        main = [main]
    elif not (isinstance(main, list) and all(isinstance(m, str) for m in main)):
        raise ConfigError("'component.main' must be a string or a list of strings")

    root_dir = project_path / _as_str(data.get("root_dir", "."), "component.root_dir")
    out_dir = project_path / _as_str(data.get("out_dir", DEFAULT_OUT_DIR), "component.out_dir")

    return ComponentOptions(
        main=list(main),
        root_dir=root_dir.resolve(),
        out_dir=out_dir.resolve(),
    )


def _manifest_entries(project_path: Path) -> List[str]:
    """Fall back to the project manifest's main entries, then index.html."""
    try:
        manifest = read_project_manifest(project_path)
    except ManifestNotFound:
        return list(DEFAULT_ENTRY_PATTERNS)
    return list(manifest.main) or list(DEFAULT_ENTRY_PATTERNS)


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    raise ConfigError(f"'{key}' must be true or false")


def _as_str(value: Any, key: str) -> str:
    if isinstance(value, (str, Path)) and str(value):
        return str(value)
    raise ConfigError(f"'{key}' must be a non-empty string")
