"""Error taxonomy for manifest resolution and asset rewriting."""

from pathlib import Path
from typing import Optional


class WcmError(Exception):
    """Base class for all errors raised by wcm."""


class ConfigError(WcmError):
    """Raised when the project configuration is invalid."""


class ManifestNotFound(WcmError):
    """Raised when no manifest exists at the expected path."""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f"Manifest not found: {self.path}")


class ManifestError(WcmError):
    """Raised when a manifest cannot be parsed or fails validation."""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid manifest {self.path}: {reason}")


class MissingDependencyReference(WcmError):
    """
    Raised when a dependency pointer names a package absent from the graph.

    The graph is internally inconsistent at this point and is never repaired.
    """

    def __init__(self, dependent: str, missing: str):
        self.dependent = dependent
        self.missing = missing
        super().__init__(
            f"Missing dependency with the name '{missing}' for '{dependent}'"
        )


class ResourceCopyFailure(WcmError):
    """Raised when reading a source or writing part of the output tree fails."""

    def __init__(
        self,
        destination: Path,
        cause: BaseException,
        source: Optional[Path] = None,
        action: str = "copy",
    ):
        self.source = source
        self.destination = destination
        self.cause = cause
        self.action = action
        if source is None:
            message = f"Unable to {action} '{destination}': {cause}"
        else:
            message = f"Unable to {action} '{source}' to '{destination}': {cause}"
        super().__init__(message)


class HandledError(WcmError):
    """
    An error that is recorded and logged while processing continues.

    Handled errors are never raised by the rewrite pipeline; they are
    collected on the run's result instead.
    """


class FileNotFoundDuringRewrite(HandledError):
    """A referenced file does not exist on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f"File not found: {self.path}")


class AmbiguousRelativity(HandledError):
    """A reference string could not be classified as relative or external."""

    def __init__(self, source: Path, reference: Optional[str], reason: str = ""):
        self.source = Path(source)
        self.reference = reference
        detail = f" ({reason})" if reason else ""
        super().__init__(
            f"Unable to determine relativity of '{reference}' from '{self.source}'{detail}"
        )
