"""Graph data model for resolved package dependencies."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from errors import MissingDependencyReference


def generate_dependency_pointer(name: str, version: str) -> str:
    """Build a `name@version` dependency pointer."""
    return f"{name}@{version}"


def split_dependency_pointer(pointer: str) -> Tuple[str, str]:
    """
    Split a dependency pointer into its name and version.

    A leading `@` belongs to the name (scoped packages), so the split
    happens at the first `@` after the first character.

    Args:
        pointer: A `name@version` string.

    Returns:
        Tuple of (name, version); version is empty if absent.
    """
    at = pointer.find("@", 1)
    if at == -1:
        return pointer, ""
    return pointer[:at], pointer[at + 1:]


@dataclass
class DependencyShorthand:
    """
    A reduced representation of one resolved package.

    Attributes:
        name: Package name as declared by its own manifest.
        version: Resolved release tag.
        path: Absolute path of the installed package directory.
        main: Declared entry points, relative to path.
        dependencies: `name@version` pointers to the packages this one needs.
        references: Number of dependents that reached this package.
    """

    name: str
    version: str
    path: Path
    main: Tuple[str, ...] = ()
    dependencies: List[str] = field(default_factory=list)
    references: int = 0

    @classmethod
    def from_manifest(cls, manifest, package_path: Path) -> "DependencyShorthand":
        """Build a node from a release manifest and its package directory."""
        return cls(
            name=manifest.name,
            version=manifest.release or "",
            path=Path(package_path).resolve(),
            main=tuple(manifest.main),
            dependencies=[
                generate_dependency_pointer(dep_name, specifier)
                for dep_name, specifier in manifest.dependencies.items()
            ],
        )

    @property
    def pointer(self) -> str:
        """This package's own dependency pointer."""
        return generate_dependency_pointer(self.name, self.version)


@dataclass
class ReadableGraph:
    """
    Sorted, externally consumable projection of a dependency graph.

    Attributes:
        graph: Package name -> sorted names of the packages it depends on.
        shrinkwrap: Package name -> resolved version.
    """

    graph: Dict[str, List[str]] = field(default_factory=dict)
    shrinkwrap: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Dict]:
        return {"graph": self.graph, "shrinkwrap": self.shrinkwrap}

    def get_roots(self) -> List[str]:
        """Packages that no other package depends on, sorted."""
        targets = {dep.lower() for deps in self.graph.values() for dep in deps}
        return [name for name in self.graph if name.lower() not in targets]


class DependencyGraph:
    """
    A deduplicated set of resolved packages keyed by lower-cased name.

    Nodes are only ever added or reference-counted, never removed.
    """

    def __init__(self):
        self._dependencies: Dict[str, DependencyShorthand] = {}

    @staticmethod
    def normalize(name: str) -> str:
        """Return the case-insensitive key for a package name."""
        return name.lower()

    @property
    def dependencies(self) -> Dict[str, DependencyShorthand]:
        """Return a shallow copy of the key -> node mapping."""
        return dict(self._dependencies)

    def add_dependency(self, dependency: DependencyShorthand) -> bool:
        """
        Insert a node unless one with the same name is already present.

        Returns:
            True if the node was inserted, False if the name was taken.
        """
        key = self.normalize(dependency.name)
        if key in self._dependencies:
            return False
        self._dependencies[key] = dependency
        return True

    def has_dependency(self, name: str) -> bool:
        """Check whether a package with this name (any case) is present."""
        return self.normalize(name) in self._dependencies

    def get(self, name: str) -> Optional[DependencyShorthand]:
        """Look up a node by name, case-insensitively."""
        return self._dependencies.get(self.normalize(name))

    def mark_reference(self, name: str) -> None:
        """Increment the reference count of an existing node."""
        self._dependencies[self.normalize(name)].references += 1

    def to_readable(self) -> ReadableGraph:
        """
        Convert this graph into its sorted, human readable projection.

        Raises:
            MissingDependencyReference: If any pointer names a package that
                is not in the graph.
        """
        readable = ReadableGraph()

        for node in sorted(self._dependencies.values(), key=lambda n: n.name.lower()):
            children: List[str] = []
            for pointer in node.dependencies:
                child_name, _ = split_dependency_pointer(pointer)
                child = self.get(child_name)
                if child is None:
                    raise MissingDependencyReference(node.name, child_name)
                children.append(child.name)

            readable.graph[node.name] = sorted(children, key=str.lower)
            readable.shrinkwrap[node.name] = node.version

        return readable

    def __iter__(self) -> Iterator[DependencyShorthand]:
        return iter(self._dependencies.values())

    def __len__(self) -> int:
        return len(self._dependencies)

    def __contains__(self, name: str) -> bool:
        return self.has_dependency(name)

    def __repr__(self) -> str:
        references = sum(node.references for node in self._dependencies.values())
        return f"DependencyGraph(packages={len(self._dependencies)}, references={references})"
