"""Tests for the dependency graph model."""

import pytest
from pathlib import Path

from errors import MissingDependencyReference
from graph.model import (
    DependencyGraph,
    DependencyShorthand,
    generate_dependency_pointer,
    split_dependency_pointer,
)


def _node(name, version="1.0.0", dependencies=None):
    return DependencyShorthand(
        name=name,
        version=version,
        path=Path("/packages") / name,
        dependencies=dependencies or [],
    )


class TestDependencyPointers:
    """Tests for name@version pointers."""

    def test_generate(self):
        """Test building a pointer."""
        assert generate_dependency_pointer("polymer", "1.2.3") == "polymer@1.2.3"

    def test_split(self):
        """Test splitting a pointer into name and version."""
        assert split_dependency_pointer("polymer@^1.2.3") == ("polymer", "^1.2.3")

    def test_split_keeps_specifier_with_at_sign(self):
        """Test that only the first separator splits."""
        assert split_dependency_pointer("iron-icon@git@github.com:x/y.git") == (
            "iron-icon",
            "git@github.com:x/y.git",
        )

    def test_split_scoped_name(self):
        """Test that a leading @ is part of the name."""
        assert split_dependency_pointer("@scope/pkg@2.0.0") == ("@scope/pkg", "2.0.0")

    def test_split_without_version(self):
        """Test a pointer with no version."""
        assert split_dependency_pointer("polymer") == ("polymer", "")


class TestDependencyGraph:
    """Tests for DependencyGraph class."""

    def test_empty_graph(self):
        """Test empty graph initialization."""
        graph = DependencyGraph()
        assert len(graph) == 0
        assert graph.dependencies == {}
        assert graph.to_readable().to_dict() == {"graph": {}, "shrinkwrap": {}}

    def test_add_dependency(self):
        """Test adding a node."""
        graph = DependencyGraph()

        assert graph.add_dependency(_node("Polymer"))

        assert len(graph) == 1
        assert "polymer" in graph
        assert "POLYMER" in graph
        assert graph.get("polymer").name == "Polymer"

    def test_add_dependency_is_case_insensitive(self):
        """Test that names differing only in case are one node."""
        graph = DependencyGraph()
        graph.add_dependency(_node("Foo", "1.0.0"))

        assert not graph.add_dependency(_node("foo", "2.0.0"))
        assert len(graph) == 1
        assert graph.get("FOO").version == "1.0.0"

    def test_mark_reference(self):
        """Test incrementing the reference count."""
        graph = DependencyGraph()
        graph.add_dependency(_node("Foo"))

        graph.mark_reference("foo")
        graph.mark_reference("FOO")

        assert graph.get("Foo").references == 2

    def test_dependencies_property_returns_copy(self):
        """Test that the mapping can't be mutated from outside."""
        graph = DependencyGraph()
        graph.add_dependency(_node("a"))

        graph.dependencies.pop("a")

        assert "a" in graph

    def test_repr(self):
        """Test string representation."""
        graph = DependencyGraph()
        graph.add_dependency(_node("a"))
        graph.mark_reference("a")

        assert "packages=1" in repr(graph)
        assert "references=1" in repr(graph)


class TestReadableProjection:
    """Tests for converting the graph to its readable form."""

    def test_sorted_case_insensitively(self):
        """Test that both maps are sorted by lower-cased name."""
        graph = DependencyGraph()
        graph.add_dependency(_node("zeta", "3.0.0", ["Beta@^2", "alpha@^1"]))
        graph.add_dependency(_node("Beta", "2.0.0"))
        graph.add_dependency(_node("alpha", "1.0.0"))

        readable = graph.to_readable()

        assert list(readable.graph) == ["alpha", "Beta", "zeta"]
        assert list(readable.shrinkwrap) == ["alpha", "Beta", "zeta"]
        assert readable.graph["zeta"] == ["alpha", "Beta"]
        assert readable.shrinkwrap == {"alpha": "1.0.0", "Beta": "2.0.0", "zeta": "3.0.0"}

    def test_pointer_names_resolve_case_insensitively(self):
        """Test that pointers use the dependency's declared name."""
        graph = DependencyGraph()
        graph.add_dependency(_node("app-shell", "1.0.0", ["POLYMER@^1.0"]))
        graph.add_dependency(_node("Polymer", "1.9.3"))

        readable = graph.to_readable()

        assert readable.graph["app-shell"] == ["Polymer"]

    def test_dangling_pointer_is_fatal(self):
        """Test that a pointer to an absent node names both packages."""
        graph = DependencyGraph()
        graph.add_dependency(_node("paper-button", "1.0.0", ["iron-icon@^1.0"]))

        with pytest.raises(MissingDependencyReference) as info:
            graph.to_readable()

        assert info.value.dependent == "paper-button"
        assert info.value.missing == "iron-icon"
        assert "paper-button" in str(info.value)
        assert "iron-icon" in str(info.value)

    def test_get_roots(self):
        """Test finding packages nothing depends on."""
        graph = DependencyGraph()
        graph.add_dependency(_node("app", "1.0.0", ["lib@1"]))
        graph.add_dependency(_node("tool", "1.0.0", ["lib@1"]))
        graph.add_dependency(_node("lib", "1.0.0"))

        assert graph.to_readable().get_roots() == ["app", "tool"]
