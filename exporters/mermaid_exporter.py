"""Mermaid flowchart exporter for readable dependency graphs."""

import re
from typing import Dict, List

from graph.model import ReadableGraph


def to_mermaid(readable: ReadableGraph, orientation: str = "LR") -> str:
    """
    Convert a readable dependency graph to Mermaid flowchart syntax.

    Args:
        readable: The projection to export.
        orientation: Flowchart orientation (LR, TD, TB, RL, BT).

    Returns:
        Mermaid flowchart string.
    """
    lines = [f"flowchart {orientation}"]

    node_ids: Dict[str, str] = {}
    for name in readable.graph:
        node_ids[name.lower()] = _sanitize_id(name, node_ids.values())

    # Node definitions with labels
    for name in readable.graph:
        version = readable.shrinkwrap.get(name, "")
        label = f"{name}@{version}" if version else name
        lines.append(f'    {node_ids[name.lower()]}["{_escape_label(label)}"]')

    edges: List[str] = []
    for name, dependencies in readable.graph.items():
        for dependency in dependencies:
            edges.append(f"    {node_ids[name.lower()]} --> {node_ids[dependency.lower()]}")

    if edges:
        lines.append("")
        lines.extend(edges)

    return "\n".join(lines)


def _sanitize_id(name: str, taken) -> str:
    """Create a valid Mermaid node ID from a package name."""
    base = "pkg_" + re.sub(r"[^a-zA-Z0-9_]", "_", name)
    taken = set(taken)
    candidate = base
    index = 1
    while candidate in taken:
        index += 1
        candidate = f"{base}_{index}"
    return candidate


def _escape_label(label: str) -> str:
    return label.replace('"', "#quot;")
