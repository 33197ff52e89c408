"""JSON exporter for readable dependency graphs (machine-friendly format)."""

import json

from graph.model import ReadableGraph


def to_json(readable: ReadableGraph, indent: int = 2) -> str:
    """
    Convert a readable dependency graph to JSON.

    Args:
        readable: The projection to export.
        indent: JSON indentation level.

    Returns:
        JSON string with "graph" and "shrinkwrap" objects. Key order follows
        the projection, which is already sorted.
    """
    return json.dumps(readable.to_dict(), indent=indent)
