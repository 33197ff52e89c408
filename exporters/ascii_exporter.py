"""ASCII tree-style exporter for readable dependency graphs."""

from typing import Dict, List, Set, Tuple

from graph.model import ReadableGraph


# Unicode tree characters
UNICODE_BRANCH = "├── "
UNICODE_LAST = "└── "
UNICODE_VERTICAL = "│   "
UNICODE_SPACE = "    "

# ASCII fallback characters
ASCII_BRANCH = "|-- "
ASCII_LAST = "\\-- "
ASCII_VERTICAL = "|   "
ASCII_SPACE = "    "


def to_ascii(readable: ReadableGraph, style: str = "tree") -> str:
    """
    Convert a readable dependency graph to an ASCII tree.

    Each tree starts at a package nothing else depends on. Packages that are
    part of a cycle with no outside entry point are rendered as their own
    roots. A package reached again along its own branch is marked `[*]`.

    Args:
        readable: The projection to export.
        style: Output style - "tree" (Unicode) or "ascii" (pure ASCII).

    Returns:
        ASCII tree string.
    """
    if style == "ascii":
        chars = (ASCII_BRANCH, ASCII_LAST, ASCII_VERTICAL, ASCII_SPACE)
    else:
        chars = (UNICODE_BRANCH, UNICODE_LAST, UNICODE_VERTICAL, UNICODE_SPACE)

    names = {name.lower(): name for name in readable.graph}
    roots = readable.get_roots()

    # Cover packages only reachable through a cycle
    reached: Set[str] = set()
    for root in roots:
        _collect(readable.graph, names, root, reached)
    for name in readable.graph:
        if name.lower() not in reached:
            roots.append(name)
            _collect(readable.graph, names, name, reached)

    lines: List[str] = []
    for i, root in enumerate(roots):
        _render_node(readable, names, root, "", True, chars, set(), lines, is_root=True)

        # Blank line between root trees
        if i < len(roots) - 1:
            lines.append("")

    return "\n".join(lines)


def _collect(graph: Dict[str, List[str]], names: Dict[str, str], name: str, reached: Set[str]) -> None:
    stack = [name]
    while stack:
        current = stack.pop()
        if current.lower() in reached:
            continue
        reached.add(current.lower())
        stack.extend(names.get(dep.lower(), dep) for dep in graph.get(current, []))


def _render_node(
    readable: ReadableGraph,
    names: Dict[str, str],
    name: str,
    prefix: str,
    is_last: bool,
    chars: Tuple[str, str, str, str],
    visited: Set[str],
    lines: List[str],
    is_root: bool = False,
) -> None:
    """
    Recursively render a package and its dependencies.

    Args:
        readable: The projection being rendered.
        names: Lower-cased name -> declared name.
        name: Current package.
        prefix: Current line prefix for indentation.
        is_last: Whether this is the last child of its parent.
        chars: Character set (branch, last, vertical, space).
        visited: Packages on the current branch (to detect cycles).
        lines: Output lines list (modified in place).
        is_root: Whether this is a root-level package.
    """
    branch, last, vertical, space = chars

    version = readable.shrinkwrap.get(name, "")
    label = f"{name}@{version}" if version else name
    key = name.lower()
    is_cycle = key in visited
    cycle_marker = " [*]" if is_cycle else ""

    if is_root:
        lines.append(f"{label}{cycle_marker}")
    else:
        connector = last if is_last else branch
        lines.append(f"{prefix}{connector}{label}{cycle_marker}")

    if is_cycle:
        return

    visited.add(key)

    children = [names.get(dep.lower(), dep) for dep in readable.graph.get(name, [])]
    new_prefix = "" if is_root else prefix + (space if is_last else vertical)
    for index, child in enumerate(children):
        _render_node(
            readable,
            names,
            child,
            new_prefix,
            index == len(children) - 1,
            chars,
            visited,
            lines,
        )

    # Allow the same package in other branches
    visited.discard(key)
