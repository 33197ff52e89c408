#!/usr/bin/env python3
"""
Web Component Mapper CLI

Resolves installed Bower-style packages into a dependency graph, copies
them into a versioned output tree, and rewrites a project's HTML entry
points so that cross-package references become location-independent
placeholders.
"""

import argparse
import sys
from pathlib import Path

from config import load_config
from errors import WcmError
from exporters import to_ascii, to_json, to_mermaid
from graph.materializer import materialize
from log import LOG_LEVELS, configure_logging, get_logger
from rewrite.pipeline import rewrite
from scanner.builder import resolve_project_dependencies


logger = get_logger("cli")


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="wcm",
        description="Resolve web component dependencies and rewrite cross-package references.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  wcm graph .                        # Print the dependency tree
  wcm graph . -f json -o graph.json  # Readable graph as JSON
  wcm graph . -f mermaid             # Mermaid flowchart
  wcm install . --dest out/modules   # Copy packages to out/modules/<name>/<version>
  wcm install . --optimise           # Rewrite package entry points while copying
  wcm prepare . --main "src/**/*.html" --out-dir build
        """,
    )

    # Shared options
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        default=None,
        help="Logging level (default: from config, else INFO)",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write the log to this file",
    )

    parser.add_argument(
        "--quiet-handled",
        action="store_true",
        help="Log handled errors (missing files, unclassifiable references) at debug level",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # graph
    graph_parser = subparsers.add_parser("graph", help="Print the resolved dependency graph")
    _add_project_argument(graph_parser)
    graph_parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )
    graph_parser.add_argument(
        "-f", "--format",
        choices=["ascii", "mermaid", "json"],
        default="ascii",
        help="Output format (default: ascii)",
    )
    graph_parser.add_argument(
        "--ascii-style",
        choices=["tree", "ascii"],
        default="tree",
        help="ASCII output style: 'tree' (Unicode) or 'ascii' (pure ASCII)",
    )
    graph_parser.add_argument(
        "--orientation",
        choices=["LR", "TD", "TB", "RL", "BT"],
        default="LR",
        help="Mermaid flowchart orientation (default: LR)",
    )

    # install
    install_parser = subparsers.add_parser(
        "install", help="Copy resolved packages into <dest>/<name>/<version>"
    )
    _add_project_argument(install_parser)
    install_parser.add_argument(
        "--dest",
        type=str,
        default=None,
        help="Destination directory (default: modules_dir from config)",
    )
    install_parser.add_argument(
        "--optimise",
        action="store_true",
        help="Rewrite each package's entry points instead of copying it verbatim",
    )

    # prepare
    prepare_parser = subparsers.add_parser(
        "prepare", help="Rewrite the project's entry points into the output directory"
    )
    _add_project_argument(prepare_parser)
    prepare_parser.add_argument(
        "--main",
        nargs="+",
        default=None,
        help="Entry point glob patterns, relative to the root directory",
    )
    prepare_parser.add_argument(
        "--root-dir",
        type=str,
        default=None,
        help="Source root directory (default: project directory)",
    )
    prepare_parser.add_argument(
        "--out-dir",
        type=str,
        default=None,
        help="Output directory (default: dist)",
    )

    return parser.parse_args(args)


def _add_project_argument(parser):
    parser.add_argument(
        "project",
        nargs="?",
        default=".",
        help="Project directory (default: current directory)",
    )


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)

    overrides = {
        "log_level": parsed.log_level,
        "log_handled_errors": False if parsed.quiet_handled else None,
        "main": getattr(parsed, "main", None),
        "root_dir": getattr(parsed, "root_dir", None),
        "out_dir": getattr(parsed, "out_dir", None),
    }

    try:
        config = load_config(Path(parsed.project), overrides)
    except WcmError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    log_file = Path(parsed.log_file) if parsed.log_file else None
    configure_logging("DEBUG" if config.debug else config.log_level, log_file)
    if config.source is not None:
        logger.debug("Loaded configuration from %s", config.source)

    try:
        if parsed.command == "graph":
            return _run_graph(parsed, config)
        elif parsed.command == "install":
            return _run_install(parsed, config)
        else:
            return _run_prepare(config)
    except WcmError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _run_graph(parsed, config):
    graph = resolve_project_dependencies(config.project_path, config.package_root)
    readable = graph.to_readable()

    if parsed.format == "mermaid":
        output = to_mermaid(readable, orientation=parsed.orientation)
    elif parsed.format == "json":
        output = to_json(readable)
    else:  # ascii (default)
        output = to_ascii(readable, style=parsed.ascii_style)

    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output, encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(output)

    return 0


def _run_install(parsed, config):
    graph = resolve_project_dependencies(config.project_path, config.package_root)

    # Validate before touching the destination
    graph.to_readable()

    destination = Path(parsed.dest).resolve() if parsed.dest else config.modules_path
    result = materialize(
        graph,
        destination,
        optimise=parsed.optimise,
        log_handled_errors=config.log_handled_errors,
    )

    print(f"Installed {len(graph)} package(s) to: {destination}", file=sys.stderr)
    if result is not None and result.handled_errors:
        print(f"{len(result.handled_errors)} reference(s) could not be resolved", file=sys.stderr)
    return 0


def _run_prepare(config):
    component = config.component
    result = rewrite(
        component.main,
        component.root_dir,
        component.out_dir,
        log_handled_errors=config.log_handled_errors,
    )

    print(f"Wrote {len(result.written)} file(s) to: {component.out_dir}", file=sys.stderr)
    if result.handled_errors:
        print(f"{len(result.handled_errors)} reference(s) could not be resolved", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
