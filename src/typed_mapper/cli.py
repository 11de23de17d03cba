"""Command line tool for inspecting mapping definitions."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from typed_mapper.manager import MappingManager
from typed_mapper.mapping import config_name
from typed_mapper.parsing import MappingParser


def format_structures(manager: MappingManager, config: str | None = None) -> str:
    """Render the hierarchy graph of each configuration as text."""
    lines: list[str] = []
    configs = [config] if config is not None else list(manager.configurations)
    for database_config in configs:
        graph = manager.structure(database_config)
        lines.append(f"{config_name(database_config)}:")
        if not len(graph):
            lines.append("  (no mappings)")
            continue
        for vertex in graph.vertices:
            mapping = vertex.data
            lines.append(f"  {mapping.object_type.name} -> {mapping.table_name}")
            for sink in vertex.sinks():
                lines.append(f"    : {sink.data.object_type.name}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Show the mapping hierarchy described by a mapping file"
    )
    arg_parser.add_argument(
        "file",
        type=Path,
        help="Path to the mapping definition file",
    )
    arg_parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        help="Only show this database configuration",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log graph construction",
    )

    args = arg_parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if not args.file.exists():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        return 1

    try:
        definitions = MappingParser().parse(args.file.read_text())
    except (SyntaxError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_structures(definitions.manager(), args.config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
