"""kvdiff CLI — kvdiff diff / kvdiff watch.

Entry point for the ``kvdiff`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from kvdiff._errors import KvDiffError

if TYPE_CHECKING:
    from kvdiff.differ import ChangeSet


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the kvdiff CLI."""
    parser = argparse.ArgumentParser(
        prog="kvdiff",
        description="Detect added, changed and removed entries between style mappings.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # kvdiff diff
    diff_parser = subparsers.add_parser(
        "diff",
        help="Diff two mapping files (exit 1 if they differ)",
    )
    diff_parser.add_argument("old", help="Mapping file for the first cycle")
    diff_parser.add_argument("new", help="Mapping file for the second cycle")
    diff_parser.add_argument(
        "--format", choices=("changes", "css"), default=None, help="Output format",
    )

    # kvdiff watch
    watch_parser = subparsers.add_parser(
        "watch",
        help="Print changes each time a mapping file is saved",
    )
    watch_parser.add_argument("source", help="Mapping file to watch")
    watch_parser.add_argument(
        "--format", choices=("changes", "css"), default=None, help="Output format",
    )
    watch_parser.add_argument(
        "--debounce", type=int, default=None, help="Debounce window in milliseconds",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from kvdiff import __version__

    return __version__


def format_changes(changes: ChangeSet) -> list[str]:
    """Render a change set as one line per record.

    ``+`` added, ``~`` changed, ``-`` removed.
    """
    lines: list[str] = []
    for kind, record in changes:
        if kind == "added":
            lines.append(f"+ {record.key}: {record.current_value}")
        elif kind == "changed":
            lines.append(f"~ {record.key}: {record.previous_value} -> {record.current_value}")
        else:
            lines.append(f"- {record.key}: {record.previous_value}")
    return lines


def _run_diff(args: argparse.Namespace) -> int:
    from kvdiff.binding import InlineStyle, StyleBinding
    from kvdiff.config_loader import load_config
    from kvdiff.source import load_mapping

    config = load_config(Path.cwd(), format=args.format)
    style = InlineStyle()
    binding = StyleBinding(style, name="diff")

    binding.raw_style = load_mapping(config.resolve(args.old))
    binding.check()
    binding.raw_style = load_mapping(config.resolve(args.new))
    changes = binding.check()

    if config.format == "css":
        print(style.css_text)
    elif changes is not None:
        print("\n".join(format_changes(changes)))
    return 0 if changes is None else 1


def _run_watch(args: argparse.Namespace) -> int:
    from kvdiff.binding import InlineStyle, StyleBinding
    from kvdiff.config_loader import load_config
    from kvdiff.observability import DiffCollector, EventLog
    from kvdiff.watcher import MappingWatcher

    config = load_config(Path.cwd(), format=args.format, debounce=args.debounce)
    collector = DiffCollector(EventLog(max_events=config.max_events))
    style = InlineStyle()
    watcher = MappingWatcher(args.source, config, collector=collector)
    binding = StyleBinding(style, collector=collector, name=watcher.path.name)

    print(f"  Watching {watcher.path} (Ctrl+C to stop)", file=sys.stderr)
    watcher.start()
    try:
        for cycle in watcher.cycles():
            binding.raw_style = cycle.mapping
            try:
                changes = binding.check()
            except KvDiffError as exc:
                print(f"  Diff error: {cycle.path.name}: {exc}", file=sys.stderr)
                continue
            if changes is None:
                continue
            if config.format == "css":
                print(style.css_text, flush=True)
            else:
                print("\n".join(format_changes(changes)), flush=True)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()
        stats = collector.log.stats()
        print(
            f"  Stopped after {stats['cycles']} change cycles "
            f"(+{stats['added']} ~{stats['changed']} -{stats['removed']}), "
            f"{stats['reloads']} reloads",
            file=sys.stderr,
        )
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        if args.command == "diff":
            code = _run_diff(args)
        else:
            code = _run_watch(args)
    except KvDiffError as exc:
        print(f"kvdiff: {exc}", file=sys.stderr)
        sys.exit(2)
    sys.exit(code)


if __name__ == "__main__":
    main()
