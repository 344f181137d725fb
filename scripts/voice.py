#!/usr/bin/env python3
"""CLI: Run voice/text chart commands against an in-memory chart."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Ensure the package is importable when running as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from chartvoice import config
from chartvoice.chart.state import ChartState
from chartvoice.commands.executor import VoiceCommandEngine
from chartvoice.commands.grammar import match


def _transcripts(args: argparse.Namespace):
    if args.file:
        for line in args.file.read_text().splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                yield line
        return
    if args.commands:
        yield from args.commands
        return
    # Interactive
    while True:
        try:
            line = input("voice> ").strip()
        except EOFError:
            print()
            return
        if line in ("quit", "exit"):
            return
        if line:
            yield line


def main() -> None:
    parser = argparse.ArgumentParser(description="Run chart voice commands")
    parser.add_argument(
        "commands",
        nargs="*",
        help="Transcripts to run in order (default: interactive prompt)",
    )
    parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Read transcripts from a file, one per line ('#' starts a comment)",
    )
    parser.add_argument(
        "--explain",
        action="store_true",
        help="Show which grammar rule matched each transcript",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the final chart as JSON",
    )
    parser.add_argument(
        "--snap",
        action="store_true",
        default=config.SNAP_TO_GRID,
        help="Snap node positions to the grid",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    engine = VoiceCommandEngine(ChartState(snap=args.snap))
    failures = 0
    for transcript in _transcripts(args):
        if args.explain:
            rule, cmd = match(transcript)
            print(f"  [{rule or 'no match'}] {cmd.kind.value}")
        entry = engine.run(transcript)
        mark = "ok " if entry.success else "ERR"
        print(f"{mark} {entry.result}")
        if not entry.success:
            failures += 1

    if args.json:
        print(json.dumps(engine.chart.to_dict(), indent=2))

    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
