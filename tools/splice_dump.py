#!/usr/bin/env python3
"""Print SPLICE drum pattern files in their text form."""

from __future__ import annotations

import argparse
import glob
from pathlib import Path
import sys
from typing import Iterable, List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from splice.errors import SpliceError  # noqa: E402
from splice.midi_export import write_midi  # noqa: E402
from splice.pattern import decode_file  # noqa: E402


def collect_paths(patterns: Iterable[str]) -> List[Path]:
    """Expand globs (a pattern with no match is kept as a literal path), dropping repeats."""

    paths: List[Path] = []
    seen: set[Path] = set()
    for pattern in patterns:
        for path in sorted(Path(p) for p in glob.glob(pattern)) or [Path(pattern)]:
            if path.resolve() not in seen:
                seen.add(path.resolve())
                paths.append(path)
    return paths


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Decode SPLICE drum pattern files and print them as text."
    )
    parser.add_argument(
        "paths",
        nargs="+",
        help="File paths or glob patterns (quotes recommended for wildcards).",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Accept files that end on a track boundary before their declared length.",
    )
    parser.add_argument(
        "--midi-dir",
        type=Path,
        help="Also write <name>.mid for every decoded file into this directory.",
    )
    args = parser.parse_args(argv)

    # Names are printed back as the raw bytes the file holds.
    sys.stdout.reconfigure(errors="surrogateescape")
    targets = collect_paths(args.paths)
    if args.midi_dir is not None:
        args.midi_dir.mkdir(parents=True, exist_ok=True)

    status = 0
    for path in targets:
        try:
            pattern = decode_file(path, strict=not args.lenient)
        except (SpliceError, OSError) as err:
            print(f"{path}: ERR {err}", file=sys.stderr)
            status = 1
            continue

        if len(targets) > 1:
            print(f"# {path}")
        print(pattern, end="")

        if args.midi_dir is not None:
            out = args.midi_dir / f"{path.stem}.mid"
            try:
                write_midi(pattern, out)
            except ValueError as err:
                print(f"{path}: ERR midi export: {err}", file=sys.stderr)
                status = 1

    return status


if __name__ == "__main__":
    raise SystemExit(main())
