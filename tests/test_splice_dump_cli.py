"""CLI integration tests for tools/splice_dump.py."""

from __future__ import annotations

import os
from pathlib import Path
import struct
import subprocess
import sys

import mido

REPO_ROOT = Path(__file__).resolve().parents[1]
SCRIPT = REPO_ROOT / "tools" / "splice_dump.py"

MAGIC = b"SPLICE"


def _record(index: int, name: bytes, steps: bytes) -> bytes:
    return struct.pack("<IB", index, len(name)) + name + steps


def _write_splice(path: Path, records: list[bytes], *, declared: int | None = None) -> Path:
    body = b"0.808-alpha".ljust(32, b"\x00") + struct.pack("<f", 120.0) + b"".join(records)
    if declared is None:
        declared = len(body)
    path.write_bytes(MAGIC + struct.pack(">Q", declared) + body)
    return path


def _run_cli(*args: str) -> subprocess.CompletedProcess[str]:
    env = dict(os.environ)
    env["PYTHONPATH"] = str(REPO_ROOT)
    return subprocess.run(
        [sys.executable, str(SCRIPT), *args],
        cwd=str(REPO_ROOT),
        env=env,
        text=True,
        capture_output=True,
        check=False,
    )


def test_cli_prints_pattern(tmp_path: Path) -> None:
    path = _write_splice(
        tmp_path / "pattern_1.splice",
        [_record(0, b"kick", bytes([1, 0, 0, 0] * 4)), _record(1, b"snare", bytes([0, 0, 0, 0, 1, 0, 0, 0] * 2))],
    )
    proc = _run_cli(str(path))
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout == (
        "Saved with HW Version: 0.808-alpha\n"
        "Tempo: 120\n"
        "(0) kick\t|x---|x---|x---|x---|\n"
        "(1) snare\t|----|x---|----|x---|\n"
    )


def test_cli_reports_errors_and_continues(tmp_path: Path) -> None:
    bad = tmp_path / "a_bad.splice"
    bad.write_bytes(b"\x00" * 64)
    good = _write_splice(tmp_path / "b_good.splice", [_record(0, b"kick", bytes(16))])
    proc = _run_cli(str(tmp_path / "*.splice"))
    assert proc.returncode == 1
    assert f"{bad}: ERR unknown file format" in proc.stderr
    assert f"# {good}" in proc.stdout
    assert "(0) kick\t|----|----|----|----|" in proc.stdout


def test_cli_lenient_flag(tmp_path: Path) -> None:
    path = _write_splice(
        tmp_path / "short.splice", [_record(0, b"kick", bytes(16))], declared=36 + 50
    )
    strict = _run_cli(str(path))
    assert strict.returncode == 1
    assert "declared bytes unread" in strict.stderr

    lenient = _run_cli("--lenient", str(path))
    assert lenient.returncode == 0, lenient.stderr
    assert "(0) kick" in lenient.stdout


def test_cli_writes_midi(tmp_path: Path) -> None:
    path = _write_splice(tmp_path / "groove.splice", [_record(0, b"kick", bytes([1, 0, 0, 0] * 4))])
    out_dir = tmp_path / "midi"
    proc = _run_cli(str(path), "--midi-dir", str(out_dir))
    assert proc.returncode == 0, proc.stderr
    mid = mido.MidiFile(str(out_dir / "groove.mid"))
    notes = [m.note for m in mid.tracks[1] if m.type == "note_on"]
    assert notes == [36, 36, 36, 36]


def test_cli_missing_file(tmp_path: Path) -> None:
    proc = _run_cli(str(tmp_path / "nope.splice"))
    assert proc.returncode == 1
    assert "nope.splice: ERR" in proc.stderr


def test_cli_drops_repeated_paths(tmp_path: Path) -> None:
    path = _write_splice(tmp_path / "kick.splice", [_record(0, b"kick", bytes(16))])
    proc = _run_cli(str(path), str(tmp_path / "*.splice"))
    assert proc.returncode == 0, proc.stderr
    assert proc.stdout.count("(0) kick") == 1
    assert "# " not in proc.stdout


def test_cli_prints_raw_name_bytes(tmp_path: Path) -> None:
    path = _write_splice(tmp_path / "raw.splice", [_record(2, b"cl\xe4p", bytes(16))])
    env = dict(os.environ)
    env["PYTHONPATH"] = str(REPO_ROOT)
    env["PYTHONIOENCODING"] = "utf-8"
    proc = subprocess.run(
        [sys.executable, str(SCRIPT), str(path)],
        cwd=str(REPO_ROOT),
        env=env,
        capture_output=True,
        check=False,
    )
    assert proc.returncode == 0, proc.stderr
    assert b"(2) cl\xe4p\t|----|----|----|----|\n" in proc.stdout
