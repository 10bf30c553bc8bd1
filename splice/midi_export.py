"""Export decoded patterns as Standard MIDI Files.

Every pattern track becomes one MIDI track on the General MIDI percussion
channel. Steps are 16th notes; each active step is a note held for half a
step. The drum note comes from an explicit ``note_map`` (track index ->
MIDI note), else from keywords in the track name, else ``FALLBACK_NOTE``.
"""

from __future__ import annotations

import math
import os
from typing import List, Mapping, Optional, Tuple

import mido

from .pattern import Pattern
from .structs import STEP_COUNT
from .track import Track

GM_DRUM_CHANNEL = 9  # MIDI channel 10, 0-based
DEFAULT_TICKS_PER_BEAT = 480
DEFAULT_VELOCITY = 100
STEPS_PER_BEAT = 4
FALLBACK_NOTE = 60
MAX_MIDI_TEMPO = 0xFFFFFF  # set_tempo is a 24-bit microseconds-per-beat value

# Checked in order; more specific names come before the generic ones.
GM_DRUM_KEYWORDS: List[Tuple[Tuple[str, ...], int]] = [
    (("hh-open", "open hat", "open hihat", "open hi-hat"), 46),
    (("hh-close", "closed hat", "hihat", "hi-hat", "hh"), 42),
    (("pedal",), 44),
    (("low-tom", "low tom", "lo-tom"), 45),
    (("mid-tom", "mid tom"), 47),
    (("hi-tom", "high tom", "high-tom"), 50),
    (("tom",), 47),
    (("subkick", "sub kick", "sub-kick"), 35),
    (("kick", "bass drum"), 36),
    (("rim", "side stick"), 37),
    (("snare",), 38),
    (("clap",), 39),
    (("crash", "cymbal"), 49),
    (("ride",), 51),
    (("tamb",), 54),
    (("cowbell",), 56),
    (("conga",), 63),
    (("maraca",), 70),
    (("clav",), 75),
    (("shaker",), 82),
]


def note_for_track(track: Track, note_map: Optional[Mapping[int, int]] = None) -> int:
    if note_map is not None and track.index in note_map:
        return note_map[track.index]
    lowered = track.name.lower()
    for keywords, note in GM_DRUM_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return note
    return FALLBACK_NOTE


def _meta_text(text: str) -> str:
    # mido writes meta text as latin-1.
    return text.encode("latin-1", errors="replace").decode("latin-1")


def _track_events(
    track: Track,
    *,
    note: int,
    step_ticks: int,
    bars: int,
    velocity: int,
    channel: int,
) -> mido.MidiTrack:
    gate = max(1, step_ticks // 2)
    events: List[Tuple[int, mido.Message]] = []
    for bar in range(bars):
        for pos in track.active_steps:
            onset = (bar * STEP_COUNT + pos) * step_ticks
            events.append(
                (onset, mido.Message("note_on", channel=channel, note=note, velocity=velocity))
            )
            events.append(
                (onset + gate, mido.Message("note_off", channel=channel, note=note, velocity=0))
            )
    events.sort(key=lambda item: (item[0], 0 if item[1].type == "note_off" else 1))

    lane = mido.MidiTrack()
    lane.append(mido.MetaMessage("track_name", name=_meta_text(track.name), time=0))
    last_tick = 0
    for tick, msg in events:
        msg.time = tick - last_tick
        lane.append(msg)
        last_tick = tick
    return lane


def pattern_to_midi(
    pattern: Pattern,
    *,
    ticks_per_beat: int = DEFAULT_TICKS_PER_BEAT,
    bars: int = 1,
    velocity: int = DEFAULT_VELOCITY,
    channel: int = GM_DRUM_CHANNEL,
    note_map: Optional[Mapping[int, int]] = None,
) -> mido.MidiFile:
    """Build a type-1 MIDI file with a conductor track plus one lane per track."""

    if not math.isfinite(pattern.tempo) or pattern.tempo <= 0:
        raise ValueError(f"cannot export tempo {pattern.tempo!r} to MIDI")
    if bars < 1:
        raise ValueError(f"bars must be >= 1, got {bars}")
    step_ticks = ticks_per_beat // STEPS_PER_BEAT
    if step_ticks < 1:
        raise ValueError(f"ticks_per_beat {ticks_per_beat} is too small for 16th-note steps")

    midi_tempo = mido.bpm2tempo(pattern.tempo)
    if not 0 < midi_tempo <= MAX_MIDI_TEMPO:
        raise ValueError(
            f"cannot export tempo {pattern.tempo!r}: {midi_tempo} us per beat is outside "
            f"the MIDI range 1..{MAX_MIDI_TEMPO}"
        )

    mid = mido.MidiFile(type=1, ticks_per_beat=ticks_per_beat)
    conductor = mido.MidiTrack()
    if pattern.version:
        conductor.append(
            mido.MetaMessage("track_name", name=_meta_text(pattern.version), time=0)
        )
    conductor.append(
        mido.MetaMessage("set_tempo", tempo=midi_tempo, time=0)
    )
    conductor.append(
        mido.MetaMessage("time_signature", numerator=4, denominator=4, time=0)
    )
    mid.tracks.append(conductor)

    for track in pattern.tracks:
        mid.tracks.append(
            _track_events(
                track,
                note=note_for_track(track, note_map),
                step_ticks=step_ticks,
                bars=bars,
                velocity=velocity,
                channel=channel,
            )
        )
    return mid


def write_midi(pattern: Pattern, path: str | os.PathLike[str], **options) -> mido.MidiFile:
    mid = pattern_to_midi(pattern, **options)
    mid.save(os.fspath(path))
    return mid
