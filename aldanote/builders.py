"""Constructors for alda score events.

Each function returns an immutable event from :mod:`aldanote.event_models`.
Pass the events (or nested lists of them, or raw strings of alda code) to
:func:`aldanote.stringify.render` to get alda code.

Examples:

    render([
        part("piano"),
        octave(4),
        chord(note(pitch("c"), note_length(1)), note(pitch("e", "flat")), note(pitch("g"))),
    ])
    # "piano:\\no4 c1 / e- / g"
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from aldanote.errors import InvalidArgument, ParseFailure
from aldanote.event_models import (
    AtMarker,
    Barline,
    Chord,
    Cram,
    Duration,
    DurationLike,
    EndVoices,
    GetVariable,
    InstrumentCall,
    Marker,
    MidiPitch,
    Milliseconds,
    Note,
    NoteLength,
    OctaveSet,
    OctaveShift,
    Pitch,
    Rest,
    SetVariable,
    Voice,
)
from aldanote.lisp_forms import Symbol

LETTERS = frozenset("abcdefg")
ACCIDENTALS = frozenset({"sharp", "flat", "natural"})
OCTAVE_DIRECTIONS = frozenset({"up", "down"})

# name(/name)* followed by an optional quoted nickname and an optional colon
_INSTRUMENT_CALL_RE = re.compile(
    r"([a-zA-Z0-9._-]+(?:/[a-zA-Z0-9._-]+)*)(?:\s+['\"]([a-zA-Z0-9_/-]+)['\"])?:?"
)


def pitch(letter: str, *accidentals: str) -> Pitch:
    """
    Return the pitch component of a note, e.g. ``pitch("c", "sharp")`` (``c+``).

    Raises:
        InvalidArgument: If the letter is not a-g or an accidental is unknown.
    """
    normalized = str(letter).lower()
    if normalized not in LETTERS:
        raise InvalidArgument("Invalid pitch letter", letter)
    for accidental in accidentals:
        if accidental not in ACCIDENTALS:
            raise InvalidArgument("Invalid accidental", accidental)
    return Pitch(normalized, accidentals)


def midi_note(note_number: int) -> MidiPitch:
    """
    Return a pitch expressed as a MIDI note number.

    alda has no text syntax for MIDI note numbers, so a note built with one
    renders as alda-lisp: ``(note (midi-note 42) (note-length 8))``.
    """
    return MidiPitch(note_number)


def note_length(number: int, dots: int = 0) -> NoteLength:
    """A note length component: ``note_length(4, dots=2)`` renders as ``4..``."""
    return NoteLength(number, dots)


def ms(number: int) -> Milliseconds:
    return Milliseconds(number)


def duration(*components: NoteLength | Milliseconds) -> Duration:
    """Tie several length components together: ``8.~16~250ms``."""
    return Duration(components)


def note(
    pitch: Pitch | MidiPitch,
    duration: DurationLike | None = None,
    slur: bool = False,
) -> Note:
    """
    Play a note. Without a duration, the instrument's current one is used.

    When ``slur`` is true a trailing ``~`` is added so the note is held for
    its full value.
    """
    return Note(pitch, duration, bool(slur))


def pause(duration: DurationLike | None = None) -> Rest:
    """Rest for ``duration``, or for the instrument's current duration."""
    return Rest(duration)


def chord(*events: Any) -> Chord:
    """Notes and rests played at once; attribute changes may sit between them."""
    return Chord(events)


def _parse_instrument_call(text: str) -> InstrumentCall:
    match = _INSTRUMENT_CALL_RE.fullmatch(text.strip())
    if match is None:
        raise ParseFailure("Failed to parse instrument call", text)
    names, nickname = match.groups()
    return InstrumentCall(tuple(names.split("/")), nickname)


def part(instrument_call: str | Mapping[str, Any] | InstrumentCall) -> InstrumentCall:
    """
    Set the current instrument(s).

    Accepts either a mapping with ``names`` and an optional ``nickname``, or
    alda instrument-call text such as ``"piano/trumpet 'trumpiano'"`` (single
    or double quotes around the nickname, trailing colon optional).

    Raises:
        ParseFailure: If the text is not a valid instrument call.
        InvalidArgument: If the value is neither text nor a mapping.
    """
    if isinstance(instrument_call, InstrumentCall):
        return instrument_call
    if isinstance(instrument_call, str):
        return _parse_instrument_call(instrument_call)
    if isinstance(instrument_call, Mapping):
        names = instrument_call.get("names")
        if not names or isinstance(names, str):
            raise InvalidArgument("Instrument call needs a list of names", instrument_call)
        return InstrumentCall(tuple(names), instrument_call.get("nickname"))
    raise InvalidArgument("Invalid instrument call", instrument_call)


def octave(value: int | str | Symbol) -> OctaveSet | OctaveShift:
    """
    Set the current octave (``o4``) or shift it up (``>``) or down (``<``).

    Raises:
        InvalidArgument: If ``value`` is not a number, ``"up"`` or ``"down"``.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return OctaveSet(value)
    direction = value.name if isinstance(value, Symbol) else value
    if isinstance(direction, str) and direction in OCTAVE_DIRECTIONS:
        return OctaveShift(direction)
    raise InvalidArgument("Invalid octave value", value)


def barline() -> Barline:
    return Barline()


def marker(name: str) -> Marker:
    """Place a marker at the current offset (``%name``)."""
    return Marker(name)


def at_marker(name: str) -> AtMarker:
    """Jump the active instruments to a marker (``@name``)."""
    return AtMarker(name)


def voice(number: int) -> Voice:
    return Voice(number)


def end_voices() -> EndVoices:
    return EndVoices()


def cram(duration: DurationLike | None, *events: Any) -> Cram:
    """Fit ``events`` into ``duration``: ``{ c d e }2``."""
    return Cram(duration, events)


def set_variable(name: str, *events: Any) -> SetVariable:
    """Define ``events`` under a name: ``riffA = d f a``."""
    return SetVariable(name, events)


def get_variable(name: str) -> GetVariable:
    return GetVariable(name)
