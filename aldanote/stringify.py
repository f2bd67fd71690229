"""Render events and sequences of events as alda code."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Callable

from aldanote.errors import InvalidArgument, UnrenderableEvent
from aldanote.event_models import (
    EVENT_TYPES,
    AtMarker,
    Barline,
    Chord,
    Cram,
    Duration,
    EndVoices,
    GetVariable,
    InstrumentCall,
    Marker,
    Milliseconds,
    MidiPitch,
    Note,
    NoteLength,
    OctaveSet,
    OctaveShift,
    Pitch,
    Rest,
    SetVariable,
    Sexp,
    Voice,
    is_event,
)
from aldanote.lisp_forms import LISP_PROJECTORS, Symbol, format_form, has_lisp_form, to_lisp_form

TIE = "~"
SLUR = "~"
CHORD_SEPARATOR = "/"
EQUALS = "="

ACCIDENTAL_MARKERS: dict[str, str] = {"sharp": "+", "flat": "-", "natural": "_"}
OCTAVE_SHIFT_MARKERS: dict[str, str] = {"up": ">", "down": "<"}

# Events that open a new section of the score and so sit on their own line.
_SECTION_EVENTS: tuple[type, ...] = (InstrumentCall, SetVariable)


def _is_sequence(obj: Any) -> bool:
    return (
        isinstance(obj, Iterable)
        and not isinstance(obj, (str, bytes, dict))
        and not is_event(obj)
    )


def _is_form(items: list[Any]) -> bool:
    """A sequence headed by a symbol is inline Lisp, not a list of events."""
    return bool(items) and isinstance(items[0], Symbol)


def flatten(items: Iterable[Any]) -> list[Any]:
    """
    Splice nested sequences into one flat list of renderable items.

    Strings, events and Lisp forms are kept whole.
    """
    flat: list[Any] = []
    for item in items:
        if _is_sequence(item):
            nested = list(item)
            if _is_form(nested):
                flat.append(nested)
            else:
                flat.extend(flatten(nested))
        else:
            flat.append(item)
    return flat


def _separator(left: Any, right: Any) -> str:
    if isinstance(left, _SECTION_EVENTS) or isinstance(right, _SECTION_EVENTS):
        return "\n"
    return " "


def _spaced(items: list[Any]) -> str:
    parts: list[str] = []
    for index, item in enumerate(items):
        if index:
            parts.append(_separator(items[index - 1], item))
        parts.append(render(item))
    return "".join(parts)


def render(value: Any) -> str:
    """
    Convert an event, a string, or an arbitrarily nested sequence of them into
    a string of alda code.

    Strings pass through unchanged. A sequence whose first item is a
    :class:`~aldanote.lisp_forms.Symbol` is printed as inline Lisp. Any other
    sequence is flattened and joined with spaces, except that instrument calls
    and variable definitions are set on their own lines.

    Example:

        render([InstrumentCall(["piano"]), Note(Pitch("c")), Note(Pitch("d"))])
        # "piano:\\nc d"

    Raises:
        UnrenderableEvent: If any item has neither a text nor a Lisp form.
    """
    if isinstance(value, str):
        return value
    if _is_sequence(value):
        items = list(value)
        if _is_form(items):
            return format_form(items)
        return _spaced(flatten(items))
    return _render_event(value)


def _render_event(event: Any) -> str:
    renderer = TEXT_RENDERERS.get(type(event))
    if renderer is not None:
        return renderer(event)
    if has_lisp_form(event):
        return format_form(to_lisp_form(event))
    raise UnrenderableEvent(event)


# ── Per-variant renderers ───────────────────────────────────────────────────

def _pitch_text(pitch: Pitch) -> str:
    markers = []
    for accidental in pitch.accidentals:
        if accidental not in ACCIDENTAL_MARKERS:
            raise InvalidArgument("Invalid accidental", accidental)
        markers.append(ACCIDENTAL_MARKERS[accidental])
    return pitch.letter + "".join(markers)


def _note_length_text(length: NoteLength) -> str:
    return f"{length.number}{'.' * length.dots}"


def _milliseconds_text(length: Milliseconds) -> str:
    return f"{length.number}ms"


def _duration_text(duration: Duration) -> str:
    return TIE.join(render(component) for component in duration.components)


def _note_text(note: Note) -> str:
    if isinstance(note.pitch, MidiPitch):
        return format_form(to_lisp_form(note))
    text = render(note.pitch)
    if note.duration is not None:
        text += render(note.duration)
    if note.slurred:
        text += SLUR
    return text


def _rest_text(rest: Rest) -> str:
    return "r" + (render(rest.duration) if rest.duration is not None else "")


def _chord_text(chord: Chord) -> str:
    items: list[Any] = []
    for index, event in enumerate(flatten(chord.events)):
        if index and isinstance(event, (Note, Rest)):
            items.append(CHORD_SEPARATOR)
        items.append(event)
    return _spaced(items)


def _instrument_call_text(call: InstrumentCall) -> str:
    nickname = f' "{call.nickname}"' if call.nickname else ""
    return "/".join(call.names) + nickname + ":"


def _octave_shift_text(shift: OctaveShift) -> str:
    if shift.direction not in OCTAVE_SHIFT_MARKERS:
        raise InvalidArgument("Invalid octave direction", shift.direction)
    return OCTAVE_SHIFT_MARKERS[shift.direction]


def _cram_text(cram: Cram) -> str:
    closing = "}" + (render(cram.duration) if cram.duration is not None else "")
    return render(["{", cram.events, closing])


def _set_variable_text(definition: SetVariable) -> str:
    return render([definition.name, EQUALS, definition.events])


TEXT_RENDERERS: dict[type, Callable[[Any], str]] = {
    Pitch: _pitch_text,
    NoteLength: _note_length_text,
    Milliseconds: _milliseconds_text,
    Duration: _duration_text,
    Note: _note_text,
    Rest: _rest_text,
    Chord: _chord_text,
    InstrumentCall: _instrument_call_text,
    OctaveSet: lambda octave: f"o{octave.octave_number}",
    OctaveShift: _octave_shift_text,
    Barline: lambda _: "|",
    Marker: lambda marker: f"%{marker.name}",
    AtMarker: lambda marker: f"@{marker.name}",
    Voice: lambda voice: f"V{voice.number}:",
    EndVoices: lambda _: "V0:",
    Cram: _cram_text,
    SetVariable: _set_variable_text,
    GetVariable: lambda variable: variable.name,
    Sexp: lambda sexp: format_form(sexp.form),
}


def _check_renderers() -> None:
    """Fail at import if an event type has neither a text nor a Lisp form."""
    missing = [
        event_type.__name__
        for event_type in EVENT_TYPES
        if event_type not in TEXT_RENDERERS and event_type not in LISP_PROJECTORS
    ]
    if missing:
        raise TypeError(f"No rendering registered for: {', '.join(missing)}")


_check_renderers()
