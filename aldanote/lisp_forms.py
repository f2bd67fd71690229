"""Lisp forms: the alda-lisp fallback representation of events.

A form is built from plain Python values:

- :class:`Symbol` prints bare (``tempo``), :class:`Keyword` prints as
  ``:slur``;
- lists and tuples print as parenthesized expressions;
- dicts print as ``{k v, k v}``;
- strings print double-quoted and escaped; numbers print bare;
- :class:`Quoted` prints its form with a leading ``'`` so that alda-lisp
  treats it as literal data.

Projection does not track which nested sub-forms were quoted data and which
were code. ``Sexp((Symbol("key-sig!"), (Symbol("a"), Symbol("major"))))``
prints as ``(key-sig! (a major))``, which alda-lisp will try to evaluate;
wrap the argument in :class:`Quoted` when it is meant as data.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from aldanote.errors import UnrenderableEvent, UnsupportedVariant
from aldanote.event_models import (
    Duration,
    MidiPitch,
    Milliseconds,
    Note,
    NoteLength,
    Pitch,
    Sexp,
)


@dataclass(frozen=True)
class Symbol:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Keyword:
    name: str

    def __str__(self) -> str:
        return f":{self.name}"


@dataclass(frozen=True)
class Quoted:
    """Marks a form as literal data rather than code to evaluate."""

    form: Any


_STRING_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
}


def _format_string(text: str) -> str:
    return '"' + "".join(_STRING_ESCAPES.get(ch, ch) for ch in text) + '"'


def format_form(form: Any) -> str:
    """
    Print a Lisp form using standard nested-parenthesis notation.

    Raises:
        UnrenderableEvent: If the form contains a value with no printed form.
    """
    if isinstance(form, (Symbol, Keyword)):
        return str(form)
    if isinstance(form, Quoted):
        return "'" + format_form(form.form)
    if isinstance(form, str):
        return _format_string(form)
    # bool before int: True is an int
    if isinstance(form, bool):
        return "true" if form else "false"
    if form is None:
        return "nil"
    if isinstance(form, (int, float)):
        return repr(form)
    if isinstance(form, (list, tuple)):
        return "(" + " ".join(format_form(item) for item in form) + ")"
    if isinstance(form, dict):
        entries = ", ".join(
            f"{format_form(key)} {format_form(value)}" for key, value in form.items()
        )
        return "{" + entries + "}"

    raise UnrenderableEvent(form)


# ── Projectors ──────────────────────────────────────────────────────────────

def _pitch_form(pitch: Pitch) -> tuple[Any, ...]:
    return (
        Symbol("pitch"),
        Keyword(pitch.letter),
        *(Keyword(accidental) for accidental in pitch.accidentals),
    )


def _midi_pitch_form(pitch: MidiPitch) -> tuple[Any, ...]:
    return (Symbol("midi-note"), pitch.note_number)


def _note_length_form(length: NoteLength) -> tuple[Any, ...]:
    if length.dots:
        return (Symbol("note-length"), length.number, {Keyword("dots"): length.dots})
    return (Symbol("note-length"), length.number)


def _milliseconds_form(length: Milliseconds) -> tuple[Any, ...]:
    return (Symbol("ms"), length.number)


def _duration_form(duration: Duration) -> tuple[Any, ...]:
    # A single component stands in for the whole duration, as alda-lisp's
    # ``note`` accepts a bare note-length.
    if len(duration.components) == 1:
        return to_lisp_form(duration.components[0])
    return (Symbol("duration"), *(to_lisp_form(c) for c in duration.components))


def _note_form(note: Note) -> tuple[Any, ...]:
    form: list[Any] = [Symbol("note"), to_lisp_form(note.pitch)]
    if note.duration is not None:
        form.append(to_lisp_form(note.duration))
    if note.slurred:
        form.append(Keyword("slur"))
    return tuple(form)


def _sexp_form(sexp: Sexp) -> Any:
    return sexp.form


LISP_PROJECTORS: dict[type, Callable[[Any], Any]] = {
    Pitch: _pitch_form,
    MidiPitch: _midi_pitch_form,
    NoteLength: _note_length_form,
    Milliseconds: _milliseconds_form,
    Duration: _duration_form,
    Note: _note_form,
    Sexp: _sexp_form,
}


def has_lisp_form(obj: Any) -> bool:
    return type(obj) in LISP_PROJECTORS


def to_lisp_form(obj: Any) -> Any:
    """
    Return the alda-lisp form of an event.

    Raises:
        UnsupportedVariant: If the event type has no Lisp representation.
    """
    projector = LISP_PROJECTORS.get(type(obj))
    if projector is None:
        raise UnsupportedVariant(obj)
    return projector(obj)
