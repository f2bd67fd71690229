"""Data models for alda score events.

Every record is an immutable value: fields that hold several items are stored
as tuples so that two events built from equal arguments compare (and hash)
equal. Rendering lives in :mod:`aldanote.stringify` and
:mod:`aldanote.lisp_forms`; the records themselves carry no behavior.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union


def _materialize(value: Any) -> Any:
    """Turn nested lists and generators into tuples; strings and maps stay whole."""
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping)):
        return tuple(_materialize(item) for item in value)
    return value


def _freeze(obj: Any, name: str) -> None:
    """Store a sequence field of a frozen dataclass as nested tuples."""
    object.__setattr__(obj, name, _materialize(getattr(obj, name)))


@dataclass(frozen=True)
class Pitch:
    """A letter name (``a`` to ``g``) plus zero or more accidentals."""

    letter: str
    accidentals: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _freeze(self, "accidentals")


@dataclass(frozen=True)
class MidiPitch:
    """A pitch given as a MIDI note number. alda has no text syntax for it."""

    note_number: int


@dataclass(frozen=True)
class NoteLength:
    """A note value such as ``4`` (quarter) with optional dots."""

    number: int
    dots: int = 0


@dataclass(frozen=True)
class Milliseconds:
    number: int


@dataclass(frozen=True)
class Duration:
    """Several length components tied together, e.g. ``1~8``."""

    components: tuple[NoteLength | Milliseconds, ...]

    def __post_init__(self) -> None:
        _freeze(self, "components")


DurationLike = Union[Duration, NoteLength, Milliseconds]


@dataclass(frozen=True)
class Note:
    pitch: Pitch | MidiPitch
    duration: DurationLike | None = None
    slurred: bool = False


@dataclass(frozen=True)
class Rest:
    duration: DurationLike | None = None


@dataclass(frozen=True)
class Chord:
    """Notes and rests sounding together; may interleave attribute changes."""

    events: tuple[Any, ...]

    def __post_init__(self) -> None:
        _freeze(self, "events")


@dataclass(frozen=True)
class InstrumentCall:
    """Selects the active instrument(s), e.g. ``piano/trumpet "trumpiano":``."""

    names: tuple[str, ...]
    nickname: str | None = None

    def __post_init__(self) -> None:
        _freeze(self, "names")


@dataclass(frozen=True)
class OctaveSet:
    octave_number: int


@dataclass(frozen=True)
class OctaveShift:
    direction: str  # "up" or "down"


@dataclass(frozen=True)
class Barline:
    pass


@dataclass(frozen=True)
class Marker:
    name: str


@dataclass(frozen=True)
class AtMarker:
    name: str


@dataclass(frozen=True)
class Voice:
    number: int


@dataclass(frozen=True)
class EndVoices:
    pass


@dataclass(frozen=True)
class Cram:
    """Events time-scaled to fit into ``duration`` (or the current one)."""

    duration: DurationLike | None
    events: tuple[Any, ...]

    def __post_init__(self) -> None:
        _freeze(self, "events")


@dataclass(frozen=True)
class SetVariable:
    name: str
    events: tuple[Any, ...]

    def __post_init__(self) -> None:
        _freeze(self, "events")


@dataclass(frozen=True)
class GetVariable:
    name: str


@dataclass(frozen=True)
class Sexp:
    """Inline alda-lisp code, printed verbatim as a parenthesized form."""

    form: Any

    def __post_init__(self) -> None:
        _freeze(self, "form")


#: Every event variant. The stringifier checks at import time that each one
#: has a text renderer or a Lisp projector.
EVENT_TYPES: tuple[type, ...] = (
    Pitch,
    MidiPitch,
    NoteLength,
    Milliseconds,
    Duration,
    Note,
    Rest,
    Chord,
    InstrumentCall,
    OctaveSet,
    OctaveShift,
    Barline,
    Marker,
    AtMarker,
    Voice,
    EndVoices,
    Cram,
    SetVariable,
    GetVariable,
    Sexp,
)


def is_event(obj: Any) -> bool:
    return type(obj) in EVENT_TYPES
