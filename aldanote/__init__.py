"""aldanote: build alda music scores from Python."""

__version__ = "0.1.0"

from aldanote.attributes import attribute
from aldanote.builders import (
    at_marker,
    barline,
    chord,
    cram,
    duration,
    end_voices,
    get_variable,
    marker,
    midi_note,
    ms,
    note,
    note_length,
    octave,
    part,
    pause,
    pitch,
    set_variable,
    voice,
)
from aldanote.errors import (
    AldaNoteError,
    CommandFailed,
    InvalidArgument,
    ParseFailure,
    ReplConnectionError,
    UnknownEventType,
    UnrenderableEvent,
    UnsupportedVariant,
)
from aldanote.lisp_forms import Keyword, Quoted, Symbol, format_form, to_lisp_form
from aldanote.player import AldaClient, ReplSession
from aldanote.stringify import render
