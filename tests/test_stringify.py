"""Unit tests for rendering events as alda code."""

import pytest

from aldanote.builders import (
    at_marker,
    barline,
    chord,
    cram,
    end_voices,
    get_variable,
    marker,
    note,
    note_length,
    octave,
    part,
    pause,
    pitch,
    set_variable,
    voice,
)
from aldanote.errors import UnrenderableEvent
from aldanote.event_models import (
    EVENT_TYPES,
    Cram,
    Duration,
    InstrumentCall,
    MidiPitch,
    Milliseconds,
    Note,
    NoteLength,
    Pitch,
    Rest,
    Sexp,
)
from aldanote.lisp_forms import LISP_PROJECTORS, Symbol
from aldanote.stringify import TEXT_RENDERERS, flatten, render


def _notes(letters: str) -> list[Note]:
    return [Note(Pitch(letter)) for letter in letters]


def test_instrument_call_starts_its_own_line() -> None:
    events = [InstrumentCall(["piano"]), Note(Pitch("c")), Note(Pitch("d"))]
    assert render(events) == "piano:\nc d"


def test_duration_components_are_tied() -> None:
    tied = Duration([NoteLength(4, dots=2), NoteLength(8), Milliseconds(456), NoteLength(6)])
    assert render(tied) == "4..~8~456ms~6"


def test_cram_wraps_events_in_braces() -> None:
    assert render(Cram(NoteLength(2), _notes("efefe"))) == "{ e f e f e }2"


def test_cram_without_duration() -> None:
    assert render(cram(None, *_notes("efg"))) == "{ e f g }"


def test_nested_crams() -> None:
    inner = cram(None, *_notes("efg"))
    outer = cram(note_length(1), note(pitch("c")), note(pitch("d")), inner, *_notes("ab"))
    assert render([part("piano"), octave(4), outer, octave("up"), note(pitch("c"))]) == (
        "piano:\no4 { c d { e f g } a b }1 > c"
    )


def test_midi_note_falls_back_to_lisp() -> None:
    midi = Note(MidiPitch(42), Duration([NoteLength(8)]))
    assert render(midi) == "(note (midi-note 42) (note-length 8))"


def test_midi_pitch_alone_renders_as_lisp() -> None:
    assert render(MidiPitch(60)) == "(midi-note 60)"


def test_midi_note_inside_sequence() -> None:
    assert render([note(pitch("c")), Note(MidiPitch(62))]) == "c (note (midi-note 62))"


def test_pitch_accidentals_in_order() -> None:
    assert render(note(pitch("c", "sharp", "sharp"))) == "c++"
    assert render(note(pitch("d", "flat"))) == "d-"
    assert render(note(pitch("e", "natural", "flat"))) == "e_-"


@pytest.mark.parametrize("letter", list("abcdefg"))
def test_note_text_starts_with_letter(letter: str) -> None:
    assert render(Note(Pitch(letter, ("sharp", "flat")))).startswith(letter + "+-")


def test_note_with_duration_and_slur() -> None:
    tied = Duration([NoteLength(1), NoteLength(8)])
    assert render(Note(Pitch("f"), tied, slurred=True)) == "f1~8~"


def test_note_with_bare_note_length() -> None:
    assert render(note(pitch("f"), note_length(8))) == "f8"
    assert render(note(pitch("c"), Milliseconds(1005))) == "c1005ms"


def test_rests() -> None:
    assert render(pause()) == "r"
    assert render(pause(note_length(2))) == "r2"
    assert render(Rest(Duration([NoteLength(4), Milliseconds(20)]))) == "r4~20ms"


def test_flattening_is_transparent() -> None:
    a, b, c, d, e = _notes("abcde")
    assert render([a, [b, [c, d]], e]) == render([a, b, c, d, e]) == "a b c d e"


def test_flatten_accepts_generators() -> None:
    generated = (note(pitch(letter)) for letter in "ceg")
    assert render([part("piano"), generated]) == "piano:\nc e g"


def test_flatten_keeps_lisp_forms_whole() -> None:
    form = [Symbol("tempo"), 120]
    assert flatten([note(pitch("c")), [form, note(pitch("d"))]]) == [
        note(pitch("c")),
        form,
        note(pitch("d")),
    ]


def test_sequence_headed_by_symbol_is_lisp() -> None:
    assert render([Symbol("tempo!"), 90]) == "(tempo! 90)"


def test_strings_pass_through() -> None:
    assert render("o4 c8 d e") == "o4 c8 d e"
    assert render([part("piano"), "o4 c8 d e f", marker("here"), "g2"]) == (
        "piano:\no4 c8 d e f %here g2"
    )


def test_markers_across_parts() -> None:
    events = [
        part("piano"),
        "o4 c8 d e f",
        marker("here"),
        "g2",
        part("electric-bass"),
        at_marker("here"),
        "o2 g2",
    ]
    assert render(events) == "piano:\no4 c8 d e f %here g2\nelectric-bass:\n@here o2 g2"


def test_chord_separators() -> None:
    assert render(chord(*_notes("ceg"))) == "c / e / g"


def test_chord_attribute_changes_are_not_separated() -> None:
    events = [part("piano"), chord(note(pitch("e")), note(pitch("g")), octave("up"), note(pitch("c")))]
    assert render(events) == "piano:\ne / g > / c"


def test_chord_separator_count_ignores_durations() -> None:
    members = [
        note(pitch("c"), Duration([NoteLength(1), NoteLength(8)])),
        pause(note_length(4)),
        note(pitch("e")),
        note(pitch("g"), note_length(2, dots=1)),
    ]
    assert render(chord(*members)).count("/") == len(members) - 1


def test_chord_members_may_be_nested_lists() -> None:
    assert render(chord(note(pitch("c")), _notes("eg"))) == "c / e / g"


def test_voices() -> None:
    events = [
        part("piano"),
        voice(1),
        octave(4),
        note(pitch("c"), note_length(8)),
        note(pitch("d")),
        voice(2),
        octave(3),
        note(pitch("g"), note_length(4, dots=1)),
        end_voices(),
        octave(3),
        chord(note(pitch("f"), note_length(1)), octave("up"), note(pitch("c"))),
    ]
    assert render(events) == "piano:\nV1: o4 c8 d V2: o3 g4. V0: o3 f1 > / c"


def test_barline() -> None:
    assert render([note(pitch("b")), octave("up"), barline(), note(pitch("c"))]) == "b > | c"


def test_set_variable_is_on_its_own_line() -> None:
    riff = set_variable("riffA", *_notes("dfa"))
    assert render(riff) == "riffA = d f a"
    assert render([riff, part("piano"), get_variable("riffA")]) == (
        "riffA = d f a\npiano:\nriffA"
    )


def test_newline_on_either_side_of_section_events() -> None:
    events = [note(pitch("c")), set_variable("x", note(pitch("d"))), note(pitch("e"))]
    assert render(events) == "c\nx = d\ne"


def test_instrument_call_with_nickname() -> None:
    assert render(part({"names": ["piano", "trumpet"], "nickname": "trumpiano"})) == (
        'piano/trumpet "trumpiano":'
    )


def test_empty_sequence_renders_empty() -> None:
    assert render([]) == ""


def test_sexp_event() -> None:
    assert render(Sexp((Symbol("tempo"), 120))) == "(tempo 120)"


@pytest.mark.parametrize("value", [42, None, 1.5, {"type": "note"}, Symbol("x")])
def test_unrenderable_values_fail_loudly(value: object) -> None:
    with pytest.raises(UnrenderableEvent):
        render([note(pitch("c")), value])


def test_every_event_type_has_a_rendering() -> None:
    for event_type in EVENT_TYPES:
        assert event_type in TEXT_RENDERERS or event_type in LISP_PROJECTORS
