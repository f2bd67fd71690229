"""Unit tests for decoding alda parser event descriptors."""

import pytest

from aldanote import attributes
from aldanote.errors import InvalidArgument, UnknownEventType
from aldanote.event_decoder import decode_event, decode_events
from aldanote.event_models import (
    AtMarker,
    Barline,
    Chord,
    Cram,
    Duration,
    EndVoices,
    InstrumentCall,
    Marker,
    Milliseconds,
    Note,
    NoteLength,
    OctaveSet,
    OctaveShift,
    Pitch,
    Rest,
    Voice,
)
from aldanote.stringify import render


def _note(letter: str, accidentals: list[str] | None = None, denominator: int = 4) -> dict:
    return {
        "type": "note",
        "value": {
            "pitch": {"letter": letter, "accidentals": accidentals or []},
            "duration": {"components": [{"denominator": denominator, "dots": 0}]},
            "slurred?": False,
        },
    }


def test_part_declaration() -> None:
    descriptor = {"type": "part-declaration", "value": {"names": ["piano"], "nickname": None}}
    assert decode_event(descriptor) == InstrumentCall(("piano",), None)


def test_note_lowercases_letter_and_keeps_accidentals() -> None:
    assert decode_event(_note("C", ["sharp"], 8)) == Note(
        Pitch("c", ("sharp",)), Duration((NoteLength(8),)), False
    )


def test_note_with_dots_ms_and_slur() -> None:
    descriptor = {
        "type": "note",
        "value": {
            "pitch": {"letter": "E", "accidentals": []},
            "duration": {"components": [{"denominator": 2, "dots": 1}, {"ms": 300}]},
            "slurred?": True,
        },
    }
    decoded = decode_event(descriptor)
    assert decoded == Note(Pitch("e"), Duration((NoteLength(2, 1), Milliseconds(300))), True)
    assert render(decoded) == "e2.~300ms~"


def test_rest() -> None:
    descriptor = {"type": "rest", "value": {"duration": {"components": [{"denominator": 8}]}}}
    assert decode_event(descriptor) == Rest(Duration((NoteLength(8),)))


def test_chord_decodes_members() -> None:
    descriptor = {"type": "chord", "value": {"events": [_note("C"), _note("E"), _note("G")]}}
    decoded = decode_event(descriptor)
    assert isinstance(decoded, Chord)
    assert render(decoded) == "c4 / e4 / g4"


def test_cram() -> None:
    descriptor = {
        "type": "cram",
        "value": {
            "duration": {"components": [{"denominator": 2, "dots": 0}]},
            "events": [_note("E"), _note("F")],
        },
    }
    decoded = decode_event(descriptor)
    assert isinstance(decoded, Cram)
    assert render(decoded) == "{ e4 f4 }2"


@pytest.mark.parametrize(
    ("descriptor", "expected"),
    [
        ({"type": "barline"}, Barline()),
        ({"type": "marker", "value": {"name": "verse"}}, Marker("verse")),
        ({"type": "at-marker", "value": {"name": "verse"}}, AtMarker("verse")),
        ({"type": "voice-marker", "value": {"number": 2}}, Voice(2)),
        ({"type": "voice-group-end-marker"}, EndVoices()),
        ({"type": "attribute-update", "attribute": "octave", "value": 3}, OctaveSet(3)),
        ({"type": "attribute-update", "attribute": "octave", "value": "up"}, OctaveShift("up")),
    ],
)
def test_simple_events(descriptor: dict, expected: object) -> None:
    assert decode_event(descriptor) == expected


def test_invalid_octave_value() -> None:
    with pytest.raises(InvalidArgument):
        decode_event({"type": "attribute-update", "attribute": "octave", "value": "sideways"})


@pytest.mark.parametrize(
    ("attribute", "local", "global_"),
    [
        ("tempo", attributes.tempo, attributes.tempo_global),
        ("volume", attributes.volume, attributes.volume_global),
        ("track-volume", attributes.track_volume, attributes.track_volume_global),
        ("panning", attributes.panning, attributes.panning_global),
        ("quantization", attributes.quantization, attributes.quantization_global),
        ("transposition", attributes.transposition, attributes.transposition_global),
        ("reference-pitch", attributes.reference_pitch, attributes.reference_pitch_global),
    ],
)
def test_attribute_updates(attribute: str, local, global_) -> None:
    local_descriptor = {"type": "attribute-update", "attribute": attribute, "value": 42}
    global_descriptor = {"type": "global-attribute-update", "attribute": attribute, "value": 42}
    assert decode_event(local_descriptor) == local(42)
    assert decode_event(global_descriptor) == global_(42)


def test_key_signature_update() -> None:
    descriptor = {"type": "attribute-update", "attribute": "key-signature", "value": "f+ c+"}
    assert render(decode_event(descriptor)) == '(key-signature "f+ c+")'


def test_global_octave_update() -> None:
    descriptor = {"type": "global-attribute-update", "attribute": "octave", "value": "down"}
    assert render(decode_event(descriptor)) == "(octave! 'down)"


@pytest.mark.parametrize(
    "descriptor",
    [
        {"type": "sandwich"},
        {"type": "attribute-update", "attribute": "loudness", "value": 1},
        {"value": 1},
        "note",
    ],
)
def test_unknown_event_type(descriptor: object) -> None:
    with pytest.raises(UnknownEventType) as excinfo:
        decode_event(descriptor)  # type: ignore[arg-type]
    assert excinfo.value.descriptor == descriptor


def test_unknown_duration_component() -> None:
    descriptor = {"type": "rest", "value": {"duration": {"components": [{"beats": 2}]}}}
    with pytest.raises(UnknownEventType):
        decode_event(descriptor)


def test_decode_events_round_trip_to_text() -> None:
    descriptors = [
        {"type": "part-declaration", "value": {"names": ["piano"]}},
        {"type": "attribute-update", "attribute": "tempo", "value": 90},
        _note("C", denominator=8),
        _note("D", denominator=8),
    ]
    assert render(decode_events(descriptors)) == "piano:\n(tempo 90) c8 d8"
