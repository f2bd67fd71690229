"""Map event descriptors from ``alda parse --output events`` back to events.

The parser emits JSON objects such as::

    {"type": "note",
     "value": {"pitch": {"letter": "C", "accidentals": ["sharp"]},
               "duration": {"components": [{"denominator": 4, "dots": 0}]},
               "slurred?": false}}

    {"type": "attribute-update", "attribute": "tempo", "value": 120}

Each descriptor is dispatched on its ``(type, attribute)`` pair.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

from aldanote import attributes
from aldanote.builders import octave
from aldanote.errors import InvalidArgument, UnknownEventType
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
    Pitch,
    Rest,
    Voice,
)

Descriptor = Mapping[str, Any]

# Attributes the parser reports; the octave attribute is handled separately.
DECODED_ATTRIBUTES: tuple[str, ...] = (
    "tempo",
    "volume",
    "track-volume",
    "panning",
    "quantization",
    "key-signature",
    "transposition",
    "reference-pitch",
)


def _value(descriptor: Descriptor) -> Any:
    return descriptor.get("value")


def _decode_duration(value: Mapping[str, Any] | None) -> Duration | None:
    if not value:
        return None
    components: list[NoteLength | Milliseconds] = []
    for component in value.get("components", []):
        if "denominator" in component:
            components.append(NoteLength(component["denominator"], component.get("dots") or 0))
        elif "ms" in component:
            components.append(Milliseconds(component["ms"]))
        else:
            raise UnknownEventType(value)
    return Duration(components)


def _decode_part(descriptor: Descriptor) -> InstrumentCall:
    value = _value(descriptor)
    return InstrumentCall(tuple(value["names"]), value.get("nickname"))


def _decode_note(descriptor: Descriptor) -> Note:
    value = _value(descriptor)
    pitch = value["pitch"]
    return Note(
        Pitch(pitch["letter"].lower(), tuple(pitch.get("accidentals") or ())),
        _decode_duration(value.get("duration")),
        bool(value.get("slurred?", value.get("slurred", False))),
    )


def _decode_rest(descriptor: Descriptor) -> Rest:
    return Rest(_decode_duration(_value(descriptor).get("duration")))


def _decode_chord(descriptor: Descriptor) -> Chord:
    return Chord(tuple(decode_events(_value(descriptor)["events"])))


def _decode_cram(descriptor: Descriptor) -> Cram:
    value = _value(descriptor)
    return Cram(
        _decode_duration(value.get("duration")),
        tuple(decode_events(value.get("events", []))),
    )


def _decode_octave(descriptor: Descriptor) -> Any:
    value = _value(descriptor)
    if isinstance(value, (int, str)):
        return octave(value)
    raise InvalidArgument("Invalid octave value", value)


def _attribute_decoder(lisp_name: str) -> Callable[[Descriptor], Any]:
    constructor = attributes.attribute(lisp_name)

    def decode(descriptor: Descriptor) -> Any:
        return constructor(_value(descriptor))

    return decode


DECODERS: dict[tuple[str, str | None], Callable[[Descriptor], Any]] = {
    ("part-declaration", None): _decode_part,
    ("note", None): _decode_note,
    ("rest", None): _decode_rest,
    ("chord", None): _decode_chord,
    ("cram", None): _decode_cram,
    ("barline", None): lambda _: Barline(),
    ("marker", None): lambda d: Marker(_value(d)["name"]),
    ("at-marker", None): lambda d: AtMarker(_value(d)["name"]),
    ("voice-marker", None): lambda d: Voice(_value(d)["number"]),
    ("voice-group-end-marker", None): lambda _: EndVoices(),
    ("attribute-update", "octave"): _decode_octave,
    ("global-attribute-update", "octave"): _attribute_decoder("octave!"),
}
for _name in DECODED_ATTRIBUTES:
    DECODERS[("attribute-update", _name)] = _attribute_decoder(_name)
    DECODERS[("global-attribute-update", _name)] = _attribute_decoder(_name + "!")


def decode_event(descriptor: Descriptor) -> Any:
    """
    Convert one parser event descriptor into an event record.

    Raises:
        UnknownEventType: If the ``(type, attribute)`` pair has no decoder.
    """
    if not isinstance(descriptor, Mapping):
        raise UnknownEventType(descriptor)
    key = (descriptor.get("type"), descriptor.get("attribute"))
    decoder = DECODERS.get(key)
    if decoder is None:
        raise UnknownEventType(descriptor)
    return decoder(descriptor)


def decode_events(descriptors: Iterable[Descriptor]) -> list[Any]:
    return [decode_event(descriptor) for descriptor in descriptors]
