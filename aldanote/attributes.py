"""Attribute changes emitted as inline alda-lisp.

alda has no dedicated text syntax for most attributes, so each one is emitted
as a Lisp call. :data:`ATTRIBUTES` lists them; for each entry a local
constructor (``tempo(120)`` -> ``(tempo 120)``) and a global one
(``tempo_global(120)`` -> ``(tempo! 120)``) are generated at import time.

Attributes whose arguments are data rather than code (key signatures, the
global octave) quote their compound arguments:

    key_signature(["a", "major"])         # (key-signature '(a major))
    key_signature("f+ c+ g+")             # (key-signature "f+ c+ g+")
    octave_global("up")                   # (octave! 'up)

Other attributes print their arguments as given. A compound argument to one
of those is not quoted, so ``tempo(["a"])`` prints as ``(tempo ("a"))``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from aldanote.errors import InvalidArgument
from aldanote.event_models import Sexp
from aldanote.lisp_forms import Keyword, Quoted, Symbol

GLOBAL_SUFFIX = "_global"


@dataclass(frozen=True)
class AttributeSpec:
    """
    One row of the attribute table.

    Attributes:
        name:          alda-lisp name of the local form, e.g. ``track-volume``.
        has_local:     Generate the local constructor.
        has_global:    Generate the global constructor (``name!`` in Lisp).
        literal:       Quote compound/symbol arguments as literal data.
        symbol_values: Strings that are passed as quoted symbols, not strings.
    """

    name: str
    has_local: bool = True
    has_global: bool = True
    literal: bool = False
    symbol_values: frozenset[str] = frozenset()


ATTRIBUTES: tuple[AttributeSpec, ...] = (
    AttributeSpec("tempo"),
    AttributeSpec("metric-modulation"),
    AttributeSpec("quant"),
    AttributeSpec("quantize"),
    AttributeSpec("quantization"),
    AttributeSpec("vol"),
    AttributeSpec("volume"),
    AttributeSpec("track-vol"),
    AttributeSpec("track-volume"),
    AttributeSpec("pan"),
    AttributeSpec("panning"),
    AttributeSpec("transpose"),
    AttributeSpec("transposition"),
    AttributeSpec("tuning-constant"),
    AttributeSpec("reference-pitch"),
    AttributeSpec("key-signature", literal=True),
    AttributeSpec("key-sig", literal=True),
    AttributeSpec("set-duration", has_global=False),
    AttributeSpec("set-note-length", has_global=False),
    # local octave changes have text syntax (o3, >, <); see builders.octave
    AttributeSpec(
        "octave",
        has_local=False,
        literal=True,
        symbol_values=frozenset({"up", "down"}),
    ),
)


def _as_data(value: Any) -> Any:
    """Strings nested inside quoted data are symbols: ("a" "major") -> (a major)."""
    if isinstance(value, str):
        return Symbol(value)
    if isinstance(value, (list, tuple)):
        return tuple(_as_data(item) for item in value)
    if isinstance(value, Mapping):
        # map keys are keywords: {"f": ["sharp"]} -> {:f (sharp)}
        return {
            Keyword(key) if isinstance(key, str) else _as_data(key): _as_data(item)
            for key, item in value.items()
        }
    return value


def _literal_argument(value: Any, symbol_values: frozenset[str]) -> Any:
    if isinstance(value, str):
        return Quoted(Symbol(value)) if value in symbol_values else value
    if isinstance(value, Symbol):
        return Quoted(value)
    if isinstance(value, (list, tuple, Mapping)):
        return Quoted(_as_data(value))
    return value


def make_attribute_constructor(
    lisp_name: str,
    literal: bool = False,
    symbol_values: frozenset[str] = frozenset(),
) -> Callable[..., Sexp]:
    """Build a function that emits the inline Lisp call ``(lisp_name args...)``."""
    head = Symbol(lisp_name)

    def constructor(*args: Any) -> Sexp:
        if literal:
            args = tuple(_literal_argument(arg, symbol_values) for arg in args)
        return Sexp((head, *args))

    constructor.__doc__ = f"Emits inline Lisp code ``({lisp_name} ...)``."
    return constructor


def python_name(lisp_name: str) -> str:
    """``track-volume!`` -> ``track_volume_global``."""
    base = lisp_name.rstrip("!").replace("-", "_")
    return base + GLOBAL_SUFFIX if lisp_name.endswith("!") else base


def _build_registry() -> dict[str, Callable[..., Sexp]]:
    registry: dict[str, Callable[..., Sexp]] = {}
    for spec in ATTRIBUTES:
        lisp_names = []
        if spec.has_local:
            lisp_names.append(spec.name)
        if spec.has_global:
            lisp_names.append(spec.name + "!")
        for lisp_name in lisp_names:
            constructor = make_attribute_constructor(
                lisp_name, literal=spec.literal, symbol_values=spec.symbol_values
            )
            constructor.__name__ = constructor.__qualname__ = python_name(lisp_name)
            registry[lisp_name] = constructor
    return registry


#: Constructors keyed by alda-lisp name (``"tempo"``, ``"tempo!"``, ...).
REGISTRY: dict[str, Callable[..., Sexp]] = _build_registry()


def attribute(lisp_name: str) -> Callable[..., Sexp]:
    """
    Look up an attribute constructor by its alda-lisp name.

    Raises:
        InvalidArgument: If no attribute has that name.
    """
    try:
        return REGISTRY[lisp_name]
    except KeyError:
        raise InvalidArgument("Unknown attribute", lisp_name) from None


# ── Constructors ────────────────────────────────────────────────────────────

tempo = REGISTRY["tempo"]
tempo_global = REGISTRY["tempo!"]
metric_modulation = REGISTRY["metric-modulation"]
metric_modulation_global = REGISTRY["metric-modulation!"]
quant = REGISTRY["quant"]
quant_global = REGISTRY["quant!"]
quantize = REGISTRY["quantize"]
quantize_global = REGISTRY["quantize!"]
quantization = REGISTRY["quantization"]
quantization_global = REGISTRY["quantization!"]
vol = REGISTRY["vol"]
vol_global = REGISTRY["vol!"]
volume = REGISTRY["volume"]
volume_global = REGISTRY["volume!"]
track_vol = REGISTRY["track-vol"]
track_vol_global = REGISTRY["track-vol!"]
track_volume = REGISTRY["track-volume"]
track_volume_global = REGISTRY["track-volume!"]
pan = REGISTRY["pan"]
pan_global = REGISTRY["pan!"]
panning = REGISTRY["panning"]
panning_global = REGISTRY["panning!"]
transpose = REGISTRY["transpose"]
transpose_global = REGISTRY["transpose!"]
transposition = REGISTRY["transposition"]
transposition_global = REGISTRY["transposition!"]
tuning_constant = REGISTRY["tuning-constant"]
tuning_constant_global = REGISTRY["tuning-constant!"]
reference_pitch = REGISTRY["reference-pitch"]
reference_pitch_global = REGISTRY["reference-pitch!"]
key_signature = REGISTRY["key-signature"]
key_signature_global = REGISTRY["key-signature!"]
key_sig = REGISTRY["key-sig"]
key_sig_global = REGISTRY["key-sig!"]
set_duration = REGISTRY["set-duration"]
set_note_length = REGISTRY["set-note-length"]
octave_global = REGISTRY["octave!"]

__all__ = [
    "ATTRIBUTES",
    "AttributeSpec",
    "REGISTRY",
    "attribute",
    "make_attribute_constructor",
    "python_name",
    *(constructor.__name__ for constructor in REGISTRY.values()),
]
