"""
Bird parameter model.

A BirdParams record holds the 22 named inputs of the bird (beak, head,
belly, bottom, tail, base cut). Ranges are advisory: hosts clamp slider
values to them, the generators accept anything finite.

Hosts bind their widgets through the reflection table FIELD_SPECS rather
than through per-field code:

    for spec in iter_fields("Tail"):
        slider(spec.label, spec.minimum, spec.maximum, spec.get(params))
    params = set_value(params, ParamField.TAIL_PITCH, 55.0)

Records are immutable; an edit produces a new record.
"""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class ParamField(Enum):
    """One member per BirdParams field; the value is the field name."""
    BEAK_LENGTH = "beak_length"
    BEAK_SIZE = "beak_size"
    BEAK_WIDTH = "beak_width"
    BEAK_ROUNDNESS = "beak_roundness"
    HEAD_SIZE = "head_size"
    HEAD_TO_BELLY = "head_to_belly"
    EYE_SIZE = "eye_size"
    HEAD_LATERAL_OFFSET = "head_lateral_offset"
    HEAD_LEVEL = "head_level"
    HEAD_YAW = "head_yaw"
    HEAD_PITCH = "head_pitch"
    BELLY_LENGTH = "belly_length"
    BELLY_SIZE = "belly_size"
    BELLY_FAT = "belly_fat"
    BELLY_TO_BOTTOM = "belly_to_bottom"
    BOTTOM_SIZE = "bottom_size"
    TAIL_LENGTH = "tail_length"
    TAIL_WIDTH = "tail_width"
    TAIL_YAW = "tail_yaw"
    TAIL_PITCH = "tail_pitch"
    TAIL_ROUNDNESS = "tail_roundness"
    BASE_FLAT = "base_flat"

    @classmethod
    def from_name(cls, name: str) -> "ParamField":
        """Look up a field by its record attribute name (e.g. "tail_pitch")."""
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown bird parameter: {name!r}") from None


@dataclass(frozen=True)
class BirdParams:
    """
    Parameters for one bird. Lengths are in model units, angles in degrees,
    ratios in percent.
    """
    # Beak
    beak_length: float = 15.0  # length of the beak
    beak_size: float = 100.0  # ratio relative to the head size
    beak_width: float = 5.0  # width of the beak tip (0 is pointy)
    beak_roundness: float = 10.0  # shape of the beak tip (lowest is flat)

    # Head
    head_size: float = 22.0  # head diameter
    head_to_belly: float = 32.0  # horizontal distance from head to main body
    eye_size: float = 5.0
    head_lateral_offset: float = 4.0
    head_level: float = 32.0  # head vertical height
    head_yaw: float = 10.0  # horizontal rotation
    head_pitch: float = 9.0  # vertical rotation (positive is upwards)

    # Belly
    belly_length: float = 60.0  # length of the front body
    belly_size: float = 40.0  # belly section size
    belly_fat: float = 90.0  # additional fatness ratio

    # Bottom
    belly_to_bottom: float = 25.0  # main body center to bottom center
    bottom_size: float = 25.0  # bottom diameter

    # Tail
    tail_length: float = 50.0
    tail_width: float = 22.0
    tail_yaw: float = -5.0  # horizontal rotation
    tail_pitch: float = 40.0  # vertical angle (positive is upwards)
    tail_roundness: float = 80.0  # lowest is flat

    # Base cut, -100 disables it
    base_flat: float = 50.0

    def get(self, param: ParamField) -> float:
        return getattr(self, param.value)

    def with_value(self, param: ParamField, value: float) -> "BirdParams":
        """Return a copy with one field replaced."""
        return replace(self, **{param.value: float(value)})

    def clamped(self) -> "BirdParams":
        """Return a copy with every field clamped to its documented range."""
        return replace(self, **{
            spec.field.value: spec.clamp(spec.get(self)) for spec in FIELD_SPECS
        })

    @property
    def total_length(self) -> float:
        """Nose-to-tail length along the main body axis."""
        return self.beak_length + self.head_to_belly + self.belly_to_bottom + self.tail_length

    def to_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BirdParams":
        """
        Build a record from a name -> value mapping.

        Missing names keep their defaults.

        Raises:
            ValueError: on an unknown name or a non-numeric value
        """
        values = {}
        for name, value in data.items():
            param = ParamField.from_name(name)
            try:
                values[param.value] = float(value)
            except (TypeError, ValueError):
                raise ValueError(f"Parameter {name!r} must be a number, got {value!r}") from None
        return cls(**values)

    @classmethod
    def at_minimum(cls) -> "BirdParams":
        """Every field at the lower bound of its range."""
        return cls(**{spec.field.value: spec.minimum for spec in FIELD_SPECS})

    @classmethod
    def at_maximum(cls) -> "BirdParams":
        """Every field at the upper bound of its range."""
        return cls(**{spec.field.value: spec.maximum for spec in FIELD_SPECS})


@dataclass(frozen=True)
class FieldSpec:
    """Reflection entry for one parameter: identity, label, group and range."""
    field: ParamField
    label: str
    group: str
    minimum: float
    maximum: float
    description: str = ""

    def get(self, params: BirdParams) -> float:
        return params.get(self.field)

    def set(self, params: BirdParams, value: float) -> BirdParams:
        return params.with_value(self.field, value)

    def clamp(self, value: float) -> float:
        return min(max(value, self.minimum), self.maximum)

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


FIELD_SPECS: Tuple[FieldSpec, ...] = (
    FieldSpec(ParamField.BEAK_LENGTH, "Beak Length", "Beak", 0.0, 50.0,
              "Length of the beak"),
    FieldSpec(ParamField.BEAK_SIZE, "Beak Size", "Beak", 20.0, 100.0,
              "Ratio relative to the head size"),
    FieldSpec(ParamField.BEAK_WIDTH, "Beak Width", "Beak", 0.0, 25.0,
              "Width of the beak tip (0 is pointy)"),
    FieldSpec(ParamField.BEAK_ROUNDNESS, "Beak Roundness", "Beak", 10.0, 200.0,
              "Shape of the beak tip (lowest is flat)"),
    FieldSpec(ParamField.HEAD_SIZE, "Head Size", "Head", 10.0, 40.0,
              "Head diameter"),
    FieldSpec(ParamField.HEAD_TO_BELLY, "Head to Belly", "Head", -20.0, 50.0,
              "Horizontal distance from head to main body"),
    FieldSpec(ParamField.EYE_SIZE, "Eye Size", "Head", 0.0, 20.0,
              "Size of the eyes"),
    FieldSpec(ParamField.HEAD_LATERAL_OFFSET, "Head Lateral Offset", "Head", -15.0, 15.0,
              "Head lateral offset"),
    FieldSpec(ParamField.HEAD_LEVEL, "Head Level", "Head", 0.0, 80.0,
              "Head vertical height"),
    FieldSpec(ParamField.HEAD_YAW, "Head Yaw", "Head", -45.0, 45.0,
              "Head horizontal rotation"),
    FieldSpec(ParamField.HEAD_PITCH, "Head Pitch", "Head", -80.0, 45.0,
              "Head vertical rotation (positive is upwards)"),
    FieldSpec(ParamField.BELLY_LENGTH, "Belly Length", "Belly", 10.0, 100.0,
              "How long is the front body"),
    FieldSpec(ParamField.BELLY_SIZE, "Belly Size", "Belly", 20.0, 60.0,
              "Belly section size"),
    FieldSpec(ParamField.BELLY_FAT, "Belly Fat", "Belly", 50.0, 150.0,
              "Additional fatness ratio"),
    FieldSpec(ParamField.BELLY_TO_BOTTOM, "Belly to Bottom", "Bottom", 1.0, 50.0,
              "Distance from main body center to bottom center"),
    FieldSpec(ParamField.BOTTOM_SIZE, "Bottom Size", "Bottom", 5.0, 50.0,
              "Bottom diameter"),
    FieldSpec(ParamField.TAIL_LENGTH, "Tail Length", "Tail", 0.0, 100.0,
              "Tail length"),
    FieldSpec(ParamField.TAIL_WIDTH, "Tail Width", "Tail", 1.0, 50.0,
              "How large is the tail"),
    FieldSpec(ParamField.TAIL_YAW, "Tail Yaw", "Tail", -45.0, 45.0,
              "Tail horizontal rotation"),
    FieldSpec(ParamField.TAIL_PITCH, "Tail Pitch", "Tail", -45.0, 90.0,
              "Tail vertical angle (positive is upwards)"),
    FieldSpec(ParamField.TAIL_ROUNDNESS, "Tail Roundness", "Tail", 10.0, 200.0,
              "How round is the tail (lowest is flat)"),
    FieldSpec(ParamField.BASE_FLAT, "Base Flat", "Base", -100.0, 100.0,
              "How to cut the base of the object (-100 disables the cut)"),
)

_SPECS_BY_FIELD: Dict[ParamField, FieldSpec] = {spec.field: spec for spec in FIELD_SPECS}

GROUPS: Tuple[str, ...] = tuple(dict.fromkeys(spec.group for spec in FIELD_SPECS))

DEFAULT_PARAMS = BirdParams()


def field_spec(param: ParamField) -> FieldSpec:
    return _SPECS_BY_FIELD[param]


def field_label(param: ParamField) -> str:
    """Human-readable label for a field, e.g. "Head to Belly"."""
    return _SPECS_BY_FIELD[param].label


def iter_fields(group: Optional[str] = None) -> Iterator[FieldSpec]:
    """Iterate reflection entries in display order, optionally for one group."""
    for spec in FIELD_SPECS:
        if group is None or spec.group == group:
            yield spec


def get_value(params: BirdParams, param: ParamField) -> float:
    return params.get(param)


def set_value(params: BirdParams, param: ParamField, value: float) -> BirdParams:
    """Return a new record with `param` set to `value` (not clamped)."""
    spec = _SPECS_BY_FIELD[param]
    if not spec.contains(value):
        logger.debug(f"{spec.label} = {value} is outside [{spec.minimum}, {spec.maximum}]")
    return params.with_value(param, value)
