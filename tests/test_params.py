"""
Tests for the bird parameter model.

Tests cover:
- BirdParams defaults and immutability
- ParamField / reflection table correspondence
- get/set by field, clamping, range-bound records
- Parameter file round trip
"""

import dataclasses
import json

import pytest
from pathlib import Path
import sys

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bird_common.params import (
    BirdParams,
    ParamField,
    FIELD_SPECS,
    GROUPS,
    field_spec,
    field_label,
    iter_fields,
    get_value,
    set_value,
)
from bird_common.io import load_params, save_params


# ============== BirdParams Tests ==============

class TestBirdParams:
    """Test the parameter record."""

    def test_default_values(self):
        """Defaults should match the reference bird."""
        params = BirdParams()

        assert params.beak_length == 15.0
        assert params.beak_size == 100.0
        assert params.head_size == 22.0
        assert params.belly_size == 40.0
        assert params.tail_length == 50.0
        assert params.base_flat == 50.0

    def test_has_22_fields(self):
        assert len(dataclasses.fields(BirdParams)) == 22

    def test_total_length(self):
        """Nose-to-tail length of the default bird is 122."""
        assert BirdParams().total_length == pytest.approx(122.0)

    def test_is_immutable(self):
        """Records are snapshots; hosts replace them instead of editing."""
        params = BirdParams()
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.beak_length = 30.0

    def test_with_value_returns_new_record(self):
        params = BirdParams()
        edited = params.with_value(ParamField.TAIL_PITCH, 60)

        assert edited.tail_pitch == 60.0
        assert params.tail_pitch == 40.0
        assert edited.beak_length == params.beak_length

    def test_to_dict_from_dict(self):
        params = BirdParams(beak_width=0.0, head_yaw=-20.0)
        d = params.to_dict()

        assert d["beak_width"] == 0.0
        assert d["head_yaw"] == -20.0
        assert BirdParams.from_dict(d) == params

    def test_from_dict_partial_keeps_defaults(self):
        params = BirdParams.from_dict({"eye_size": 8})

        assert params.eye_size == 8.0
        assert params.head_size == 22.0

    def test_from_dict_unknown_name(self):
        with pytest.raises(ValueError, match="wing_span"):
            BirdParams.from_dict({"wing_span": 10})

    def test_from_dict_non_numeric(self):
        with pytest.raises(ValueError, match="beak_length"):
            BirdParams.from_dict({"beak_length": "long"})

    def test_clamped(self):
        """Out-of-range values are pulled back to the range bounds."""
        params = BirdParams(beak_length=80.0, base_flat=-150.0, head_pitch=0.0)
        clamped = params.clamped()

        assert clamped.beak_length == 50.0
        assert clamped.base_flat == -100.0
        assert clamped.head_pitch == 0.0

    def test_at_minimum_and_maximum(self):
        low = BirdParams.at_minimum()
        high = BirdParams.at_maximum()

        assert low.beak_width == 0.0
        assert low.eye_size == 0.0
        assert low.base_flat == -100.0
        assert high.head_size == 40.0
        assert high.tail_pitch == 90.0
        assert high.base_flat == 100.0


# ============== Reflection Table Tests ==============

class TestFieldSpecs:
    """Test the reflection table used for generic UI binding."""

    def test_enum_matches_record_fields(self):
        """ParamField must stay 1:1 with the BirdParams fields."""
        record_names = [f.name for f in dataclasses.fields(BirdParams)]
        enum_names = [p.value for p in ParamField]

        assert enum_names == record_names

    def test_table_covers_every_field_once(self):
        assert [spec.field for spec in FIELD_SPECS] == list(ParamField)

    def test_defaults_inside_ranges(self):
        params = BirdParams()
        for spec in FIELD_SPECS:
            assert spec.minimum < spec.maximum
            assert spec.contains(spec.get(params)), spec.label

    def test_labels(self):
        assert field_label(ParamField.HEAD_TO_BELLY) == "Head to Belly"
        assert field_label(ParamField.BASE_FLAT) == "Base Flat"
        assert field_label(ParamField.HEAD_LATERAL_OFFSET) == "Head Lateral Offset"

    def test_ranges(self):
        spec = field_spec(ParamField.HEAD_PITCH)
        assert (spec.minimum, spec.maximum) == (-80.0, 45.0)

        spec = field_spec(ParamField.BELLY_TO_BOTTOM)
        assert (spec.minimum, spec.maximum) == (1.0, 50.0)

    def test_groups(self):
        assert GROUPS == ("Beak", "Head", "Belly", "Bottom", "Tail", "Base")
        assert len(list(iter_fields("Beak"))) == 4
        assert len(list(iter_fields("Head"))) == 7
        assert len(list(iter_fields("Tail"))) == 5
        assert len(list(iter_fields())) == 22

    def test_get_set_by_field(self):
        """Every field is reachable through the table alone."""
        params = BirdParams()
        for spec in FIELD_SPECS:
            new_value = spec.clamp(spec.get(params) + 1.0)
            edited = set_value(params, spec.field, new_value)

            assert get_value(edited, spec.field) == new_value
            assert spec.get(edited) == new_value

    def test_spec_set_does_not_clamp(self):
        """Clamping is the host's call; the record stores what it is given."""
        spec = field_spec(ParamField.EYE_SIZE)
        edited = spec.set(BirdParams(), 35.0)

        assert edited.eye_size == 35.0
        assert spec.clamp(edited.eye_size) == 20.0

    def test_from_name(self):
        assert ParamField.from_name("tail_yaw") is ParamField.TAIL_YAW
        with pytest.raises(ValueError):
            ParamField.from_name("TailYaw")


# ============== Parameter File Tests ==============

class TestParamFiles:
    """Test loading and saving parameter files."""

    def test_save_and_load(self, tmp_path):
        params = BirdParams(tail_roundness=150.0, base_flat=-100.0)
        path = tmp_path / "birds" / "my_bird.json"

        save_params(params, path)

        assert path.exists()
        assert load_params(path) == params

    def test_load_rejects_non_object(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([1, 2, 3]))

        with pytest.raises(ValueError):
            load_params(path)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
