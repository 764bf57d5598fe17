"""Tests for config loading, validation and persistence."""

import json
from pathlib import Path

import pytest

from gesture_module.config import (
    GestureConfig,
    InteractionConfig,
    TrackingConfig,
    load_config,
    save_config,
)


class TestInteractionConfig:
    """Test suite for InteractionConfig validation and merging."""

    def test_defaults_are_valid(self):
        """Test that the shipped defaults pass validation."""
        assert InteractionConfig().validate().pinch_activation_frames == 3

    def test_stop_must_exceed_start(self):
        """Test that pinch hysteresis must be a real band."""
        with pytest.raises(ValueError):
            InteractionConfig(pinch_start_distance=0.07, pinch_stop_distance=0.05).validate()

    @pytest.mark.parametrize("name", ["smoothing", "fingertip_smoothing", "rotation_smoothing"])
    def test_smoothing_bounds(self, name):
        """Test that blend factors outside (0, 1] are rejected."""
        with pytest.raises(ValueError):
            InteractionConfig(**{name: 0.0}).validate()
        with pytest.raises(ValueError):
            InteractionConfig(**{name: 1.5}).validate()

    def test_zero_grid_unit_rejected(self):
        """Test that the grid unit must be positive."""
        with pytest.raises(ValueError):
            InteractionConfig(grid_unit=0.0).validate()

    def test_frame_counts_at_least_one(self):
        """Test that debounce counts cannot be zero."""
        with pytest.raises(ValueError):
            InteractionConfig(anchor_dwell_frames=0).validate()

    def test_from_dict_ignores_unknown_and_coerces(self):
        """Test that unknown keys are dropped and numbers are coerced."""
        config = InteractionConfig.from_dict({"grid_unit": "2", "anchor_dwell_frames": 4.0, "bogus": 1})

        assert config.grid_unit == 2.0
        assert config.anchor_dwell_frames == 4
        assert isinstance(config.anchor_dwell_frames, int)

    @pytest.mark.parametrize("raw,expected", [("false", False), ("True", True), ("0", False), (1, True), (False, False)])
    def test_boolean_strings_parsed(self, raw, expected):
        """Test that boolean fields read common spellings instead of truthiness."""
        assert InteractionConfig().merged({"mirror_x": raw}).mirror_x is expected

    @pytest.mark.parametrize("raw", ["maybe", 2, 0.5, None])
    def test_bad_boolean_rejected(self, raw):
        """Test that anything else for a boolean field is refused."""
        with pytest.raises(ValueError):
            InteractionConfig().merged({"mirror_x": raw})

    def test_fractional_int_rejected(self):
        """Test that a count given as 2.7 is refused rather than truncated."""
        with pytest.raises(ValueError):
            InteractionConfig.from_dict({"anchor_dwell_frames": 2.7})

    def test_bool_for_number_rejected(self):
        """Test that true/false is not accepted for numeric fields."""
        with pytest.raises(ValueError):
            InteractionConfig().merged({"anchor_dwell_frames": True})
        with pytest.raises(ValueError):
            InteractionConfig().merged({"grid_unit": False})

    def test_merged_returns_new_config(self):
        """Test that merging leaves the original untouched."""
        base = InteractionConfig()

        merged = base.merged({"selection_radius": 2.5})

        assert merged.selection_radius == 2.5
        assert base.selection_radius == 1.5

    def test_merged_validates(self):
        """Test that an invalid update is refused."""
        with pytest.raises(ValueError):
            InteractionConfig().merged({"pinch_stop_distance": 0.01})


class TestConfigFile:
    """Test suite for load_config and save_config."""

    def test_missing_file_gives_defaults(self, tmp_path):
        """Test that a missing file falls back to defaults."""
        config = load_config(tmp_path / "absent.json")

        assert config.interaction == InteractionConfig()
        assert config.tracking == TrackingConfig()

    def test_partial_file_overrides(self, tmp_path):
        """Test that only the keys present in the file change."""
        path = tmp_path / "gesture.json"
        path.write_text(json.dumps({"interaction": {"mirror_x": False}, "tracking": {"device_index": 2}}))

        config = load_config(path)

        assert config.interaction.mirror_x is False
        assert config.interaction.grid_unit == 1.0
        assert config.tracking.device_index == 2

    def test_save_then_load(self, tmp_path):
        """Test that a saved config reloads unchanged."""
        path = tmp_path / "nested" / "gesture.json"
        original = GestureConfig(interaction=InteractionConfig(anchor_dwell_frames=6))

        save_config(original, path)

        assert load_config(path).interaction.anchor_dwell_frames == 6

    def test_shipped_config_matches_defaults(self):
        """Test that config/gesture_config.json loads and validates."""
        config = load_config(Path(__file__).resolve().parents[1] / "config" / "gesture_config.json")

        assert config.interaction.pinch_activation_frames == InteractionConfig().pinch_activation_frames
        assert config.interaction.reference_interval == pytest.approx(1.0 / 30.0, rel=1e-4)
