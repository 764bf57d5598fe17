"""Tunables for gesture interpretation and block interaction.

Distances tagged ``normalized`` are in camera-normalized units (0..1 across the
frame); distances tagged ``world`` are in world units, where one grid unit is
``grid_unit`` and the camera frame spans ``world_scale`` world units.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

from utils.file_utils import load_json, save_json
from utils.log_utils import log


@dataclass
class InteractionConfig:
    """Gesture thresholds, debounce counts and grid settings."""

    # Pinch (normalized, scaled by hand size)
    pinch_start_distance: float = 0.05
    pinch_stop_distance: float = 0.07
    hand_size_reference: float = 0.12
    pinch_activation_frames: int = 3
    pinch_release_frames: int = 1
    pinch_cooldown: float = 0.25

    # Drag disambiguation (world units / seconds)
    movement_dead_zone: float = 0.35
    hold_to_move_seconds: float = 0.35

    # Grid and targeting (world units)
    grid_unit: float = 1.0
    selection_radius: float = 1.5
    anchor_dwell_frames: int = 3

    # Keypoint smoothing
    smoothing: float = 0.5
    fingertip_smoothing: float = 0.7
    max_velocity: float = 0.25
    reference_interval: float = 1.0 / 30.0
    outlier_reacquire_frames: int = 5
    prediction_lead: float = 1.0 / 30.0

    # Open-palm rotation
    open_hand_distance: float = 0.1
    open_hand_min_fingers: int = 3
    rotation_activation_frames: int = 4
    rotation_smoothing: float = 0.2
    rotation_speed: float = 1.5
    rotation_dead_zone: float = 0.02

    # Lifecycle
    missing_hand_reset_frames: int = 30

    # Camera → world mapping
    world_scale: float = 10.0
    mirror_x: bool = True
    structure_depth: float = 0.0

    def validate(self) -> "InteractionConfig":
        if self.pinch_start_distance <= 0:
            raise ValueError("pinch_start_distance must be positive")
        if self.pinch_stop_distance <= self.pinch_start_distance:
            raise ValueError("pinch_stop_distance must be larger than pinch_start_distance")
        if self.hand_size_reference <= 0:
            raise ValueError("hand_size_reference must be positive")
        if self.grid_unit <= 0:
            raise ValueError("grid_unit must be positive")
        if self.world_scale <= 0:
            raise ValueError("world_scale must be positive")
        if self.reference_interval <= 0:
            raise ValueError("reference_interval must be positive")
        for name in ("smoothing", "fingertip_smoothing", "rotation_smoothing"):
            value = getattr(self, name)
            if not 0.0 < value <= 1.0:
                raise ValueError(f"{name} must be inside (0, 1]")
        for name in (
            "pinch_activation_frames",
            "pinch_release_frames",
            "anchor_dwell_frames",
            "rotation_activation_frames",
            "outlier_reacquire_frames",
            "open_hand_min_fingers",
        ):
            if int(getattr(self, name)) < 1:
                raise ValueError(f"{name} must be at least 1")
        if self.missing_hand_reset_frames < 0:
            raise ValueError("missing_hand_reset_frames cannot be negative")
        return self

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "InteractionConfig":
        """Build a config from a flat mapping; unknown keys are ignored."""
        return cls(**_known_fields(cls, data or {}, "interaction")).validate()

    def merged(self, updates: dict[str, Any]) -> "InteractionConfig":
        data = self.to_dict()
        data.update(_known_fields(type(self), updates, "interaction"))
        return type(self)(**data).validate()


@dataclass
class TrackingConfig:
    """MediaPipe Hands and camera settings."""

    max_num_hands: int = 2
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    model_complexity: int = 1
    device_index: int = 0
    frame_width: int = 640
    frame_height: int = 480

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "TrackingConfig":
        return cls(**_known_fields(cls, data or {}, "tracking"))


@dataclass
class GestureConfig:
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)

    def to_dict(self) -> dict[str, Any]:
        return {"interaction": self.interaction.to_dict(), "tracking": self.tracking.to_dict()}


def load_config(path: str | Path = "config/gesture_config.json") -> GestureConfig:
    """Load tunables from JSON, falling back to defaults for anything missing."""
    raw = load_json(path)
    if not raw:
        log("CONFIG", f"No config at {path}, using defaults")
    return GestureConfig(
        interaction=InteractionConfig.from_dict(raw.get("interaction")),
        tracking=TrackingConfig.from_dict(raw.get("tracking")),
    )


_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off"}


def _coerce(key: str, value: Any, default: Any) -> Any:
    """Convert ``value`` to the type of ``default``; raises ValueError on a mismatch."""
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        if isinstance(value, str):
            text = value.strip().lower()
            if text in _TRUE_STRINGS:
                return True
            if text in _FALSE_STRINGS:
                return False
        raise ValueError(f"{key} must be a boolean, got {value!r}")
    if isinstance(default, int):
        if isinstance(value, bool):
            raise ValueError(f"{key} must be an integer, got {value!r}")
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"{key} must be an integer, got {value!r}")
            return int(value)
        return int(value)
    if isinstance(default, float):
        if isinstance(value, bool):
            raise ValueError(f"{key} must be a number, got {value!r}")
        return float(value)
    return value


def _known_fields(cls: type, data: dict[str, Any], section: str) -> dict[str, Any]:
    names = {f.name: f for f in fields(cls)}
    cleaned: dict[str, Any] = {}
    for key, value in data.items():
        known = names.get(key)
        if known is None:
            log("CONFIG", f"Ignoring unknown {section} key '{key}'", "WARN")
            continue
        cleaned[key] = _coerce(key, value, known.default)
    return cleaned


def save_config(config: GestureConfig, path: str | Path = "config/gesture_config.json") -> None:
    save_json(path, config.to_dict())
