"""Per-hand session state carried between detection ticks."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np


class PinchPhase(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    ACTIVE = "active"
    COOLDOWN = "cooldown"


class RotationPhase(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    ACTIVE = "active"


class InteractionMode(str, Enum):
    NONE = "none"
    MOVE = "move"
    SPAWN = "spawn"


@dataclass
class AnchorCandidate:
    block_id: int
    hits: int = 1


@dataclass
class HandState:
    """Mutable record for one tracked hand, keyed by its handedness label."""

    label: str

    # smoothing
    smoothed: dict[str, np.ndarray] = field(default_factory=dict)
    prev_smoothed: dict[str, np.ndarray] = field(default_factory=dict)
    velocity: dict[str, np.ndarray] = field(default_factory=dict)
    outlier_streak: dict[str, int] = field(default_factory=dict)
    last_update: float | None = None
    frames_missing: int = 0

    # pinch
    pinch_phase: PinchPhase = PinchPhase.IDLE
    pinch_frame_count: int = 0
    cooldown_until: float = 0.0
    pinch_world_pos: np.ndarray | None = None
    prev_pinch_world_pos: np.ndarray | None = None

    # rotation
    rotation_phase: RotationPhase = RotationPhase.IDLE
    rotation_frame_count: int = 0
    smoothed_yaw: float | None = None
    prev_yaw: float | None = None
    rotation_reference_yaw: float = 0.0

    # interaction
    is_dragging: bool = False
    interaction_mode: InteractionMode = InteractionMode.NONE
    selected_block: int | None = None
    drag_offset: np.ndarray | None = None
    pinch_start_world_pos: np.ndarray | None = None
    pinch_start_time: float | None = None
    last_spawned_block: int | None = None
    spawn_accum_x: float = 0.0
    spawn_accum_y: float = 0.0
    anchor_candidate: AnchorCandidate | None = None

    @property
    def pinch_active(self) -> bool:
        return self.pinch_phase is PinchPhase.ACTIVE

    def reset_interaction(self) -> bool:
        """Clear drag/selection state. Returns True if anything was held."""
        held = self.is_dragging or self.selected_block is not None or self.anchor_candidate is not None
        self.is_dragging = False
        self.interaction_mode = InteractionMode.NONE
        self.selected_block = None
        self.drag_offset = None
        self.pinch_start_world_pos = None
        self.pinch_start_time = None
        self.last_spawned_block = None
        self.spawn_accum_x = 0.0
        self.spawn_accum_y = 0.0
        self.anchor_candidate = None
        return held

    def reset_gestures(self) -> None:
        self.pinch_phase = PinchPhase.IDLE
        self.pinch_frame_count = 0
        self.rotation_phase = RotationPhase.IDLE
        self.rotation_frame_count = 0

    def summary(self) -> dict:
        """JSON-friendly view for the renderer."""
        return {
            "label": self.label,
            "pinch_phase": self.pinch_phase.value,
            "rotation_phase": self.rotation_phase.value,
            "is_dragging": self.is_dragging,
            "interaction_mode": self.interaction_mode.value,
            "selected_block": self.selected_block,
            "anchor_candidate": self.anchor_candidate.block_id if self.anchor_candidate else None,
            "frames_missing": self.frames_missing,
            "pinch_world_pos": _as_list(self.pinch_world_pos),
        }


def _as_list(value: np.ndarray | None) -> list[float] | None:
    if value is None:
        return None
    return [float(v) for v in value]
