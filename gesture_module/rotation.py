"""Open-palm rotation: hand-open classifier, palm yaw estimate and debounce."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from gesture_module.config import InteractionConfig
from gesture_module.gesture_utils import angle_delta, wrap_angle
from gesture_module.hand_state import HandState, RotationPhase
from gesture_module.keypoints import KeypointFrame, distance, midpoint, to_world
from utils.settings_store import deep_log


@dataclass
class RotationReading:
    is_open: bool
    yaw: float
    applied: float = 0.0
    started: bool = False
    released: bool = False


def open_finger_count(palm_center: np.ndarray, fingertips: dict[str, np.ndarray], threshold: float) -> int:
    return sum(1 for tip in fingertips.values() if distance(tip, palm_center) > threshold)


def palm_yaw(wrist: np.ndarray, middle_mcp: np.ndarray) -> float:
    """Heading of wrist→middle MCP projected onto the horizontal plane."""
    dx = middle_mcp[0] - wrist[0]
    dz = middle_mcp[2] - wrist[2]
    return math.atan2(dz, dx)


def next_rotation_phase(state: HandState, is_open: bool, pinch_active: bool, config: InteractionConfig) -> RotationPhase:
    """Advance ``state.rotation_phase`` by one sample and return the new phase."""
    if pinch_active:
        state.rotation_phase = RotationPhase.IDLE
        state.rotation_frame_count = 0
        return state.rotation_phase

    phase = state.rotation_phase
    if phase is RotationPhase.IDLE:
        if is_open:
            state.rotation_frame_count = 1
            state.rotation_phase = RotationPhase.PENDING
            if config.rotation_activation_frames <= 1:
                state.rotation_phase = RotationPhase.ACTIVE
    elif phase is RotationPhase.PENDING:
        if is_open:
            state.rotation_frame_count += 1
            if state.rotation_frame_count >= config.rotation_activation_frames:
                state.rotation_phase = RotationPhase.ACTIVE
        else:
            state.rotation_phase = RotationPhase.IDLE
            state.rotation_frame_count = 0
    elif phase is RotationPhase.ACTIVE:
        if not is_open:
            state.rotation_phase = RotationPhase.IDLE
            state.rotation_frame_count = 0
    return state.rotation_phase


class RotationDetector:
    def __init__(self, config: InteractionConfig) -> None:
        self.config = config

    def smooth_yaw(self, state: HandState, raw_yaw: float) -> float:
        state.prev_yaw = state.smoothed_yaw
        if state.smoothed_yaw is None:
            state.smoothed_yaw = raw_yaw
        else:
            step = angle_delta(raw_yaw, state.smoothed_yaw) * self.config.rotation_smoothing
            state.smoothed_yaw = wrap_angle(state.smoothed_yaw + step)
        return state.smoothed_yaw

    def update(self, state: HandState, frame: KeypointFrame, pinch_active: bool) -> RotationReading:
        """Classify the hand, advance the phase and return the yaw to apply.

        ``applied`` is the yaw increment for the structure this tick, already
        scaled by ``rotation_speed``; it is zero inside the dead-zone.
        """
        cfg = self.config
        wrist = state.smoothed["wrist"]
        middle_mcp = state.smoothed["middle_mcp"]

        fingertips = dict(frame.fingertips)
        fingertips["thumb"] = state.smoothed["thumb_tip"]
        fingertips["index"] = state.smoothed["index_tip"]
        count = open_finger_count(midpoint(wrist, middle_mcp), fingertips, cfg.open_hand_distance)
        is_open = count >= cfg.open_hand_min_fingers

        world_wrist = to_world(wrist, world_scale=cfg.world_scale, mirror_x=cfg.mirror_x)
        world_mcp = to_world(middle_mcp, world_scale=cfg.world_scale, mirror_x=cfg.mirror_x)
        yaw = self.smooth_yaw(state, palm_yaw(world_wrist, world_mcp))

        was_active = state.rotation_phase is RotationPhase.ACTIVE
        previous_phase = state.rotation_phase
        phase = next_rotation_phase(state, is_open, pinch_active, cfg)
        if phase is not previous_phase:
            deep_log(
                f"[DEEP][ROTATE] {state.label} {previous_phase.value}->{phase.value} "
                f"open_fingers={count} yaw={yaw:.3f}"
            )

        active = phase is RotationPhase.ACTIVE
        reading = RotationReading(
            is_open=is_open,
            yaw=yaw,
            started=active and not was_active,
            released=was_active and not active,
        )
        if reading.started:
            state.rotation_reference_yaw = yaw
            return reading
        if active:
            delta = angle_delta(yaw, state.rotation_reference_yaw)
            if abs(delta) > cfg.rotation_dead_zone:
                reading.applied = delta * cfg.rotation_speed
                state.rotation_reference_yaw = yaw
        return reading
