"""Hand-size-normalized pinch detection with a debounce state machine."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from gesture_module.config import InteractionConfig
from gesture_module.hand_state import HandState, PinchPhase
from gesture_module.keypoints import distance, midpoint, to_world
from utils.settings_store import deep_log


@dataclass
class PinchReading:
    active: bool
    world_pos: np.ndarray
    distance: float
    started: bool = False
    released: bool = False


def hand_scale(state: HandState, config: InteractionConfig) -> float:
    """Ratio of this hand's wrist→middle-MCP span to the reference hand size."""
    size = distance(state.smoothed["wrist"], state.smoothed["middle_mcp"])
    if size <= 1e-6:
        return 1.0
    return size / config.hand_size_reference


def next_pinch_phase(
    state: HandState,
    pinch_distance: float,
    now: float,
    config: InteractionConfig,
    scale: float = 1.0,
) -> PinchPhase:
    """Advance ``state.pinch_phase`` by one sample and return the new phase."""
    start_threshold = config.pinch_start_distance * scale
    stop_threshold = config.pinch_stop_distance * scale
    closed = pinch_distance < start_threshold
    phase = state.pinch_phase

    if phase is PinchPhase.IDLE:
        if closed:
            state.pinch_frame_count = 1
            state.pinch_phase = PinchPhase.PENDING
            if config.pinch_activation_frames <= 1:
                state.pinch_phase = PinchPhase.ACTIVE
                state.pinch_frame_count = 0

    elif phase is PinchPhase.PENDING:
        if closed:
            state.pinch_frame_count += 1
            if state.pinch_frame_count >= config.pinch_activation_frames:
                state.pinch_phase = PinchPhase.ACTIVE
                state.pinch_frame_count = 0
        else:
            state.pinch_phase = PinchPhase.IDLE
            state.pinch_frame_count = 0

    elif phase is PinchPhase.ACTIVE:
        if pinch_distance < stop_threshold:
            state.pinch_frame_count = 0
        else:
            state.pinch_frame_count += 1
            if state.pinch_frame_count >= config.pinch_release_frames:
                state.pinch_phase = PinchPhase.COOLDOWN
                state.pinch_frame_count = 0
                state.cooldown_until = now + config.pinch_cooldown

    elif phase is PinchPhase.COOLDOWN:
        if now >= state.cooldown_until:
            state.pinch_phase = PinchPhase.IDLE
            state.pinch_frame_count = 0

    return state.pinch_phase


class PinchDetector:
    def __init__(self, config: InteractionConfig) -> None:
        self.config = config

    def update(self, state: HandState, now: float) -> PinchReading:
        cfg = self.config
        index_tip = state.smoothed["index_tip"]
        thumb_tip = state.smoothed["thumb_tip"]
        pinch_distance = distance(index_tip, thumb_tip)

        was_active = state.pinch_active
        previous_phase = state.pinch_phase
        phase = next_pinch_phase(state, pinch_distance, now, cfg, hand_scale(state, cfg))
        if phase is not previous_phase:
            deep_log(
                f"[DEEP][PINCH] {state.label} {previous_phase.value}->{phase.value} "
                f"dist={pinch_distance:.4f}"
            )

        world_pos = to_world(
            midpoint(index_tip, thumb_tip), world_scale=cfg.world_scale, mirror_x=cfg.mirror_x
        )
        state.prev_pinch_world_pos = state.pinch_world_pos if state.pinch_world_pos is not None else world_pos
        state.pinch_world_pos = world_pos

        active = phase is PinchPhase.ACTIVE
        return PinchReading(
            active=active,
            world_pos=world_pos,
            distance=pinch_distance,
            started=active and not was_active,
            released=was_active and not active,
        )
