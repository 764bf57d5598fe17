"""Per-hand keypoint smoothing with outlier rejection."""

from __future__ import annotations

import numpy as np

from gesture_module.config import InteractionConfig
from gesture_module.gesture_utils import lerp
from gesture_module.hand_state import HandState
from gesture_module.keypoints import FINGERTIP_POINTS, TRACKED_POINTS, KeypointFrame
from utils.settings_store import deep_log


class KeypointSmoother:
    """Exponential blend toward each raw sample, freezing implausible jumps.

    Fingertips use ``fingertip_smoothing`` (closer to raw, for precise pinch
    tracking); wrist and MCP joints use the heavier ``smoothing`` so palm
    orientation stays stable.
    """

    def __init__(self, config: InteractionConfig) -> None:
        self.config = config

    def update(self, state: HandState, frame: KeypointFrame) -> None:
        cfg = self.config
        now = frame.timestamp
        dt = now - state.last_update if state.last_update is not None else None
        if dt is not None and dt <= 0:
            dt = cfg.reference_interval
        bound = cfg.max_velocity * dt / cfg.reference_interval if dt is not None else None

        previous = {name: value.copy() for name, value in state.smoothed.items()}
        smoothed: dict[str, np.ndarray] = {}
        for name in TRACKED_POINTS:
            raw = frame.points[name]
            prior = state.smoothed.get(name)
            if prior is None or bound is None:
                smoothed[name] = raw.copy()
                state.outlier_streak[name] = 0
                continue

            jump = float(np.linalg.norm(raw - prior))
            if jump > bound:
                streak = state.outlier_streak.get(name, 0) + 1
                if streak < cfg.outlier_reacquire_frames:
                    state.outlier_streak[name] = streak
                    smoothed[name] = prior.copy()
                    deep_log(f"[DEEP][SMOOTH] {state.label}.{name} frozen jump={jump:.3f} bound={bound:.3f}")
                    continue
                deep_log(f"[DEEP][SMOOTH] {state.label}.{name} reacquired after {streak} outliers")
                state.outlier_streak[name] = 0
                smoothed[name] = raw.copy()
                continue

            state.outlier_streak[name] = 0
            alpha = cfg.fingertip_smoothing if name in FINGERTIP_POINTS else cfg.smoothing
            smoothed[name] = lerp(prior, raw, alpha)

        if previous and dt:
            state.velocity = {name: (smoothed[name] - previous[name]) / dt for name in TRACKED_POINTS}
        else:
            state.velocity = {name: np.zeros(3) for name in TRACKED_POINTS}
        state.prev_smoothed = previous or {name: value.copy() for name, value in smoothed.items()}
        state.smoothed = smoothed
        state.last_update = now
        state.frames_missing = 0


def predict(state: HandState, name: str, lead: float) -> np.ndarray | None:
    """Short-horizon linear extrapolation of a smoothed point."""
    point = state.smoothed.get(name)
    if point is None:
        return None
    velocity = state.velocity.get(name)
    if velocity is None:
        return point.copy()
    return point + velocity * lead
