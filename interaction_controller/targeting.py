"""Dwell-based block selection for a pinching hand."""

from __future__ import annotations

import numpy as np

from gesture_module.config import InteractionConfig
from gesture_module.hand_state import AnchorCandidate, HandState
from gesture_module.keypoints import planar_distance
from scene_module.structure import Block, Structure
from utils.settings_store import deep_log


def nearest_block(structure: Structure, point: np.ndarray, radius: float) -> Block | None:
    """Closest displayed block to ``point`` in the XY plane, within ``radius``."""
    best: Block | None = None
    best_dist = radius
    for block in structure:
        dist = planar_distance(structure.world_position(block), point)
        if dist <= radius and (best is None or dist < best_dist):
            best = block
            best_dist = dist
    return best


class TargetResolver:
    """Turns a steady pinch near a block into a selection.

    The same block must be the nearest hit for ``anchor_dwell_frames``
    consecutive calls before it is selected, so brushing past a block while
    pinching does not grab it.
    """

    def __init__(self, config: InteractionConfig) -> None:
        self.config = config

    def update(
        self,
        state: HandState,
        structure: Structure,
        pinch_world_pos: np.ndarray,
        now: float,
        *,
        blocked: bool = False,
    ) -> Block | None:
        """Advance dwell for one tick; returns the block once selection is confirmed."""
        if state.is_dragging:
            return None
        if blocked:
            state.anchor_candidate = None
            return None

        candidate = nearest_block(structure, pinch_world_pos, self.config.selection_radius)
        if candidate is None:
            state.anchor_candidate = None
            return None

        current = state.anchor_candidate
        if current is not None and current.block_id == candidate.id and structure.get(current.block_id):
            current.hits += 1
        else:
            current = AnchorCandidate(block_id=candidate.id, hits=1)
            state.anchor_candidate = current
        deep_log(f"[DEEP][TARGET] {state.label} candidate={candidate.id} hits={current.hits}")

        if current.hits < self.config.anchor_dwell_frames:
            return None

        state.selected_block = candidate.id
        state.is_dragging = True
        state.pinch_start_world_pos = pinch_world_pos.copy()
        state.pinch_start_time = now
        state.anchor_candidate = None
        return candidate
