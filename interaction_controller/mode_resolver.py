"""Decides whether a fresh drag moves the grabbed block or spawns a chain."""

from __future__ import annotations

import numpy as np

from gesture_module.config import InteractionConfig
from gesture_module.hand_state import HandState, InteractionMode
from gesture_module.keypoints import planar_distance
from scene_module.structure import Structure


class InteractionModeResolver:
    """Resolve the mode once per drag.

    Early movement past ``movement_dead_zone`` means the user is flicking out a
    chain (spawn); holding still past ``hold_to_move_seconds`` means they want
    to carry the block (move). Nothing is mutated until one of the two fires.
    """

    def __init__(self, config: InteractionConfig) -> None:
        self.config = config

    def resolve(
        self,
        state: HandState,
        structure: Structure,
        pinch_world_pos: np.ndarray,
        now: float,
    ) -> InteractionMode:
        if not state.is_dragging or state.interaction_mode is not InteractionMode.NONE:
            return state.interaction_mode
        block = structure.get(state.selected_block)
        if block is None or state.pinch_start_world_pos is None or state.pinch_start_time is None:
            return state.interaction_mode

        moved = planar_distance(pinch_world_pos, state.pinch_start_world_pos)
        elapsed = now - state.pinch_start_time
        if moved > self.config.movement_dead_zone and elapsed <= self.config.hold_to_move_seconds:
            state.interaction_mode = InteractionMode.SPAWN
            state.last_spawned_block = block.id
            state.spawn_accum_x = 0.0
            state.spawn_accum_y = 0.0
        elif elapsed > self.config.hold_to_move_seconds:
            state.interaction_mode = InteractionMode.MOVE
            state.drag_offset = structure.local_position(block) - pinch_world_pos
        return state.interaction_mode
