"""Tests for move/spawn disambiguation of a fresh drag."""

import numpy as np
import pytest

from gesture_module.config import InteractionConfig
from gesture_module.hand_state import HandState, InteractionMode
from interaction_controller.mode_resolver import InteractionModeResolver
from scene_module.structure import Structure


def _dragging(structure, start=(0.0, 0.0), t=0.0):
    return HandState(
        label="Right",
        is_dragging=True,
        selected_block=structure.original.id,
        pinch_start_world_pos=np.array([start[0], start[1], 0.0]),
        pinch_start_time=t,
    )


class TestInteractionModeResolver:
    """Test suite for InteractionModeResolver."""

    def setup_method(self):
        self.config = InteractionConfig(movement_dead_zone=0.35, hold_to_move_seconds=0.35)
        self.resolver = InteractionModeResolver(self.config)
        self.structure = Structure()

    def test_undecided_inside_dead_zone(self):
        """Test that small early movement leaves the mode undecided."""
        state = _dragging(self.structure)

        mode = self.resolver.resolve(state, self.structure, np.array([0.2, 0.0, 0.0]), 0.1)

        assert mode is InteractionMode.NONE

    def test_quick_flick_spawns(self):
        """Test that early movement past the dead zone picks spawn mode."""
        state = _dragging(self.structure)

        mode = self.resolver.resolve(state, self.structure, np.array([0.5, 0.0, 0.0]), 0.1)

        assert mode is InteractionMode.SPAWN
        assert state.last_spawned_block == self.structure.original.id
        assert state.spawn_accum_x == 0.0
        assert state.spawn_accum_y == 0.0

    def test_hold_still_moves(self):
        """Test that holding past the hold time picks move mode with an offset."""
        state = _dragging(self.structure, start=(0.3, 0.1))

        mode = self.resolver.resolve(state, self.structure, np.array([0.3, 0.1, 0.0]), 0.4)

        assert mode is InteractionMode.MOVE
        assert state.drag_offset == pytest.approx(np.array([-0.3, -0.1, 0.0]))

    def test_late_movement_moves(self):
        """Test that movement after the hold time is treated as a move."""
        state = _dragging(self.structure)

        mode = self.resolver.resolve(state, self.structure, np.array([1.0, 0.0, 0.0]), 0.5)

        assert mode is InteractionMode.MOVE

    def test_decided_mode_is_sticky(self):
        """Test that a resolved mode is never re-evaluated within the drag."""
        state = _dragging(self.structure)
        state.interaction_mode = InteractionMode.SPAWN

        mode = self.resolver.resolve(state, self.structure, np.array([0.0, 0.0, 0.0]), 5.0)

        assert mode is InteractionMode.SPAWN

    def test_not_dragging(self):
        """Test that a hand without a selection stays in no mode."""
        state = HandState(label="Right")

        assert self.resolver.resolve(state, self.structure, np.zeros(3), 1.0) is InteractionMode.NONE
