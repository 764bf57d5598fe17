"""Chained block spawning driven by accumulated pinch displacement."""

from __future__ import annotations

import numpy as np

from gesture_module.hand_state import HandState
from interaction_controller.executors.base import BaseExecutor, EditResult
from scene_module.structure import Structure


class SpawnExecutor(BaseExecutor):
    """Lay a new block next to the chain tip for every grid unit travelled.

    X is drained before Y, and Y continues from whatever tip X left behind.
    A crossing into an occupied cell still consumes its unit so the
    accumulator never banks a burst of spawns behind an obstacle.
    """

    def execute(
        self, state: HandState, structure: Structure, pinch_world_pos: np.ndarray
    ) -> list[EditResult]:
        if state.prev_pinch_world_pos is None:
            return []
        displacement = (pinch_world_pos - state.prev_pinch_world_pos) / structure.grid_unit
        state.spawn_accum_x += float(displacement[0])
        state.spawn_accum_y += float(displacement[1])
        return self.drain(state, structure)

    def drain(self, state: HandState, structure: Structure) -> list[EditResult]:
        results: list[EditResult] = []
        state.spawn_accum_x = self._drain_axis(state, structure, state.spawn_accum_x, (1, 0), results)
        state.spawn_accum_y = self._drain_axis(state, structure, state.spawn_accum_y, (0, 1), results)
        return results

    def _drain_axis(
        self,
        state: HandState,
        structure: Structure,
        accum: float,
        axis: tuple[int, int],
        results: list[EditResult],
    ) -> float:
        while abs(accum) >= 1.0:
            step = 1 if accum > 0 else -1
            accum -= step
            tip = structure.get(state.last_spawned_block)
            if tip is None:
                continue
            cell = (tip.x + axis[0] * step, tip.y + axis[1] * step)
            block = structure.add_block(*cell)
            if block is None:
                results.append(EditResult(kind="spawn", status="occupied", cell=cell))
                continue
            state.last_spawned_block = block.id
            results.append(EditResult(kind="spawn", status="ok", block_id=block.id, cell=cell))
        return accum
