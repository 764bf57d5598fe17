"""Grid-snapped repositioning of the grabbed block."""

from __future__ import annotations

import numpy as np

from gesture_module.hand_state import HandState
from interaction_controller.executors.base import BaseExecutor, EditResult
from scene_module.structure import Structure


class MoveExecutor(BaseExecutor):
    def execute(
        self, state: HandState, structure: Structure, pinch_world_pos: np.ndarray
    ) -> list[EditResult]:
        block = structure.get(state.selected_block)
        if block is None or state.drag_offset is None:
            return []
        target = pinch_world_pos + state.drag_offset
        cell = (structure.snap(target[0]), structure.snap(target[1]))
        if cell == block.cell:
            return []
        if not structure.move_block(block.id, *cell):
            # Occupied; the same target is retried on the next tick.
            return [EditResult(kind="move", status="occupied", block_id=block.id, cell=cell)]
        return [EditResult(kind="move", status="ok", block_id=block.id, cell=cell)]
