"""Route a dragging hand to the executor for its interaction mode."""

from __future__ import annotations

import numpy as np

from gesture_module.hand_state import HandState, InteractionMode
from interaction_controller.executors.base import BaseExecutor, EditResult
from interaction_controller.executors.move_executor import MoveExecutor
from interaction_controller.executors.spawn_executor import SpawnExecutor
from scene_module.structure import Structure


class ModeRouter(BaseExecutor):
    def __init__(
        self,
        *,
        move: BaseExecutor | None = None,
        spawn: BaseExecutor | None = None,
    ) -> None:
        self._executors: dict[InteractionMode, BaseExecutor] = {
            InteractionMode.MOVE: move or MoveExecutor(),
            InteractionMode.SPAWN: spawn or SpawnExecutor(),
        }

    def execute(
        self, state: HandState, structure: Structure, pinch_world_pos: np.ndarray
    ) -> list[EditResult]:
        if not state.is_dragging:
            return []
        executor = self._executors.get(state.interaction_mode)
        if executor is None:
            return []
        return executor.execute(state, structure, pinch_world_pos)
