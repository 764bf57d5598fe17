"""Executor interfaces and edit result payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from gesture_module.hand_state import HandState
from scene_module.structure import Structure


@dataclass
class EditResult:
    kind: str
    status: str
    block_id: int | None = None
    cell: tuple[int, int] | None = None
    details: dict[str, Any] | None = None

    @property
    def applied(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"kind": self.kind, "status": self.status}
        if self.block_id is not None:
            payload["block_id"] = self.block_id
        if self.cell is not None:
            payload["cell"] = list(self.cell)
        if self.details is not None:
            payload["details"] = self.details
        return payload


class BaseExecutor:
    def execute(
        self, state: HandState, structure: Structure, pinch_world_pos: np.ndarray
    ) -> list[EditResult]:
        raise NotImplementedError
