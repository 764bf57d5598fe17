"""Discrete interaction events emitted by a detection tick."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

PINCH_START = "pinch_start"
PINCH_RELEASE = "pinch_release"
ROTATION_START = "rotation_start"
ROTATION_RELEASE = "rotation_release"
ROTATE = "rotate"
SELECT = "select"
MODE = "mode"
MOVE = "move"
SPAWN = "spawn"
HAND_RESET = "hand_reset"


@dataclass
class InteractionEvent:
    kind: str
    hand: str
    timestamp: float
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "kind": self.kind,
            "hand": self.hand,
            "timestamp": self.timestamp,
        }
        if self.details:
            payload["details"] = self.details
        return payload
