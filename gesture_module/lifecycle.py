"""Hand presence tracking and forced resets for hands that leave the camera."""

from __future__ import annotations

from typing import Iterable, Iterator

from gesture_module.config import InteractionConfig
from gesture_module.hand_state import HandState, PinchPhase, RotationPhase


def release_hand(state: HandState) -> bool:
    """Drop any drag or selection the hand holds. Safe to call repeatedly."""
    return state.reset_interaction()


class HandLifecycleManager:
    """Owns the label → HandState mapping.

    States are created on first sighting and survive short dropouts; a hand
    that stays missing past ``missing_hand_reset_frames`` while still holding a
    gesture is reset so the structure cannot stay stuck in a drag.
    """

    def __init__(self, config: InteractionConfig, hands: dict[str, HandState] | None = None) -> None:
        self.config = config
        self.hands: dict[str, HandState] = hands if hands is not None else {}

    def __contains__(self, label: str) -> bool:
        return label in self.hands

    def __iter__(self) -> Iterator[HandState]:
        return iter(self.hands.values())

    def get(self, label: str) -> HandState | None:
        return self.hands.get(label)

    def ensure(self, label: str) -> HandState:
        state = self.hands.get(label)
        if state is None:
            state = HandState(label=label)
            self.hands[label] = state
        return state

    def any_dragging(self) -> bool:
        return any(state.is_dragging for state in self.hands.values())

    def mark_missing(self, present: Iterable[str]) -> list[HandState]:
        """Age out hands not seen this tick; returns the hands that were reset.

        A reset hand is replaced by a fresh HandState, so when it comes back
        its first frame is taken raw instead of blended toward the spot where
        it was lost.
        """
        seen = set(present)
        reset: list[HandState] = []
        for label, state in list(self.hands.items()):
            if label in seen:
                continue
            state.frames_missing += 1
            if state.frames_missing > self.config.missing_hand_reset_frames and _is_stuck(state):
                self.force_reset(state)
                self.hands[label] = HandState(label=label, frames_missing=state.frames_missing)
                reset.append(state)
        return reset

    def force_reset(self, state: HandState) -> None:
        release_hand(state)
        state.reset_gestures()

    def clear(self) -> None:
        self.hands.clear()


def _is_stuck(state: HandState) -> bool:
    return (
        state.is_dragging
        or state.anchor_candidate is not None
        or state.pinch_phase is not PinchPhase.IDLE
        or state.rotation_phase is not RotationPhase.IDLE
    )
