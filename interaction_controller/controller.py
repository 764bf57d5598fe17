"""Per-tick interaction pipeline: keypoints in, structure edits out."""

from __future__ import annotations

import threading
from collections import deque
from typing import Iterable

from gesture_module.config import InteractionConfig
from gesture_module.hand_state import HandState, InteractionMode
from gesture_module.keypoints import KeypointFrame, to_world
from gesture_module.lifecycle import HandLifecycleManager, release_hand
from gesture_module.pinch import PinchDetector
from gesture_module.rotation import RotationDetector
from gesture_module.smoothing import KeypointSmoother, predict
from interaction_controller import events as ev
from interaction_controller.events import InteractionEvent
from interaction_controller.executors.router import ModeRouter
from interaction_controller.logger import InteractionLogger
from interaction_controller.mode_resolver import InteractionModeResolver
from interaction_controller.targeting import TargetResolver
from scene_module.structure import Structure
from utils.settings_store import deep_log


class InteractionController:
    """Runs one detection tick at a time against a shared Structure.

    A tick holds the controller lock from start to finish, so ``snapshot()``
    callers on another thread (the renderer/API) only ever see fully committed
    state.
    """

    def __init__(
        self,
        config: InteractionConfig | None = None,
        *,
        structure: Structure | None = None,
        hands: dict[str, HandState] | None = None,
        logger: InteractionLogger | None = None,
        history_size: int = 200,
    ) -> None:
        self.config = (config or InteractionConfig()).validate()
        self.structure = structure or self._new_structure()
        self.lifecycle = HandLifecycleManager(self.config, hands)
        self.logger = logger or InteractionLogger()
        self._lock = threading.Lock()
        self._events: deque[InteractionEvent] = deque(maxlen=history_size)
        self._build_stages()
        self.ticks = 0

    @property
    def hands(self) -> dict[str, HandState]:
        return self.lifecycle.hands

    def _new_structure(self) -> Structure:
        return Structure(grid_unit=self.config.grid_unit, depth=self.config.structure_depth)

    def _build_stages(self) -> None:
        self.smoother = KeypointSmoother(self.config)
        self.pinch = PinchDetector(self.config)
        self.rotation = RotationDetector(self.config)
        self.targeting = TargetResolver(self.config)
        self.modes = InteractionModeResolver(self.config)
        self.router = ModeRouter()

    def configure(self, config: InteractionConfig) -> None:
        """Swap tunables between ticks; hand and structure state are kept."""
        config.validate()
        with self._lock:
            self.config = config
            self.lifecycle.config = config
            self.structure.grid_unit = config.grid_unit
            self._build_stages()

    def tick(self, frames: Iterable[KeypointFrame], now: float) -> list[InteractionEvent]:
        """Process every hand detected in one sample tick."""
        by_label: dict[str, KeypointFrame] = {}
        for frame in frames:
            # A duplicated label in one tick keeps the later detection.
            by_label[frame.hand_label] = frame

        with self._lock:
            emitted: list[InteractionEvent] = []
            for state in self.lifecycle.mark_missing(by_label):
                self.logger.info(f"Hand {state.label} lost for {state.frames_missing} frames, state reset")
                emitted.append(InteractionEvent(ev.HAND_RESET, state.label, now, {"reason": "missing"}))

            dragging = self.lifecycle.any_dragging()
            for label in sorted(by_label):
                state = self.lifecycle.ensure(label)
                emitted.extend(self._process_hand(state, by_label[label], now, blocked=dragging))
                dragging = dragging or state.is_dragging

            self.ticks += 1
            self._events.extend(emitted)
            return emitted

    def _process_hand(
        self, state: HandState, frame: KeypointFrame, now: float, *, blocked: bool
    ) -> list[InteractionEvent]:
        out: list[InteractionEvent] = []
        label = state.label

        self.smoother.update(state, frame)
        reading = self.pinch.update(state, now)
        if reading.started:
            out.append(InteractionEvent(ev.PINCH_START, label, now))
        if reading.released:
            out.append(InteractionEvent(ev.PINCH_RELEASE, label, now, {"block_id": state.selected_block}))
            if release_hand(state):
                self.logger.info(f"Hand {label} released")

        rotation = self.rotation.update(state, frame, reading.active)
        if rotation.started:
            out.append(InteractionEvent(ev.ROTATION_START, label, now, {"yaw": rotation.yaw}))
        if rotation.released:
            out.append(InteractionEvent(ev.ROTATION_RELEASE, label, now, {"yaw": self.structure.yaw}))
        if rotation.applied:
            self.structure.rotate(rotation.applied)
            out.append(InteractionEvent(ev.ROTATE, label, now, {"delta": rotation.applied, "yaw": self.structure.yaw}))

        if not reading.active:
            state.anchor_candidate = None
            return out

        if not state.is_dragging:
            selected = self.targeting.update(state, self.structure, reading.world_pos, now, blocked=blocked)
            if selected is not None:
                self.logger.info(f"Hand {label} grabbed block {selected.id} at {selected.cell}")
                out.append(InteractionEvent(ev.SELECT, label, now, {"block_id": selected.id, "cell": list(selected.cell)}))
            return out

        if state.interaction_mode is InteractionMode.NONE:
            mode = self.modes.resolve(state, self.structure, reading.world_pos, now)
            if mode is InteractionMode.NONE:
                return out
            self.logger.info(f"Hand {label} drag resolved to {mode.value}")
            out.append(InteractionEvent(ev.MODE, label, now, {"mode": mode.value, "block_id": state.selected_block}))
            return out

        for result in self.router.execute(state, self.structure, reading.world_pos):
            if not result.applied:
                deep_log(f"[DEEP][INTERACT] {label} {result.kind} rejected cell={result.cell}")
                continue
            kind = ev.MOVE if result.kind == "move" else ev.SPAWN
            out.append(InteractionEvent(kind, label, now, {"block_id": result.block_id, "cell": list(result.cell)}))
        return out

    def reset_structure(self) -> None:
        with self._lock:
            self.structure = self._new_structure()
            self.lifecycle.clear()
            self._events.clear()
        self.logger.info("Structure reset to seed block")

    def recent_events(self, limit: int = 50) -> list[dict]:
        with self._lock:
            items = list(self._events)[-limit:] if limit > 0 else []
        return [item.to_dict() for item in items]

    def _cursor(self, state: HandState) -> list[float] | None:
        """Predicted index fingertip in world units, for the renderer's pointer."""
        if state.frames_missing > 0:
            return None
        point = predict(state, "index_tip", self.config.prediction_lead)
        if point is None:
            return None
        world = to_world(point, world_scale=self.config.world_scale, mirror_x=self.config.mirror_x)
        return [float(v) for v in world]

    def snapshot(self) -> dict:
        """Committed structure and hand state, safe to read between ticks."""
        with self._lock:
            hands = []
            for state in self.lifecycle:
                summary = state.summary()
                summary["cursor"] = self._cursor(state)
                hands.append(summary)
            return {
                "tick": self.ticks,
                "structure": self.structure.snapshot(),
                "hands": hands,
            }
