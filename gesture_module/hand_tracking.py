"""MediaPipe Hands adapter producing KeypointFrames."""

from __future__ import annotations

import cv2
import mediapipe as mp

from gesture_module.config import TrackingConfig
from gesture_module.keypoints import KeypointFrame
from utils.log_utils import log


class HandTracker:
    """Wraps MediaPipe Hands for up to two hands per frame."""

    def __init__(self, config: TrackingConfig | None = None) -> None:
        cfg = config or TrackingConfig()
        self._hands = mp.solutions.hands.Hands(
            static_image_mode=False,
            max_num_hands=cfg.max_num_hands,
            min_detection_confidence=cfg.min_detection_confidence,
            min_tracking_confidence=cfg.min_tracking_confidence,
            model_complexity=cfg.model_complexity,
        )
        self._drawer = mp.solutions.drawing_utils
        self.last_results = None

    def process(self, frame, timestamp: float) -> list[KeypointFrame]:
        """Detect hands in a BGR frame. Malformed detections are dropped."""
        results = self._hands.process(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
        self.last_results = results
        detections: list[KeypointFrame] = []
        if not results.multi_hand_landmarks:
            return detections

        handedness = results.multi_handedness or []
        for idx, hand_landmarks in enumerate(results.multi_hand_landmarks):
            label = f"Hand{idx}"
            if idx < len(handedness):
                label = handedness[idx].classification[0].label
            try:
                detections.append(KeypointFrame.from_landmarks(label, hand_landmarks.landmark, timestamp))
            except ValueError as exc:
                log("HAND", f"Dropping {label} detection: {exc}", "WARN")
        return detections

    def draw(self, frame) -> None:
        if self.last_results is None or not self.last_results.multi_hand_landmarks:
            return
        for hand_landmarks in self.last_results.multi_hand_landmarks:
            self._drawer.draw_landmarks(frame, hand_landmarks, mp.solutions.hands.HAND_CONNECTIONS)

    def close(self) -> None:
        self._hands.close()
