"""Realtime detection loop that feeds camera keypoints into the interaction core.

Reads frames from video_module, runs MediaPipe Hands, and hands each tick's
KeypointFrames to InteractionController. The renderer never talks to this
loop; it reads controller snapshots on its own schedule.
"""

from __future__ import annotations

import threading
import time
from typing import Optional

import cv2

from gesture_module.config import TrackingConfig
from gesture_module.hand_tracking import HandTracker
from interaction_controller.controller import InteractionController
from utils.log_utils import log
from video_module import VideoStream


class RealTimeGestureRecognizer:
    def __init__(
        self,
        controller: InteractionController,
        *,
        tracking: TrackingConfig | None = None,
        show_window: bool = False,
        clock=time.monotonic,
    ) -> None:
        self.controller = controller
        self.tracking = tracking or TrackingConfig()
        self.show_window = show_window
        self._clock = clock
        self._thread: Optional[threading.Thread] = None
        self._window_name = "Gesture Blocks"
        self.stream = VideoStream(
            device_index=self.tracking.device_index,
            width=self.tracking.frame_width,
            height=self.tracking.frame_height,
        )
        self.tracker = HandTracker(self.tracking)
        self.active = False

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            log("GESTURE", "Recognizer already running (background)")
            return
        if self.active:
            log("GESTURE", "Recognizer already running")
            return
        # Open here so camera errors reach the caller instead of dying in the thread.
        self.stream.open()

        def _runner() -> None:
            try:
                self._run_loop()
            except Exception as exc:  # pragma: no cover
                log("GESTURE", f"Recognizer error: {exc}", "ERROR")
            finally:
                self.active = False

        self._thread = threading.Thread(target=_runner, name="GestureRecognizer", daemon=True)
        self._thread.start()

    def start_blocking(self) -> None:
        if self.active:
            log("GESTURE", "Recognizer already running")
            return
        self._run_loop()

    def _run_loop(self) -> None:
        self.stream.open()
        self.active = True
        log("GESTURE", "Detection started" + (", press 'q' to exit" if self.show_window else ""))
        try:
            while self.active:
                ok, frame = self.stream.read()
                if not ok or frame is None:
                    log("GESTURE", "Failed to read from camera.", "WARN")
                    break

                now = self._clock()
                frames = self.tracker.process(frame, now)
                self.controller.tick(frames, now)

                if self.show_window:
                    self._draw_preview(frame)
                    if (cv2.waitKey(1) & 0xFF) == ord("q"):
                        break
        except cv2.error as exc:
            log("GESTURE", f"OpenCV error: {exc}", "ERROR")
        finally:
            self.active = False
            self.stream.close()
            if self.show_window:
                cv2.destroyAllWindows()
            log("GESTURE", "Detection stopped")

    def _draw_preview(self, frame) -> None:
        self.tracker.draw(frame)
        snapshot = self.controller.snapshot()
        lines = [f"blocks={len(snapshot['structure']['blocks'])} yaw={snapshot['structure']['yaw']:.2f}"]
        for hand in snapshot["hands"]:
            lines.append(
                f"{hand['label']}: pinch={hand['pinch_phase']} rot={hand['rotation_phase']} "
                f"mode={hand['interaction_mode']}"
            )
        for row, text in enumerate(lines):
            cv2.putText(frame, text, (10, 30 + row * 26), cv2.FONT_HERSHEY_SIMPLEX, 0.6, (0, 255, 0), 2)
        cv2.imshow(self._window_name, frame)

    def stop(self) -> None:
        self.active = False
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=2)
        self._thread = None
        self.tracker.close()

    def is_running(self) -> bool:
        return bool((self._thread and self._thread.is_alive()) or self.active)
