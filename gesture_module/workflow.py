"""Session helpers: own the interaction core and start/stop camera detection.

The camera stays closed until ``start_session`` is called.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from gesture_module.config import GestureConfig, load_config, save_config
from interaction_controller.controller import InteractionController
from utils.log_utils import log


class GestureWorkflow:
    """Wraps the interaction controller and the realtime recognizer for one user."""

    def __init__(
        self,
        config: GestureConfig | None = None,
        *,
        config_path: str | Path = "config/gesture_config.json",
    ) -> None:
        self.config_path = Path(config_path)
        self.config = config or load_config(self.config_path)
        self.controller = InteractionController(self.config.interaction)
        self._recognizer = None

    def start_session(self, *, show_window: bool = False) -> None:
        """Open the camera and start feeding detection ticks."""
        if self._recognizer and self._recognizer.is_running():
            log("GESTURE", "Session already running")
            return
        from gesture_module.gesture_recognizer import RealTimeGestureRecognizer

        self._recognizer = RealTimeGestureRecognizer(
            self.controller,
            tracking=self.config.tracking,
            show_window=show_window,
        )
        try:
            self._recognizer.start()
        except RuntimeError:
            self._recognizer.stop()
            self._recognizer = None
            raise
        log("GESTURE", "Session started")

    def run_blocking(self, *, show_window: bool = True) -> None:
        from gesture_module.gesture_recognizer import RealTimeGestureRecognizer

        self._recognizer = RealTimeGestureRecognizer(
            self.controller,
            tracking=self.config.tracking,
            show_window=show_window,
        )
        try:
            self._recognizer.start_blocking()
        finally:
            self.stop_session()

    def stop_session(self) -> None:
        if self._recognizer:
            try:
                self._recognizer.stop()
            finally:
                self._recognizer = None
                log("GESTURE", "Session stopped")

    def is_running(self) -> bool:
        return bool(self._recognizer and self._recognizer.is_running())

    def update_interaction(self, updates: dict[str, Any], *, persist: bool = False) -> GestureConfig:
        """Apply tunable changes live; ``persist`` also writes them to the config file."""
        interaction = self.config.interaction.merged(updates)
        self.controller.configure(interaction)
        self.config = GestureConfig(interaction=interaction, tracking=self.config.tracking)
        if persist:
            save_config(self.config, self.config_path)
        return self.config

    def reset_structure(self) -> None:
        self.controller.reset_structure()
