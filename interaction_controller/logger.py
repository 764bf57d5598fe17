"""Interaction milestone logger (selection, mode decisions, resets)."""

from utils.log_utils import log


class InteractionLogger:
    def __init__(self, system: str = "INTERACT") -> None:
        self.system = system

    def info(self, message: str) -> None:
        log(self.system, message)

    def warn(self, message: str) -> None:
        log(self.system, message, "WARN")

    def error(self, message: str) -> None:
        log(self.system, message, "ERROR")
