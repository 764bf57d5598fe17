from gesture_module.config import GestureConfig, InteractionConfig, TrackingConfig, load_config
from gesture_module.hand_state import HandState, InteractionMode, PinchPhase, RotationPhase
from gesture_module.keypoints import KeypointFrame


def __getattr__(name):
    # The workflow pulls in interaction_controller, and the camera pieces pull
    # in MediaPipe; both load on first use.
    if name == "GestureWorkflow":
        from gesture_module.workflow import GestureWorkflow

        return GestureWorkflow
    if name == "RealTimeGestureRecognizer":
        from gesture_module.gesture_recognizer import RealTimeGestureRecognizer

        return RealTimeGestureRecognizer
    if name == "HandTracker":
        from gesture_module.hand_tracking import HandTracker

        return HandTracker
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "GestureConfig",
    "GestureWorkflow",
    "HandState",
    "HandTracker",
    "InteractionConfig",
    "InteractionMode",
    "KeypointFrame",
    "PinchPhase",
    "RealTimeGestureRecognizer",
    "RotationPhase",
    "TrackingConfig",
    "load_config",
]
