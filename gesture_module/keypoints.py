"""Keypoint frames and the camera → world mapping."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

_HAND_LANDMARKS = 21
_LANDMARK_DIMS = 3  # x, y, z

# MediaPipe Hands landmark indices
WRIST = 0
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_TIP = 12
RING_TIP = 16
PINKY_MCP = 17
PINKY_TIP = 20

TRACKED_POINTS = ("index_tip", "thumb_tip", "wrist", "index_mcp", "pinky_mcp", "middle_mcp")
FINGERTIP_POINTS = ("index_tip", "thumb_tip")

_TRACKED_INDICES = {
    "index_tip": INDEX_TIP,
    "thumb_tip": THUMB_TIP,
    "wrist": WRIST,
    "index_mcp": INDEX_MCP,
    "pinky_mcp": PINKY_MCP,
    "middle_mcp": MIDDLE_MCP,
}

_FINGERTIP_INDICES = {
    "thumb": THUMB_TIP,
    "index": INDEX_TIP,
    "middle": MIDDLE_TIP,
    "ring": RING_TIP,
    "pinky": PINKY_TIP,
}


def as_point(value: Sequence[float]) -> np.ndarray:
    point = np.asarray(value, dtype=np.float64).reshape(-1)
    if point.shape != (_LANDMARK_DIMS,):
        raise ValueError(f"Expected a 3D point, got shape {point.shape}")
    if not np.all(np.isfinite(point)):
        raise ValueError("Point contains non-finite values")
    return point


@dataclass
class KeypointFrame:
    """One detected hand at one sample tick."""

    hand_label: str
    timestamp: float
    points: dict[str, np.ndarray]
    fingertips: dict[str, np.ndarray] = field(default_factory=dict)

    def __post_init__(self) -> None:
        missing = [name for name in TRACKED_POINTS if name not in self.points]
        if missing:
            raise ValueError(f"KeypointFrame missing points: {', '.join(missing)}")
        self.points = {name: as_point(self.points[name]) for name in TRACKED_POINTS}
        self.fingertips = {name: as_point(p) for name, p in self.fingertips.items()}
        self.fingertips.setdefault("thumb", self.points["thumb_tip"])
        self.fingertips.setdefault("index", self.points["index_tip"])

    @classmethod
    def from_landmarks(cls, hand_label: str, landmarks, timestamp: float) -> "KeypointFrame":
        """Build a frame from 21 MediaPipe landmarks or a (21, 3) array."""
        if len(landmarks) != _HAND_LANDMARKS:
            raise ValueError(f"Expected {_HAND_LANDMARKS} landmarks, got {len(landmarks)}")
        if isinstance(landmarks, np.ndarray):
            coords = landmarks.astype(np.float64).reshape(_HAND_LANDMARKS, _LANDMARK_DIMS)
        else:
            coords = np.array([[lm.x, lm.y, lm.z] for lm in landmarks], dtype=np.float64)
        return cls(
            hand_label=hand_label,
            timestamp=float(timestamp),
            points={name: coords[idx] for name, idx in _TRACKED_INDICES.items()},
            fingertips={name: coords[idx] for name, idx in _FINGERTIP_INDICES.items()},
        )


def to_world(point: np.ndarray, *, world_scale: float, mirror_x: bool = True) -> np.ndarray:
    """Map a camera-normalized point into world units centred on the frame."""
    x = 1.0 - point[0] if mirror_x else point[0]
    return np.array(
        [
            (x - 0.5) * world_scale,
            -(point[1] - 0.5) * world_scale,
            -point[2] * world_scale,
        ],
        dtype=np.float64,
    )


def midpoint(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return (a + b) * 0.5


def distance(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.linalg.norm(a - b))


def planar_distance(a: np.ndarray, b: np.ndarray) -> float:
    """Distance in the XY interaction plane."""
    return float(np.hypot(a[0] - b[0], a[1] - b[1]))
