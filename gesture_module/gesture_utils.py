"""Utility helpers for gesture calculations."""

import math

import numpy as np


def lerp(current: np.ndarray, target: np.ndarray, alpha: float) -> np.ndarray:
    return current + (target - current) * alpha


def wrap_angle(angle: float) -> float:
    """Wrap an angle in radians to [-pi, pi]."""
    wrapped = math.atan2(math.sin(angle), math.cos(angle))
    return wrapped


def angle_delta(target: float, current: float) -> float:
    """Shortest signed rotation taking ``current`` to ``target``."""
    return wrap_angle(target - current)
