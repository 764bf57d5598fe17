import pytest

from gesture_module.config import InteractionConfig


@pytest.fixture
def config():
    """Defaults with smoothing disabled so smoothed points equal raw input."""
    return InteractionConfig(smoothing=1.0, fingertip_smoothing=1.0, rotation_smoothing=1.0)
