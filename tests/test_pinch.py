"""Tests for the pinch debounce state machine and PinchDetector."""

import numpy as np
import pytest

from gesture_module.config import InteractionConfig
from gesture_module.hand_state import HandState, PinchPhase
from gesture_module.pinch import PinchDetector, hand_scale, next_pinch_phase
from gesture_module.smoothing import KeypointSmoother

from frames import OPEN_GAP, TICK, build_frame

CLOSED = 0.01
OPEN = 0.2


def _step(state, distance, t, cfg):
    return next_pinch_phase(state, distance, t, cfg)


class TestPinchStateMachine:
    """Test suite for next_pinch_phase."""

    def test_activates_after_required_frames(self):
        """Test that a closed pinch must persist for the activation count."""
        cfg = InteractionConfig(pinch_activation_frames=3)
        state = HandState(label="Right")

        phases = [_step(state, CLOSED, i * TICK, cfg) for i in range(3)]

        assert phases == [PinchPhase.PENDING, PinchPhase.PENDING, PinchPhase.ACTIVE]

    def test_short_flicker_never_activates(self):
        """Test that fewer closed frames than required fall back to idle."""
        cfg = InteractionConfig(pinch_activation_frames=3)
        state = HandState(label="Right")

        _step(state, CLOSED, 0.0, cfg)
        _step(state, CLOSED, TICK, cfg)
        phase = _step(state, OPEN, 2 * TICK, cfg)

        assert phase is PinchPhase.IDLE
        assert state.pinch_frame_count == 0

    def test_single_activation_frame_is_immediate(self):
        """Test that an activation count of one skips the pending phase."""
        cfg = InteractionConfig(pinch_activation_frames=1)
        state = HandState(label="Right")

        assert _step(state, CLOSED, 0.0, cfg) is PinchPhase.ACTIVE

    def test_hysteresis_holds_between_thresholds(self):
        """Test that a distance between start and stop keeps the pinch active."""
        cfg = InteractionConfig(pinch_activation_frames=1)
        state = HandState(label="Right")
        _step(state, CLOSED, 0.0, cfg)

        phase = _step(state, 0.06, TICK, cfg)

        assert phase is PinchPhase.ACTIVE

    def test_release_enters_cooldown(self):
        """Test that opening past the stop threshold releases into cooldown."""
        cfg = InteractionConfig(pinch_activation_frames=1, pinch_cooldown=0.25)
        state = HandState(label="Right")
        _step(state, CLOSED, 0.0, cfg)

        phase = _step(state, OPEN, 1.0, cfg)

        assert phase is PinchPhase.COOLDOWN
        assert state.cooldown_until == pytest.approx(1.25)

    def test_release_frames_debounce(self):
        """Test that release needs consecutive open frames when configured."""
        cfg = InteractionConfig(pinch_activation_frames=1, pinch_release_frames=2)
        state = HandState(label="Right")
        _step(state, CLOSED, 0.0, cfg)

        assert _step(state, OPEN, TICK, cfg) is PinchPhase.ACTIVE
        assert _step(state, CLOSED, 2 * TICK, cfg) is PinchPhase.ACTIVE
        assert _step(state, OPEN, 3 * TICK, cfg) is PinchPhase.ACTIVE
        assert _step(state, OPEN, 4 * TICK, cfg) is PinchPhase.COOLDOWN

    def test_cooldown_blocks_repinch_until_elapsed(self):
        """Test that the hand cannot pinch again until the cooldown expires."""
        cfg = InteractionConfig(pinch_activation_frames=1, pinch_cooldown=0.25)
        state = HandState(label="Right")
        _step(state, CLOSED, 0.0, cfg)
        _step(state, OPEN, 1.0, cfg)

        assert _step(state, CLOSED, 1.1, cfg) is PinchPhase.COOLDOWN
        assert _step(state, CLOSED, 1.25, cfg) is PinchPhase.IDLE
        assert _step(state, CLOSED, 1.3, cfg) is PinchPhase.ACTIVE

    def test_thresholds_scale_with_hand_size(self):
        """Test that a larger hand pinches at a proportionally larger gap."""
        cfg = InteractionConfig(pinch_activation_frames=1)
        small = HandState(label="Right")
        large = HandState(label="Left")

        assert _step(small, 0.08, 0.0, cfg) is PinchPhase.IDLE
        assert next_pinch_phase(large, 0.08, 0.0, cfg, scale=2.0) is PinchPhase.ACTIVE


class TestPinchDetector:
    """Test suite for PinchDetector on smoothed keypoints."""

    def _run(self, config, frames):
        smoother = KeypointSmoother(config)
        detector = PinchDetector(config)
        state = HandState(label="Right")
        readings = []
        for frame in frames:
            smoother.update(state, frame)
            readings.append(detector.update(state, frame.timestamp))
        return state, readings

    def test_three_tick_pinch_reports_start_once(self, config):
        """Test that a held pinch reports started exactly on the activation tick."""
        frames = [build_frame(t=i * TICK) for i in range(4)]

        state, readings = self._run(config, frames)

        assert [r.active for r in readings] == [False, False, True, True]
        assert [r.started for r in readings] == [False, False, True, False]
        assert state.pinch_phase is PinchPhase.ACTIVE

    def test_release_reported_once(self, config):
        """Test that opening the hand reports released on one tick."""
        frames = [build_frame(t=i * TICK) for i in range(3)]
        frames.append(build_frame(t=3 * TICK, gap=OPEN_GAP))
        frames.append(build_frame(t=4 * TICK, gap=OPEN_GAP))

        _, readings = self._run(config, frames)

        assert [r.released for r in readings] == [False, False, False, True, False]

    def test_world_position_is_fingertip_midpoint(self, config):
        """Test that the pinch point maps to the world position of the tip midpoint."""
        _, readings = self._run(config, [build_frame(t=0.0, at=(1.5, -2.0))])

        assert readings[0].world_pos[0] == pytest.approx(1.5)
        assert readings[0].world_pos[1] == pytest.approx(-2.0)
        assert readings[0].world_pos[2] == pytest.approx(0.0)

    def test_previous_world_position_tracks_last_tick(self, config):
        """Test that the detector keeps the prior tick's pinch point for deltas."""
        frames = [build_frame(t=0.0, at=(0.0, 0.0)), build_frame(t=TICK, at=(0.5, 0.0))]

        state, _ = self._run(config, frames)

        assert np.allclose(state.prev_pinch_world_pos[:2], [0.0, 0.0])
        assert np.allclose(state.pinch_world_pos[:2], [0.5, 0.0])

    def test_hand_scale_uses_wrist_to_middle_mcp(self, config):
        """Test that hand scale is relative to the reference hand size."""
        state, _ = self._run(config, [build_frame(t=0.0)])

        expected = np.hypot(0.02, 0.12) / config.hand_size_reference
        assert hand_scale(state, config) == pytest.approx(expected)
