"""Tests for pinch and scissors detection."""

import numpy as np
import pytest

from gesture_core.config import ConfigError, PinchConfig, ScissorsConfig
from gesture_core.detectors import (
    GestureState,
    PinchGestureDetector,
    ScissorsGestureDetector,
    TipDistanceDetector,
)

FRAME = (1000, 1000)


def make_hand(points):
    """Zeroed hand with the given {index: (x, y, z)} landmarks set."""
    lm = np.zeros((21, 3), dtype=np.float64)
    for idx, xyz in points.items():
        lm[idx] = xyz
    return lm


def make_pinch_hand():
    # hand length 0.5, tips 0.015625 apart
    return make_hand({
        0: (0.5, 0.875, 0.0),
        4: (0.5, 0.375, 0.0),
        8: (0.515625, 0.375, 0.0),
        12: (0.75, 0.25, 0.0),
    })


def make_scissors_hand():
    # middle tip 0.5 from wrist, index 0.03125 from middle
    return make_hand({
        0: (0.5, 0.875, 0.0),
        4: (0.25, 0.625, 0.0),
        8: (0.53125, 0.375, 0.0),
        12: (0.5, 0.375, 0.0),
    })


def scale_about_wrist(lm, k):
    return lm[0] + (lm - lm[0]) * k


class TestPinch:
    def test_defaults(self):
        assert PinchGestureDetector().threshold == 0.1
        assert PinchGestureDetector.from_config(PinchConfig(threshold=0.2)).threshold == 0.2

    def test_exact_boundary_is_not_pinch(self):
        det = PinchGestureDetector(threshold=0.5)
        lm = make_hand({0: (0, 0, 0), 4: (0.5, 0, 0), 8: (0.75, 0, 0)})
        assert det.update(lm, FRAME) == GestureState(is_active=False)
        assert not det.is_active

    def test_pinch_reports_truncated_midpoint(self):
        det = PinchGestureDetector(threshold=0.2)
        lm = make_hand({0: (0, 0, 0), 4: (0.25, 0, 0), 8: (0.265625, 0, 0)})
        state = det.update(lm, FRAME)
        assert state.is_active
        # midpoint 0.2578125 * 1000 = 257.8125
        assert (det.x, det.y) == (257, 0)
        assert state.point == (257, 0)

    def test_boundary_with_decimal_coordinates(self):
        # 0.12 - 0.1 lands a hair below 0.1 * 0.2 in floating point
        det = PinchGestureDetector(threshold=0.2)
        lm = make_hand({0: (0, 0, 0), 4: (0.1, 0, 0), 8: (0.12, 0, 0)})
        assert det.update(lm, FRAME).is_active is False
        assert det.x is None

    def test_inside_threshold_with_decimal_coordinates(self):
        det = PinchGestureDetector(threshold=0.2)
        lm = make_hand({0: (0, 0, 0), 4: (0.1, 0, 0), 8: (0.11, 0, 0)})
        assert det.update(lm, FRAME).is_active is True
        assert (det.x, det.y) == (105, 0)

    def test_negative_coordinates_truncate_toward_zero(self):
        det = PinchGestureDetector()
        lm = make_hand({0: (0, 0, 0), 4: (-0.5, 0, 0), 8: (-0.515625, 0, 0)})
        det.update(lm, (100, 100))
        assert det.is_active
        assert det.x == -50

    def test_uses_z(self):
        det = PinchGestureDetector()
        lm = make_pinch_hand()
        lm[8, 2] = 0.2
        assert not det.update(lm, FRAME).is_active

    @pytest.mark.parametrize("k", [0.25, 0.5, 1.5, 1.9])
    def test_scale_invariance(self, k):
        det = PinchGestureDetector()
        active = make_pinch_hand()
        inactive = make_scissors_hand()
        assert det.update(scale_about_wrist(active, k), FRAME).is_active
        assert not det.update(scale_about_wrist(inactive, k), FRAME).is_active

    def test_empty_landmarks_deactivate(self):
        det = PinchGestureDetector()
        det.update(make_pinch_hand(), FRAME)
        assert det.is_active

        for empty in (None, [], np.zeros((0, 3))):
            state = det.update(empty, FRAME)
            assert not state.is_active
            assert det.x is None and det.y is None

    def test_last_point_survives_inactive_frames(self):
        det = PinchGestureDetector()
        det.update(make_pinch_hand(), FRAME)
        point = det.state.point
        det.update(None, FRAME)
        assert det.last_point == point

    def test_degenerate_hand(self):
        det = PinchGestureDetector()
        assert not det.update(np.full((21, 3), 0.5), FRAME).is_active

    def test_partial_hand(self):
        det = PinchGestureDetector()
        assert not det.update(make_pinch_hand()[:12], FRAME).is_active

    def test_dict_landmarks_without_z(self):
        det = PinchGestureDetector()
        points = [{"x": float(x), "y": float(y)} for x, y, _ in make_pinch_hand()]
        assert det.update(points, FRAME).is_active

    def test_frame_size_object(self):
        class Canvas:
            width = 640
            height = 480

        det = PinchGestureDetector()
        det.update(make_pinch_hand(), Canvas())
        # midpoint (0.5078125, 0.375)
        assert det.state.point == (325, 180)


class TestScissors:
    def test_defaults(self):
        assert ScissorsGestureDetector().threshold == 0.12
        assert ScissorsGestureDetector.from_config(ScissorsConfig(threshold=0.3)).threshold == 0.3

    def test_detects_and_reports_midpoint(self):
        det = ScissorsGestureDetector()
        state = det.update(make_scissors_hand(), (640, 480))
        assert state.is_active
        # midpoint (0.515625, 0.375)
        assert state.point == (330, 180)

    @pytest.mark.parametrize("k", [0.25, 0.5, 1.5, 1.9])
    def test_scale_invariance(self, k):
        det = ScissorsGestureDetector()
        state = det.update(scale_about_wrist(make_scissors_hand(), k), FRAME)
        assert state.is_active
        assert not det.update(scale_about_wrist(make_pinch_hand(), k), FRAME).is_active

    def test_boundary_with_decimal_coordinates(self):
        det = ScissorsGestureDetector(threshold=0.2)
        lm = make_hand({0: (0, 0, 0), 12: (0, 0.1, 0), 8: (0, 0.12, 0)})
        assert det.update(lm, FRAME).is_active is False

    def test_exact_boundary_is_not_scissors(self):
        det = ScissorsGestureDetector(threshold=0.5)
        lm = make_hand({0: (0, 0, 0), 12: (0, 0.5, 0), 8: (0.25, 0.5, 0)})
        assert not det.update(lm, FRAME).is_active

    def test_empty_landmarks_deactivate(self):
        det = ScissorsGestureDetector()
        det.update(make_scissors_hand(), FRAME)
        assert not det.update([], FRAME).is_active

    def test_independent_of_pinch(self):
        pinch = PinchGestureDetector()
        scissors = ScissorsGestureDetector()

        pinch.update(make_pinch_hand(), FRAME)
        scissors.update(make_scissors_hand(), FRAME)
        assert pinch.is_active and scissors.is_active

        scissors.update(None, FRAME)
        assert pinch.is_active
        assert not scissors.is_active

    def test_pinch_hand_is_not_scissors(self):
        assert not ScissorsGestureDetector().update(make_pinch_hand(), FRAME).is_active
        assert not PinchGestureDetector().update(make_scissors_hand(), FRAME).is_active


class TestTipDistanceDetector:
    @pytest.mark.parametrize("threshold", [0, -0.1, float("nan"), float("inf"), "0.1", True])
    def test_invalid_threshold(self, threshold):
        with pytest.raises(ConfigError):
            TipDistanceDetector(8, 4, 4, threshold)

    def test_custom_landmarks(self):
        # ring tip (16) near pinky tip (20), scaled by wrist to pinky
        det = TipDistanceDetector(16, 20, 20, 0.1, name="ring_pinky")
        lm = make_hand({0: (0, 0, 0), 20: (0.5, 0, 0), 16: (0.5, 0.015625, 0)})
        assert det.name == "ring_pinky"
        assert det.update(lm, FRAME).is_active

    def test_reset(self):
        det = PinchGestureDetector()
        det.update(make_pinch_hand(), FRAME)
        det.reset()
        assert not det.is_active
        assert det.last_point is None
