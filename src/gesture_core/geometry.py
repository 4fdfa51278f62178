"""Distance and hand-size math shared by the gesture detectors."""

from __future__ import annotations

from typing import Any

import numpy as np

from gesture_core.landmarks import FrameSize, as_landmark_array, point_coords


def _as_point(point: Any) -> np.ndarray:
    if isinstance(point, np.ndarray) and point.ndim == 1 and point.shape[0] in (2, 3):
        out = np.zeros(3, dtype=np.float64)
        out[: point.shape[0]] = point
        return out

    coords = point_coords(point)
    if coords is None:
        raise ValueError(f"Not a landmark point: {point!r}")
    return np.array(coords, dtype=np.float64)


def distance(p1: Any, p2: Any) -> float:
    """Euclidean distance over (x, y, z).

    A missing z on either point counts as 0, independently per point, so a
    2D anchor can be compared against a 3D landmark.
    """
    return float(np.linalg.norm(_as_point(p1) - _as_point(p2)))


def hand_area(landmarks: Any, frame_size: Any) -> float:
    """Bounding-box area of the hand in pixels, divided by 100.

    Each landmark is projected to integer pixel coordinates first, so the
    result matches what a caller drawing the box would measure. Incomplete
    hands have zero area.
    """
    lm = as_landmark_array(landmarks)
    if lm is None:
        return 0.0

    size = FrameSize.of(frame_size)
    xs = np.trunc(lm[:, 0] * size.width)
    ys = np.trunc(lm[:, 1] * size.height)
    return float((xs.max() - xs.min()) * (ys.max() - ys.min()) / 100)


class GeometricGestureBase:
    """Geometry capability set held by every landmark-based detector.

    Stateless; detectors keep one as ``self.geometry`` instead of
    inheriting the math.
    """

    @staticmethod
    def distance(p1: Any, p2: Any) -> float:
        return distance(p1, p2)

    @staticmethod
    def hand_area(landmarks: Any, frame_size: Any) -> float:
        return hand_area(landmarks, frame_size)
