"""Hand landmark input types and coercion.

A hand observation is 21 normalized (x, y, z) points in MediaPipe's
anatomical order. Upstream trackers hand them over in many shapes
(numpy arrays, tuples, dicts, landmark protos); everything here funnels
them into a single float64 array of shape (21, 3).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

# MediaPipe hand landmark indices
WRIST = 0
THUMB_TIP = 4
INDEX_TIP = 8
MIDDLE_TIP = 12

NUM_LANDMARKS = 21
LANDMARK_DIM = 3  # x, y, z


@dataclass(frozen=True)
class Landmark:
    """A normalized landmark. Coordinates are in [0, 1] of the frame."""
    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class FrameSize:
    """Pixel dimensions used to project normalized coordinates."""
    width: int
    height: int

    @classmethod
    def of(cls, value: Any) -> FrameSize:
        """Accept a FrameSize, a (width, height) pair, or anything with width/height."""
        if isinstance(value, FrameSize):
            return value
        if hasattr(value, "width") and hasattr(value, "height"):
            return cls(width=value.width, height=value.height)
        width, height = value
        return cls(width=width, height=height)

    def to_pixels(self, x: float, y: float) -> tuple[int, int]:
        """Project a normalized point, truncating toward zero."""
        return int(x * self.width), int(y * self.height)


def point_coords(point: Any) -> Optional[tuple[float, float, float]]:
    """(x, y, z) floats for one point, z defaulting to 0. None if unreadable."""
    if point is None:
        return None

    if isinstance(point, dict):
        if "x" not in point or "y" not in point:
            return None
        x, y, z = point["x"], point["y"], point.get("z")
    elif hasattr(point, "x") and hasattr(point, "y"):
        x, y, z = point.x, point.y, getattr(point, "z", None)
    else:
        try:
            values = list(point)
        except TypeError:
            return None
        if len(values) not in (2, 3):
            return None
        x, y = values[0], values[1]
        z = values[2] if len(values) == 3 else None

    try:
        coords = (float(x), float(y), 0.0 if z is None else float(z))
    except (TypeError, ValueError):
        return None

    # A NaN z from a tracker is treated like a missing one
    if math.isnan(coords[2]):
        coords = (coords[0], coords[1], 0.0)
    return coords


def as_landmark_array(landmarks: Any) -> Optional[np.ndarray]:
    """Coerce one hand observation into a (21, 3) float64 array.

    Returns None for anything that is not a complete hand: None, an empty
    or short sequence, non-numeric entries, or non-finite x/y values.
    Missing z coordinates become 0.
    """
    if landmarks is None:
        return None

    if isinstance(landmarks, np.ndarray):
        if landmarks.ndim != 2 or landmarks.shape[0] < NUM_LANDMARKS:
            return None
        if landmarks.shape[1] not in (2, 3):
            return None
        try:
            arr = np.zeros((NUM_LANDMARKS, LANDMARK_DIM), dtype=np.float64)
            arr[:, : landmarks.shape[1]] = landmarks[:NUM_LANDMARKS]
        except (TypeError, ValueError):
            return None
        arr[:, 2] = np.nan_to_num(arr[:, 2], nan=0.0)
    else:
        try:
            points = list(landmarks)
        except TypeError:
            return None
        if len(points) < NUM_LANDMARKS:
            return None

        coords = [point_coords(p) for p in points[:NUM_LANDMARKS]]
        if any(c is None for c in coords):
            return None
        arr = np.array(coords, dtype=np.float64)

    if not np.all(np.isfinite(arr)):
        return None
    return arr
