"""Frame-local tip-distance gestures: pinch and scissors.

Both gestures fire when two fingertips come closer than a fraction of the
hand's own length, which keeps them invariant to hand size and distance
from the camera. They differ only in which landmarks they look at.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from gesture_core.config import ConfigError, PinchConfig, ScissorsConfig
from gesture_core.geometry import GeometricGestureBase
from gesture_core.landmarks import (
    INDEX_TIP,
    MIDDLE_TIP,
    THUMB_TIP,
    WRIST,
    FrameSize,
    as_landmark_array,
)


@dataclass(frozen=True)
class GestureState:
    """Result of one update. x/y are pixels and only set while active."""
    is_active: bool
    x: Optional[int] = None
    y: Optional[int] = None

    @property
    def point(self) -> Optional[tuple[int, int]]:
        if not self.is_active:
            return None
        return self.x, self.y


INACTIVE = GestureState(is_active=False)


class TipDistanceDetector:
    """Detects two fingertips held close together, scaled by hand length.

    Each update compares ``distance(tip_a, tip_b)`` against
    ``distance(wrist, scale_reference) * threshold`` with a strict ``<``.
    When active, the reported point is the tips' midpoint in pixels.
    The detector has no memory between frames.
    """

    name = "tip_distance"
    geometry = GeometricGestureBase()

    def __init__(
        self,
        tip_a: int,
        tip_b: int,
        scale_reference: int,
        threshold: float,
        name: Optional[str] = None,
    ):
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) \
                or not math.isfinite(threshold) or threshold <= 0:
            raise ConfigError(f"threshold must be a positive number, got {threshold!r}")

        self.tip_a = tip_a
        self.tip_b = tip_b
        self.scale_reference = scale_reference
        self.threshold = float(threshold)
        if name:
            self.name = name

        self._state = INACTIVE
        self._last_point: Optional[tuple[int, int]] = None

    def update(self, landmarks: Any, frame_size: Any) -> GestureState:
        """Classify one frame. Incomplete landmarks deactivate the gesture."""
        lm = as_landmark_array(landmarks)
        if lm is None:
            self._state = INACTIVE
            return self._state

        tip_a, tip_b = lm[self.tip_a], lm[self.tip_b]
        hand_length = self.geometry.distance(lm[WRIST], lm[self.scale_reference])
        dynamic_threshold = hand_length * self.threshold
        tip_distance = self.geometry.distance(tip_a, tip_b)

        # Distances equal up to float noise count as the boundary, which is not active
        at_boundary = math.isclose(tip_distance, dynamic_threshold, rel_tol=1e-9, abs_tol=1e-12)
        if at_boundary or not tip_distance < dynamic_threshold:
            self._state = INACTIVE
            return self._state

        size = FrameSize.of(frame_size)
        x, y = size.to_pixels((tip_a[0] + tip_b[0]) / 2, (tip_a[1] + tip_b[1]) / 2)
        self._state = GestureState(is_active=True, x=x, y=y)
        self._last_point = (x, y)
        return self._state

    @property
    def state(self) -> GestureState:
        """State from the most recent update."""
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state.is_active

    @property
    def x(self) -> Optional[int]:
        return self._state.x

    @property
    def y(self) -> Optional[int]:
        return self._state.y

    @property
    def last_point(self) -> Optional[tuple[int, int]]:
        """Last point reported while active, kept across inactive frames."""
        return self._last_point

    def reset(self):
        self._state = INACTIVE
        self._last_point = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(tips=({self.tip_a}, {self.tip_b}), "
            f"scale_reference={self.scale_reference}, threshold={self.threshold})"
        )


class PinchGestureDetector(TipDistanceDetector):
    """Thumb tip touching index tip. Scale reference is wrist to thumb tip."""

    name = "pinch"

    def __init__(self, threshold: float = PinchConfig.threshold):
        super().__init__(
            tip_a=INDEX_TIP,
            tip_b=THUMB_TIP,
            scale_reference=THUMB_TIP,
            threshold=threshold,
        )

    @classmethod
    def from_config(cls, config: PinchConfig) -> PinchGestureDetector:
        return cls(threshold=config.threshold)


class ScissorsGestureDetector(TipDistanceDetector):
    """Index and middle tips held together. Scale reference is wrist to middle tip."""

    name = "scissors"

    def __init__(self, threshold: float = ScissorsConfig.threshold):
        super().__init__(
            tip_a=INDEX_TIP,
            tip_b=MIDDLE_TIP,
            scale_reference=MIDDLE_TIP,
            threshold=threshold,
        )

    @classmethod
    def from_config(cls, config: ScissorsConfig) -> ScissorsGestureDetector:
        return cls(threshold=config.threshold)
