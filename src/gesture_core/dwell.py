"""Dwell detection: a fingertip held still for a minimum time.

The detector is a two-state machine (idle, dwelling). Completing a dwell
is not a state of its own; it shows up as ``is_active`` being true for
exactly the one update that completes it, after which the detector is
idle again and the next update anchors a fresh dwell.

Usage:
    detector = DwellGestureDetector(dwell_time=600, dwell_radius=0.02)
    detector.set_on_dwell_callback(lambda x, y: print("dwell at", x, y))
    for landmarks in frames:
        if detector.update(landmarks):
            ...
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Callable, Optional

from gesture_core.config import DwellConfig
from gesture_core.geometry import GeometricGestureBase
from gesture_core.landmarks import INDEX_TIP, as_landmark_array

logger = logging.getLogger("gesture_core.dwell")

DwellCallback = Callable[[float, float], None]


def monotonic_ms() -> float:
    """Default dwell clock, in milliseconds."""
    return time.monotonic() * 1000.0


class DwellPhase(Enum):
    IDLE = "idle"
    DWELLING = "dwelling"


class DwellGestureDetector:
    """Fires once when the index tip stays within a radius for dwell_time.

    The radius is in normalized frame units and is deliberately not scaled
    by hand size: dwell measures stability on screen, not relative to the
    hand. Moving exactly ``dwell_radius`` away keeps the dwell alive; only
    a strictly larger distance breaks it. Any update without a complete
    hand aborts a dwell in progress.
    """

    geometry = GeometricGestureBase()

    def __init__(
        self,
        dwell_time: float = DwellConfig.dwell_time,
        dwell_radius: float = DwellConfig.dwell_radius,
        clock: Optional[Callable[[], float]] = None,
    ):
        config = DwellConfig(dwell_time=dwell_time, dwell_radius=dwell_radius)
        self.dwell_time = float(config.dwell_time)
        self.dwell_radius = float(config.dwell_radius)
        self._clock = clock or monotonic_ms

        self._phase = DwellPhase.IDLE
        self._anchor: Optional[tuple[float, float]] = None
        self._start_time: Optional[float] = None
        self._is_active = False
        self._callback: Optional[DwellCallback] = None
        self._trigger_count = 0

    @classmethod
    def from_config(
        cls, config: DwellConfig, clock: Optional[Callable[[], float]] = None
    ) -> DwellGestureDetector:
        return cls(dwell_time=config.dwell_time, dwell_radius=config.dwell_radius, clock=clock)

    def update(
        self,
        landmarks: Any,
        frame_size: Any = None,
        timestamp: Optional[float] = None,
    ) -> bool:
        """Advance the state machine by one frame.

        Args:
            landmarks: One hand's 21 landmarks, or None/empty for no hand.
            frame_size: Unused; accepted so all detectors share a call shape.
            timestamp: Current time in milliseconds. Defaults to the clock.

        Returns:
            True only for the update that completes a dwell.
        """
        lm = as_landmark_array(landmarks)
        if lm is None:
            if self._phase is DwellPhase.DWELLING:
                logger.debug("Dwell aborted: no hand in frame")
            self.reset_dwell()
            self._is_active = False
            return False

        now = timestamp if timestamp is not None else self._clock()
        tip = (float(lm[INDEX_TIP][0]), float(lm[INDEX_TIP][1]))

        if self._phase is DwellPhase.IDLE:
            self._anchor = tip
            self._start_time = now
            self._phase = DwellPhase.DWELLING
            self._is_active = False
            logger.debug("Dwell started at (%.3f, %.3f)", tip[0], tip[1])
            return False

        moved = self.geometry.distance(self._anchor, tip)
        if moved > self.dwell_radius:
            logger.debug("Dwell broken: moved %.4f > %.4f", moved, self.dwell_radius)
            self.reset_dwell()
            self._is_active = False
            return False

        if now - self._start_time < self.dwell_time:
            self._is_active = False
            return False

        self.reset_dwell()
        self._is_active = True
        self._trigger_count += 1
        anchor_x, anchor_y = self._anchor
        logger.debug("Dwell triggered at (%.3f, %.3f)", anchor_x, anchor_y)

        if self._callback is not None:
            try:
                self._callback(anchor_x, anchor_y)
            except Exception as e:
                logger.error("Dwell callback error: %s", e)

        return True

    def set_on_dwell_callback(self, callback: Optional[DwellCallback]):
        """Replace the dwell callback. It receives the anchor's normalized (x, y)."""
        self._callback = callback

    def reset_dwell(self):
        """Return to idle. The last anchor is kept for inspection."""
        self._start_time = None
        self._phase = DwellPhase.IDLE

    @property
    def is_active(self) -> bool:
        """True only if the most recent update completed a dwell."""
        return self._is_active

    @property
    def phase(self) -> DwellPhase:
        return self._phase

    @property
    def is_dwelling(self) -> bool:
        return self._phase is DwellPhase.DWELLING

    @property
    def anchor(self) -> Optional[tuple[float, float]]:
        """Normalized position where the current or last dwell started."""
        return self._anchor

    @property
    def start_time(self) -> Optional[float]:
        return self._start_time

    @property
    def trigger_count(self) -> int:
        return self._trigger_count

    def progress(self, now: Optional[float] = None) -> float:
        """Fraction of dwell_time elapsed in the current dwell, in [0, 1]."""
        if self._start_time is None:
            return 0.0
        if self.dwell_time == 0:
            return 1.0
        now = now if now is not None else self._clock()
        return max(0.0, min(1.0, (now - self._start_time) / self.dwell_time))
