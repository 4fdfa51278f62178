"""Per-frame driver running all three detectors together.

Frame source, drawing and UI stay with the caller; the session only turns
one landmark set per frame into a FrameResult.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from gesture_core.config import EngineConfig
from gesture_core.detectors import GestureState, PinchGestureDetector, ScissorsGestureDetector
from gesture_core.dwell import DwellCallback, DwellGestureDetector

logger = logging.getLogger("gesture_core.session")


@dataclass(frozen=True)
class FrameResult:
    """Everything the detectors concluded about one frame."""
    frame_index: int
    pinch: GestureState
    scissors: GestureState
    dwell: bool
    dwell_anchor: Optional[tuple[float, float]] = None

    @property
    def drawing_gesture(self) -> Optional[str]:
        """Gesture that owns the drawing point. Scissors wins over pinch."""
        if self.scissors.is_active:
            return "scissors"
        if self.pinch.is_active:
            return "pinch"
        return None

    @property
    def drawing_point(self) -> Optional[tuple[int, int]]:
        if self.scissors.is_active:
            return self.scissors.point
        return self.pinch.point


@dataclass
class SessionStats:
    frames: int
    pinch_frames: int
    scissors_frames: int
    dwell_triggers: int


class GestureSession:
    """Runs pinch, scissors and dwell detection on a landmark stream.

    Usage:
        session = GestureSession(EngineConfig.chalkboard())
        session.on_dwell(lambda x, y: print("dwell", x, y))
        result = session.process(landmarks, (1280, 720))
        if result.drawing_point:
            draw(*result.drawing_point)
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.config = config or EngineConfig()
        self.pinch = PinchGestureDetector.from_config(self.config.pinch)
        self.scissors = ScissorsGestureDetector.from_config(self.config.scissors)
        self.dwell = DwellGestureDetector.from_config(self.config.dwell, clock=clock)

        self._frame_callbacks: list[Callable[[FrameResult], None]] = []
        self._frames = 0
        self._pinch_frames = 0
        self._scissors_frames = 0
        self._dwell_triggers = 0

    def on_dwell(self, callback: Optional[DwellCallback]):
        """Set the dwell callback, replacing any earlier one."""
        self.dwell.set_on_dwell_callback(callback)

    def on_frame(self, callback: Callable[[FrameResult], None]):
        """Register an observer called with every FrameResult."""
        self._frame_callbacks.append(callback)

    def process(
        self,
        landmarks: Any,
        frame_size: Any,
        timestamp: Optional[float] = None,
    ) -> FrameResult:
        """Update every detector with one frame.

        Args:
            landmarks: One hand's landmarks, or None/empty when no hand is tracked.
            frame_size: Pixel (width, height) of the current frame.
            timestamp: Optional dwell clock reading in milliseconds.
        """
        pinch = self.pinch.update(landmarks, frame_size)
        scissors = self.scissors.update(landmarks, frame_size)
        dwelled = self.dwell.update(landmarks, frame_size, timestamp=timestamp)

        result = FrameResult(
            frame_index=self._frames,
            pinch=pinch,
            scissors=scissors,
            dwell=dwelled,
            dwell_anchor=self.dwell.anchor if dwelled else None,
        )

        self._frames += 1
        self._pinch_frames += pinch.is_active
        self._scissors_frames += scissors.is_active
        self._dwell_triggers += dwelled

        for cb in self._frame_callbacks:
            try:
                cb(result)
            except Exception as e:
                logger.error("Frame observer error: %s", e)

        return result

    @property
    def stats(self) -> SessionStats:
        return SessionStats(
            frames=self._frames,
            pinch_frames=self._pinch_frames,
            scissors_frames=self._scissors_frames,
            dwell_triggers=self._dwell_triggers,
        )

    def reset(self):
        """Clear detector state and counters. Callbacks stay registered."""
        self.pinch.reset()
        self.scissors.reset()
        self.dwell.reset_dwell()
        self._frames = 0
        self._pinch_frames = 0
        self._scissors_frames = 0
        self._dwell_triggers = 0
