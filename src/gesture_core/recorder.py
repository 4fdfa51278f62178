"""Landmark stream recording and replay.

Recordings let the detectors be exercised without a camera: in tests, on
headless CI machines, and when tuning thresholds against a real session.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Iterator, Optional

from gesture_core.landmarks import FrameSize, as_landmark_array

logger = logging.getLogger("gesture_core.recorder")

FORMAT_VERSION = 1


@dataclass
class RecordedFrame:
    """A single frame in a recording."""
    timestamp: float  # seconds from recording start
    width: int
    height: int
    landmarks: Any  # (21, 3) nested lists on disk, np.ndarray or None on replay

    @property
    def frame_size(self) -> FrameSize:
        return FrameSize(self.width, self.height)


class LandmarkRecorder:
    """Captures a landmark stream, one hand per frame, for later replay.

    Frames are only kept between ``start()`` and ``stop()``; gaps in
    tracking are stored as empty landmark lists.
    """

    def __init__(self):
        self._frames: list[RecordedFrame] = []
        self._t0: Optional[float] = None
        self._capturing = False

    def start(self):
        """Discard any earlier frames and start capturing."""
        self._frames = []
        self._t0 = time.monotonic()
        self._capturing = True

    def stop(self) -> int:
        self._capturing = False
        return len(self._frames)

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def duration(self) -> float:
        """Timestamp of the last captured frame, in seconds."""
        return self._frames[-1].timestamp if self._frames else 0.0

    def add_frame(self, landmarks: Any, frame_size: Any, timestamp: Optional[float] = None):
        """Add a frame. Incomplete landmarks are stored as a tracking gap.

        Args:
            landmarks: One hand's landmarks, or None/empty.
            frame_size: Pixel (width, height) of the frame.
            timestamp: Seconds from start; defaults to elapsed monotonic time.
        """
        if not self._capturing:
            return

        if timestamp is None:
            timestamp = time.monotonic() - self._t0

        lm = as_landmark_array(landmarks)
        size = FrameSize.of(frame_size)
        self._frames.append(RecordedFrame(
            timestamp=float(timestamp),
            width=size.width,
            height=size.height,
            landmarks=lm.tolist() if lm is not None else [],
        ))

    def save(self, path: str | Path):
        """Save recording to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "version": FORMAT_VERSION,
            "frame_count": len(self._frames),
            "duration": self.duration,
            "frames": [asdict(f) for f in self._frames],
        }

        with open(path, "w") as f:
            json.dump(data, f)
        logger.info("Saved %d frames to %s", len(self._frames), path)


class LandmarkPlayer:
    """Replays a recorded landmark session.

    Usage:
        player = LandmarkPlayer.load("session.json")
        for frame in player.play():
            session.process(frame.landmarks, frame.frame_size,
                            timestamp=frame.timestamp * 1000)
    """

    def __init__(self, frames: list[RecordedFrame]):
        self._frames = frames

    @classmethod
    def load(cls, path: str | Path) -> LandmarkPlayer:
        """Load recording from JSON file.

        Raises:
            ValueError: The file is not a recording this version can read.
        """
        with open(path) as f:
            data = json.load(f)

        if not isinstance(data, dict) or not isinstance(data.get("frames"), list):
            raise ValueError(f"{path} is not a landmark recording")

        version = data.get("version", FORMAT_VERSION)
        if version != FORMAT_VERSION:
            raise ValueError(f"Unsupported recording version {version} in {path}")

        frames = []
        for i, f in enumerate(data["frames"]):
            if not isinstance(f, dict):
                raise ValueError(f"Frame {i} in {path} is not an object")
            try:
                size = FrameSize(int(f["width"]), int(f["height"]))
                timestamp = float(f["timestamp"])
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Frame {i} in {path} is malformed: {e!r}") from e

            # Unreadable landmarks replay as tracking gaps
            landmarks = as_landmark_array(f.get("landmarks"))
            frames.append(RecordedFrame(
                timestamp=timestamp,
                width=size.width,
                height=size.height,
                landmarks=landmarks,
            ))
        return cls(frames)

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def duration(self) -> float:
        if not self._frames:
            return 0.0
        return self._frames[-1].timestamp

    def play(self) -> Iterator[RecordedFrame]:
        """Iterate through all frames instantly (no timing)."""
        for frame in self._frames:
            yield RecordedFrame(
                timestamp=frame.timestamp,
                width=frame.width,
                height=frame.height,
                landmarks=None if frame.landmarks is None else frame.landmarks.copy(),
            )
