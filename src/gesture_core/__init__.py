"""gesture-core - Pinch, scissors and dwell detection from hand landmarks."""

__version__ = "0.1.0"

from gesture_core.config import ConfigError, DwellConfig, EngineConfig, PinchConfig, ScissorsConfig
from gesture_core.geometry import GeometricGestureBase, distance, hand_area
from gesture_core.landmarks import FrameSize, Landmark, as_landmark_array
from gesture_core.detectors import (
    GestureState,
    PinchGestureDetector,
    ScissorsGestureDetector,
    TipDistanceDetector,
)
from gesture_core.dwell import DwellGestureDetector, DwellPhase
from gesture_core.session import FrameResult, GestureSession
from gesture_core.recorder import LandmarkPlayer, LandmarkRecorder
