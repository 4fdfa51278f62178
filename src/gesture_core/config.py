"""Detector configuration.

Configs are immutable and validated on construction. An engine config can
be round-tripped through YAML:

    pinch:
      threshold: 0.2
    scissors:
      threshold: 0.12
    dwell:
      dwell_time: 600     # milliseconds
      dwell_radius: 0.02  # normalized frame units
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("gesture_core.config")


class ConfigError(ValueError):
    """Raised for invalid or unreadable detector configuration."""


def _check_number(owner: str, name: str, value: Any, allow_zero: bool) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{owner}.{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigError(f"{owner}.{name} must be finite, got {value!r}")
    if value < 0 or (value == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "positive"
        raise ConfigError(f"{owner}.{name} must be {bound}, got {value!r}")


@dataclass(frozen=True)
class PinchConfig:
    """Thumb-index distance as a fraction of wrist-to-thumb length."""
    threshold: float = 0.1

    def __post_init__(self):
        _check_number("pinch", "threshold", self.threshold, allow_zero=False)


@dataclass(frozen=True)
class ScissorsConfig:
    """Index-middle distance as a fraction of wrist-to-middle length."""
    threshold: float = 0.12

    def __post_init__(self):
        _check_number("scissors", "threshold", self.threshold, allow_zero=False)


@dataclass(frozen=True)
class DwellConfig:
    dwell_time: float = 800.0  # milliseconds
    dwell_radius: float = 0.05  # normalized, not hand-scaled

    def __post_init__(self):
        _check_number("dwell", "dwell_time", self.dwell_time, allow_zero=True)
        _check_number("dwell", "dwell_radius", self.dwell_radius, allow_zero=True)


def _section(cls, name: str, data: Any):
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown keys in '{name}': {', '.join(map(str, unknown))}")
    return cls(**data)


@dataclass(frozen=True)
class EngineConfig:
    """Configuration for all three detectors."""
    pinch: PinchConfig = field(default_factory=PinchConfig)
    scissors: ScissorsConfig = field(default_factory=ScissorsConfig)
    dwell: DwellConfig = field(default_factory=DwellConfig)

    def to_dict(self) -> dict:
        return {
            "pinch": asdict(self.pinch),
            "scissors": asdict(self.scissors),
            "dwell": asdict(self.dwell),
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> EngineConfig:
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping, got {type(data).__name__}")

        unknown = sorted(set(data) - {"pinch", "scissors", "dwell"})
        if unknown:
            raise ConfigError(f"Unknown config sections: {', '.join(map(str, unknown))}")

        return cls(
            pinch=_section(PinchConfig, "pinch", data.get("pinch")),
            scissors=_section(ScissorsConfig, "scissors", data.get("scissors")),
            dwell=_section(DwellConfig, "dwell", data.get("dwell")),
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> EngineConfig:
        """Load a config from a YAML file. Missing sections keep their defaults."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        config = cls.from_dict(data)
        logger.info("Loaded detector config from %s", path)
        return config

    def to_yaml(self, path: str | Path):
        """Save this config to a YAML file."""
        with open(path, "w") as f:
            f.write(self.dump_yaml())

    def dump_yaml(self) -> str:
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    @classmethod
    def chalkboard(cls) -> EngineConfig:
        """Tuning used by the air-chalkboard app: looser pinch, quick tight dwell."""
        return cls(
            pinch=PinchConfig(threshold=0.20),
            scissors=ScissorsConfig(threshold=0.12),
            dwell=DwellConfig(dwell_time=600.0, dwell_radius=0.02),
        )


PRESETS = {
    "default": EngineConfig,
    "chalkboard": EngineConfig.chalkboard,
}
