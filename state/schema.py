import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class SessionState(str, Enum):
    IDLE   = "idle"     # no active session, buffers may hold stale data
    ACTIVE = "active"   # buffers accept updates each frame


@dataclass(frozen=True)
class EmotionObservation:
    """One emotion reading. `confidence` is 0–1 in history, 0–100 once smoothed."""
    label: Optional[str]
    confidence: Optional[float]


@dataclass(frozen=True)
class GenderObservation:
    """One gender reading. `confidence` is 0–1 in history, 0–100 once smoothed."""
    label: Optional[str]
    confidence: Optional[float]


@dataclass(frozen=True)
class SmoothConfig:
    """
    Smoothing parameters for one detection session.

    window_size:     history buffer capacity (frames of accepted observations)
    min_confidence:  emotion/gender readings below this are not recorded
    """
    window_size: int = 1
    min_confidence: float = 0.3

    @classmethod
    def from_dict(cls, cfg: dict) -> "SmoothConfig":
        """
        Build from the `smoothing` section of config.yaml.

        Out-of-range values are clamped (window_size >= 1, 0 <= min_confidence <= 1).
        Non-numeric or non-finite values raise ValueError. An empty section
        (None) gives the defaults.
        """
        cfg = cfg or {}
        try:
            window_size    = int(cfg.get("window_size", 1))
            min_confidence = float(cfg.get("min_confidence", 0.3))
        except (TypeError, ValueError, OverflowError) as e:
            raise ValueError(f"Invalid smoothing config {cfg!r}: {e}") from e

        if not math.isfinite(min_confidence):
            raise ValueError(f"Invalid smoothing config {cfg!r}: min_confidence must be finite")

        return cls(
            window_size=max(window_size, 1),
            min_confidence=min(max(min_confidence, 0.0), 1.0),
        )


@dataclass
class RawEmotion:
    label: str
    score: Optional[float] = None


@dataclass
class RawRotation:
    """Head pose in radians, as reported by the pose detector."""
    roll:  Optional[float] = None
    yaw:   Optional[float] = None
    pitch: Optional[float] = None
    gaze_bearing:  Optional[float] = None
    gaze_strength: Optional[float] = None


@dataclass
class RawFace:
    """
    Primary detected face for one frame, straight from the detectors.
    Scores are 0–1. Any field may be None if no detector produced it.
    """
    score:        Optional[float] = None   # detection confidence
    face_score:   Optional[float] = None   # crop quality
    age:          Optional[float] = None
    gender:       Optional[str]   = None
    gender_score: Optional[float] = None
    emotion:      list[RawEmotion] = field(default_factory=list)
    distance:     Optional[float] = None   # metres
    real:         Optional[float] = None
    live:         Optional[float] = None
    rotation:     Optional[RawRotation] = None
    box:          Optional[list[int]] = None   # [x, y, w, h] in pixels
    size:         Optional[int] = None


@dataclass
class Rotation:
    """Head pose in degrees, rounded to one decimal."""
    roll:  Optional[float] = None
    yaw:   Optional[float] = None
    pitch: Optional[float] = None
    gaze_bearing:  Optional[float] = None
    gaze_strength: Optional[float] = None


@dataclass
class FaceData:
    """Display record for the side panel. Percentages are integers 0–100."""
    confidence:   int = 0
    face_score:   int = 0
    age:          Optional[float] = None
    gender:       Optional[str] = None
    gender_score: Optional[int] = None
    distance:     Optional[int] = None   # centimetres
    real:         Optional[int] = None
    live:         Optional[int] = None
    emotion:      Optional[EmotionObservation] = None
    rotation:     Optional[Rotation] = None
    box:          Optional[list[int]] = None
    size:         Optional[int] = None
