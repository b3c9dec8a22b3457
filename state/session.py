import math
import time
from typing import Optional

from state.history import HistoryBuffers, create_history_buffers, push_with_limit
from state.schema import (
    EmotionObservation,
    FaceData,
    GenderObservation,
    RawFace,
    RawRotation,
    Rotation,
    SessionState,
    SmoothConfig,
)
from state.smoothing import (
    get_smoothed_age,
    get_smoothed_emotion,
    get_smoothed_gender,
    round_half_up,
    to_percent,
)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _percent_or_none(value) -> Optional[int]:
    return to_percent(value) if _is_number(value) else None


def _degrees(radians) -> Optional[float]:
    # A zero angle is reported as missing, same as an absent one
    if not radians:
        return None
    return round_half_up(math.degrees(radians), 1)


def _convert_rotation(rotation: Optional[RawRotation]) -> Optional[Rotation]:
    if rotation is None:
        return None
    return Rotation(
        roll=_degrees(rotation.roll),
        yaw=_degrees(rotation.yaw),
        pitch=_degrees(rotation.pitch),
        gaze_bearing=_degrees(rotation.gaze_bearing),
        gaze_strength=rotation.gaze_strength,
    )


class DetectionSession:
    """
    Owns everything one run of detection needs: the detector handle,
    the IDLE/ACTIVE state, and the per-attribute history buffers.

    Each call to `update()` filters the frame's raw readings by confidence,
    pushes the accepted ones into history, and rebuilds the display record
    from the smoothed buffers.

    History survives a frame without a face (a single dropout must not reset
    smoothing) and survives stop/start. Call `reset()` to start from scratch.
    """

    def __init__(self, config: SmoothConfig = SmoothConfig(), detector=None,
                 start_delay_seconds: float = 0.5):
        self.config              = config
        self.detector            = detector
        self.start_delay_seconds = start_delay_seconds

        self.state: SessionState       = SessionState.IDLE
        self.history: HistoryBuffers   = create_history_buffers()
        self.face_data: Optional[FaceData] = None
        self.status_msg: str           = ""
        self._started_at: Optional[float] = None

    # ── Lifecycle ───────────────────────────────────────────────────────────

    def start(self) -> None:
        if self.state == SessionState.ACTIVE:
            return
        self.state       = SessionState.ACTIVE
        self._started_at = time.monotonic()
        self.status_msg  = "Detection started"
        print("[DetectionSession] Started.")

    def stop(self) -> None:
        if self.state == SessionState.IDLE:
            return
        self.state      = SessionState.IDLE
        self.face_data  = None
        self.status_msg = "Detection stopped"
        print("[DetectionSession] Stopped.")

    def reset(self) -> None:
        """Drop all smoothing history."""
        self.history = create_history_buffers()
        print("[DetectionSession] History cleared.")

    def reconfigure(self, config: SmoothConfig) -> None:
        """A new config starts a fresh session history."""
        self.config = config
        self.reset()

    @property
    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE

    @property
    def is_warming_up(self) -> bool:
        """True during the short delay after start() before frames are processed."""
        if not self.is_active or self._started_at is None:
            return False
        return time.monotonic() - self._started_at < self.start_delay_seconds

    # ── Per-frame step ──────────────────────────────────────────────────────

    def process(self, frame) -> Optional[FaceData]:
        """
        Run the detector on a frame and update the session with its result.

        A detector failure skips the frame; history and the last display
        record are left as they were.
        """
        if not self.is_active or self.is_warming_up:
            return self.face_data
        if self.detector is None:
            raise RuntimeError("No detector attached to the session.")

        try:
            face = self.detector(frame)
        except Exception as e:
            print(f"[DetectionSession] Detection error: {e}")
            return self.face_data

        return self.update(face)

    def update(self, face: Optional[RawFace]) -> Optional[FaceData]:
        """Feed one frame's primary face (or None) and return the display record."""
        if not self.is_active:
            return None

        if face is None:
            self.face_data  = None
            self.status_msg = "No face detected"
            return None

        self._record(face)
        self.face_data  = self._build_face_data(face)
        self.status_msg = "Face detected"
        return self.face_data

    def _record(self, face: RawFace) -> None:
        cfg = self.config

        if face.emotion:
            # sorted() is stable, so equal scores keep the detector's order
            top = sorted(face.emotion, key=lambda e: e.score or 0.0, reverse=True)[0]
            if _is_number(top.score) and top.score >= cfg.min_confidence:
                push_with_limit(
                    self.history.emotion,
                    EmotionObservation(top.label, top.score),
                    cfg.window_size,
                )

        if face.gender and _is_number(face.gender_score) and face.gender_score >= cfg.min_confidence:
            push_with_limit(
                self.history.gender,
                GenderObservation(face.gender, face.gender_score),
                cfg.window_size,
            )

        # Age models give no confidence, so every reading is kept
        if _is_number(face.age):
            push_with_limit(self.history.age, face.age, cfg.window_size)

    def _build_face_data(self, face: RawFace) -> FaceData:
        gender = get_smoothed_gender(self.history.gender)
        return FaceData(
            confidence=to_percent(face.score or 0.0),
            face_score=to_percent(face.face_score or 0.0),
            age=get_smoothed_age(self.history.age),
            gender=gender.label,
            gender_score=gender.confidence,
            distance=_percent_or_none(face.distance),   # metres -> cm
            real=_percent_or_none(face.real),
            live=_percent_or_none(face.live),
            emotion=get_smoothed_emotion(self.history.emotion),
            rotation=_convert_rotation(face.rotation),
            box=face.box or None,
            size=face.size if _is_number(face.size) else None,
        )
