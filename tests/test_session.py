"""Tests for DetectionSession: per-frame filtering, smoothing and lifecycle."""

import math

import pytest

from state.schema import (
    EmotionObservation,
    FaceData,
    GenderObservation,
    RawEmotion,
    RawFace,
    RawRotation,
    SessionState,
    SmoothConfig,
)
from state.session import DetectionSession


def make_face(**overrides) -> RawFace:
    values = dict(
        score=0.95,
        face_score=0.8,
        age=30.0,
        gender="female",
        gender_score=0.9,
        emotion=[RawEmotion("neutral", 0.1), RawEmotion("happy", 0.8), RawEmotion("sad", 0.1)],
    )
    values.update(overrides)
    return RawFace(**values)


@pytest.fixture
def session():
    s = DetectionSession(SmoothConfig(window_size=5, min_confidence=0.3), start_delay_seconds=0.0)
    s.start()
    return s


class TestLifecycle:
    def test_starts_idle(self):
        s = DetectionSession()
        assert s.state == SessionState.IDLE
        assert not s.is_active

    def test_idle_session_ignores_frames(self):
        s = DetectionSession()
        assert s.update(make_face()) is None
        assert len(s.history.age) == 0

    def test_start_stop(self, session):
        assert session.state == SessionState.ACTIVE
        session.update(make_face())
        session.stop()
        assert session.state == SessionState.IDLE
        assert session.face_data is None

    def test_history_survives_stop_start(self, session):
        session.update(make_face(age=40.0))
        session.stop()
        session.start()
        assert list(session.history.age) == [40.0]

    def test_reset_clears_history(self, session):
        session.update(make_face())
        session.reset()
        assert len(session.history.emotion) == 0
        assert len(session.history.gender) == 0
        assert len(session.history.age) == 0

    def test_reconfigure_starts_fresh(self, session):
        session.update(make_face())
        session.reconfigure(SmoothConfig(window_size=2, min_confidence=0.5))
        assert session.config.window_size == 2
        assert len(session.history.age) == 0

    def test_warming_up_after_start(self):
        s = DetectionSession(start_delay_seconds=60.0)
        s.start()
        assert s.is_warming_up


class TestUpdate:
    def test_builds_display_record(self, session):
        data = session.update(make_face())
        assert isinstance(data, FaceData)
        assert data.confidence == 95
        assert data.face_score == 80
        assert data.age == 30.0
        assert data.gender == "female"
        assert data.gender_score == 90
        assert data.emotion == EmotionObservation("happy", 80)

    def test_no_face_returns_none_and_keeps_history(self, session):
        session.update(make_face(age=30.0))
        assert session.update(None) is None
        assert session.face_data is None

        data = session.update(make_face(age=32.0))
        assert list(session.history.age) == [30.0, 32.0]
        assert data.age == 31.0

    def test_top_emotion_only_is_recorded(self, session):
        session.update(make_face())
        assert list(session.history.emotion) == [EmotionObservation("happy", 0.8)]

    def test_emotion_tie_keeps_detector_order(self, session):
        session.update(make_face(emotion=[RawEmotion("sad", 0.5), RawEmotion("angry", 0.5)]))
        assert session.history.emotion[0].label == "sad"

    def test_low_confidence_emotion_is_skipped(self, session):
        session.update(make_face(emotion=[RawEmotion("happy", 0.9)]))
        data = session.update(make_face(emotion=[RawEmotion("sad", 0.2)]))
        assert len(session.history.emotion) == 1
        assert data.emotion == EmotionObservation("happy", 90)

    def test_emotion_without_score_is_skipped(self, session):
        data = session.update(make_face(emotion=[RawEmotion("happy")]))
        assert len(session.history.emotion) == 0
        assert data.emotion is None

    def test_emotion_without_score_is_skipped_at_zero_threshold(self):
        s = DetectionSession(SmoothConfig(window_size=3, min_confidence=0.0), start_delay_seconds=0.0)
        s.start()
        data = s.update(RawFace(emotion=[RawEmotion("happy")]))
        assert len(s.history.emotion) == 0
        assert data.emotion is None

    def test_zero_score_emotion_kept_at_zero_threshold(self):
        s = DetectionSession(SmoothConfig(window_size=3, min_confidence=0.0), start_delay_seconds=0.0)
        s.start()
        data = s.update(RawFace(emotion=[RawEmotion("neutral", 0.0)]))
        assert data.emotion == EmotionObservation("neutral", 0)

    def test_low_confidence_gender_is_skipped(self, session):
        session.update(make_face(gender="male", gender_score=0.7))
        data = session.update(make_face(gender="female", gender_score=0.1))
        assert list(session.history.gender) == [GenderObservation("male", 0.7)]
        assert data.gender == "male"

    def test_gender_without_score_is_skipped(self, session):
        data = session.update(make_face(gender="male", gender_score=None))
        assert data.gender is None
        assert data.gender_score is None

    def test_age_always_recorded(self, session):
        session.update(make_face(age=20.0, gender_score=0.0, emotion=[]))
        assert list(session.history.age) == [20.0]

    def test_missing_age_is_skipped(self, session):
        data = session.update(make_face(age=None))
        assert data.age is None

    def test_window_limits_history(self):
        s = DetectionSession(SmoothConfig(window_size=2), start_delay_seconds=0.0)
        s.start()
        for age in (10.0, 20.0, 30.0):
            data = s.update(make_face(age=age))
        assert list(s.history.age) == [20.0, 30.0]
        assert data.age == 25.0

    def test_default_window_uses_latest_reading(self):
        s = DetectionSession(start_delay_seconds=0.0)
        s.start()
        s.update(make_face(emotion=[RawEmotion("happy", 0.9)]))
        data = s.update(make_face(emotion=[RawEmotion("sad", 0.6)]))
        assert data.emotion == EmotionObservation("sad", 60)


class TestPassThroughFields:
    def test_unit_conversions(self, session):
        face = make_face(
            distance=0.456,
            real=0.876,
            live=0.5,
            rotation=RawRotation(roll=math.pi / 2, yaw=-math.pi / 4, pitch=0.0,
                                 gaze_bearing=math.pi, gaze_strength=0.3),
            box=[10, 20, 100, 120],
            size=120,
        )
        data = session.update(face)
        assert data.distance == 46
        assert data.real == 88
        assert data.live == 50
        assert data.rotation.roll == 90.0
        assert data.rotation.yaw == -45.0
        assert data.rotation.pitch is None  # zero angle reported as missing
        assert data.rotation.gaze_bearing == 180.0
        assert data.rotation.gaze_strength == 0.3
        assert data.box == [10, 20, 100, 120]
        assert data.size == 120

    def test_missing_optional_fields(self, session):
        data = session.update(RawFace())
        assert data.confidence == 0
        assert data.face_score == 0
        assert data.distance is None
        assert data.real is None
        assert data.live is None
        assert data.rotation is None
        assert data.box is None
        assert data.size is None


class TestProcess:
    def test_runs_detector(self, session):
        session.detector = lambda frame: make_face(age=frame)
        data = session.process(42.0)
        assert data.age == 42.0

    def test_detector_error_skips_frame(self, session):
        session.update(make_face(age=30.0))
        previous = session.face_data

        def broken(frame):
            raise RuntimeError("model crashed")

        session.detector = broken
        assert session.process(object()) is previous
        assert list(session.history.age) == [30.0]

    def test_idle_does_not_run_detector(self):
        calls = []
        s = DetectionSession(detector=lambda frame: calls.append(frame))
        assert s.process("frame") is None
        assert calls == []

    def test_missing_detector_raises(self, session):
        with pytest.raises(RuntimeError):
            session.process("frame")

    def test_skips_frames_while_warming_up(self):
        calls = []
        s = DetectionSession(detector=lambda frame: calls.append(frame), start_delay_seconds=60.0)
        s.start()
        s.process("frame")
        assert calls == []
