"""Tests for detector output conversion and merging (no models loaded)."""

import math

import numpy as np
import pytest

from detectors.analysis import face_quality, parse_analysis
from detectors.detector_base import Detector
from detectors.group import DetectorGroup, build_raw_face
from detectors.liveness import parse_antispoof
from detectors.pose import distance_from_matrix, rotation_from_matrix
from state.schema import RawEmotion, RawFace, RawRotation


def deepface_entry(**overrides) -> dict:
    entry = {
        "age": 29,
        "dominant_gender": "Woman",
        "gender": {"Woman": 97.5, "Man": 2.5},
        "dominant_emotion": "happy",
        "emotion": {"angry": 1.0, "happy": 90.0, "neutral": 9.0},
        "region": {"x": 10, "y": 20, "w": 50, "h": 60},
        "face_confidence": 0.92,
    }
    entry.update(overrides)
    return entry


class TestParseAnalysis:
    def setup_method(self):
        self.frame = np.zeros((120, 160, 3), dtype=np.uint8)

    def test_converts_fields(self):
        out = parse_analysis(deepface_entry(), self.frame)
        assert out["face_detected"] is True
        assert out["score"] == pytest.approx(0.92)
        assert out["age"] == 29.0
        assert out["gender"] == "female"
        assert out["gender_score"] == pytest.approx(0.975)
        assert out["box"] == [10, 20, 50, 60]
        assert out["size"] == 60
        assert 0.0 <= out["face_score"] <= 1.0

    def test_emotions_scaled_and_in_order(self):
        out = parse_analysis(deepface_entry(), self.frame)
        assert [e.label for e in out["emotion"]] == ["angry", "happy", "neutral"]
        assert out["emotion"][1] == RawEmotion("happy", 0.9)

    def test_low_face_confidence_is_no_face(self):
        out = parse_analysis(deepface_entry(face_confidence=0), self.frame)
        assert out == {"face_detected": False}

    def test_missing_face_confidence_uses_region(self):
        entry = deepface_entry()
        del entry["face_confidence"]
        out = parse_analysis(entry, self.frame)
        assert out["face_detected"] is True
        assert out["score"] is None
        assert out["box"] == [10, 20, 50, 60]

    def test_missing_face_confidence_whole_frame_is_no_face(self):
        entry = deepface_entry(region={"x": 0, "y": 0, "w": 160, "h": 120})
        del entry["face_confidence"]
        assert parse_analysis(entry, self.frame) == {"face_detected": False}

    def test_unknown_gender_label_lowercased(self):
        out = parse_analysis(deepface_entry(dominant_gender="Other", gender={"Other": 60.0}), self.frame)
        assert out["gender"] == "other"
        assert out["gender_score"] == pytest.approx(0.6)


class TestFaceQuality:
    def test_empty_crop(self):
        assert face_quality(np.zeros((0, 0, 3), dtype=np.uint8)) == 0.0

    def test_flat_dark_crop_scores_low(self):
        assert face_quality(np.zeros((100, 100, 3), dtype=np.uint8)) < 0.3

    def test_textured_crop_scores_higher(self):
        rng = np.random.default_rng(0)
        textured = rng.integers(60, 200, size=(200, 200, 3), dtype=np.uint8)
        flat = np.zeros((200, 200, 3), dtype=np.uint8)
        assert face_quality(textured) > face_quality(flat)


class TestPoseMath:
    def test_identity_matrix(self):
        roll, yaw, pitch = rotation_from_matrix(np.eye(4))
        assert roll == pytest.approx(0.0)
        assert yaw == pytest.approx(0.0)
        assert pitch == pytest.approx(0.0)

    def test_roll_about_z(self):
        theta = math.radians(30)
        m = np.eye(4)
        m[0, 0], m[0, 1] = math.cos(theta), -math.sin(theta)
        m[1, 0], m[1, 1] = math.sin(theta), math.cos(theta)
        roll, yaw, pitch = rotation_from_matrix(m)
        assert roll == pytest.approx(theta)
        assert pitch == pytest.approx(0.0)

    def test_distance_in_metres(self):
        m = np.eye(4)
        m[2, 3] = -45.0
        assert distance_from_matrix(m) == pytest.approx(0.45)


class TestParseAntispoof:
    def test_real_face(self):
        assert parse_antispoof({"is_real": True, "antispoof_score": 0.8}) == {"real": 0.8}

    def test_spoof_inverts_score(self):
        assert parse_antispoof({"is_real": False, "antispoof_score": 0.9}) == {"real": pytest.approx(0.1)}

    def test_missing_score(self):
        assert parse_antispoof({"confidence": 0.9}) == {}


class TestBuildRawFace:
    def test_no_face_reported(self):
        assert build_raw_face([{"face_detected": False}, {"real": 0.9}]) is None

    def test_empty_outputs(self):
        assert build_raw_face([]) is None

    def test_merges_partial_outputs(self):
        rotation = RawRotation(roll=0.1)
        face = build_raw_face([
            {"face_detected": True, "rotation": rotation, "distance": 0.5, "box": [0, 0, 5, 5]},
            {"face_detected": True, "age": 30.0, "box": [1, 2, 3, 4]},
            {"real": 0.7},
        ])
        assert isinstance(face, RawFace)
        assert face.rotation is rotation
        assert face.distance == 0.5
        assert face.age == 30.0
        assert face.real == 0.7
        assert face.box == [1, 2, 3, 4]

    def test_none_does_not_overwrite(self):
        face = build_raw_face([
            {"face_detected": True, "age": 30.0},
            {"face_detected": True, "age": None},
        ])
        assert face.age == 30.0

    def test_one_detector_is_enough(self):
        face = build_raw_face([{"face_detected": False}, {"face_detected": True, "age": 22.0}])
        assert face.age == 22.0


class FakeDetector(Detector):
    def __init__(self, output):
        self.output = output
        self.released = False

    def detect(self, frame):
        return self.output

    def release(self):
        self.released = True


class TestDetectorGroup:
    def test_call_merges(self):
        group = DetectorGroup([
            FakeDetector({"face_detected": True, "age": 25.0}),
            FakeDetector({"gender": "male", "gender_score": 0.8}),
        ])
        face = group(np.zeros((10, 10, 3), dtype=np.uint8))
        assert face.age == 25.0
        assert face.gender == "male"

    def test_release_all(self):
        detectors = [FakeDetector({}), FakeDetector({})]
        DetectorGroup(detectors).release()
        assert all(d.released for d in detectors)
