import cv2
import numpy as np
from detectors.detector_base import Detector
from state.schema import RawEmotion


# DeepFace gender labels → our labels
_GENDER_MAP = {
    "Man":   "male",
    "Woman": "female",
}


def face_quality(crop: np.ndarray) -> float:
    """
    Rough 0–1 quality score for a face crop from sharpness, contrast,
    brightness and size. Blurry, dark or tiny crops score low.
    """
    if crop is None or crop.size == 0:
        return 0.0

    gray = cv2.cvtColor(crop, cv2.COLOR_BGR2GRAY) if crop.ndim == 3 else crop

    brightness       = float(np.mean(gray))
    brightness_score = 1.0 if 80 <= brightness <= 180 else 0.5
    contrast_score   = min(1.0, float(np.std(gray)) / 50.0)
    blur_score       = min(1.0, cv2.Laplacian(gray, cv2.CV_64F).var() / 100.0)
    size_score       = min(1.0, gray.shape[0] * gray.shape[1] / 40000.0)  # ~200x200 is enough

    return round((brightness_score + contrast_score + blur_score + size_score) / 4.0, 3)


def parse_analysis(analysis: dict, frame: np.ndarray, min_face_confidence: float = 0.5) -> dict:
    """
    Convert one DeepFace.analyze() face entry into raw face fields.

    DeepFace reports emotion and gender as percentages; they are scaled to 0–1.
    With enforce_detection=False DeepFace returns the whole frame as the face
    region when nothing was found, with face_confidence 0, so that case (and
    anything under `min_face_confidence`) counts as no face.
    Entries without a face_confidence key fall back to that whole-frame check.
    """
    region = analysis.get("region") or {}
    x, y = int(region.get("x", 0)), int(region.get("y", 0))
    w, h = int(region.get("w", 0)), int(region.get("h", 0))

    if "face_confidence" in analysis:
        face_confidence = float(analysis.get("face_confidence") or 0.0)
        if face_confidence < min_face_confidence:
            return {"face_detected": False}
    else:
        frame_h, frame_w = frame.shape[:2]
        if not w or not h or (w >= frame_w and h >= frame_h):
            return {"face_detected": False}
        face_confidence = None

    emotions = [
        RawEmotion(label=label, score=round(float(score) / 100.0, 4))
        for label, score in (analysis.get("emotion") or {}).items()
    ]

    gender_scores = analysis.get("gender") or {}
    dominant      = analysis.get("dominant_gender")
    gender        = _GENDER_MAP.get(dominant, dominant.lower() if dominant else None)
    gender_score  = gender_scores.get(dominant) if dominant else None

    age = analysis.get("age")

    return {
        "face_detected": True,
        "score":         face_confidence,
        "face_score":    face_quality(frame[y:y + h, x:x + w]) if w and h else None,
        "age":           float(age) if age is not None else None,
        "gender":        gender,
        "gender_score":  round(float(gender_score) / 100.0, 4) if gender_score is not None else None,
        "emotion":       emotions,
        "box":           [x, y, w, h] if w and h else None,
        "size":          max(w, h) if w and h else None,
    }


class FaceAnalysisDetector(Detector):
    """
    Estimates age, gender and emotion for the primary face using DeepFace.

    DeepFace runs several classifiers per face, so by default it only analyzes
    every `analyze_every_n_frames` frames and repeats its last answer in between.
    Tune this based on your hardware.

    Requires: pip install deepface
    """

    def __init__(
        self,
        analyze_every_n_frames: int = 3,
        detector_backend: str = "opencv",
        min_face_confidence: float = 0.5,
    ):
        self.analyze_every_n_frames = max(analyze_every_n_frames, 1)
        self.detector_backend       = detector_backend
        self.min_face_confidence    = min_face_confidence
        self._frame_count = 0
        self._last_result: dict = {}

        # Lazy import — DeepFace loads TF/models on first use
        try:
            from deepface import DeepFace
            self._deepface = DeepFace
        except ImportError:
            raise ImportError(
                "DeepFace is not installed. Run: pip install deepface"
            )

    def detect(self, frame: np.ndarray) -> dict:
        self._frame_count += 1

        # Skip frames for performance
        if (self._frame_count - 1) % self.analyze_every_n_frames != 0:
            return self._last_result

        try:
            analyses = self._deepface.analyze(
                img_path=frame,
                actions=["age", "gender", "emotion"],
                detector_backend=self.detector_backend,
                enforce_detection=False,  # don't raise if no face found
                silent=True,
            )
        except Exception as e:
            print(f"[FaceAnalysisDetector] Analysis failed, keeping last result: {e}")
            return self._last_result

        if isinstance(analyses, dict):
            analyses = [analyses]

        # Use the first (most prominent) face
        if not analyses:
            self._last_result = {"face_detected": False}
        else:
            self._last_result = parse_analysis(analyses[0], frame, self.min_face_confidence)
        return self._last_result
