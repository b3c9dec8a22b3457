import numpy as np
from detectors.detector_base import Detector


def parse_antispoof(face: dict) -> dict:
    """
    Convert one DeepFace.extract_faces() entry into a 0–1 `real` score.

    DeepFace reports the model's confidence in its own verdict, so a spoof
    verdict at 0.9 means the face is 0.1 real.
    """
    score = face.get("antispoof_score")
    if score is None:
        return {}
    score = float(score)
    return {"real": round(score if face.get("is_real") else 1.0 - score, 4)}


class LivenessDetector(Detector):
    """
    Scores how likely the primary face is a real person rather than a photo
    or screen, using DeepFace's anti-spoofing model.

    Does not decide whether a face is present; DetectorGroup relies on the
    other detectors for that.

    Requires: pip install deepface (and torch for the anti-spoofing model)
    """

    def __init__(self, analyze_every_n_frames: int = 5, detector_backend: str = "opencv"):
        self.analyze_every_n_frames = max(analyze_every_n_frames, 1)
        self.detector_backend       = detector_backend
        self._frame_count = 0
        self._last_result: dict = {}

        try:
            from deepface import DeepFace
            self._deepface = DeepFace
        except ImportError:
            raise ImportError(
                "DeepFace is not installed. Run: pip install deepface"
            )

    def detect(self, frame: np.ndarray) -> dict:
        self._frame_count += 1
        if (self._frame_count - 1) % self.analyze_every_n_frames != 0:
            return self._last_result

        try:
            faces = self._deepface.extract_faces(
                img_path=frame,
                detector_backend=self.detector_backend,
                enforce_detection=False,
                anti_spoofing=True,
            )
        except Exception as e:
            print(f"[LivenessDetector] Anti-spoofing failed, keeping last result: {e}")
            return self._last_result

        self._last_result = parse_antispoof(faces[0]) if faces else {}
        return self._last_result
