import math
import numpy as np
from pathlib import Path
from detectors.detector_base import Detector
from state.schema import RawRotation

LANDMARKER_MODEL_PATH = Path(__file__).parent.parent / "models" / "face_landmarker.task"

# FaceMesh indices (478-point model with irises)
RIGHT_IRIS = 468
LEFT_IRIS  = 473
RIGHT_EYE_CORNERS = (33, 133)
LEFT_EYE_CORNERS  = (362, 263)


def rotation_from_matrix(matrix: np.ndarray) -> tuple[float, float, float]:
    """
    Extract (roll, yaw, pitch) in radians from a 4x4 facial transformation matrix.
    """
    r = np.asarray(matrix, dtype=float)[:3, :3]
    sy = math.hypot(r[2, 1], r[2, 2])
    pitch = math.atan2(r[2, 1], r[2, 2])
    yaw   = math.atan2(-r[2, 0], sy)
    roll  = math.atan2(r[1, 0], r[0, 0])
    return roll, yaw, pitch


def distance_from_matrix(matrix: np.ndarray) -> float:
    """Camera-to-face distance in metres. MediaPipe's translation is in centimetres."""
    return round(abs(float(np.asarray(matrix, dtype=float)[2, 3])) / 100.0, 3)


def gaze_from_landmarks(landmarks) -> tuple[float, float]:
    """
    Approximate gaze as (bearing in radians, strength 0–1) from how far each
    iris sits from the middle of its eye, normalized by eye width.
    """
    offsets = []
    for iris, (a, b) in ((RIGHT_IRIS, RIGHT_EYE_CORNERS), (LEFT_IRIS, LEFT_EYE_CORNERS)):
        p1, p2 = landmarks[a], landmarks[b]
        width = math.hypot(p2.x - p1.x, p2.y - p1.y)
        if width <= 0:
            continue
        cx, cy = (p1.x + p2.x) / 2, (p1.y + p2.y) / 2
        offsets.append(((landmarks[iris].x - cx) / width, (landmarks[iris].y - cy) / width))

    if not offsets:
        return 0.0, 0.0

    dx = sum(o[0] for o in offsets) / len(offsets)
    dy = sum(o[1] for o in offsets) / len(offsets)
    # An iris at the eye corner is ~0.5 eye widths off centre
    strength = min(math.hypot(dx, dy) / 0.5, 1.0)
    return math.atan2(dy, dx), round(strength, 3)


class HeadPoseDetector(Detector):
    """
    Estimates head rotation, distance and gaze of the primary face with the
    MediaPipe FaceLandmarker (478 landmarks + facial transformation matrix).

    Output (radians / metres, converted for display by DetectionSession):
        rotation  roll / yaw / pitch / gaze bearing / gaze strength
        distance  metres from camera
        box       [x, y, w, h] pixel bbox around the landmarks
    """

    def __init__(self, min_detection_confidence: float = 0.5):
        if not LANDMARKER_MODEL_PATH.exists():
            raise FileNotFoundError(
                f"Model not found: {LANDMARKER_MODEL_PATH}\n"
                "Run: python utils/download_models.py"
            )

        # Lazy import, MediaPipe is only needed once a pose detector is built
        try:
            import mediapipe as mp
        except ImportError:
            raise ImportError(
                "MediaPipe is not installed. Run: pip install mediapipe"
            )
        self._mp = mp

        BaseOptions           = mp.tasks.BaseOptions
        FaceLandmarker        = mp.tasks.vision.FaceLandmarker
        FaceLandmarkerOptions = mp.tasks.vision.FaceLandmarkerOptions
        VisionRunningMode     = mp.tasks.vision.RunningMode

        self._landmarker = FaceLandmarker.create_from_options(
            FaceLandmarkerOptions(
                base_options=BaseOptions(model_asset_path=str(LANDMARKER_MODEL_PATH)),
                running_mode=VisionRunningMode.IMAGE,
                num_faces=1,
                min_face_detection_confidence=min_detection_confidence,
                min_face_presence_confidence=min_detection_confidence,
                output_face_blendshapes=False,
                output_facial_transformation_matrixes=True,
            )
        )

    def detect(self, frame: np.ndarray) -> dict:
        h, w = frame.shape[:2]
        rgb = np.ascontiguousarray(frame[:, :, ::-1])  # BGR → RGB
        mp_image = self._mp.Image(image_format=self._mp.ImageFormat.SRGB, data=rgb)
        result = self._landmarker.detect(mp_image)

        if not result.face_landmarks:
            return {"face_detected": False}

        landmarks = result.face_landmarks[0]
        rotation = RawRotation()
        distance = None

        if result.facial_transformation_matrixes:
            matrix = result.facial_transformation_matrixes[0]
            rotation.roll, rotation.yaw, rotation.pitch = rotation_from_matrix(matrix)
            distance = distance_from_matrix(matrix)

        if len(landmarks) > LEFT_IRIS:
            rotation.gaze_bearing, rotation.gaze_strength = gaze_from_landmarks(landmarks)

        xs = [lm.x for lm in landmarks]
        ys = [lm.y for lm in landmarks]
        x1, y1 = int(max(min(xs), 0.0) * w), int(max(min(ys), 0.0) * h)
        x2, y2 = int(min(max(xs), 1.0) * w), int(min(max(ys), 1.0) * h)

        return {
            "face_detected": True,
            "rotation":      rotation,
            "distance":      distance,
            "box":           [x1, y1, x2 - x1, y2 - y1],
        }

    def release(self) -> None:
        self._landmarker.close()
