"""
Preview-window drawing: face box on the video and a side panel with the
smoothed face record.
"""

from typing import Optional

import cv2
import numpy as np

from state.schema import FaceData
from state.smoothing import translate_emotion_name

# Colors (BGR)
COLOR_BOX   = (0, 255, 0)      # green
COLOR_TEXT  = (255, 255, 255)
COLOR_LABEL = (180, 180, 180)
COLOR_WARN  = (0, 165, 255)    # orange
COLOR_PANEL = (0, 0, 0)

PANEL_WIDTH = 260
LINE_HEIGHT = 24
FONT        = cv2.FONT_HERSHEY_SIMPLEX


def _fmt(value, suffix: str = "") -> str:
    return "-" if value is None else f"{value}{suffix}"


def face_panel_lines(face: Optional[FaceData], language: str = "en") -> list[tuple[str, str]]:
    """(label, value) rows shown in the side panel."""
    if face is None:
        return [("Face", "none")]

    if face.emotion is not None:
        emotion = f"{translate_emotion_name(face.emotion.label, language)} ({face.emotion.confidence}%)"
    else:
        emotion = "-"

    gender = "-" if face.gender is None else f"{face.gender} ({_fmt(face.gender_score, '%')})"

    rows = [
        ("Confidence", f"{face.confidence}%"),
        ("Quality",    f"{face.face_score}%"),
        ("Age",        _fmt(face.age)),
        ("Gender",     gender),
        ("Emotion",    emotion),
        ("Distance",   _fmt(face.distance, " cm")),
        ("Real",       _fmt(face.real, "%")),
        ("Live",       _fmt(face.live, "%")),
    ]

    rot = face.rotation
    if rot is not None:
        rows += [
            ("Roll",  _fmt(rot.roll, " deg")),
            ("Yaw",   _fmt(rot.yaw, " deg")),
            ("Pitch", _fmt(rot.pitch, " deg")),
            ("Gaze",  _fmt(rot.gaze_bearing, " deg")),
        ]
    return rows


def draw_face_box(frame: np.ndarray, face: Optional[FaceData]) -> None:
    if face is None or not face.box:
        return
    x, y, w, h = [int(v) for v in face.box[:4]]
    cv2.rectangle(frame, (x, y), (x + w, y + h), COLOR_BOX, 2)
    cv2.putText(frame, f"face {face.confidence}%", (x, max(y - 8, 12)),
                FONT, 0.5, COLOR_BOX, 1, cv2.LINE_AA)


def draw_face_panel(
    frame: np.ndarray,
    face: Optional[FaceData],
    status: str = "",
    language: str = "en",
    alpha: float = 0.6,
) -> None:
    """Draw the attribute panel along the right edge of the frame, in place."""
    h, w = frame.shape[:2]
    x0 = max(w - PANEL_WIDTH, 0)

    overlay = frame.copy()
    cv2.rectangle(overlay, (x0, 0), (w, h), COLOR_PANEL, -1)
    frame[:] = cv2.addWeighted(overlay, alpha, frame, 1 - alpha, 0)

    y = 28
    if status:
        cv2.putText(frame, status, (x0 + 12, y), FONT, 0.5, COLOR_WARN, 1, cv2.LINE_AA)
        y += LINE_HEIGHT + 6

    for label, value in face_panel_lines(face, language):
        cv2.putText(frame, label, (x0 + 12, y), FONT, 0.5, COLOR_LABEL, 1, cv2.LINE_AA)
        cv2.putText(frame, value, (x0 + 110, y), FONT, 0.5, COLOR_TEXT, 1, cv2.LINE_AA)
        y += LINE_HEIGHT
