from typing import Optional

from pythonosc import udp_client
from osc.mapping import OSC_ADDRESSES, MISSING_ANGLE, MISSING_NUMBER, MISSING_STRING
from state.schema import FaceData


def _or(value, missing):
    return missing if value is None else value


def face_fields(face: Optional[FaceData]) -> dict:
    """Flatten a display record into OSC field → value, filling in the missing sentinels."""
    if face is None:
        return {
            "detected": 0,
            "gender": MISSING_STRING, "emotion": MISSING_STRING,
            "confidence": MISSING_NUMBER, "face_score": MISSING_NUMBER,
            "age": float(MISSING_NUMBER), "gender_score": MISSING_NUMBER,
            "emotion_score": MISSING_NUMBER, "distance": MISSING_NUMBER,
            "real": MISSING_NUMBER,
            "roll": MISSING_ANGLE, "yaw": MISSING_ANGLE, "pitch": MISSING_ANGLE,
        }

    rot = face.rotation
    return {
        "detected":      1,
        "gender":        _or(face.gender, MISSING_STRING),
        "emotion":       face.emotion.label if face.emotion else MISSING_STRING,
        "confidence":    face.confidence,
        "face_score":    face.face_score,
        "age":           float(_or(face.age, MISSING_NUMBER)),
        "gender_score":  _or(face.gender_score, MISSING_NUMBER),
        "emotion_score": face.emotion.confidence if face.emotion else MISSING_NUMBER,
        "distance":      _or(face.distance, MISSING_NUMBER),
        "real":          _or(face.real, MISSING_NUMBER),
        "roll":          _or(rot.roll if rot else None, MISSING_ANGLE),
        "yaw":           _or(rot.yaw if rot else None, MISSING_ANGLE),
        "pitch":         _or(rot.pitch if rot else None, MISSING_ANGLE),
    }


class OSCSender:
    """
    Publishes the smoothed face record as OSC messages.

    Each field maps to one address (see mapping.py) and is only sent when
    its value differs from the last one sent, so a steady face produces
    no traffic.
    """

    def __init__(self, host: str = "127.0.0.1", port: int = 7000, verbose: bool = False):
        self.host = host
        self.port = port
        self.verbose = verbose
        self._client = udp_client.SimpleUDPClient(host, port)
        self._last_sent: dict = {}
        print(f"[OSCSender] Ready — sending to {host}:{port}")

    def send_change(self, field: str, value) -> bool:
        """Send `value` for `field` if it changed. Returns True if a message went out."""
        address = OSC_ADDRESSES.get(field)
        if address is None:
            print(f"[OSCSender] Warning: no OSC address defined for field '{field}'")
            return False

        if field in self._last_sent and self._last_sent[field] == value:
            return False

        self._client.send_message(address, value)
        self._last_sent[field] = value
        if self.verbose:
            print(f"[OSCSender] Sent: {address} → {value}")
        return True

    def publish(self, face: Optional[FaceData]) -> int:
        """Send every changed field of the record. Returns how many messages went out."""
        return sum(self.send_change(field, value) for field, value in face_fields(face).items())

    def send_all(self, face: Optional[FaceData]) -> None:
        """Resend every field regardless of history (useful on startup to sync the receiver)."""
        self._last_sent.clear()
        self.publish(face)
