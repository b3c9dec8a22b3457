from dataclasses import fields
from typing import Optional

import numpy as np
from detectors.detector_base import Detector
from state.schema import RawFace

_RAW_FACE_FIELDS = {f.name for f in fields(RawFace)}


def build_raw_face(raw_outputs: list[dict]) -> Optional[RawFace]:
    """
    Merge partial outputs from all detectors into the frame's RawFace.

    Returns None unless at least one detector reported `face_detected`.
    Later detectors win when two report the same field; None values never
    overwrite a real one.
    """
    if not any(output.get("face_detected") for output in raw_outputs):
        return None

    merged = {}
    for output in raw_outputs:
        for key, value in output.items():
            if key in _RAW_FACE_FIELDS and value is not None:
                merged[key] = value
    return RawFace(**merged)


class DetectorGroup:
    """
    Runs every detector on a frame and merges the results.
    Callable, so it can be handed to DetectionSession as its detector.
    """

    def __init__(self, detectors: list[Detector], print_detections: bool = False):
        self.detectors        = detectors
        self.print_detections = print_detections

    def __call__(self, frame: np.ndarray) -> Optional[RawFace]:
        raw_outputs = [d.detect(frame) for d in self.detectors]
        face = build_raw_face(raw_outputs)
        if self.print_detections:
            print(face)
        return face

    def release(self) -> None:
        for d in self.detectors:
            d.release()
