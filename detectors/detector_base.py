from abc import ABC, abstractmethod
import numpy as np


class Detector(ABC):
    """
    Base class for all face detectors.
    Each detector wraps one inference model and returns the subset of
    RawFace fields it knows about; DetectorGroup merges them per frame.
    """

    @abstractmethod
    def detect(self, frame: np.ndarray) -> dict:
        """
        Analyze a BGR frame and return a dict of raw face values.
        Keys must match RawFace fields, plus `face_detected` (bool) which
        tells the group whether this detector saw a face at all.
        Return an empty dict when the detector has nothing to say this frame.
        """
        ...

    def release(self) -> None:
        """Optional cleanup hook (e.g. close MediaPipe sessions)."""
        pass
