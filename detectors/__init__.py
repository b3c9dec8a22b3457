from detectors.analysis  import FaceAnalysisDetector
from detectors.pose      import HeadPoseDetector
from detectors.liveness  import LivenessDetector
from detectors.group     import DetectorGroup, build_raw_face

__all__ = ["FaceAnalysisDetector", "HeadPoseDetector", "LivenessDetector", "DetectorGroup", "build_raw_face"]
