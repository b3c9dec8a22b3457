"""
face-panel — main entry point

Reads camera frames, runs the face detectors while a detection session is
active, smooths the results and shows them in a preview window next to the
video. Optionally publishes the face record over OSC.

Usage:
    python main.py
    python main.py --config path/to/config.yaml

Controls (preview window):
    D — start / stop detection
    R — clear smoothing history
    Q — quit
"""

import argparse
import cv2
import yaml

from camera.factory  import create_camera
from detectors       import DetectorGroup, FaceAnalysisDetector, HeadPoseDetector, LivenessDetector
from display         import draw_face_box, draw_face_panel
from state.schema    import SmoothConfig
from state.session   import DetectionSession


def load_config(path: str = "config.yaml") -> dict:
    with open(path) as f:
        return yaml.safe_load(f) or {}


def build_detectors(det_cfg: dict) -> list:
    """Create the detectors enabled in the `detection` config section."""
    analysis_cfg = det_cfg.get("analysis", {})
    pose_cfg     = det_cfg.get("pose", {})
    liveness_cfg = det_cfg.get("liveness", {})

    detectors = []
    if pose_cfg.get("enabled", True):
        detectors.append(HeadPoseDetector(
            min_detection_confidence=pose_cfg.get("min_detection_confidence", 0.5),
        ))

    # Analysis runs after pose so its DeepFace box wins the merge
    detectors.append(FaceAnalysisDetector(
        analyze_every_n_frames=analysis_cfg.get("analyze_every_n_frames", 3),
        detector_backend=analysis_cfg.get("detector_backend", "opencv"),
        min_face_confidence=analysis_cfg.get("min_face_confidence", 0.5),
    ))

    if liveness_cfg.get("enabled", False):
        detectors.append(LivenessDetector(
            analyze_every_n_frames=liveness_cfg.get("analyze_every_n_frames", 5),
            detector_backend=analysis_cfg.get("detector_backend", "opencv"),
        ))
    return detectors


def main():
    parser = argparse.ArgumentParser(description="face-panel: live face attributes with temporal smoothing")
    parser.add_argument("--config", default="config.yaml", help="Path to config YAML")
    args = parser.parse_args()

    config = load_config(args.config)
    det_cfg     = config.get("detection", {})
    display_cfg = config.get("display", {})
    osc_cfg     = config.get("osc", {})
    debug_cfg   = config.get("debug", {})

    show_preview     = display_cfg.get("show_preview", True)
    language         = display_cfg.get("language", "en")
    print_detections = debug_cfg.get("print_detections", False)

    # ── Build components ────────────────────────────────────────────────────
    camera = create_camera(config)

    print("[main] Loading models...")
    detector_group = DetectorGroup(build_detectors(det_cfg), print_detections=print_detections)
    print("[main] Models loaded.")

    session = DetectionSession(
        config=SmoothConfig.from_dict(config.get("smoothing") or {}),
        detector=detector_group,
        start_delay_seconds=det_cfg.get("start_delay_seconds", 0.5),
    )
    session.status_msg = "Models loaded, press D to start detection"

    osc = None
    if osc_cfg.get("enabled", False):
        from osc.sender import OSCSender
        osc = OSCSender(
            host=osc_cfg.get("host", "127.0.0.1"),
            port=osc_cfg.get("port", 7000),
            verbose=print_detections,
        )

    # ── Main loop ────────────────────────────────────────────────────────────
    print("\n[main] Starting. D = start/stop detection, R = reset history, Q (or Ctrl+C) = quit.\n")
    if not show_preview:
        session.start()

    try:
        with camera:
            if osc:
                osc.send_all(None)

            while True:
                success, frame = camera.read()
                if not success or frame is None:
                    print("[main] Warning: empty frame, skipping.")
                    continue

                face = session.process(frame)

                if osc and session.is_active:
                    osc.publish(face)

                if show_preview:
                    draw_face_box(frame, face)
                    draw_face_panel(frame, face, session.status_msg, language)
                    cv2.imshow("face-panel", frame)

                    key = cv2.waitKey(1) & 0xFF
                    if key == ord("q"):
                        print("[main] Q pressed — quitting.")
                        break
                    elif key == ord("d"):
                        if session.is_active:
                            session.stop()
                            if osc:
                                osc.publish(None)
                        else:
                            session.start()
                    elif key == ord("r"):
                        session.reset()

    except KeyboardInterrupt:
        print("\n[main] Interrupted — shutting down.")

    finally:
        session.stop()
        detector_group.release()
        if show_preview:
            cv2.destroyAllWindows()
        print("[main] Done.")


if __name__ == "__main__":
    main()
