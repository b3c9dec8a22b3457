from camera.camera_base import CameraSource


def create_camera(config: dict) -> CameraSource:
    """
    Build the CameraSource described by the `camera` section of the config.
    """
    cam_cfg = config.get("camera", {})
    cam_type = cam_cfg.get("type", "webcam").lower()

    if cam_type == "webcam":
        from camera.webcam import WebcamSource
        return WebcamSource(
            device_index=cam_cfg.get("device_index", 0),
            width=cam_cfg.get("width", 864),
            height=cam_cfg.get("height", 486),
            mirror=cam_cfg.get("mirror", True),
        )

    raise ValueError(f"Unknown camera type: '{cam_type}'. Valid options: webcam")
