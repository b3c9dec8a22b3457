"""
Download the MediaPipe model file used by the head pose detector.

DeepFace fetches its own weights on first use; only the landmarker
has to be present before starting the app:
    python utils/download_models.py
"""

import subprocess
from pathlib import Path

MODELS_DIR = Path(__file__).parent.parent / "models"

MODELS = {
    "face_landmarker.task": (
        "https://storage.googleapis.com/mediapipe-models/"
        "face_landmarker/face_landmarker/float16/1/face_landmarker.task"
    ),
}


def download_models(models_dir: Path = MODELS_DIR) -> list[str]:
    """Fetch missing models with curl. Returns the names that failed."""
    models_dir.mkdir(exist_ok=True)
    failed = []
    for filename, url in MODELS.items():
        dest = models_dir / filename
        if dest.exists():
            print(f"[skip] {filename} already exists")
            continue
        print(f"[download] {filename} ...")
        result = subprocess.run(
            ["curl", "-fL", "-o", str(dest), url],
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            print(f"[error] Failed to download {filename}:\n{result.stderr}")
            dest.unlink(missing_ok=True)  # remove partial file
            failed.append(filename)
        else:
            print(f"[done] {filename} saved to {dest}")
    return failed


if __name__ == "__main__":
    if download_models():
        raise SystemExit(1)
    print("\nAll models ready.")
