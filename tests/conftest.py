"""Pytest configuration for color sample tests."""
import sys
from pathlib import Path

import pytest

# Add src directory to Python path so tests can import color_samples without installing.
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def clean_color_env(monkeypatch):
    """Keep COLOR_SAMPLES_* settings from the host environment out of tests."""
    for var in ("COLOR_SAMPLES_PATH", "COLOR_SAMPLES_RGB_SCALE", "COLOR_SAMPLES_FALLBACK"):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def sample_document() -> dict:
    """Small dataset shaped like offset_colors_white.json."""
    return {
        "1.0": {
            "0.0": [
                {"hsv": [0.0, 0.1, 0.9], "rgb": [0.9, 0.81, 0.81], "lab": [84.1, 6.2, 2.1], "delta_e": 1.02},
                {"rgb": [0.88, 0.8, 0.8], "delta_e": 0.98},
            ],
            "40.0": [
                {"rgb": [0.9, 0.86, 0.81]},
            ],
        },
        "3.0": {
            "120.0": [
                {"rgb": [0.7, 0.9, 0.7]},
                {"rgb": [0.72, 0.91, 0.7]},
                {"rgb": [0.69, 0.88, 0.71]},
            ],
        },
        "2.0": {
            "240.0": [
                {"rgb": [0.75, 0.75, 0.95]},
            ],
            "280.0": [
                {"rgb": [0.85, 0.75, 0.95]},
            ],
        },
    }
