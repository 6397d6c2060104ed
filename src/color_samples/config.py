"""Centralized configuration for the color sample database.

Loads settings from a .env file (if present) next to this module, then
falls back to environment variables, then to hardcoded defaults.

Usage in other modules:
    from color_samples.config import cfg

    path  = cfg.dataset_path
    scale = cfg.rgb_scale
"""
from __future__ import annotations

import os
from pathlib import Path

_ENV_DIR = Path(__file__).resolve().parent
_ENV_PREFIX = "COLOR_SAMPLES_"


def _load_dotenv(directory: Path = _ENV_DIR) -> None:
    """Copy COLOR_SAMPLES_* settings from directory/.env into os.environ.

    Variables already set in the process environment are left alone.
    """
    env_file = directory / ".env"
    if not env_file.is_file():
        return
    for raw_line in env_file.read_text(encoding="utf-8").splitlines():
        name, sep, value = raw_line.strip().removeprefix("export ").partition("=")
        name = name.strip()
        if not sep or not name.startswith(_ENV_PREFIX) or name in os.environ:
            continue
        os.environ[name] = value.strip().strip("'\"")


_load_dotenv()

RGB_SCALES = ("unit", "byte")
FALLBACK_POLICIES = ("exact", "nearest")


class _Config:
    """Read-only configuration object. All values resolve at access time so
    they pick up any later changes to os.environ."""

    # ── Dataset ──────────────────────────────────────────────────────

    @property
    def dataset_path(self) -> Path | None:
        """Default JSON dataset used by ColorSampleDatabase.load()."""
        val = os.environ.get("COLOR_SAMPLES_PATH", "").strip()
        return Path(val) if val else None

    @property
    def rgb_scale(self) -> str:
        """Declared RGB convention: "unit" for [0,1], "byte" for [0,255]."""
        val = os.environ.get("COLOR_SAMPLES_RGB_SCALE", "unit").strip().lower()
        return val if val in RGB_SCALES else "unit"

    # ── Lookup ───────────────────────────────────────────────────────

    @property
    def fallback_policy(self) -> str:
        val = os.environ.get("COLOR_SAMPLES_FALLBACK", "exact").strip().lower()
        return val if val in FALLBACK_POLICIES else "exact"


cfg = _Config()
