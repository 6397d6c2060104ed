"""Color sample database keyed by deltaE and hue.

Loads a precomputed color dataset, validates it, and serves exact lookups
and reproducible two-stage random sampling for engine-side callers.
"""

from .config import cfg
from .database import BuildResult, ColorSampleDatabase, RandomSource
from .errors import ColorSampleError, EmptyGroup, NotFound, ParseError
from .fallback import nearest_delta_e, resolve_delta_e, sample_with_fallback
from .models import BuildSummary, ColorSample, DeltaEGroup, HueBucket, RejectedSample

__all__ = [
    "cfg",
    # Database
    "ColorSampleDatabase",
    "BuildResult",
    "RandomSource",
    # Models
    "ColorSample",
    "HueBucket",
    "DeltaEGroup",
    "BuildSummary",
    "RejectedSample",
    # Errors
    "ColorSampleError",
    "ParseError",
    "NotFound",
    "EmptyGroup",
    # Caller-side fallback
    "nearest_delta_e",
    "resolve_delta_e",
    "sample_with_fallback",
]
