"""Caller-side deltaE resolution.

ColorSampleDatabase.lookup() only matches exact keys. Callers that want to
tolerate a slider value that is not in the dataset pick a policy here.
"""
from __future__ import annotations

import logging
from typing import Iterable

from .config import FALLBACK_POLICIES, cfg
from .database import ColorSampleDatabase, RandomSource
from .errors import NotFound
from .models import ColorSample

logger = logging.getLogger(__name__)


def nearest_delta_e(values: Iterable[float], target: float) -> float:
    """Closest value to target; ties go to the smaller value."""
    candidates = sorted(values)
    if not candidates:
        raise NotFound(target, ())
    return min(candidates, key=lambda value: abs(value - target))


def resolve_delta_e(database: ColorSampleDatabase, target: float, policy: str | None = None) -> float:
    policy = cfg.fallback_policy if policy is None else policy
    if policy not in FALLBACK_POLICIES:
        raise ValueError(f"policy must be one of {FALLBACK_POLICIES}, got {policy!r}")

    if target in database:
        return target
    if policy == "exact":
        raise NotFound(target, database.available_delta_e_values())

    resolved = nearest_delta_e(database.available_delta_e_values(), target)
    logger.warning("deltaE %s not in dataset, using closest value %s", target, resolved)
    return resolved


def sample_with_fallback(
    database: ColorSampleDatabase,
    target: float,
    rng: RandomSource,
    policy: str | None = None,
) -> ColorSample:
    return database.sample_random(resolve_delta_e(database, target, policy), rng)
