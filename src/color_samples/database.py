"""Color sample database keyed by deltaE and hue.

The raw document is a JSON-shaped mapping::

    {"<deltaE>": {"<hue>": [{"rgb": [r, g, b], ...}, ...], ...}, ...}

Structural problems (wrong container types, unparsable or colliding keys)
abort the build with ParseError. Individual records with bad RGB data are
dropped and counted in the BuildSummary instead.
"""
from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any, NamedTuple, Protocol

from .config import RGB_SCALES, cfg
from .errors import EmptyGroup, NotFound, ParseError
from .models import RGB_MAX, BuildSummary, ColorSample, DeltaEGroup, HueBucket, RejectedSample

logger = logging.getLogger(__name__)

# Plain decimal keys such as "1.0", "40" or "-0.5".
_DECIMAL_KEY = re.compile(r"[+-]?\d+(?:\.\d+)?", re.ASCII)


class RandomSource(Protocol):
    """Anything with random.Random's randrange(); supplied by the caller per call."""

    def randrange(self, stop: int) -> int: ...


class BuildResult(NamedTuple):
    database: "ColorSampleDatabase"
    summary: BuildSummary


def _finite(value: Any) -> float | None:
    """Return value as a finite float, or None if it is not a finite number."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _parse_key(key: Any, path: tuple[Any, ...], what: str) -> float:
    if isinstance(key, str):
        text = key.strip()
        value = float(text) if _DECIMAL_KEY.fullmatch(text) else None
    else:
        value = _finite(key)
    if value is None or not math.isfinite(value):
        raise ParseError(f"Cannot parse {what} key {key!r} as a float", path=path, expected="a decimal string such as \"1.0\"")
    return value


def _unique_pairs(pairs: list[tuple[str, Any]]) -> dict[str, Any]:
    """json object_pairs_hook that refuses repeated keys instead of keeping the last."""
    obj: dict[str, Any] = {}
    for key, value in pairs:
        if key in obj:
            raise ParseError(f"Duplicate key {key!r} in JSON object", path=(key,), expected="unique keys")
        obj[key] = value
    return obj


def _optional_triple(record: Mapping[str, Any], field: str) -> tuple[float, float, float] | None:
    value = record.get(field)
    if value is None:
        return None
    if isinstance(value, (list, tuple)) and len(value) == 3:
        channels = [_finite(c) for c in value]
        if None not in channels:
            return (channels[0], channels[1], channels[2])
    logger.debug("Ignoring malformed optional %r triple: %r", field, value)
    return None


def _parse_record(record: Any, group_delta_e: float, scale: str) -> tuple[ColorSample | None, str | None]:
    """Validate one sample record. Returns (sample, None) or (None, reason)."""
    if not isinstance(record, Mapping):
        return None, "record is not an object"
    if "rgb" not in record:
        return None, "missing 'rgb' field"
    rgb = record["rgb"]
    if not isinstance(rgb, (list, tuple)) or len(rgb) != 3:
        return None, "'rgb' must be a list of exactly 3 numbers"
    channels = [_finite(c) for c in rgb]
    if None in channels:
        return None, "'rgb' components must be finite numbers"
    top = RGB_MAX[scale]
    if any(c < 0.0 or c > top for c in channels):
        return None, f"'rgb' component outside [0, {top:g}]"

    delta_e = _finite(record.get("delta_e"))
    sample = ColorSample(
        rgb=(channels[0], channels[1], channels[2]),
        delta_e=group_delta_e if delta_e is None else delta_e,
        scale=scale,
        hsv=_optional_triple(record, "hsv"),
        lab=_optional_triple(record, "lab"),
    )
    return sample, None


def _resolve_scale(rgb_scale: str | None) -> str:
    scale = cfg.rgb_scale if rgb_scale is None else rgb_scale
    if scale not in RGB_SCALES:
        raise ValueError(f"rgb_scale must be one of {RGB_SCALES}, got {scale!r}")
    return scale


class ColorSampleDatabase:
    """Immutable deltaE -> hue -> samples index built once from a raw document."""

    def __init__(self, groups: Mapping[float, DeltaEGroup], summary: BuildSummary | None = None, scale: str = "unit"):
        for key, group in groups.items():
            if key != group.delta_e:
                raise ValueError(f"group stored under {key!r} has delta_e {group.delta_e!r}")
        if scale not in RGB_SCALES:
            raise ValueError(f"scale must be one of {RGB_SCALES}, got {scale!r}")
        self._groups: Mapping[float, DeltaEGroup] = MappingProxyType(dict(sorted(groups.items())))
        self._keys: tuple[float, ...] = tuple(self._groups)
        self._summary = summary or BuildSummary(
            groups_loaded=len(self._groups),
            buckets_loaded=sum(len(g.buckets) for g in self._groups.values()),
            samples_loaded=sum(g.sample_count for g in self._groups.values()),
        )
        self._scale = scale

    @property
    def summary(self) -> BuildSummary:
        """Diagnostic counts captured when the database was built."""
        return self._summary

    @property
    def scale(self) -> str:
        return self._scale

    # ── Construction ─────────────────────────────────────────────────

    @classmethod
    def build(cls, raw: Any, *, rgb_scale: str | None = None) -> BuildResult:
        """Parse a raw document into a database plus a diagnostic summary.

        Raises ParseError if the document structure is wrong; bad sample
        records are skipped and reported in summary.rejections.
        """
        scale = _resolve_scale(rgb_scale)
        if not isinstance(raw, Mapping):
            raise ParseError(
                f"Top-level document must be a mapping, got {type(raw).__name__}",
                expected="an object keyed by deltaE strings",
            )

        groups: dict[float, DeltaEGroup] = {}
        rejections: list[RejectedSample] = []
        delta_keys: dict[float, Any] = {}

        for delta_key, hue_map in raw.items():
            delta_e = _parse_key(delta_key, (delta_key,), "deltaE")
            if delta_e in delta_keys:
                raise ParseError(
                    f"deltaE key {delta_key!r} collides with {delta_keys[delta_e]!r}",
                    path=(delta_key,),
                    expected="unique deltaE keys",
                )
            delta_keys[delta_e] = delta_key
            if not isinstance(hue_map, Mapping):
                raise ParseError(
                    f"deltaE entry is a {type(hue_map).__name__}",
                    path=(delta_key,),
                    expected="an object keyed by hue strings",
                )

            buckets: list[HueBucket] = []
            hue_keys: dict[float, Any] = {}
            for hue_key, records in hue_map.items():
                hue = _parse_key(hue_key, (delta_key, hue_key), "hue")
                if hue in hue_keys:
                    raise ParseError(
                        f"hue key {hue_key!r} collides with {hue_keys[hue]!r}",
                        path=(delta_key, hue_key),
                        expected="unique hue keys within a deltaE entry",
                    )
                hue_keys[hue] = hue_key
                if not isinstance(records, (list, tuple)):
                    raise ParseError(
                        f"hue entry is a {type(records).__name__}",
                        path=(delta_key, hue_key),
                        expected="a list of sample records",
                    )

                samples: list[ColorSample] = []
                for index, record in enumerate(records):
                    sample, reason = _parse_record(record, delta_e, scale)
                    if sample is None:
                        logger.debug("Rejected sample %s/%s[%d]: %s", delta_key, hue_key, index, reason)
                        rejections.append(RejectedSample(
                            delta_e_key=str(delta_key), hue_key=str(hue_key), index=index, reason=reason or "",
                        ))
                        continue
                    samples.append(sample)

                if samples:
                    buckets.append(HueBucket(hue=hue, samples=tuple(samples)))
                else:
                    logger.debug("Dropping hue %s under deltaE %s: no valid samples", hue_key, delta_key)

            if buckets:
                buckets.sort(key=lambda bucket: bucket.hue)
                groups[delta_e] = DeltaEGroup(delta_e=delta_e, buckets=tuple(buckets))
                logger.debug("deltaE %s: %d hue buckets", delta_key, len(buckets))
            else:
                logger.debug("Dropping deltaE %s: no non-empty hue buckets", delta_key)

        summary = BuildSummary(
            groups_loaded=len(groups),
            buckets_loaded=sum(len(g.buckets) for g in groups.values()),
            samples_loaded=sum(g.sample_count for g in groups.values()),
            samples_rejected=len(rejections),
            rejections=tuple(rejections),
        )
        logger.info(
            "Loaded %d deltaE groups, %d hue buckets, %d samples (%d rejected)",
            summary.groups_loaded, summary.buckets_loaded, summary.samples_loaded, summary.samples_rejected,
        )
        return BuildResult(cls(groups, summary, scale), summary)

    @classmethod
    def from_json(cls, text: str, *, rgb_scale: str | None = None) -> BuildResult:
        try:
            raw = json.loads(text, object_pairs_hook=_unique_pairs)
        except json.JSONDecodeError as exc:
            raise ParseError(
                f"Invalid JSON: {exc.msg} at line {exc.lineno} column {exc.colno}",
                expected="a JSON document",
            ) from exc
        return cls.build(raw, rgb_scale=rgb_scale)

    @classmethod
    def load(cls, path: str | Path | None = None, *, rgb_scale: str | None = None) -> BuildResult:
        """Build from a UTF-8 JSON file, defaulting to COLOR_SAMPLES_PATH."""
        resolved = Path(path) if path is not None else cfg.dataset_path
        if resolved is None:
            raise ValueError("No dataset path given and COLOR_SAMPLES_PATH is not set")
        logger.info("Loading color samples from %s", resolved)
        return cls.from_json(resolved.read_text(encoding="utf-8"), rgb_scale=rgb_scale)

    # ── Queries ──────────────────────────────────────────────────────

    def lookup(self, delta_e: float) -> DeltaEGroup:
        """Exact-match lookup; no nearest-value fallback."""
        try:
            return self._groups[delta_e]
        except KeyError:
            raise NotFound(delta_e, self._keys) from None

    def available_delta_e_values(self) -> tuple[float, ...]:
        return self._keys

    def groups(self) -> tuple[DeltaEGroup, ...]:
        return tuple(self._groups.values())

    def sample_random(self, delta_e: float, rng: RandomSource) -> ColorSample:
        """Pick a hue bucket uniformly, then a sample uniformly within it.

        Every bucket gets equal weight regardless of how many samples it
        holds. The caller owns rng, so a seeded random.Random gives
        reproducible draws.
        """
        group = self.lookup(delta_e)
        if not group.buckets:
            raise EmptyGroup(delta_e)
        bucket = group.buckets[rng.randrange(len(group.buckets))]
        if not bucket.samples:
            raise EmptyGroup(delta_e, bucket.hue)
        return bucket.samples[rng.randrange(len(bucket.samples))]

    def sample_many(self, delta_e: float, rng: RandomSource, count: int) -> list[ColorSample]:
        """Independent sample_random draws, e.g. one per target material."""
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        self.lookup(delta_e)
        return [self.sample_random(delta_e, rng) for _ in range(count)]

    def __contains__(self, delta_e: object) -> bool:
        return delta_e in self._groups

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[float]:
        return iter(self._keys)

    def __repr__(self) -> str:
        return (
            f"ColorSampleDatabase(groups={self.summary.groups_loaded}, "
            f"buckets={self.summary.buckets_loaded}, samples={self.summary.samples_loaded})"
        )
