"""Pydantic data models for the color sample database."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import NotFound

RGBScale = Literal["unit", "byte"]

# Upper bound of each RGB channel per declared convention.
RGB_MAX: dict[str, float] = {
    "unit": 1.0,
    "byte": 255.0,
}


class ColorSample(BaseModel):
    """One RGB color point belonging to a (deltaE, hue) partition."""
    model_config = ConfigDict(frozen=True)

    rgb: tuple[float, float, float]
    delta_e: float
    scale: RGBScale = "unit"
    hsv: tuple[float, float, float] | None = None   # diagnostics only
    lab: tuple[float, float, float] | None = None   # diagnostics only

    @property
    def r(self) -> float:
        return self.rgb[0]

    @property
    def g(self) -> float:
        return self.rgb[1]

    @property
    def b(self) -> float:
        return self.rgb[2]

    def normalized(self) -> tuple[float, float, float]:
        """RGB on the unit [0,1] scale regardless of the declared convention."""
        top = RGB_MAX[self.scale]
        return (self.rgb[0] / top, self.rgb[1] / top, self.rgb[2] / top)


class HueBucket(BaseModel):
    """Samples sharing a hue value within one deltaE group."""
    model_config = ConfigDict(frozen=True)

    hue: float
    samples: tuple[ColorSample, ...] = Field(min_length=1)

    def __len__(self) -> int:
        return len(self.samples)


class DeltaEGroup(BaseModel):
    """All hue buckets stored under one deltaE value."""
    model_config = ConfigDict(frozen=True)

    delta_e: float
    buckets: tuple[HueBucket, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _unique_hues(self) -> "DeltaEGroup":
        hues = [bucket.hue for bucket in self.buckets]
        if len(set(hues)) != len(hues):
            raise ValueError(f"duplicate hue keys in deltaE group {self.delta_e!r}")
        return self

    @property
    def hues(self) -> tuple[float, ...]:
        return tuple(bucket.hue for bucket in self.buckets)

    @property
    def sample_count(self) -> int:
        return sum(len(bucket) for bucket in self.buckets)

    def bucket(self, hue: float) -> HueBucket:
        for candidate in self.buckets:
            if candidate.hue == hue:
                return candidate
        raise NotFound(hue, self.hues, what="hue")


class RejectedSample(BaseModel):
    """A record dropped during build, with enough context to find it again."""
    model_config = ConfigDict(frozen=True)

    delta_e_key: str
    hue_key: str
    index: int
    reason: str


class BuildSummary(BaseModel):
    """Diagnostic counts produced by ColorSampleDatabase.build()."""
    model_config = ConfigDict(frozen=True)

    groups_loaded: int = 0
    buckets_loaded: int = 0
    samples_loaded: int = 0
    samples_rejected: int = 0
    rejections: tuple[RejectedSample, ...] = ()
