"""Tests for the color sample pydantic models and error payloads."""
import pytest
from pydantic import ValidationError

from color_samples import EmptyGroup, NotFound, ParseError
from color_samples.models import ColorSample, DeltaEGroup, HueBucket


def _sample(r: float = 0.5) -> ColorSample:
    return ColorSample(rgb=(r, 0.5, 0.5), delta_e=1.0)


def test_channel_accessors():
    sample = ColorSample(rgb=(0.1, 0.2, 0.3), delta_e=2.0)
    assert (sample.r, sample.g, sample.b) == (0.1, 0.2, 0.3)
    assert sample.normalized() == (0.1, 0.2, 0.3)


def test_samples_are_hashable_and_frozen():
    sample = _sample()
    assert sample in {_sample()}
    with pytest.raises(ValidationError):
        sample.rgb = (0.0, 0.0, 0.0)


def test_rgb_must_be_a_triple():
    with pytest.raises(ValidationError):
        ColorSample(rgb=(0.1, 0.2), delta_e=1.0)


def test_bucket_must_not_be_empty():
    with pytest.raises(ValidationError):
        HueBucket(hue=40.0, samples=())


def test_group_must_not_be_empty():
    with pytest.raises(ValidationError):
        DeltaEGroup(delta_e=1.0, buckets=())


def test_group_rejects_duplicate_hues():
    bucket = HueBucket(hue=40.0, samples=(_sample(),))
    with pytest.raises(ValidationError, match="duplicate hue"):
        DeltaEGroup(delta_e=1.0, buckets=(bucket, bucket))


def test_group_bucket_lookup():
    low = HueBucket(hue=0.0, samples=(_sample(0.1),))
    high = HueBucket(hue=200.0, samples=(_sample(0.2), _sample(0.3)))
    group = DeltaEGroup(delta_e=1.0, buckets=(low, high))
    assert group.bucket(200.0) is high
    assert group.sample_count == 3
    with pytest.raises(NotFound) as exc_info:
        group.bucket(40.0)
    assert exc_info.value.what == "hue"
    assert exc_info.value.available == (0.0, 200.0)


def test_parse_error_message_includes_context():
    err = ParseError("bad key", path=("1.0", "x"), expected="a float")
    assert err.path == ("1.0", "x")
    assert str(err) == "bad key (at '1.0'/'x'); expected a float"


def test_not_found_message():
    err = NotFound(2.5, (1.0, 2.0))
    assert str(err) == "No deltaE key 2.5; available: [1.0, 2.0]"


def test_empty_group_message():
    assert str(EmptyGroup(1.0)) == "Nothing to sample for deltaE 1.0"
    assert str(EmptyGroup(1.0, 40.0)) == "Nothing to sample for deltaE 1.0, hue 40.0"
