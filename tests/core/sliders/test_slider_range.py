from __future__ import annotations

import math
from types import SimpleNamespace

import pytest

from ghxsync.core.sliders.range import (
    DEFAULT_RANGE,
    RangeDefaults,
    clamp,
    resolve_bounds,
    resolve_range,
    to_finite,
)


def test_resolve_bounds_without_any_input_uses_defaults():
    r = resolve_bounds()

    assert (r.min, r.max) == (0.0, 10.0)
    assert r.span == 10.0
    assert r.step == pytest.approx(0.1)
    assert r.step_adjusted is True
    assert r.value == 0.0
    assert r.value_provided is False
    assert r.value_clamped is False
    assert r.has_min is False and r.has_max is False
    assert r.has_range is True


def test_resolve_bounds_keeps_complete_definition():
    r = resolve_bounds(2, 8, 0.5, 4)

    assert (r.min, r.max, r.step, r.value) == (2.0, 8.0, 0.5, 4.0)
    assert r.step_adjusted is False
    assert r.value_clamped is False
    assert r.has_step is True


@pytest.mark.parametrize(
    ("raw_min", "raw_max", "expected"),
    [
        (None, 5, (0.0, 5.0)),
        (None, -5, (-5.0, -5.0)),
        (3, None, (3.0, 10.0)),
        (20, None, (20.0, 20.0)),
        (10, 0, (0.0, 10.0)),
    ],
)
def test_resolve_bounds_fills_missing_side_and_orders(raw_min, raw_max, expected):
    r = resolve_bounds(raw_min, raw_max)

    assert (r.min, r.max) == expected
    assert r.max >= r.min


def test_resolve_bounds_zero_span_uses_default_step():
    r = resolve_bounds(5, 5, None, 5)

    assert r.span == 0.0
    assert r.has_range is False
    assert r.step == DEFAULT_RANGE.step
    assert r.step_adjusted is True
    assert r.value == 5.0


@pytest.mark.parametrize("raw_step", [0, -1, "abc", math.nan, math.inf])
def test_resolve_bounds_recomputes_non_positive_or_invalid_step(raw_step):
    r = resolve_bounds(0, 50, raw_step, 10)

    assert r.step == pytest.approx(0.5)
    assert r.step_adjusted is True


def test_resolve_bounds_clamps_value_outside_range():
    r = resolve_bounds(0, 10, 1, 15)

    assert r.value == 10.0
    assert r.value_clamped is True
    assert r.raw_value == 15.0


def test_resolve_bounds_accepts_numeric_strings():
    r = resolve_bounds(" 1 ", "9", "0.5", "7")

    assert (r.min, r.max, r.step, r.value) == (1.0, 9.0, 0.5, 7.0)


@pytest.mark.parametrize("raw_value", ["abc", "", None, True, math.nan, [1]])
def test_resolve_bounds_invalid_value_falls_back_to_min(raw_value):
    r = resolve_bounds(2, 8, 1, raw_value)

    assert r.value == 2.0
    assert r.value_provided is False


def test_resolve_bounds_respects_custom_defaults():
    defaults = RangeDefaults(min=-1.0, max=1.0, step=0.25)
    r = resolve_bounds(None, None, None, None, defaults=defaults)

    assert (r.min, r.max) == (-1.0, 1.0)
    assert r.step == pytest.approx(0.02)

    flat = resolve_bounds(0.5, 0.5, None, None, defaults=defaults)
    assert flat.step == 0.25


@pytest.mark.parametrize(
    "kwargs",
    [
        {"step": 0},
        {"step": -0.5},
        {"min": 1, "max": 1, "step": 0},
        {"min": 5.0, "max": 1.0},
        {"min": math.nan},
        {"max": math.inf},
        {"step": math.nan},
    ],
)
def test_range_defaults_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        RangeDefaults(**kwargs)


@pytest.mark.parametrize("kwargs", [{"min": "0"}, {"step": None}, {"max": True}])
def test_range_defaults_rejects_non_numeric_values(kwargs):
    with pytest.raises(TypeError):
        RangeDefaults(**kwargs)


def test_range_defaults_allow_equal_bounds_with_positive_step():
    defaults = RangeDefaults(min=1, max=1, step=0.5)
    r = resolve_bounds(defaults=defaults)

    assert (r.min, r.max, r.span) == (1.0, 1.0, 0.0)
    assert r.step == 0.5


def test_overflowing_span_is_treated_as_no_range_and_keeps_value():
    r = resolve_bounds(-1e308, 1e308, None, 3.0)

    assert (r.min, r.max) == (-1e308, 1e308)
    assert r.span == 0.0
    assert r.has_range is False
    assert r.step == DEFAULT_RANGE.step
    assert r.value == 3.0
    assert r.value_clamped is False


def test_resolve_range_reads_mapping_and_attributes():
    from_mapping = resolve_range({"min": 1, "max": 3, "step": 0.5, "value": 2})
    from_object = resolve_range(SimpleNamespace(min=1, max=3, step=0.5, value=2))

    assert from_mapping == from_object


def test_resolve_range_none_returns_default_range():
    r = resolve_range(None)

    assert (r.min, r.max) == (0.0, 10.0)
    assert r.value == 0.0


def test_to_finite_and_clamp():
    assert to_finite("2.5") == 2.5
    assert to_finite(False) is None
    assert to_finite(math.inf) is None
    assert to_finite(10**400) is None

    assert clamp(5.0, 0.0, 1.0) == 1.0
    assert clamp(-5.0, 0.0, 1.0) == 0.0
    assert clamp(math.nan, 0.0, 1.0) == 0.0


_MALFORMED = [None, "abc", "", -3, 0, 7, 12.5, "4", math.nan, math.inf, True]


@pytest.mark.parametrize("raw_min", _MALFORMED)
@pytest.mark.parametrize("raw_max", _MALFORMED)
@pytest.mark.parametrize("raw_value", [None, "abc", -100, 5, 100])
def test_resolve_bounds_is_total(raw_min, raw_max, raw_value):
    r = resolve_bounds(raw_min, raw_max, None, raw_value)

    assert r.max >= r.min
    assert r.step > 0
    assert r.min <= r.value <= r.max
    if r.span == 0:
        assert r.value == r.min
