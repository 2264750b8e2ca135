from __future__ import annotations

import math

import numpy as np
import pytest

from ghxsync.core.complex import ONE, ZERO, create_complex, ensure_complex, parse_complex_string


def _parts(value) -> tuple[float, float]:
    return (value.real, value.imag)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("3", (3.0, 0.0)),
        ("2i", (0.0, 2.0)),
        ("i", (0.0, 1.0)),
        ("+i", (0.0, 1.0)),
        ("-i", (0.0, -1.0)),
        ("3-4i", (3.0, -4.0)),
        (" 3 + 4 i ", (3.0, 4.0)),
        ("-2.5+i", (-2.5, 1.0)),
        ("1-i", (1.0, -1.0)),
        ("1e-5+2i", (1e-5, 2.0)),
        ("-3i", (0.0, -3.0)),
    ],
)
def test_parse_complex_string_accepts_common_forms(text, expected):
    parsed = parse_complex_string(text)

    assert parsed is not None
    assert _parts(parsed) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["abc", "", "   ", "3i4", "2e-3i", "inf", "1+2j", None, 5])
def test_parse_complex_string_rejects_malformed_input(text):
    assert parse_complex_string(text) is None


def test_create_complex_fills_polar_form():
    value = create_complex(3.0, 4.0)

    assert value.magnitude == pytest.approx(5.0)
    assert value.argument == pytest.approx(math.atan2(4.0, 3.0))
    assert complex(value) == complex(3.0, 4.0)
    assert value.as_dict() == {
        "real": 3.0,
        "imag": 4.0,
        "magnitude": pytest.approx(5.0),
        "argument": pytest.approx(math.atan2(4.0, 3.0)),
    }

    broken = create_complex(math.inf, 0.0)
    assert math.isnan(broken.magnitude)
    assert math.isnan(broken.argument)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (2, (2.0, 0.0)),
        (2.5, (2.5, 0.0)),
        (np.float64(1.5), (1.5, 0.0)),
        (complex(1, -2), (1.0, -2.0)),
        (np.complex128(3 + 1j), (3.0, 1.0)),
        ("3-4i", (3.0, -4.0)),
        ([1, 2], (1.0, 2.0)),
        ((4, 5, 6), (4.0, 5.0)),
        ([7], (7.0, 0.0)),
        (np.array([1.0, -1.0]), (1.0, -1.0)),
        ({"real": 1, "imag": 2}, (1.0, 2.0)),
        ({"Re": 1}, (0.0, 0.0)),
        ({"x": 3}, (3.0, 0.0)),
        ({"b": 4}, (0.0, 4.0)),
        ({"value": "2i"}, (0.0, 2.0)),
        ({"values": [5, 6]}, (5.0, 6.0)),
        ({"magnitude": 2, "angle": math.pi / 2}, (0.0, 2.0)),
        ({"r": 3}, (3.0, 0.0)),
    ],
)
def test_ensure_complex_coerces_supported_shapes(value, expected):
    assert _parts(ensure_complex(value)) == pytest.approx(expected, abs=1e-12)


def test_ensure_complex_returns_copy_of_complex_number():
    original = create_complex(1.0, 2.0)

    assert ensure_complex(original) == original


@pytest.mark.parametrize("value", [None, True, False, "abc", [], {}, object(), math.nan, math.inf])
def test_ensure_complex_uses_fallback_for_unusable_input(value):
    assert ensure_complex(value) == ZERO
    assert ensure_complex(value, ONE) == ONE


def test_ensure_complex_rectangular_uses_fallback_for_missing_or_bad_parts():
    fallback = create_complex(7.0, 8.0)

    assert _parts(ensure_complex({"real": 1}, fallback)) == (1.0, 8.0)
    assert _parts(ensure_complex({"imag": "x"}, fallback)) == (7.0, 8.0)
    assert _parts(ensure_complex({"real": None, "imag": 2}, fallback)) == (7.0, 2.0)


def test_ensure_complex_non_finite_fallback_is_sanitised():
    fallback = create_complex(math.nan, math.inf)

    assert ensure_complex(None, fallback) == ZERO
    assert _parts(ensure_complex(None, {"real": 2, "imag": 3})) == (2.0, 3.0)
    assert _parts(ensure_complex(None, complex(4, 5))) == (4.0, 5.0)
