# どこで: `src/ghxsync/core/complex/ops.py`。
# 何を: ComplexNumber の四則演算・初等関数・三角関数と、epsilon を束ねる ComplexToolkit を提供する。
# なぜ: sqrt/log の主値を全関数で共有し、実軸上で math の結果と一致させるため。

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .number import EPSILON, ComplexNumber, create_complex

if TYPE_CHECKING:
    from ghxsync.core.runtime_config import RuntimeConfig

_NAN = create_complex(math.nan, math.nan)


# math の関数は overflow/inf 入力で例外を投げるため、ここで inf/NaN に寄せる。
def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _cosh(x: float) -> float:
    try:
        return math.cosh(x)
    except OverflowError:
        return math.inf


def _sinh(x: float) -> float:
    try:
        return math.sinh(x)
    except OverflowError:
        return math.copysign(math.inf, x)


def _sin(x: float) -> float:
    return math.sin(x) if not math.isinf(x) else math.nan


def _cos(x: float) -> float:
    return math.cos(x) if not math.isinf(x) else math.nan


def is_approximately_zero(value: float, *, epsilon: float = EPSILON) -> bool:
    return abs(value) <= epsilon


def is_zero(value: ComplexNumber, *, epsilon: float = EPSILON) -> bool:
    """実部・虚部がともに epsilon 以内なら True。"""

    return is_approximately_zero(value.real, epsilon=epsilon) and is_approximately_zero(
        value.imag, epsilon=epsilon
    )


def add(a: ComplexNumber, b: ComplexNumber) -> ComplexNumber:
    return create_complex(a.real + b.real, a.imag + b.imag)


def subtract(a: ComplexNumber, b: ComplexNumber) -> ComplexNumber:
    return create_complex(a.real - b.real, a.imag - b.imag)


def multiply(a: ComplexNumber, b: ComplexNumber) -> ComplexNumber:
    return create_complex(
        a.real * b.real - a.imag * b.imag,
        a.real * b.imag + a.imag * b.real,
    )


def divide(a: ComplexNumber, b: ComplexNumber, *, epsilon: float = EPSILON) -> ComplexNumber:
    """a / b を返す。b がゼロ（epsilon 判定）なら成分 NaN を返す。

    Notes
    -----
    |b|^2 は成分が 1e-154 程度で 0 へアンダーフローするため、
    大きい側の成分で割る Smith の方法で求める（分母は常に非ゼロ）。
    """

    if is_zero(b, epsilon=epsilon) or math.isnan(b.real) or math.isnan(b.imag):
        return _NAN
    if abs(b.real) >= abs(b.imag):
        ratio = b.imag / b.real
        denominator = b.real + b.imag * ratio
        return create_complex(
            (a.real + a.imag * ratio) / denominator,
            (a.imag - a.real * ratio) / denominator,
        )
    ratio = b.real / b.imag
    denominator = b.real * ratio + b.imag
    return create_complex(
        (a.real * ratio + a.imag) / denominator,
        (a.imag * ratio - a.real) / denominator,
    )


def conjugate(value: ComplexNumber) -> ComplexNumber:
    return create_complex(value.real, -value.imag)


def square(value: ComplexNumber) -> ComplexNumber:
    return create_complex(
        value.real * value.real - value.imag * value.imag,
        2.0 * value.real * value.imag,
    )


def sqrt(value: ComplexNumber) -> ComplexNumber:
    """主値の平方根（極形式で偏角を半分にする）。"""

    modulus = math.hypot(value.real, value.imag)
    if modulus == 0:
        return create_complex(0.0, 0.0)
    root_modulus = math.sqrt(modulus)
    angle = math.atan2(value.imag, value.real) / 2.0
    return create_complex(root_modulus * _cos(angle), root_modulus * _sin(angle))


def exp(value: ComplexNumber) -> ComplexNumber:
    exp_real = _exp(value.real)
    return create_complex(exp_real * _cos(value.imag), exp_real * _sin(value.imag))


def log(value: ComplexNumber) -> ComplexNumber:
    """主値の自然対数。log(0) は -inf + 0i。"""

    modulus = math.hypot(value.real, value.imag)
    if modulus == 0:
        return create_complex(-math.inf, 0.0)
    return create_complex(math.log(modulus), math.atan2(value.imag, value.real))


def pow(base: ComplexNumber, exponent: ComplexNumber, *, epsilon: float = EPSILON) -> ComplexNumber:
    """base ** exponent を exp(exponent * log(base)) で求める。

    Notes
    -----
    base がゼロのとき:
    - 0^0 = 1
    - 指数の虚部が非ゼロ → 0
    - 指数の実部が正 → 0
    - 指数の実部がほぼゼロ → 1
    - 指数の実部が負 → +inf
    """

    if is_zero(base, epsilon=epsilon):
        if is_zero(exponent, epsilon=epsilon):
            return create_complex(1.0, 0.0)
        if not is_approximately_zero(exponent.imag, epsilon=epsilon):
            return create_complex(0.0, 0.0)
        if exponent.real > 0:
            return create_complex(0.0, 0.0)
        if is_approximately_zero(exponent.real, epsilon=epsilon):
            return create_complex(1.0, 0.0)
        return create_complex(math.inf, 0.0)

    modulus = math.hypot(base.real, base.imag)
    angle = math.atan2(base.imag, base.real)
    log_modulus = math.log(modulus)

    result_modulus = _exp(exponent.real * log_modulus - exponent.imag * angle)
    result_angle = exponent.imag * log_modulus + exponent.real * angle
    return create_complex(
        result_modulus * _cos(result_angle),
        result_modulus * _sin(result_angle),
    )


def sin(value: ComplexNumber) -> ComplexNumber:
    x, y = value.real, value.imag
    return create_complex(_sin(x) * _cosh(y), _cos(x) * _sinh(y))


def cos(value: ComplexNumber) -> ComplexNumber:
    x, y = value.real, value.imag
    return create_complex(_cos(x) * _cosh(y), -_sin(x) * _sinh(y))


def tan(value: ComplexNumber, *, epsilon: float = EPSILON) -> ComplexNumber:
    return divide(sin(value), cos(value), epsilon=epsilon)


_ONE = create_complex(1.0, 0.0)
_I = create_complex(0.0, 1.0)
_MINUS_I = create_complex(0.0, -1.0)
_HALF_I = create_complex(0.0, 0.5)


def sec(value: ComplexNumber, *, epsilon: float = EPSILON) -> ComplexNumber:
    return divide(_ONE, cos(value), epsilon=epsilon)


def cosec(value: ComplexNumber, *, epsilon: float = EPSILON) -> ComplexNumber:
    return divide(_ONE, sin(value), epsilon=epsilon)


def cot(value: ComplexNumber, *, epsilon: float = EPSILON) -> ComplexNumber:
    return divide(_ONE, tan(value, epsilon=epsilon), epsilon=epsilon)


def asin(value: ComplexNumber) -> ComplexNumber:
    """asin(z) = -i * log(i*z + sqrt(1 - z^2))。"""

    root = sqrt(subtract(_ONE, square(value)))
    return multiply(_MINUS_I, log(add(multiply(_I, value), root)))


def acos(value: ComplexNumber) -> ComplexNumber:
    """acos(z) = -i * log(z + i*sqrt(1 - z^2))。"""

    root = sqrt(subtract(_ONE, square(value)))
    return multiply(_MINUS_I, log(add(value, multiply(_I, root))))


def atan(value: ComplexNumber) -> ComplexNumber:
    """atan(z) = (i/2) * (log(1 - i*z) - log(1 + i*z))。"""

    iz = multiply(_I, value)
    return multiply(_HALF_I, subtract(log(subtract(_ONE, iz)), log(add(_ONE, iz))))


@dataclass(frozen=True, slots=True)
class ComplexToolkit:
    """epsilon を束ねた複素数演算の窓口。

    ゼロ判定を使う演算（divide/pow/tan/sec/cosec/cot）は構築時の epsilon を使う。
    """

    epsilon: float = EPSILON

    @classmethod
    def from_config(cls, config: RuntimeConfig) -> ComplexToolkit:
        """RuntimeConfig の complex.epsilon を使うツールキットを作る。"""

        return cls(epsilon=config.complex_epsilon)

    def __post_init__(self) -> None:
        eps = self.epsilon
        if isinstance(eps, bool) or not isinstance(eps, (int, float)):
            raise TypeError(f"epsilon は数値である必要があります: got={eps!r}")
        if not math.isfinite(eps) or eps < 0:
            raise ValueError(f"epsilon は有限の非負値である必要があります: got={eps!r}")

    def is_zero(self, value: ComplexNumber) -> bool:
        return is_zero(value, epsilon=self.epsilon)

    def add(self, a: ComplexNumber, b: ComplexNumber) -> ComplexNumber:
        return add(a, b)

    def subtract(self, a: ComplexNumber, b: ComplexNumber) -> ComplexNumber:
        return subtract(a, b)

    def multiply(self, a: ComplexNumber, b: ComplexNumber) -> ComplexNumber:
        return multiply(a, b)

    def divide(self, a: ComplexNumber, b: ComplexNumber) -> ComplexNumber:
        return divide(a, b, epsilon=self.epsilon)

    def conjugate(self, value: ComplexNumber) -> ComplexNumber:
        return conjugate(value)

    def square(self, value: ComplexNumber) -> ComplexNumber:
        return square(value)

    def sqrt(self, value: ComplexNumber) -> ComplexNumber:
        return sqrt(value)

    def exp(self, value: ComplexNumber) -> ComplexNumber:
        return exp(value)

    def log(self, value: ComplexNumber) -> ComplexNumber:
        return log(value)

    def pow(self, base: ComplexNumber, exponent: ComplexNumber) -> ComplexNumber:
        return pow(base, exponent, epsilon=self.epsilon)

    def sin(self, value: ComplexNumber) -> ComplexNumber:
        return sin(value)

    def cos(self, value: ComplexNumber) -> ComplexNumber:
        return cos(value)

    def tan(self, value: ComplexNumber) -> ComplexNumber:
        return tan(value, epsilon=self.epsilon)

    def sec(self, value: ComplexNumber) -> ComplexNumber:
        return sec(value, epsilon=self.epsilon)

    def cosec(self, value: ComplexNumber) -> ComplexNumber:
        return cosec(value, epsilon=self.epsilon)

    def cot(self, value: ComplexNumber) -> ComplexNumber:
        return cot(value, epsilon=self.epsilon)

    def asin(self, value: ComplexNumber) -> ComplexNumber:
        return asin(value)

    def acos(self, value: ComplexNumber) -> ComplexNumber:
        return acos(value)

    def atan(self, value: ComplexNumber) -> ComplexNumber:
        return atan(value)


default_toolkit = ComplexToolkit()
"""既定 epsilon（1e-12）のツールキット。"""


__all__ = [
    "is_approximately_zero",
    "is_zero",
    "add",
    "subtract",
    "multiply",
    "divide",
    "conjugate",
    "square",
    "sqrt",
    "exp",
    "log",
    "pow",
    "sin",
    "cos",
    "tan",
    "sec",
    "cosec",
    "cot",
    "asin",
    "acos",
    "atan",
    "ComplexToolkit",
    "default_toolkit",
]
