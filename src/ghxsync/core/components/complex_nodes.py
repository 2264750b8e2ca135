# どこで: `src/ghxsync/core/components/complex_nodes.py`。
# 何を: 複素数ツールキットの各演算を、ピン名対応付き NodeDescriptor としてレジストリへ登録する。
# なぜ: グラフ評価側が GUID/別名だけで Complex カテゴリのノードを評価できるようにするため。

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from ghxsync.core.complex import ONE, ZERO, ComplexNumber, ComplexToolkit, default_toolkit, ensure_complex
from ghxsync.core.node_registry import NodeDescriptor, PinMap

Register = Callable[[Sequence[str], NodeDescriptor], None]
UnaryOp = Callable[[ComplexNumber], ComplexNumber]
BinaryOp = Callable[[ComplexNumber, ComplexNumber], ComplexNumber]

NODE_TYPE = "complex"

UNARY_PIN_MAP = PinMap(
    inputs={"x": "value", "X": "value", "Input": "value", "input": "value", "Value": "value", "value": "value"},
    outputs={"y": "result", "Y": "result", "Output": "result", "output": "result", "Result": "result", "result": "result"},
)


def _binary_pin_map(first: str, second: str) -> PinMap:
    return PinMap(
        inputs={
            "A": first,
            "a": first,
            "First number": first,
            "first number": first,
            "B": second,
            "b": second,
            "Second number": second,
            "second number": second,
        },
        outputs={"R": "result", "r": "result", "Result": "result", "result": "result"},
    )


def _require_register(register: Any) -> Register:
    if not callable(register):
        raise TypeError("complex コンポーネントの登録には callable な register が必要です")
    return register


def _unary(op: UnaryOp) -> NodeDescriptor:
    def evaluate(inputs: Mapping[str, Any]) -> dict[str, Any]:
        value = ensure_complex(inputs.get("value"))
        return {"result": op(value)}

    return NodeDescriptor(type=NODE_TYPE, pin_map=UNARY_PIN_MAP, evaluate=evaluate)


def _binary(
    op: BinaryOp,
    *,
    first: str,
    second: str,
    first_fallback: ComplexNumber = ZERO,
    second_fallback: ComplexNumber = ZERO,
) -> NodeDescriptor:
    def evaluate(inputs: Mapping[str, Any]) -> dict[str, Any]:
        a = ensure_complex(inputs.get(first), first_fallback)
        b = ensure_complex(inputs.get(second), second_fallback)
        return {"result": op(a, b)}

    return NodeDescriptor(type=NODE_TYPE, pin_map=_binary_pin_map(first, second), evaluate=evaluate)


def register_complex_polynomials_components(
    register: Register,
    *,
    toolkit: ComplexToolkit = default_toolkit,
) -> None:
    """Square / Power / Exponential / Square Root / Logarithm を登録する。"""

    register = _require_register(register)
    tk = toolkit

    register(["{0b0f1203-2ea8-4250-a45a-cca7ad2e5b76}", "square", "sqr"], _unary(tk.square))
    register(
        ["{2d6cb24f-da89-4fab-be0f-e5d439e0217a}", "power", "pow"],
        _binary(tk.pow, first="base", second="exponent", second_fallback=ONE),
    )
    register(["{582f96c6-ed0c-4710-9b5e-a05addba9f42}", "exponential", "exp"], _unary(tk.exp))
    register(["{5a22dc1a-907c-4e2f-b8da-0e496c4e25bb}", "square root", "sqrt"], _unary(tk.sqrt))
    register(["{bc4a27fc-cbb9-4802-bd4a-17ab33ad1826}", "logarithm", "ln"], _unary(tk.log))


def register_complex_trig_components(
    register: Register,
    *,
    toolkit: ComplexToolkit = default_toolkit,
) -> None:
    """Sine / Cosine / Tangent / Secant / Cosecant / CoTangent と逆三角関数を登録する。"""

    register = _require_register(register)
    tk = toolkit

    register(["{c53932eb-7c8c-4825-ae98-e36bba97232d}", "sine", "sin"], _unary(tk.sin))
    register(["{7874f26c-6f76-4da8-b527-2d567184b2bd}", "cosine", "cos"], _unary(tk.cos))
    register(["{0bc93049-e1a7-44b5-8068-c7ddc85a9f46}", "tangent", "tan"], _unary(tk.tan))
    register(["{d879e74c-6fe3-4cbf-b3fa-60a7c48b73e7}", "secant", "sec"], _unary(tk.sec))
    register(["{99197a17-d5c7-419b-acde-eca2737f3c58}", "cosecant", "cosec"], _unary(tk.cosec))
    register(["{39461433-ac44-4298-94a9-988f983e347c}", "cotangent", "cotan"], _unary(tk.cot))
    register(["{f18091e9-3264-4dd4-9ba6-32c77fca0ac0}", "arcsine", "asin"], _unary(tk.asin))
    register(["{8640c519-9bf6-4e9a-a108-75f9d89b2c58}", "arccosine", "acos"], _unary(tk.acos))
    register(["{4e8aad42-9111-470c-9acd-7ae365d8bba4}", "arctangent", "atan"], _unary(tk.atan))


def register_complex_operators_components(
    register: Register,
    *,
    toolkit: ComplexToolkit = default_toolkit,
) -> None:
    """Addition / Subtraction / Multiplication / Division を登録する。"""

    register = _require_register(register)
    tk = toolkit

    register(
        ["{58669268-a825-4688-8072-7d3508fcf91c}", "addition", "cadd"],
        _binary(tk.add, first="a", second="b"),
    )
    register(
        ["{babecca6-9813-4146-b150-cd72f743e47c}", "subtraction", "minus"],
        _binary(tk.subtract, first="a", second="b"),
    )
    register(
        ["{2f643ab6-b9a4-4923-b3da-f9d52b0cba14}", "multiplication", "multiply"],
        _binary(tk.multiply, first="a", second="b", second_fallback=ONE),
    )
    register(
        ["{cb4ec4a1-f48e-4685-b58c-72ed27b53681}", "division", "divide"],
        _binary(tk.divide, first="a", second="b", second_fallback=ONE),
    )


def register_complex_components(
    register: Register,
    *,
    toolkit: ComplexToolkit = default_toolkit,
) -> None:
    """Complex カテゴリの全ノードを登録する。"""

    register_complex_polynomials_components(register, toolkit=toolkit)
    register_complex_trig_components(register, toolkit=toolkit)
    register_complex_operators_components(register, toolkit=toolkit)


__all__ = [
    "NODE_TYPE",
    "UNARY_PIN_MAP",
    "register_complex_polynomials_components",
    "register_complex_trig_components",
    "register_complex_operators_components",
    "register_complex_components",
]
