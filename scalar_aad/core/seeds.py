# scalar_aad/core/seeds.py
"""
Leaf construction and one-call gradients of plain Python functions.

The gradient helpers record on the active tape, so a function may close over
Values built elsewhere (model parameters, constants). The nodes they create
are dropped by the tape as soon as the helper returns.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

from .engine import backward
from .var import Value


def value(data: Any, label: Optional[str] = None) -> Value:
    """
    Leaf constructor with the same coercion rules as Value.from_any.

    value(3.0, "x") -> Value(data=3.0000, grad=0.0000) labelled "x".
    An existing Value is returned unchanged.
    """
    from ..ops.arithmetic import as_value
    return as_value(data, label=label)


def primal(x: Any) -> Any:
    """Forward value of a Value; plain numbers pass through unchanged."""
    return x.data if isinstance(x, Value) else x


def _run_backward(y: Any):
    # a function that ignores its inputs still gets a (constant) output node
    if not isinstance(y, Value):
        y = value(y)
    backward(y)


def grad(f: Callable[[Value], Any], x0: Any) -> float:
    """
    df/dx at x0 for a scalar function of one Value.

    grad(lambda x: x * x * x, 2.0) -> 12.0
    """
    x = value(x0, "x")
    _run_backward(f(x))
    return x.grad


def grads(f: Callable[[Dict[str, Value]], Any], inputs: Dict[str, Any]) -> Dict[str, float]:
    """
    Partials of f with respect to every named input, from a single backward pass.

    Each input becomes a leaf labelled with its key; f receives them as a
    dict and the result keeps the key order of `inputs`.
    """
    leaves = {k: value(v, k) for k, v in inputs.items()}
    _run_backward(f(leaves))
    return {k: leaves[k].grad for k in inputs}


def grads_list(f: Callable[[List[Value]], Any], x0_list: Iterable[Any]) -> List[float]:
    """
    Positional variant of grads(): inputs x0, x1, ... in, partials out.

    grads_list(lambda xs: xs[0] * xs[0] + 3 * xs[1], [2.0, 4.0]) -> [4.0, 3.0]
    """
    xs = [value(v, f"x{i}") for i, v in enumerate(x0_list)]
    _run_backward(f(xs))
    return [x.grad for x in xs]
