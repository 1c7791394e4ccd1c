# scalar_aad/ops/arithmetic.py
import numbers
from typing import Any, Callable, Optional, Sequence, Tuple

import numpy as np

from ..config import get_config
from ..core.node import OpTag
from ..core.tape import Tape, get_tape
from ..core.var import Value
from ..errors import DomainError, StaleNodeError, TapeMismatchError, UnsupportedInputError


def as_value(x: Any, tape: Optional[Tape] = None, label: Optional[str] = None) -> Value:
    """
    Ensure x is a Value; otherwise wrap it as a fresh leaf.

    Accepted inputs: Value (returned as is), bool, real numbers (including
    numpy scalars), numeric strings, and sequences/arrays holding exactly one
    of those. Leaves go on `tape`, or on the active tape when not given, and
    carry `label`; an existing Value keeps its own label.
    """
    if isinstance(x, Value):
        return x
    if x is None:
        raise UnsupportedInputError("Cannot create Value from None")
    if isinstance(x, (bool, np.bool_)):
        return _leaf(1.0 if x else 0.0, tape, label)
    if isinstance(x, numbers.Real):
        return _leaf(x, tape, label)
    if isinstance(x, str):
        return _leaf(_parse_number(x), tape, label)
    if isinstance(x, (list, tuple, np.ndarray)):
        items = np.ravel(x) if isinstance(x, np.ndarray) else x
        if len(items) != 1:
            raise UnsupportedInputError("Arrays must contain exactly one numeric value")
        return as_value(items[0], tape, label)
    raise UnsupportedInputError(f"Cannot convert {type(x).__name__} to Value")


def _parse_number(s: str) -> float:
    text = s.strip()
    # float() also accepts digit separators, which are not number literals here
    if not text or "_" in text:
        raise UnsupportedInputError(f"Invalid number format: {s!r}")
    try:
        return float(text)
    except ValueError:
        raise UnsupportedInputError(f"Invalid number format: {s!r}") from None


def _leaf(x, tape: Optional[Tape], label: Optional[str] = None) -> Value:
    if tape is None:
        return Value(x, label)
    return Value._from_op(x, OpTag.LEAF, (), label, tape)


def _coerce(*xs) -> Tuple[Tape, Tuple[Value, ...]]:
    """
    Coerce builder operands onto one tape.

    The tape of the first Value operand wins; plain numbers become leaves on
    that tape. Operands from another tape, or dropped from their tape, are
    rejected.
    """
    tape = next((x.tape for x in xs if isinstance(x, Value)), None)
    if tape is None:
        tape = get_tape()
    vals = tuple(as_value(x, tape) for x in xs)
    for v in vals:
        if v.tape is not tape:
            raise TapeMismatchError("operands were recorded on different tapes")
        if not tape.holds(v):
            raise StaleNodeError(f"node {v.id} was dropped from its tape; rebuild the expression")
    return tape, vals


def _record(data, tag: OpTag, operands: Sequence[Value], label, tape: Tape) -> Value:
    return Value._from_op(data, tag, operands, label, tape)


def _binary(x, y, f: Callable[[float, float], float], tag: OpTag, label=None) -> Value:
    """
    Generic binary primitive:
      - coerces both operands onto a shared tape
      - computes out.data = f(x.data, y.data), where f raises on domain errors
      - records the output with children (x, y)
    """
    tape, (x, y) = _coerce(x, y)
    with np.errstate(all="ignore"):
        out_val = f(x.data, y.data)
    return _record(out_val, tag, (x, y), label, tape)


def _unary(x, f: Callable[[float], float], tag: OpTag, label=None) -> Value:
    tape, (x,) = _coerce(x)
    with np.errstate(all="ignore"):
        out_val = f(x.data)
    return _record(out_val, tag, (x,), label, tape)


def add(x, y, label=None): return _binary(x, y, lambda a, b: a + b, OpTag.ADD, label)
def sub(x, y, label=None): return _binary(x, y, lambda a, b: a - b, OpTag.SUB, label)
def mul(x, y, label=None): return _binary(x, y, lambda a, b: a * b, OpTag.MUL, label)


def div(x, y, label=None):
    """x / y; fails when |y| is below the configured epsilon."""
    return _binary(x, y, _div_forward, OpTag.DIV, label)


def _div_forward(a: float, b: float) -> float:
    if abs(b) < get_config().div_epsilon:
        raise DomainError("Division by near-zero value", "div")
    return a / b


def neg(x, label=None):
    return _unary(x, lambda a: -a, OpTag.NEG, label)


def pow(x, y, label=None):
    """
    Power x ** y with an explicit domain policy:

      x == 0, y == 0    -> DomainError
      x == 0, y <  0    -> DomainError
      x == 0, y >  0    -> 0.0 (both local partials are taken as 0)
      x <  0, y not int -> DomainError (result would be complex)
      non-finite result -> DomainError (overflow)

    Local partials (applied by the engine):
      d/dx = y * x^(y-1)
      d/dy = x^y * log(|x|)   (|x| extends the rule to negative integer bases)
    """
    return _binary(x, y, _pow_forward, OpTag.POW, label)


def _pow_forward(a: float, b: float) -> float:
    check_pow_domain(a, b)
    if a == 0.0:
        return 0.0
    out = np.power(a, b)
    if not np.isfinite(out):
        raise DomainError("Power operation overflow", "pow")
    return float(out)


def check_pow_domain(a: float, b: float):
    if a == 0.0:
        if b == 0.0:
            raise DomainError("Cannot raise 0 to zero or negative power", "pow")
        if b < 0.0:
            raise DomainError("Division by zero in power operation", "pow")
    elif a < 0.0 and not float(b).is_integer():
        raise DomainError("Negative numbers cannot be raised to non-integer powers", "pow")
