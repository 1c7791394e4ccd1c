# scalar_aad/core/var.py
from __future__ import annotations

from typing import Any, Dict, Optional, Sequence, Tuple

from ..errors import StaleNodeError
from .node import OpTag, check_finite
from .tape import Tape, get_tape


class Value:
    """
    Scalar node of the computation graph for reverse-mode AD.

    Attributes
    ----------
    id : int
        Id issued by the recording tape at construction, never reused.
    data : float
        Forward (primal) value. Assignments are checked for finiteness.
    grad : float
        Gradient accumulator, 0.0 at construction. Assignments are checked
        the same way as `data`.
    operation : OpTag
        Which builder produced this node (`OpTag.LEAF` for user values).
    children : tuple[Value, ...]
        Operands in the order the builder received them. May contain the
        same node twice. Raises StaleNodeError once the node was truncated
        off its tape.
    label : str
        Optional display name, only used when rendering the graph.
    higher_order_grads : dict[int, float]
        Cache filled by `backward(order)` for order > 1.
    """

    __slots__ = ("id", "_data", "_grad", "_op", "_operands", "_operand_ids", "_tape",
                 "_label", "higher_order_grads", "__weakref__")

    def __init__(self, data: Any, label: Optional[str] = None):
        self._init(data, label, OpTag.LEAF, (), get_tape())

    def _init(self, data, label, op: OpTag, operands: Tuple[Value, ...], tape: Tape):
        self._data = check_finite(data, "data")
        self._grad = 0.0
        self._op = op
        # consumers keep their operands alive; the tape only refers to nodes weakly
        self._operands = operands
        self._operand_ids = tuple(p.id for p in operands)
        self._label = label or ""
        self.higher_order_grads: Dict[int, float] = {}
        self._tape = tape
        self.id = tape.push(self)

    @classmethod
    def _from_op(cls, data: float, op: OpTag, operands: Sequence[Value],
                 label: Optional[str], tape: Tape) -> Value:
        """Record the output of a builder on `tape`."""
        out = cls.__new__(cls)
        out._init(data, label, op, tuple(operands), tape)
        return out

    @classmethod
    def from_any(cls, x: Any) -> Value:
        """Coerce numbers, numeric strings, booleans and 1-element sequences."""
        from ..ops.arithmetic import as_value
        return as_value(x)

    # ------------------------------------------------------------------ state

    @property
    def data(self) -> float:
        return self._data

    @data.setter
    def data(self, val):
        self._data = check_finite(val, "data")

    @property
    def grad(self) -> float:
        return self._grad

    @grad.setter
    def grad(self, val):
        self._grad = check_finite(val, "grad")

    @property
    def operation(self) -> OpTag:
        return self._op

    @property
    def label(self) -> str:
        return self._label

    @property
    def tape(self) -> Tape:
        return self._tape

    @property
    def is_leaf(self) -> bool:
        return self._op is OpTag.LEAF

    @property
    def operand_ids(self) -> Tuple[int, ...]:
        return self._operand_ids

    @property
    def children(self) -> Tuple[Value, ...]:
        if self._operands and not self._tape.holds(self):
            raise StaleNodeError(
                f"node {self.id} was dropped from its tape; rebuild the expression"
            )
        return self._operands

    def prev(self) -> Tuple[Value, ...]:
        """Distinct operands, first occurrence order."""
        seen = set()
        out = []
        for child in self.children:
            if child.id not in seen:
                seen.add(child.id)
                out.append(child)
        return tuple(out)

    def __repr__(self):
        return f"Value(data={self._data:.4f}, grad={self._grad:.4f})"

    def __float__(self):
        return self._data

    # ------------------------------------------------------------- gradients

    def backward(self, order: int = 1):
        """Seed this node with 1.0 and propagate gradients to every ancestor."""
        from .engine import backward
        backward(self, order)

    def reset_grad(self):
        from .engine import reset_grad
        reset_grad(self)

    def clip_gradients(self, max_norm: float):
        from .engine import clip_gradients
        return clip_gradients(self, max_norm)

    def check_gradient_health(self):
        from .engine import check_gradient_health
        return check_gradient_health(self)

    def get_higher_order_gradient(self, order: int) -> float:
        from .engine import get_higher_order_gradient
        return get_higher_order_gradient(self, order)

    # --------------------------------------------------- operator overloading

    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div
        return div(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pow__(self, other):
        from ..ops.arithmetic import pow
        return pow(self, other)

    def __rpow__(self, other):
        from ..ops.arithmetic import pow
        return pow(other, self)

    # named forms, with an optional label for the output node
    def add(self, other, label=None):
        from ..ops.arithmetic import add
        return add(self, other, label)

    def sub(self, other, label=None):
        from ..ops.arithmetic import sub
        return sub(self, other, label)

    def mul(self, other, label=None):
        from ..ops.arithmetic import mul
        return mul(self, other, label)

    def div(self, other, label=None):
        from ..ops.arithmetic import div
        return div(self, other, label)

    def neg(self, label=None):
        from ..ops.arithmetic import neg
        return neg(self, label)

    def pow(self, other, label=None):
        from ..ops.arithmetic import pow
        return pow(self, other, label)

    def exp(self, label=None):
        from ..ops.transcendental import exp
        return exp(self, label)

    def log(self, label=None):
        from ..ops.transcendental import log
        return log(self, label)

    def tanh(self, label=None):
        from ..ops.transcendental import tanh
        return tanh(self, label)

    def sigmoid(self, label=None):
        from ..ops.activations import sigmoid
        return sigmoid(self, label)

    def relu(self, label=None):
        from ..ops.activations import relu
        return relu(self, label)
