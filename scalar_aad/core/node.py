# scalar_aad/core/node.py
import numbers
from enum import Enum
from typing import Dict

import numpy as np

from ..errors import NonFiniteValueError


class OpTag(str, Enum):
    """
    Tag identifying which builder produced a node.

    The backward engine dispatches on this tag to apply the local gradient
    rule, so a node only needs its tag and its operand indices.
    """
    LEAF = "leaf"
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    NEG = "neg"
    POW = "pow"
    EXP = "exp"
    LOG = "log"
    TANH = "tanh"
    SIGMOID = "sigmoid"
    RELU = "relu"

    def __str__(self):
        return self.value


# number of operands each tag records
ARITY: Dict[OpTag, int] = {
    OpTag.LEAF: 0,
    OpTag.ADD: 2,
    OpTag.SUB: 2,
    OpTag.MUL: 2,
    OpTag.DIV: 2,
    OpTag.POW: 2,
    OpTag.NEG: 1,
    OpTag.EXP: 1,
    OpTag.LOG: 1,
    OpTag.TANH: 1,
    OpTag.SIGMOID: 1,
    OpTag.RELU: 1,
}


def check_finite(x, field: str = "value") -> float:
    """Return `x` as a Python float, rejecting NaN, +/-inf and non-numbers."""
    if isinstance(x, (bool, np.bool_)) or not isinstance(x, numbers.Real):
        raise NonFiniteValueError(x, field)
    try:
        val = float(x)
    except OverflowError:
        raise NonFiniteValueError(x, field) from None
    if not np.isfinite(val):
        raise NonFiniteValueError(x, field)
    return val
