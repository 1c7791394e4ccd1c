# scalar_aad/ops/transcendental.py
import numpy as np

from ..core.node import OpTag
from ..errors import DomainError
from .arithmetic import _unary


def exp(x, label=None):
    # overflow yields inf, which the output node rejects as non-finite
    return _unary(x, lambda a: float(np.exp(a)), OpTag.EXP, label)


def log(x, label=None):
    """Natural logarithm; fails for non-positive input."""
    return _unary(x, _log_forward, OpTag.LOG, label)


def _log_forward(a: float) -> float:
    if a <= 0.0:
        raise DomainError("Log of non-positive number", "log")
    return float(np.log(a))


def tanh(x, label=None):
    return _unary(x, lambda a: float(np.tanh(a)), OpTag.TANH, label)
