# scalar_aad/ops/activations.py
from scipy.special import expit

from ..core.node import OpTag
from .arithmetic import _unary


def sigmoid(x, label=None):
    """
    Logistic function 1 / (1 + e^-x).

    expit evaluates it without overflowing for large |x|; the local partial
    s * (1 - s) is applied by the engine from the stored output.
    """
    return _unary(x, lambda a: float(expit(a)), OpTag.SIGMOID, label)


def relu(x, label=None):
    return _unary(x, lambda a: a if a > 0.0 else 0.0, OpTag.RELU, label)
