# scalar_aad/ops/__init__.py

# Convenience re-exports so users can do: from scalar_aad.ops import mul, exp, ...
from .arithmetic import as_value, add, sub, mul, div, neg, pow
from .transcendental import exp, log, tanh
from .activations import sigmoid, relu

__all__ = [
    "as_value",
    "add", "sub", "mul", "div", "neg", "pow",
    "exp", "log", "tanh",
    "sigmoid", "relu",
]
