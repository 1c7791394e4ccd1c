# scalar_aad/__init__.py
# Reverse-mode automatic differentiation over scalar values

from .core.node import OpTag
from .core.var import Value
from .core.tape import Tape, get_tape, use_tape
from .core.engine import (
    GradientHealth,
    backward,
    check_gradient_health,
    clip_gradients,
    get_higher_order_gradient,
    reset_grad,
    topological_order,
)
from .core.seeds import grad, grads, grads_list, primal, value
from .config import AADConfig, get_config, set_config, use_config
from .errors import (
    AADError,
    DomainError,
    InvalidOrderError,
    NonFiniteValueError,
    StaleNodeError,
    TapeMismatchError,
    UnsupportedInputError,
)

# Operation builders
from . import ops
from .ops import as_value, add, sub, mul, div, neg, pow, exp, log, tanh, sigmoid, relu

__version__ = "0.1.0"

__all__ = [
    # Core
    'OpTag',
    'Value',
    'Tape',
    'get_tape',
    'use_tape',
    # Engine
    'GradientHealth',
    'backward',
    'check_gradient_health',
    'clip_gradients',
    'get_higher_order_gradient',
    'reset_grad',
    'topological_order',
    # Convenience
    'grad',
    'grads',
    'grads_list',
    'primal',
    'value',
    # Config
    'AADConfig',
    'get_config',
    'set_config',
    'use_config',
    # Errors
    'AADError',
    'DomainError',
    'InvalidOrderError',
    'NonFiniteValueError',
    'StaleNodeError',
    'TapeMismatchError',
    'UnsupportedInputError',
    # Ops
    'ops',
    'as_value',
    'add', 'sub', 'mul', 'div', 'neg', 'pow',
    'exp', 'log', 'tanh', 'sigmoid', 'relu',
]
