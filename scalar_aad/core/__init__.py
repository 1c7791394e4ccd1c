# scalar_aad/core/__init__.py

"""
Core public API for the AAD package.

This module exposes the minimal set of symbols that users of the engine
should import from `scalar_aad.core`. Operation builders live in
`scalar_aad.ops` and are reached through Value's operators.

Exports:
    Value            : Scalar graph node (primal value, gradient, operands).
    OpTag            : Tag naming the builder that produced a node.
    Tape             : Arena that records nodes and issues their ids.
    global_tape      : The default tape used to record nodes.
    use_tape         : Context manager to temporarily switch the active tape.
    backward         : Run a reverse pass from a root node.
    topological_order: Nodes below a root, producers before consumers.
    reset_grad       : Zero every gradient below a root.
    grad / grads     : Convenience: gradients of a function at a point.
    value            : Leaf constructor accepting any coercible input.
    primal           : Convenience: extract the primal value from a Value.
"""

from .node import OpTag
from .var import Value
from .tape import Tape, global_tape, get_tape, use_tape
from .engine import (
    GradientHealth,
    backward,
    check_gradient_health,
    clip_gradients,
    get_higher_order_gradient,
    reset_grad,
    topological_order,
)
from .seeds import grad, grads, grads_list, primal, value

__all__ = [
    "OpTag",
    "Value",
    "Tape",
    "global_tape",
    "get_tape",
    "use_tape",
    "GradientHealth",
    "backward",
    "check_gradient_health",
    "clip_gradients",
    "get_higher_order_gradient",
    "reset_grad",
    "topological_order",
    "grad",
    "grads",
    "grads_list",
    "primal",
    "value",
]
