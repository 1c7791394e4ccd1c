# scalar_aad/core/engine.py
from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from ..config import get_config
from ..errors import DomainError, InvalidOrderError
from .node import OpTag
from .var import Value

logger = logging.getLogger(__name__)


def topological_order(root: Value) -> List[Value]:
    """
    Every node reachable from `root`, each listed after all of its children.

    Iterative post-order DFS with an explicit stack, so deep graphs do not hit
    the recursion limit. Duplicate operands (e.g. x + x) are visited once.
    """
    topo: List[Value] = []
    visited = set()
    stack = [(root, False)]  # (node, expanded?)

    while stack:
        node, expanded = stack.pop()

        if expanded:
            topo.append(node)
            continue

        if node.id in visited:
            continue
        visited.add(node.id)

        stack.append((node, True))
        for child in reversed(node.prev()):
            if child.id not in visited:
                stack.append((child, False))

    return topo


def backward(root: Value, order: int = 1):
    """
    Run a reverse pass from `root`.

    Seeds root.grad = 1.0, then walks the nodes consumers-first so that each
    node's gradient is complete before its rule pushes it to the operands.
    Contributions are accumulated (p.grad += g * dout/dp), so call
    reset_grad() before reusing a graph.

    For order > 1 every visited node additionally caches its gradient at
    order 1, re-runs backward(order - 1) from itself, and caches the
    resulting gradient at `order`. This re-propagates over the same primal
    graph; it is not a true higher derivative.
    """
    _check_order(order)
    topo = topological_order(root)

    root.grad = 1.0
    for node in reversed(topo):
        _propagate(node)
    logger.debug("Backward pass from node %d visited %d nodes", root.id, len(topo))

    if order > 1:
        for node in reversed(topo):
            node.higher_order_grads[1] = node.grad
            backward(node, order - 1)
            node.higher_order_grads[order] = node.grad


def _propagate(node: Value):
    """Apply the local gradient rule of `node` to its operands."""
    if node.is_leaf:
        return
    g = node.grad
    for child, partial in zip(node.children, local_partials(node)):
        # Accumulate: child.grad += node.grad * (d node / d child)
        child.grad = child.grad + g * partial


def local_partials(node: Value) -> Tuple[float, ...]:
    """
    Partial derivative of `node` with respect to each of its children, in
    children order.

    Domain checks are repeated here because `data` may have been reassigned
    since the node was built.
    """
    tag = node.operation
    v = node.data
    operands = node.children
    a = operands[0].data if operands else 0.0

    if tag is OpTag.LEAF:
        return ()

    # ---------- Linear ops ----------
    if tag is OpTag.ADD:
        return (1.0, 1.0)
    if tag is OpTag.SUB:
        return (1.0, -1.0)
    if tag is OpTag.NEG:
        return (-1.0,)

    # ---------- Product / quotient ----------
    if tag is OpTag.MUL:
        b = operands[1].data
        return (b, a)
    if tag is OpTag.DIV:
        b = operands[1].data
        if abs(b) < get_config().div_epsilon:
            raise DomainError("Division by near-zero value", "div")
        return (1.0 / b, -a / (b * b))

    # ---------- Power ----------
    if tag is OpTag.POW:
        from ..ops.arithmetic import check_pow_domain
        b = operands[1].data
        check_pow_domain(a, b)
        if a == 0.0:
            # limit taken as policy: y = 0^b with b > 0 has zero partials
            return (0.0, 0.0)
        with np.errstate(all="ignore"):
            dfdx = b * float(np.power(a, b - 1.0))
            dfdy = v * float(np.log(abs(a)))
        return (dfdx, dfdy)

    # ---------- Exponential / logarithm ----------
    if tag is OpTag.EXP:
        return (v,)
    if tag is OpTag.LOG:
        if a <= 0.0:
            raise DomainError("Log of non-positive number", "log")
        return (1.0 / a,)

    # ---------- Activations ----------
    if tag is OpTag.TANH:
        return (1.0 - v * v,)
    if tag is OpTag.SIGMOID:
        return (v * (1.0 - v),)
    if tag is OpTag.RELU:
        return (1.0 if a > 0.0 else 0.0,)

    raise ValueError(f"no gradient rule for operation {tag!r}")


def _check_order(order):
    if isinstance(order, bool) or not isinstance(order, numbers.Integral) or order < 1:
        raise InvalidOrderError(order)


# ---------------------------------------------------------------- utilities

def reset_grad(root: Value):
    """Zero grad and clear the higher-order cache on every node reachable from root."""
    for node in topological_order(root):
        node.grad = 0.0
        node.higher_order_grads.clear()


def clip_gradients(root: Value, max_norm: float) -> int:
    """
    Clamp each reachable node's gradient to magnitude `max_norm`, sign kept.

    This is a per-node clamp, not a rescale of the global gradient norm.
    Returns the number of nodes that were clipped.
    """
    if isinstance(max_norm, bool) or not isinstance(max_norm, numbers.Real) \
            or not math.isfinite(max_norm) or max_norm <= 0:
        raise ValueError(f"max_norm must be a positive finite number, got {max_norm!r}")

    clipped = 0
    for node in topological_order(root):
        if abs(node.grad) > max_norm:
            node.grad = math.copysign(max_norm, node.grad)
            clipped += 1
    logger.debug("Clipped %d gradients to %g", clipped, max_norm)
    return clipped


@dataclass(frozen=True)
class GradientHealth:
    """Largest and smallest nonzero |grad| below a root, with threshold flags."""
    has_exploding: bool
    has_vanishing: bool
    max_grad: float
    min_grad: float


def check_gradient_health(root: Value) -> GradientHealth:
    """
    Scan the nonzero gradients reachable from root.

    With no nonzero gradient at all, max_grad is -inf and min_grad is +inf
    and neither flag is set.
    """
    cfg = get_config()
    max_grad = -math.inf
    min_grad = math.inf
    for node in topological_order(root):
        g = abs(node.grad)
        if g == 0.0:
            continue
        max_grad = max(max_grad, g)
        min_grad = min(min_grad, g)

    health = GradientHealth(
        has_exploding=max_grad > cfg.exploding_threshold,
        has_vanishing=min_grad < cfg.vanishing_threshold,
        max_grad=max_grad,
        min_grad=min_grad,
    )
    if health.has_exploding or health.has_vanishing:
        logger.warning(
            "Unhealthy gradients below node %d: max=%g min=%g (exploding=%s, vanishing=%s)",
            root.id, max_grad, min_grad, health.has_exploding, health.has_vanishing,
        )
    return health


def get_higher_order_gradient(node: Value, order: int) -> float:
    """Cached gradient at `order` from backward(order); 0.0 if never computed."""
    _check_order(order)
    return node.higher_order_grads.get(order, 0.0)
