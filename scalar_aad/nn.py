"""
Tiny feed-forward networks built from scalar Values.

Neuron -> Layer -> MLP, plus a plain gradient-descent training loop on a
squared-error loss. Everything here is composition of the core operations.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from .core.engine import clip_gradients
from .core.var import Value

logger = logging.getLogger(__name__)

ACTIVATIONS = ("tanh", "relu", "sigmoid", "linear")


class Neuron:
    """act(w . x + b) with weights and bias drawn from U(-1, 1)."""

    def __init__(self, n_inputs: int, activation: str = "tanh",
                 rng: Optional[np.random.Generator] = None):
        if activation not in ACTIVATIONS:
            raise ValueError(f"Unknown activation {activation!r}. Available: {', '.join(ACTIVATIONS)}")
        rng = rng if rng is not None else np.random.default_rng()
        self.weights = [Value(w) for w in rng.uniform(-1.0, 1.0, n_inputs)]
        self.bias = Value(rng.uniform(-1.0, 1.0))
        self.activation = activation

    def __call__(self, inputs: Sequence) -> Value:
        return self.forward(inputs)

    def forward(self, inputs: Sequence) -> Value:
        if len(inputs) != len(self.weights):
            raise ValueError(f"Expected {len(self.weights)} inputs, got {len(inputs)}")
        act = self.bias
        for w, x in zip(self.weights, inputs):
            act = act + w * x
        if self.activation == "linear":
            return act
        return getattr(act, self.activation)()

    def parameters(self) -> List[Value]:
        return self.weights + [self.bias]

    def __repr__(self):
        return f"Neuron({len(self.weights)}, {self.activation})"


class Layer:
    def __init__(self, n_inputs: int, n_outputs: int, activation: str = "tanh",
                 rng: Optional[np.random.Generator] = None):
        self.neurons = [Neuron(n_inputs, activation, rng) for _ in range(n_outputs)]

    def __call__(self, inputs: Sequence) -> List[Value]:
        return self.forward(inputs)

    def forward(self, inputs: Sequence) -> List[Value]:
        return [n.forward(inputs) for n in self.neurons]

    def parameters(self) -> List[Value]:
        return [p for n in self.neurons for p in n.parameters()]

    def __repr__(self):
        return f"Layer([{', '.join(repr(n) for n in self.neurons)}])"


class MLP:
    """Multi-layer perceptron: MLP(3, [4, 4, 1]) maps 3 inputs to 1 output."""

    def __init__(self, n_inputs: int, layer_sizes: Sequence[int], activation: str = "tanh",
                 seed: Optional[int] = None):
        rng = np.random.default_rng(seed)
        sizes = [n_inputs] + list(layer_sizes)
        self.layers = [
            Layer(sizes[i], sizes[i + 1], activation, rng) for i in range(len(layer_sizes))
        ]

    def __call__(self, inputs: Sequence) -> List[Value]:
        return self.forward(inputs)

    def forward(self, inputs: Sequence) -> List[Value]:
        out = list(inputs)
        for layer in self.layers:
            out = layer.forward(out)
        return out

    def parameters(self) -> List[Value]:
        return [p for layer in self.layers for p in layer.parameters()]

    def zero_grad(self):
        for p in self.parameters():
            p.grad = 0.0

    def loss(self, xs: Sequence[Sequence[float]], ys: Sequence[float]) -> Value:
        """Sum of squared errors of the first output over the dataset."""
        if len(xs) != len(ys):
            raise ValueError(f"Got {len(xs)} samples but {len(ys)} targets")
        if not xs:
            raise ValueError("Cannot compute a loss over an empty dataset")
        total = None
        for x, y in zip(xs, ys):
            pred = self.forward(x)[0]
            err = (pred - y) ** 2
            total = err if total is None else total + err
        return total

    def train(self, xs: Sequence[Sequence[float]], ys: Sequence[float],
              learning_rate: float = 0.1, epochs: int = 100,
              clip: Optional[float] = None, log_every: int = 10) -> List[float]:
        """
        Full-batch gradient descent on the squared-error loss.

        Each step builds the loss graph, resets its gradients, runs backward,
        optionally clips per-node gradients, then updates every parameter with
        p.data -= learning_rate * p.grad and zeroes p.grad.

        Returns:
            loss value per epoch
        """
        params = self.parameters()
        history: List[float] = []

        for epoch in range(epochs):
            total = self.loss(xs, ys)
            total.reset_grad()
            total.backward()
            if clip is not None:
                clip_gradients(total, clip)

            for p in params:
                p.data -= learning_rate * p.grad
                p.grad = 0.0

            history.append(total.data)
            if log_every and epoch % log_every == 0:
                logger.info("Epoch %d, Loss: %.6f", epoch, total.data)

        return history

    def __repr__(self):
        return f"MLP([{', '.join(repr(layer) for layer in self.layers)}])"
