"""
Tests for the Neuron / Layer / MLP wrappers and the training loop.
"""

import pytest

from scalar_aad import OpTag, Value
from scalar_aad.nn import MLP, Layer, Neuron


XS = [
    [2.0, 3.0, -1.0],
    [3.0, -1.0, 0.5],
    [0.5, 1.0, 1.0],
    [1.0, 1.0, -1.0],
]
YS = [1.0, -1.0, -1.0, 1.0]


class TestNeuron:
    def test_parameters(self):
        n = Neuron(3)
        params = n.parameters()
        assert len(params) == 4
        assert all(isinstance(p, Value) and p.is_leaf for p in params)
        assert all(-1.0 <= p.data <= 1.0 for p in params)

    def test_forward_matches_manual_sum(self):
        n = Neuron(2)
        x = [0.5, -1.5]
        expected = n.bias.data + sum(w.data * xi for w, xi in zip(n.weights, x))
        out = n(x)
        assert out.operation is OpTag.TANH
        assert out.children[0].data == pytest.approx(expected)

    @pytest.mark.parametrize("activation, tag", [
        ("relu", OpTag.RELU),
        ("sigmoid", OpTag.SIGMOID),
        ("linear", OpTag.ADD),
    ])
    def test_activation(self, activation, tag):
        n = Neuron(2, activation=activation)
        assert n([1.0, 2.0]).operation is tag

    def test_unknown_activation(self):
        with pytest.raises(ValueError, match="Unknown activation"):
            Neuron(2, activation="softplus")

    def test_wrong_input_size(self):
        with pytest.raises(ValueError, match="Expected 3 inputs"):
            Neuron(3)([1.0])


class TestLayerAndMLP:
    def test_layer_shapes(self):
        layer = Layer(3, 4)
        assert len(layer([1.0, 2.0, 3.0])) == 4
        assert len(layer.parameters()) == 4 * 4

    def test_mlp_parameter_count(self):
        model = MLP(3, [4, 4, 1])
        assert len(model.parameters()) == (3 + 1) * 4 + (4 + 1) * 4 + (4 + 1) * 1

    def test_seed_is_reproducible(self):
        a = [p.data for p in MLP(2, [3, 1], seed=7).parameters()]
        b = [p.data for p in MLP(2, [3, 1], seed=7).parameters()]
        assert a == b

    def test_forward_output(self):
        model = MLP(3, [4, 4, 1], seed=0)
        out = model(XS[0])
        assert len(out) == 1
        assert -1.0 < out[0].data < 1.0

    def test_backward_reaches_every_parameter(self):
        model = MLP(3, [4, 1], seed=1)
        loss = model.loss(XS, YS)
        loss.backward()
        assert all(p.grad != 0.0 for p in model.parameters())
        model.zero_grad()
        assert all(p.grad == 0.0 for p in model.parameters())

    def test_loss_validates_dataset(self):
        model = MLP(3, [1], seed=0)
        with pytest.raises(ValueError):
            model.loss(XS, YS[:2])
        with pytest.raises(ValueError):
            model.loss([], [])


class TestTraining:
    def test_loss_decreases(self):
        model = MLP(3, [4, 4, 1], seed=0)
        history = model.train(XS, YS, learning_rate=0.05, epochs=60)
        assert len(history) == 60
        assert history[-1] < history[0]

    def test_gradients_cleared_after_step(self):
        model = MLP(3, [4, 1], seed=0)
        model.train(XS, YS, epochs=3)
        assert all(p.grad == 0.0 for p in model.parameters())

    def test_per_step_graphs_are_discarded(self, fresh_tape):
        model = MLP(3, [4, 1], seed=0)
        n_params = len(fresh_tape)
        model.train(XS, YS, epochs=5)
        assert len(fresh_tape) == n_params

    def test_clipping(self):
        model = MLP(3, [4, 1], seed=0)
        history = model.train(XS, YS, learning_rate=0.05, epochs=10, clip=0.5)
        assert len(history) == 10

    def test_progress_is_logged(self, caplog):
        model = MLP(3, [2, 1], seed=0)
        with caplog.at_level("INFO", logger="scalar_aad.nn"):
            model.train(XS, YS, epochs=11, log_every=10)
        messages = [r.getMessage() for r in caplog.records if r.name == "scalar_aad.nn"]
        assert len(messages) == 2
        assert messages[0].startswith("Epoch 0, Loss:")
