"""
Command-line demo.

    python -m scalar_aad.demo            # Mermaid diagram of a single neuron
    python -m scalar_aad.demo --train    # fit a small MLP on a toy dataset
"""

import argparse
import logging
import math

from .core.graph_utils import print_graph_summary, to_mermaid
from .core.tape import use_tape
from .core.var import Value
from .nn import MLP

logger = logging.getLogger(__name__)

# bias chosen so that the neuron output is exactly 1/sqrt(2)
NEURON_BIAS = 6.8813735870195432


def _positive_int(text):
    n = int(text)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Scalar reverse-mode AD demo',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument('--train', action='store_true',
                        help='Train a small MLP instead of printing the neuron graph')
    parser.add_argument('--epochs', type=_positive_int, default=100,
                        help='Training epochs')
    parser.add_argument('--lr', type=float, default=0.1,
                        help='Learning rate')
    parser.add_argument('--seed', type=int, default=0,
                        help='Parameter initialisation seed')
    parser.add_argument('--summary', action='store_true',
                        help='Also print graph statistics')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Debug logging')
    return parser.parse_args(argv)


def build_neuron():
    """
    o = tanh(x1*w1 + x2*w2 + b), with tanh written out as (e^2n - 1) / (e^2n + 1).
    Returns (output, inputs-by-label).
    """
    x1 = Value(2.0, 'x1')
    x2 = Value(0.0, 'x2')
    w1 = Value(-3.0, 'w1')
    w2 = Value(1.0, 'w2')
    b = Value(NEURON_BIAS, 'b')

    x1w1 = x1.mul(w1, 'x1*w1')
    x2w2 = x2.mul(w2, 'x2*w2')
    x1w1x2w2 = x1w1.add(x2w2, 'x1*w1 + x2*w2')
    n = x1w1x2w2.add(b, 'n')

    e = (n.mul(2, '2*n')).exp('e')
    o = e.sub(1, 'e-1').div(e.add(1, 'e+1'), 'o')
    return o, {'x1': x1, 'x2': x2, 'w1': w1, 'w2': w2, 'b': b}


def run_neuron(summary: bool = False) -> str:
    with use_tape():
        o, leaves = build_neuron()
        o.backward()
        for name, leaf in leaves.items():
            logger.debug("d o / d %s = %.4f", name, leaf.grad)
        if summary:
            print_graph_summary(o)
        return to_mermaid(o)


def run_training(epochs: int, lr: float, seed: int):
    xs = [
        [2.0, 3.0, -1.0],
        [3.0, -1.0, 0.5],
        [0.5, 1.0, 1.0],
        [1.0, 1.0, -1.0],
    ]
    ys = [1.0, -1.0, -1.0, 1.0]
    with use_tape():
        model = MLP(3, [4, 4, 1], seed=seed)
        history = model.train(xs, ys, learning_rate=lr, epochs=epochs)
        preds = [model.forward(x)[0].data for x in xs]
    return history, preds


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if args.train:
        history, preds = run_training(args.epochs, args.lr, args.seed)
        print(f"Final loss: {history[-1]:.6f}")
        for i, p in enumerate(preds):
            print(f"  sample {i}: {p:+.4f}")
    else:
        print(run_neuron(summary=args.summary))
        logger.debug("expected output %.6f", 1.0 / math.sqrt(2.0))


if __name__ == "__main__":
    main()
