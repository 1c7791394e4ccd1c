import pytest

from scalar_aad import Value
from scalar_aad.core.graph_utils import get_graph_stats, print_graph_summary, to_mermaid


@pytest.fixture
def neuron():
    x = Value(2.0, "x")
    w = Value(-3.0, "w")
    b = Value(1.0, "b")
    n = x.mul(w, "x*w").add(b, "n")
    o = n.tanh("o")
    return o


def test_stats(neuron):
    stats = get_graph_stats(neuron)
    assert stats["nodes"] == 6
    assert stats["leaves"] == 3
    assert stats["edges"] == 5
    assert stats["max_fan_in"] == 2
    assert stats["max_fan_out"] == 1
    assert stats["operations"] == {"leaf": 3, "mul": 1, "add": 1, "tanh": 1}


def test_stats_count_duplicate_operands():
    x = Value(1.0)
    y = x + x
    stats = get_graph_stats(y)
    assert stats["nodes"] == 2
    assert stats["edges"] == 2
    assert stats["max_fan_out"] == 2


def test_stats_do_not_touch_gradients(neuron):
    neuron.backward()
    before = {n: n.grad for n in (neuron,) + neuron.children}
    get_graph_stats(neuron)
    to_mermaid(neuron)
    assert {n: n.grad for n in before} == before


def test_print_summary(neuron, capsys):
    stats = print_graph_summary(neuron, detailed=True)
    out = capsys.readouterr().out
    assert "COMPUTATION GRAPH SUMMARY" in out
    assert "Total nodes:" in out
    assert "tanh" in out
    assert stats["nodes"] == 6


def test_mermaid(neuron):
    neuron.backward()
    text = to_mermaid(neuron)
    lines = text.splitlines()
    assert lines[0] == "graph LR;"
    assert lines[-1] == "    classDef valueNode rx,ry:10,10;"
    # the root is rendered first
    assert lines[1].startswith('    node0["o<br/>data: ')
    assert "grad: 1.0000" in lines[1]
    assert '    node0_op["tanh"];' in lines
    assert "    node0_op --> node0;" in lines
    assert "    node1 --> node0_op;" in lines
    # one box per value, one op box per non-leaf
    assert sum(":::valueNode" in line for line in lines) == 6
    assert sum('_op["' in line for line in lines) == 3


def test_mermaid_duplicate_operand_single_edge():
    x = Value(1.0, "x")
    y = x.add(x, "y")
    lines = to_mermaid(y).splitlines()
    assert lines.count("    node1 --> node0_op;") == 1


def test_mermaid_escapes_quotes():
    v = Value(1.0, 'say "hi"')
    assert "#quot;" in to_mermaid(v)
