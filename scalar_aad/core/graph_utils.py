"""
Computation graph utilities.

Read-only helpers to summarise and render the graph below a root Value.
None of them touch data or grad.
"""

from collections import Counter
from typing import Dict, List

import numpy as np

from .engine import topological_order
from .var import Value


def get_graph_stats(root: Value) -> Dict:
    """
    Statistics of the graph reachable from `root` (no printing).

    Returns:
        dict with node/edge counts, fan-in/fan-out and an operation breakdown
    """
    nodes = topological_order(root)
    n_nodes = len(nodes)

    # fan-in: operands recorded per node (duplicates count)
    fan_ins = [len(node.operand_ids) for node in nodes]
    n_edges = sum(fan_ins)

    # fan-out: how many recorded operand slots point at each node
    fan_out_by_id = Counter(i for node in nodes for i in node.operand_ids)
    fan_outs = [fan_out_by_id.get(node.id, 0) for node in nodes]

    op_counter = Counter(str(node.operation) for node in nodes)

    return {
        'nodes': n_nodes,
        'edges': n_edges,
        'leaves': sum(1 for node in nodes if node.is_leaf),
        'max_fan_in': max(fan_ins),
        'avg_fan_in': float(np.mean(fan_ins)),
        'max_fan_out': max(fan_outs),
        'avg_fan_out': float(np.mean(fan_outs)),
        'operations': dict(op_counter),
    }


def print_graph_summary(root: Value, detailed: bool = False) -> Dict:
    """
    Print a summary of the graph below `root`.

    Args:
        root: output node of the computation
        detailed: also list every node (only for graphs up to 100 nodes)

    Returns:
        the statistics dict from get_graph_stats
    """
    stats = get_graph_stats(root)

    print("\n" + "="*70)
    print("COMPUTATION GRAPH SUMMARY")
    print("="*70)
    print(f"Total nodes:        {stats['nodes']:,}")
    print(f"Total edges:        {stats['edges']:,}")
    print(f"Leaves:             {stats['leaves']:,}")
    print(f"Max fan-in:         {stats['max_fan_in']}")
    print(f"Avg fan-in:         {stats['avg_fan_in']:.2f}")
    print(f"Max fan-out:        {stats['max_fan_out']}")
    print(f"Avg fan-out:        {stats['avg_fan_out']:.2f}")
    print()
    print("Operation breakdown:")
    for op_type, count in Counter(stats['operations']).most_common(10):
        pct = 100.0 * count / stats['nodes']
        print(f"  {op_type:12s}: {count:6,} ({pct:5.1f}%)")

    if detailed and stats['nodes'] <= 100:
        print()
        print("="*70)
        print("DETAILED NODE LIST")
        print("="*70)
        for node in topological_order(root):
            if node.is_leaf:
                print(f"Node {node.id:4d}: {'leaf':12s} ({node.data:10.6f}) [leaf/input]")
                continue
            parent_info = ", ".join(f"Node{i}" for i in node.operand_ids)
            print(f"Node {node.id:4d}: {str(node.operation):12s} ({node.data:10.6f}) <- [{parent_info}]")

    print("="*70 + "\n")
    return stats


def to_mermaid(root: Value) -> str:
    """
    Render the graph below `root` as a Mermaid flowchart.

    Each value becomes a rounded box showing label, data and grad; each
    non-leaf value gets an extra box for its operation, fed by its operands.
    """
    order = list(reversed(topological_order(root)))
    names = {node.id: f"node{k}" for k, node in enumerate(order)}

    lines: List[str] = ["graph LR;"]
    for node in order:
        name = names[node.id]
        lines.append(
            f'    {name}["{_escape(node.label)}<br/>data: {node.data:.4f}<br/>'
            f'grad: {node.grad:.4f}"]:::valueNode;'
        )
        if node.is_leaf:
            continue
        op_name = f"{name}_op"
        lines.append(f'    {op_name}["{node.operation}"];')
        lines.append(f"    {op_name} --> {name};")
        for child in node.prev():
            lines.append(f"    {names[child.id]} --> {op_name};")

    lines.append("    classDef valueNode rx,ry:10,10;")
    return "\n".join(lines)


def _escape(text: str) -> str:
    return text.replace('"', "#quot;")
