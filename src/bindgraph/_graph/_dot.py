"""Graphviz export of the unpruned conversion graph."""

from __future__ import annotations

import html
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bindgraph._key import Key

    from ._node import ConversionGraph, Node

_LEGEND = """\
  legend [label=<
    <table bgcolor="white">
      <tr><td border="0"><b>Node Types:</b></td></tr>
      <tr><td bgcolor="1">Valid, seed node</td></tr>
      <tr><td bgcolor="5">Valid</td></tr>
      <tr><td bgcolor="9">Incomplete (=depends on node with errors)</td></tr>
      <tr><td bgcolor="4">Error origin</td></tr>
    </table>
  >]
"""


def _select_nodes(graph: ConversionGraph, pattern: re.Pattern[str] | None) -> set[Key]:
    """Select the nodes matching ``pattern`` and everything they depend on."""
    nodes = graph.debug_nodes
    if pattern is None:
        return set(nodes)

    pending = [
        key
        for key, node in nodes.items()
        if pattern.search(key.description) or any(pattern.search(label) for label in node.debug_labels)
    ]
    selected: set[Key] = set()
    while pending:
        key = pending.pop()
        if key in selected or key not in nodes:
            continue
        selected.add(key)
        pending.extend(nodes[key].dep_keys)
    return selected


def _node_style(node: Node, *, is_seed: bool) -> tuple[str, str]:
    """Return the fill colour and HTML label of a node."""
    description = html.escape(node.key.description)
    if node.error is not None:
        return "4 /*error origin*/", f"{description}<br/><i>{html.escape(node.error.reason)}</i>"
    if node.incomplete:
        return "9 /*incomplete*/", description
    if is_seed:
        labels = "".join(f"<br/>{html.escape(label)}" for label in node.debug_labels)
        return "1 /*valid, seed*/", f"{description}<i>{labels}</i>"
    return "5 /*valid*/", description


def generate_dot(graph: ConversionGraph, pattern: str | re.Pattern[str] | None = None) -> str:
    """Render the unpruned graph as Graphviz DOT code.

    Nodes are coloured by state (valid seed, valid, incomplete, error
    origin) and edges point from a node to its dependencies.

    Args:
        graph: The graph to render. Its debug nodes are used, so incomplete
            and error nodes show up too.
        pattern: If given, only nodes whose description or any debug label
            matches, together with everything they transitively depend on,
            are rendered.

    Returns:
        The DOT source.

    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)

    selected = sorted(_select_nodes(graph, pattern))
    node_ids = {key: i for i, key in enumerate(selected)}
    seed_keys = {seed.key for seed in graph.seeds}

    lines = [
        "digraph conv_graph {\n",
        "  node[shape=box, style=filled, colorscheme=set39]\n",
        _LEGEND,
    ]
    for key in selected:
        node = graph.debug_nodes[key]
        color, label = _node_style(node, is_seed=key in seed_keys)
        lines.append(f"  {node_ids[key]} [fillcolor={color}, label=<{key.direction}: {label}>]\n")
    for key in selected:
        node = graph.debug_nodes[key]
        if not node.deps:
            continue
        targets = "".join(f"{node_ids[dep]} " for dep in node.dep_keys if dep in node_ids)
        lines.append(f"  {node_ids[key]} -> {{{targets}}}\n")
    lines.append("}\n")
    return "".join(lines)
