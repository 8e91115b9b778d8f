# goalgraph/digest.py
from __future__ import annotations

from typing import List, Optional

import networkx as nx

from goalgraph.schema import ConstraintGroup, Cycle, GraphDigest, GraphSnapshot, NodeId


def to_networkx(snapshot: GraphSnapshot) -> nx.MultiDiGraph:
    """Multigraph copy of the snapshot; edge keys follow snapshot order."""
    G = nx.MultiDiGraph()
    for n in snapshot.nodes:
        G.add_node(n.id, name=n.display_name, actor=n.actor)
    for index, e in snapshot.iter_edges():
        G.add_edge(e.src, e.dst, index=index, kind=e.kind, label=e.label)
    return G


def cyclic_nodes(snapshot: GraphSnapshot, G: Optional[nx.MultiDiGraph] = None) -> List[NodeId]:
    """Nodes lying on at least one directed cycle, in snapshot order."""
    if G is None:
        G = to_networkx(snapshot)
    on_cycle = set(nx.nodes_with_selfloops(G))
    for comp in nx.strongly_connected_components(G):
        if len(comp) > 1:
            on_cycle.update(comp)
    return [nid for nid in snapshot.node_ids() if nid in on_cycle]


def compute_digest(
    snapshot: GraphSnapshot,
    cycles: List[Cycle],
    violations: List[ConstraintGroup],
) -> GraphDigest:
    """
    Summarize a pass:
      - components: weakly connected components (0 for an empty graph)
      - cycles / violations: counts from the two checkers
      - cyclic_nodes: every node on some directed cycle, whether or not its
        own closing edge was the one consumed by the cycle walk
    """
    G = to_networkx(snapshot)
    components = nx.number_weakly_connected_components(G) if G.number_of_nodes() else 0
    return GraphDigest(
        nodes=G.number_of_nodes(),
        edges=G.number_of_edges(),
        components=components,
        cycles=len(cycles),
        violations=len(violations),
        cyclic_nodes=cyclic_nodes(snapshot, G),
    )
