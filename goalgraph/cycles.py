# goalgraph/cycles.py
from __future__ import annotations

import logging
from typing import Dict, List, Set

import networkx as nx

from goalgraph.digest import cyclic_nodes, to_networkx
from goalgraph.schema import Cycle, GraphSnapshot, NodeId, check_well_formed

logger = logging.getLogger("goalgraph.cycles")


def find_cycles(snapshot: GraphSnapshot) -> List[Cycle]:
    """
    Return elementary cycles covering every node that lies on a cycle.

    First come the cycles of `walk_cycles`, one per consumed closing edge.
    A node can lie on a cycle whose edges the walk already consumed; for each
    such node one more cycle is appended: the node followed by a shortest
    path back to it through its strongly connected component.
    """
    cycles = walk_cycles(snapshot)
    covered = {nid for cycle in cycles for nid in cycle}
    missing = [nid for nid in cyclic_nodes(snapshot) if nid not in covered]
    if missing:
        G = to_networkx(snapshot)
        for nid in missing:
            if nid in covered:
                continue
            cycle = _cycle_through(G, nid)
            cycles.append(cycle)
            covered.update(cycle)
            logger.debug(f"Cycle added to cover {nid!r}: {cycle}")
    return cycles


def _cycle_through(G: nx.MultiDiGraph, node: NodeId) -> Cycle:
    # node is on a cycle, so at least one successor reaches it back
    for succ in G.successors(node):
        if succ == node:
            return [node]
        if nx.has_path(G, succ, node):
            back = nx.shortest_path(G, succ, node)
            return [node] + back[:-1]
    raise ValueError(f"{node!r} lies on no cycle")


def walk_cycles(snapshot: GraphSnapshot) -> List[Cycle]:
    """
    Return elementary cycles of the snapshot, one per closing edge.

    Depth-first walk over a private copy of the adjacency lists. When a
    neighbor is already on the current path, the path suffix starting at that
    neighbor is a cycle; the edge that closed it is removed from the copy so it
    cannot close another one. Nodes are marked processed once all their
    outgoing edges are traversed or consumed; at that point they lie on no
    remaining cycle and are never entered again.

    Afterwards the snapshot minus the consumed edges is acyclic, so every
    cycle of the snapshot contains the closing edge of some reported cycle.
    Output order follows node order, then outgoing-edge order.
    """
    check_well_formed(snapshot)
    adjacency = snapshot.adjacency()
    processed: Set[NodeId] = set()
    cycles: List[Cycle] = []

    for root in adjacency:
        if root not in processed:
            _walk(root, adjacency, processed, cycles)

    logger.debug(f"walk_cycles: {len(cycles)} cycle(s) over {len(adjacency)} node(s)")
    return cycles


def _walk(
    root: NodeId,
    adjacency: Dict[NodeId, List[NodeId]],
    processed: Set[NodeId],
    cycles: List[Cycle],
) -> None:
    # path[i] is on the stack with its next unvisited edge at cursor[i]
    path: List[NodeId] = [root]
    cursor: List[int] = [0]
    position: Dict[NodeId, int] = {root: 0}

    while path:
        node = path[-1]
        out = adjacency[node]
        i = cursor[-1]

        if i >= len(out):
            path.pop()
            cursor.pop()
            del position[node]
            processed.add(node)
            continue

        nxt = out[i]
        if nxt in position:
            cycle = path[position[nxt]:]
            cycles.append(cycle)
            del out[i]  # consume the closing edge; cursor now points at the next one
            logger.debug(f"Cycle closed by {node!r}->{nxt!r}: {cycle}")
        elif nxt in processed:
            cursor[-1] = i + 1
        else:
            cursor[-1] = i + 1
            position[nxt] = len(path)
            path.append(nxt)
            cursor.append(0)
