# goalgraph/nary.py
from __future__ import annotations

import logging
from typing import Dict, List

from goalgraph.schema import (
    NARY_KINDS,
    ConstraintGroup,
    ConstraintLink,
    GraphSnapshot,
    NodeId,
    check_well_formed,
)

logger = logging.getLogger("goalgraph.nary")


def group_constraints(snapshot: GraphSnapshot) -> Dict[NodeId, ConstraintGroup]:
    """
    Group incoming n-ary links (AND / OR / NO RELATIONSHIP) by destination.

    Links touching an actor and links of any other kind, evolving
    `kind|post` links included, are left out. Groups keep snapshot edge order;
    destinations keep order of first appearance.
    """
    check_well_formed(snapshot)
    nodes = snapshot.node_map()
    groups: Dict[NodeId, ConstraintGroup] = {}
    for index, e in snapshot.iter_edges():
        kind = e.kind
        if kind not in NARY_KINDS:
            continue
        if nodes[e.src].actor or nodes[e.dst].actor:
            continue
        group = groups.get(e.dst)
        if group is None:
            group = groups[e.dst] = ConstraintGroup(destination=e.dst)
        group.links.append(ConstraintLink(source=e.src, kind=kind, edge_index=index))
    return groups


def syntax_error_exists(group: ConstraintGroup) -> bool:
    """True iff the group holds two or more links whose kinds disagree."""
    if len(group.links) < 2:
        return False
    return not group.consistent


def check_consistency(snapshot: GraphSnapshot) -> List[ConstraintGroup]:
    """Return every destination whose incoming n-ary links are not all the same kind."""
    violations: List[ConstraintGroup] = []
    for dest, group in group_constraints(snapshot).items():
        if syntax_error_exists(group):
            kinds = ", ".join(k.value for k in group.kinds)
            logger.debug(f"Inconsistent n-ary links into {dest!r}: {kinds}")
            violations.append(group)
    return violations
