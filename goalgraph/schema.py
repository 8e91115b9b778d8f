# goalgraph/schema.py
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


NodeId = Union[int, str]
Cycle = List[NodeId]


# -------------------------
# Errors
# -------------------------

class GraphError(Exception):
    """Base class for errors raised by the validation engine."""


class MalformedGraph(GraphError):
    """An edge references a node id missing from the snapshot (or ids collide)."""

    def __init__(self, message: str, *, src: Optional[NodeId] = None, dst: Optional[NodeId] = None):
        super().__init__(message)
        self.src = src
        self.dst = dst


# -------------------------
# Enums (wire-safe)
# -------------------------

class ConstraintKind(str, Enum):
    AND = "AND"
    OR = "OR"
    NO_RELATIONSHIP = "NO RELATIONSHIP"
    OTHER = "OTHER"  # precedence, contribution, ... (cycle detection only)


NARY_KINDS = frozenset({ConstraintKind.AND, ConstraintKind.OR, ConstraintKind.NO_RELATIONSHIP})

_LABELS = {
    "AND": ConstraintKind.AND,
    "OR": ConstraintKind.OR,
    "NO RELATIONSHIP": ConstraintKind.NO_RELATIONSHIP,
    "NO_RELATIONSHIP": ConstraintKind.NO_RELATIONSHIP,
}


def classify(label: Optional[str]) -> ConstraintKind:
    """Map a raw link label to its constraint kind. Case and outer spaces are ignored; compound labels are OTHER."""
    if not label:
        return ConstraintKind.OTHER
    return _LABELS.get(label.strip().upper(), ConstraintKind.OTHER)


# -------------------------
# Core models
# -------------------------

class Node(BaseModel):
    """Goal-model element (goal, task, resource, actor ...)."""
    model_config = ConfigDict(frozen=True)

    id: NodeId
    name: Optional[str] = None
    actor: bool = False

    @property
    def display_name(self) -> str:
        return self.name if self.name else str(self.id)


class Edge(BaseModel):
    """Directed, typed link. `type|post_type` marks an evolving link."""
    model_config = ConfigDict(frozen=True)

    src: NodeId
    dst: NodeId
    type: str = ConstraintKind.OTHER.value
    post_type: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _split_compound_label(cls, data: Any) -> Any:
        if isinstance(data, dict):
            raw = data.get("type")
            if isinstance(raw, ConstraintKind):
                data = {**data, "type": raw.value}
            elif isinstance(raw, str) and "|" in raw and data.get("post_type") is None:
                kind, _, post = raw.partition("|")
                data = {**data, "type": kind, "post_type": post or None}
        return data

    @property
    def label(self) -> str:
        if self.post_type is not None:
            return f"{self.type}|{self.post_type}"
        return self.type

    @property
    def kind(self) -> ConstraintKind:
        return classify(self.label)


class GraphSnapshot(BaseModel):
    """Read-only copy of the diagram taken at the start of a validation pass."""
    model_config = ConfigDict(frozen=True)

    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()

    @model_validator(mode="after")
    def _well_formed(self) -> "GraphSnapshot":
        check_well_formed(self)
        return self

    def node_ids(self) -> List[NodeId]:
        return [n.id for n in self.nodes]

    def node_map(self) -> Dict[NodeId, Node]:
        return {n.id: n for n in self.nodes}

    def node(self, node_id: NodeId) -> Node:
        for n in self.nodes:
            if n.id == node_id:
                return n
        raise KeyError(node_id)

    def adjacency(self) -> Dict[NodeId, List[NodeId]]:
        """Fresh node -> destinations mapping, one entry per outgoing edge."""
        adj: Dict[NodeId, List[NodeId]] = {n.id: [] for n in self.nodes}
        for e in self.edges:
            adj[e.src].append(e.dst)
        return adj

    def iter_edges(self) -> Iterator[Tuple[int, Edge]]:
        return enumerate(self.edges)


def check_well_formed(snapshot: GraphSnapshot) -> None:
    """Raise MalformedGraph unless ids are unique and every edge endpoint exists."""
    seen = set()
    for n in snapshot.nodes:
        if n.id in seen:
            raise MalformedGraph(f"Duplicate node id: {n.id!r}")
        seen.add(n.id)
    for e in snapshot.edges:
        if e.src not in seen or e.dst not in seen:
            raise MalformedGraph(f"Edge references unknown node: {e.src!r}->{e.dst!r}", src=e.src, dst=e.dst)


# -------------------------
# Results
# -------------------------

class ConstraintLink(BaseModel):
    """One incoming n-ary link of a destination."""
    source: NodeId
    kind: ConstraintKind
    edge_index: int = Field(ge=0)  # position in GraphSnapshot.edges


class ConstraintGroup(BaseModel):
    """All incoming n-ary links of one destination node."""
    destination: NodeId
    links: List[ConstraintLink] = Field(default_factory=list)

    @property
    def consistent(self) -> bool:
        return all(link.kind == self.links[0].kind for link in self.links[1:])

    @property
    def sources(self) -> List[NodeId]:
        return [link.source for link in self.links]

    @property
    def kinds(self) -> List[ConstraintKind]:
        """Distinct kinds in order of first appearance."""
        out: List[ConstraintKind] = []
        for link in self.links:
            if link.kind not in out:
                out.append(link.kind)
        return out


class GraphDigest(BaseModel):
    """Shape summary of one validation pass."""
    nodes: int = Field(ge=0)
    edges: int = Field(ge=0)
    components: int = Field(ge=0)    # weakly connected
    cycles: int = Field(ge=0)        # reported (closed) cycles
    violations: int = Field(ge=0)
    cyclic_nodes: List[NodeId] = Field(default_factory=list)  # nodes on any directed cycle


class ValidationReport(BaseModel):
    """Cycles and n-ary violations found in one snapshot."""
    cycles: List[Cycle] = Field(default_factory=list)
    violations: List[ConstraintGroup] = Field(default_factory=list)
    digest: Optional[GraphDigest] = None

    @property
    def ok(self) -> bool:
        return not self.cycles and not self.violations

    def cycle_groups(self, snapshot: GraphSnapshot) -> List[Tuple[int, List[NodeId]]]:
        """(cycle index, paintable node ids) per cycle; actors are never painted."""
        nodes = snapshot.node_map()
        return [
            (i, [nid for nid in cycle if not nodes[nid].actor])
            for i, cycle in enumerate(self.cycles)
        ]

    def flagged_nodes(self) -> List[NodeId]:
        out: List[NodeId] = []
        for cycle in self.cycles:
            for nid in cycle:
                if nid not in out:
                    out.append(nid)
        return out

    def flagged_edges(self) -> List[int]:
        """Snapshot edge indices taking part in an inconsistent n-ary group."""
        return sorted({link.edge_index for group in self.violations for link in group.links})


# -------------------------
# JSON Schema helper
# -------------------------

def snapshot_json_schema() -> Dict[str, Any]:
    """Return the JSON Schema for GraphSnapshot (input contract)."""
    return GraphSnapshot.model_json_schema()
