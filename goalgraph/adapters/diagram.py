# goalgraph/adapters/diagram.py
# Diagram export (elements + links) -> GraphSnapshot
from __future__ import annotations

from typing import Any, Iterable, List, Optional

from goalgraph.schema import Edge, GraphSnapshot, Node

ACTOR_TYPE = "basic.Actor"


# ----------------------------
# Utilities for dict / object cells
# ----------------------------
def _get(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)

def _first(obj: Any, *names: str) -> Any:
    for name in names:
        value = _get(obj, name)
        if value is not None:
            return value
    return None

def _element_name(el: Any) -> Optional[str]:
    name = _get(el, "name")
    if isinstance(name, str):
        return name
    # jointjs keeps the label under attrs[".name"]["text"]
    attrs = _get(el, "attrs") or {}
    label = attrs.get(".name") if isinstance(attrs, dict) else None
    if isinstance(label, dict) and isinstance(label.get("text"), str):
        return label["text"]
    return None


def element_to_node(el: Any) -> Node:
    return Node(
        id=_first(el, "elementid", "id"),
        name=_element_name(el),
        actor=bool(_get(el, "actor")) or _get(el, "type") == ACTOR_TYPE,
    )


def link_to_edge(link: Any) -> Edge:
    return Edge(
        src=_first(link, "linkSrcID", "src", "source"),
        dst=_first(link, "linkDestID", "dst", "target"),
        type=_first(link, "linkType", "type") or "OTHER",
        post_type=_first(link, "postType", "post_type"),
    )


def build_snapshot(elements: Iterable[Any], links: Iterable[Any]) -> GraphSnapshot:
    """Copy ids, flags and link labels out of live diagram cells (raises MalformedGraph)."""
    nodes: List[Node] = [element_to_node(el) for el in elements]
    edges: List[Edge] = [link_to_edge(link) for link in links]
    return GraphSnapshot(nodes=tuple(nodes), edges=tuple(edges))
