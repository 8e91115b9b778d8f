# goalgraph/messages.py
from __future__ import annotations

from typing import List

from pydantic import BaseModel

from goalgraph.schema import ConstraintGroup, GraphSnapshot, ValidationReport

CYCLE_TITLE = "Cycle in the graph"
SYNTAX_TITLE = "We found invalid link combinations"


class SyntaxMessage(BaseModel):
    """Human-readable explanation of one inconsistent n-ary group."""
    destination: str
    source_nodes: str
    suggestion: str

    @property
    def text(self) -> str:
        return (
            f"Source nodes: {self.source_nodes}\n"
            f"Destination node: {self.destination}\n"
            f"Suggestion: {self.suggestion}"
        )


def join_names(names: List[str]) -> str:
    """'A', 'A and B', 'A, B and C'."""
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


def syntax_message(group: ConstraintGroup, snapshot: GraphSnapshot) -> SyntaxMessage:
    """
    Build the message for a violation, e.g.
    "Have all n-ary links from Task_1, Task_2 and Task_3 to Goal_0 as AND or OR."
    """
    nodes = snapshot.node_map()
    sources = join_names([nodes[s].display_name for s in group.sources])
    destination = nodes[group.destination].display_name
    kinds = " or ".join(k.value for k in group.kinds)
    return SyntaxMessage(
        destination=destination,
        source_nodes=sources,
        suggestion=f"Have all n-ary links from {sources} to {destination} as {kinds}.",
    )


def report_messages(report: ValidationReport, snapshot: GraphSnapshot) -> List[SyntaxMessage]:
    return [syntax_message(group, snapshot) for group in report.violations]
