import pytest

from goalgraph.messages import join_names, report_messages, syntax_message
from goalgraph.nary import check_consistency, group_constraints
from goalgraph.schema import ConstraintKind, Edge, GraphSnapshot, MalformedGraph, Node, classify
from goalgraph.validate import validate

AND, OR, NOREL, OTHER = (
    ConstraintKind.AND, ConstraintKind.OR, ConstraintKind.NO_RELATIONSHIP, ConstraintKind.OTHER,
)


def _model(*links, actors=()):
    ids = []
    for s, d, _ in links:
        for i in (s, d):
            if i not in ids:
                ids.append(i)
    return GraphSnapshot(
        nodes=tuple(Node(id=i, name=i, actor=i in actors) for i in ids),
        edges=tuple(Edge(src=s, dst=d, type=t) for s, d, t in links),
    )


def test_classify_labels():
    assert classify("AND") is AND
    assert classify("or") is OR
    assert classify("NO RELATIONSHIP") is NOREL
    assert classify("NO_RELATIONSHIP") is NOREL
    assert classify("++") is OTHER
    assert classify("AND|OR") is OTHER
    assert classify(None) is OTHER


def test_editor_labels_classify_exactly():
    # the editor writes these exact spellings
    assert [classify(label) for label in ("AND", "OR", "NO RELATIONSHIP")] == [AND, OR, NOREL]


def test_case_and_spacing_are_widened():
    assert classify("and") is AND
    assert classify(" Or ") is OR
    assert classify("no relationship") is NOREL
    assert classify("ANDOR") is OTHER
    assert classify("AND OR") is OTHER


def test_compound_label_is_split():
    e = Edge(src="a", dst="b", type="AND|OR")
    assert (e.type, e.post_type) == ("AND", "OR")
    assert e.label == "AND|OR"
    assert e.kind is OTHER


def test_edge_accepts_kind_enum():
    assert Edge(src="a", dst="b", type=NOREL).kind is NOREL


def test_same_kinds_are_consistent():
    s = _model(("T1", "G", "AND"), ("T2", "G", "AND"))
    assert check_consistency(s) == []


def test_mixed_kinds_are_one_violation():
    s = _model(("T1", "G", "AND"), ("T2", "G", "OR"))
    (v,) = check_consistency(s)
    assert v.destination == "G"
    assert v.sources == ["T1", "T2"]
    assert [link.kind for link in v.links] == [AND, OR]
    assert [link.edge_index for link in v.links] == [0, 1]


def test_single_nary_link_never_violates():
    for kind in ("AND", "OR", "NO RELATIONSHIP"):
        assert check_consistency(_model(("T1", "G", kind))) == []


def test_violation_keeps_every_member():
    s = _model(("T1", "G", "AND"), ("T2", "G", "OR"), ("T3", "G", "AND"), ("T4", "G", "NO RELATIONSHIP"))
    (v,) = check_consistency(s)
    assert v.sources == ["T1", "T2", "T3", "T4"]
    assert v.kinds == [AND, OR, NOREL]


def test_other_links_never_participate():
    s = _model(("T1", "G", "AND"), ("T2", "G", "++"), ("T3", "G", "precedence"))
    assert check_consistency(s) == []
    assert [link.source for link in group_constraints(s)["G"].links] == ["T1"]


def test_all_other_graph_has_no_violations():
    s = _model(("A", "B", "++"), ("C", "B", "--"), ("B", "A", "makes"), ("A", "A", "x"))
    assert check_consistency(s) == []


def test_evolving_links_are_excluded():
    s = _model(("T1", "G", "AND"), ("T2", "G", "AND|OR"))
    assert check_consistency(s) == []


def test_actor_links_are_excluded():
    s = _model(("T1", "G", "AND"), ("Boss", "G", "OR"), actors={"Boss"})
    assert check_consistency(s) == []


def test_violations_follow_destination_order():
    s = _model(
        ("a", "G2", "OR"), ("b", "G1", "AND"), ("c", "G2", "AND"), ("d", "G1", "OR"),
    )
    assert [v.destination for v in check_consistency(s)] == ["G2", "G1"]


def test_malformed_snapshot_is_rejected():
    s = GraphSnapshot.model_construct(nodes=(Node(id="G"),), edges=(Edge(src="T", dst="G", type="AND"),))
    with pytest.raises(MalformedGraph):
        check_consistency(s)


# -------------------------
# Messages
# -------------------------

def test_join_names():
    assert join_names([]) == ""
    assert join_names(["A"]) == "A"
    assert join_names(["A", "B"]) == "A and B"
    assert join_names(["A", "B", "C"]) == "A, B and C"


def test_syntax_message():
    s = _model(
        ("Task_1", "Goal_0", "AND"), ("Task_2", "Goal_0", "NO RELATIONSHIP"), ("Task_3", "Goal_0", "OR"),
    )
    (v,) = check_consistency(s)
    m = syntax_message(v, s)
    assert m.source_nodes == "Task_1, Task_2 and Task_3"
    assert m.destination == "Goal_0"
    assert m.suggestion == (
        "Have all n-ary links from Task_1, Task_2 and Task_3 to Goal_0 as AND or NO RELATIONSHIP or OR."
    )
    assert "Destination node: Goal_0" in m.text


def test_message_falls_back_to_ids():
    s = GraphSnapshot(
        nodes=(Node(id=1), Node(id=2), Node(id=3, name="Root")),
        edges=(Edge(src=1, dst=3, type="OR"), Edge(src=2, dst=3, type="AND")),
    )
    (m,) = report_messages(validate(s), s)
    assert m.suggestion == "Have all n-ary links from 1 and 2 to Root as OR or AND."
