from surveyor.artifact import Relationship, RelationshipGraph, RelationshipType, relate, sort_relationships
from surveyor.pkg import Package
from surveyor.source import Coordinates

OWNS = RelationshipType.OWNERSHIP_BY_FILE_OVERLAP
EVIDENT = RelationshipType.EVIDENT_BY


def test_sort_relationships_orders_by_parent_child_type():
    relationships = [
        Relationship("b", "a", OWNS),
        Relationship("a", "c", OWNS),
        Relationship("a", "b", OWNS),
        Relationship("a", "b", EVIDENT),
    ]
    assert [(r.from_id, r.to_id, r.type) for r in sort_relationships(relationships)] == [
        ("a", "b", EVIDENT),
        ("a", "b", OWNS),
        ("a", "c", OWNS),
        ("b", "a", OWNS),
    ]


def test_relationship_identity_ignores_data():
    assert Relationship("a", "b", OWNS, {"files": ["/x"]}) == Relationship("a", "b", OWNS, {"files": ["/y"]})
    assert len({Relationship("a", "b", OWNS, {"files": []}), Relationship("a", "b", OWNS)}) == 1


def test_relate_accepts_artifacts_and_ids():
    p = Package(name="six", version="1.16.0")
    c = Coordinates("/usr/lib/six.py")
    rel = relate(p, c, EVIDENT)
    assert rel.from_id == p.compute_id()
    assert rel.to_id == c.id()
    assert relate("x", "y", OWNS) == Relationship("x", "y", OWNS)


def test_graph_queries():
    graph = RelationshipGraph(
        [
            Relationship("deb", "py", OWNS),
            Relationship("deb", "file", EVIDENT),
            Relationship("py", "file", EVIDENT),
            Relationship("deb", "py", EVIDENT),
        ]
    )
    assert graph.children_of("deb") == ["file", "py"]
    assert graph.children_of("deb", OWNS) == ["py"]
    assert graph.parents_of("file") == ["deb", "py"]
    assert graph.parents_of("missing") == []
    assert graph.has_relationship("deb", "py")
    assert graph.has_relationship("deb", "py", OWNS)
    assert not graph.has_relationship("py", "deb")
    assert len(graph.relationships()) == 4


def test_graph_allows_cycles():
    graph = RelationshipGraph([Relationship("a", "b", OWNS), Relationship("b", "a", OWNS)])
    assert graph.children_of("a") == ["b"]
    assert graph.children_of("b") == ["a"]
