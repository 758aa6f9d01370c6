"""Unit tests for vaultlint.graph.VaultGraph."""

import networkx as nx
import pytest

from vaultlint.graph import VaultGraph
from vaultlint.index import build_index


def _doc(type_: str, id_: str, title: str, projects=(), status=None, tags=()):
    lines = ["---", f"type: {type_}", f"id: {id_}", f"title: {title}"]
    if status:
        lines.append(f"status: {status}")
    if projects:
        lines.append("projects:")
        lines.extend(f'  - "[[{p}]]"' for p in projects)
    if tags:
        lines.append("tags:")
        lines.extend(f"  - {t}" for t in tags)
    lines += ["---", ""]
    return "\n".join(lines)


@pytest.fixture()
def graph(registry) -> VaultGraph:
    # proj-a <- plan-1 <- task-1 ; proj-a <- dec-1 ; task-2 -> missing
    files = [
        ("proj-a.md", _doc("project", "proj-a", "Project A", status="active", tags=["core"])),
        ("plan-1.md", _doc("plan", "plan-1", "Launch plan", ["proj-a"], status="draft")),
        ("task-1.md", _doc("task", "task-1", "Write docs", ["plan-1"], status="todo")),
        ("dec-1.md", _doc("decision", "dec-1", "Use YAML", ["proj-a"])),
        ("task-2.md", _doc("task", "task-2", "Orphan", ["ghost"], status="done")),
        ("notes.md", "plain text"),
    ]
    return VaultGraph(build_index(files, registry))


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


class TestNodes:
    def test_nodes(self, graph: VaultGraph):
        assert len(graph.nodes()) == 6

    def test_nodes_by_type(self, graph: VaultGraph):
        assert [n.id for n in graph.nodes_by_type("task")] == ["task-1", "task-2"]

    def test_node_by_id(self, graph: VaultGraph):
        assert graph.node_by_id("plan-1").file_path == "plan-1.md"
        assert graph.node_by_id("nope") is None


# ---------------------------------------------------------------------------
# Edges
# ---------------------------------------------------------------------------


class TestEdges:
    def test_references_from(self, graph: VaultGraph):
        edges = graph.references_from("plan-1.md")
        assert [(e.target_id, e.field) for e in edges] == [("proj-a", "projects")]

    def test_references_to(self, graph: VaultGraph):
        sources = sorted(e.source_file for e in graph.references_to("proj-a"))
        assert sources == ["dec-1.md", "plan-1.md"]

    def test_references_to_missing_target(self, graph: VaultGraph):
        assert [e.source_file for e in graph.references_to("ghost")] == ["task-2.md"]

    def test_forward_reverse_symmetry(self, graph: VaultGraph):
        for node in graph.nodes():
            for edge in graph.references_from(node.file_path):
                assert edge in graph.references_to(edge.target_id)
        for edge in graph.index.edges:
            assert edge in graph.references_from(edge.source_file)


# ---------------------------------------------------------------------------
# Subgraph
# ---------------------------------------------------------------------------


class TestSubgraph:
    def test_depth_zero_is_root_only(self, graph: VaultGraph):
        sub = graph.subgraph("proj-a", 0)
        assert [n.id for n in sub.nodes] == ["proj-a"]
        assert sub.edges == []

    def test_depth_zero_self_reference_has_no_edges(self, registry):
        index = build_index([("p.md", _doc("project", "p1", "Self", ["p1"], status="active"))], registry)
        sub = VaultGraph(index).subgraph("p1", 0)
        assert [n.file_path for n in sub.nodes] == ["p.md"]
        assert sub.edges == []

    def test_self_reference_edge_from_depth_one(self, registry):
        index = build_index([("p.md", _doc("project", "p1", "Self", ["p1"], status="active"))], registry)
        sub = VaultGraph(index).subgraph("p1", 1)
        assert [n.file_path for n in sub.nodes] == ["p.md"]
        assert [(e.source_file, e.target_id) for e in sub.edges] == [("p.md", "p1")]

    def test_depth_one_follows_both_directions(self, graph: VaultGraph):
        sub = graph.subgraph("plan-1", 1)
        assert {n.id for n in sub.nodes} == {"plan-1", "proj-a", "task-1"}
        assert {(e.source_file, e.target_id) for e in sub.edges} == {
            ("plan-1.md", "proj-a"),
            ("task-1.md", "plan-1"),
        }

    def test_depth_two(self, graph: VaultGraph):
        sub = graph.subgraph("task-1", 2)
        assert {n.id for n in sub.nodes} == {"task-1", "plan-1", "proj-a"}
        sub = graph.subgraph("task-1", 3)
        assert {n.id for n in sub.nodes} == {"task-1", "plan-1", "proj-a", "dec-1"}

    def test_missing_targets_are_not_nodes(self, graph: VaultGraph):
        sub = graph.subgraph("task-2", 2)
        assert [n.id for n in sub.nodes] == ["task-2"]
        assert sub.edges == []

    def test_unknown_root(self, graph: VaultGraph):
        sub = graph.subgraph("nope", 3)
        assert sub.nodes == [] and sub.edges == []

    def test_negative_depth(self, graph: VaultGraph):
        with pytest.raises(ValueError):
            graph.subgraph("proj-a", -1)

    def test_to_dict(self, graph: VaultGraph):
        data = graph.subgraph("plan-1", 1).to_dict()
        assert data["root"] == "plan-1"
        assert data["depth"] == 1
        assert len(data["nodes"]) == 3


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------


class TestSearch:
    def test_title_match_case_insensitive(self, graph: VaultGraph):
        assert [n.id for n in graph.search("LAUNCH")] == ["plan-1"]

    def test_status_and_tags(self, graph: VaultGraph):
        assert [n.id for n in graph.search("core")] == ["proj-a"]
        assert [n.id for n in graph.search("done")] == ["task-2"]

    def test_type_filter_and_limit(self, graph: VaultGraph):
        assert [n.id for n in graph.search("task", type_name="task")] == ["task-1", "task-2"]
        assert len(graph.search("task", limit=1)) == 1


# ---------------------------------------------------------------------------
# networkx export
# ---------------------------------------------------------------------------


class TestToNetworkx:
    def test_graph_shape(self, graph: VaultGraph):
        G = graph.to_networkx()
        assert isinstance(G, nx.MultiDiGraph)
        assert G.has_edge("plan-1.md", "proj-a.md")
        assert G.nodes["ghost"]["missing"] is True
        assert G.nodes["proj-a.md"]["missing"] is False
        assert G.number_of_edges() == len(graph.index.edges)

    def test_edge_field_attribute(self, graph: VaultGraph):
        G = graph.to_networkx()
        data = G.get_edge_data("task-1.md", "plan-1.md")
        assert [d["field"] for d in data.values()] == ["projects"]
