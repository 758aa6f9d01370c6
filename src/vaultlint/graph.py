"""Read-only query layer over a built :class:`~vaultlint.index.VaultIndex`.

Node lookups go through the index's identity map; incoming references through
a reverse-edge map built once on construction.  :meth:`VaultGraph.to_networkx`
exports the reference graph for layout or analysis with :mod:`networkx`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import networkx as nx

from vaultlint.node import FileNode, ReferenceEdge

if TYPE_CHECKING:
    from vaultlint.index import VaultIndex


@dataclass
class Subgraph:
    """Nodes reached from a root plus every index edge between them."""

    root: str
    depth: int
    nodes: list[FileNode] = field(default_factory=list)
    edges: list[ReferenceEdge] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "depth": self.depth,
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }


class VaultGraph:
    """Node/edge queries and multi-hop traversal over one index."""

    def __init__(self, index: "VaultIndex") -> None:
        self.index = index
        self._reverse: dict[str, list[ReferenceEdge]] = {}
        for edge in index.edges:
            self._reverse.setdefault(edge.target_id, []).append(edge)

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def nodes(self) -> list[FileNode]:
        return list(self.index.files.values())

    def nodes_by_type(self, type_name: str) -> list[FileNode]:
        return [n for n in self.index.files.values() if n.type == type_name]

    def node_by_id(self, identity: str) -> FileNode | None:
        file_path = self.index.id_index.get(identity)
        if file_path is None:
            return None
        return self.index.files.get(file_path)

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def references_from(self, file_path: str) -> list[ReferenceEdge]:
        """Outgoing edges of *file_path* (linear scan)."""
        return [e for e in self.index.edges if e.source_file == file_path]

    def references_to(self, identity: str) -> list[ReferenceEdge]:
        """Incoming edges naming *identity*."""
        return list(self._reverse.get(identity, []))

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def subgraph(self, root_id: str, depth: int) -> Subgraph:
        """Breadth-first neighbourhood of *root_id*, following edges both ways.

        Each hop expands the frontier along outgoing references and then along
        incoming ones.  ``depth=0`` yields just the root and no edges, even when
        the root references itself; an unknown root yields an empty result.
        """
        if depth < 0:
            raise ValueError(f"depth must be >= 0, got {depth}")

        result = Subgraph(root=root_id, depth=depth)
        root = self.node_by_id(root_id)
        if root is None:
            return result
        if depth == 0:
            result.nodes = [root]
            return result

        visited: dict[str, FileNode] = {root.file_path: root}
        frontier = [root]
        for _ in range(depth):
            next_frontier: list[FileNode] = []
            for node in frontier:
                for edge in self.references_from(node.file_path):
                    target = self.node_by_id(edge.target_id)
                    if target is not None and target.file_path not in visited:
                        visited[target.file_path] = target
                        next_frontier.append(target)
                if node.id is None:
                    continue
                for edge in self.references_to(node.id):
                    source = self.index.files.get(edge.source_file)
                    if source is not None and source.file_path not in visited:
                        visited[source.file_path] = source
                        next_frontier.append(source)
            if not next_frontier:
                break
            frontier = next_frontier

        result.nodes = list(visited.values())
        result.edges = [
            e
            for e in self.index.edges
            if e.source_file in visited and self.index.id_index.get(e.target_id) in visited
        ]
        return result

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(
        self,
        query: str,
        *,
        type_name: str | None = None,
        limit: int | None = None,
    ) -> list[FileNode]:
        """Case-insensitive substring match on id, title, type, status and tags."""
        q = query.lower()
        matches = [
            n
            for n in self.index.files.values()
            if (type_name is None or n.type == type_name) and _node_matches(n, q)
        ]
        return matches if limit is None else matches[:limit]

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_networkx(self) -> nx.MultiDiGraph:
        """Return the reference graph as a :class:`networkx.MultiDiGraph`.

        Nodes are file paths.  Edges whose target id does not resolve point at
        a bare node keyed by that id and flagged ``missing=True``.
        """
        G: nx.MultiDiGraph = nx.MultiDiGraph()
        for node in self.index.files.values():
            G.add_node(
                node.file_path,
                id=node.id,
                type=node.type,
                title=node.title,
                is_valid=node.is_valid,
                missing=False,
            )
        for edge in self.index.edges:
            target = self.index.id_index.get(edge.target_id)
            if target is None:
                target = edge.target_id
                if target not in G:
                    G.add_node(target, id=edge.target_id, type=None, title=None, is_valid=False, missing=True)
            G.add_edge(edge.source_file, target, field=edge.field)
        return G


def _node_matches(node: FileNode, q: str) -> bool:
    candidates: list[str] = [node.id or "", node.title or "", node.type or ""]
    fm = node.frontmatter or {}
    status = fm.get("status")
    if isinstance(status, str):
        candidates.append(status)
    tags = fm.get("tags")
    if isinstance(tags, list):
        candidates.append(" ".join(str(t) for t in tags))
    return any(q in c.lower() for c in candidates)
