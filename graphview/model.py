from dataclasses import dataclass, field
from typing import List, Tuple

import networkx as nx

from graphview.errors import GraphError


@dataclass(frozen=True)
class Node:
    id: str
    label: str

    def to_element(self):
        return {"data": {"id": self.id, "label": self.label}}


@dataclass(frozen=True)
class Edge:
    id: str
    source: str
    target: str
    label: str

    def to_element(self):
        return {
            "data": {
                "id": self.id,
                "source": self.source,
                "target": self.target,
                "label": self.label,
            }
        }


@dataclass(frozen=True)
class Graph:
    """Ordered nodes and edges, validated on construction.

    Edge endpoints must name nodes of the same graph, self-loops are
    rejected, and node ids and edge ids are each unique.
    """

    nodes: Tuple[Node, ...] = field(default_factory=tuple)
    edges: Tuple[Edge, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "edges", tuple(self.edges))

        node_ids = set()
        for node in self.nodes:
            if node.id in node_ids:
                raise GraphError(f"Duplicate node id: {node.id}")
            node_ids.add(node.id)

        edge_ids = set()
        for edge in self.edges:
            if edge.id in edge_ids:
                raise GraphError(f"Duplicate edge id: {edge.id}")
            if edge.source == edge.target:
                raise GraphError(f"Edge {edge.id} is a self-loop on {edge.source}")
            for endpoint in (edge.source, edge.target):
                if endpoint not in node_ids:
                    raise GraphError(f"Edge {edge.id} references unknown node {endpoint}")
            edge_ids.add(edge.id)

    @classmethod
    def empty(cls):
        return cls()

    @classmethod
    def from_elements(cls, elements):
        """Build a graph from a Cytoscape element list (nodes and edges mixed)."""
        nodes: List[Node] = []
        edges: List[Edge] = []
        for element in elements:
            data = element["data"]
            if "source" in data and "target" in data:
                edges.append(Edge(data["id"], data["source"], data["target"], data.get("label", "")))
            else:
                nodes.append(Node(data["id"], data.get("label", data["id"])))
        return cls(nodes, edges)

    def __len__(self):
        return len(self.nodes)

    @property
    def node_ids(self):
        return [node.id for node in self.nodes]

    @property
    def edge_ids(self):
        return [edge.id for edge in self.edges]

    def is_empty(self):
        return not self.nodes and not self.edges

    def to_elements(self):
        # Nodes first: an edge element must never precede its endpoints.
        return [node.to_element() for node in self.nodes] + [edge.to_element() for edge in self.edges]

    def to_networkx(self):
        G = nx.DiGraph()
        for node in self.nodes:
            G.add_node(node.id, label=node.label)
        for edge in self.edges:
            G.add_edge(edge.source, edge.target, id=edge.id, label=edge.label)
        return G


SEED_GRAPH = Graph(
    nodes=[
        Node("a", "Cat"),
        Node("b", "Mammal"),
        Node("c", "Animal"),
        Node("d", "Dog"),
        Node("e", "Pet"),
    ],
    edges=[
        Edge("ab", "a", "b", "is_a"),
        Edge("bc", "b", "c", "is_a"),
        Edge("db", "d", "b", "is_a"),
        Edge("ae", "a", "e", "is_a"),
        Edge("de", "d", "e", "is_a"),
    ],
)
