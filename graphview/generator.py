import logging
import random

from graphview.model import Edge, Graph, Node

logger = logging.getLogger(__name__)

EDGE_LABEL = "→"


class RandomGraphGenerator:
    """Builds small random directed graphs.

    Every node gets between ``min_degree`` and ``max_degree`` outgoing
    edges to distinct other nodes. The out-degree is clamped to ``n - 1``
    so the rejection sampling always terminates, even for three nodes.
    """

    def __init__(self, min_nodes=3, max_nodes=10, min_degree=1, max_degree=3, rng=None):
        if min_nodes < 2 or max_nodes < min_nodes:
            raise ValueError(f"Invalid node count range [{min_nodes}, {max_nodes}]")
        if min_degree < 1 or max_degree < min_degree:
            raise ValueError(f"Invalid out-degree range [{min_degree}, {max_degree}]")
        self.min_nodes = min_nodes
        self.max_nodes = max_nodes
        self.min_degree = min_degree
        self.max_degree = max_degree
        self.rng = rng or random.Random()

    def generate(self, node_count=None):
        n = node_count if node_count is not None else self.rng.randint(self.min_nodes, self.max_nodes)
        if n < 2:
            raise ValueError(f"Cannot draw edges between {n} node(s)")

        nodes = [Node(f"n{i}", f"Node {i}") for i in range(n)]

        edges = []
        for i in range(n):
            k = min(self.rng.randint(self.min_degree, self.max_degree), n - 1)
            connected = set()
            while len(connected) < k:
                target = self.rng.randint(0, n - 1)
                if target == i or target in connected:
                    continue
                connected.add(target)
                edges.append(Edge(f"e{i}_{target}", nodes[i].id, nodes[target].id, EDGE_LABEL))

        logger.debug("Generated graph with %d nodes and %d edges", n, len(edges))
        return Graph(nodes, edges)
