from graphview.errors import ContainerBusy, GraphError, GraphViewError, MissingContainer, MissingDependency
from graphview.generator import RandomGraphGenerator
from graphview.model import SEED_GRAPH, Edge, Graph, Node

__all__ = [
    "ContainerBusy",
    "Edge",
    "Graph",
    "GraphError",
    "GraphViewError",
    "MissingContainer",
    "MissingDependency",
    "Node",
    "RandomGraphGenerator",
    "SEED_GRAPH",
]
