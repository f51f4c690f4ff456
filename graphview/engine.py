import copy
import logging
import random
from enum import Enum

import networkx as nx
import numpy as np

from graphview.errors import ContainerBusy, MissingContainer
from graphview.model import Graph
from graphview.page import CONTAINER_ID

logger = logging.getLogger(__name__)

NODE_SIZE = 30
PADDING = 30

STYLESHEET = [
    {
        "selector": "node",
        "style": {
            "background-color": "#666",
            "label": "data(label)",
            "width": NODE_SIZE,
            "height": NODE_SIZE,
        },
    },
    {
        "selector": "edge",
        "style": {
            "width": 2,
            "line-color": "#ccc",
            "target-arrow-color": "#ccc",
            "target-arrow-shape": "triangle",
            "curve-style": "bezier",
            "label": "data(label)",
        },
    },
]


class EngineState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


def _fit(coords, width, height, padding):
    """Stretch raw layout coordinates over the padded viewport."""
    low = np.array([padding, padding], dtype=float)
    extent = np.array([width - 2 * padding, height - 2 * padding], dtype=float)
    mins = coords.min(axis=0)
    spans = coords.max(axis=0) - mins
    fitted = np.empty_like(coords)
    for axis in range(2):
        if spans[axis] > 0:
            fitted[:, axis] = low[axis] + (coords[:, axis] - mins[axis]) / spans[axis] * extent[axis]
        else:
            fitted[:, axis] = low[axis] + extent[axis] / 2
    return fitted


def _separate(coords, min_distance, lower, upper, rng, iterations=200):
    """Push apart any pair of nodes whose centres are closer than ``min_distance``."""
    for _ in range(iterations):
        delta = coords[:, None, :] - coords[None, :, :]
        dist = np.linalg.norm(delta, axis=-1)
        np.fill_diagonal(dist, np.inf)
        close = dist < min_distance
        if not close.any():
            break
        if (dist == 0).any():
            coords = np.clip(coords + rng.normal(scale=0.5, size=coords.shape), lower, upper)
            continue
        overlap = np.where(close, (min_distance - dist) / 2 + 0.5, 0.0)
        unit = delta / dist[..., None]
        coords = np.clip(coords + (unit * overlap[..., None]).sum(axis=1), lower, upper)
    return coords


def force_layout(graph, width, height, padding=PADDING, node_size=NODE_SIZE, seed=None):
    """Force-directed positions for every node of ``graph``, in pixels.

    networkx's spring layout treats edges as springs and nodes as repelling
    charges. The result is fitted into the padded viewport and then
    de-overlapped so no two nodes touch.
    """
    if not graph.nodes:
        return {}
    ids = graph.node_ids
    pos = nx.spring_layout(graph.to_networkx(), seed=seed)
    coords = _fit(np.array([pos[n] for n in ids], dtype=float), width, height, padding)
    lower = np.array([padding, padding], dtype=float)
    upper = np.array([width - padding, height - padding], dtype=float)
    coords = _separate(coords, node_size, lower, upper, np.random.default_rng(seed))
    return {n: (float(x), float(y)) for n, (x, y) in zip(ids, coords)}


class RenderEngine:
    """One live rendering of a graph in a Cytoscape container.

    ``init`` binds the container and lays out the seed graph,
    ``replace_elements`` swaps the whole graph without moving anything,
    ``relayout`` recomputes positions and ``destroy`` releases the
    container. Failures are logged and reported as ``False``; the last
    good render is kept.
    """

    def __init__(self, page, container_id=CONTAINER_ID, width=800, height=600,
                 padding=PADDING, node_size=NODE_SIZE, seed=None):
        self.page = page
        self.container_id = container_id
        self.width = width
        self.height = height
        self.padding = padding
        self.node_size = node_size
        self.state = EngineState.UNINITIALIZED
        self.graph = Graph.empty()
        self.positions = {}
        self.stylesheet = []
        self._random = random.Random(seed)

    @property
    def is_live(self):
        return self.state is EngineState.READY

    @property
    def layout(self):
        return {"name": "preset", "fit": True, "padding": self.padding}

    def init(self, seed_graph):
        if self.is_live:
            logger.warning("Engine already bound to %s; destroy it first", self.container_id)
            return False
        try:
            self.page.bind(self.container_id, self)
        except (MissingContainer, ContainerBusy) as e:
            logger.error("Cannot initialize graph engine: %s", e)
            return False

        self.stylesheet = copy.deepcopy(STYLESHEET)
        self.graph = seed_graph
        self.positions = {}
        self.state = EngineState.READY
        self.relayout()
        logger.info("Engine ready on %s with %d nodes and %d edges",
                    self.container_id, len(self.graph.nodes), len(self.graph.edges))
        return True

    def replace_elements(self, graph):
        if not self.is_live:
            logger.warning("replace_elements called on an uninitialized engine")
            return False
        if not self.page.has_container(self.container_id):
            logger.error("Cannot replace elements: %s", MissingContainer(self.container_id))
            return False
        self.graph = graph
        self.positions = {}
        logger.debug("Replaced elements: %d nodes, %d edges", len(graph.nodes), len(graph.edges))
        return True

    def relayout(self):
        if not self.is_live:
            logger.warning("relayout called on an uninitialized engine")
            return False
        self.positions = force_layout(self.graph, self.width, self.height, self.padding,
                                      self.node_size, seed=self._random.randrange(2 ** 31))
        return True

    def destroy(self):
        if not self.is_live:
            return
        self.page.release(self.container_id, self)
        self.graph = Graph.empty()
        self.positions = {}
        self.stylesheet = []
        self.state = EngineState.UNINITIALIZED
        logger.info("Engine on %s destroyed", self.container_id)

    def elements(self):
        elements = []
        for node in self.graph.nodes:
            element = node.to_element()
            if node.id in self.positions:
                x, y = self.positions[node.id]
                element["position"] = {"x": x, "y": y}
            elements.append(element)
        elements.extend(edge.to_element() for edge in self.graph.edges)
        return elements
