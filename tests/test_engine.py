"""
Render engine tests: state machine, layout guarantees and failure handling.
"""

import itertools
import logging
import math
import random

import numpy as np
import pytest
from dash import html

from graphview.engine import NODE_SIZE, PADDING, STYLESHEET, EngineState, RenderEngine, _separate, force_layout
from graphview.generator import RandomGraphGenerator
from graphview.model import SEED_GRAPH, Edge, Graph, Node
from graphview.page import CONTAINER_ID, HostPage


def _assert_laid_out(engine):
    coords = [engine.positions[n] for n in engine.graph.node_ids]
    for x, y in coords:
        assert PADDING - 1e-6 <= x <= engine.width - PADDING + 1e-6
        assert PADDING - 1e-6 <= y <= engine.height - PADDING + 1e-6
    for (x1, y1), (x2, y2) in itertools.combinations(coords, 2):
        assert math.hypot(x1 - x2, y1 - y2) >= NODE_SIZE


class TestEngineStates:

    def test_init_renders_seed_graph(self, engine):
        assert engine.init(SEED_GRAPH)
        assert engine.state is EngineState.READY

        elements = engine.elements()
        nodes = [el for el in elements if "source" not in el["data"]]
        edges = [el for el in elements if "source" in el["data"]]
        assert sorted(n["data"]["label"] for n in nodes) == sorted(["Cat", "Mammal", "Animal", "Dog", "Pet"])
        assert len(edges) == 5
        assert all(e["data"]["label"] == "is_a" for e in edges)
        assert all("position" in n for n in nodes)

    def test_init_applies_stylesheet_and_preset_layout(self, engine):
        engine.init(SEED_GRAPH)
        assert engine.stylesheet == STYLESHEET
        node_style = engine.stylesheet[0]["style"]
        edge_style = engine.stylesheet[1]["style"]
        assert node_style["label"] == "data(label)"
        assert node_style["width"] == node_style["height"] == NODE_SIZE
        assert edge_style["target-arrow-shape"] == "triangle"
        assert edge_style["curve-style"] == "bezier"
        assert edge_style["label"] == "data(label)"
        assert engine.layout == {"name": "preset", "fit": True, "padding": PADDING}

    def test_replace_elements_does_not_relayout(self, engine):
        engine.init(SEED_GRAPH)
        graph = RandomGraphGenerator(rng=random.Random(2)).generate()
        assert engine.replace_elements(graph)
        assert engine.graph is graph
        assert engine.positions == {}
        assert all("position" not in el for el in engine.elements())

    def test_clear_then_relayout_leaves_nothing(self, engine):
        engine.init(SEED_GRAPH)
        engine.replace_elements(Graph.empty())
        assert engine.relayout()
        assert engine.elements() == []
        assert engine.graph.is_empty()

    def test_relayout_keeps_graph(self, engine):
        engine.init(SEED_GRAPH)
        engine.relayout()
        assert engine.graph == SEED_GRAPH
        _assert_laid_out(engine)

    def test_destroy_resets_engine(self, engine, page):
        engine.init(SEED_GRAPH)
        engine.destroy()
        assert engine.state is EngineState.UNINITIALIZED
        assert engine.elements() == []
        assert engine.stylesheet == []
        assert page.bound(CONTAINER_ID) is None

    def test_destroy_when_uninitialized_is_noop(self, engine):
        engine.destroy()
        assert engine.state is EngineState.UNINITIALIZED

    def test_init_destroy_init_leaves_one_live_instance(self, page):
        first = RenderEngine(page, seed=1)
        assert first.init(SEED_GRAPH)
        first.destroy()
        second = RenderEngine(page, seed=1)
        assert second.init(SEED_GRAPH)

        assert page.bound(CONTAINER_ID) is second
        assert [e.is_live for e in (first, second)] == [False, True]

    def test_second_engine_cannot_bind_live_container(self, page, caplog):
        first = RenderEngine(page, seed=1)
        first.init(SEED_GRAPH)
        second = RenderEngine(page, seed=1)
        with caplog.at_level(logging.ERROR, logger="graphview.engine"):
            assert not second.init(SEED_GRAPH)
        assert "already bound" in caplog.text
        assert page.bound(CONTAINER_ID) is first
        assert not second.is_live


class TestMissingContainer:

    def test_init_without_container_is_logged(self, caplog):
        page = HostPage(html.Div([html.Button("Clear", id="clear-graph-btn")]))
        engine = RenderEngine(page)
        with caplog.at_level(logging.ERROR, logger="graphview.engine"):
            assert not engine.init(SEED_GRAPH)
        assert "not found" in caplog.text
        assert engine.state is EngineState.UNINITIALIZED

    def test_replace_without_container_keeps_last_render(self, engine, page, caplog):
        engine.init(SEED_GRAPH)
        before = engine.elements()
        page.layout = html.Div()
        with caplog.at_level(logging.ERROR, logger="graphview.engine"):
            assert not engine.replace_elements(Graph.empty())
        assert engine.elements() == before
        assert engine.is_live

    def test_operations_before_init_are_rejected(self, engine):
        assert not engine.replace_elements(SEED_GRAPH)
        assert not engine.relayout()


class TestForceLayout:

    def test_empty_graph(self):
        assert force_layout(Graph.empty(), 800, 600) == {}

    def test_single_node_is_centred(self):
        positions = force_layout(Graph([Node("a", "A")]), 800, 600, seed=1)
        assert positions == {"a": (400.0, 300.0)}

    @pytest.mark.parametrize("seed", range(10))
    def test_generated_graphs_fit_without_overlap(self, page, seed):
        engine = RenderEngine(page, seed=seed)
        engine.init(SEED_GRAPH)
        engine.replace_elements(RandomGraphGenerator(rng=random.Random(seed)).generate())
        engine.relayout()
        assert set(engine.positions) == set(engine.graph.node_ids)
        _assert_laid_out(engine)

    def test_small_viewport_still_contains_nodes(self):
        graph = Graph([Node("a", "A"), Node("b", "B")], [Edge("ab", "a", "b", "")])
        positions = force_layout(graph, 200, 100, seed=3)
        for x, y in positions.values():
            assert PADDING <= x <= 200 - PADDING
            assert PADDING <= y <= 100 - PADDING

    def test_coincident_nodes_on_the_edge_stay_inside(self):
        """Nodes stacked on the viewport corner are jittered apart without leaving it."""
        lower = np.array([PADDING, PADDING], dtype=float)
        upper = np.array([800 - PADDING, 600 - PADDING], dtype=float)
        coords = np.tile(lower, (4, 1))
        separated = _separate(coords, NODE_SIZE, lower, upper, np.random.default_rng(0), iterations=1)
        assert (separated >= lower).all()
        assert (separated <= upper).all()

        separated = _separate(coords, NODE_SIZE, lower, upper, np.random.default_rng(0))
        assert (separated >= lower).all()
        assert (separated <= upper).all()
