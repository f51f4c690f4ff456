import logging
from enum import Enum

from graphview.engine import RenderEngine
from graphview.errors import MissingContainer, MissingDependency
from graphview.generator import RandomGraphGenerator
from graphview.model import SEED_GRAPH, Graph
from graphview.page import CLEAR_BUTTON_ID, CONTAINER_ID, POLL_ID, RANDOM_BUTTON_ID

logger = logging.getLogger(__name__)


class LifecycleState(Enum):
    WAITING = "waiting"
    READY = "ready"
    FAILED = "failed"


class LifecycleManager:
    """Owns the single render engine and wires page triggers to it.

    The availability poll is bounded: after ``max_attempts`` misses the
    manager gives up and stays in ``FAILED`` until a trigger manages to
    initialize the engine.
    """

    def __init__(self, page, generator=None, engine_factory=None, seed_graph=SEED_GRAPH,
                 container_id=CONTAINER_ID, max_attempts=200):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.page = page
        self.generator = generator or RandomGraphGenerator()
        self.engine_factory = engine_factory or (lambda p: RenderEngine(p, container_id))
        self.seed_graph = seed_graph
        self.container_id = container_id
        self.max_attempts = max_attempts
        self.engine = None
        self.attempts = 0
        self.state = LifecycleState.WAITING

    def check_available(self):
        if not self.page.has_container(self.container_id):
            raise MissingContainer(self.container_id)
        if not self.page.library_loaded(self.container_id):
            raise MissingDependency(f"No graph renderer behind '{self.container_id}'")

    def poll(self):
        """Run one availability check. Returns True once polling can stop.

        The page checks look at the server-side layout, which is complete from
        the start. What actually gates readiness is the first ``dcc.Interval``
        tick: the browser only sends it once the Dash renderer and the
        Cytoscape bundle have loaded and mounted the container.
        """
        if self.state is not LifecycleState.WAITING:
            return True
        self.attempts += 1
        try:
            self.check_available()
        except (MissingDependency, MissingContainer) as e:
            return self._miss(e)

        if not self.initialize():
            return self._miss("engine initialization failed")
        return True

    def _miss(self, reason):
        if self.attempts >= self.max_attempts:
            self.state = LifecycleState.FAILED
            logger.error("Graph renderer unavailable after %d attempts: %s", self.attempts, reason)
            return True
        logger.debug("Graph renderer not ready (attempt %d/%d): %s", self.attempts, self.max_attempts, reason)
        return False

    def initialize(self, seed_graph=None):
        """Destroy the current engine, if any, then create and init a new one.

        Without a container nothing is destroyed and the current render stays.
        """
        if not self.page.has_container(self.container_id):
            logger.error("Cannot initialize graph engine: %s", MissingContainer(self.container_id))
            return False
        if self.engine is not None:
            self.engine.destroy()
            self.engine = None
            self.state = LifecycleState.WAITING

        engine = self.engine_factory(self.page)
        if not engine.init(seed_graph if seed_graph is not None else self.seed_graph):
            return False
        self.engine = engine
        self.state = LifecycleState.READY
        return True

    def shutdown(self):
        if self.engine is not None:
            self.engine.destroy()
            self.engine = None
            self.state = LifecycleState.WAITING

    def clear(self):
        if self.engine is None:
            logger.info("Nothing to clear: no graph rendered yet")
            return False
        return self.engine.replace_elements(Graph.empty())

    def randomize(self):
        if self.engine is None:
            logger.info("No engine yet; rendering the seed graph instead")
            return self.initialize()
        graph = self.generator.generate()
        if not self.engine.replace_elements(graph):
            return False
        return self.engine.relayout()

    def handle(self, trigger):
        """Dispatch a page trigger. Never raises; returns whether it succeeded."""
        actions = {
            POLL_ID: self.poll,
            CLEAR_BUTTON_ID: self.clear,
            RANDOM_BUTTON_ID: self.randomize,
        }
        action = actions.get(trigger)
        if action is None:
            logger.warning("Ignoring unknown trigger %r", trigger)
            return False
        try:
            return action()
        except Exception:
            logger.exception("Action for %s failed; keeping the last render", trigger)
            return False

    def render(self):
        """Cytoscape props for the current engine, or an empty canvas."""
        if self.engine is None:
            return {"elements": [], "layout": {"name": "preset"}, "stylesheet": []}
        return {
            "elements": self.engine.elements(),
            "layout": self.engine.layout,
            "stylesheet": self.engine.stylesheet,
        }

    def status(self):
        if self.state is LifecycleState.FAILED:
            return f"Graph renderer unavailable after {self.attempts} attempts."
        if self.engine is None:
            return "Waiting for the graph renderer..."
        graph = self.engine.graph
        return f"{len(graph.nodes)} nodes, {len(graph.edges)} edges"
