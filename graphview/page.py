import logging

import dash_cytoscape as cyto
from dash import dcc, html

from graphview.errors import ContainerBusy, MissingContainer

logger = logging.getLogger(__name__)

CONTAINER_ID = "cytoscape-graph"
CLEAR_BUTTON_ID = "clear-graph-btn"
RANDOM_BUTTON_ID = "random-graph-btn"
POLL_ID = "availability-poll"
STATUS_ID = "status-box"

button_style = {
    "backgroundColor": "#007BFF",
    "color": "white",
    "border": "none",
    "padding": "10px 16px",
    "marginRight": "10px",
    "borderRadius": "6px",
    "cursor": "pointer",
    "fontWeight": "bold",
    "fontSize": "14px",
    "boxShadow": "0 2px 4px rgba(0,0,0,0.2)",
}
clear_button_style = {**button_style, "backgroundColor": "#6c757d"}

status_style = {
    "marginTop": "10px",
    "padding": "10px",
    "border": "1px solid #999",
    "borderRadius": "5px",
    "width": "400px",
    "backgroundColor": "#f9f9f9",
}


def build_layout(poll_interval_ms=50, max_attempts=200, width=800, height=600):
    """The host page: two trigger buttons, the graph container and a poll timer.

    The container starts empty. The engine fills it once the poll reports
    the page as ready.
    """
    return html.Div([
        html.H2("Graph View"),
        html.Div([
            html.Button("Clear", id=CLEAR_BUTTON_ID, n_clicks=0, style=clear_button_style),
            html.Button("Random Graph", id=RANDOM_BUTTON_ID, n_clicks=0, style=button_style),
        ], style={"marginBottom": "10px"}),
        cyto.Cytoscape(
            id=CONTAINER_ID,
            elements=[],
            layout={"name": "preset"},
            stylesheet=[],
            style={"width": f"{width}px", "height": f"{height}px", "border": "1px solid #ddd"},
            userZoomingEnabled=True,
            userPanningEnabled=True,
            minZoom=0.2,
            maxZoom=2,
        ),
        html.Div("Waiting for the graph renderer...", id=STATUS_ID, style=status_style),
        dcc.Interval(id=POLL_ID, interval=poll_interval_ms, n_intervals=0,
                     max_intervals=max_attempts, disabled=False),
    ], style={"fontFamily": "system-ui, sans-serif", "padding": "20px"})


def _children(component):
    children = getattr(component, "children", None)
    if children is None or isinstance(children, (str, int, float)):
        return []
    if isinstance(children, (list, tuple)):
        return [c for c in children if c is not None and not isinstance(c, (str, int, float))]
    return [children]


class HostPage:
    """Component lookup over a Dash layout plus the container bindings.

    At most one live engine may be bound to a container at a time.
    """

    def __init__(self, layout):
        self.layout = layout
        self._bindings = {}

    def find(self, component_id):
        stack = [self.layout] if self.layout is not None else []
        while stack:
            component = stack.pop()
            if getattr(component, "id", None) == component_id:
                return component
            stack.extend(reversed(_children(component)))
        return None

    def has_container(self, container_id=CONTAINER_ID):
        return self.find(container_id) is not None

    def library_loaded(self, container_id=CONTAINER_ID):
        return isinstance(self.find(container_id), cyto.Cytoscape)

    def bind(self, container_id, engine):
        container = self.find(container_id)
        if container is None:
            raise MissingContainer(container_id)
        current = self._bindings.get(container_id)
        if current is not None and current is not engine:
            raise ContainerBusy(container_id)
        self._bindings[container_id] = engine
        logger.debug("Bound engine %s to container %s", id(engine), container_id)
        return container

    def release(self, container_id, engine):
        if self._bindings.get(container_id) is engine:
            del self._bindings[container_id]
            logger.debug("Released container %s", container_id)

    def bound(self, container_id=CONTAINER_ID):
        return self._bindings.get(container_id)
