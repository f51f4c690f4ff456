class GraphViewError(Exception):
    """Base class for graphview errors."""


class GraphError(GraphViewError, ValueError):
    """A graph violates its referential invariants."""


class MissingDependency(GraphViewError):
    """The rendering library is not available yet."""


class MissingContainer(GraphViewError):
    """The container component is not on the host page."""

    def __init__(self, container_id):
        super().__init__(f"Container '{container_id}' not found on the page")
        self.container_id = container_id


class ContainerBusy(GraphViewError):
    """Another live engine is already bound to the container."""

    def __init__(self, container_id):
        super().__init__(f"Container '{container_id}' is already bound to a live engine")
        self.container_id = container_id
