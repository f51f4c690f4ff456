import argparse
import logging
import random

import dash
from dash.dependencies import Output
from dash_extensions.enrich import DashProxy, Trigger, TriggerTransform

from graphview.config import Settings, configure_logging
from graphview.engine import RenderEngine
from graphview.generator import RandomGraphGenerator
from graphview.lifecycle import LifecycleManager, LifecycleState
from graphview.page import (CLEAR_BUTTON_ID, CONTAINER_ID, POLL_ID, RANDOM_BUTTON_ID, STATUS_ID,
                            HostPage, build_layout)

logger = logging.getLogger(__name__)


def build_manager(settings):
    layout = build_layout(settings.poll_interval_ms, settings.poll_max_attempts,
                          settings.width, settings.height)
    page = HostPage(layout)

    def engine_factory(p):
        return RenderEngine(p, CONTAINER_ID, settings.width, settings.height, seed=settings.seed)

    rng = random.Random(settings.seed) if settings.seed is not None else None
    generator = RandomGraphGenerator(rng=rng)
    return LifecycleManager(page, generator=generator, engine_factory=engine_factory,
                            max_attempts=settings.poll_max_attempts)


def render_outputs(manager):
    props = manager.render()
    polling_done = manager.state is not LifecycleState.WAITING
    return props["elements"], props["layout"], props["stylesheet"], polling_done, manager.status()


def create_app(settings=None, manager=None):
    settings = settings or Settings.from_env()
    manager = manager or build_manager(settings)

    app = DashProxy(__name__, title="Graph View", transforms=[TriggerTransform()])
    app.layout = manager.page.layout

    # ----------- Callbacks -----------
    @app.callback(
        Output(CONTAINER_ID, "elements"),
        Output(CONTAINER_ID, "layout"),
        Output(CONTAINER_ID, "stylesheet"),
        Output(POLL_ID, "disabled"),
        Output(STATUS_ID, "children"),
        Trigger(POLL_ID, "n_intervals"),
        Trigger(CLEAR_BUTTON_ID, "n_clicks"),
        Trigger(RANDOM_BUTTON_ID, "n_clicks"),
        prevent_initial_call=True
    )
    def on_trigger():
        triggered = dash.callback_context.triggered
        if not triggered:
            return (dash.no_update,) * 5
        trigger = triggered[0]["prop_id"].split(".")[0]
        manager.handle(trigger)
        return render_outputs(manager)

    return app


# ----------- Run App -----------
def main(argv=None):
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description="Interactive random graph viewer")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--debug", action="store_true", default=settings.debug)
    args = parser.parse_args(argv)

    settings.host, settings.port, settings.debug = args.host, args.port, args.debug
    configure_logging(settings.log_level, settings.debug)

    app = create_app(settings)
    logger.info("Serving graph view on http://%s:%d", settings.host, settings.port)
    app.run(host=settings.host, port=settings.port, debug=settings.debug, threaded=False)


if __name__ == '__main__':
    main()
