import random

import pytest

from graphview.engine import RenderEngine
from graphview.generator import RandomGraphGenerator
from graphview.lifecycle import LifecycleManager
from graphview.page import HostPage, build_layout


@pytest.fixture
def page():
    return HostPage(build_layout())


@pytest.fixture
def engine(page):
    return RenderEngine(page, seed=7)


@pytest.fixture
def manager(page):
    return LifecycleManager(
        page,
        generator=RandomGraphGenerator(rng=random.Random(42)),
        engine_factory=lambda p: RenderEngine(p, seed=7),
        max_attempts=5,
    )
