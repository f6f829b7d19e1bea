import asyncio
import inspect
import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from campus.config import Settings  # noqa: E402
from campus.services.game_service import GameService  # noqa: E402
from campus.sessions import SessionStore  # noqa: E402
from campus.world import WorldEngine, build_world  # noqa: E402


def pytest_configure(config):
    config.addinivalue_line(
        "markers",
        "asyncio: run test inside a dedicated asyncio event loop without pytest-asyncio.",
    )


def pytest_pyfunc_call(pyfuncitem):
    if inspect.iscoroutinefunction(pyfuncitem.obj):
        loop = asyncio.new_event_loop()
        try:
            # funcargs also carries autouse and indirect fixtures.
            funcargs = {
                name: pyfuncitem.funcargs[name]
                for name in pyfuncitem._fixtureinfo.argnames
            }
            loop.run_until_complete(pyfuncitem.obj(**funcargs))
        finally:
            loop.close()
        return True
    return None


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


TEST_LAYOUT = {
    "width": 2000,
    "height": 1200,
    "spawn": {"x": 1000, "y": 600},
    "obstacles": [
        {"x": 1200, "y": 100, "w": 200, "h": 200, "label": "Hall"},
    ],
    "rooms": [
        {
            "id": "gym",
            "name": "Gymnasium",
            "enter": {"x": 1250, "y": 300, "w": 100, "h": 40},
            "interior": {"w": 800, "h": 500, "spawn": {"x": 400, "y": 450}},
            "subrooms": [
                {"id": "locker", "name": "Locker Room", "interior": {"w": 300, "h": 200}},
                {"id": "court", "name": "Court", "interior": {"w": 600, "h": 400}},
            ],
        },
        {
            "id": "library",
            "name": "Library",
            "enter": {"x": 100, "y": 100, "w": 100, "h": 40},
            "interior": {"w": 600, "h": 400},
        },
    ],
}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def world_config():
    return build_world(TEST_LAYOUT)


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def engine(world_config, store, clock):
    return WorldEngine(world_config, store, clock=clock)


@pytest.fixture
def game(engine, store):
    return GameService(engine, store, Settings(), rng=random.Random(7))


@pytest.fixture
def join(game):
    """Connect a session and join it under a name; returns the player record."""

    def _join(session_id, name=None):
        game.connect(session_id)
        result = game.join(session_id, name or session_id)
        assert result is not None and result.accepted
        return game.get_player(session_id)

    return _join
