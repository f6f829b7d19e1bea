from __future__ import annotations

import asyncio
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.http import create_http_router
from .api.ws import create_websocket_endpoint
from .config import Settings, load_settings
from .services.connection_manager import ConnectionManager
from .services.game_service import GameService
from .services.ticker import DuplicateSweeper, TickDriver
from .sessions import SessionStore
from .world import WorldEngine, WorldLoader

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None, background_tasks: bool = True
) -> FastAPI:
    settings = settings or load_settings()

    # Raises WorldConfigError on inconsistent campus data; the app never starts.
    config = WorldLoader(
        settings.world_file, settings.physics.player_radius
    ).load()
    sessions = SessionStore()
    world = WorldEngine(
        config,
        sessions,
        physics=settings.physics,
        chat=settings.chat,
        toys=settings.toys,
    )
    game = GameService(world, sessions, settings)
    connections = ConnectionManager()

    app = FastAPI(title="Campus Commons")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.game = game
    app.state.connections = connections

    app.include_router(create_http_router(game))
    app.websocket("/ws")(create_websocket_endpoint(game, connections))

    if background_tasks:
        ticker = TickDriver(world, connections)
        sweeper = DuplicateSweeper(game, connections, settings.sweep_interval)

        @app.on_event("startup")
        async def start_background_tasks() -> None:
            logger.info(
                "Simulation running at %d Hz, duplicate sweep every %.0fs",
                settings.physics.tick_rate,
                settings.sweep_interval,
            )
            app.state.tasks = [
                asyncio.create_task(ticker.run()),
                asyncio.create_task(sweeper.run()),
            ]

        @app.on_event("shutdown")
        async def stop_background_tasks() -> None:
            for task in getattr(app.state, "tasks", []):
                task.cancel()

    return app


def run() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(settings)
    logger.info("Listening on http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
