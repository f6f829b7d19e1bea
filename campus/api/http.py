from __future__ import annotations

from fastapi import APIRouter, HTTPException

from ..schemas import PlayerDebug, WorldDescriptor
from ..services.game_service import GameService


def create_http_router(game: GameService) -> APIRouter:
    router = APIRouter()

    @router.get("/api/world", response_model=WorldDescriptor)
    async def get_world() -> WorldDescriptor:
        return WorldDescriptor(**game.world.config.to_descriptor())

    @router.get("/api/debug/session/{session_id}", response_model=PlayerDebug)
    async def debug_session(session_id: str) -> PlayerDebug:
        player = game.get_player(session_id)
        if not player:
            raise HTTPException(status_code=404, detail="Session not found")
        x, y = player.position()
        kx, ky = player.knockback()
        return PlayerDebug(
            id=player.player_id,
            name=player.name,
            active=player.active,
            roomId=player.space.room_id,
            subroomId=player.space.subroom_id,
            x=x,
            y=y,
            equipped=player.equipped,
            knockback={"x": kx, "y": ky},
        )

    return router
