"""FastAPI 应用定义"""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ..core.rules import DOWN
from .controller import MazeController, make_mode


class EnterRequest(BaseModel):
    mode: Literal["reskin", "map", "generate"]
    map_id: Optional[int] = None
    x: Optional[int] = None
    y: Optional[int] = None
    direction: int = DOWN
    size: Optional[int] = None
    retry: Optional[str] = None
    quit: Optional[str] = None
    event_id: Optional[int] = None


class ExitRequest(BaseModel):
    outcome: Literal["success", "fail"]


class ToggleRequest(BaseModel):
    retry: Optional[str] = None
    quit: Optional[str] = None


class CommandRequest(BaseModel):
    command: str


class MoveRequest(BaseModel):
    x: int
    y: int


class ExportRequest(BaseModel):
    name: Optional[str] = None


def create_app(controller: MazeController) -> FastAPI:
    """构建 FastAPI 实例并注入控制器。"""
    app = FastAPI(title="Maze Mode Web API", version="1.0.0")
    app.state.controller = controller

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/ping")
    async def ping():
        return {"status": "ok"}

    @app.get("/api/state")
    async def get_state():
        return controller.get_state_payload()

    @app.get("/api/map")
    async def get_map():
        return controller.get_map_payload()

    @app.post("/api/maze/enter")
    async def enter(payload: EnterRequest):
        mode = make_mode(
            payload.mode,
            map_id=payload.map_id,
            x=payload.x,
            y=payload.y,
            direction=payload.direction,
            size=payload.size,
        )
        try:
            return controller.enter(
                mode,
                retry=payload.retry,
                quit=payload.quit,
                event_id=payload.event_id,
            )
        except (KeyError, ValueError, TypeError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.post("/api/maze/exit")
    async def exit_maze(payload: ExitRequest):
        try:
            return controller.exit(payload.outcome)
        except (KeyError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.post("/api/maze/toggle")
    async def toggle(payload: ToggleRequest):
        return controller.toggle(retry=payload.retry, quit=payload.quit)

    @app.post("/api/maze/retry")
    async def retry():
        return controller.retry()

    @app.post("/api/maze/quit")
    async def quit_maze():
        return controller.quit()

    @app.post("/api/maze/command")
    async def command(payload: CommandRequest):
        try:
            return controller.run_command(payload.command)
        except (KeyError, ValueError, TypeError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.post("/api/player/move")
    async def move_player(payload: MoveRequest):
        try:
            return controller.move_player(payload.x, payload.y)
        except (KeyError, ValueError) as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    @app.post("/api/map/export")
    async def export_map(payload: ExportRequest):
        return controller.export_map(payload.name)

    return app
