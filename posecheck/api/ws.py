from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict

from fastapi import APIRouter, WebSocket
from pydantic import ValidationError
from starlette.websockets import WebSocketDisconnect

from posecheck.api.auth import require_ws_token
from posecheck.core.errors import PoseCheckError
from posecheck.models.api import FrameRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws/pose")
async def ws_pose(websocket: WebSocket):
    """Accepts frames as JSON text and streams every pose-check result back.

    Results from frames posted over HTTP are forwarded here too.
    """
    runtime = websocket.app.state.runtime
    try:
        await require_ws_token(websocket, runtime.config_store.config.server.token)
    except RuntimeError:
        return

    await websocket.accept()
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue(maxsize=64)

    def _on_event(event) -> None:
        def _put() -> None:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(event)

        loop.call_soon_threadsafe(_put)

    runtime.event_bus.subscribe("pose_check", _on_event)
    await websocket.send_json({"type": "ack", "status": runtime.session.status()})

    async def _sender() -> None:
        while True:
            event = await queue.get()
            await websocket.send_json({"type": "pose_check", **asdict(event)})

    sender = asyncio.create_task(_sender())
    try:
        while True:
            text = await websocket.receive_text()
            try:
                data = json.loads(text)
            except json.JSONDecodeError:
                await websocket.send_json({"type": "warn", "reason": "invalid_json"})
                continue
            if not isinstance(data, dict) or data.get("type") != "frame":
                await websocket.send_json({"type": "warn", "reason": "unknown_type"})
                continue
            try:
                frame = FrameRequest.model_validate(data)
                skeletons = [item.to_skeleton() for item in frame.skeletons]
            except (ValidationError, PoseCheckError) as exc:
                await websocket.send_json({"type": "warn", "reason": "invalid_frame", "detail": str(exc)})
                continue
            runtime.session.process_frame(skeletons, timestamp=frame.timestamp)
    except WebSocketDisconnect:
        logger.debug("Pose stream client disconnected")
    finally:
        runtime.event_bus.unsubscribe("pose_check", _on_event)
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)
