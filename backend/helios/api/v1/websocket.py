"""
WebSocket endpoint for the paired watch.

Accepting the connection is the "ready" signal: the bridge answers with the
HELLO handshake, then treats every text frame as one JSON object message.
"""
import json
import logging
from typing import Set

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from helios.config import settings
from helios.services.dispatcher import RequestDispatcher
from helios.services.geolocation_service import GeolocationService
from helios.services.location_resolver import LocationResolver

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])


class DeviceConnectionManager:
    def __init__(self):
        self.connections: Set[WebSocket] = set()
        # Shared so the cached fix survives across connections
        self.geolocation = GeolocationService()

    async def connect(self, websocket: WebSocket) -> RequestDispatcher:
        await websocket.accept()
        self.connections.add(websocket)
        logger.info(f"Device connected (total: {len(self.connections)})")
        return RequestDispatcher(websocket, self.make_resolver())

    def disconnect(self, websocket: WebSocket, dispatcher: RequestDispatcher):
        dispatcher.close()
        self.connections.discard(websocket)
        logger.info("Device disconnected")

    def make_resolver(self) -> LocationResolver:
        lookup = self.geolocation if settings.geolocation_enabled else None
        return LocationResolver(lookup=lookup)


manager = DeviceConnectionManager()


@router.websocket("/ws/device")
async def websocket_device(websocket: WebSocket):
    """Bridge endpoint: HELLO on connect, then one sun bundle reply per request."""
    dispatcher = await manager.connect(websocket)
    await dispatcher.on_ready()

    try:
        while True:
            data = await websocket.receive_text()
            try:
                payload = json.loads(data)
            except json.JSONDecodeError:
                logger.warning(f"Ignoring malformed device message: {data[:80]!r}")
                continue
            dispatcher.on_message(payload)
    except WebSocketDisconnect:
        manager.disconnect(websocket, dispatcher)
    except Exception as e:
        logger.error(f"Device WebSocket error: {e}")
        manager.disconnect(websocket, dispatcher)
