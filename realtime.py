"""WebSocket fan-out of catalog, order, news and contact events.

Messages are JSON envelopes ``{"event": name, "data": payload}``. Delivery is
best effort: a subscriber whose send fails is dropped and re-syncs from the
join snapshot when it reconnects.
"""

from typing import Any, Dict, List

import structlog
from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

logger = structlog.get_logger(__name__)

PRODUCTS_UPDATE = "products:update"
ORDERS_NEW = "orders:new"
ORDERS_UPDATE = "orders:update"
CONTACT_RECEIVED = "contact:received"
NEWS_UPDATE = "news:update"
CHAT_MESSAGE = "chat message"


class Hub:
    def __init__(self) -> None:
        self.connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket, snapshot: Dict[str, Any]) -> None:
        """Accept a subscriber and send it the current state."""
        await websocket.accept()
        self.connections.append(websocket)
        logger.info("subscriber_connected", subscribers=len(self.connections))
        for event, data in snapshot.items():
            await self.send(websocket, event, data)

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.connections:
            self.connections.remove(websocket)
            logger.info("subscriber_disconnected", subscribers=len(self.connections))

    async def send(self, websocket: WebSocket, event: str, data: Any) -> bool:
        try:
            await websocket.send_json({"event": event, "data": jsonable_encoder(data)})
        except Exception as exc:  # noqa: BLE001
            logger.warning("subscriber_send_failed", event_name=event, error=str(exc))
            return False
        return True

    async def broadcast(self, event: str, data: Any) -> int:
        """Send ``event`` to every subscriber; returns how many received it."""
        delivered = 0
        for websocket in list(self.connections):
            if await self.send(websocket, event, data):
                delivered += 1
            else:
                self.disconnect(websocket)
        logger.debug("event_broadcast", event_name=event, delivered=delivered)
        return delivered


async def publish(target, event: str, data: Any) -> int:
    """Broadcast through ``target``; a fan-out error is logged, never raised."""
    try:
        return await target.broadcast(event, data)
    except Exception as exc:  # noqa: BLE001
        logger.error("broadcast_failed", event_name=event, error=str(exc), exc_info=exc)
        return 0


hub = Hub()
