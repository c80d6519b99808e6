"""
Request dispatcher: one per device connection.

Turns inbound watch messages into location requests and sends back either the
three-day bundle or a single error field. Send failures are logged and
dropped: there is no other channel to report them through.
"""
import asyncio
import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable
from zoneinfo import ZoneInfo

from helios.core.exceptions import BundleError, SolarCalculationError
from helios.schemas.location import Coordinates, SettlementSource
from helios.schemas.messages import DeviceRequest, error_message, hello_message
from helios.services.bundle_service import build_bundle
from helios.services.location_resolver import LocationResolver, RequestState
from helios.services.timezone_service import get_timezone_for_coords

logger = logging.getLogger(__name__)


def local_today(timezone: str) -> date:
    return datetime.now(ZoneInfo(timezone)).date()


class RequestDispatcher:
    def __init__(
        self,
        channel: Any,
        resolver: LocationResolver,
        today: Callable[[str], date] = local_today,
    ):
        # channel only needs an awaitable send_json(dict), e.g. a WebSocket
        self.channel = channel
        self.resolver = resolver
        self._today = today
        self._hello_sent = False
        self._pending: set[RequestState] = set()
        self._sends: set[asyncio.Task] = set()

    async def on_ready(self) -> None:
        if self._hello_sent:
            return
        self._hello_sent = True
        logger.info("Device channel ready")
        await self._send(hello_message())

    def on_message(self, payload: Any) -> RequestState | None:
        """Handle one inbound message; returns the request state if a request was started."""
        if not isinstance(payload, dict):
            logger.debug("Ignoring non-object message: %r", payload)
            return None

        request = DeviceRequest.model_validate(payload)
        if not request.requested:
            return None

        offset = request.offset
        logger.info("Sun times requested for offset %d", offset)

        def on_ready(coordinates: Coordinates, source: SettlementSource) -> None:
            self._pending.difference_update([s for s in self._pending if s.settled])
            self._reply(self.build_reply(coordinates, offset))

        state = self.resolver.resolve(on_ready)
        if not state.settled:
            self._pending.add(state)
        return state

    def build_reply(self, coordinates: Coordinates, offset: int) -> dict[str, str | int]:
        try:
            timezone = get_timezone_for_coords(coordinates.latitude, coordinates.longitude)
            center = self._today(timezone) + timedelta(days=offset)
            return build_bundle(center, coordinates, offset, timezone=timezone)
        except (BundleError, SolarCalculationError, OverflowError) as e:
            logger.error("Sun calc error for offset %d: %s", offset, e)
            return error_message()

    async def drain(self) -> None:
        """Wait until every pending request has replied (or been cancelled)."""
        if self._pending:
            await asyncio.gather(*(s.wait() for s in self._pending), return_exceptions=True)
        if self._sends:
            await asyncio.gather(*self._sends)

    def close(self) -> None:
        cancelled = sum(1 for state in self._pending if state.cancel())
        self._pending.clear()
        if cancelled:
            logger.info("Cancelled %d pending request(s) on disconnect", cancelled)

    def _reply(self, message: dict) -> None:
        task = asyncio.get_running_loop().create_task(self._send(message))
        self._sends.add(task)
        task.add_done_callback(self._sends.discard)

    async def _send(self, message: dict) -> bool:
        try:
            await self.channel.send_json(message)
        except Exception as e:
            logger.error("send failed: %s", e)
            return False
        return True
