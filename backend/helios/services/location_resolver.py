"""
Location resolver: races the live lookup against a fallback timer.

Each request gets its own RequestState. The fallback timer, the lookup task
and the "lookup unavailable" shortcut all report through one first-writer-wins
Settlement, so on_ready runs exactly once per request no matter which source
fires first or how many fire afterwards. Everything runs on the event loop
thread, which is what makes the check-and-set atomic.
"""
import asyncio
import logging
from typing import Any, Callable, Coroutine

from helios.config import settings
from helios.schemas.location import Coordinates, SettlementSource
from helios.services.geolocation_service import GeolocationService

logger = logging.getLogger(__name__)

OnReady = Callable[[Coordinates, SettlementSource], None]


def default_coordinates() -> Coordinates:
    return Coordinates(
        latitude=settings.DEFAULT_LATITUDE,
        longitude=settings.DEFAULT_LONGITUDE,
        label=settings.DEFAULT_LOCATION_LABEL,
    )


class Settlement:
    """A consume-once token: the first try_settle wins, every later call is a no-op."""

    def __init__(self):
        self._settled = False
        self._value: Any = None

    @property
    def settled(self) -> bool:
        return self._settled

    @property
    def value(self) -> Any:
        return self._value

    def try_settle(self, value: Any) -> bool:
        if self._settled:
            return False
        self._settled = True
        self._value = value
        return True


class RequestState:
    """Latch, fallback timer and lookup task for one in-flight request."""

    def __init__(self, on_ready: OnReady, default: Coordinates, loop: asyncio.AbstractEventLoop):
        self._on_ready = on_ready
        self._default = default
        self._loop = loop
        self._settlement = Settlement()
        self._timer: asyncio.TimerHandle | None = None
        self._lookup: asyncio.Task | None = None
        self._future: asyncio.Future = loop.create_future()

    @property
    def settled(self) -> bool:
        return self._settlement.settled

    @property
    def outcome(self) -> tuple[Coordinates, SettlementSource] | None:
        """(coordinates, source) once settled; None while pending or after cancel()."""
        return self._settlement.value

    def start(self, lookup: Coroutine[Any, Any, Coordinates], fallback_timeout: float) -> None:
        self._timer = self._loop.call_later(fallback_timeout, self._on_timeout)
        self._lookup = self._loop.create_task(lookup)
        self._lookup.add_done_callback(self._on_lookup_done)

    def settle(self, coordinates: Coordinates, source: SettlementSource) -> bool:
        if not self._settlement.try_settle((coordinates, source)):
            logger.debug("Ignoring %s completion, request already settled", source.value)
            return False
        self._teardown()
        logger.info(
            "Location settled via %s: %.4f, %.4f (%s)",
            source.value, coordinates.latitude, coordinates.longitude, coordinates.label,
        )
        if not self._future.done():
            self._future.set_result((coordinates, source))
        self._on_ready(coordinates, source)
        return True

    def cancel(self) -> bool:
        """Abandon the request without calling on_ready."""
        if not self._settlement.try_settle(None):
            return False
        self._teardown()
        self._future.cancel()
        return True

    async def wait(self) -> tuple[Coordinates, SettlementSource]:
        return await asyncio.shield(self._future)

    def _teardown(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._lookup is not None and not self._lookup.done():
            self._lookup.cancel()

    def _on_timeout(self) -> None:
        self._timer = None
        if self.settled:
            return
        logger.warning("Geolocation timeout; using default %s", self._default.label)
        self.settle(self._default, SettlementSource.TIMEOUT)

    def _on_lookup_done(self, task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            self.settle(task.result(), SettlementSource.LIVE)
            return
        if not self.settled:
            logger.warning("Geolocation error: %s; using default %s", exc, self._default.label)
        self.settle(self._default, SettlementSource.ERROR)


class LocationResolver:
    def __init__(
        self,
        lookup: GeolocationService | None = None,
        default: Coordinates | None = None,
        fallback_timeout_ms: int | None = None,
    ):
        self.lookup = lookup
        self.default = default or default_coordinates()
        self.fallback_timeout_ms = (
            settings.LOCATION_FALLBACK_TIMEOUT_MS if fallback_timeout_ms is None else fallback_timeout_ms
        )

    def resolve(self, on_ready: OnReady) -> RequestState:
        """Start resolving; on_ready(coordinates, source) is called exactly once."""
        state = RequestState(on_ready, self.default, asyncio.get_running_loop())

        if self.lookup is None or not self.lookup.available:
            logger.info("Geolocation unavailable; using default %s", self.default.label)
            state.settle(self.default, SettlementSource.UNAVAILABLE)
            return state

        state.start(self.lookup.locate(), self.fallback_timeout_ms / 1000)
        return state

    async def resolve_async(self) -> tuple[Coordinates, SettlementSource]:
        state = self.resolve(lambda coordinates, source: None)
        try:
            return await state.wait()
        except asyncio.CancelledError:
            state.cancel()
            raise
