import asyncio
import logging
import math
import time

import httpx

from helios.config import settings
from helios.core.exceptions import GeolocationError
from helios.schemas.location import Coordinates

logger = logging.getLogger(__name__)


def _parse_fix(data: dict) -> Coordinates:
    """Accept ip-api style ({lat, lon, city}) or plain {latitude, longitude} answers."""
    if data.get("status") == "fail":
        raise GeolocationError(f"Lookup refused: {data.get('message', 'unknown reason')}")
    try:
        lat = float(data["lat"] if "lat" in data else data["latitude"])
        lon = float(data["lon"] if "lon" in data else data["longitude"])
    except (KeyError, TypeError, ValueError) as e:
        raise GeolocationError(f"Malformed geolocation answer: {data!r}") from e
    if not (math.isfinite(lat) and math.isfinite(lon)) or abs(lat) > 90 or abs(lon) > 180:
        raise GeolocationError(f"Geolocation answer out of range: {lat}, {lon}")
    return Coordinates(latitude=lat, longitude=lon, label=data.get("city"))


class GeolocationService:
    """
    Live location lookup over HTTP.

    A previous fix is reused while it is younger than max_age_ms, so repeated
    requests from the watch don't hit the network each time. The whole call is
    bounded by timeout_ms; every failure surfaces as GeolocationError.
    """

    def __init__(
        self,
        url: str | None = None,
        timeout_ms: int | None = None,
        max_age_ms: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = settings.GEOLOCATION_URL if url is None else url
        self.timeout_ms = settings.GEOLOCATION_TIMEOUT_MS if timeout_ms is None else timeout_ms
        self.max_age_ms = settings.GEOLOCATION_MAX_AGE_MS if max_age_ms is None else max_age_ms
        self._transport = transport
        # (fix, monotonic time it was obtained)
        self._last_fix: tuple[Coordinates, float] | None = None

    @property
    def available(self) -> bool:
        return bool(self.url)

    def cached_fix(self) -> Coordinates | None:
        if self._last_fix is None:
            return None
        fix, obtained_at = self._last_fix
        if (time.monotonic() - obtained_at) * 1000 > self.max_age_ms:
            return None
        return fix

    async def locate(self) -> Coordinates:
        cached = self.cached_fix()
        if cached is not None:
            logger.debug("Using cached location fix %s", cached)
            return cached

        if not self.available:
            raise GeolocationError("No geolocation URL configured")

        try:
            fix = await asyncio.wait_for(self._fetch(), timeout=self.timeout_ms / 1000)
        except asyncio.TimeoutError as e:
            raise GeolocationError(f"Lookup timed out after {self.timeout_ms} ms") from e
        except httpx.HTTPError as e:
            raise GeolocationError(f"Lookup failed: {e}") from e

        self._last_fix = (fix, time.monotonic())
        logger.info("Live location fix: %.4f, %.4f (%s)", fix.latitude, fix.longitude, fix.label)
        return fix

    async def _fetch(self) -> Coordinates:
        async with httpx.AsyncClient(timeout=self.timeout_ms / 1000, transport=self._transport) as client:
            resp = await client.get(self.url)
            resp.raise_for_status()
            try:
                data = resp.json()
            except ValueError as e:
                raise GeolocationError("Geolocation answer is not JSON") from e
        if not isinstance(data, dict):
            raise GeolocationError(f"Malformed geolocation answer: {data!r}")
        return _parse_fix(data)

    def clear_cache(self) -> None:
        self._last_fix = None
