"""
Sun calculation service: dawn/sunrise/sunset/dusk for a location and day.
Uses the astral library for the astronomical calculations.
"""
import logging
from datetime import date, datetime
from zoneinfo import ZoneInfo

from astral import Observer
from astral.sun import sun

from helios.config import settings
from helios.core.exceptions import SolarCalculationError

logger = logging.getLogger(__name__)

SUN_EVENTS = ("dawn", "sunrise", "sunset", "dusk")


def get_sun_times(
    latitude: float,
    longitude: float,
    timezone: str,
    for_date: date,
) -> dict[str, datetime]:
    """
    Get dawn, sunrise, sunset and dusk for a given location and date.

    Returns timezone-aware datetimes in the specified timezone. Raises
    SolarCalculationError if any of the four events can't be computed
    (polar day/night, unknown zone); callers never get a partial result.
    """
    try:
        tz = ZoneInfo(timezone)
        s = sun(
            Observer(latitude=latitude, longitude=longitude),
            date=for_date,
            tzinfo=tz,
            dawn_dusk_depression=settings.TWILIGHT_DEPRESSION,
        )
    except (ValueError, KeyError) as e:
        # astral raises ValueError when the sun never reaches the depression
        # angle; ZoneInfoNotFoundError is a KeyError
        logger.warning(
            "Sun times unavailable for %s at (%.4f, %.4f): %s",
            for_date, latitude, longitude, e,
        )
        raise SolarCalculationError(str(e)) from e

    return {event: s[event] for event in SUN_EVENTS}
