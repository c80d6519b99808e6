from timezonefinder import TimezoneFinder

from helios.config import settings
from helios.core.exceptions import SolarCalculationError

_tf = None


def get_timezone_for_coords(latitude: float, longitude: float) -> str:
    global _tf
    if _tf is None:
        _tf = TimezoneFinder()
    try:
        tz = _tf.timezone_at(lat=latitude, lng=longitude)
    except ValueError as e:
        # timezonefinder rejects NaN and out-of-range coordinates
        raise SolarCalculationError(f"No time zone for ({latitude}, {longitude}): {e}") from e
    return tz or settings.DEFAULT_TIMEZONE
