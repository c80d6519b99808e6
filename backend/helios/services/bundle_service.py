"""
Three-day sun bundle, the reply payload sent back to the watch.

For a center day the bundle carries the day before, the center day and the
day after, each as a date label plus four HH:MM strings, flattened into one
mapping with _M1 / _0 / _P1 suffixes and the echoed CENTER offset.
"""
from datetime import date, timedelta

from helios.core.exceptions import BundleError, SolarCalculationError
from helios.schemas.location import Coordinates
from helios.schemas.messages import CENTER_KEY, DAY_SUFFIXES, SolarDay
from helios.services.date_format import format_clock, format_day_label
from helios.services.sun_service import get_sun_times
from helios.services.timezone_service import get_timezone_for_coords


def bundle_dates(center_date: date) -> tuple[date, date, date]:
    """Calendar days around the center; date arithmetic is DST-safe."""
    one_day = timedelta(days=1)
    return center_date - one_day, center_date, center_date + one_day


def solar_day(for_date: date, coordinates: Coordinates, timezone: str) -> SolarDay:
    times = get_sun_times(coordinates.latitude, coordinates.longitude, timezone, for_date)
    return SolarDay(
        date_label=format_day_label(for_date),
        dawn=format_clock(times["dawn"]),
        sunrise=format_clock(times["sunrise"]),
        sunset=format_clock(times["sunset"]),
        dusk=format_clock(times["dusk"]),
    )


def build_bundle(
    center_date: date,
    coordinates: Coordinates,
    center_offset: int,
    timezone: str | None = None,
) -> dict[str, str | int]:
    """
    Build the 16-key reply for the three days around center_date.

    Raises BundleError if any day fails; nothing partial is ever returned.
    """
    try:
        if timezone is None:
            timezone = get_timezone_for_coords(coordinates.latitude, coordinates.longitude)
        days = [solar_day(d, coordinates, timezone) for d in bundle_dates(center_date)]
    except (SolarCalculationError, OverflowError) as e:
        # OverflowError: a neighbour day falls outside the supported date range
        raise BundleError(f"Sun times failed around {center_date}: {e}") from e

    bundle: dict[str, str | int] = {CENTER_KEY: int(center_offset)}
    for suffix, day in zip(DAY_SUFFIXES, days):
        bundle.update(day.to_fields(suffix))
    return bundle
