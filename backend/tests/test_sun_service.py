from datetime import date, timedelta

import pytest

from helios.core.exceptions import SolarCalculationError
from helios.services.sun_service import SUN_EVENTS, get_sun_times


def test_sun_times_berlin_midsummer():
    times = get_sun_times(52.52, 13.405, "Europe/Berlin", date(2024, 6, 21))

    assert set(times) == set(SUN_EVENTS)
    assert times["dawn"] < times["sunrise"] < times["sunset"] < times["dusk"]
    # Sunrise around 04:43 CEST, sunset around 21:33 CEST
    assert times["sunrise"].hour == 4
    assert times["sunset"].hour == 21


def test_sun_times_are_in_requested_zone():
    times = get_sun_times(52.52, 13.405, "Europe/Berlin", date(2024, 6, 21))
    assert times["sunrise"].utcoffset() == timedelta(hours=2)
    assert times["sunrise"].date() == date(2024, 6, 21)


def test_polar_day_raises():
    # Tromso in midsummer: the sun never goes below the horizon
    with pytest.raises(SolarCalculationError):
        get_sun_times(69.6492, 18.9553, "Europe/Oslo", date(2024, 6, 21))


def test_polar_night_raises():
    with pytest.raises(SolarCalculationError):
        get_sun_times(78.22, 15.65, "Arctic/Longyearbyen", date(2024, 12, 21))


def test_unknown_timezone_raises():
    with pytest.raises(SolarCalculationError):
        get_sun_times(52.52, 13.405, "Mars/Olympus_Mons", date(2024, 6, 21))
