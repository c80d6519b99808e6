class HeliosError(Exception):
    """Base class for errors raised by the companion bridge."""


class GeolocationError(HeliosError):
    """The live location lookup failed, timed out, or returned garbage."""


class SolarCalculationError(HeliosError):
    """The solar library could not produce one of the day's events."""


class BundleError(HeliosError):
    """A three-day bundle could not be built; no partial bundle is sent."""
