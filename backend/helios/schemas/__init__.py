# Schemas package
from helios.schemas.location import Coordinates, SettlementSource
from helios.schemas.messages import DeviceRequest, SolarDay

__all__ = [
    "Coordinates",
    "DeviceRequest",
    "SettlementSource",
    "SolarDay",
]
