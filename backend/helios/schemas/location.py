from enum import Enum

from pydantic import BaseModel, ConfigDict


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    label: str | None = None


class SettlementSource(str, Enum):
    """Which completion path settled a location request."""

    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"
    LIVE = "live"
    ERROR = "error"
