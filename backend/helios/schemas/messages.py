import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Message keys shared with the watch app
HELLO_KEY = "HELLO"
REQUEST_KEY = "REQ"
OFFSET_KEY = "OFFSET"
CENTER_KEY = "CENTER"
ERROR_KEY = "ERROR"

CALC_ERROR = "Calc error"

# Suffixes for the day before, the center day and the day after
DAY_SUFFIXES = ("_M1", "_0", "_P1")
DAY_FIELDS = ("DATE", "DAWN", "SUNRISE", "SUNSET", "DUSK")

BUNDLE_KEYS = frozenset(
    [f"{field}{suffix}" for suffix in DAY_SUFFIXES for field in DAY_FIELDS] + [CENTER_KEY]
)


class DeviceRequest(BaseModel):
    """Inbound message from the watch. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    requested: bool = Field(default=False, alias=REQUEST_KEY)
    offset: int = Field(default=0, alias=OFFSET_KEY)

    @field_validator("requested", mode="before")
    @classmethod
    def coerce_marker(cls, v: Any) -> bool:
        return bool(v)

    @field_validator("offset", mode="before")
    @classmethod
    def coerce_offset(cls, v: Any) -> int:
        # Anything that isn't a finite number counts as "today"
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return 0
        if isinstance(v, float) and not math.isfinite(v):
            return 0
        return int(v)


class SolarDay(BaseModel):
    model_config = ConfigDict(frozen=True)

    date_label: str
    dawn: str
    sunrise: str
    sunset: str
    dusk: str

    def to_fields(self, suffix: str) -> dict[str, str]:
        return {
            f"DATE{suffix}": self.date_label,
            f"DAWN{suffix}": self.dawn,
            f"SUNRISE{suffix}": self.sunrise,
            f"SUNSET{suffix}": self.sunset,
            f"DUSK{suffix}": self.dusk,
        }


def hello_message() -> dict[str, int]:
    return {HELLO_KEY: 1}


def error_message(reason: str = CALC_ERROR) -> dict[str, str]:
    return {ERROR_KEY: reason}
