"""Bot services."""

from bot.services.api_client import api_client, APIClient, APIError, TRANSPORT_ERRORS
from bot.services.meter_reader import (
    MeterReading,
    MeterReadingError,
    PhotoMeterReader,
    parse_reading,
)

__all__ = [
    "api_client",
    "APIClient",
    "APIError",
    "TRANSPORT_ERRORS",
    "MeterReading",
    "MeterReadingError",
    "PhotoMeterReader",
    "parse_reading",
]
