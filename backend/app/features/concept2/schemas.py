"""
Concept2 Logbook payload schemas.

A result as returned by GET /api/users/me/results and as carried by
`result-added` webhooks.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def parse_result_date(value: str | datetime) -> datetime:
    """
    Parse a Logbook timestamp.

    Accepts "2024-01-05", "2024-01-05 08:30:00" and ISO strings with an
    offset. The wall-clock time is kept as recorded (offset dropped) so
    the calendar day matches what the rower saw on the monitor.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    return parsed.replace(tzinfo=None)


class Concept2Result(BaseModel):
    """Single workout result."""

    id: str
    user_id: Optional[str] = None
    date: datetime
    distance: int = Field(..., gt=0)
    time: Optional[int] = Field(default=None, gt=0)  # tenths of a second
    type: Optional[str] = None
    verified: bool = False

    model_config = ConfigDict(extra="ignore")

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        if v is None:
            return None
        if v == "":
            raise ValueError("identifier must not be empty")
        if isinstance(v, bool) or not isinstance(v, (str, int)):
            raise ValueError("identifier must be a string or integer")
        return str(v)

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, v):
        if v is None or v == "":
            raise ValueError("date is required")
        if not isinstance(v, (str, datetime)):
            raise ValueError("date must be a string")
        return parse_result_date(v)

    @field_validator("verified", mode="before")
    @classmethod
    def coerce_verified(cls, v):
        return False if v is None else v
