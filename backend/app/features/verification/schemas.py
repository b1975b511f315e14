"""
Verification API schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VerifyMetersRequest(BaseModel):
    """Meter value read off a monitor photo."""
    meters: int = Field(..., gt=0)


class ActivityResponse(BaseModel):
    """A logged workout."""
    id: int
    concept2_result_id: str
    meters: int
    date: datetime
    activity_type: Optional[str] = None
    verified: bool

    model_config = ConfigDict(from_attributes=True)
