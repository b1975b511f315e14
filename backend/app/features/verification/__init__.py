"""
Photo verification.

Marks workouts verified after a chat user sends a photo of the monitor.
Reading the photo happens in the bot; this module only matches meters.
"""

from .schemas import VerifyMetersRequest, ActivityResponse
from .service import (
    VerificationService,
    VerificationError,
    AccountNotFoundError,
    NoMatchingActivityError,
)

__all__ = [
    "VerifyMetersRequest",
    "ActivityResponse",
    "VerificationService",
    "VerificationError",
    "AccountNotFoundError",
    "NoMatchingActivityError",
]
