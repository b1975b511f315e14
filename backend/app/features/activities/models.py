"""
Activity model.

One workout record per Concept2 result ID. The result ID is the
idempotency key shared by the batch sync and the webhook paths.
"""

from datetime import datetime

from sqlalchemy import Column, String, DateTime, Integer, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from app.models.base import Base


class Activity(Base):
    """
    Logged workout.

    Created or overwritten by ActivityLedger.upsert; deleted only on an
    explicit deletion event. The owning account never changes.
    """

    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)

    # Concept2 identifiers
    concept2_result_id = Column(String(32), unique=True, index=True, nullable=False)

    # Workout
    meters = Column(Integer, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    activity_type = Column(String(32), nullable=True)  # rower, skierg, bike

    # Counts toward totals only when verified
    verified = Column(Boolean, nullable=False, default=False)

    # Sync metadata
    synced_at = Column(DateTime, default=datetime.utcnow)

    # Relationship
    account = relationship("Account", back_populates="activities")

    def __repr__(self):
        return f"<Activity {self.concept2_result_id} {self.meters}m verified={self.verified}>"

    @property
    def day(self) -> str:
        """Calendar day of the workout (YYYY-MM-DD)."""
        return self.date.date().isoformat()
