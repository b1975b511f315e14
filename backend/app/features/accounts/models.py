"""
Account model.

One row per participant: chat identity, pledge, and the OAuth
credential pair for the Concept2 Logbook API.
"""

from datetime import datetime

from sqlalchemy import Column, String, DateTime, Integer, Text
from sqlalchemy.orm import relationship

from app.models.base import Base


class Account(Base):
    """
    Campaign participant.

    Created on first chat interaction or first OAuth callback.
    Never deleted by the application.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    telegram_id = Column(String(32), unique=True, index=True, nullable=False)

    # Profile
    username = Column(String(100), nullable=True)
    display_name = Column(String(100), nullable=True)

    # Campaign
    pledge_meters = Column(Integer, nullable=False, default=0)

    # Concept2 OAuth credentials (should be encrypted in production)
    access_token = Column(Text, nullable=True)
    refresh_token = Column(Text, nullable=True)
    concept2_user_id = Column(String(32), unique=True, index=True, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    activities = relationship(
        "Activity",
        back_populates="account",
        lazy="noload",
    )

    def __repr__(self):
        return f"<Account {self.id} telegram_id={self.telegram_id}>"

    @property
    def has_credentials(self) -> bool:
        """Whether a Concept2 access token is stored."""
        return bool(self.access_token)

    @property
    def name(self) -> str:
        """Best available name for display."""
        return self.display_name or self.username or f"user {self.telegram_id}"
