"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy.

Note: Feature models live in features/ modules; this module only
collects them for metadata creation and Alembic autogenerate.
"""

from app.models.base import Base


def load_all_models():
    """Import every feature model so Base.metadata knows all tables."""
    from app.features.accounts.models import Account
    from app.features.activities.models import Activity
    return Account, Activity


__all__ = ["Base", "load_all_models"]
