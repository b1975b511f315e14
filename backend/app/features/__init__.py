"""
Feature modules for Rowbot.

Each feature is a self-contained module with:
- models.py - SQLAlchemy models (optional)
- schemas.py - Pydantic schemas
- repository.py / service.py - Data access and business logic
"""
