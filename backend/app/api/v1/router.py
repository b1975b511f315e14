"""
API Router v1

Combines all route modules. The Concept2 webhook is mounted separately
at its configured path.
"""

from fastapi import APIRouter

from app.api.v1.routes import admin, concept2, leaderboard, telegram, users, verification

api_router = APIRouter()

api_router.include_router(concept2.router, tags=["Concept2"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(leaderboard.router, tags=["Leaderboard"])
api_router.include_router(verification.router, tags=["Verification"])
api_router.include_router(admin.router)
api_router.include_router(telegram.router, tags=["Telegram"])
