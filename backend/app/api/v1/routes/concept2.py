"""
Concept2 OAuth Routes

Endpoints for connecting a Concept2 Logbook account:
- /auth/concept2 - Initiate OAuth flow
- /auth/concept2/callback - Handle OAuth callback
"""

import secrets
import logging
from datetime import datetime, timedelta
from html import escape
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse, HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.deps import get_notifier, get_oauth, get_tokens
from app.db.session import get_db
from app.features.accounts import AccountRepository
from app.features.concept2 import Concept2Error, Concept2OAuth, TokenManager
from app.shared.telegram import TelegramNotifier

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory state storage (for CSRF protection)
_oauth_states: dict[str, dict] = {}

OAUTH_STATE_TTL = timedelta(minutes=10)


def _prune_states(now: datetime) -> None:
    expired = [
        key for key, data in _oauth_states.items()
        if now - data["created_at"] > OAUTH_STATE_TTL
    ]
    for key in expired:
        _oauth_states.pop(key, None)


# =============================================================================
# OAuth Flow
# =============================================================================

@router.get("/auth/concept2")
async def concept2_auth(
    telegram_id: str = Query(..., description="Telegram user ID"),
    username: Optional[str] = Query(None),
    display_name: Optional[str] = Query(None),
    oauth: Concept2OAuth = Depends(get_oauth),
    db: AsyncSession = Depends(get_db),
):
    """
    Initiate Concept2 OAuth flow.

    Called from the bot's connect button with the user's telegram_id.
    """
    if not oauth.client_id or not oauth.client_secret:
        raise HTTPException(
            status_code=503,
            detail="Concept2 integration not configured"
        )

    await AccountRepository(db).upsert_by_telegram_id(telegram_id, username, display_name)
    await db.commit()

    now = datetime.utcnow()
    _prune_states(now)

    state = secrets.token_urlsafe(32)
    _oauth_states[state] = {
        "telegram_id": telegram_id,
        "username": username,
        "display_name": display_name,
        "created_at": now,
    }

    logger.info(f"Concept2 OAuth initiated for telegram_id={telegram_id}")

    return RedirectResponse(url=oauth.get_authorization_url(state))


@router.get("/auth/concept2/callback")
async def concept2_callback(
    code: str = Query(None),
    state: str = Query(None),
    error: str = Query(None),
    tokens: TokenManager = Depends(get_tokens),
    notifier: Optional[TelegramNotifier] = Depends(get_notifier),
):
    """
    Handle Concept2 OAuth callback.

    Exchanges the code, binds the Concept2 user ID and stores both tokens.
    """
    if error:
        logger.warning(f"Concept2 OAuth error: {error}")
        return _error_page(f"Concept2 authorization was declined: {error}", 400)

    if not code or not state:
        logger.warning("Concept2 callback without code or state")
        return _error_page("Missing authorization code. Please try again.", 400)

    _prune_states(datetime.utcnow())
    state_data = _oauth_states.pop(state, None)
    if state_data is None:
        logger.warning("Invalid OAuth state")
        return _error_page("This link has expired. Run /row_setup again.", 400)

    telegram_id = state_data["telegram_id"]

    try:
        account = await tokens.install_credentials(
            telegram_id,
            code,
            username=state_data.get("username"),
            display_name=state_data.get("display_name"),
        )
    except Concept2Error as e:
        logger.error(f"Concept2 connect failed for telegram_id={telegram_id}: {e}")
        return _error_page("Could not connect to the Concept2 Logbook.", 500)

    if notifier:
        await notifier.send_message(
            telegram_id,
            "✅ Your Concept2 Logbook is connected. Your rows will now count toward the campaign."
        )

    return _success_page(account.name)


# =============================================================================
# Helper Functions
# =============================================================================

def _success_page(name: str) -> HTMLResponse:
    """Return success page after OAuth."""
    html = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1">
        <title>Concept2 connected</title>
        <style>
            body {{
                font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
                display: flex;
                justify-content: center;
                align-items: center;
                min-height: 100vh;
                margin: 0;
                background: linear-gradient(135deg, #003a70 0%, #0a5eb0 100%);
            }}
            .card {{
                background: white;
                border-radius: 16px;
                padding: 40px;
                text-align: center;
                box-shadow: 0 10px 40px rgba(0,0,0,0.2);
                max-width: 400px;
            }}
            .icon {{ font-size: 64px; margin-bottom: 20px; }}
            h1 {{ color: #333; margin: 0 0 10px; }}
            p {{ color: #666; margin: 0; }}
        </style>
    </head>
    <body>
        <div class="card">
            <div class="icon">🚣</div>
            <h1>Welcome aboard, {escape(name)}!</h1>
            <p>Your Concept2 Logbook is connected.</p>
            <p>You can close this window and return to Telegram.</p>
        </div>
    </body>
    </html>
    """
    return HTMLResponse(content=html)


def _error_page(message: str, status_code: int) -> HTMLResponse:
    """Return error page."""
    html = f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <meta name="viewport" content="width=device-width, initial-scale=1">
        <title>Error</title>
        <style>
            body {{
                font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
                display: flex;
                justify-content: center;
                align-items: center;
                min-height: 100vh;
                margin: 0;
                background: #f5f5f5;
            }}
            .card {{
                background: white;
                border-radius: 16px;
                padding: 40px;
                text-align: center;
                box-shadow: 0 4px 20px rgba(0,0,0,0.1);
                max-width: 400px;
            }}
            h1 {{ color: #333; margin: 0 0 10px; }}
            p {{ color: #666; margin: 0; }}
        </style>
    </head>
    <body>
        <div class="card">
            <h1>Something went wrong</h1>
            <p>{escape(message)}</p>
        </div>
    </body>
    </html>
    """
    return HTMLResponse(content=html, status_code=status_code)
