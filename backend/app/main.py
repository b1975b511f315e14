"""
Rowbot API

FastAPI application for the Concept2 pledge campaign: OAuth connect,
batch sync, webhook ingestion and the leaderboard.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import Settings, settings
from app.db.session import Database
from app.api.v1.router import api_router
from app.api.v1.routes import webhooks
from app.features.concept2 import Concept2Client, Concept2OAuth, TokenManager
from app.features.sync import BackgroundSyncRunner, BatchSyncScheduler, SyncConfig
from app.features.webhooks import WebhookIngestor
from app.shared.telegram import TelegramNotifier

VERSION = "0.1.0"


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Services ===
def init_services(app: FastAPI, database: Database, config: Settings = settings) -> None:
    """Build the core services around an open database and store them on app.state."""
    window = config.campaign_window
    oauth = Concept2OAuth(
        client_id=config.concept2_client_id,
        client_secret=config.concept2_client_secret,
        redirect_uri=config.concept2_redirect_uri,
        base_url=config.concept2_base_url,
        timeout=config.http_timeout_seconds,
    )
    client = Concept2Client(
        base_url=config.concept2_base_url,
        timeout=config.http_timeout_seconds,
    )
    tokens = TokenManager(database, oauth, client)

    app.state.db = database
    app.state.window = window
    app.state.oauth = oauth
    app.state.client = client
    app.state.tokens = tokens
    app.state.scheduler = BatchSyncScheduler(
        database,
        client,
        tokens,
        window,
        activity_type=config.concept2_activity_type,
        api_call_delay=SyncConfig.API_CALL_DELAY,
    )
    app.state.ingestor = WebhookIngestor(
        database, window, activity_type=config.concept2_activity_type
    )
    app.state.notifier = TelegramNotifier(config.telegram_bot_token)


# === Telegram Bot Setup ===
async def _setup_bot(app: FastAPI):
    """Initialize aiogram bot in webhook mode."""
    if not settings.telegram_bot_token or not settings.base_url:
        logger.info("Bot webhook skipped (TELEGRAM_BOT_TOKEN or BASE_URL not set)")
        return

    from bot.main import create_bot, create_dispatcher

    bot = create_bot(settings.telegram_bot_token)
    dp = create_dispatcher()

    webhook_url = f"{settings.base_url.rstrip('/')}/api/v1/telegram/webhook"
    await bot.set_webhook(webhook_url, secret_token=settings.telegram_webhook_secret)
    logger.info(f"Telegram webhook set: {webhook_url}")

    app.state.bot = bot
    app.state.bot_dp = dp


async def _shutdown_bot(app: FastAPI):
    """Cleanup bot on shutdown."""
    bot = getattr(app.state, "bot", None)
    if bot:
        await bot.delete_webhook()
        await bot.session.close()
        logger.info("Telegram webhook removed")


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Starting Rowbot API...")
    window = settings.campaign_window
    logger.info(f"Campaign window: {window.start} .. {window.end}")

    database = Database(settings.database_url, echo=settings.debug)
    await database.open()
    await database.create_all()
    logger.info("Database initialized")

    init_services(app, database)

    runner = None
    if settings.concept2_configured and settings.sync_interval_seconds > 0:
        runner = BackgroundSyncRunner(app.state.scheduler, settings.sync_interval_seconds)
        await runner.start()
    elif not settings.concept2_configured:
        logger.info("Background sync disabled (Concept2 credentials not set)")

    # Start Telegram bot webhook
    await _setup_bot(app)

    yield

    # Shutdown
    await _shutdown_bot(app)
    if runner:
        await runner.stop()
    await database.close()
    logger.info("Shutting down...")


# === App Creation ===
def create_app(use_lifespan: bool = True) -> FastAPI:
    """
    Build the FastAPI application.

    Tests pass use_lifespan=False and call init_services() themselves
    with an in-memory database.
    """
    app = FastAPI(
        title="Rowbot API",
        description="Concept2 rowing pledge campaign tracker",
        version=VERSION,
        lifespan=lifespan if use_lifespan else None,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # === Middleware ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # === Routes ===
    app.include_router(api_router, prefix="/api/v1")
    app.include_router(webhooks.router)

    # === Health Check ===
    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": VERSION}

    return app


app = create_app()
