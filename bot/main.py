"""
Rowbot Telegram Bot

Entry point for the bot (polling mode): python -m bot.main
"""

import asyncio
import logging
import sys

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import BotCommand

from bot.config import settings
from bot.handlers import admin, common, concept2, pledge, verification
from bot.services.api_client import api_client


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


BOT_COMMANDS = [
    BotCommand(command="start", description="Start"),
    BotCommand(command="help", description="Help"),
    BotCommand(command="row_setup", description="Connect Concept2 Logbook"),
    BotCommand(command="pledge", description="Set your pledge in meters"),
    BotCommand(command="leaderboard", description="Current standings"),
]


def create_bot(token: str) -> Bot:
    return Bot(
        token=token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML)
    )


def create_dispatcher() -> Dispatcher:
    """Dispatcher with all routers (shared by polling and webhook mode)."""
    dp = Dispatcher(storage=MemoryStorage())
    dp.include_router(common.router)
    dp.include_router(concept2.router)
    dp.include_router(pledge.router)
    dp.include_router(admin.router)
    dp.include_router(verification.router)
    return dp


async def on_startup(bot: Bot):
    """Startup hook."""
    logger.info("Starting Rowbot...")

    # Set bot commands menu
    await bot.set_my_commands(BOT_COMMANDS)
    logger.info("Bot commands menu set")

    # Check backend health
    healthy = await api_client.health_check()
    if healthy:
        logger.info("Backend is healthy")
    else:
        logger.warning("Backend health check failed - bot will start anyway")

    me = await bot.get_me()
    logger.info(f"Bot started: @{me.username}")


async def on_shutdown(bot: Bot):
    """Shutdown hook."""
    logger.info("Shutting down...")
    await api_client.close()


async def main():
    """Main entry point."""
    bot = create_bot(settings.token)
    dp = create_dispatcher()

    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    logger.info("Starting polling...")
    await dp.start_polling(bot)


if __name__ == "__main__":
    asyncio.run(main())
