"""
Bot main entry point.

Initializes and runs the Telegram bot with aiogram 3.x.

Initialization is delegated to modular components in the
bot/initialization/ directory.
"""

import asyncio
import sys
from pathlib import Path

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.exceptions import TelegramAPIError
from aiogram.types import ErrorEvent
from loguru import logger


# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config.database import async_session_maker  # noqa: E402
from app.config.settings import settings  # noqa: E402
from bot.initialization.handlers import register_all_handlers  # noqa: E402
from bot.initialization.logging import setup_logging  # noqa: E402
from bot.initialization.middlewares import register_middlewares  # noqa: E402
from bot.initialization.services import (  # noqa: E402
    register_workflow_data,
    validate_environment,
)
from bot.initialization.shutdown import shutdown_handler  # noqa: E402
from bot.initialization.storage import setup_fsm_storage  # noqa: E402
from bot.messages.error_messages import GENERIC_ERROR  # noqa: E402


async def main() -> None:
    """Initialize and run the bot."""
    setup_logging()
    validate_environment()

    storage, _ = await setup_fsm_storage()

    # No global parse_mode: handlers opt into Markdown explicitly so
    # underscores in user names cannot break plain replies
    bot = Bot(
        token=settings.telegram_bot_token,
        default=DefaultBotProperties(),
    )

    dp = Dispatcher(storage=storage)

    register_middlewares(dp, async_session_maker)

    @dp.error()
    async def error_handler(event: ErrorEvent) -> bool:
        """Global error handler for unhandled exceptions."""
        logger.exception(
            f"Unhandled error in bot: {event.exception.__class__.__name__}: {event.exception}",
            extra={"update": str(event.update) if event.update else None},
        )

        try:
            if event.update and event.update.message:
                await event.update.message.answer(GENERIC_ERROR)
        except TelegramAPIError as send_error:
            logger.error(f"Failed to send error message: {send_error}")

        return True

    register_all_handlers(dp)

    try:
        bot_info = await bot.get_me()
        logger.info(f"Bot connected: @{bot_info.username} (ID: {bot_info.id})")

        if not settings.bot_username:
            # Runtime override, used for referral links
            settings.bot_username = bot_info.username
            logger.info(f"Set bot username to: {bot_info.username}")
    except TelegramAPIError as e:
        logger.error(f"Failed to connect to Telegram API: {e}")
        raise

    register_workflow_data(dp, bot, storage)

    logger.info("Bot started successfully")

    try:
        logger.info("Starting polling...")
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    finally:
        await shutdown_handler()
        await storage.close()
        await bot.session.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception(f"Bot crashed: {e}")
        sys.exit(1)
