"""Main entry point for the bot."""

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.types import BotCommand

from momo_split.config.settings import settings
from momo_split.database.session import sessionmanager
from momo_split.handlers import start, group, expense, balance, payment
from momo_split.middlewares.database import DatabaseMiddleware
from momo_split.middlewares.auth import AuthMiddleware

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def on_startup(bot: Bot):
    """Actions to perform on bot startup."""
    logger.info("Bot starting up...")

    sessionmanager.init(settings.database_url)
    await sessionmanager.create_all()
    logger.info("Database session manager initialized")

    commands = [
        BotCommand(command="start", description="Start"),
        BotCommand(command="help", description="Show help"),
        BotCommand(command="new_group", description="Create a group"),
        BotCommand(command="join", description="Join a group"),
        BotCommand(command="groups", description="Your groups"),
        BotCommand(command="leave", description="Leave a group"),
        BotCommand(command="delete_group", description="Delete a group"),
        BotCommand(command="add_expense", description="Add an expense"),
        BotCommand(command="expenses", description="List expenses"),
        BotCommand(command="delete_expense", description="Delete an expense"),
        BotCommand(command="balances", description="Group balances"),
        BotCommand(command="simplify", description="Who pays whom"),
        BotCommand(command="settle", description="Record a payment"),
        BotCommand(command="pay", description="Send a payment"),
        BotCommand(command="request", description="Request a payment"),
        BotCommand(command="confirm", description="Confirm a payment"),
        BotCommand(command="cancel", description="Cancel a payment"),
    ]

    await bot.set_my_commands(commands)
    logger.info("Bot commands set")

    bot_info = await bot.get_me()
    logger.info(f"Bot started: @{bot_info.username}")


async def on_shutdown(bot: Bot):
    """Actions to perform on bot shutdown."""
    logger.info("Bot shutting down...")

    await sessionmanager.close()
    logger.info("Database connections closed")


def create_dispatcher() -> Dispatcher:
    """Build the dispatcher with middlewares and routers."""
    dp = Dispatcher()

    dp.message.middleware(DatabaseMiddleware())
    dp.message.middleware(AuthMiddleware())

    dp.include_router(start.router)
    dp.include_router(group.router)
    dp.include_router(expense.router)
    dp.include_router(balance.router)
    dp.include_router(payment.router)

    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    return dp


async def main():
    """Main function to run the bot."""
    bot = Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML)
    )

    dp = create_dispatcher()

    try:
        logger.info("Starting bot polling...")
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    except Exception as e:
        logger.error(f"Error during polling: {e}")
        raise
    finally:
        await bot.session.close()


def run():
    """Console script entry point."""
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logger.info("Bot stopped by user")


if __name__ == "__main__":
    run()
