import asyncio
import logging
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.types import MenuButtonCommands, BotCommand
from aiogram.exceptions import TelegramUnauthorizedError, TelegramAPIError
from zipmend.config import settings
from zipmend.handlers import router as root_router

# Enable logging
logging.basicConfig(level=logging.INFO)


async def main():
    logger = logging.getLogger(__name__)
    logger.info("Starting ZIP fixer bot...")
    logger.info(f"Repair candidates: {', '.join(settings.repair_candidates)}")

    bot = Bot(token=settings.bot_token, default=DefaultBotProperties(parse_mode='HTML'))

    # Set bot commands (handle errors gracefully)
    try:
        await bot.set_my_commands([
            BotCommand(command="start", description="Start the bot"),
            BotCommand(command="help", description="How to use"),
            BotCommand(command="lang", description="Change language (ko, en, ja, zh)"),
        ])
        await bot.set_chat_menu_button(menu_button=MenuButtonCommands())
        logger.info("Bot commands set successfully")
    except TelegramUnauthorizedError:
        logger.warning("Invalid bot token. Skipping command setup. This is expected in development.")
    except TelegramAPIError as e:
        logger.warning(f"Telegram API error when setting commands: {e}")

    try:
        dp = Dispatcher()
        dp.include_router(root_router)
        logger.info("Routers registered, starting polling...")

        await dp.start_polling(bot)
    except TelegramUnauthorizedError:
        logger.error("Invalid bot token. Please check your BOT_TOKEN in .env file.")
        logger.info("Bot shutting down due to invalid token.")
    except Exception as e:
        logger.error(f"Error starting bot: {e}")
        raise


def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logging.info("Bot stopped by user")


if __name__ == "__main__":
    run()
