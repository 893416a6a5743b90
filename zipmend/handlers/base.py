from aiogram import Router
from aiogram.types import Message, User
from aiogram.filters import Command, CommandStart
import logging
from typing import Optional

from zipmend.config import settings
from zipmend.i18n import LANG_NAMES, set_user_lang, t, user_lang

logger = logging.getLogger(__name__)
router = Router(name="base")


def lang_for(user: Optional[User]) -> str:
    if not user:
        return settings.default_lang
    return user_lang(user.id, user.language_code, settings.default_lang)


def lang_of(message: Message) -> str:
    return lang_for(message.from_user)


@router.message(CommandStart())
async def start(message: Message):
    await message.answer(t(lang_of(message), "start"))


@router.message(Command("help"))
async def help_cmd(message: Message):
    await message.answer(t(lang_of(message), "start"))


@router.message(Command("lang"))
async def set_lang(message: Message):
    parts = (message.text or "").split(maxsplit=1)
    if len(parts) < 2 or not message.from_user:
        return await message.answer(t(lang_of(message), "lang_usage"))
    code = parts[1].strip().lower()
    if not set_user_lang(message.from_user.id, code):
        return await message.answer(t(lang_of(message), "lang_usage"))
    logger.info(f"User {message.from_user.id} switched language to {code}")
    await message.answer(t(code, "lang_set", name=LANG_NAMES[code]))
