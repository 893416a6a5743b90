"""Handlers for ZIP documents: diagnose on upload, rewrite on demand."""
from aiogram import Bot, Router, F
from aiogram.types import Message, CallbackQuery, BufferedInputFile
from aiogram.exceptions import TelegramAPIError, TelegramBadRequest
import logging
from html import escape

from zipmend.config import settings
from zipmend.errors import ArchiveTooLargeError, EntryReadError, MalformedArchiveError, ZipMendError
from zipmend.handlers.base import lang_for
from zipmend.i18n import t
from zipmend.models import ProcessingOptions
from zipmend.services.processor import analyze_zip, process_zip
from zipmend.states import PendingStore
from zipmend.ui import fixed_file_name, format_report, kb_options

logger = logging.getLogger(__name__)
router = Router(name="zip")

pending = PendingStore(ttl_seconds=settings.pending_ttl)


def _error_text(e: ZipMendError, lang: str, fallback: str) -> str:
    if isinstance(e, ArchiveTooLargeError):
        return t(lang, "too_large", limit=settings.max_zip_bytes // (1024 * 1024))
    if isinstance(e, MalformedArchiveError):
        return t(lang, "malformed")
    if isinstance(e, EntryReadError):
        return t(lang, "entry_error", path=escape(e.path))
    return t(lang, fallback)


async def _download(bot: Bot, file_id: str) -> bytes:
    file = await bot.get_file(file_id)
    if not file.file_path:
        raise RuntimeError(f"Could not get file path for {file_id}")
    buf = await bot.download_file(file.file_path)
    return buf.read()


def _report_text(report, lang: str) -> str:
    return format_report(report, lang) + "\n\n" + t(lang, "options_title")


@router.message(F.document)
async def on_document(message: Message, bot: Bot):
    doc = message.document
    lang = lang_for(message.from_user)
    if not doc or not message.from_user:
        return
    if not doc.file_name or not doc.file_name.lower().endswith(".zip"):
        await message.answer(t(lang, "zip_only"))
        return
    if doc.file_size and doc.file_size > settings.max_zip_bytes:
        await message.answer(t(lang, "too_large", limit=settings.max_zip_bytes // (1024 * 1024)))
        return

    status = await message.answer(t(lang, "analyzing"))
    try:
        data = await _download(bot, doc.file_id)
        report = await analyze_zip(data, settings.repair_candidates, max_size=settings.max_zip_bytes)
    except ZipMendError as e:
        await status.edit_text(_error_text(e, lang, "analyze_error"))
        return
    except TelegramAPIError as e:
        logger.error(f"Telegram error while downloading {doc.file_name}: {e}")
        await status.edit_text(t(lang, "analyze_error"))
        return
    except Exception:
        logger.exception(f"Unexpected error analyzing {doc.file_name}")
        await status.edit_text(t(lang, "analyze_error"))
        return

    item = pending.put(message.from_user.id, doc.file_id, doc.file_name, settings.default_options())
    await status.edit_text(_report_text(report, lang), reply_markup=kb_options(item.options, lang))


@router.callback_query(F.data.startswith("opt:"))
async def toggle_option(cb: CallbackQuery):
    lang = lang_for(cb.from_user)
    name = (cb.data or "").split(":", 1)[1]
    if name not in ProcessingOptions.names():
        await cb.answer()
        return
    item = pending.toggle(cb.from_user.id, name)
    if item is None:
        await cb.answer(t(lang, "expired"), show_alert=True)
        return
    try:
        await cb.message.edit_reply_markup(reply_markup=kb_options(item.options, lang))
    except TelegramBadRequest as e:
        # "message is not modified" on double taps
        logger.debug(f"Keyboard not updated: {e}")
    await cb.answer()


@router.callback_query(F.data == "fix:cancel")
async def cancel(cb: CallbackQuery):
    lang = lang_for(cb.from_user)
    pending.pop(cb.from_user.id)
    await cb.message.edit_text(t(lang, "cancelled"))
    await cb.answer()


@router.callback_query(F.data == "fix:run")
async def run_fix(cb: CallbackQuery, bot: Bot):
    lang = lang_for(cb.from_user)
    item = pending.pop(cb.from_user.id)
    if item is None:
        await cb.answer(t(lang, "expired"), show_alert=True)
        return
    await cb.answer(t(lang, "processing"))
    await cb.message.edit_text(t(lang, "processing"))

    try:
        data = await _download(bot, item.file_id)
        result = await process_zip(
            data, item.options, settings.repair_candidates,
            compression_level=settings.compression_level, max_size=settings.max_zip_bytes,
        )
    except ZipMendError as e:
        await cb.message.edit_text(_error_text(e, lang, "process_error"))
        return
    except TelegramAPIError as e:
        logger.error(f"Telegram error while downloading {item.file_name}: {e}")
        await cb.message.edit_text(t(lang, "process_error"))
        return
    except Exception:
        logger.exception(f"Unexpected error processing {item.file_name}")
        await cb.message.edit_text(t(lang, "process_error"))
        return

    await cb.message.edit_text(format_report(result.report, lang))
    await cb.message.answer_document(
        BufferedInputFile(result.data, filename=fixed_file_name(item.file_name)),
        caption=t(lang, "done", kept=result.kept_files, total=result.report.total_files),
    )
