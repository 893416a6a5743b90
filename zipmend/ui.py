from __future__ import annotations
from html import escape
from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from zipmend.i18n import t
from zipmend.models import DiagnosticReport, ProcessingOptions

CHECKED = "✅"
UNCHECKED = "⬜"
RUN = "🛠"
CANCEL = "❌"
ARROW = "→"

ISSUE_LIMIT = 10


def format_report(report: DiagnosticReport, lang: str, limit: int = ISSUE_LIMIT) -> str:
    """HTML summary of a report; at most `limit` issues are listed."""
    lines = [
        t(lang, "report_title", count=report.total_files),
        "",
        f"{t(lang, 'confidence')}: <b>{report.encoding_confidence}%</b>",
        f"{t(lang, 'metadata_artifacts')}: {report.metadata_artifact_count}",
        f"{t(lang, 'settings_files')}: {report.settings_file_count}",
        f"{t(lang, 'hidden_files')}: {report.hidden_file_count}",
        f"{t(lang, 'encoding_issues')}: {report.encoding_issue_count}",
        "",
    ]
    if not report.issues:
        lines.append(t(lang, "no_issues"))
        return "\n".join(lines)

    lines.append(t(lang, "issues_title"))
    for issue in report.issues[:limit]:
        label = t(lang, f"kind_{issue.kind.value}")
        if issue.fixed_path is not None:
            lines.append(f"• [{label}] <code>{escape(issue.original_path)}</code> {ARROW} "
                         f"<code>{escape(issue.fixed_path)}</code>")
        else:
            lines.append(f"• [{label}] <code>{escape(issue.original_path)}</code>")
    if len(report.issues) > limit:
        lines.append(t(lang, "more_issues", count=len(report.issues) - limit))
    return "\n".join(lines)


def kb_options(options: ProcessingOptions, lang: str) -> InlineKeyboardMarkup:
    rows = []
    for name in ProcessingOptions.names():
        mark = CHECKED if getattr(options, name) else UNCHECKED
        rows.append([InlineKeyboardButton(text=f"{mark} {t(lang, f'opt_{name}')}", callback_data=f"opt:{name}")])
    rows.append([
        InlineKeyboardButton(text=f"{RUN} {t(lang, 'btn_process')}", callback_data="fix:run"),
    ])
    rows.append([
        InlineKeyboardButton(text=f"{CANCEL} {t(lang, 'btn_cancel')}", callback_data="fix:cancel"),
    ])
    return InlineKeyboardMarkup(inline_keyboard=rows)


def fixed_file_name(original: str | None) -> str:
    base = (original or "archive").rsplit("/", 1)[-1]
    if base.lower().endswith(".zip"):
        base = base[:-4]
    return f"{base or 'archive'}_fixed.zip"
