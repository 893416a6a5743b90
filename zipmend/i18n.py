"""User-facing texts. Keys are shared by all languages; `ko` is the reference set."""
from __future__ import annotations
from typing import Dict, Optional

SUPPORTED_LANGS = ("ko", "en", "ja", "zh")

LANG_NAMES = {
    "ko": "한국어",
    "en": "English",
    "ja": "日本語",
    "zh": "中文",
}

MESSAGES: Dict[str, Dict[str, str]] = {
    "ko": {
        "start": (
            "<b>ZIP 인코딩 픽서</b>\n"
            "맥에서 만든 ZIP 파일을 윈도우에서 깨지지 않게 변환합니다.\n\n"
            "ZIP 파일을 보내 주세요. 진단 결과와 변환 옵션을 보여 드립니다.\n"
            "<code>/lang ko|en|ja|zh</code> — 언어 변경"
        ),
        "zip_only": "ZIP 파일만 업로드할 수 있습니다.",
        "too_large": "파일이 너무 큽니다 (최대 {limit} MB).",
        "analyzing": "분석 중...",
        "processing": "변환 중...",
        "analyze_error": "ZIP 파일 분석 중 오류가 발생했습니다.",
        "process_error": "처리 중 오류가 발생했습니다.",
        "malformed": "올바른 ZIP 파일이 아닙니다.",
        "entry_error": "압축 파일 안의 파일을 읽을 수 없습니다: <code>{path}</code>",
        "expired": "세션이 만료되었습니다. ZIP 파일을 다시 보내 주세요.",
        "cancelled": "취소되었습니다.",
        "done": "완료! {kept}/{total}개 파일이 포함되었습니다.",
        "report_title": "<b>진단 결과</b> — {count}개 파일",
        "confidence": "인코딩 이슈 가능성",
        "metadata_artifacts": "__MACOSX 파일",
        "settings_files": ".DS_Store 파일",
        "hidden_files": "숨김 파일",
        "encoding_issues": "인코딩 문제 파일",
        "issues_title": "<b>감지된 이슈</b>",
        "no_issues": "문제가 발견되지 않았습니다.",
        "more_issues": "외 {count}개 이슈...",
        "kind_encoding": "인코딩",
        "kind_metadata-artifact": "MACOSX",
        "kind_settings-file": "DS_Store",
        "kind_hidden-file": "숨김",
        "options_title": "<b>변환 옵션</b>",
        "opt_remove_metadata_artifacts": "__MACOSX 폴더 제거",
        "opt_remove_settings_files": ".DS_Store 파일 제거",
        "opt_remove_hidden_files": "숨김 파일 제거",
        "opt_fix_encoding": "파일명 인코딩 자동 수정",
        "btn_process": "윈도우 호환 ZIP으로 변환",
        "btn_cancel": "취소",
        "lang_set": "언어가 변경되었습니다: {name}",
        "lang_usage": "사용법: <code>/lang ko|en|ja|zh</code>",
    },
    "en": {
        "start": (
            "<b>ZIP Encoding Fixer</b>\n"
            "Fix macOS ZIP filenames so they display correctly on Windows.\n\n"
            "Send me a ZIP file and I'll show a diagnosis and conversion options.\n"
            "<code>/lang ko|en|ja|zh</code> — change language"
        ),
        "zip_only": "Only ZIP files are supported.",
        "too_large": "File is too large (max {limit} MB).",
        "analyzing": "Analyzing...",
        "processing": "Converting...",
        "analyze_error": "An error occurred while analyzing the ZIP.",
        "process_error": "An error occurred during processing.",
        "malformed": "This is not a valid ZIP file.",
        "entry_error": "Could not read a file inside the archive: <code>{path}</code>",
        "expired": "Session expired. Please send the ZIP file again.",
        "cancelled": "Cancelled.",
        "done": "Done! {kept} of {total} files included.",
        "report_title": "<b>Diagnosis</b> — {count} files",
        "confidence": "Encoding issue likelihood",
        "metadata_artifacts": "__MACOSX files",
        "settings_files": ".DS_Store files",
        "hidden_files": "Hidden files",
        "encoding_issues": "Files with encoding issues",
        "issues_title": "<b>Detected Issues</b>",
        "no_issues": "No issues found.",
        "more_issues": "{count} more issues...",
        "kind_encoding": "Encoding",
        "kind_metadata-artifact": "MACOSX",
        "kind_settings-file": "DS_Store",
        "kind_hidden-file": "Hidden",
        "options_title": "<b>Conversion Options</b>",
        "opt_remove_metadata_artifacts": "Remove __MACOSX folder",
        "opt_remove_settings_files": "Remove .DS_Store files",
        "opt_remove_hidden_files": "Remove hidden files",
        "opt_fix_encoding": "Auto-fix filename encoding",
        "btn_process": "Convert to Windows-compatible ZIP",
        "btn_cancel": "Cancel",
        "lang_set": "Language changed: {name}",
        "lang_usage": "Usage: <code>/lang ko|en|ja|zh</code>",
    },
    "ja": {
        "start": (
            "<b>ZIP エンコーディング修正</b>\n"
            "macOS で作成した ZIP のファイル名を Windows で正しく表示できるようにします。\n\n"
            "ZIP ファイルを送ってください。診断結果と変換オプションを表示します。\n"
            "<code>/lang ko|en|ja|zh</code> — 言語の変更"
        ),
        "zip_only": "ZIP ファイルのみ対応しています。",
        "too_large": "ファイルが大きすぎます（最大 {limit} MB）。",
        "analyzing": "分析中...",
        "processing": "変換中...",
        "analyze_error": "ZIP の分析中にエラーが発生しました。",
        "process_error": "処理中にエラーが発生しました。",
        "malformed": "有効な ZIP ファイルではありません。",
        "entry_error": "アーカイブ内のファイルを読み込めません: <code>{path}</code>",
        "expired": "セッションの有効期限が切れました。ZIP ファイルをもう一度送ってください。",
        "cancelled": "キャンセルしました。",
        "done": "完了！{total} 件中 {kept} 件のファイルを含めました。",
        "report_title": "<b>診断結果</b> — {count} 件のファイル",
        "confidence": "エンコーディング問題の可能性",
        "metadata_artifacts": "__MACOSX ファイル",
        "settings_files": ".DS_Store ファイル",
        "hidden_files": "隠しファイル",
        "encoding_issues": "エンコーディング問題のあるファイル",
        "issues_title": "<b>検出された問題</b>",
        "no_issues": "問題は見つかりませんでした。",
        "more_issues": "他 {count} 件...",
        "kind_encoding": "エンコーディング",
        "kind_metadata-artifact": "MACOSX",
        "kind_settings-file": "DS_Store",
        "kind_hidden-file": "隠し",
        "options_title": "<b>変換オプション</b>",
        "opt_remove_metadata_artifacts": "__MACOSX フォルダを削除",
        "opt_remove_settings_files": ".DS_Store ファイルを削除",
        "opt_remove_hidden_files": "隠しファイルを削除",
        "opt_fix_encoding": "ファイル名のエンコーディングを自動修正",
        "btn_process": "Windows 互換 ZIP に変換",
        "btn_cancel": "キャンセル",
        "lang_set": "言語を変更しました: {name}",
        "lang_usage": "使い方: <code>/lang ko|en|ja|zh</code>",
    },
    "zh": {
        "start": (
            "<b>ZIP 编码修复器</b>\n"
            "修复 macOS 生成的 ZIP 文件名，使其在 Windows 上正常显示。\n\n"
            "请发送 ZIP 文件，我会显示诊断结果和转换选项。\n"
            "<code>/lang ko|en|ja|zh</code> — 切换语言"
        ),
        "zip_only": "仅支持 ZIP 文件。",
        "too_large": "文件过大（最大 {limit} MB）。",
        "analyzing": "分析中...",
        "processing": "转换中...",
        "analyze_error": "分析 ZIP 时出错。",
        "process_error": "处理时出错。",
        "malformed": "不是有效的 ZIP 文件。",
        "entry_error": "无法读取压缩包内的文件：<code>{path}</code>",
        "expired": "会话已过期，请重新发送 ZIP 文件。",
        "cancelled": "已取消。",
        "done": "完成！共 {total} 个文件，已包含 {kept} 个。",
        "report_title": "<b>诊断结果</b> — {count} 个文件",
        "confidence": "编码问题可能性",
        "metadata_artifacts": "__MACOSX 文件",
        "settings_files": ".DS_Store 文件",
        "hidden_files": "隐藏文件",
        "encoding_issues": "编码问题文件",
        "issues_title": "<b>检测到的问题</b>",
        "no_issues": "未发现问题。",
        "more_issues": "还有 {count} 个问题...",
        "kind_encoding": "编码",
        "kind_metadata-artifact": "MACOSX",
        "kind_settings-file": "DS_Store",
        "kind_hidden-file": "隐藏",
        "options_title": "<b>转换选项</b>",
        "opt_remove_metadata_artifacts": "移除 __MACOSX 文件夹",
        "opt_remove_settings_files": "移除 .DS_Store 文件",
        "opt_remove_hidden_files": "移除隐藏文件",
        "opt_fix_encoding": "自动修复文件名编码",
        "btn_process": "转换为 Windows 兼容 ZIP",
        "btn_cancel": "取消",
        "lang_set": "语言已切换：{name}",
        "lang_usage": "用法：<code>/lang ko|en|ja|zh</code>",
    },
}

# Explicit /lang choices, per Telegram user
_USER_LANG: Dict[int, str] = {}


def resolve_lang(code: Optional[str], default: str = "ko") -> str:
    """Map a Telegram language_code ("en-US", "zh-hans", ...) to a supported language."""
    if code:
        base = code.lower().replace("_", "-").split("-")[0]
        if base in MESSAGES:
            return base
    return default if default in MESSAGES else "ko"


def set_user_lang(user_id: int, lang: str) -> bool:
    if lang not in MESSAGES:
        return False
    _USER_LANG[user_id] = lang
    return True


def user_lang(user_id: int, language_code: Optional[str], default: str = "ko") -> str:
    return _USER_LANG.get(user_id) or resolve_lang(language_code, default)


def t(lang: str, key: str, **kwargs) -> str:
    table = MESSAGES.get(lang, MESSAGES["ko"])
    text = table.get(key) or MESSAGES["ko"][key]
    return text.format(**kwargs) if kwargs else text
