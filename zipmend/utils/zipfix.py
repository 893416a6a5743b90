from __future__ import annotations
import logging
from typing import NamedTuple, Optional, Sequence

from zipmend.utils.mojibake import (
    as_raw_bytes,
    is_byte_representable,
    looks_damaged,
    looks_like_double_byte_pairs,
)

logger = logging.getLogger(__name__)

# Korean (UHC), Japanese (Windows Shift-JIS), simplified Chinese.
# Order is a policy choice: first clean strict decode wins.
DEFAULT_CANDIDATES: tuple[str, ...] = ("cp949", "cp932", "gbk")

# 0x800 == UTF-8 filename flag (bit 11)
UTF8_FLAG = 0x800


class RepairResult(NamedTuple):
    fixed: str
    was_fixed: bool


def _clean(text: str) -> bool:
    # a result that still fits in one byte per char is not East-Asian text and
    # would be flagged again on a second pass
    return not looks_damaged(text) and not is_byte_representable(text)


def try_decode(data: bytes, candidates: Sequence[str] = DEFAULT_CANDIDATES) -> Optional[tuple[str, str]]:
    """
    Strict decode under each candidate in order.
    Returns (encoding, text) for the first clean result, or None.
    """
    for enc in candidates:
        try:
            text = data.decode(enc, errors="strict")
        except (UnicodeDecodeError, LookupError):
            continue
        if _clean(text):
            return enc, text
    return None


def repair_name(name: str, candidates: Sequence[str] = DEFAULT_CANDIDATES, raw: bool = False) -> RepairResult:
    """
    Try to recover a filename that was decoded with the wrong codepage.

    Names containing real multi-byte characters are returned untouched. Clean
    looking byte strings are re-read under the primary candidate only when they
    contain double-byte pairs; damaged ones go through the whole cascade.

    `raw` says the name already carries the archive's own bytes one per
    character (see decode_entry_name). Those bytes are decoded as they are;
    re-encoding them as UTF-8 would double every high byte.
    """
    if not is_byte_representable(name):
        return RepairResult(name, False)

    if not looks_damaged(name):
        data = as_raw_bytes(name)
        if candidates and looks_like_double_byte_pairs(data):
            hit = try_decode(data, candidates[:1])
            if hit:
                logger.debug(f"Repaired {name!r} as {hit[0]}")
                return RepairResult(hit[1], True)
        return RepairResult(name, False)

    if raw:
        data = as_raw_bytes(name)
    else:
        try:
            data = name.encode("utf-8", errors="strict")
        except UnicodeEncodeError:
            return RepairResult(name, False)

    hit = try_decode(data, candidates)
    if hit:
        logger.debug(f"Repaired damaged {name!r} as {hit[0]}")
        return RepairResult(hit[1], True)
    return RepairResult(name, False)


class EntryName(NamedTuple):
    text: str
    raw: bool  # text carries undecoded bytes, one per character


def decode_entry_name(data: bytes, flag_bits: int) -> EntryName:
    """
    Turn the raw name bytes of a ZIP entry into a str for the repair engine.
    Flagged names are UTF-8 by contract. Unflagged ones are tried as UTF-8 and
    otherwise carried one byte per character, so no byte is lost.
    """
    if flag_bits & UTF8_FLAG:
        return EntryName(data.decode("utf-8", errors="replace"), False)
    try:
        return EntryName(data.decode("utf-8", errors="strict"), False)
    except UnicodeDecodeError:
        return EntryName(data.decode("latin-1"), True)


def raw_entry_name(filename: str, flag_bits: int) -> bytes:
    """
    Undo zipfile's own name decoding.
    zipfile reads unflagged names as CP437, which maps every byte.
    """
    if flag_bits & UTF8_FLAG:
        return filename.encode("utf-8")
    return filename.encode("cp437")
