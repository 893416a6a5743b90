"""
Signatures of filenames that were decoded with the wrong codepage.

The checks are conservative: they only flag characters that never belong in a
real filename, so a plausible-looking but wrong name passes unnoticed.
"""
from __future__ import annotations
import re

# C1 controls, BOM, the two non-characters and the replacement char
_DAMAGE_RX = re.compile("[\u0080-\u009f\ufeff\ufffe\uffff\ufffd]")


def looks_damaged(text: str) -> bool:
    return _DAMAGE_RX.search(text) is not None


def is_byte_representable(text: str) -> bool:
    """True if every character fits in one byte (raw bytes carried in a str)."""
    return all(ord(ch) <= 0xFF for ch in text)


def as_raw_bytes(text: str) -> bytes:
    """One byte per codepoint. Only valid for byte-representable text."""
    return text.encode("latin-1")


def count_double_byte_pairs(data: bytes) -> int:
    """
    Count lead/trail pairs of an East-Asian double-byte codepage
    (lead 0x81-0xFE, trail 0x41-0xFE). Matched pairs are consumed whole,
    so pairs never overlap.
    """
    pairs = 0
    i = 0
    n = len(data)
    while i < n - 1:
        lead, trail = data[i], data[i + 1]
        if 0x81 <= lead <= 0xFE and 0x41 <= trail <= 0xFE:
            pairs += 1
            i += 2
            continue
        i += 1
    return pairs


def looks_like_double_byte_pairs(data: bytes) -> bool:
    return count_double_byte_pairs(data) > 0
