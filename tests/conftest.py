"""Pytest fixtures: in-memory ZIP builders."""
from __future__ import annotations

import io
import struct
import zipfile
import zlib

import pytest

_DOS_DATE_1980_01_01 = (0 << 9) | (1 << 5) | 1


def build_raw_zip(entries: list[tuple[bytes, bytes]], utf8_flag: bool = False,
                  bad_crc_for: bytes | None = None) -> bytes:
    """
    Stored (uncompressed) ZIP whose entry names are written as the given raw
    bytes, the way legacy archivers do. zipfile itself always writes UTF-8 or
    ASCII names, so the headers are packed by hand.
    """
    flags = 0x800 if utf8_flag else 0
    out = io.BytesIO()
    central = io.BytesIO()
    for name, data in entries:
        crc = zlib.crc32(data) & 0xFFFFFFFF
        if bad_crc_for is not None and name == bad_crc_for:
            crc ^= 0xFFFFFFFF
        offset = out.tell()
        out.write(struct.pack(
            "<IHHHHHIIIHH",
            0x04034B50, 20, flags, 0, 0, _DOS_DATE_1980_01_01,
            crc, len(data), len(data), len(name), 0,
        ))
        out.write(name)
        out.write(data)
        central.write(struct.pack(
            "<IHHHHHHIIIHHHHHII",
            0x02014B50, 20, 20, flags, 0, 0, _DOS_DATE_1980_01_01,
            crc, len(data), len(data), len(name), 0, 0, 0, 0, 0, offset,
        ))
        central.write(name)
    cd = central.getvalue()
    cd_offset = out.tell()
    out.write(cd)
    out.write(struct.pack("<IHHHHIIH", 0x06054B50, 0, 0, len(entries), len(entries), len(cd), cd_offset, 0))
    return out.getvalue()


def build_zip(files: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", zipfile.ZIP_STORED) as zf:
        for name, data in files.items():
            zf.writestr(name, data)
    return buf.getvalue()


def read_zip(data: bytes) -> dict[str, bytes]:
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {info.filename: zf.read(info) for info in zf.infolist()}


@pytest.fixture
def raw_zip():
    return build_raw_zip


@pytest.fixture
def plain_zip():
    return build_zip


@pytest.fixture
def unzip():
    return read_zip


@pytest.fixture
def korean_name() -> str:
    return "안녕.txt"


@pytest.fixture
def korean_zip(korean_name) -> bytes:
    # EUC-KR/CP949 bytes are not valid UTF-8, as written by Windows archivers
    return build_raw_zip([(korean_name.encode("cp949"), b"hello")])
