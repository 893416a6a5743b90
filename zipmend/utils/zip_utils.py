"""ZIP container I/O: source archive -> ArchiveEntry list, entries -> new archive bytes."""
from __future__ import annotations
import io
import logging
import time
import zipfile
import zlib
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional

from zipmend.errors import ArchiveTooLargeError, EntryReadError, MalformedArchiveError
from zipmend.models import ArchiveEntry
from zipmend.utils.zipfix import decode_entry_name, raw_entry_name

logger = logging.getLogger(__name__)

# Output archives are always rebuilt with this policy
DEFAULT_COMPRESSION_LEVEL = 6

# Anything zipfile may raise while inflating one member
_READ_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError, OSError)


def check_size(zip_bytes: bytes, max_size: int) -> None:
    if len(zip_bytes) > max_size:
        raise ArchiveTooLargeError(len(zip_bytes), max_size)


def _loader(zf: zipfile.ZipFile, info: zipfile.ZipInfo, path: str):
    def load() -> bytes:
        try:
            return zf.read(info)
        except _READ_ERRORS as e:
            logger.error(f"Error extracting {path}: {e}")
            raise EntryReadError(path, str(e)) from e
    return load


@contextmanager
def open_archive(zip_bytes: bytes) -> Iterator[List[ArchiveEntry]]:
    """
    Decode a ZIP into entries in central-directory order.
    Payloads are read lazily and only while the context is open.
    """
    try:
        zf = zipfile.ZipFile(io.BytesIO(zip_bytes), "r")
    except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, ValueError) as e:
        logger.error(f"Invalid ZIP file: {e}")
        raise MalformedArchiveError() from e

    with zf:
        entries: List[ArchiveEntry] = []
        for info in zf.infolist():
            name = decode_entry_name(raw_entry_name(info.filename, info.flag_bits), info.flag_bits)
            entries.append(ArchiveEntry(
                path=name.text,
                is_dir=info.is_dir(),
                loader=_loader(zf, info, name.text),
                date_time=info.date_time,
                raw_name=name.raw,
            ))
        logger.info(f"Opened ZIP archive with {len(entries)} entries")
        yield entries


def make_zip(entries: Iterable[ArchiveEntry], compression_level: int = DEFAULT_COMPRESSION_LEVEL) -> bytes:
    """
    Write entries into a new DEFLATE archive.
    The buffer is only returned once every entry is written; a read failure
    propagates and the half-built archive is dropped.
    """
    zip_buffer = io.BytesIO()
    count = 0
    with zipfile.ZipFile(zip_buffer, "w", zipfile.ZIP_DEFLATED, compresslevel=compression_level) as zip_file:
        for entry in entries:
            if entry.is_dir:
                continue
            info = zipfile.ZipInfo(entry.path, date_time=_date_time(entry.date_time))
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = 0o644 << 16
            # non-ASCII names get the UTF-8 flag from zipfile itself
            zip_file.writestr(info, entry.read(), compresslevel=compression_level)
            count += 1

    zip_bytes = zip_buffer.getvalue()
    logger.info(f"Created ZIP archive with {count} files ({len(zip_bytes)} bytes)")
    return zip_bytes


def _date_time(value: Optional[tuple]) -> tuple:
    if value and value[0] >= 1980:
        return tuple(value)
    return time.localtime(time.time())[:6]


def list_names(zip_bytes: bytes) -> List[str]:
    """Entry names as the repair engine sees them (directories included)."""
    with open_archive(zip_bytes) as entries:
        return [e.path for e in entries]
