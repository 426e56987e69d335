"""Directory entry decoding and typed value decoders.

Only String, UShort, ULong and URational values are decoded. Other format
codes yield no value and are skipped by the caller.
"""

import logging
from typing import Callable, Dict, Optional

from jpegmeta.config import DEFAULT_TEXT_ENCODING
from jpegmeta.cursor import ByteCursor
from jpegmeta.models import Value
from jpegmeta.tags import (
    FORMATS,
    FORMAT_STRING,
    FORMAT_ULONG,
    FORMAT_URATIONAL,
    FORMAT_USHORT,
)

logger = logging.getLogger(__name__)

ENTRY_SIZE = 12


class DirectoryEntry:
    """A single 12-byte IFD entry."""
    __slots__ = ('tag_id', 'format_code', 'count', 'value_offset', 'entry_offset')

    def __init__(self, tag_id: int, format_code: int, count: int,
                 value_offset: int, entry_offset: int):
        self.tag_id = tag_id
        self.format_code = format_code
        self.count = count
        self.value_offset = value_offset  # raw bytes 8-11, inline data or offset
        self.entry_offset = entry_offset

    @property
    def format_name(self) -> str:
        return FORMATS.get(self.format_code, ('Unknown', 1))[0]

    @property
    def inline_offset(self) -> int:
        """Absolute position of the 4-byte value field."""
        return self.entry_offset + 8

    def __repr__(self):
        return (f'DirectoryEntry(tag=0x{self.tag_id:04x}, format={self.format_name}, '
                f'count={self.count}, value=0x{self.value_offset:08x})')


def read_entry(cursor: ByteCursor, offset: int) -> DirectoryEntry:
    """Read the entry at ``offset``. The caller checks it fits in the buffer."""
    return DirectoryEntry(
        tag_id=cursor.short_at(offset),
        format_code=cursor.short_at(offset + 2),
        count=cursor.long_at(offset + 4),
        value_offset=cursor.long_at(offset + 8),
        entry_offset=offset,
    )


def _strip_zeros(raw: bytes, encoding: str) -> str:
    return raw.replace(b'\x00', b'').decode(encoding, errors='replace')


def decode_string(cursor: ByteCursor, entry: DirectoryEntry,
                  encoding: str = DEFAULT_TEXT_ENCODING) -> Optional[str]:
    if entry.count <= 4:
        start = entry.inline_offset
        raw = bytes(cursor.byte_at(start + i) for i in range(4))
    else:
        start = entry.value_offset
        if start + entry.count > cursor.length():
            return None
        raw = cursor.data[start:start + entry.count].tobytes()
    return _strip_zeros(raw, encoding)


def decode_ushort(cursor: ByteCursor, entry: DirectoryEntry,
                  encoding: str = DEFAULT_TEXT_ENCODING) -> Optional[Value]:
    start = entry.inline_offset
    if entry.count == 1:
        return cursor.short_at(start)
    if entry.count == 2:
        return [cursor.short_at(start), cursor.short_at(start + 2)]
    return None


def decode_ulong(cursor: ByteCursor, entry: DirectoryEntry,
                 encoding: str = DEFAULT_TEXT_ENCODING) -> Optional[str]:
    if entry.count == 1:
        return str(entry.value_offset)
    if entry.count == 0:
        return ''
    start = entry.value_offset
    if start + 4 * entry.count > cursor.length():
        return None
    return ','.join(str(cursor.long_at(start + 4 * i)) for i in range(entry.count))


def decode_urational(cursor: ByteCursor, entry: DirectoryEntry,
                     encoding: str = DEFAULT_TEXT_ENCODING) -> Optional[str]:
    start = entry.value_offset
    if start + 8 * entry.count > cursor.length():
        return None
    parts = []
    for i in range(entry.count):
        pos = start + 8 * i
        parts.append(f'{cursor.long_at(pos)}/{cursor.long_at(pos + 4)}')
    return ','.join(parts)


DECODERS: Dict[int, Callable[..., Optional[Value]]] = {
    FORMAT_STRING: decode_string,
    FORMAT_USHORT: decode_ushort,
    FORMAT_ULONG: decode_ulong,
    FORMAT_URATIONAL: decode_urational,
}


def decode_value(cursor: ByteCursor, entry: DirectoryEntry,
                 encoding: str = DEFAULT_TEXT_ENCODING) -> Optional[Value]:
    """Decode the value of ``entry``. Returns None when nothing can be decoded."""
    decoder = DECODERS.get(entry.format_code)
    if decoder is None:
        logger.debug("skipping %r: format %d not decoded", entry, entry.format_code)
        return None
    return decoder(cursor, entry, encoding)
