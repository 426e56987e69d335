"""JPEG marker segment scanning.

Two independent passes run over the same buffer: ``locate_frame_header``
finds the start-of-frame marker for the image dimensions, and
``scan_segments`` walks the leading APPn segments and hands APP1/APP13
payloads to their parsers.
"""

import logging
from typing import Optional

from jpegmeta.config import ReaderConfig
from jpegmeta.cursor import ByteCursor
from jpegmeta.exif.parser import parse_app1
from jpegmeta.iptc import parse_app13
from jpegmeta.models import ErrorKind, FatalParseError, Metadata

logger = logging.getLogger(__name__)

MARKER_PREFIX = 0xFF
SOI = 0xD8
EOI = 0xD9
TEM = 0x01
APP0 = 0xE0
APP1 = 0xE1
APP13 = 0xED
APP_LAST = 0xFE  # COM (0xFE) shares the APPn layout and is walked the same way

# Start-of-frame markers; 0xC4 (DHT), 0xC8 (JPG) and 0xCC (DAC) are not frames
SOF_MARKERS = frozenset({
    0xC0, 0xC1, 0xC2, 0xC3,
    0xC5, 0xC6, 0xC7,
    0xC9, 0xCA, 0xCB,
    0xCD, 0xCE, 0xCF,
})

# Markers that stand alone without a length field
STANDALONE_MARKERS = frozenset({SOI, EOI, TEM, *range(0xD0, 0xD8)})


def is_app_marker(code: int) -> bool:
    return APP0 <= code <= APP_LAST


def scan_segments(metadata: Metadata, cursor: ByteCursor,
                  config: Optional[ReaderConfig] = None) -> None:
    """Validate SOI, locate dimensions, then parse the APPn segments in order."""
    if not (cursor.next_byte() == MARKER_PREFIX and cursor.next_byte() == SOI):
        raise FatalParseError(ErrorKind.INVALID_FORMAT)

    locate_frame_header(metadata, cursor)

    header = _read_segment_header(cursor)
    while header[0] == MARKER_PREFIX and header[1] is not None and is_app_marker(header[1]):
        code = header[1]
        declared = ((header[2] or 0) << 8) | (header[3] or 0)
        # The declared length counts its own two bytes
        advanced = cursor.position + max(declared - 2, 0)
        payload = cursor.slice(cursor.position, advanced)
        cursor.position = advanced

        if code == APP1:
            parse_app1(metadata, payload, config)
        elif code == APP13:
            parse_app13(metadata, payload, config)
        else:
            logger.debug("skipping APP%d segment (%d bytes)", code - APP0, payload.length())

        header = _read_segment_header(cursor)


def _read_segment_header(cursor: ByteCursor):
    return [cursor.next_byte() for _ in range(4)]


def locate_frame_header(metadata: Metadata, cursor: ByteCursor) -> None:
    """Find the first SOF marker and store the frame's height and width.

    Scans from offset 0 and restores the cursor position afterwards, so the
    caller can carry on with its own sequential scan. Dimensions stay unset
    when no SOF marker is found.
    """
    size = cursor.length()
    saved_position = cursor.position
    cursor.position = 0

    while cursor.position < size - 1:
        byte = cursor.next_byte()
        while byte is not None and byte != MARKER_PREFIX:
            byte = cursor.next_byte()
        if byte is None:
            break

        # Any number of 0xFF fill bytes may precede the marker code
        marker = cursor.next_byte()
        while marker == MARKER_PREFIX:
            marker = cursor.next_byte()
        if marker is None:
            break
        if marker == 0x00 or marker in STANDALONE_MARKERS:
            continue

        hi = cursor.next_byte()
        lo = cursor.next_byte()
        if hi is None or lo is None:
            break
        advanced = cursor.position + ((hi << 8) | lo) - 2

        if marker in SOF_MARKERS:
            frame = cursor.slice(cursor.position, advanced)
            # Frame header fields are always big-endian
            frame.endian = '>'
            metadata.image_height = frame.short_at(1)
            metadata.image_width = frame.short_at(3)
            break
        cursor.position = max(advanced, cursor.position)

    cursor.position = saved_position
