"""APP1 (Exif) segment parser -- signature, TIFF header, IFD0/IFD1 and thumbnail."""

import logging
from typing import Optional

from jpegmeta.config import ReaderConfig
from jpegmeta.cursor import ByteCursor
from jpegmeta.exif.ifd import IfdWalker
from jpegmeta.models import ErrorKind, FatalParseError, Metadata

logger = logging.getLogger(__name__)

EXIF_SIGNATURE = b'Exif\x00\x00'
MIN_EXIF_LENGTH = 8
MIN_IFD_LENGTH = 12
MAX_IFD0_OFFSET = 0xFFFF
JPEG_COMPRESSION = 6


def parse_app1(metadata: Metadata, payload: ByteCursor,
               config: Optional[ReaderConfig] = None) -> None:
    """Extract EXIF, GPS and thumbnail data from an APP1 payload.

    ``payload`` excludes the marker and length bytes. Payloads that do not
    start with the Exif signature (XMP and friends) are ignored.
    """
    length = payload.length()
    if length < MIN_EXIF_LENGTH:
        raise FatalParseError(ErrorKind.EXIF_TOO_SHORT)

    if payload.data[:len(EXIF_SIGNATURE)].tobytes() != EXIF_SIGNATURE:
        logger.debug("APP1 segment without Exif signature, skipping")
        return

    if length < MIN_IFD_LENGTH:
        raise FatalParseError(ErrorKind.IFD_TOO_SHORT)

    tiff = payload.slice(len(EXIF_SIGNATURE), length)

    if tiff.set_byte_order() is None:
        raise FatalParseError(ErrorKind.INVALID_BYTE_ORDER)
    if not tiff.has_valid_magic():
        raise FatalParseError(ErrorKind.INVALID_BYTE_ORDER_MARKER)

    ifd0_offset = tiff.long_at(4)
    if ifd0_offset > MAX_IFD0_OFFSET:
        raise FatalParseError(ErrorKind.INVALID_IFD0_OFFSET)

    walker = IfdWalker(tiff, metadata, config)
    next_offset = walker.walk(ifd0_offset, 'exif')
    if next_offset:
        # IFD1 conventionally describes the embedded thumbnail
        walker.walk(next_offset, 'exif')
        thumbnail = extract_thumbnail(tiff, metadata)
        if thumbnail is not None:
            metadata.thumbnail = thumbnail


def extract_thumbnail(tiff: ByteCursor, metadata: Metadata) -> Optional[bytes]:
    """Return JPEG thumbnail bytes described by IFD1 tags, or None."""
    exif = metadata.exif
    if _as_int(exif.get('Compression')) != JPEG_COMPRESSION:
        return None
    start = _as_int(exif.get('ThumbnailOffset'))
    size = _as_int(exif.get('ThumbnailSize'))
    if start is None or size is None:
        return None
    return tiff.slice(start, start + size).tobytes()


def _as_int(value) -> Optional[int]:
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None
