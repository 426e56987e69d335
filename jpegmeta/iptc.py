"""APP13 (IPTC-IIM) dataset parser.

Records are located by scanning for the 0x1C tag marker rather than by
walking Photoshop 8BIM resource blocks. Any bounds overrun ends parsing
quietly and keeps what was read so far.
"""

import logging
from typing import Optional

from jpegmeta.config import ReaderConfig
from jpegmeta.cursor import ByteCursor
from jpegmeta.models import Metadata
from jpegmeta.tags import iptc_key

logger = logging.getLogger(__name__)

TAG_MARKER = 0x1C
MAX_RECORD_NUMBER = 0x0F
EXTENDED_LENGTH_FLAG = 0x80


def find_first_record(cursor: ByteCursor) -> Optional[int]:
    """Offset of the first ``0x1C <record>`` pair, or None."""
    length = cursor.length()
    for i in range(length):
        if cursor.byte_at(i) == TAG_MARKER and cursor.byte_at(i + 1) < MAX_RECORD_NUMBER:
            return i
    return None


def parse_app13(metadata: Metadata, payload: ByteCursor,
                config: Optional[ReaderConfig] = None) -> None:
    """Extract known IPTC datasets from an APP13 payload into ``metadata.iptc``."""
    config = config or ReaderConfig.default()
    names = config.tag_names('iptc')
    iptc = metadata.iptc
    length = payload.length()

    i = find_first_record(payload)
    if i is None:
        logger.debug("no IPTC record marker in APP13 segment")
        return

    while i < length:
        marker = payload.byte_at(i)
        i += 1
        if marker != TAG_MARKER or i + 4 >= length:
            logger.debug("IPTC parsing stopped at offset %d", i - 1)
            return

        record = payload.byte_at(i)
        dataset = payload.byte_at(i + 1)
        i += 2
        key = iptc_key(record, dataset)

        chr0 = payload.byte_at(i)
        if chr0 & EXTENDED_LENGTH_FLAG:
            length_of_length = ((chr0 & 0x7F) << 8) | payload.byte_at(i + 1)
            i += 2
            if i + length_of_length > length:
                logger.debug("IPTC extended length for %s overruns segment", key)
                return
            tag_length = 0
            for j in range(length_of_length):
                tag_length = (tag_length << 8) | payload.byte_at(i + j)
            i += length_of_length
        else:
            tag_length = (chr0 << 8) | payload.byte_at(i + 1)
            i += 2

        if i + tag_length > length:
            logger.debug("IPTC dataset %s overruns segment", key)
            return

        tag_name = names.get(key)
        if tag_name:
            raw = payload.data[i:i + tag_length].tobytes().replace(b'\x00', b'')
            value = raw.decode(config.text_encoding, errors='replace')
            if tag_name not in iptc:
                iptc[tag_name] = value
            else:
                existing = iptc[tag_name]
                if isinstance(existing, str):
                    iptc[tag_name] = existing = [existing]
                existing.append(value)
        i += tag_length
