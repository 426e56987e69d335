"""IFD traversal -- entry loop, sub-directory descent and tag storage."""

import logging
from typing import List, Optional, Set

from jpegmeta.config import ReaderConfig
from jpegmeta.cursor import ByteCursor
from jpegmeta.exif.values import ENTRY_SIZE, DirectoryEntry, decode_value, read_entry
from jpegmeta.models import ErrorKind, FatalParseError, Metadata, Value
from jpegmeta.tags import EXIF_IFD_POINTER_TAG, GPS_IFD_POINTER_TAG

logger = logging.getLogger(__name__)

# Pointer tag -> namespace of the directory it points to
POINTER_TAGS = {
    EXIF_IFD_POINTER_TAG: 'exif',
    GPS_IFD_POINTER_TAG: 'gps',
}


class _OpenDirectory:
    """A directory being decoded: where the next entry is and how many are left."""

    __slots__ = ('namespace', 'position', 'remaining')

    def __init__(self, namespace: str, position: int, remaining: int):
        self.namespace = namespace
        self.position = position
        self.remaining = remaining


class IfdWalker:
    """Walks the directories of one TIFF sub-structure into a Metadata object.

    All offsets are relative to the start of ``cursor``. A walker is used for
    a single APP1 segment and remembers which directories it has visited so
    that pointer cycles terminate.

    Sub-directories are decoded from an explicit stack, in the same order a
    depth-first descent would use, so nesting depth is bounded only by the
    input size.
    """

    def __init__(self, cursor: ByteCursor, metadata: Metadata,
                 config: Optional[ReaderConfig] = None):
        self.cursor = cursor
        self.metadata = metadata
        self.config = config or ReaderConfig.default()
        self._names = {ns: self.config.tag_names(ns) for ns in ('exif', 'gps')}
        self._visited: Set[int] = set()

    def walk(self, offset: int, namespace: str = 'exif') -> int:
        """Decode every entry of the directory at ``offset``.

        Directories reached through pointer tags are decoded as they are met.

        Returns the offset of the next directory in the chain (0 for none).
        Raises FatalParseError(CORRUPT_IFD) when any directory reached has no
        entries.
        """
        top = self._open(offset, namespace)
        if top is None:
            return 0

        length = self.cursor.length()
        stack: List[_OpenDirectory] = [top]
        while stack:
            directory = stack[-1]
            if not directory.remaining:
                stack.pop()
                continue
            directory.remaining -= 1

            # Entries past the buffer are skipped without advancing
            if directory.position + ENTRY_SIZE > length:
                logger.debug("entry at offset %d runs past end of data", directory.position)
                continue
            entry = read_entry(self.cursor, directory.position)
            directory.position += ENTRY_SIZE

            sub_offset = self.read_tag(entry, directory.namespace)
            if sub_offset is not None:
                child = self._open(sub_offset, POINTER_TAGS[entry.tag_id])
                if child is not None:
                    stack.append(child)

        return self.cursor.long_at(top.position)

    def read_tag(self, entry: DirectoryEntry, namespace: str) -> Optional[int]:
        """Decode one entry and store it.

        Pointer tags are not stored: their target offset is returned instead,
        and None for everything else.
        """
        value = decode_value(self.cursor, entry, self.config.text_encoding)
        if value is None:
            return None

        if entry.tag_id in POINTER_TAGS:
            sub_offset = _pointer_offset(value)
            if sub_offset is None:
                logger.debug("ignoring pointer %r with value %r", entry, value)
            return sub_offset

        tag_name = self._names[namespace].get(entry.tag_id)
        if tag_name:
            self.metadata.namespace(namespace)[tag_name] = value
        return None

    def _open(self, offset: int, namespace: str) -> Optional[_OpenDirectory]:
        if offset in self._visited:
            logger.debug("directory at offset %d already visited", offset)
            return None
        self._visited.add(offset)

        num_entries = self.cursor.short_at(offset)
        if not num_entries:
            raise FatalParseError(ErrorKind.CORRUPT_IFD)
        return _OpenDirectory(namespace, offset + 2, num_entries)


def _pointer_offset(value: Value) -> Optional[int]:
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None
