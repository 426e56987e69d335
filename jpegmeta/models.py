"""Data models for jpegmeta parse results and batch runs."""

import base64
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

Value = Union[int, str, List[int]]
IptcValue = Union[str, List[str]]


class ErrorKind(Enum):
    """Fatal parse errors. The value is the human-readable message."""
    INVALID_FORMAT = "File is not a valid JPEG"
    EXIF_TOO_SHORT = "EXIF data too short"
    IFD_TOO_SHORT = "IFD data too short"
    INVALID_BYTE_ORDER = "Invalid byte order"
    INVALID_BYTE_ORDER_MARKER = "Invalid byte order marker"
    INVALID_IFD0_OFFSET = "Invalid IFD0 offset"
    CORRUPT_IFD = "Couldn't find subdirectories in IFD"

    @property
    def code(self) -> str:
        """CamelCase name used in JSON output, e.g. ``InvalidIFD0Offset``."""
        return _ERROR_CODES[self]


_ERROR_CODES = {
    ErrorKind.INVALID_FORMAT: 'InvalidFormat',
    ErrorKind.EXIF_TOO_SHORT: 'ExifTooShort',
    ErrorKind.IFD_TOO_SHORT: 'IfdTooShort',
    ErrorKind.INVALID_BYTE_ORDER: 'InvalidByteOrder',
    ErrorKind.INVALID_BYTE_ORDER_MARKER: 'InvalidByteOrderMarker',
    ErrorKind.INVALID_IFD0_OFFSET: 'InvalidIFD0Offset',
    ErrorKind.CORRUPT_IFD: 'CorruptIFD',
}


class FatalParseError(Exception):
    """Raised inside the decoder for fatal conditions; never escapes parse_jpeg()."""

    def __init__(self, kind: ErrorKind):
        super().__init__(kind.value)
        self.kind = kind


@dataclass
class Metadata:
    """Metadata extracted from one JPEG."""
    image_width: Optional[int] = None
    image_height: Optional[int] = None
    exif: Dict[str, Value] = field(default_factory=dict)
    gps: Dict[str, Value] = field(default_factory=dict)
    iptc: Dict[str, IptcValue] = field(default_factory=dict)
    thumbnail: Optional[bytes] = None

    def namespace(self, name: str) -> Dict[str, Any]:
        """Return the tag map for ``exif``, ``gps`` or ``iptc``."""
        if name == 'exif':
            return self.exif
        if name == 'gps':
            return self.gps
        if name == 'iptc':
            return self.iptc
        raise KeyError(name)


@dataclass
class ParseResult:
    """Outcome of parse_jpeg(). On failure, metadata is empty."""
    success: bool
    error: Optional[ErrorKind] = None
    metadata: Metadata = field(default_factory=Metadata)

    def to_dict(self, thumbnail_base64: bool = True) -> Dict[str, Any]:
        """Render the result as plain JSON-compatible types."""
        md = self.metadata
        out: Dict[str, Any] = {'success': self.success}
        if self.error is not None:
            out['error'] = self.error.code
        if md.image_width is not None:
            out['imageWidth'] = md.image_width
        if md.image_height is not None:
            out['imageHeight'] = md.image_height
        out['exif'] = dict(md.exif)
        out['gps'] = dict(md.gps)
        out['iptc'] = {k: list(v) if isinstance(v, list) else v
                       for k, v in md.iptc.items()}
        if md.thumbnail is not None:
            if thumbnail_base64:
                out['thumbnail'] = base64.b64encode(md.thumbnail).decode('ascii')
            else:
                out['thumbnail'] = md.thumbnail
        return out


@dataclass
class ReadResult:
    """Result of reading and parsing a single file."""
    filepath: Path
    file_size: int = 0
    read_time_ms: float = 0.0
    result: Optional[ParseResult] = None
    error: Optional[str] = None  # I/O level error, parse errors live in result

    @property
    def success(self) -> bool:
        return self.error is None and self.result is not None and self.result.success


@dataclass
class BatchResult:
    """Result of a batch read run."""
    results: List[ReadResult] = field(default_factory=list)
    total_files: int = 0
    files_parsed: int = 0
    files_failed: int = 0
    files_errored: int = 0
    total_time_seconds: float = 0.0
