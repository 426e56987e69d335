"""jpegmeta -- EXIF, GPS, IPTC and thumbnail extraction from JPEG bytes."""

__version__ = "1.0.0"

from jpegmeta.models import (
    BatchResult,
    ErrorKind,
    Metadata,
    ParseResult,
    ReadResult,
)
from jpegmeta.config import ReaderConfig
from jpegmeta.reader import parse_jpeg, read_file, read_batch, collect_jpeg_files


# Lazy import -- report pulls in fpdf
def generate_report(*args, **kwargs):
    from jpegmeta.report import generate_report as _generate_report
    return _generate_report(*args, **kwargs)


__all__ = [
    "__version__",
    "ErrorKind",
    "Metadata",
    "ParseResult",
    "ReadResult",
    "BatchResult",
    "ReaderConfig",
    "parse_jpeg",
    "read_file",
    "read_batch",
    "collect_jpeg_files",
    "generate_report",
]
