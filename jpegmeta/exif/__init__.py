"""EXIF (APP1) decoding package.

Re-exports the public names so ``from jpegmeta.exif import X`` works for
every submodule.
"""

# --- values.py: entry layout and typed value decoders ---
from jpegmeta.exif.values import (  # noqa: F401
    ENTRY_SIZE,
    DECODERS,
    DirectoryEntry,
    read_entry,
    decode_value,
    decode_string,
    decode_ushort,
    decode_ulong,
    decode_urational,
)

# --- ifd.py: directory walking and pointer recursion ---
from jpegmeta.exif.ifd import (  # noqa: F401
    POINTER_TAGS,
    IfdWalker,
)

# --- parser.py: APP1 signature, TIFF header, thumbnail ---
from jpegmeta.exif.parser import (  # noqa: F401
    EXIF_SIGNATURE,
    parse_app1,
    extract_thumbnail,
)
