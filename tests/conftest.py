"""Shared test fixtures: synthetic JPEG, Exif and IPTC byte builders."""

import struct
import pytest


def build_tiff(entries, endian='<', next_ifd=None, extra_ifds=None):
    """Build a TIFF sub-structure (what follows ``Exif\\0\\0``) in memory.

    Args:
        entries: List of (tag_id, format_code, count, value_or_bytes) tuples
            for IFD0. For inline values pass an int (packed as u32) or
            4 raw bytes; for out-of-line values pass longer bytes.
        endian: '<' for little-endian, '>' for big-endian.
        next_ifd: Optional list of entries for a chained IFD1.
        extra_ifds: Optional dict {pointer_tag: entries}. A pointer entry is
            appended to IFD0 for each, pointing at a sub-IFD laid out after
            IFD0's data.

    Returns:
        bytes: TIFF header + directories + out-of-line data.
    """
    bo = b'II' if endian == '<' else b'MM'
    ifds = [list(entries)]
    pointer_slots = []
    for tag, sub_entries in (extra_ifds or {}).items():
        pointer_slots.append((len(ifds[0]), len(ifds)))
        ifds[0].append((tag, 4, 1, None))
        ifds.append(list(sub_entries))
    chained_index = None
    if next_ifd is not None:
        chained_index = len(ifds)
        ifds.append(list(next_ifd))

    def ool_size(ifd):
        return sum(len(v) for _, _, _, v in ifd if isinstance(v, bytes) and len(v) > 4)

    starts = []
    offset = 8
    for ifd in ifds:
        starts.append(offset)
        offset += 2 + 12 * len(ifd) + 4 + ool_size(ifd)

    # Resolve pointer placeholders now that sub-IFD offsets are known
    for entry_index, ifd_index in pointer_slots:
        tag = ifds[0][entry_index][0]
        ifds[0][entry_index] = (tag, 4, 1, starts[ifd_index])

    out = bo + struct.pack(endian + 'H', 42) + struct.pack(endian + 'I', starts[0])
    for i, ifd in enumerate(ifds):
        data_start = starts[i] + 2 + 12 * len(ifd) + 4
        ifd_bytes = struct.pack(endian + 'H', len(ifd))
        data_bytes = b''
        for tag_id, fmt, count, value in ifd:
            ifd_bytes += struct.pack(endian + 'HHI', tag_id, fmt, count)
            if isinstance(value, bytes) and len(value) > 4:
                ifd_bytes += struct.pack(endian + 'I', data_start + len(data_bytes))
                data_bytes += value
            elif isinstance(value, bytes):
                ifd_bytes += value.ljust(4, b'\x00')
            else:
                ifd_bytes += struct.pack(endian + 'I', value)
        link = starts[chained_index] if (i == 0 and chained_index is not None) else 0
        ifd_bytes += struct.pack(endian + 'I', link)
        out += ifd_bytes + data_bytes
    return out


def ushort_inline(value, endian='<'):
    """A UShort value left-aligned in the 4-byte value field."""
    return struct.pack(endian + 'HH', value, 0)


def build_exif_segment(tiff_bytes):
    """Wrap a TIFF sub-structure into a complete APP1 segment."""
    payload = b'Exif\x00\x00' + tiff_bytes
    return b'\xff\xe1' + struct.pack('>H', len(payload) + 2) + payload


def build_app_segment(marker, payload):
    """Any APPn segment (marker 0xE0-0xFE) with the given payload."""
    return bytes([0xFF, marker]) + struct.pack('>H', len(payload) + 2) + payload


def iptc_dataset(record, dataset, value):
    """One IPTC-IIM dataset with a standard 16-bit length."""
    return bytes([0x1C, record, dataset]) + struct.pack('>H', len(value)) + value


def build_iptc_segment(datasets, prefix=b'Photoshop 3.0\x008BIM\x04\x04\x00\x00'):
    """APP13 segment containing the given dataset bytes after a Photoshop header."""
    body = b''.join(datasets)
    payload = prefix + struct.pack('>I', len(body)) + body
    return build_app_segment(0xED, payload)


def build_sof(height, width, marker=0xC0):
    """A baseline frame header segment with three components."""
    payload = struct.pack('>BHHB', 8, height, width, 3) + b'\x01\x22\x00\x02\x11\x01\x03\x11\x01'
    return bytes([0xFF, marker]) + struct.pack('>H', len(payload) + 2) + payload


def build_jpeg(*segments, sof=None, scan_data=b'\x12\x34\xff\x00\x56'):
    """Assemble SOI + segments + optional SOF + minimal scan + EOI."""
    out = b'\xff\xd8' + b''.join(segments)
    if sof is not None:
        out += build_sof(*sof)
    sos = b'\xff\xda' + struct.pack('>H', 8) + b'\x01\x01\x00\x00\x3f\x00'
    return out + sos + scan_data + b'\xff\xd9'


# A fake embedded JPEG used as thumbnail payload
THUMBNAIL_BYTES = b'\xff\xd8\xff\xdbTHUMBNAIL-DATA\xff\xd9'


def build_tiff_with_thumbnail(endian='<', thumb=THUMBNAIL_BYTES):
    """IFD0 with Orientation and an IFD1 describing a JPEG thumbnail.

    Returns (tiff_bytes, thumbnail_offset).
    """
    ifd0 = [(0x0112, 3, 1, ushort_inline(1, endian))]
    # First pass to learn where IFD1's data ends
    ifd1 = [
        (0x0103, 3, 1, ushort_inline(6, endian)),
        (0x0201, 4, 1, 0),
        (0x0202, 4, 1, len(thumb)),
    ]
    layout = build_tiff(ifd0, endian=endian, next_ifd=ifd1)
    thumb_offset = len(layout)
    ifd1[1] = (0x0201, 4, 1, thumb_offset)
    tiff = build_tiff(ifd0, endian=endian, next_ifd=ifd1) + thumb
    return tiff, thumb_offset


# ---------------------------------------------------------------------------
# File fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def camera_jpeg_bytes():
    """A JPEG with dimensions, EXIF (incl. sub-IFD and GPS), IPTC and a thumbnail."""
    date_val = b'2024:06:15 10:30:00\x00'
    make = b'Canon\x00'
    model = b'EOS R5\x00'
    lat = struct.pack('<6I', 45, 1, 30, 1, 1234, 100)
    ifd0 = [
        (0x010f, 2, len(make), make),
        (0x0110, 2, len(model), model),
        (0x0112, 3, 1, ushort_inline(6)),
    ]
    exif_sub = [(0x9003, 2, len(date_val), date_val)]
    gps = [
        (0x0001, 2, 2, b'N\x00\x00\x00'),
        (0x0002, 5, 3, lat),
    ]
    # Assemble without thumbnail first to learn layout sizes
    ifd1 = [
        (0x0103, 3, 1, ushort_inline(6)),
        (0x0201, 4, 1, 0),
        (0x0202, 4, 1, len(THUMBNAIL_BYTES)),
    ]
    extra = {0x8769: exif_sub, 0x8825: gps}
    layout = build_tiff(ifd0, next_ifd=ifd1, extra_ifds=extra)
    ifd1[1] = (0x0201, 4, 1, len(layout))
    tiff = build_tiff(ifd0, next_ifd=ifd1, extra_ifds=extra) + THUMBNAIL_BYTES

    iptc = build_iptc_segment([
        iptc_dataset(2, 105, b'Sunset'),
        iptc_dataset(2, 25, b'beach'),
        iptc_dataset(2, 25, b'summer'),
    ])
    return build_jpeg(build_app_segment(0xE0, b'JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'),
                      build_exif_segment(tiff), iptc, sof=(480, 640))


@pytest.fixture
def tmp_jpeg(tmp_path, camera_jpeg_bytes):
    """Write the camera JPEG to disk."""
    filepath = tmp_path / 'photo.jpg'
    filepath.write_bytes(camera_jpeg_bytes)
    return filepath


@pytest.fixture
def tmp_jpeg_dir(tmp_path, camera_jpeg_bytes):
    """A directory with two good JPEGs, one broken JPEG and a non-JPEG file."""
    d = tmp_path / 'photos'
    (d / 'sub').mkdir(parents=True)
    (d / 'a.jpg').write_bytes(camera_jpeg_bytes)
    (d / 'sub' / 'b.JPEG').write_bytes(build_jpeg(sof=(10, 20)))
    (d / 'broken.jpg').write_bytes(b'not a jpeg at all')
    (d / 'notes.txt').write_text('ignore me')
    return d
