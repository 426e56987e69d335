"""Tag dictionaries, value format codes and directory pointer tags."""

from typing import Dict, Tuple

# EXIF value format codes: {code: (name, element_size_bytes)}
FORMATS: Dict[int, Tuple[str, int]] = {
    1: ('UByte', 1),
    2: ('String', 1),
    3: ('UShort', 2),
    4: ('ULong', 4),
    5: ('URational', 8),
    6: ('SByte', 1),
    7: ('Undefined', 1),
    8: ('SShort', 2),
    9: ('SLong', 4),
    10: ('SRational', 8),
    11: ('SFloat', 4),
    12: ('DFloat', 8),
}

FORMAT_STRING = 2
FORMAT_USHORT = 3
FORMAT_ULONG = 4
FORMAT_URATIONAL = 5

# Sub-directory pointer tags
EXIF_IFD_POINTER_TAG = 0x8769
GPS_IFD_POINTER_TAG = 0x8825

# IFD0 / IFD1 / Exif sub-IFD tags
EXIF_TAG_NAMES: Dict[int, str] = {
    0x0100: 'ImageWidth',
    0x0101: 'ImageHeight',
    0x0103: 'Compression',
    0x010e: 'ImageDescription',
    0x010f: 'Make',
    0x0110: 'Model',
    0x0112: 'Orientation',
    0x011a: 'XResolution',
    0x011b: 'YResolution',
    0x0128: 'ResolutionUnit',
    0x0131: 'Software',
    0x0132: 'ModifyDate',
    0x013b: 'Artist',
    0x0201: 'ThumbnailOffset',
    0x0202: 'ThumbnailSize',
    0x8298: 'Copyright',
    0x829a: 'ExposureTime',
    0x829d: 'FNumber',
    0x8827: 'ISO',
    0x9003: 'DateTimeOriginal',
    0x9004: 'DateTimeDigitized',
    0x920a: 'FocalLength',
    0x9290: 'SubSecTime',
    0x9291: 'SubSecTimeOriginal',
    0x9292: 'SubSecTimeDigitized',
    0xa001: 'ColorSpace',
    0xa002: 'PixelXDimension',
    0xa003: 'PixelYDimension',
    0xa420: 'ImageUniqueID',
    0xa430: 'CameraOwnerName',
    0xa431: 'BodySerialNumber',
    0xa433: 'LensMake',
    0xa434: 'LensModel',
    0xa435: 'LensSerialModel',
}

# GPS tag names (tags 0-31)
GPS_TAG_NAMES: Dict[int, str] = {
    0: 'GPSVersionID', 1: 'GPSLatitudeRef', 2: 'GPSLatitude',
    3: 'GPSLongitudeRef', 4: 'GPSLongitude', 5: 'GPSAltitudeRef',
    6: 'GPSAltitude', 7: 'GPSTimeStamp', 8: 'GPSSatellites',
    9: 'GPSStatus', 10: 'GPSMeasureMode', 11: 'GPSDOP',
    12: 'GPSSpeedRef', 13: 'GPSSpeed', 14: 'GPSTrackRef',
    15: 'GPSTrack', 16: 'GPSImgDirectionRef', 17: 'GPSImgDirection',
    18: 'GPSMapDatum', 19: 'GPSDestLatitudeRef', 20: 'GPSDestLatitude',
    21: 'GPSDestLongitudeRef', 22: 'GPSDestLongitude', 23: 'GPSDestBearingRef',
    24: 'GPSDestBearing', 25: 'GPSDestDistanceRef', 26: 'GPSDestDistance',
    27: 'GPSProcessingMethod', 28: 'GPSAreaInformation', 29: 'GPSDateStamp',
    30: 'GPSDifferential', 31: 'GPSHPositioningError',
}

# IPTC-IIM datasets, keyed "<record>x<dataset>"
IPTC_TAG_NAMES: Dict[str, str] = {
    '2x105': 'Headline',
    '2x120': 'Description',
    '2x25': 'Keywords',
}

NAMESPACES = ('exif', 'gps', 'iptc')


def iptc_key(record: int, dataset: int) -> str:
    return f'{record}x{dataset}'
