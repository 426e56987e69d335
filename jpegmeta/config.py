"""Reader configuration -- extra tag names and text decoding."""

import json
from dataclasses import dataclass, field
from typing import Dict

from jpegmeta.tags import EXIF_TAG_NAMES, GPS_TAG_NAMES, IPTC_TAG_NAMES

DEFAULT_TEXT_ENCODING = 'latin-1'


@dataclass
class ReaderConfig:
    """Configurable tag dictionaries.

    Allows reading vendor or site-specific tags without modifying source code.
    The tag fields hold extra entries merged over the built-in dictionaries.
    """

    exif_tags: Dict[int, str] = field(default_factory=dict)
    gps_tags: Dict[int, str] = field(default_factory=dict)
    iptc_tags: Dict[str, str] = field(default_factory=dict)
    text_encoding: str = DEFAULT_TEXT_ENCODING

    @classmethod
    def default(cls) -> 'ReaderConfig':
        """Return a config with no extra tags."""
        return cls()

    @classmethod
    def from_json(cls, path) -> 'ReaderConfig':
        """Load extra tags from a JSON file.

        JSON format::

            {
              "exif_tags": {"0x9286": "UserComment", "37386": "FocalLength"},
              "gps_tags": {"0x001d": "GPSDateStamp"},
              "iptc_tags": {"2x80": "Byline"},
              "text_encoding": "utf-8"
            }

        All keys are optional. Numeric keys may be hex (``0x``) or decimal.
        Entries are *added* to the built-in dictionaries, not replacing them.
        """
        with open(str(path), 'r') as f:
            data = json.load(f)

        config = cls.default()
        for raw_id, name in data.get('exif_tags', {}).items():
            config.exif_tags[_parse_tag_id(raw_id)] = name
        for raw_id, name in data.get('gps_tags', {}).items():
            config.gps_tags[_parse_tag_id(raw_id)] = name
        for key, name in data.get('iptc_tags', {}).items():
            config.iptc_tags[str(key)] = name
        if 'text_encoding' in data:
            config.text_encoding = data['text_encoding']
        return config

    def tag_names(self, namespace: str) -> Dict:
        """Built-in dictionary for ``namespace`` with the extra entries applied."""
        if namespace == 'exif':
            return {**EXIF_TAG_NAMES, **self.exif_tags}
        if namespace == 'gps':
            return {**GPS_TAG_NAMES, **self.gps_tags}
        if namespace == 'iptc':
            return {**IPTC_TAG_NAMES, **self.iptc_tags}
        raise KeyError(namespace)


def _parse_tag_id(raw) -> int:
    if isinstance(raw, int):
        return raw
    return int(str(raw), 0)
