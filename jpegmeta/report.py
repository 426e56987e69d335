"""Batch metadata reports: a JSON document and a printable PDF rendering."""

import hashlib
import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from fpdf import FPDF

import jpegmeta
from jpegmeta.models import BatchResult, ReadResult
from jpegmeta.tags import NAMESPACES

HASH_CHUNK = 1 << 16
REQUIRED_KEYS = ('report_id', 'summary', 'files')


def file_digest(filepath: Path) -> str:
    """SHA-256 of a file, read in chunks."""
    digest = hashlib.sha256()
    with open(filepath, 'rb') as f:
        for block in iter(lambda: f.read(HASH_CHUNK), b''):
            digest.update(block)
    return digest.hexdigest()


def _file_record(read: ReadResult) -> dict:
    entry = {
        'filename': read.filepath.name,
        'path': str(read.filepath),
        'file_size': read.file_size,
        'read_time_ms': round(read.read_time_ms, 1),
        'success': read.success,
    }
    if read.error:
        entry['error'] = read.error
        return entry

    parsed = read.result
    md = parsed.metadata
    if parsed.error is not None:
        entry['error'] = parsed.error.code
    entry.update({
        'image_width': md.image_width,
        'image_height': md.image_height,
        'tag_counts': {ns: len(md.namespace(ns)) for ns in NAMESPACES},
        'thumbnail_size': len(md.thumbnail or b''),
        'exif': dict(md.exif),
        'gps': dict(md.gps),
        'iptc': dict(md.iptc),
    })
    try:
        entry['sha256'] = file_digest(read.filepath)
    except OSError:
        # Synthetic or vanished paths carry no hash
        pass
    return entry


def generate_report(
    batch_result: BatchResult,
    output_path: Optional[Path] = None,
    pdf: bool = True,
) -> dict:
    """Build the metadata report for a batch read.

    Args:
        batch_result: The BatchResult from read_batch().
        output_path: Where to write the JSON. Nothing is written when None.
        pdf: Also write ``<output_path>.pdf`` next to the JSON.

    Returns:
        The report as a dict.
    """
    records = [_file_record(r) for r in batch_result.results]
    report = {
        'jpegmeta_version': jpegmeta.__version__,
        'report_id': str(uuid.uuid4()),
        'generated_at': datetime.now(timezone.utc).isoformat(),
        'summary': {
            'total_files': batch_result.total_files,
            'parsed': batch_result.files_parsed,
            'failed': batch_result.files_failed,
            'errors': batch_result.files_errored,
            'with_gps': sum(1 for r in records if r.get('tag_counts', {}).get('gps')),
            'with_thumbnail': sum(1 for r in records if r.get('thumbnail_size')),
            'total_time_seconds': round(batch_result.total_time_seconds, 2),
        },
        'files': records,
    }

    if output_path is None:
        return report

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(report, indent=2))
    if pdf:
        generate_pdf_report(report, output_path.with_suffix('.pdf'))
    return report


# ---------------------------------------------------------------------------
# PDF rendering
# ---------------------------------------------------------------------------

_FRIENDLY_TAG_NAMES = {
    'DateTimeOriginal': 'Date/Time Original',
    'DateTimeDigitized': 'Date/Time Digitized',
    'ModifyDate': 'Modified',
    'Make': 'Manufacturer',
    'ExposureTime': 'Exposure Time',
    'FNumber': 'F-Number',
    'FocalLength': 'Focal Length',
    'CameraOwnerName': 'Camera Owner',
    'BodySerialNumber': 'Body Serial Number',
    'LensModel': 'Lens',
    'GPSLatitude': 'Latitude',
    'GPSLongitude': 'Longitude',
    'GPSAltitude': 'Altitude',
}


def friendly_tag_name(tag_name: str) -> str:
    return _FRIENDLY_TAG_NAMES.get(tag_name, tag_name)


def pdf_text(value, limit: int = 0) -> str:
    """Printable-ASCII rendering of ``value`` for the core Helvetica font.

    Tag text comes from arbitrary bytes, so anything outside 0x20-0x7E
    becomes ``?``. With ``limit`` the text is shortened with an ellipsis.
    """
    if isinstance(value, list):
        value = ', '.join(str(v) for v in value)
    text = ''.join(ch if ' ' <= ch <= '~' else '?' for ch in str(value))
    if limit and len(text) > limit:
        text = text[:limit - 3] + '...'
    return text


class MetadataReportPDF(FPDF):
    """A4 portrait layout for one report."""

    FILE_COLUMNS = (('#', 8), ('Filename', 62), ('Dimensions', 26),
                    ('EXIF', 18), ('GPS', 18), ('IPTC', 18), ('Status', 40))

    def __init__(self):
        super().__init__(orientation='P', unit='mm', format='A4')
        self.set_auto_page_break(auto=True, margin=20)
        self.add_page()

    def newline_cell(self, w, h, text, **kwargs):
        self.cell(w, h, text, new_x='LMARGIN', new_y='NEXT', **kwargs)

    def inline_cell(self, w, h, text, **kwargs):
        self.cell(w, h, text, new_x='RIGHT', new_y='TOP', **kwargs)

    def title_block(self, report: dict):
        self.set_font('Helvetica', 'B', 16)
        self.newline_cell(0, 10, 'JPEG Metadata Report')
        self.set_font('Helvetica', '', 9)
        self.set_text_color(120, 120, 120)
        self.newline_cell(0, 5, f'jpegmeta v{report.get("jpegmeta_version", "?")}')
        self.set_text_color(0, 0, 0)
        y = self.get_y() + 1
        self.line(10, y, 200, y)
        self.ln(5)
        for label, key in (('Report ID:', 'report_id'), ('Generated:', 'generated_at')):
            self.set_font('Helvetica', 'B', 10)
            self.inline_cell(45, 6, label)
            self.set_font('Helvetica', '', 10)
            self.newline_cell(0, 6, pdf_text(report.get(key, '-')))
        self.ln(3)

    def section(self, title: str):
        self.set_font('Helvetica', 'B', 11)
        self.newline_cell(0, 7, title)

    def key_values(self, rows: Iterable[Tuple[str, object]]):
        """Two columns, every other row shaded."""
        for i, (key, value) in enumerate(rows):
            shaded = i % 2 == 0
            if shaded:
                self.set_fill_color(240, 240, 245)
            if self.get_y() > 270:
                self.add_page()
            self.set_font('Helvetica', 'B', 9)
            self.inline_cell(65, 7, pdf_text(key, 40), fill=shaded)
            self.set_font('Helvetica', '', 9)
            self.newline_cell(115, 7, pdf_text(value, 70), fill=shaded)
        self.ln(3)

    def file_table(self, files: List[dict]):
        last = len(self.FILE_COLUMNS) - 1
        self.set_font('Helvetica', 'B', 7)
        self.set_fill_color(60, 60, 80)
        self.set_text_color(255, 255, 255)
        for j, (header, width) in enumerate(self.FILE_COLUMNS):
            (self.newline_cell if j == last else self.inline_cell)(width, 6, header, fill=True)
        self.set_text_color(0, 0, 0)

        self.set_font('Helvetica', '', 7)
        for i, rec in enumerate(files):
            shaded = i % 2 == 0
            if shaded:
                self.set_fill_color(245, 245, 248)
            counts = rec.get('tag_counts', {})
            width = rec.get('image_width')
            cells = [
                str(i + 1),
                pdf_text(rec.get('filename', ''), 40),
                '-' if width is None else f'{width}x{rec.get("image_height")}',
                str(counts.get('exif', 0)),
                str(counts.get('gps', 0)),
                str(counts.get('iptc', 0)),
                'OK' if rec.get('success') else pdf_text(rec.get('error', 'FAILED'), 26),
            ]
            for j, (text, (_, col_width)) in enumerate(zip(cells, self.FILE_COLUMNS)):
                (self.newline_cell if j == last else self.inline_cell)(
                    col_width, 5.5, text, fill=shaded)
        self.ln(3)

    def file_tags(self, rec: dict):
        rows = [(f'{ns.upper()}: {friendly_tag_name(name)}', value)
                for ns in NAMESPACES
                for name, value in (rec.get(ns) or {}).items()]
        if not rows:
            return
        if self.get_y() > 250:
            self.add_page()
        self.set_font('Helvetica', 'B', 10)
        self.set_text_color(30, 60, 120)
        self.newline_cell(0, 7, pdf_text(rec.get('filename', ''), 80))
        self.set_text_color(0, 0, 0)
        self.key_values(rows)


def _summary_rows(summary: Dict) -> List[Tuple[str, object]]:
    return [
        ('Total files', summary.get('total_files', 0)),
        ('Parsed', summary.get('parsed', 0)),
        ('Failed', summary.get('failed', 0)),
        ('I/O errors', summary.get('errors', 0)),
        ('With GPS', summary.get('with_gps', 0)),
        ('With thumbnail', summary.get('with_thumbnail', 0)),
        ('Total time', f'{summary.get("total_time_seconds", 0)}s'),
    ]


def generate_pdf_report(report: dict, output_path: Path) -> Path:
    """Render a report dict (as returned by generate_report) to PDF.

    Raises:
        ValueError: If the dict lacks ``report_id``, ``summary`` or ``files``.
    """
    missing = sorted(k for k in REQUIRED_KEYS if k not in report)
    if missing:
        raise ValueError(f"Report dict is missing required keys: {', '.join(missing)}")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    doc = MetadataReportPDF()
    doc.title_block(report)
    doc.section('Summary')
    doc.key_values(_summary_rows(report['summary']))

    files = report['files']
    if files:
        doc.section('Files')
        doc.file_table(files)
        for rec in files:
            doc.file_tags(rec)

    doc.output(str(output_path))
    return output_path
