"""CLI interface for jpegmeta: info, scan, thumbnail and report subcommands."""

import json
import sys
import time
from pathlib import Path

import click

import jpegmeta
from jpegmeta import log
from jpegmeta.config import ReaderConfig
from jpegmeta.helpers import orientation_degrees
from jpegmeta.reader import collect_jpeg_files, read_batch, read_file
from jpegmeta.tags import NAMESPACES
from jpegmeta.report import generate_report


def _load_config(config_path):
    if not config_path:
        return None
    return ReaderConfig.from_json(config_path)


@click.group()
@click.version_option(version=jpegmeta.__version__, prog_name='jpegmeta')
def main():
    """jpegmeta - JPEG metadata reader.

    Extract dimensions, EXIF, GPS and IPTC tags and embedded thumbnails
    from JPEG files.
    """
    pass


@main.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON.')
@click.option('--config', 'config_path', type=click.Path(exists=True),
              help='JSON file with extra tag names.')
def info(path, as_json, config_path):
    """Show the metadata of a single JPEG file."""
    read = read_file(Path(path), _load_config(config_path))

    if read.error:
        click.echo(log.cli_error(f'Error: {read.error}'), err=True)
        sys.exit(1)

    result = read.result
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.success else 1)

    click.echo(log.cli_header(f'File: {read.filepath.name}'))
    click.echo(f'Size: {read.file_size} bytes')

    if not result.success:
        click.echo(log.cli_error(f'Error: {result.error.value}'))
        sys.exit(1)

    md = result.metadata
    if md.image_width is not None:
        click.echo(f'Dimensions: {md.image_width}x{md.image_height}')
    else:
        click.echo(log.cli_warning('Dimensions: unknown (no frame header)'))

    orientation = md.exif.get('Orientation')
    if orientation is not None:
        click.echo(f'Orientation: {orientation} '
                   f'(rotate {orientation_degrees(orientation)} degrees)')

    for namespace in NAMESPACES:
        tags = md.namespace(namespace)
        if not tags:
            continue
        click.echo(log.cli_separator())
        click.echo(log.cli_bold(f'{namespace.upper()} ({len(tags)} tags)'))
        for name, value in tags.items():
            click.echo(log.cli_tag(name, value))

    if md.thumbnail:
        click.echo(log.cli_separator())
        click.echo(f'Thumbnail: {len(md.thumbnail)} bytes')


@main.command()
@click.argument('path', type=click.Path(exists=True))
@click.option('--verbose', '-v', is_flag=True, help='Show tag counts for each file.')
@click.option('--json-out', type=click.Path(), help='Write results as JSON to file.')
@click.option('--workers', '-w', type=int, default=1,
              help='Number of parallel workers (default: 1, sequential).')
@click.option('--log', 'log_path', type=click.Path(), help='Write log to file.')
@click.option('--config', 'config_path', type=click.Path(exists=True),
              help='JSON file with extra tag names.')
def scan(path, verbose, json_out, workers, log_path, config_path):
    """Read metadata from every JPEG under PATH.

    PATH can be a single file or a directory to scan recursively.
    """
    input_path = Path(path)
    config = _load_config(config_path)
    files = collect_jpeg_files(input_path)

    if not files:
        click.echo(f'No JPEG files found in {input_path}')
        return

    log_file = open(log_path, 'w') if log_path else None

    def log_msg(msg, line=None):
        click.echo(msg)
        if log_file:
            log_file.write((line or log.log_info(msg)) + '\n')
            log_file.flush()

    workers_str = f', {workers} workers' if workers > 1 else ''
    log_msg(f'jpegmeta v{jpegmeta.__version__} — scanning {len(files)} file(s){workers_str}')

    t0 = time.time()

    def progress(i, total, filepath, read):
        prefix = f'  [{i}/{total}] {filepath.name}'
        if read.error:
            plain = f'{prefix} — ERROR: {read.error}'
            log_msg(log.cli_error(plain), log.log_error(plain))
        elif not read.result.success:
            plain = f'{prefix} — FAILED: {read.result.error.value}'
            log_msg(log.cli_error(plain), log.log_error(plain))
        else:
            md = read.result.metadata
            plain = f'{prefix} — OK'
            if verbose:
                plain += (f' ({len(md.exif)} exif, {len(md.gps)} gps, '
                          f'{len(md.iptc)} iptc')
                plain += ', thumbnail)' if md.thumbnail else ')'
            log_msg(log.cli_success(plain), log.log_info(plain))

    batch = read_batch(input_path, config=config,
                       progress_callback=progress, workers=workers)

    elapsed = time.time() - t0
    log_msg(f'\nDone in {elapsed:.1f}s')
    log_msg(f'  Total:   {batch.total_files}')
    log_msg(f'  Parsed:  {batch.files_parsed}')
    log_msg(f'  Failed:  {batch.files_failed}')
    log_msg(f'  Errors:  {batch.files_errored}')

    if json_out:
        results_json = []
        for read in batch.results:
            entry = {
                'file': str(read.filepath),
                'file_size': read.file_size,
                'read_time_ms': round(read.read_time_ms, 1),
                'error': read.error,
            }
            if read.result is not None:
                entry.update(read.result.to_dict())
            results_json.append(entry)
        with open(json_out, 'w') as f:
            json.dump(results_json, f, indent=2)
        log_msg(f'Results written to {json_out}')

    if log_file:
        log_file.close()

    if batch.files_failed or batch.files_errored:
        sys.exit(1)


@main.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(), required=True,
              help='Where to write the thumbnail JPEG.')
@click.option('--config', 'config_path', type=click.Path(exists=True),
              help='JSON file with extra tag names.')
def thumbnail(path, output, config_path):
    """Extract the embedded EXIF thumbnail of a JPEG file."""
    read = read_file(Path(path), _load_config(config_path))
    if read.error:
        click.echo(log.cli_error(f'Error: {read.error}'), err=True)
        sys.exit(1)
    if not read.result.success:
        click.echo(log.cli_error(f'Error: {read.result.error.value}'), err=True)
        sys.exit(1)

    data = read.result.metadata.thumbnail
    if not data:
        click.echo(log.cli_warning(f'No embedded thumbnail in {read.filepath.name}'), err=True)
        sys.exit(1)

    out = Path(output)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(data)
    click.echo(f'Wrote {len(data)} bytes to {out}')


@main.command()
@click.argument('path', type=click.Path(exists=True))
@click.option('--output', '-o', type=click.Path(), required=True,
              help='Report JSON path. A PDF is written next to it.')
@click.option('--no-pdf', is_flag=True, help='Skip the companion PDF.')
@click.option('--workers', '-w', type=int, default=1,
              help='Number of parallel workers (default: 1, sequential).')
@click.option('--config', 'config_path', type=click.Path(exists=True),
              help='JSON file with extra tag names.')
def report(path, output, no_pdf, workers, config_path):
    """Write a JSON (and PDF) metadata report for PATH."""
    batch = read_batch(Path(path), config=_load_config(config_path), workers=workers)
    if not batch.total_files:
        click.echo(f'No JPEG files found in {path}')
        return

    generate_report(batch, output_path=Path(output), pdf=not no_pdf)
    click.echo(f'Report for {batch.total_files} file(s): {output}')
    if not no_pdf:
        click.echo(f'PDF: {Path(output).with_suffix(".pdf")}')


if __name__ == '__main__':
    main()
