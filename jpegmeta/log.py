"""Console and log-file formatting for the jpegmeta CLI.

Console text is wrapped in ANSI styles when stdout is a terminal. Lines
written to a ``--log`` file are always plain, with a timestamp and level.
"""

import os
import sys
from datetime import datetime

RESET = '\033[0m'

# Style name -> SGR parameters
STYLES = {
    'header': '1;36',
    'ok': '32',
    'warn': '33',
    'fail': '1;31',
    'info': '36',
    'dim': '2',
    'bold': '1;37',
}

SEPARATOR_WIDTH = 60
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'


def _stdout_is_terminal() -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    stream = getattr(sys, 'stdout', None)
    return bool(stream is not None and hasattr(stream, 'isatty') and stream.isatty())


_color = _stdout_is_terminal()


def set_color_enabled(enabled: bool):
    """Force colors on or off, overriding terminal detection."""
    global _color
    _color = bool(enabled)


def color_enabled() -> bool:
    return _color


def style(name: str, text: str) -> str:
    """Wrap ``text`` in the named style, or return it unchanged without color."""
    if not _color:
        return text
    return f'\033[{STYLES[name]}m{text}{RESET}'


# -- console ------------------------------------------------------------------

def cli_header(text: str) -> str:
    return style('header', text)


def cli_success(text: str) -> str:
    """Files that parsed."""
    return style('ok', text)


def cli_warning(text: str) -> str:
    """Files without dimensions or thumbnail."""
    return style('warn', text)


def cli_error(text: str) -> str:
    """Fatal parse errors and unreadable files."""
    return style('fail', text)


def cli_info(text: str) -> str:
    return style('info', text)


def cli_dim(text: str) -> str:
    return style('dim', text)


def cli_bold(text: str) -> str:
    return style('bold', text)


def cli_tag(name: str, value) -> str:
    """Indented ``Name: value`` line for one decoded tag."""
    label = cli_dim(f'{name}:')
    return f'  {label} {value}'


def cli_separator() -> str:
    return cli_dim('─' * SEPARATOR_WIDTH)


# -- log file -----------------------------------------------------------------

def _log_line(level: str, msg: str) -> str:
    stamp = datetime.now().strftime(TIMESTAMP_FORMAT)
    # Pad the level so messages line up in the file
    return f'[{stamp}] {f"[{level}]":<7} {msg}'


def log_info(msg: str) -> str:
    return _log_line('INFO', msg)


def log_warn(msg: str) -> str:
    return _log_line('WARN', msg)


def log_error(msg: str) -> str:
    return _log_line('ERROR', msg)
