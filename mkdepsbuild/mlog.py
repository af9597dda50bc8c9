# Copyright 2013-2014 The Meson development team

# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at

#     http://www.apache.org/licenses/LICENSE-2.0

# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import os
import io
import sys
import platform
import typing as T
from contextlib import contextmanager

"""Console logging for mkdeps runs.

Everything goes to stderr. Stdout belongs to the compiler, which writes the
dependency rules there."""

def is_windows() -> bool:
    platname = platform.system().lower()
    return platname == 'windows'

def _windows_ansi() -> bool:
    # windll only exists on windows, so mypy will get mad
    from ctypes import windll, byref  # type: ignore
    from ctypes.wintypes import DWORD

    kernel = windll.kernel32
    stderr = kernel.GetStdHandle(-12)
    mode = DWORD()
    if not kernel.GetConsoleMode(stderr, byref(mode)):
        return False
    # ENABLE_VIRTUAL_TERMINAL_PROCESSING == 0x4
    # If the call to enable VT processing fails (returns 0), we fallback to
    # original behavior
    return bool(kernel.SetConsoleMode(stderr, mode.value | 0x4) or os.environ.get('ANSICON'))

def colorize_console() -> bool:
    _colorize_console = getattr(sys.stderr, 'colorize_console', None)  # type: T.Optional[bool]
    if _colorize_console is not None:
        return _colorize_console

    try:
        if is_windows():
            _colorize_console = os.isatty(sys.stderr.fileno()) and _windows_ansi()
        else:
            _colorize_console = os.isatty(sys.stderr.fileno()) and os.environ.get('TERM', 'dumb') != 'dumb'
    except Exception:
        _colorize_console = False

    try:
        sys.stderr.colorize_console = _colorize_console  # type: ignore[attr-defined]
    except AttributeError:
        pass
    return _colorize_console

def setup_console() -> None:
    # on Windows, a subprocess might call SetConsoleMode() on the console
    # connected to stderr and turn off ANSI escape processing. Call this after
    # running a subprocess to ensure we turn it on again.
    if is_windows():
        try:
            delattr(sys.stderr, 'colorize_console')
        except AttributeError:
            pass

log_depth = []               # type: T.List[str]
log_debug_level = 0          # type: int

def set_debug_level(level: int) -> None:
    global log_debug_level  # pylint: disable=global-statement
    log_debug_level = level

def debug_enabled() -> bool:
    return log_debug_level > 0

class AnsiDecorator:
    plain_code = "\033[0m"

    def __init__(self, text: str, code: str, quoted: bool = False):
        self.text = text
        self.code = code
        self.quoted = quoted

    def get_text(self, with_codes: bool) -> str:
        text = self.text
        if with_codes and self.code:
            text = self.code + self.text + AnsiDecorator.plain_code
        if self.quoted:
            text = f'"{text}"'
        return text

    def __str__(self) -> str:
        return self.get_text(colorize_console())

TV_Loggable = T.Union[str, AnsiDecorator]
TV_LoggableList = T.List[TV_Loggable]

def bold(text: str, quoted: bool = False) -> AnsiDecorator:
    return AnsiDecorator(text, "\033[1m", quoted=quoted)

def red(text: str) -> AnsiDecorator:
    return AnsiDecorator(text, "\033[1;31m")

def yellow(text: str) -> AnsiDecorator:
    return AnsiDecorator(text, "\033[1;33m")

def process_markup(args: T.Sequence[TV_Loggable], keep: bool) -> T.List[str]:
    arr = []  # type: T.List[str]
    for arg in args:
        if arg is None:
            continue
        if isinstance(arg, str):
            arr.append(arg)
        elif isinstance(arg, AnsiDecorator):
            arr.append(arg.get_text(keep))
        else:
            arr.append(str(arg))
    return arr

def force_print(*args: str, nested: bool, **kwargs: T.Any) -> None:
    iostr = io.StringIO()
    kwargs['file'] = iostr
    print(*args, **kwargs)

    raw = iostr.getvalue()
    if log_depth:
        prepend = log_depth[-1] + '| ' if nested else ''
        lines = []
        for l in raw.split('\n'):
            l = l.strip()
            lines.append(prepend + l if l else '')
        raw = '\n'.join(lines)

    try:
        print(raw, end='', file=sys.stderr)
    except UnicodeEncodeError:
        cleaned = raw.encode('ascii', 'replace').decode('ascii')
        print(cleaned, end='', file=sys.stderr)
    sys.stderr.flush()

def log(*args: TV_Loggable, **kwargs: T.Any) -> None:
    nested = kwargs.pop('nested', True)
    arr = process_markup(args, colorize_console())
    force_print(*arr, nested=nested, **kwargs)

def debug(*args: TV_Loggable, **kwargs: T.Any) -> None:
    if log_debug_level > 0:
        log(*args, **kwargs)

def _log_error(severity: str, *rargs: TV_Loggable, **kwargs: T.Any) -> None:
    from .mkdepslib import MkdepsException

    if severity == 'warning':
        label = [yellow('WARNING:')]  # type: TV_LoggableList
    elif severity == 'error':
        label = [red('ERROR:')]
    else:
        raise MkdepsException('Invalid severity ' + severity)
    # rargs is a tuple, not a list
    args = label + list(rargs)
    log(*args, **kwargs)

def error(*args: TV_Loggable, **kwargs: T.Any) -> None:
    return _log_error('error', *args, **kwargs)

def warning(*args: TV_Loggable, **kwargs: T.Any) -> None:
    return _log_error('warning', *args, **kwargs)

def exception(e: Exception, prefix: T.Optional[AnsiDecorator] = None) -> None:
    if prefix is None:
        prefix = red('ERROR:')
    args = []  # type: T.List[T.Union[AnsiDecorator, str]]
    if prefix:
        args.append(prefix)
    args.append(str(e))
    log(*args, nested=False)

@contextmanager
def nested(name: str = '') -> T.Generator[None, None, None]:
    log_depth.append(name)
    try:
        yield
    finally:
        log_depth.pop()
