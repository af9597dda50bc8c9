# Copyright 2012-2020 The Meson development team

# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at

#     http://www.apache.org/licenses/LICENSE-2.0

# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""A library of random helper functionality."""
import sys
import platform, subprocess
import typing as T

from . import mlog


class MkdepsException(Exception):
    '''Exceptions thrown by mkdeps'''


class UsageError(MkdepsException):
    '''The command line could not be understood'''


class EnvironmentException(MkdepsException):
    '''The host cannot provide something the command line asked for'''


class LimitExceededError(MkdepsException):
    '''A command or path would be longer than its buffer allows'''

    def __init__(self, what: str, length: int, limit: int, text: T.Optional[str] = None) -> None:
        msg = '{} is too long [{}/{}]'.format(what, length, limit)
        if text is not None:
            msg += ': ' + text
        super().__init__(msg)
        self.length = length
        self.limit = limit


class SourceNotFoundError(MkdepsException):
    def __init__(self, fname: str) -> None:
        super().__init__('File "{}" not found at any location'.format(fname))
        self.fname = fname


class NotARegularFileError(MkdepsException):
    def __init__(self, path: str) -> None:
        super().__init__('File {} exists but is not a regular file'.format(path))
        self.path = path


class CompilerError(MkdepsException):
    '''The compiler could not be started or returned an error'''

    def __init__(self, compiler: str, command: str, returncode: T.Optional[int] = None,
                 reason: T.Optional[str] = None) -> None:
        if reason is not None:
            msg = 'system failed: {}'.format(reason)
        elif returncode is not None and returncode < 0:
            msg = '{} terminated by signal {}'.format(compiler, -returncode)
        else:
            msg = '{} failed: {}'.format(compiler, returncode)
        super().__init__('{}\n       command: {}'.format(msg, command))
        self.compiler = compiler
        self.command = command
        self.returncode = returncode


def is_windows() -> bool:
    platname = platform.system().lower()
    return platname == 'windows' or 'mingw' in platname


def is_cygwin() -> bool:
    return platform.system().lower().startswith('cygwin')


def Popen_safe(args: T.Union[str, T.List[str]], write: T.Optional[str] = None,
               stdout: T.Union[T.BinaryIO, int, None] = subprocess.PIPE,
               stderr: T.Union[T.BinaryIO, int, None] = subprocess.PIPE,
               **kwargs: T.Any) -> T.Tuple[subprocess.Popen, T.Optional[str], T.Optional[str]]:
    import locale
    encoding = locale.getpreferredencoding()
    # Redirect stdin to DEVNULL otherwise the command run by us here might mess
    # up the console and ANSI colors will stop working on Windows.
    if 'stdin' not in kwargs:
        kwargs['stdin'] = subprocess.DEVNULL
    if not sys.stdout.encoding or encoding.upper() != 'UTF-8':
        p, o, e = Popen_safe_legacy(args, write=write, stdout=stdout, stderr=stderr, **kwargs)
    else:
        p = subprocess.Popen(args, universal_newlines=True, close_fds=False,
                             stdout=stdout, stderr=stderr, **kwargs)
        o, e = p.communicate(write)
    # Sometimes the command that we run will call another command which will be
    # without the above stdin workaround, so set the console mode again just in
    # case.
    mlog.setup_console()
    return p, o, e


def Popen_safe_legacy(args: T.Union[str, T.List[str]], write: T.Optional[str] = None,
                      stdout: T.Union[T.BinaryIO, int, None] = subprocess.PIPE,
                      stderr: T.Union[T.BinaryIO, int, None] = subprocess.PIPE,
                      **kwargs: T.Any) -> T.Tuple[subprocess.Popen, T.Optional[str], T.Optional[str]]:
    p = subprocess.Popen(args, universal_newlines=False, close_fds=False,
                         stdout=stdout, stderr=stderr, **kwargs)
    input_ = None  # type: T.Optional[bytes]
    if write is not None:
        input_ = write.encode('utf-8')
    o, e = p.communicate(input_)
    if o is not None:
        if sys.stdout.encoding:
            o = o.decode(encoding=sys.stdout.encoding, errors='replace').replace('\r\n', '\n')
        else:
            o = o.decode(errors='replace').replace('\r\n', '\n')
    if e is not None:
        if sys.stderr.encoding:
            e = e.decode(encoding=sys.stderr.encoding, errors='replace').replace('\r\n', '\n')
        else:
            e = e.decode(errors='replace').replace('\r\n', '\n')
    return p, o, e
