# Copyright 2012-2021 The Meson development team

# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at

#     http://www.apache.org/licenses/LICENSE-2.0

# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command line handling.

The command line is not argparse friendly: the compiler invocation, the
compiler flags and the file list are separated by literal ``--`` tokens,
and the options of mkdeps itself may show up anywhere in between. Tokens
are therefore scanned by hand and collected into a :class:`DepsConfig`.
"""

import textwrap
import typing as T

from . import mlog
from .coredata import DepsConfig, DEFAULT_DEP_PATHS, DEFAULT_SUFFIX
from .mkdepslib import UsageError

SEPARATOR = '--'
VALUE_OPTIONS = ('--dep-path', '--obj-path', '--obj-suffix', '--winpath')

USAGE_TEMPLATE = '''\
{prog} [OPTIONS] CC -- CFLAGS -- file [file [file...]]

Where:
  CC
    A variable number of arguments that define how to execute the compiler
  CFLAGS
    The compiler compilation flags
  file
    One or more C files whose dependencies will be checked. Each file is
    expected to reside in the current directory unless --dep-path is given

And [OPTIONS] include:
  --dep-debug
    Enable the debug trace. May be repeated.
  --dep-path <path>
    Do not look in the current directory for the file. Instead, look in
    <path> to see if the file resides there. --dep-path may be used multiple
    times to specify multiple alternative locations, they are searched in
    the order given.
  --obj-path <path>
    The final objects will not reside next to the sources but at the path
    provided by <path>. If given multiple times, only the last one is used.
  --obj-suffix <suffix>
    Suffix of the object files named by --obj-path. Defaults to {suffix}.
  --winnative
    By default, a POSIX-style environment is assumed (e.g., Linux, Cygwin,
    etc.). This option informs the tool that it is working in a pure
    Windows native environment.
  --winpath <TOPDIR>
    Use a Windows native toolchain from a POSIX environment such as Cygwin.
    Paths handed to CC are converted with 'cygpath' and their backslashes
    doubled.
  --help
    Shows this message and exits
'''


def usage(prog: str = 'mkdeps') -> str:
    return USAGE_TEMPLATE.format(prog=prog, suffix=DEFAULT_SUFFIX)


def parse_args(args: T.List[str]) -> DepsConfig:
    groups = []       # type: T.List[T.List[str]]
    accumulated = []  # type: T.List[str]
    dep_paths = []    # type: T.List[str]
    obj_path = None   # type: T.Optional[str]
    obj_suffix = None # type: T.Optional[str]
    winpath = None    # type: T.Optional[str]
    winnative = False
    debug = 0

    tokens = iter(args)
    for token in tokens:
        if token == SEPARATOR:
            if len(groups) == 2:
                raise UsageError("Too many '--' separators, expected CC -- CFLAGS -- files")
            groups.append(accumulated)
            accumulated = []
        elif token == '--help':
            return DepsConfig(show_help=True)
        elif token == '--dep-debug':
            debug += 1
        elif token == '--winnative':
            winnative = True
        elif token in VALUE_OPTIONS:
            value = next(tokens, None)
            if value is None:
                raise UsageError(f'Missing argument to {token}')
            if token == '--dep-path':
                if not value:
                    raise UsageError('Empty argument to --dep-path')
                dep_paths.append(value)
            elif token == '--obj-path':
                obj_path = value
            elif token == '--obj-suffix':
                obj_suffix = value
            else:
                winpath = value
        else:
            accumulated.append(token)

    if len(groups) < 2 or not groups[0]:
        raise UsageError('No compiler specified')
    if winnative and winpath is not None:
        raise UsageError('Both --winnative and --winpath makes no sense')
    if obj_suffix is not None and obj_path is None:
        mlog.warning('--obj-suffix has no effect without --obj-path')

    return DepsConfig(compiler=' '.join(groups[0]),
                      cflags=' '.join(groups[1]),
                      files=tuple(accumulated),
                      dep_paths=tuple(dep_paths) if dep_paths else DEFAULT_DEP_PATHS,
                      obj_path=obj_path,
                      obj_suffix=obj_suffix if obj_suffix is not None else DEFAULT_SUFFIX,
                      winnative=winnative,
                      winpath=winpath,
                      debug=debug)


def log_selections(config: DepsConfig) -> None:
    def show(value: T.Optional[str]) -> str:
        return f'[{value}]' if value else '(None)'

    if not mlog.debug_enabled():
        return
    lines = [
        ('CC', show(config.compiler)),
        ('CFLAGS', show(config.cflags)),
        ('FILES', show(' '.join(config.files))),
        ('PATHS', show(' '.join(config.dep_paths))),
        ('OBJDIR', show(config.obj_path)),
    ]
    if config.obj_path is not None:
        lines.append(('SUFFIX', show(config.obj_suffix)))
    lines.append(('Windows Paths', show(config.winpath) if config.winpath is not None else '[FALSE]'))
    lines.append(('Windows Native', '[TRUE]' if config.winnative else '[FALSE]'))

    mlog.debug(mlog.bold('SELECTIONS'))
    mlog.debug(textwrap.indent('\n'.join(f'{k:<15}: {v}' for k, v in lines), '  '))
