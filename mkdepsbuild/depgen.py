# Copyright 2020 The Meson development team

# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at

#     http://www.apache.org/licenses/LICENSE-2.0

# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import ntpath
import os
import posixpath
import re
import stat
import sys
import typing as T

from . import mlog
from .coredata import DepsConfig, MAX_COMMAND, MAX_EXPAND, MAX_PATH
from .mkdepslib import (
    CompilerError, LimitExceededError, NotARegularFileError, Popen_safe,
    SourceNotFoundError
)

if T.TYPE_CHECKING:
    from .pathbridge import PathBridge

DEP_SCAN_FLAG = '-M'
TARGET_FLAG = '-MT'

# A backslash that is neither preceded nor followed by another one
lone_backslash_re = re.compile(r'(?<!\\)\\(?!\\)')


def expand_backslashes(text: str, limit: int = MAX_EXPAND) -> str:
    '''
    Double every lone backslash in text. Runs of two or more backslashes are
    taken as already expanded and left alone, so expanding twice changes
    nothing.
    '''
    expanded = lone_backslash_re.sub(r'\\\\', text)
    if len(expanded) >= limit:
        raise LimitExceededError('Truncated during expansion, string', len(text), limit)
    return expanded


class CommandBuffer:

    """A shell command built piece by piece with a hard length limit."""

    def __init__(self, limit: int = MAX_COMMAND):
        self.limit = limit
        self.parts = []  # type: T.List[str]
        self.length = 0

    def append(self, text: str, what: str) -> None:
        length = self.length + len(text) + (1 if self.parts else 0)
        if length >= self.limit:
            raise LimitExceededError(what, length, self.limit, text)
        self.parts.append(text)
        self.length = length

    def __str__(self) -> str:
        return ' '.join(self.parts)


class DependencyGenerator:
    def __init__(self, config: DepsConfig, bridge: 'PathBridge'):
        self.config = config
        self.bridge = bridge
        self.separator = config.separator

    def expand(self, text: str) -> str:
        if self.config.winpath is None:
            return text
        return expand_backslashes(text)

    def join(self, dirname: str, fname: str) -> str:
        if dirname.endswith(self.separator):
            return dirname + fname
        return dirname + self.separator + fname

    def find_source(self, fname: str) -> str:
        for dirname in self.config.dep_paths:
            if len(dirname) >= MAX_PATH:
                raise LimitExceededError('Path', len(dirname), MAX_PATH, dirname)
            fullpath = self.join(dirname, fname)
            if len(fullpath) >= MAX_PATH:
                raise LimitExceededError('Path+file', len(fullpath), MAX_PATH)
            mlog.debug(f'Trying path={dirname} file={fname} fullpath={fullpath}')
            try:
                st = os.stat(fullpath)
            except OSError:
                continue
            if not stat.S_ISREG(st.st_mode):
                raise NotARegularFileError(fullpath)
            return fullpath
        raise SourceNotFoundError(fname)

    def object_target(self, fname: str) -> str:
        assert self.config.obj_path is not None
        pathmod = ntpath if self.separator == '\\' else posixpath
        stem = pathmod.basename(fname)
        if '.' in stem:
            stem = stem[:stem.rindex('.')]
        return self.join(self.config.obj_path, stem + self.config.obj_suffix)

    def build_command(self, fname: str, fullpath: str) -> str:
        cmd = CommandBuffer()
        cmd.append(self.config.compiler, 'Compiler string')
        if self.config.obj_path is not None:
            target = self.expand(self.object_target(fname))
            cmd.append(f'{TARGET_FLAG} {target}', 'Option string')
        cmd.append(DEP_SCAN_FLAG, 'Option string')
        if self.config.cflags:
            cmd.append(self.expand(self.config.cflags), 'CFLAG string')
        cmd.append(self.expand(self.bridge.convert(fullpath)), 'Path string')
        return str(cmd)

    def run_command(self, command: str) -> None:
        mlog.debug('Executing:', command)
        # The compiler writes to our stdout, anything we buffered goes first
        sys.stdout.flush()
        try:
            p, _, _ = Popen_safe(command, shell=True, stdout=None, stderr=None)
        except OSError as e:
            raise CompilerError(self.config.compiler, command, reason=e.strerror or str(e))
        if p.returncode != 0:
            raise CompilerError(self.config.compiler, command, p.returncode)

    def generate(self, fname: str) -> str:
        with mlog.nested(fname):
            fullpath = self.find_source(fname)
            command = self.build_command(fname, fullpath)
            self.run_command(command)
        return command

    def generate_all(self) -> T.List[str]:
        return [self.generate(f) for f in self.config.files]
