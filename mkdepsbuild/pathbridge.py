# Copyright 2019 The Meson development team

# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at

#     http://www.apache.org/licenses/LICENSE-2.0

# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Translation of host paths into the form the compiler understands.

Only needed for a Windows native compiler used from Cygwin. Everywhere else
the pass-through bridge is used and paths reach the compiler untouched.
"""

import shutil
import typing as T

from . import mlog
from .coredata import DepsConfig, MAX_PATH
from .mkdepslib import EnvironmentException, LimitExceededError, Popen_safe, is_cygwin

# Characters that make escapes with a backslash
ESCAPED_CHARS = (' ', '(', ')')


class PathBridge:
    name = 'passthrough'

    def convert(self, path: str) -> str:
        raise NotImplementedError


class PassthroughBridge(PathBridge):
    def convert(self, path: str) -> str:
        return path


def dequote_path(path: str) -> T.Tuple[str, bool]:
    """Drop the backslash of every escaped space or parenthesis.

    Returns the plain path and whether anything was unescaped.
    """
    result = []  # type: T.List[str]
    quoted = False
    for i, c in enumerate(path):
        if c == '\\' and path[i + 1:i + 2] in ESCAPED_CHARS:
            quoted = True
        else:
            result.append(c)
    text = ''.join(result)
    if len(text) >= MAX_PATH:
        raise LimitExceededError('Path', len(text), MAX_PATH, 'path truncated')
    return text, quoted


class CygpathBridge(PathBridge):
    name = 'cygpath'

    def __init__(self, cygpath: T.Optional[str] = None):
        self.cygpath = cygpath or shutil.which('cygpath')
        if self.cygpath is None:
            raise EnvironmentException('cygpath not found, --winpath needs a Cygwin host')

    def convert(self, path: str) -> str:
        dequoted, quoted = dequote_path(path)
        p, o, e = Popen_safe([self.cygpath, '-w', dequoted])
        if p.returncode != 0:
            raise EnvironmentException('cygpath \'{}\' failed: {}'.format(dequoted, e.strip()))
        converted = o.strip()
        if len(converted) > MAX_PATH - 3:
            raise LimitExceededError('POSIX path', len(converted), MAX_PATH - 3, dequoted)
        if quoted:
            converted = f'"{converted}"'
        mlog.debug('Converted', mlog.bold(path), 'to', mlog.bold(converted))
        return converted


def select_bridge(config: DepsConfig) -> PathBridge:
    if config.winpath is None:
        return PassthroughBridge()
    if not is_cygwin():
        raise EnvironmentException('--winpath is only supported on Cygwin hosts')
    return CygpathBridge()
