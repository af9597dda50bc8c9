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

import dataclasses
import typing as T

version = '1.0.0'

# Capacities of the command, expansion and path buffers. Going over any of
# them is a hard error, the text is never truncated.
MAX_COMMAND = 4096
MAX_EXPAND = 2048
MAX_PATH = 512

DEFAULT_SUFFIX = '.o'
DEFAULT_DEP_PATHS = ('.',)


@dataclasses.dataclass(frozen=True)
class DepsConfig:

    """The resolved command line.

    Built once by the argument parser and shared read-only by the path
    search, the command assembly and the path bridge.

    :param compiler: How to run the compiler, tokens joined by spaces.
    :param cflags: Compiler flags, tokens joined by spaces. May be empty.
    :param files: Source files, in the order given.
    :param dep_paths: Directories searched for each file, in the order given.
    :param obj_path: Directory the object files end up in, if it differs
        from the source directory.
    :param obj_suffix: Suffix of the object files.
    :param winnative: The compiler and the host both use Windows paths.
    :param winpath: Top directory of a Windows native toolchain running under
        Cygwin. Paths handed to the compiler are converted with cygpath.
    :param debug: Verbosity of the debug trace.
    :param show_help: Only print the usage text.
    """

    compiler: str = ''
    cflags: str = ''
    files: T.Tuple[str, ...] = ()
    dep_paths: T.Tuple[str, ...] = DEFAULT_DEP_PATHS
    obj_path: T.Optional[str] = None
    obj_suffix: str = DEFAULT_SUFFIX
    winnative: bool = False
    winpath: T.Optional[str] = None
    debug: int = 0
    show_help: bool = False

    @property
    def separator(self) -> str:
        if self.winnative or self.winpath is not None:
            return '\\'
        return '/'
