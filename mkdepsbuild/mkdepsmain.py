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

import os.path
import sys
import traceback
import typing as T

from . import cmdline
from . import mlog
from .depgen import DependencyGenerator
from .mkdepslib import MkdepsException, UsageError
from .pathbridge import select_bridge


def show_usage(prog: str, msg: T.Optional[str] = None) -> None:
    if msg is not None:
        mlog.log()
        mlog.error(msg)
    mlog.log()
    mlog.log(cmdline.usage(prog), end='')


def run(args: T.List[str], prog: str = 'mkdeps') -> int:
    try:
        config = cmdline.parse_args(args)
    except UsageError as e:
        show_usage(prog, str(e))
        return 1

    if config.show_help:
        show_usage(prog)
        return 0

    mlog.set_debug_level(config.debug)
    cmdline.log_selections(config)

    if not config.files:
        # Some configurations legitimately have nothing to scan
        mlog.log('# No files specified for dependency generation')
        return 0

    try:
        generator = DependencyGenerator(config, select_bridge(config))
        generator.generate_all()
    except MkdepsException as e:
        mlog.exception(e)
        if os.environ.get('MKDEPS_FORCE_BACKTRACE'):
            raise
        return 1
    except Exception:
        if os.environ.get('MKDEPS_FORCE_BACKTRACE'):
            raise
        traceback.print_exc()
        return 2
    return 0


def main() -> int:
    return run(sys.argv[1:], os.path.basename(sys.argv[0]))


if __name__ == '__main__':
    sys.exit(main())
