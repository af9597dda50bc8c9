#!/usr/bin/env python3
# Copyright 2016-2021 The Meson development team

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
import unittest

from tests.test_cmdline import CmdlineTests
from tests.test_depgen import (
    ExpandTests, CommandBufferTests, FindSourceTests, CommandTests as CommandAssemblyTests,
    RunCommandTests
)
from tests.test_pathbridge import DequoteTests, CygpathBridgeTests, SelectBridgeTests
from tests.test_mkdepsmain import RunTests, CommandTests
from mkdepsbuild.mkdepslib import is_windows


def unset_envs():
    # For unit tests we must fully control the environment, a backtrace
    # request would turn expected failures into exceptions.
    for v in ['MKDEPS_FORCE_BACKTRACE']:
        if v in os.environ:
            del os.environ[v]

if __name__ == '__main__':
    unset_envs()
    cases = ['CmdlineTests', 'ExpandTests', 'CommandBufferTests', 'FindSourceTests',
             'CommandAssemblyTests', 'RunCommandTests', 'DequoteTests',
             'CygpathBridgeTests', 'SelectBridgeTests', 'RunTests']
    if not is_windows():
        cases += ['CommandTests']

    unittest.main(defaultTest=cases, buffer=True)
