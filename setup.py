#!/usr/bin/env python3

# Copyright 2016 The Meson development team

# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at

#     http://www.apache.org/licenses/LICENSE-2.0

# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import sys

if sys.version_info < (3, 7):
    raise SystemExit('ERROR: Tried to install mkdeps with an unsupported Python version: \n{}'
                     '\nmkdeps requires Python 3.7 or greater'.format(sys.version))

from mkdepsbuild.coredata import version
from setuptools import setup

# On windows, will create Scripts/mkdeps.exe and Scripts/mkdeps-script.py
# Other platforms will create bin/mkdeps
entries = {'console_scripts': ['mkdeps=mkdepsbuild.mkdepsmain:main']}
packages = ['mkdepsbuild']

if __name__ == '__main__':
    setup(name='mkdeps',
          version=version,
          description='Generate compiler dependency lists with the object directory as target',
          license='Apache-2.0',
          python_requires='>=3.7',
          packages=packages,
          entry_points=entries,
          extras_require={'tests': ['pytest']},)
