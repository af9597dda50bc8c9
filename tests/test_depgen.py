# Copyright 2015 The Meson development team
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import io
import os
import tempfile
import unittest
from unittest import mock

from mkdepsbuild import mlog
from mkdepsbuild.coredata import DepsConfig, MAX_COMMAND, MAX_EXPAND, MAX_PATH
from mkdepsbuild.depgen import CommandBuffer, DependencyGenerator, expand_backslashes
from mkdepsbuild.mkdepslib import (
    CompilerError, LimitExceededError, NotARegularFileError, SourceNotFoundError
)
from mkdepsbuild.pathbridge import PassthroughBridge, PathBridge


class FakeWindowsBridge(PathBridge):
    name = 'fake'

    def convert(self, path):
        return 'C:\\work\\' + path.replace('/', '\\')


def make_generator(**kwargs):
    kwargs.setdefault('compiler', 'gcc')
    return DependencyGenerator(DepsConfig(**kwargs), PassthroughBridge())


class ExpandTests(unittest.TestCase):

    def test_lone_backslashes_are_doubled(self):
        self.assertEqual(expand_backslashes('C:\\foo\\bar'), 'C:\\\\foo\\\\bar')

    def test_expanded_text_is_kept(self):
        self.assertEqual(expand_backslashes('C:\\\\foo\\\\bar'), 'C:\\\\foo\\\\bar')
        self.assertEqual(expand_backslashes('a\\\\\\b'), 'a\\\\\\b')

    def test_idempotent(self):
        once = expand_backslashes('-IC:\\inc -DDIR=\\"x\\" \\')
        self.assertEqual(expand_backslashes(once), once)

    def test_no_backslash(self):
        self.assertEqual(expand_backslashes('-I/usr/include'), '-I/usr/include')

    def test_overflow(self):
        text = '\\a' * (MAX_EXPAND // 2)
        with self.assertRaisesRegex(LimitExceededError, 'Truncated during expansion'):
            expand_backslashes(text)
        self.assertEqual(len(expand_backslashes('\\a' * 10, limit=31)), 30)


class CommandBufferTests(unittest.TestCase):

    def test_join(self):
        cmd = CommandBuffer()
        cmd.append('gcc', 'Compiler string')
        cmd.append('-M', 'Option string')
        self.assertEqual(str(cmd), 'gcc -M')
        self.assertEqual(cmd.length, 6)

    def test_overflow(self):
        cmd = CommandBuffer(limit=10)
        cmd.append('gcc', 'Compiler string')
        with self.assertRaises(LimitExceededError) as cm:
            cmd.append('-Iinclude', 'CFLAG string')
        self.assertEqual(cm.exception.limit, 10)
        self.assertEqual(cm.exception.length, 13)
        self.assertIn('CFLAG string is too long [13/10]', str(cm.exception))
        self.assertEqual(str(cmd), 'gcc')


class FindSourceTests(unittest.TestCase):

    def setUp(self):
        super().setUp()
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.first = os.path.join(self.tmpdir.name, 'first')
        self.second = os.path.join(self.tmpdir.name, 'second')
        os.mkdir(self.first)
        os.mkdir(self.second)

    def touch(self, dirname, fname):
        with open(os.path.join(dirname, fname), 'w', encoding='utf-8') as f:
            f.write('int x;\n')

    def test_second_directory(self):
        self.touch(self.second, 'foo.c')
        gen = make_generator(dep_paths=(self.first, self.second))
        self.assertEqual(gen.find_source('foo.c'), self.second + '/foo.c')

    def test_first_match_wins(self):
        self.touch(self.first, 'foo.c')
        self.touch(self.second, 'foo.c')
        gen = make_generator(dep_paths=(self.second, self.first, self.second))
        self.assertEqual(gen.find_source('foo.c'), self.second + '/foo.c')

    def test_trailing_separator(self):
        self.touch(self.first, 'foo.c')
        gen = make_generator(dep_paths=(self.first + '/',))
        self.assertEqual(gen.find_source('foo.c'), self.first + '/foo.c')

    def test_current_directory(self):
        self.touch(self.first, 'foo.c')
        gen = make_generator()
        olddir = os.getcwd()
        os.chdir(self.first)
        try:
            self.assertEqual(gen.find_source('foo.c'), './foo.c')
        finally:
            os.chdir(olddir)

    def test_not_found(self):
        gen = make_generator(dep_paths=(self.first, self.second))
        with self.assertRaises(SourceNotFoundError) as cm:
            gen.find_source('missing.c')
        self.assertEqual(cm.exception.fname, 'missing.c')
        self.assertEqual(str(cm.exception), 'File "missing.c" not found at any location')

    def test_directory_is_fatal(self):
        os.mkdir(os.path.join(self.first, 'foo.c'))
        self.touch(self.second, 'foo.c')
        gen = make_generator(dep_paths=(self.first, self.second))
        with self.assertRaisesRegex(NotARegularFileError, 'exists but is not a regular file'):
            gen.find_source('foo.c')

    def test_path_too_long(self):
        gen = make_generator(dep_paths=('d' * MAX_PATH,))
        with self.assertRaisesRegex(LimitExceededError, r'Path is too long \[512/512\]'):
            gen.find_source('foo.c')
        gen = make_generator(dep_paths=('d' * (MAX_PATH - 4),))
        with self.assertRaisesRegex(LimitExceededError, 'Path\\+file is too long'):
            gen.find_source('foo.c')

    @mock.patch('sys.stderr', new_callable=io.StringIO)
    def test_trace(self, stderr):
        self.touch(self.second, 'foo.c')
        gen = make_generator(dep_paths=(self.first, self.second))
        mlog.set_debug_level(1)
        try:
            gen.find_source('foo.c')
        finally:
            mlog.set_debug_level(0)
        lines = stderr.getvalue().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertEqual(lines[0], 'Trying path={0} file=foo.c fullpath={0}/foo.c'.format(self.first))


class CommandTests(unittest.TestCase):

    def test_object_target(self):
        gen = make_generator(obj_path='/out', obj_suffix='.obj')
        self.assertEqual(gen.object_target('src/foo.c'), '/out/foo.obj')
        self.assertEqual(gen.object_target('foo.tar.c'), '/out/foo.tar.obj')
        self.assertEqual(gen.object_target('Makefile'), '/out/Makefile.obj')

    def test_object_target_windows(self):
        gen = make_generator(obj_path='C:\\out', winnative=True)
        self.assertEqual(gen.object_target('src\\foo.c'), 'C:\\out\\foo.o')

    def test_command(self):
        gen = make_generator(compiler='ccache gcc', cflags='-Iinclude -DX=1',
                             obj_path='/out', obj_suffix='.obj')
        self.assertEqual(gen.build_command('src/foo.c', './src/foo.c'),
                         'ccache gcc -MT /out/foo.obj -M -Iinclude -DX=1 ./src/foo.c')

    def test_command_without_target(self):
        gen = make_generator(cflags='-O2')
        self.assertEqual(gen.build_command('foo.c', './foo.c'), 'gcc -M -O2 ./foo.c')
        gen = make_generator()
        self.assertEqual(gen.build_command('foo.c', './foo.c'), 'gcc -M ./foo.c')

    def test_command_winpath(self):
        config = DepsConfig(compiler='cl', cflags='-IC:\\inc', obj_path='C:\\obj', winpath='/top')
        gen = DependencyGenerator(config, FakeWindowsBridge())
        self.assertEqual(gen.build_command('src/foo.c', 'src\\foo.c'),
                         'cl -MT C:\\\\obj\\\\foo.o -M -IC:\\\\inc C:\\\\work\\\\src\\\\foo.c')

    def test_command_winnative_is_not_expanded(self):
        gen = make_generator(compiler='cl', cflags='-IC:\\inc', winnative=True)
        self.assertEqual(gen.build_command('foo.c', '.\\foo.c'), 'cl -M -IC:\\inc .\\foo.c')

    def test_command_too_long(self):
        gen = make_generator(compiler='c' * MAX_COMMAND)
        with self.assertRaisesRegex(LimitExceededError, 'Compiler string is too long'):
            gen.build_command('foo.c', './foo.c')
        gen = make_generator(cflags='-I' * (MAX_COMMAND // 2))
        with self.assertRaisesRegex(LimitExceededError, 'CFLAG string is too long'):
            gen.build_command('foo.c', './foo.c')


class RunCommandTests(unittest.TestCase):

    def fake_process(self, returncode):
        p = mock.Mock()
        p.returncode = returncode
        return (p, None, None)

    @mock.patch('mkdepsbuild.depgen.Popen_safe')
    def test_success(self, popen):
        popen.return_value = self.fake_process(0)
        make_generator().run_command('gcc -M ./foo.c')
        popen.assert_called_once_with('gcc -M ./foo.c', shell=True, stdout=None, stderr=None)

    @mock.patch('mkdepsbuild.depgen.Popen_safe')
    def test_failure(self, popen):
        popen.return_value = self.fake_process(3)
        with self.assertRaises(CompilerError) as cm:
            make_generator().run_command('gcc -M ./foo.c')
        self.assertEqual(cm.exception.returncode, 3)
        self.assertEqual(str(cm.exception), 'gcc failed: 3\n       command: gcc -M ./foo.c')

    @mock.patch('mkdepsbuild.depgen.Popen_safe')
    def test_signal(self, popen):
        popen.return_value = self.fake_process(-9)
        with self.assertRaisesRegex(CompilerError, 'gcc terminated by signal 9'):
            make_generator().run_command('gcc -M ./foo.c')

    @mock.patch('mkdepsbuild.depgen.Popen_safe')
    def test_spawn_failure(self, popen):
        popen.side_effect = OSError(2, 'No such file or directory')
        with self.assertRaisesRegex(CompilerError, 'system failed: No such file or directory'):
            make_generator().run_command('gcc -M ./foo.c')

    @mock.patch('sys.stderr', new_callable=io.StringIO)
    @mock.patch('mkdepsbuild.depgen.Popen_safe')
    def test_trace_is_prefixed_with_file(self, popen, stderr):
        popen.return_value = self.fake_process(0)
        with tempfile.TemporaryDirectory() as d:
            with open(os.path.join(d, 'foo.c'), 'w', encoding='utf-8') as f:
                f.write('int foo;\n')
            gen = make_generator(dep_paths=(d,))
            mlog.set_debug_level(1)
            try:
                gen.generate('foo.c')
            finally:
                mlog.set_debug_level(0)
        self.assertEqual(stderr.getvalue().splitlines(), [
            'foo.c| Trying path={0} file=foo.c fullpath={0}/foo.c'.format(d),
            'foo.c| Executing: gcc -M {0}/foo.c'.format(d),
        ])

    def test_generate_all_in_order(self):
        gen = make_generator(files=('b.c', 'a.c', 'c.c'))
        with mock.patch.object(gen, 'find_source', side_effect=lambda f: './' + f), \
                mock.patch.object(gen, 'run_command') as run:
            commands = gen.generate_all()
        self.assertEqual(commands, ['gcc -M ./b.c', 'gcc -M ./a.c', 'gcc -M ./c.c'])
        self.assertEqual([c[0][0] for c in run.call_args_list], commands)

    def test_first_failure_stops(self):
        gen = make_generator(files=('a.c', 'missing.c', 'c.c'))

        def find(fname):
            if fname == 'missing.c':
                raise SourceNotFoundError(fname)
            return './' + fname

        with mock.patch.object(gen, 'find_source', side_effect=find), \
                mock.patch.object(gen, 'run_command') as run:
            with self.assertRaises(SourceNotFoundError):
                gen.generate_all()
        run.assert_called_once_with('gcc -M ./a.c')


if __name__ == '__main__':
    unittest.main()
