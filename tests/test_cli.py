#!/usr/bin/env python3

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from mergebin import __version__
from mergebin.__main__ import EXIT_FAILURE, main


class TestCli(unittest.TestCase):
    """Test the mergebin command line end to end"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.boot = self.write_file('boot.bin', b'\x10' * 8)
        self.app = self.write_file('app.bin', b'\x20' * 4)
        self.out = os.path.join(self.tmp.name, 'firmware.bin')

    def write_file(self, name, data):
        path = os.path.join(self.tmp.name, name)
        with open(path, 'wb') as f:
            f.write(data)
        return path

    def run_main(self, *argv):
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            main(list(argv))
        return stdout.getvalue()

    def run_failing(self, *argv):
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            with self.assertRaises(SystemExit) as cm:
                main(list(argv))
        self.assertEqual(cm.exception.code, EXIT_FAILURE)
        return stdout.getvalue()

    def read_output(self):
        with open(self.out, 'rb') as f:
            return f.read()

    def test_merge(self):
        text = self.run_main('0@' + self.boot, '0x10@' + self.app, self.out)

        self.assertEqual(self.read_output(), b'\x10' * 8 + b'\xff' * 8 + b'\x20' * 4)
        self.assertIn('Successfully merged 2 files', text)

    def test_merge_with_size_and_pad(self):
        self.run_main('--size=32', '--pad=0', '+@' + self.boot, '+@' + self.app, self.out)
        self.assertEqual(self.read_output(), b'\x10' * 8 + b'\x20' * 4 + b'\x00' * 20)

    def test_size_exceeded_warns(self):
        text = self.run_main('-s', '4', '0@' + self.boot, self.out)

        self.assertIn('WARNING: Output file size is larger than expected', text)
        self.assertEqual(len(self.read_output()), 8)

    def test_verbose_layout(self):
        text = self.run_main('-v', '0x4@' + self.app, self.out)
        self.assertIn('0x00000004 - 0x00000008', text)

    def test_default_output_name(self):
        cwd = os.getcwd()
        os.chdir(self.tmp.name)
        self.addCleanup(os.chdir, cwd)

        self.run_main('0@boot.bin')
        self.assertTrue(os.path.isfile('output.bin'))

    def test_usage_without_arguments(self):
        text = self.run_main()
        self.assertIn('usage: mergebin', text)

    def test_help_does_not_touch_files(self):
        text = self.run_main('--help', '0@' + self.boot, self.out)

        self.assertIn('--pad', text)
        self.assertFalse(os.path.exists(self.out))

    def test_version(self):
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            with self.assertRaises(SystemExit) as cm:
                main(['--version'])
        self.assertEqual(cm.exception.code, 0)
        self.assertIn(__version__, stdout.getvalue())

    def test_invalid_pad_creates_nothing(self):
        for value in ('256', '-1'):
            with self.subTest(pad=value):
                text = self.run_failing(f'--pad={value}', '0@' + self.boot, self.out)
                self.assertTrue(text.startswith('Error: '))
                self.assertFalse(os.path.exists(self.out))

    def test_illegal_offset(self):
        text = self.run_failing('boot@' + self.boot, self.out)
        self.assertIn('offset', text)
        self.assertFalse(os.path.exists(self.out))

    def test_negative_offset(self):
        text = self.run_failing('-16@' + self.boot, self.out)
        self.assertIn('Illegal or unrecognized offset', text)
        self.assertFalse(os.path.exists(self.out))

    def test_unknown_option(self):
        self.run_failing('--fill=0', '0@' + self.boot, self.out)
        self.assertFalse(os.path.exists(self.out))

    def test_too_many_inputs(self):
        text = self.run_failing(*(['+@' + self.boot] * 9), self.out)
        self.assertIn('Too many input files', text)
        self.assertFalse(os.path.exists(self.out))

    def test_missing_input(self):
        text = self.run_failing('0@' + self.boot, '+@' + self.boot + '.missing', self.out)
        self.assertIn('Can not open input file', text)

    def test_strict_offsets(self):
        text = self.run_failing('--strict', '0@' + self.boot, '2@' + self.app, self.out)
        self.assertIn('behind', text)

    def test_offset_behind_cursor_warns(self):
        text = self.run_main('0@' + self.boot, '2@' + self.app, self.out)

        self.assertIn('WARNING: Offset 0x00000002', text)
        self.assertEqual(self.read_output(), b'\x10' * 8 + b'\x20' * 4)


if __name__ == '__main__':
    unittest.main()
