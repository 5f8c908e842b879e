# Copyright (C) 2026 The Android Open Source Project
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import contextlib
import importlib.util
import io
import os
import tempfile
import unittest

import pandas as pd

from ftrace_verifier.atrace import REQUIRED_CATEGORIES
from ftrace_verifier.trace_verifier import ProtoFactory

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DATA_DIR = os.path.join(ROOT_DIR, 'test', 'data')
APP_LAUNCH_TRACE = os.path.join(DATA_DIR, 'atrace_app_launch.txt')


def load_tool():
  spec = importlib.util.spec_from_file_location(
      'verify_atrace', os.path.join(ROOT_DIR, 'tools', 'verify_atrace.py'))
  module = importlib.util.module_from_spec(spec)
  spec.loader.exec_module(module)
  return module


class TestVerifyAtrace(unittest.TestCase):

  @classmethod
  def setUpClass(cls):
    cls.tool = load_tool()

  def setUp(self):
    self.tmp = tempfile.TemporaryDirectory()
    self.addCleanup(self.tmp.cleanup)
    self.trace = self._write(
        'trace.txt',
        '  app-2000 (1000) [000] ...1  1.0: tracing_mark_write: B|1000|X\n'
        '  app-2000 (1000) [000] ...1  2.0: tracing_mark_write: B|1000|Y\n')

  def _write(self, name, content):
    path = os.path.join(self.tmp.name, name)
    with open(path, 'w') as f:
      f.write(content)
    return path

  def _main(self, *argv):
    out = io.StringIO()
    with contextlib.redirect_stdout(out):
      status = self.tool.main(list(argv))
    return status, out.getvalue()

  def test_missing_arguments(self):
    self.assertEqual(self._main()[0], 1)
    self.assertEqual(self._main(self.trace)[0], 1)

  def test_pass_and_fail(self):
    status, out = self._main(self.trace, '--subject', 'app', '--section', 'X',
                             '--section', 'Y')
    self.assertEqual(status, 0)
    self.assertEqual(out, f'PASS {self.trace}\n')

    status, out = self._main(self.trace, '--subject', 'app', '--section', 'Y',
                             '--section', 'X')
    self.assertEqual(status, 1)
    self.assertTrue(out.startswith(f'FAIL {self.trace}: '))

  def test_capture_output(self):
    status, out = self._main(APP_LAUNCH_TRACE, '--subject', 'atracetestapp',
                             '--capture-output', '--stop-when-satisfied')
    self.assertEqual(status, 0)
    self.assertEqual(out, f'PASS {APP_LAUNCH_TRACE}\n')

  def test_keep_going(self):
    missing = os.path.join(self.tmp.name, 'missing.txt')
    args = ['--subject', 'app', '--section', 'X']

    status, out = self._main(self.trace, missing, *args)
    self.assertEqual(status, 1)
    self.assertEqual(out, '')

    status, out = self._main(self.trace, missing, '--keep-going', *args)
    self.assertEqual(status, 1)
    self.assertEqual(out, f'PASS {self.trace}\n')

  def test_out_csv(self):
    csv_path = os.path.join(self.tmp.name, 'verdicts.csv')
    status, _ = self._main(self.trace, '--subject', 'app', '--section', 'X',
                           '--out-csv', csv_path)
    self.assertEqual(status, 0)

    df = pd.read_csv(csv_path)
    self.assertEqual(df['path'].tolist(), [self.trace])
    self.assertEqual(df['passed'].tolist(), [True])
    self.assertEqual(df['match_count'].tolist(), [2])

    _, out = self._main(self.trace, '--subject', 'app', '--section', 'X',
                        '--out-csv', '-')
    self.assertIn('passed,failure,message', out)

  def test_report(self):
    report_path = os.path.join(self.tmp.name, 'report.pb')
    status, _ = self._main(self.trace, '--subject', 'nosuchapp', '--report',
                           report_path)
    self.assertEqual(status, 1)

    protos = ProtoFactory()
    report_set = protos.VerificationReportSet()
    with open(report_path, 'rb') as f:
      report_set.ParseFromString(f.read())
    (report,) = report_set.report
    self.assertFalse(report.passed)
    self.assertEqual(report.failure, 'NO_RELEVANT_EVENTS')
    self.assertEqual(report.metadata[0].key, 'path')
    self.assertEqual(report.metadata[0].value, self.trace)

  def test_list_categories(self):
    listing = ''.join(
        f'{name:>10} - {name}\n' for name in REQUIRED_CATEGORIES)
    good = self._write('categories.txt', listing)
    self.assertEqual(self._main('--list-categories', good)[0], 0)

    bad = self._write('partial.txt', listing.replace('    camera - camera\n',
                                                     ''))
    self.assertEqual(self._main('--list-categories', bad)[0], 1)
