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

import unittest

from ftrace_verifier.atrace import REQUIRED_CATEGORIES
from ftrace_verifier.atrace import check_capture_header
from ftrace_verifier.atrace import check_categories
from ftrace_verifier.atrace import extract_trace_data
from ftrace_verifier.atrace import missing_categories
from ftrace_verifier.atrace import parse_category_list
from ftrace_verifier.atrace import strip_capture_preamble
from ftrace_verifier.common.exceptions import CaptureOutputFailure
from ftrace_verifier.common.exceptions import MissingCategoriesFailure

CAPTURE = ('capturing trace... done\r\n'
           'TRACE:\r\n'
           '# tracer: nop\r\n'
           '#\r\n'
           '  app-2000 (1000) [000] ...1  1.0: tracing_mark_write: B|1000|X\r\n')

CATEGORY_LIST = '\n'.join(
    f'{name:>10} - {name} description' for name in REQUIRED_CATEGORIES) + '\n'


class TestCaptureOutput(unittest.TestCase):

  def test_extract_trace_data(self):
    data = extract_trace_data(CAPTURE)
    self.assertTrue(data.startswith('\r\n# tracer: nop'))
    self.assertNotIn('capturing', data)
    with self.assertRaises(CaptureOutputFailure):
      extract_trace_data('capturing trace... done\n')

  def test_strip_capture_preamble(self):
    lines = ['capturing trace... done', 'TRACE:', '# tracer: nop', 'event']
    self.assertEqual(
        list(strip_capture_preamble(lines)), ['# tracer: nop', 'event'])

    # Trace data on the same line as the marker is kept.
    self.assertEqual(
        list(strip_capture_preamble(['TRACE: event', 'more'])),
        [' event', 'more'])

    with self.assertRaises(CaptureOutputFailure):
      list(strip_capture_preamble(['capturing trace... done', 'event']))

  def test_strip_capture_preamble_is_lazy(self):

    def lines():
      yield 'TRACE:'
      yield 'first'
      raise AssertionError('read too far')

    gen = strip_capture_preamble(lines())
    self.assertEqual(next(gen), 'first')

  def test_check_capture_header(self):
    check_capture_header(CAPTURE)
    with self.assertRaisesRegex(CaptureOutputFailure, 'line 3'):
      check_capture_header('capturing trace... done\nTRACE:\n# tracer: sched\n')
    with self.assertRaisesRegex(CaptureOutputFailure, 'line 2'):
      check_capture_header('capturing trace... done')


class TestCategories(unittest.TestCase):

  def test_parse_category_list(self):
    output = ('         gfx - Graphics\n'
              '       input - Input\n'
              '\n'
              '  binder_driver - Binder Kernel driver\n')
    self.assertEqual(
        parse_category_list(output), ['gfx', 'input', 'binder_driver'])

  def test_malformed_category_line(self):
    with self.assertRaises(CaptureOutputFailure):
      parse_category_list(' - no name\n')
    with self.assertRaises(CaptureOutputFailure):
      parse_category_list('no dash here\n')

  def test_all_categories_present(self):
    self.assertEqual(missing_categories(CATEGORY_LIST), set())
    check_categories(CATEGORY_LIST)

  def test_missing_categories(self):
    output = '\n'.join(
        line for line in CATEGORY_LIST.splitlines()
        if line.split()[0] not in ('webview', 'rs'))
    self.assertEqual(missing_categories(output), {'webview', 'rs'})

    with self.assertLogs('ftrace_verifier.atrace.output', 'WARNING') as logs:
      with self.assertRaises(MissingCategoriesFailure) as cm:
        check_categories(output)
    self.assertEqual(cm.exception.missing, ['rs', 'webview'])
    self.assertIn('rs, webview', str(cm.exception))
    self.assertEqual(logs.output, [
        'WARNING:ftrace_verifier.atrace.output:missing category: rs',
        'WARNING:ftrace_verifier.atrace.output:missing category: webview',
    ])

  def test_custom_required_categories(self):
    output = '  sched - CPU Scheduling\n'
    self.assertEqual(missing_categories(output, ['sched']), set())
    with self.assertRaises(MissingCategoriesFailure):
      check_categories(output, ['sched', 'freq'])
