#!/usr/bin/env python3
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
""" Given atrace/ftrace text captures, checks that a process traced a list of
userspace sections in order.
"""

import argparse
import logging
import os
import sys

ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(os.path.join(ROOT_DIR))

from ftrace_verifier.atrace import check_categories
from ftrace_verifier.batch_verifier import BatchVerifier
from ftrace_verifier.batch_verifier import BatchVerifierConfig
from ftrace_verifier.batch_verifier import FailureHandling
from ftrace_verifier.batch_verifier import verdicts_as_pandas_dataframe
from ftrace_verifier.common.exceptions import FtraceVerifierException
from ftrace_verifier.section_verifier import APP_LAUNCH_SECTIONS
from ftrace_verifier.trace_verifier import ProtoFactory
from ftrace_verifier.trace_verifier import TraceVerifierConfig


def check_category_file(path: str) -> int:
  with open(path, 'r') as f:
    output = f.read()
  try:
    check_categories(output)
  except FtraceVerifierException as ex:
    logging.error('%s', ex)
    return 1
  logging.info('All required atrace categories are present')
  return 0


def write_report(path: str, verdicts):
  protos = ProtoFactory()
  report_set = protos.VerificationReportSet()
  for verdict in verdicts:
    report_set.report.add().CopyFrom(verdict.to_proto(protos))
  with open(path, 'wb') as out:
    out.write(report_set.SerializeToString())


def main(argv=None):
  parser = argparse.ArgumentParser(description=__doc__)
  parser.add_argument('traces', nargs='*', help='Trace files or trace URIs')
  parser.add_argument(
      '--subject',
      help='Suffix of the (truncated) thread name of the traced process')
  parser.add_argument(
      '--section',
      action='append',
      default=None,
      help='Required section, in order. Can be specified multiple times '
      '(default: the atrace test app launch sections)')
  parser.add_argument(
      '--capture-output',
      action='store_true',
      default=False,
      help='Traces are the full stdout of atrace (data after "TRACE:")')
  parser.add_argument(
      '--stop-when-satisfied', action='store_true', default=False)
  parser.add_argument(
      '--keep-going',
      action='store_true',
      default=False,
      help='Count unreadable or inconsistent traces instead of aborting')
  parser.add_argument('--out-csv', default=None)
  parser.add_argument(
      '--report', default=None, help='Write a VerificationReportSet proto')
  parser.add_argument(
      '--list-categories',
      default=None,
      metavar='FILE',
      help='Check saved `atrace --list_categories` output')
  parser.add_argument('--verbose', action='store_true', default=False)
  args = parser.parse_args(argv)

  logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

  status = 0
  if args.list_categories:
    status = check_category_file(args.list_categories)

  if not args.traces:
    if not args.list_categories:
      logging.info('At least one trace or --list-categories must be specified')
      return 1
    return status

  if not args.subject:
    logging.error('--subject is required to verify traces')
    return 1

  handling = FailureHandling.INCREMENT_STAT if args.keep_going else \
    FailureHandling.RAISE_EXCEPTION
  config = BatchVerifierConfig(
      TraceVerifierConfig(
          subject_suffix=args.subject,
          required_sections=args.section or APP_LAUNCH_SECTIONS,
          capture_output=args.capture_output,
          stop_when_satisfied=args.stop_when_satisfied),
      load_failure_handling=handling,
      verify_failure_handling=handling)

  try:
    with BatchVerifier(args.traces, config) as bv:
      verdicts = bv.verify()
      stats = bv.stats()
  except FtraceVerifierException as ex:
    logging.error('%s', ex)
    return 1

  for verdict in verdicts:
    name = verdict.metadata.get('path', 'trace')
    if verdict.passed:
      print(f'PASS {name}')
    else:
      print(f'FAIL {name}: {verdict.message}')

  if args.out_csv:
    csv = verdicts_as_pandas_dataframe(verdicts).to_csv(index=False)
    if args.out_csv == '-':
      sys.stdout.write(csv)
    else:
      with open(args.out_csv, 'w') as out:
        out.write(csv)

  if args.report:
    write_report(args.report, verdicts)

  if stats.load_failures or stats.verify_failures or stats.failed_verdicts:
    status = 1
  return status


if __name__ == '__main__':
  exit(main())
