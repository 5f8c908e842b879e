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
"""Helpers to check the raw stdout of the atrace command.

Capturing is left to the caller (e.g. `adb shell atrace ...`); these functions
only look at the text it printed.
"""

import logging
import re
from typing import Generator, Iterable, List, Sequence, Set

from ftrace_verifier.common.exceptions import CaptureOutputFailure
from ftrace_verifier.common.exceptions import MissingCategoriesFailure

log = logging.getLogger(__name__)

# atrace prints this line right before the trace data.
TRACE_MARKER = 'TRACE:'

# First lines printed by `atrace` when run without arguments.
CAPTURE_HEADER = (
    'capturing trace... done',
    TRACE_MARKER,
    '# tracer: nop',
)

# All userspace categories, and 'sched'.
REQUIRED_CATEGORIES = (
    'sched',
    'gfx',
    'input',
    'view',
    'webview',
    'wm',
    'am',
    'sm',
    'audio',
    'video',
    'camera',
    'hal',
    'app',
    'res',
    'dalvik',
    'rs',
    'bionic',
    'power',
)

_NEWLINE = re.compile(r'\r?\n')


def split_lines(output: str) -> List[str]:
  return _NEWLINE.split(output)


def extract_trace_data(output: str) -> str:
  """Returns the text following the TRACE: marker of |output|."""
  index = output.find(TRACE_MARKER)
  if index < 0:
    raise CaptureOutputFailure(
        f'{TRACE_MARKER!r} marker not found in atrace output')
  return output[index + len(TRACE_MARKER):]


def strip_capture_preamble(
    lines: Iterable[str]) -> Generator[str, None, None]:
  """Streaming version of |extract_trace_data|.

  Drops the lines up to and including the TRACE: marker and yields the rest.
  Raises CaptureOutputFailure once |lines| is exhausted if no marker was seen.
  """
  it = iter(lines)
  for line in it:
    index = line.find(TRACE_MARKER)
    if index < 0:
      continue
    rest = line[index + len(TRACE_MARKER):]
    if rest.strip():
      yield rest
    yield from it
    return
  raise CaptureOutputFailure(
      f'{TRACE_MARKER!r} marker not found in atrace output')


def check_capture_header(output: str):
  lines = split_lines(output)
  for i, expected in enumerate(CAPTURE_HEADER):
    actual = lines[i] if i < len(lines) else None
    if actual != expected:
      raise CaptureOutputFailure(
          f'Unexpected atrace output on line {i + 1}: expected {expected!r}, '
          f'got {actual!r}')


def parse_category_list(output: str) -> List[str]:
  """Parses the output of `atrace --list_categories`.

  Each line has the form '<name> - <description>', with the name right
  aligned.
  """
  categories = []
  for line in split_lines(output):
    if not line.strip():
      continue
    dash_index = line.find('-')
    if dash_index <= 1:
      raise CaptureOutputFailure(f'Malformed atrace category line: {line!r}')
    categories.append(line[:dash_index].strip())
  return categories


def missing_categories(
    output: str, required: Sequence[str] = REQUIRED_CATEGORIES) -> Set[str]:
  return set(required) - set(parse_category_list(output))


def check_categories(output: str,
                     required: Sequence[str] = REQUIRED_CATEGORIES):
  missing = sorted(missing_categories(output, required))
  if not missing:
    return
  for category in missing:
    log.warning('missing category: %s', category)
  raise MissingCategoriesFailure(
      'Expected categories missing from atrace: ' + ', '.join(missing),
      missing=missing)
