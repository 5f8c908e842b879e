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
"""Line formats of the kernel ftrace text output.

The expressions are kept in sync with the ftrace importer of catapult
(systrace), which is the reference consumer of this format. Newer kernels
add columns, so the formats are listed from the richest to the oldest: a line
is decoded with the first one which matches it in full.
"""

import dataclasses as dc
import re
from typing import Callable, List

from ftrace_verifier.ftrace_parser.event import NO_PROCESS_ID
from ftrace_verifier.ftrace_parser.event import TraceEvent

_HEAD = r'\s*(?P<thread_name>\S.*?)-(?P<tid>\d+)\s+'
_CPU = r'\[(?P<cpu>\d+)\]'
_FLAGS = r'\s+(?P<flags>[dX.][N.][Hhs.][0-9a-f.])'
_TAIL = (r'\s+(?P<ts>\d+\.\d+):\s+(?P<event_type>\S+):'
         r'(?:\s(?P<details>.*))?')

# 3.2 and later with the print-tgid option:
#   <idle>-0     (-----) [001] d..1  1.23: sched_switch: ...
TGID_PATTERN = re.compile(_HEAD + r'\(\s*(?P<tgid>\d+|-+)\)\s' + _CPU +
                          _FLAGS + _TAIL)

# 3.2 and later default output, with irq-info:
#   <idle>-0     [001] d..1  1.23: sched_switch: ...
IRQ_INFO_PATTERN = re.compile(_HEAD + _CPU + _FLAGS + _TAIL)

# Before 3.2:
#   <idle>-0     [001]  1.23: sched_switch: ...
LEGACY_PATTERN = re.compile(_HEAD + _CPU + r'\s*(?P<ts>\d+\.\d+):\s+'
                            r'(?P<event_type>\S+):(?:\s(?P<details>.*))?')


@dc.dataclass(frozen=True)
class LineGrammar:
  name: str
  pattern: re.Pattern[str]
  extract: Callable[[re.Match[str]], TraceEvent]


def _decode_tgid(tgid: str) -> int:
  if tgid.startswith('-'):
    return NO_PROCESS_ID
  return int(tgid)


def _event(m: re.Match[str], process_id: int) -> TraceEvent:
  groupdict = m.groupdict()
  return TraceEvent(
      thread_name=m.group('thread_name'),
      process_id=process_id,
      thread_id=int(m.group('tid')),
      event_type=m.group('event_type'),
      event_detail=m.group('details') or '',
      cpu=int(m.group('cpu')),
      flags=groupdict.get('flags'),
      timestamp=float(m.group('ts')))


def _extract_with_tgid(m: re.Match[str]) -> TraceEvent:
  return _event(m, _decode_tgid(m.group('tgid')))


def _extract_without_tgid(m: re.Match[str]) -> TraceEvent:
  return _event(m, NO_PROCESS_ID)


# Order matters: see module docstring.
GRAMMARS: List[LineGrammar] = [
    LineGrammar('tgid', TGID_PATTERN, _extract_with_tgid),
    LineGrammar('irq_info', IRQ_INFO_PATTERN, _extract_without_tgid),
    LineGrammar('legacy', LEGACY_PATTERN, _extract_without_tgid),
]
