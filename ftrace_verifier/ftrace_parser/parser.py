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
import dataclasses as dc
import logging
from typing import Callable, Dict, Generator, Iterable, Optional, Tuple

from ftrace_verifier.ftrace_parser.event import TraceEvent
from ftrace_verifier.ftrace_parser.grammar import GRAMMARS
from ftrace_verifier.ftrace_parser.grammar import LineGrammar

log = logging.getLogger(__name__)

TraceEventCallback = Callable[[TraceEvent], None]


@dc.dataclass
class ParseStats:
  # Number of lines read from the input.
  lines: int = 0

  # Number of lines which produced an event.
  parsed: int = 0

  # Number of lines which matched none of the grammars (headers, comments,
  # truncated records...).
  unparsed: int = 0

  # Number of lines matched by each grammar, keyed by LineGrammar.name.
  grammars: Dict[str, int] = dc.field(default_factory=dict)

  # True if the consumer stopped reading before the end of the input.
  stopped_early: bool = False


def match_line(line: str) -> Optional[Tuple[LineGrammar, TraceEvent]]:
  """Decodes |line| with the first grammar which matches it.

  Returns the matching grammar together with the decoded event, or None if no
  grammar matches.
  """
  line = line.rstrip('\r\n')
  for grammar in GRAMMARS:
    m = grammar.pattern.fullmatch(line)
    if m:
      return grammar, grammar.extract(m)
  return None


def parse_line(line: str) -> Optional[TraceEvent]:
  """Converts one line of ftrace text output into a TraceEvent.

  Returns None if the line is not a trace record (e.g. a header or a comment);
  this is expected for real captures and is not an error.
  """
  matched = match_line(line)
  return matched[1] if matched else None


def parse_events(lines: Iterable[str],
                 stats: Optional[ParseStats] = None
                ) -> Generator[TraceEvent, None, None]:
  """Lazily parses |lines|, yielding an event for every trace record.

  Unmatched lines are logged and skipped. If |stats| is passed, it is updated
  as lines are consumed.
  """
  stats = stats if stats is not None else ParseStats()
  for line in lines:
    stats.lines += 1
    matched = match_line(line)
    if matched is None:
      stats.unparsed += 1
      _log_unmatched(line)
      continue
    grammar, event = matched
    stats.parsed += 1
    stats.grammars[grammar.name] = stats.grammars.get(grammar.name, 0) + 1
    yield event


def parse_stream(lines: Iterable[str],
                 on_event: TraceEventCallback,
                 on_finished: Callable[[], object],
                 should_stop: Optional[Callable[[], bool]] = None
                ) -> ParseStats:
  """Parses |lines| in order, invoking |on_event| for every trace record.

  |on_finished| is invoked exactly once after the last event, including when
  |on_event| raises or when |should_stop| returns True (which stops reading
  the remaining lines).

  Returns:
    The ParseStats for the consumed part of the input.
  """
  stats = ParseStats()
  try:
    with contextlib.closing(parse_events(lines, stats)) as events:
      for event in events:
        on_event(event)
        if should_stop is not None and should_stop():
          stats.stopped_early = True
          break
  finally:
    on_finished()
  return stats


def _log_unmatched(line: str):
  line = line.rstrip('\r\n')
  if not line.strip() or line.lstrip().startswith('#'):
    log.debug("line doesn't match: %s", line)
  else:
    log.info("line doesn't match: %s", line)
