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
"""Checks that userspace trace sections of a process appear in order."""

import dataclasses as dc
import logging
from typing import Optional, Sequence

from ftrace_verifier.common.exceptions import FtraceVerifierException
from ftrace_verifier.ftrace_parser.event import NO_PROCESS_ID
from ftrace_verifier.ftrace_parser.event import TraceEvent
from ftrace_verifier.section_verifier.verdict import FAILURE_EXCEPTIONS
from ftrace_verifier.section_verifier.verdict import FailureReason
from ftrace_verifier.section_verifier.verdict import Verdict

log = logging.getLogger(__name__)

# Event type of the records written by userspace to trace_marker (ATRACE_*).
MARKER_EVENT_TYPE = 'tracing_mark_write'

# Begin-section records have the form B|<pid>|<section name>.
BEGIN_SECTION_PREFIX = 'B|'

# Sections traced by the atrace test app on launch, in order.
APP_LAUNCH_SECTIONS = (
    'traceable-app-test-section',
    'inflate',
    'Choreographer#doFrame',
    'traversal',
    'measure',
    'layout',
    'draw',
    'Record View#draw()',
)


@dc.dataclass
class VerificationState:
  # Number of marker events attributed to the subject.
  match_count: int = 0

  # Index in the required sections of the next section to look for.
  next_required_index: int = 0

  # Bound to the first process id seen on a subject event.
  observed_subject_process_id: int = NO_PROCESS_ID

  # First hard failure seen while applying events, if any.
  failure: Optional[FailureReason] = None
  failure_message: str = ''


class SectionOrderVerifier:
  """Verifies that a thread traced a list of sections in a given order.

  Events are fed one at a time, in trace order, with |apply| (or |on_event|,
  which makes the verifier usable as parse_stream callbacks). Marker events
  of threads whose name ends with |subject_suffix| are matched against
  |required_sections|: the sections must appear as a subsequence of the
  subject's begin-section markers, i.e. other sections may be interleaved but
  a section seen before its turn is never revisited.

  Usage:
    verifier = SectionOrderVerifier('testapp', ['inflate', 'draw'])
    parse_stream(lines, verifier.on_event, verifier.on_finished)
    verifier.verdict.raise_for_failure()
  """

  def __init__(self,
               subject_suffix: str,
               required_sections: Sequence[str] = APP_LAUNCH_SECTIONS,
               marker_event_type: str = MARKER_EVENT_TYPE):
    self.subject_suffix = subject_suffix
    self.required_sections = tuple(required_sections)
    self.marker_event_type = marker_event_type
    self.state = VerificationState()
    self.verdict: Optional[Verdict] = None

  @property
  def finalized(self) -> bool:
    return self.verdict is not None

  @property
  def satisfied(self) -> bool:
    """True once every required section was seen and nothing failed."""
    state = self.state
    return (state.failure is None and state.match_count > 0 and
            state.next_required_index == len(self.required_sections))

  def is_relevant(self, event: TraceEvent) -> bool:
    # The kernel truncates thread names, hence the suffix match.
    return (event.event_type == self.marker_event_type and
            event.thread_name.endswith(self.subject_suffix))

  def apply(self, event: TraceEvent):
    """Updates the verification state with |event|.

    Raises:
      ProcessIdMismatchFailure: |event| belongs to the subject but its process
        id differs from the one seen on a previous subject event.
      InvalidThreadIdFailure: |event| belongs to the subject but has a
        non-positive thread id.
    """
    if self.finalized:
      raise FtraceVerifierException(
          'Cannot apply events to a verifier which was already finalized')
    if not self.is_relevant(event):
      return

    state = self.state
    state.match_count += 1

    if event.thread_id <= 0:
      self._fail(FailureReason.INVALID_THREAD_ID,
                 f'Invalid thread id {event.thread_id} on subject thread '
                 f'{event.thread_name!r}')

    if event.has_process_id:
      if state.observed_subject_process_id == NO_PROCESS_ID:
        state.observed_subject_process_id = event.process_id
      elif state.observed_subject_process_id != event.process_id:
        self._fail(
            FailureReason.PROCESS_ID_MISMATCH,
            f'Process id mismatch for threads ending with '
            f'{self.subject_suffix!r}: expected '
            f'{state.observed_subject_process_id}, got {event.process_id} '
            f'(thread {event.thread_name}-{event.thread_id})')

    self._advance(event.event_detail)

  def on_event(self, event: TraceEvent):
    self.apply(event)

  def finalize(self) -> Verdict:
    """Ends the verification and returns its verdict.

    Calling this more than once returns the same verdict.
    """
    if self.verdict is None:
      self.verdict = self._make_verdict()
      if self.verdict.passed:
        log.debug('All %d required sections seen for %r',
                  len(self.required_sections), self.subject_suffix)
    return self.verdict

  def on_finished(self) -> Verdict:
    return self.finalize()

  def _advance(self, detail: str):
    state = self.state
    index = state.next_required_index
    if index >= len(self.required_sections):
      return
    section = self.required_sections[index]
    if detail.startswith(BEGIN_SECTION_PREFIX) and detail.endswith('|' +
                                                                   section):
      state.next_required_index += 1
      log.debug('Matched required section %d/%d: %s', index + 1,
                len(self.required_sections), section)

  def _fail(self, reason: FailureReason, message: str):
    state = self.state
    if state.failure is None:
      state.failure = reason
      state.failure_message = message
    raise FAILURE_EXCEPTIONS[reason](
        message, verdict=self._make_verdict(reason, message))

  def _make_verdict(self,
                    failure: Optional[FailureReason] = None,
                    message: str = '') -> Verdict:
    state = self.state
    required = self.required_sections
    if failure is None and state.failure is not None:
      failure, message = state.failure, state.failure_message
    elif failure is None and state.match_count == 0:
      failure = FailureReason.NO_RELEVANT_EVENTS
      message = ('Unable to parse any userspace sections from trace output: '
                 f'no {self.marker_event_type!r} events from threads ending '
                 f'with {self.subject_suffix!r}')
    elif failure is None and state.next_required_index < len(required):
      failure = FailureReason.SECTIONS_MISSING
      message = ("Didn't see required list of traced sections, in order: "
                 f'matched {state.next_required_index} of {len(required)}, '
                 f'missing {required[state.next_required_index]!r} '
                 f'({state.match_count} relevant events)')
    return Verdict(
        subject_suffix=self.subject_suffix,
        required_sections=required,
        match_count=state.match_count,
        matched_sections=state.next_required_index,
        subject_process_id=state.observed_subject_process_id,
        failure=failure,
        message=message)
