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

import dataclasses as dc
import enum
from typing import Dict, Optional, Tuple

from ftrace_verifier.common.exceptions import InvalidThreadIdFailure
from ftrace_verifier.common.exceptions import NoRelevantEventsFailure
from ftrace_verifier.common.exceptions import ProcessIdMismatchFailure
from ftrace_verifier.common.exceptions import SectionOrderFailure
from ftrace_verifier.ftrace_parser.event import NO_PROCESS_ID
from ftrace_verifier.ftrace_parser.parser import ParseStats


class FailureReason(enum.Enum):
  # No marker event from the subject was seen at all: the subject was most
  # likely not traced (capture or setup problem).
  NO_RELEVANT_EVENTS = 1

  # The subject was traced but the required sections were not all seen in
  # the required order.
  SECTIONS_MISSING = 2

  # Two marker events of the subject carried different process ids.
  PROCESS_ID_MISMATCH = 3

  # A marker event of the subject carried a non-positive thread id.
  INVALID_THREAD_ID = 4


FAILURE_EXCEPTIONS = {
    FailureReason.NO_RELEVANT_EVENTS: NoRelevantEventsFailure,
    FailureReason.SECTIONS_MISSING: SectionOrderFailure,
    FailureReason.PROCESS_ID_MISMATCH: ProcessIdMismatchFailure,
    FailureReason.INVALID_THREAD_ID: InvalidThreadIdFailure,
}


@dc.dataclass(frozen=True)
class Verdict:
  """Outcome of verifying one trace."""
  subject_suffix: str
  required_sections: Tuple[str, ...]

  # Number of marker events attributed to the subject.
  match_count: int

  # Number of required sections seen, in order.
  matched_sections: int

  # First process id seen for the subject, or NO_PROCESS_ID.
  subject_process_id: int = NO_PROCESS_ID

  failure: Optional[FailureReason] = None

  # Human readable diagnostic; empty when the verification passed.
  message: str = ''

  # Metadata of the trace as provided by its resolver (e.g. its path).
  metadata: Dict[str, str] = dc.field(default_factory=dict, hash=False)

  parse_stats: Optional[ParseStats] = dc.field(default=None, hash=False)

  @property
  def passed(self) -> bool:
    return self.failure is None

  @property
  def missing_section(self) -> Optional[str]:
    if self.matched_sections < len(self.required_sections):
      return self.required_sections[self.matched_sections]
    return None

  def with_context(self,
                   metadata: Optional[Dict[str, str]] = None,
                   parse_stats: Optional[ParseStats] = None) -> 'Verdict':
    return dc.replace(
        self,
        metadata=dict(metadata or self.metadata),
        parse_stats=parse_stats or self.parse_stats)

  def raise_for_failure(self):
    """Raises the VerificationFailure subclass matching |failure|, if any."""
    if self.passed:
      return
    message = self.message
    if self.metadata:
      message = f'{self.metadata} {message}'
    raise FAILURE_EXCEPTIONS[self.failure](message, verdict=self)

  def to_proto(self, protos):
    """Fills a VerificationReport message.

    Args:
      protos: a trace_verifier.protos.ProtoFactory.
    """
    report = protos.VerificationReport()
    report.passed = self.passed
    report.subject_suffix = self.subject_suffix
    report.required_sections.extend(self.required_sections)
    report.match_count = self.match_count
    report.matched_sections = self.matched_sections
    if self.subject_process_id != NO_PROCESS_ID:
      report.subject_process_id = self.subject_process_id
    if self.failure is not None:
      report.failure = self.failure.name
      report.message = self.message
    for key, value in sorted(self.metadata.items()):
      entry = report.metadata.add()
      entry.key = key
      entry.value = str(value)
    if self.parse_stats is not None:
      report.lines = self.parse_stats.lines
      report.unparsed_lines = self.parse_stats.unparsed
    return report
