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
import logging
from typing import Dict, Iterable, Optional, Sequence

from ftrace_verifier.atrace.output import strip_capture_preamble
from ftrace_verifier.ftrace_parser.parser import parse_stream
from ftrace_verifier.section_verifier.verdict import Verdict
from ftrace_verifier.section_verifier.verifier import APP_LAUNCH_SECTIONS
from ftrace_verifier.section_verifier.verifier import MARKER_EVENT_TYPE
from ftrace_verifier.section_verifier.verifier import SectionOrderVerifier
from ftrace_verifier.trace_uri_resolver import registry
from ftrace_verifier.trace_uri_resolver.registry import ResolverRegistry
from ftrace_verifier.trace_uri_resolver.util import line_generator
from ftrace_verifier.trace_verifier.platform import PlatformDelegate

log = logging.getLogger(__name__)

# Defining this field as a module variable means this can be changed by
# implementations at startup and used for all TraceVerifier objects
# without having to specify on each one.
PLATFORM_DELEGATE = PlatformDelegate

TraceReference = registry.TraceReference


@dc.dataclass
class TraceVerifierConfig:
  # Suffix of the (possibly truncated) name of the threads to verify.
  subject_suffix: str

  # Sections which the subject must have begun, in this order.
  required_sections: Sequence[str] = APP_LAUNCH_SECTIONS

  # Event type of the userspace trace records.
  marker_event_type: str = MARKER_EVENT_TYPE

  # If True, the trace is the full stdout of atrace and the trace data starts
  # after the 'TRACE:' line.
  capture_output: bool = False

  # If True, stops reading the trace as soon as all the required sections
  # were seen. Later inconsistencies (e.g. process id mismatches) are then
  # not detected.
  stop_when_satisfied: bool = False

  # If True, failing verdicts are raised as VerificationFailure exceptions
  # instead of being returned.
  raise_on_failure: bool = False

  # A registry of custom URI resolvers to use when resolving trace URIs.
  resolver_registry: Optional[ResolverRegistry] = None

  # Encoding of the trace files.
  encoding: str = 'utf-8'

  def __init__(
      self,
      subject_suffix: str,
      required_sections: Sequence[str] = APP_LAUNCH_SECTIONS,
      marker_event_type: str = MARKER_EVENT_TYPE,
      capture_output: bool = False,
      stop_when_satisfied: bool = False,
      raise_on_failure: bool = False,
      resolver_registry: Optional[ResolverRegistry] = None,
      encoding: str = 'utf-8',
  ):
    self.subject_suffix = subject_suffix
    self.required_sections = tuple(required_sections)
    self.marker_event_type = marker_event_type
    self.capture_output = capture_output
    self.stop_when_satisfied = stop_when_satisfied
    self.raise_on_failure = raise_on_failure
    self.resolver_registry = resolver_registry
    self.encoding = encoding


class TraceVerifier:
  """Verifies the userspace sections of ftrace text captures.

  Usage:
    verifier = TraceVerifier(TraceVerifierConfig(subject_suffix='testapp'))
    verdict = verifier.verify('/tmp/atrace.txt')
    if not verdict.passed:
      print(verdict.message)
  """

  def __init__(self, config: TraceVerifierConfig):
    self.config = config
    self.platform_delegate = PLATFORM_DELEGATE()
    self.resolver_registry = config.resolver_registry or \
      self.platform_delegate.default_resolver_registry()

  def verify(self, trace: TraceReference) -> Verdict:
    """Verifies a single trace.

    Args:
      trace: reference to the trace to verify. One of:
        1) path to a trace file to open and read
        2) a file like object (file, io.BytesIO, io.StringIO or similar)
        3) a generator yielding bytes or str chunks
        4) a trace URI which resolves to exactly one of the above
        5) a trace URI resolver (see resolver.TraceUriResolver)

    Returns:
      The Verdict of the trace, with the resolver metadata attached.

    Raises:
      FtraceVerifierException: |trace| does not resolve to exactly one trace.
      ProcessIdMismatchFailure, InvalidThreadIdFailure: the subject events are
        inconsistent.
      CaptureOutputFailure: |config.capture_output| is set but the trace has
        no 'TRACE:' marker.
      VerificationFailure: the verification failed and
        |config.raise_on_failure| is set.
    """
    return self.verify_resolved(self.resolver_registry.resolve_one(trace))

  def verify_resolved(self, resolved: ResolverRegistry.Result) -> Verdict:
    lines = line_generator(resolved.generator, self.config.encoding)
    return self.verify_lines(lines, resolved.metadata)

  def verify_lines(self,
                   lines: Iterable[str],
                   metadata: Optional[Dict[str, str]] = None) -> Verdict:
    config = self.config
    verifier = self.create_section_verifier()
    if config.capture_output:
      lines = strip_capture_preamble(lines)

    should_stop = None
    if config.stop_when_satisfied:
      should_stop = lambda: verifier.satisfied

    stats = parse_stream(lines, verifier.on_event, verifier.on_finished,
                         should_stop)
    verdict = verifier.verdict.with_context(metadata, stats)
    if verdict.passed:
      log.info('%s: all %d sections seen', metadata or 'trace',
               len(verdict.required_sections))
    else:
      log.info('%s: %s', metadata or 'trace', verdict.message)

    if config.raise_on_failure:
      verdict.raise_for_failure()
    return verdict

  def create_section_verifier(self) -> SectionOrderVerifier:
    return SectionOrderVerifier(
        subject_suffix=self.config.subject_suffix,
        required_sections=self.config.required_sections,
        marker_event_type=self.config.marker_event_type)
