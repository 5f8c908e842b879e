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
"""Contains classes for BatchVerifier API."""
import abc
import concurrent.futures as cf
import dataclasses as dc
import logging
import multiprocessing
import time
from enum import Enum
from typing import Dict, List, Optional

import pandas as pd

from ftrace_verifier.batch_verifier.platform import PlatformDelegate
from ftrace_verifier.common.exceptions import FtraceVerifierException
from ftrace_verifier.section_verifier.verdict import Verdict
from ftrace_verifier.trace_uri_resolver import registry
from ftrace_verifier.trace_uri_resolver.registry import ResolverRegistry
from ftrace_verifier.trace_verifier.api import PLATFORM_DELEGATE as TV_PLATFORM_DELEGATE
from ftrace_verifier.trace_verifier.api import TraceVerifier
from ftrace_verifier.trace_verifier.api import TraceVerifierConfig

log = logging.getLogger(__name__)

# Defining this field as a module variable means this can be changed by
# implementations at startup and used for all BatchVerifier objects
# without having to specify on each one.
PLATFORM_DELEGATE = PlatformDelegate

TraceListReference = registry.TraceListReference
Metadata = Dict[str, str]

MAX_VERIFY_WORKERS = 32

VERDICT_COLUMNS = [
    'passed',
    'failure',
    'message',
    'match_count',
    'matched_sections',
    'required_sections',
    'subject_process_id',
    'lines',
    'unparsed_lines',
]


# Enum encoding how errors while loading/verifying traces in BatchVerifier
# should be handled.
class FailureHandling(Enum):
  # If any trace fails to load or raises while being verified, raises an
  # exception causing the entire batch to fail.
  RAISE_EXCEPTION = 0

  # If a trace fails to load or raises while being verified, the trace is
  # dropped from the results and a failure integer is incremented in the
  # Stats of the batch.
  INCREMENT_STAT = 1


@dc.dataclass
class BatchVerifierConfig:
  verifier_config: TraceVerifierConfig
  load_failure_handling: FailureHandling
  verify_failure_handling: FailureHandling

  def __init__(
      self,
      verifier_config: TraceVerifierConfig,
      load_failure_handling: FailureHandling = FailureHandling.RAISE_EXCEPTION,
      verify_failure_handling: FailureHandling = FailureHandling
      .RAISE_EXCEPTION,
  ):
    self.verifier_config = verifier_config
    self.load_failure_handling = load_failure_handling
    self.verify_failure_handling = verify_failure_handling


# Contains stats about the events which happened during the use of
# BatchVerifier.
@dc.dataclass
class Stats:
  # The number of traces which failed to resolve or read; only non-zero if
  # FailureHandling.INCREMENT_STAT is chosen as the load failure handling.
  load_failures: int = 0

  # The number of traces for which the verification raised (e.g. process id
  # mismatches); only non-zero if FailureHandling.INCREMENT_STAT is chosen as
  # the verify failure handling.
  verify_failures: int = 0

  # The number of traces which were verified but did not pass.
  failed_verdicts: int = 0


class BatchVerifier:
  """Verifies many ftrace captures with the same expectations.

  Usage:
    config = BatchVerifierConfig(TraceVerifierConfig(subject_suffix='app'))
    with BatchVerifier('glob:pattern=/tmp/traces/*.txt', config) as bv:
      df = bv.verify_and_flatten()
      print(df[~df.passed])
  """

  class Observer(abc.ABC):
    """Observer that can be used to provide side-channel information about
    verified traces.
    """

    @abc.abstractmethod
    def trace_verified(self, metadata: Metadata,
                       execution_time_seconds: float):
      """Invoked every time a trace has been verified.

      Args:
        metadata: Metadata provided by trace resolver, can be used to identify
          the trace.

        execution_time_seconds: Verification time, in seconds.
      """
      raise NotImplementedError

  def __init__(self,
               traces: TraceListReference,
               config: BatchVerifierConfig,
               observer: Optional[Observer] = None):
    """Creates a batch verifier instance.

    Args:
      traces: A list of traces, a trace URI resolver or a URI which
        can be resolved to a list of traces.

        If a list, each of items must be one of the following types:
        1) path to a trace file to open and read
        2) a file like object (file, io.BytesIO or similar) to read
        3) a generator yielding bytes
        4) an URI which resolves to one or more traces
      config: configuration options which customize the verification of each
        trace and the handling of failures.
      observer: an optional observer for side-channel information, e.g.
        running time of verifications.
    """
    self.closed = False
    self._stats = Stats()
    self.config = config
    self.observer = observer

    self.platform_delegate = PLATFORM_DELEGATE()
    self.tv_platform_delegate = TV_PLATFORM_DELEGATE()

    # Make sure the trace verifier uses the same resolver registry as the
    # one used to resolve everything in this class.
    self.resolver_registry = config.verifier_config.resolver_registry or \
      self.tv_platform_delegate.default_resolver_registry()
    self.config.verifier_config.resolver_registry = self.resolver_registry
    self.trace_verifier = TraceVerifier(config.verifier_config)

    self.resolved = self._resolve(traces)

    # Each trace is parsed on a single thread; traces are independent so they
    # are spread over a pool.
    self.executor = self.platform_delegate.create_verify_executor(
        len(self.resolved)) or cf.ThreadPoolExecutor(
            max_workers=min(multiprocessing.cpu_count(), MAX_VERIFY_WORKERS))

  def verify(self) -> List[Verdict]:
    """Verifies every trace.

    The verification happens in parallel across all the traces. Traces can
    only be read once so this should be called at most once per instance.

    Returns:
      A list of Verdicts (one for each trace which did not fail to load or
      raise while being verified), in the order the traces were resolved.
    """
    if self.closed:
      raise FtraceVerifierException('BatchVerifier is closed')
    verdicts = [
        v for v in self.executor.map(self._verify_handling_failure,
                                     self.resolved) if v is not None
    ]
    self._stats.failed_verdicts += sum(1 for v in verdicts if not v.passed)
    return verdicts

  def verify_and_flatten(self) -> pd.DataFrame:
    """Verifies every trace and flattens the verdicts into a dataframe.

    Returns:
      A Pandas dataframe with one row per verdict (see VERDICT_COLUMNS). The
      contents of the |metadata| dictionary emitted by the resolver of each
      trace are added as extra columns (key being column name, value being
      the value in the dataframe).
    """
    return verdicts_as_pandas_dataframe(self.verify())

  def stats(self):
    """Statistics about the operation of this batch verifier instance.

    See |Stats| class definition for the list of the statistics available."""
    return self._stats

  def close(self):
    """Closes this batch verifier instance, releasing its worker threads."""
    if self.closed:
      return
    self.closed = True
    if hasattr(self, 'executor'):
      self.executor.shutdown(wait=True)

  def _resolve(self, traces: TraceListReference
              ) -> List[ResolverRegistry.Result]:
    refs = traces if isinstance(traces, list) else [traces]
    resolved = []
    for ref in refs:
      try:
        resolved.extend(self.resolver_registry.resolve(ref))
      except Exception as ex:
        if self.config.load_failure_handling == FailureHandling.RAISE_EXCEPTION:
          raise FtraceVerifierException(
              f'Failed to resolve trace {ref!r}: {ex}') from ex
        log.warning('Failed to resolve trace %r: %s', ref, ex)
        self._stats.load_failures += 1
    return resolved

  def _verify_handling_failure(
      self, resolved: ResolverRegistry.Result) -> Optional[Verdict]:
    metadata = resolved.metadata
    start = time.time()
    try:
      verdict = self.trace_verifier.verify_resolved(resolved)
    except OSError as ex:
      if self.config.load_failure_handling == FailureHandling.RAISE_EXCEPTION:
        raise FtraceVerifierException(f'{metadata} {ex}') from None
      log.warning('Failed to read trace %s: %s', metadata, ex)
      self._stats.load_failures += 1
      return None
    except FtraceVerifierException as ex:
      if self.config.verify_failure_handling == \
          FailureHandling.RAISE_EXCEPTION:
        raise FtraceVerifierException(f'{metadata} {ex}') from None
      log.warning('Failed to verify trace %s: %s', metadata, ex)
      self._stats.verify_failures += 1
      return None
    end = time.time()
    if self.observer:
      self.observer.trace_verified(metadata, end - start)
    return verdict

  def __enter__(self):
    return self

  def __exit__(self, a, b, c):
    del a, b, c  # Unused.
    self.close()
    return False

  def __del__(self):
    self.close()


def _verdict_row(verdict: Verdict):
  stats = verdict.parse_stats
  return {
      'passed': verdict.passed,
      'failure': verdict.failure.name if verdict.failure else None,
      'message': verdict.message,
      'match_count': verdict.match_count,
      'matched_sections': verdict.matched_sections,
      'required_sections': len(verdict.required_sections),
      'subject_process_id': verdict.subject_process_id,
      'lines': stats.lines if stats else None,
      'unparsed_lines': stats.unparsed if stats else None,
  }


def verdicts_as_pandas_dataframe(verdicts: List[Verdict]) -> pd.DataFrame:
  """Returns a dataframe with one row per verdict (see VERDICT_COLUMNS) and
  the resolver metadata of each verdict as extra columns."""
  rows = []
  for verdict in verdicts:
    row = _verdict_row(verdict)
    row.update(verdict.metadata)
    rows.append(row)
  if not rows:
    return pd.DataFrame(columns=VERDICT_COLUMNS)
  df = pd.DataFrame(rows).reset_index(drop=True)
  # None marks verdicts which passed, whatever string dtype pandas infers.
  df['failure'] = pd.Series([row['failure'] for row in rows], dtype=object)
  return df
