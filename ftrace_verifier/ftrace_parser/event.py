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
from typing import Iterable, Optional

from ftrace_verifier.common.exceptions import FtraceVerifierException

try:
  import pandas as pd
  HAS_PANDAS = True
except ImportError:
  HAS_PANDAS = False

# Value of |TraceEvent.process_id| when the line format does not carry the
# thread group id (or carries it as a run of dashes).
NO_PROCESS_ID = -1


@dc.dataclass(frozen=True)
class TraceEvent:
  # Name of the thread which emitted the record. The kernel truncates this to
  # a fixed width so it is not guaranteed to be unique.
  thread_name: str

  # Thread group id or NO_PROCESS_ID.
  process_id: int

  thread_id: int

  # e.g. 'tracing_mark_write' or 'sched_switch'.
  event_type: str

  # Everything after the event type; the format depends on |event_type|.
  event_detail: str = ''

  cpu: Optional[int] = None

  # The four irq-info flag characters; None for the legacy line format.
  flags: Optional[str] = None

  # Seconds since boot, as printed by the kernel.
  timestamp: Optional[float] = None

  @property
  def has_process_id(self) -> bool:
    return self.process_id != NO_PROCESS_ID


EVENT_COLUMNS = [f.name for f in dc.fields(TraceEvent)]


def events_as_pandas_dataframe(events: Iterable[TraceEvent]):
  """Returns a dataframe with one row per event and one column per field."""
  if not HAS_PANDAS:
    raise FtraceVerifierException(
        'pandas dependency missing. Please run `pip3 install pandas`')
  return pd.DataFrame([dc.astuple(e) for e in events], columns=EVENT_COLUMNS)
