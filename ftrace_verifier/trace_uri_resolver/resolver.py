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
from typing import BinaryIO, Dict, Generator, List, TextIO, Type, Union

from ftrace_verifier.trace_uri_resolver import util

TraceUri = str
TraceGenerator = Generator[util.Chunk, None, None]
TraceContent = Union[BinaryIO, TextIO, TraceGenerator]


class TraceUriResolver:
  """Resolves a trace URI (e.g. 'lab:run_id=1234') into a list of traces.

  This class can be subclassed to look up captured traces with URI strings.

  For example:
    class LabRunResolver(TraceUriResolver):
      PREFIX = 'lab'

      def __init__(self, run_id: str = None, device: List[str] = None):
        self.run_id = run_id
        self.device = device

      def resolve(self):
        return [
          TraceUriResolver.Result(
            trace=capture.path,
            metadata={'device': capture.device})
          for capture in lab_db.captures(self.run_id, self.device)
        ]

  Resolvers can be passed directly wherever a trace is expected:
    TraceVerifier(config).verify(LabRunResolver(run_id='1234'))

  or registered and addressed by URI:
    config = TraceVerifierConfig(
      subject_suffix='testapp',
      resolver_registry=ResolverRegistry(resolvers=[LabRunResolver]))
    TraceVerifier(config).verify('lab:run_id=1234')
  """

  # Subclasses should set PREFIX to match the trace URI prefix they handle.
  PREFIX: str = None

  @dc.dataclass
  class Result:
    # Can itself be a URI, in which case it is resolved recursively.
    trace: Union[TraceUri, TraceContent]

    # Key-value pairs identifying the trace (e.g. path, device, iteration).
    metadata: Dict[str, str]

    def __init__(self,
                 trace: Union[TraceUri, TraceContent],
                 metadata: Dict[str, str] = None):
      self.trace = trace
      self.metadata = metadata or {}

  def resolve(self) -> List['TraceUriResolver.Result']:
    """Resolves a list of traces.

    Subclasses should implement this method and resolve the parameters
    specified in the constructor to a list of traces.
    """
    raise NotImplementedError('resolve is unimplemented for this resolver')

  @classmethod
  def from_trace_uri(cls: Type['TraceUriResolver'],
                     uri: TraceUri) -> 'TraceUriResolver':
    """Creates a resolver from a URI.

    URIs have the form:
      lab:day=2021-01-01;devices=blueline,crosshatch

    which is converted to the keyword arguments
      {'day': '2021-01-01', 'devices': ['blueline', 'crosshatch']}

    of the resolver constructor. Subclasses usually only need to define their
    constructor parameters.
    """
    return cls(**args_dict_from_uri(uri))


def _parse_arg(arg_str: str):
  key, sep, value = arg_str.partition('=')
  if not sep or not key or not (key.replace('_', '').isalnum()):
    raise ValueError('Could not find valid key in arg_str: ' + arg_str)
  if not value:
    raise ValueError('Empty value in trace uri arg_str: ' + arg_str)
  return key, value


def args_dict_from_uri(uri: str) -> Dict[str, Union[str, List[str]]]:
  _, args_str = util.parse_trace_uri(uri)
  if not args_str:
    return {}

  args = {}
  for arg in args_str.split(';'):
    key, value = _parse_arg(arg)
    values = value.split(',')
    args[key] = values if len(values) > 1 else value
  return args
