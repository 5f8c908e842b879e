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

import glob
from typing import List, Type

from ftrace_verifier.trace_uri_resolver import util
from ftrace_verifier.trace_uri_resolver.resolver import TraceUriResolver


class PathUriResolver(TraceUriResolver):
  PREFIX: str = None

  def __init__(self, path: str):
    self.path = path

  def resolve(self) -> List[TraceUriResolver.Result]:
    return [
        TraceUriResolver.Result(
            trace=util.file_generator(self.path), metadata={'path': self.path})
    ]

  @classmethod
  def from_trace_uri(cls: Type['PathUriResolver'],
                     args_str: str) -> 'PathUriResolver':
    return PathUriResolver(args_str)


class GlobUriResolver(TraceUriResolver):
  """Resolves every file matching a glob pattern, e.g. 'glob:pattern=*.txt'."""
  PREFIX = 'glob'

  def __init__(self, pattern: str):
    self.pattern = pattern

  def resolve(self) -> List[TraceUriResolver.Result]:
    return [
        TraceUriResolver.Result(trace=path, metadata={'path': path})
        for path in sorted(glob.glob(self.pattern, recursive=True))
    ]
