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

import codecs
import os
from typing import (BinaryIO, Dict, Generator, Iterable, Optional, TextIO,
                    Tuple, Union)

# Size of the chunks read from trace files.
MAX_BYTES_LOADED = 1 * 1024 * 1024

Chunk = Union[bytes, str]


def file_generator(path: str):
  with open(path, 'rb') as f:
    yield from read_generator(f)


def read_generator(trace: Union[BinaryIO, TextIO]):
  while True:
    chunk = trace.read(MAX_BYTES_LOADED)
    if not chunk:
      break
    yield chunk


def line_generator(chunks: Iterable[Chunk],
                   encoding: str = 'utf-8') -> Generator[str, None, None]:
  """Reassembles lines from |chunks|.

  Chunks are cut at arbitrary offsets so a line (or a multi-byte character)
  can span several of them. bytes chunks are decoded with |encoding|,
  replacing undecodable bytes; str chunks are used as is. Yielded lines do not
  include their line terminator.
  """
  decoder = codecs.getincrementaldecoder(encoding)(errors='replace')
  pending = ''
  for chunk in chunks:
    text = decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
    lines = (pending + text).split('\n')
    pending = lines.pop()
    for line in lines:
      yield line.rstrip('\r')
  pending += decoder.decode(b'', final=True)
  if pending:
    yield pending.rstrip('\r')


def merge_dicts(a: Dict[str, str], b: Dict[str, str]):
  return {**a, **b}


def parse_trace_uri(uri: str) -> Tuple[Optional[str], str]:
  # This is definitely a path and not a URI
  if uri.startswith('/') or uri.startswith('.'):
    return None, uri

  # If there's no colon, it cannot be a URI
  idx = uri.find(':')
  if idx == -1:
    return None, uri

  # A single character before the colon is a drive letter on Windows.
  if idx == 1:
    if os.name != 'nt':
      raise ValueError('Single character resolvers are not allowed')
    return None, uri

  return (uri[:idx], uri[idx + 1:])
