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

import io
import os
import tempfile
import unittest

from ftrace_verifier.common.exceptions import FtraceVerifierException
from ftrace_verifier.trace_uri_resolver import GlobUriResolver
from ftrace_verifier.trace_uri_resolver import PathUriResolver
from ftrace_verifier.trace_uri_resolver import ResolverRegistry
from ftrace_verifier.trace_uri_resolver import TraceUriResolver
from ftrace_verifier.trace_uri_resolver.resolver import args_dict_from_uri
from ftrace_verifier.trace_uri_resolver.util import line_generator
from ftrace_verifier.trace_uri_resolver.util import parse_trace_uri


class SimpleResolver(TraceUriResolver):
  PREFIX = 'simple'

  def __init__(self, foo=None, bar=None):
    self.foo = foo
    self.bar = bar

  def foo_gen(self):
    yield self.foo.encode() if self.foo else b''

  def bar_gen(self):
    yield self.bar.encode() if self.bar else b''

  def resolve(self):
    return [
        TraceUriResolver.Result(self.foo_gen()),
        TraceUriResolver.Result(
            self.bar_gen(), metadata={
                'foo': self.foo,
                'bar': self.bar
            })
    ]


class RecursiveResolver(SimpleResolver):
  PREFIX = 'recursive'

  def resolve(self):
    return [
        TraceUriResolver.Result(self.foo_gen()),
        TraceUriResolver.Result(
            self.bar_gen(), metadata={
                'foo': 'foo',
                'bar': 'bar'
            }),
        TraceUriResolver.Result(f'simple:foo={self.foo};bar={self.bar}'),
        TraceUriResolver.Result(SimpleResolver(foo=self.foo, bar=self.bar)),
    ]


class TestResolver(unittest.TestCase):

  def test_simple_resolve(self):
    registry = ResolverRegistry([SimpleResolver])

    (foo_res, bar_res) = registry.resolve('simple:foo=x;bar=y')
    self._check_resolver_result(foo_res, bar_res)

    (foo_res, bar_res) = registry.resolve(['simple:foo=x;bar=y'])
    self._check_resolver_result(foo_res, bar_res)

    resolver = SimpleResolver(foo='x', bar='y')
    (foo_res, bar_res) = registry.resolve(resolver)
    self._check_resolver_result(foo_res, bar_res)

    (foo_a, bar_b, foo_x,
     bar_y) = registry.resolve(['simple:foo=a;bar=b', resolver])
    self._check_resolver_result(foo_a, bar_b, foo='a', bar='b')
    self._check_resolver_result(foo_x, bar_y)

  def test_simple_resolve_missing_arg(self):
    registry = ResolverRegistry([SimpleResolver])

    (foo_res, bar_res) = registry.resolve('simple:foo=x')
    self._check_resolver_result(foo_res, bar_res, bar=None)

    (foo_res, bar_res) = registry.resolve('simple:')
    self._check_resolver_result(foo_res, bar_res, foo=None, bar=None)

  def test_recursive_resolve(self):
    registry = ResolverRegistry([SimpleResolver])
    registry.register(RecursiveResolver)

    res = registry.resolve('recursive:foo=x;bar=y')
    self.assertEqual(len(res), 6)

    (non_rec_foo, non_rec_bar, rec_foo_str, rec_bar_str, rec_foo_obj,
     rec_bar_obj) = res

    self._check_resolver_result(
        non_rec_foo, non_rec_bar, foo_metadata='foo', bar_metadata='bar')
    self._check_resolver_result(rec_foo_str, rec_bar_str)
    self._check_resolver_result(rec_foo_obj, rec_bar_obj)

  def test_unknown_prefix(self):
    registry = ResolverRegistry([SimpleResolver])
    with self.assertRaises(FtraceVerifierException):
      registry.resolve('lab:run_id=1')

  def test_resolve_one(self):
    registry = ResolverRegistry([SimpleResolver])

    res = registry.resolve_one(io.BytesIO(b'a\nb\n'))
    self.assertEqual(b''.join(res.generator), b'a\nb\n')
    self.assertEqual(res.metadata, {})

    with self.assertRaisesRegex(FtraceVerifierException, 'BatchVerifier'):
      registry.resolve_one('simple:foo=x;bar=y')
    with self.assertRaises(FtraceVerifierException):
      registry.resolve_one([])

  def test_file_like_and_generator(self):
    registry = ResolverRegistry()

    (res,) = registry.resolve(io.StringIO('line\n'))
    self.assertEqual(list(res.generator), ['line\n'])

    gen = (c for c in [b'a', b'b'])
    (res,) = registry.resolve(gen)
    self.assertIs(res.generator, gen)

  def test_path_and_glob(self):
    with tempfile.TemporaryDirectory() as tmp:
      for name, content in (('b.txt', b'bbb'), ('a.txt', b'aaa'),
                            ('c.log', b'ccc')):
        with open(os.path.join(tmp, name), 'wb') as f:
          f.write(content)
      path_a = os.path.join(tmp, 'a.txt')
      path_b = os.path.join(tmp, 'b.txt')

      registry = ResolverRegistry([PathUriResolver, GlobUriResolver])

      (res,) = registry.resolve(path_a)
      self.assertEqual(b''.join(res.generator), b'aaa')
      self.assertEqual(res.metadata, {'path': path_a})

      res = registry.resolve(f'glob:pattern={os.path.join(tmp, "*.txt")}')
      self.assertEqual([r.metadata['path'] for r in res], [path_a, path_b])
      self.assertEqual([b''.join(r.generator) for r in res], [b'aaa', b'bbb'])

      res = registry.resolve(GlobUriResolver(os.path.join(tmp, '*.none')))
      self.assertEqual(res, [])

  def test_parse_trace_uri(self):
    self.assertEqual(parse_trace_uri('/foo/bar'), (None, '/foo/bar'))
    self.assertEqual(parse_trace_uri('foo/bar'), (None, 'foo/bar'))
    self.assertEqual(parse_trace_uri('/foo/b:ar'), (None, '/foo/b:ar'))
    self.assertEqual(parse_trace_uri('./foo/b:ar'), (None, './foo/b:ar'))
    self.assertEqual(parse_trace_uri('foo/b:ar'), ('foo/b', 'ar'))
    self.assertEqual(
        parse_trace_uri('glob:pattern=*.txt'), ('glob', 'pattern=*.txt'))

  def test_args_dict_from_uri(self):
    self.assertEqual(args_dict_from_uri('foo:'), {})
    self.assertEqual(args_dict_from_uri('foo:bar=baz'), {'bar': 'baz'})
    self.assertEqual(args_dict_from_uri('foo:key=v1,v2'), {'key': ['v1', 'v2']})
    self.assertEqual(
        args_dict_from_uri('foo:bar=baz;key=v1,v2'), {
            'bar': 'baz',
            'key': ['v1', 'v2']
        })
    with self.assertRaises(ValueError):
      args_dict_from_uri('foo:=v1')
    with self.assertRaises(ValueError):
      args_dict_from_uri('foo:key')
    with self.assertRaises(ValueError):
      args_dict_from_uri('foo:key=')
    with self.assertRaises(ValueError):
      args_dict_from_uri('foo:key<v1')

  def _check_resolver_result(self,
                             foo_res,
                             bar_res,
                             foo='x',
                             bar='y',
                             foo_metadata=None,
                             bar_metadata=None):
    self.assertEqual(
        tuple(foo_res.generator), (foo.encode() if foo else ''.encode(),))
    self.assertEqual(
        tuple(bar_res.generator), (bar.encode() if bar else ''.encode(),))
    self.assertEqual(
        bar_res.metadata, {
            'foo': foo_metadata if foo_metadata else foo,
            'bar': bar_metadata if bar_metadata else bar
        })


class TestLineGenerator(unittest.TestCase):

  def test_lines_across_chunks(self):
    chunks = [b'first li', b'ne\nsecond\n', b'\nthi', b'rd']
    self.assertEqual(
        list(line_generator(chunks)), ['first line', 'second', '', 'third'])

  def test_crlf(self):
    self.assertEqual(list(line_generator([b'a\r', b'\nb\r\n'])), ['a', 'b'])

  def test_split_multibyte_character(self):
    data = 'B|1|café\n'.encode('utf-8')
    chunks = [data[:8], data[8:]]
    self.assertEqual(list(line_generator(chunks)), ['B|1|café'])

  def test_undecodable_bytes(self):
    self.assertEqual(list(line_generator([b'a\xffb\n'])), ['a\ufffdb'])

  def test_str_chunks(self):
    self.assertEqual(list(line_generator(['a\nb', 'c\n'])), ['a', 'bc'])

  def test_empty(self):
    self.assertEqual(list(line_generator([])), [])
    self.assertEqual(list(line_generator([b''])), [])
