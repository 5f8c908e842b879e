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

from ftrace_verifier.trace_uri_resolver.path import GlobUriResolver
from ftrace_verifier.trace_uri_resolver.path import PathUriResolver
from ftrace_verifier.trace_uri_resolver.registry import ResolverRegistry


class PlatformDelegate:
  """Abstracts operations which can vary based on platform."""

  def default_resolver_registry(self) -> ResolverRegistry:
    return ResolverRegistry(resolvers=[PathUriResolver, GlobUriResolver])
