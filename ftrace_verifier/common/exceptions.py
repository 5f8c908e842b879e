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


class FtraceVerifierException(Exception):
  pass


class VerificationFailure(FtraceVerifierException):
  """Raised when a trace does not satisfy the expected structure.

  |verdict| is the Verdict describing the failure when one is available
  (e.g. it is None for failures raised while checking atrace output
  rather than a trace).
  """

  def __init__(self, message: str, verdict=None):
    super().__init__(message)
    self.verdict = verdict


class NoRelevantEventsFailure(VerificationFailure):
  pass


class SectionOrderFailure(VerificationFailure):
  pass


class ProcessIdMismatchFailure(VerificationFailure):
  pass


class InvalidThreadIdFailure(VerificationFailure):
  pass


class CaptureOutputFailure(VerificationFailure):
  pass


class MissingCategoriesFailure(VerificationFailure):

  def __init__(self, message: str, missing):
    super().__init__(message)
    self.missing = missing
