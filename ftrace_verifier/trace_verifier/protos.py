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

from google.protobuf import descriptor_pb2
from google.protobuf import message_factory
from google.protobuf.descriptor_pool import DescriptorPool

PACKAGE = 'ftrace_verifier.protos'

_Field = descriptor_pb2.FieldDescriptorProto


def _add_field(message: descriptor_pb2.DescriptorProto,
               name: str,
               number: int,
               field_type: int,
               label: int = _Field.LABEL_OPTIONAL,
               type_name: str = None):
  field = message.field.add()
  field.name = name
  field.number = number
  field.type = field_type
  field.label = label
  if type_name:
    field.type_name = type_name


def report_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
  """Describes the messages used to export verdicts.

  message VerificationReport {
    message Metadata {
      optional string key = 1;
      optional string value = 2;
    }
    optional bool passed = 1;
    optional string subject_suffix = 2;
    repeated string required_sections = 3;
    optional int64 match_count = 4;
    optional int32 matched_sections = 5;
    optional int64 subject_process_id = 6;
    optional string failure = 7;
    optional string message = 8;
    repeated Metadata metadata = 9;
    optional int64 lines = 10;
    optional int64 unparsed_lines = 11;
  }

  message VerificationReportSet {
    repeated VerificationReport report = 1;
  }
  """
  file_desc = descriptor_pb2.FileDescriptorProto()
  file_desc.name = 'ftrace_verifier/verification_report.proto'
  file_desc.package = PACKAGE
  file_desc.syntax = 'proto2'

  report = file_desc.message_type.add()
  report.name = 'VerificationReport'
  metadata = report.nested_type.add()
  metadata.name = 'Metadata'
  _add_field(metadata, 'key', 1, _Field.TYPE_STRING)
  _add_field(metadata, 'value', 2, _Field.TYPE_STRING)

  _add_field(report, 'passed', 1, _Field.TYPE_BOOL)
  _add_field(report, 'subject_suffix', 2, _Field.TYPE_STRING)
  _add_field(report, 'required_sections', 3, _Field.TYPE_STRING,
             _Field.LABEL_REPEATED)
  _add_field(report, 'match_count', 4, _Field.TYPE_INT64)
  _add_field(report, 'matched_sections', 5, _Field.TYPE_INT32)
  _add_field(report, 'subject_process_id', 6, _Field.TYPE_INT64)
  _add_field(report, 'failure', 7, _Field.TYPE_STRING)
  _add_field(report, 'message', 8, _Field.TYPE_STRING)
  _add_field(report, 'metadata', 9, _Field.TYPE_MESSAGE, _Field.LABEL_REPEATED,
             f'.{PACKAGE}.VerificationReport.Metadata')
  _add_field(report, 'lines', 10, _Field.TYPE_INT64)
  _add_field(report, 'unparsed_lines', 11, _Field.TYPE_INT64)

  report_set = file_desc.message_type.add()
  report_set.name = 'VerificationReportSet'
  _add_field(report_set, 'report', 1, _Field.TYPE_MESSAGE,
             _Field.LABEL_REPEATED, f'.{PACKAGE}.VerificationReport')
  return file_desc


class ProtoFactory:

  def __init__(self):
    self.descriptor_pool = DescriptorPool()
    self.descriptor_pool.AddSerializedFile(
        report_file_descriptor().SerializeToString())

    def create_message_factory(message_type):
      message_desc = self.descriptor_pool.FindMessageTypeByName(message_type)
      if hasattr(message_factory, 'GetMessageClass'):
        return message_factory.GetMessageClass(message_desc)
      # Older protobuf releases only have the MessageFactory API.
      return message_factory.MessageFactory().GetPrototype(message_desc)

    self.VerificationReport = create_message_factory(
        f'{PACKAGE}.VerificationReport')
    self.VerificationReportSet = create_message_factory(
        f'{PACKAGE}.VerificationReportSet')
