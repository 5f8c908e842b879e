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

from .output import CAPTURE_HEADER
from .output import REQUIRED_CATEGORIES
from .output import TRACE_MARKER
from .output import check_capture_header
from .output import check_categories
from .output import extract_trace_data
from .output import missing_categories
from .output import parse_category_list
from .output import split_lines
from .output import strip_capture_preamble
