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

from .event import NO_PROCESS_ID
from .event import TraceEvent
from .event import events_as_pandas_dataframe
from .grammar import GRAMMARS
from .grammar import LineGrammar
from .parser import ParseStats
from .parser import match_line
from .parser import parse_events
from .parser import parse_line
from .parser import parse_stream
