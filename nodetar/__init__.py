# Copyright 2026 The Bazel Authors. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Streaming export of file trees to tar archives."""

from nodetar.nodes import BytesFile, Directory, File, MapDirectory, Node, StreamFile, Symlink
from nodetar.tar_header import Error, InvalidSizeError, MissingBodyError, StreamClosedError, TarStream, WriteTooLongError
from nodetar.tar_writer import TarWriter, UnsupportedNodeError, WalkCancelledError, write_tar
from nodetar.tracing import LoggingTracer, Tracer
