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
"""Node types for the trees that can be written to an archive.

A tree is made of three kinds of nodes:

  File       exposes a declared size and a readable byte stream.
  Directory  exposes an ordered iterator of (name, node) pairs.
  Symlink    carries the link target.

Nodes carry no name of their own. The writer assigns each one a path while it
walks the tree.
"""

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass

KIND_FILE = 'file'
KIND_DIRECTORY = 'directory'
KIND_SYMLINK = 'symlink'


class Node(ABC):
  """Base class for every tree element."""


class File(Node):
  """A regular file."""

  @abstractmethod
  def size(self) -> int:
    """Return the exact number of bytes read() will produce."""

  @abstractmethod
  def read(self, n: int = -1) -> bytes:
    """Return up to n bytes, or b'' at the end of the content."""


class Directory(Node):
  """A directory."""

  @abstractmethod
  def entries(self):
    """Return an iterator of (name, node) pairs.

    The order of the pairs is the order of the entries in the archive. An
    iteration failure is reported by raising from the iterator.
    """


@dataclass
class Symlink(Node):
  """A symbolic link pointing to `target`."""
  target: str


class BytesFile(File):
  """A file whose content is held in memory."""

  def __init__(self, data: bytes):
    self._size = len(data)
    self._stream = io.BytesIO(data)

  def size(self) -> int:
    return self._size

  def read(self, n: int = -1) -> bytes:
    return self._stream.read(n)


class StreamFile(File):
  """A file backed by a caller supplied stream.

  The declared size is trusted: the writer fails if the stream turns out to
  be shorter or longer.
  """

  def __init__(self, stream, size: int):
    self._stream = stream
    self._size = size

  def size(self) -> int:
    return self._size

  def read(self, n: int = -1) -> bytes:
    return self._stream.read(n)


class MapDirectory(Directory):
  """A directory listing a fixed set of children.

  Args:
    entries: a mapping of name to node, or a sequence of (name, node) pairs.
        The order given is kept.
  """

  def __init__(self, entries=None):
    if entries is None:
      entries = []
    elif hasattr(entries, 'items'):
      entries = list(entries.items())
    self._entries = list(entries)

  def entries(self):
    return iter(self._entries)


def node_kind(node):
  """Return the kind of `node`, or None if it is not a supported node."""
  if isinstance(node, Symlink):
    return KIND_SYMLINK
  if isinstance(node, File):
    return KIND_FILE
  if isinstance(node, Directory):
    return KIND_DIRECTORY
  return None
