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
"""Nodes backed by the local filesystem.

Symlinks are never followed. Directory entries are listed in name order and
files are only opened when their content is first read.
"""

import os
import stat

from nodetar import nodes


class FsFile(nodes.File):
  """A regular file on disk.

  The file is opened on the first read and closed as soon as size() bytes
  have been read, even if it grew since it was listed. In that case the next
  byte is returned so the writer sees a stream longer than the declared size.
  """

  def __init__(self, path: str, st: os.stat_result = None):
    self.path = path
    self._stat = st
    self._f = None
    self._offset = 0
    self._eof = False

  def __enter__(self):
    return self

  def __exit__(self, t, v, traceback):
    self.close()

  def __del__(self):
    self.close()

  def size(self) -> int:
    if self._stat is None:
      self._stat = os.lstat(self.path)
    return self._stat.st_size

  def read(self, n: int = -1) -> bytes:
    if self._eof:
      return b''
    if self._f is None:
      self._f = open(self.path, 'rb')
    left = self.size() - self._offset
    if left <= 0:
      data = self._f.read(1)
      self.close()
      return data
    data = self._f.read(left if n < 0 else min(n, left))
    self._offset += len(data)
    if not data:
      self.close()
    return data

  def close(self):
    self._eof = True
    if self._f is not None:
      self._f.close()
      self._f = None


class FsDirectory(nodes.Directory):
  """A directory on disk."""

  def __init__(self, path: str):
    self.path = path

  def entries(self):
    with os.scandir(self.path) as it:
      names = sorted(entry.name for entry in it)
    for name in names:
      yield name, from_path(os.path.join(self.path, name))


class UnsupportedFsNode(nodes.Node):
  """A fifo, socket or device. The writer refuses these."""

  def __init__(self, path: str, mode: int):
    self.path = path
    self.mode = mode

  def __repr__(self):
    return 'UnsupportedFsNode(%r, mode=%o)' % (self.path, self.mode)


def from_path(path: str):
  """Return the node for `path`, without following a final symlink."""
  st = os.lstat(path)
  if stat.S_ISLNK(st.st_mode):
    return nodes.Symlink(os.readlink(path))
  if stat.S_ISDIR(st.st_mode):
    return FsDirectory(path)
  if stat.S_ISREG(st.st_mode):
    return FsFile(path, st)
  return UnsupportedFsNode(path, st.st_mode)
