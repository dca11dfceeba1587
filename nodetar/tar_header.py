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
"""Entry framing for a streaming tar archive.

TarStream writes a tar archive into a sink that only needs a write() method.
Each entry is a header, built by tarfile.TarInfo, followed by exactly the
number of body bytes the header declares, padded to the block size. The sink
is written strictly in order and never seeked.
"""

import tarfile
import time

BLOCKSIZE = tarfile.BLOCKSIZE

# Permissions and timestamps are not tracked by the nodes yet.
DIR_MODE = 0o777
FILE_MODE = 0o644
SYMLINK_MODE = 0o777


class Error(Exception):
  pass


class StreamClosedError(Error):
  pass


class WriteTooLongError(Error):
  pass


class MissingBodyError(Error):
  pass


class InvalidSizeError(Error):
  pass


class _EntryInfo(tarfile.TarInfo):
  """A TarInfo writing directory names as given, without a trailing slash."""

  def get_info(self):
    info = super(_EntryInfo, self).get_info()
    info['name'] = self.name
    return info


class TarStream(object):
  """Writes tar entries, one after another, into a binary sink.

  The standard usage is:

  stream = TarStream(sink)
  stream.write_file_header('root/a', 2)
  stream.write(b'hi')
  stream.flush()
  stream.write_symlink_header('root/c', 'a')
  stream.close()

  close() writes the end of archive marker but leaves the sink open.
  """

  def __init__(self, sink, clock=time.time, encoding='utf-8'):
    """Create a stream.

    Args:
      sink: binary file-like object receiving the archive.
      clock: callable returning the current time, used for mtime fields.
      encoding: encoding of the entry names in the headers.
    """
    self.sink = sink
    self.clock = clock
    self.encoding = encoding
    self.offset = 0
    self.closed = False
    # Body bytes still owed by the current entry, then its padding.
    self._remaining = 0
    self._pad = 0

  def write_dir_header(self, path: str):
    info = _EntryInfo(path)
    info.type = tarfile.DIRTYPE
    info.mode = DIR_MODE
    info.mtime = int(self.clock())
    self._write_header(info)

  def write_file_header(self, path: str, size: int):
    """Start a regular file entry.

    The next `size` bytes passed to write() become the file content.

    Raises:
      InvalidSizeError: if size is not a non-negative integer. Nothing is
          written in that case.
    """
    if not isinstance(size, int) or size < 0:
      raise InvalidSizeError('invalid size %r for %s' % (size, path))
    info = _EntryInfo(path)
    info.type = tarfile.REGTYPE
    info.mode = FILE_MODE
    info.size = size
    info.mtime = int(self.clock())
    self._write_header(info)

  def write_symlink_header(self, path: str, target: str):
    info = _EntryInfo(path)
    info.type = tarfile.SYMTYPE
    info.mode = SYMLINK_MODE
    info.linkname = target
    self._write_header(info)

  def _write_header(self, info):
    self._check_open()
    self._finish_entry()
    buf = info.tobuf(tarfile.PAX_FORMAT, self.encoding, 'surrogateescape')
    self._write(buf)
    self._remaining = info.size
    self._pad = -info.size % BLOCKSIZE

  def write(self, data) -> int:
    """Write body bytes of the current entry.

    Raises:
      WriteTooLongError: if data goes past the size declared in the header.
          Nothing is written in that case.
    """
    self._check_open()
    if len(data) > self._remaining:
      raise WriteTooLongError(
          'write of %d bytes exceeds the %d bytes left in the entry' % (
              len(data), self._remaining))
    self._write(data)
    self._remaining -= len(data)
    return len(data)

  def flush(self):
    """Pad the current entry to the block size and flush the sink.

    Raises:
      MissingBodyError: if the entry did not receive all of its bytes.
    """
    self._check_open()
    self._finish_entry()
    if hasattr(self.sink, 'flush'):
      self.sink.flush()

  def close(self):
    """Terminate the archive.

    This object should not be used anymore after calling that method.
    Calling it again does nothing.
    """
    if self.closed:
      return
    self.closed = True
    self._finish_entry()
    # The end of an archive is marked by two zero blocks.
    self._write(tarfile.NUL * (BLOCKSIZE * 2))
    if hasattr(self.sink, 'flush'):
      self.sink.flush()

  def _finish_entry(self):
    if self._remaining:
      raise MissingBodyError('missed writing %d bytes' % self._remaining)
    if self._pad:
      self._write(tarfile.NUL * self._pad)
      self._pad = 0

  def _check_open(self):
    if self.closed:
      raise StreamClosedError('write to closed tar stream')

  def _write(self, data):
    self.sink.write(data)
    self.offset += len(data)
