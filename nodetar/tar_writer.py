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
"""Writes a tree of nodes into a tar archive."""

import logging
import time

from nodetar import nodes
from nodetar import tar_header
from nodetar import tracing

logger = logging.getLogger(__name__)

COPY_BUFSIZE = 32 * 1024


class UnsupportedNodeError(tar_header.Error):
  pass


class WalkCancelledError(tar_header.Error):
  pass


class TarWriter(object):
  """A depth first writer of node trees.

  The standard usage is:

  with TarWriter(sink) as w:
    w.write_node(root, 'root')

  Every error aborts the walk and is raised as is. The entries written before
  the error stay in the sink: a caller getting an exception must treat the
  archive as incomplete.
  """

  def __init__(self,
               sink,
               copy_bufsize=COPY_BUFSIZE,
               tracer=None,
               clock=time.time):
    """Create a writer.

    You must close() after use or use in a 'with' statement. Closing the
    writer terminates the archive, it does not close the sink.

    Args:
      sink: binary file-like object to write the archive to.
      copy_bufsize: the largest chunk read from a file at once.
      tracer: a tracing.Tracer notified around every node.
      clock: callable returning the time stamped on entries.
    """
    self.stream = tar_header.TarStream(sink, clock=clock)
    self.copy_bufsize = copy_bufsize
    self.tracer = tracer or tracing.Tracer()
    # Path of the node that aborted the last write_node call, if any.
    self.failed_path = None

  def __enter__(self):
    return self

  def __exit__(self, t, v, traceback):
    if t is None:
      self.close()
      return
    # Keep the walk error: an archive cut in the middle of an entry can not
    # be terminated.
    try:
      self.close()
    except (tar_header.Error, OSError) as e:
      logger.debug('could not terminate archive after %r: %r', v, e)

  def close(self):
    """Write the end of archive marker. Later calls do nothing."""
    self.stream.close()

  def write_node(self, node, path: str, cancel=None):
    """Add a node, and everything below it, to the archive.

    Args:
      node: a nodes.Node.
      path: the path of the node in the archive. Children are written as
          path + '/' + name.
      cancel: optional threading.Event. Once it is set the walk stops before
          the next node.

    Raises:
      UnsupportedNodeError: if a node is not a File, Directory or Symlink.
      WalkCancelledError: if `cancel` was set.
    """
    self.failed_path = None
    self._write_node(node, path, cancel)

  def _write_node(self, node, path, cancel):
    if cancel is not None and cancel.is_set():
      raise WalkCancelledError('tar write cancelled before %s' % path)

    kind = nodes.node_kind(node)
    tracing.notify(self.tracer.on_enter, path, kind or type(node).__name__)
    try:
      if kind == nodes.KIND_SYMLINK:
        self.stream.write_symlink_header(path, node.target)
      elif kind == nodes.KIND_FILE:
        self._write_file(node, path)
      elif kind == nodes.KIND_DIRECTORY:
        self._write_dir(node, path, cancel)
      else:
        raise UnsupportedNodeError('file type %s is not supported: %s' % (
            type(node).__name__, path))
    except BaseException as e:
      if self.failed_path is None:
        self.failed_path = path
        logger.debug('tar write aborted at %s: %r', path, e)
      tracing.notify(self.tracer.on_exit, path, e)
      raise
    tracing.notify(self.tracer.on_exit, path, None)

  def _write_file(self, f, path):
    size = f.size()
    self.stream.write_file_header(path, size)
    logger.debug('file %s (%d bytes)', path, size)
    while True:
      buf = f.read(self.copy_bufsize)
      if not buf:
        break
      self.stream.write(buf)
    self.stream.flush()

  def _write_dir(self, d, path, cancel):
    self.stream.write_dir_header(path)
    logger.debug('directory %s', path)
    for name, child in d.entries():
      self._write_node(child, path + '/' + name, cancel)


def write_tar(node, path: str, sink, cancel=None, **kwargs):
  """Write a complete archive of `node` into `sink`.

  The archive is terminated whether or not the walk succeeds. Keyword
  arguments are passed to TarWriter.
  """
  with TarWriter(sink, **kwargs) as w:
    w.write_node(node, path, cancel=cancel)
