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
"""Observers notified around every node the writer visits."""

import logging

logger = logging.getLogger(__name__)


class Tracer(object):
  """Does nothing. Subclass and override the hooks you need."""

  def on_enter(self, path: str, kind: str):
    """Called before the node at `path` is written.

    Args:
      path: the path of the node in the archive.
      kind: 'file', 'directory', 'symlink', or the type name of a node the
          writer does not support.
    """

  def on_exit(self, path: str, err):
    """Called once the node at `path` is done; err is the exception or None."""


class LoggingTracer(Tracer):
  """Logs each visit."""

  def __init__(self, log=None, level=logging.DEBUG):
    self.log = log or logger
    self.level = level

  def on_enter(self, path, kind):
    self.log.log(self.level, 'tar write %s: %s', kind, path)

  def on_exit(self, path, err):
    if err is None:
      self.log.log(self.level, 'tar wrote %s', path)
    else:
      self.log.log(self.level, 'tar write of %s failed: %r', path, err)


def notify(hook, *args):
  """Call a tracer hook. A failing tracer is logged and otherwise ignored."""
  try:
    hook(*args)
  except Exception:  # pylint: disable=broad-except
    logger.exception('tracer hook %s failed', getattr(hook, '__name__', hook))
