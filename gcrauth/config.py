# Copyright 2017 Google Inc. All Rights Reserved.
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

"""This package persists the registry hosts our credentials may be used for."""



import json
import logging
import os

from gcrauth.client import domain

_LOG = logging.getLogger(__name__)

DEFAULT_GCR_SERVER = 'gcr.io,*.gcr.io'

_GCR_SERVER_KEY = 'gcrServer'


def _read(path):
  if not path or not os.path.exists(path):
    return {}
  with open(path) as f:
    return json.load(f)


class GlobalConfig(object):
  """The process wide allow-list of registry hosts.

  The allow-list is a list of host patterns separated by commas or
  whitespace, where '*' matches any run of characters.  It is stored as a
  small JSON document at path.  Older installations kept the same setting in
  a separate file at legacy_path; when that file carries a value it takes
  precedence, and it is removed the next time the configuration is saved.
  """

  def __init__(self, path=None, legacy_path=None):
    self._path = path
    self._legacy_path = legacy_path
    self._gcr_server = None

    legacy = _read(legacy_path).get(_GCR_SERVER_KEY)
    if domain.Split(legacy):
      _LOG.info('Migrating registry allow-list from %s', legacy_path)
      self._gcr_server = legacy
    else:
      self.load()

  @property
  def path(self):
    return self._path

  @property
  def gcr_server(self):
    """The allow-list, or the default when no pattern is configured."""
    if domain.Split(self._gcr_server):
      return self._gcr_server
    return DEFAULT_GCR_SERVER

  def load(self):
    self._gcr_server = _read(self._path).get(_GCR_SERVER_KEY)

  def save(self):
    if not self._path:
      return
    with open(self._path, 'w') as f:
      json.dump({_GCR_SERVER_KEY: self._gcr_server}, f)

  def configure(self, form):
    """Applies an administrative update to the allow-list.

    Args:
      form: a dict, whose optional 'gcrServer' entry is the new allow-list.
        A missing or empty entry restores the default.
    """
    self._gcr_server = form.get(_GCR_SERVER_KEY) or None
    self.save()
    if self._legacy_path and os.path.exists(self._legacy_path):
      os.remove(self._legacy_path)
    return True
