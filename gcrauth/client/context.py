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

"""This package describes where registry credentials are being used.

The controller owns the credential store and may derive fresh tokens at will.
Agents only ever see credentials that were snapshotted for them before they
were sent over, and have no store to consult.
"""



from gcrauth import config as gcr_config

# Passed by trusted callers of the credential provider.
SYSTEM = 'SYSTEM'


class Controller(object):
  """The privileged context holding the credential store."""

  is_controller = True

  def __init__(self, store, config=None):
    self._store = store
    self._config = config or gcr_config.GlobalConfig()

  @property
  def store(self):
    return self._store

  @property
  def config(self):
    return self._config

  def lookup(self, credentials_id):
    return self._store.get(credentials_id)


class Agent(object):
  """A remote context, without access to any credential store."""

  is_controller = False

  def __init__(self, config=None):
    self._config = config or gcr_config.GlobalConfig()

  @property
  def store(self):
    return None

  @property
  def config(self):
    return self._config

  def lookup(self, unused_credentials_id):
    return None
