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

"""This package holds upstream robot credentials, looked up by id."""



import abc
import collections


class Store(metaclass=abc.ABCMeta):
  """Interface for looking up upstream credentials."""

  @abc.abstractmethod
  def get(self, credentials_id):
    """Returns the credentials with the given id, or None."""

  @abc.abstractmethod
  def all(self, requirement=None):
    """Returns the credentials in the store.

    Args:
      requirement: an optional robot_creds.ScopeRequirement; when given only
        credentials that support it are returned.
    """


class InMemory(Store):
  """A Store backed by an ordered dict."""

  def __init__(self, credentials=None):
    self._credentials = collections.OrderedDict()
    for creds in credentials or []:
      self.add(creds)

  def add(self, credentials):
    self._credentials[credentials.id] = credentials

  def remove(self, credentials_id):
    self._credentials.pop(credentials_id, None)

  def get(self, credentials_id):
    return self._credentials.get(credentials_id)

  def all(self, requirement=None):
    if requirement is None:
      return list(self._credentials.values())
    return [c for c in self._credentials.values()
            if hasattr(c, 'supports') and c.supports(requirement)]
