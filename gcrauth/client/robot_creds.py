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

"""This package wraps Google service account (robot) credentials.

These are the upstream credentials a registry credential proxies for.  They
come in two flavors: GoogleRobotCredentials, which hold key material and can
mint tokens for any scope, and RemotableRobotCredentials, which only hold an
access token already minted for a single scope and are therefore safe to hand
to less trusted processes.
"""



import abc
import json
import logging

from oauth2client import client as oauth2client
from oauth2client import service_account

_LOG = logging.getLogger(__name__)

USER_AGENT = 'gcrauth/robot-credentials'


class SecurityConfigurationError(Exception):
  """Exception raised when a credential cannot be narrowed to a scope."""


class ScopeRequirement(object):
  """The OAuth2 scopes an access token must carry."""

  def __init__(self, scopes):
    self._scopes = tuple(scopes)

  @property
  def scopes(self):
    return list(self._scopes)

  def __eq__(self, other):
    return isinstance(other, ScopeRequirement) and self._scopes == other._scopes

  def __ne__(self, other):
    return not self.__eq__(other)

  def __hash__(self):
    return hash(self._scopes)

  def __repr__(self):
    return 'ScopeRequirement(%r)' % (self.scopes,)


GCR_SCOPE = ScopeRequirement(
    ['https://www.googleapis.com/auth/devstorage.read_write'])


class RobotCredentials(metaclass=abc.ABCMeta):
  """Interface for upstream OAuth2-capable credentials."""

  def __init__(self, credentials_id, name=None, scopes=None):
    self._id = credentials_id
    self._name = name
    self._scopes = None if scopes is None else frozenset(scopes)

  @property
  def id(self):
    return self._id

  @property
  def name(self):
    """A human readable name, defaulting to the id."""
    return self._name or self._id

  @property
  def scopes(self):
    """The scopes these credentials may be used for, None for any scope."""
    return None if self._scopes is None else sorted(self._scopes)

  def supports(self, requirement):
    """Whether these credentials may mint tokens for the ScopeRequirement."""
    if self._scopes is None:
      return True
    return set(requirement.scopes) <= self._scopes

  @abc.abstractmethod
  def access_token(self, requirement):
    """Retrieves an access token for the given ScopeRequirement."""

  @abc.abstractmethod
  def for_remote(self, requirement):
    """Produces a copy of these credentials restricted to requirement.

    Raises:
      SecurityConfigurationError: no restricted copy could be produced.
    """

  @abc.abstractmethod
  def to_dict(self):
    """The JSON-serializable form of these credentials."""


class GoogleRobotCredentials(RobotCredentials):
  """Robot credentials backed by an oauth2client credential."""

  def __init__(self, credentials_id, creds, transport, name=None,
               scopes=None):
    """Constructor.

    Args:
      credentials_id: the stable id of these credentials in their store.
      creds: the oauth2client credentials from which to retrieve tokens.
      transport: the http transport to use for token exchanges.
      name: an optional human readable name.
      scopes: the scopes these credentials may be used for, or None for any.
    """
    super(GoogleRobotCredentials, self).__init__(credentials_id, name, scopes)
    self._creds = creds
    self._transport = transport

  def _scoped(self, requirement):
    if self._creds.create_scoped_required():
      return self._creds.create_scoped(requirement.scopes)
    return self._creds

  def access_token(self, requirement):
    return self._scoped(requirement).get_access_token(
        http=self._transport).access_token

  def for_remote(self, requirement):
    if not self.supports(requirement):
      raise SecurityConfigurationError(
          'Credential %s may not be used for %s' % (
              self.id, requirement.scopes))
    try:
      info = self._scoped(requirement).get_access_token(http=self._transport)
    except (oauth2client.Error, ValueError) as e:
      raise SecurityConfigurationError(
          'Unable to scope credential %s to %s: %s' % (
              self.id, requirement.scopes, e))
    _LOG.debug('Minted a remotable access token for credential %s', self.id)
    return RemotableRobotCredentials(
        self.id,
        oauth2client.AccessTokenCredentials(info.access_token, USER_AGENT),
        name=self._name, scopes=requirement.scopes)

  def to_dict(self):
    raise SecurityConfigurationError(
        'Credential %s holds key material and may not be serialized, '
        'use for_remote() first.' % self.id)


class RemotableRobotCredentials(RobotCredentials):
  """Robot credentials carrying only an already scoped access token."""

  def __init__(self, credentials_id, creds, name=None, scopes=None):
    super(RemotableRobotCredentials, self).__init__(
        credentials_id, name, scopes)
    self._creds = creds

  def access_token(self, requirement):
    # The token was minted for a single scope, and that is all we can offer.
    return self._creds.get_access_token().access_token

  def for_remote(self, requirement):
    return self

  def to_dict(self):
    return {
        'id': self.id,
        'name': self._name,
        'scopes': self.scopes,
        'credentials': json.loads(self._creds.to_json()),
    }


def FromDict(data):
  """Restores RemotableRobotCredentials from their to_dict() form."""
  creds = oauth2client.Credentials.new_from_json(
      json.dumps(data['credentials']))
  return RemotableRobotCredentials(data['id'], creds, name=data.get('name'),
                                   scopes=data.get('scopes'))


def FromKeyfile(credentials_id, keyfile, transport):
  """Loads GoogleRobotCredentials from a service account JSON key file.

  Raises:
    SecurityConfigurationError: the key file could not be loaded.
  """
  try:
    creds = service_account.ServiceAccountCredentials.from_json_keyfile_name(
        keyfile)
  except (KeyError, ValueError) as e:
    raise SecurityConfigurationError(
        'Invalid service account key %s: %s' % (keyfile, e))
  return GoogleRobotCredentials(
      credentials_id, creds, transport, name=creds.service_account_email)
