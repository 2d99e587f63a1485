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

"""This package establishes registry identity for robot credentials.

A Module resolves the username and token for a robot credential.  The plain
Module derives both from the live credential every time it is asked.  Before
a registry credential leaves the controller, its Module is swapped for a
ForRemote module, which carries the identity and a scope restricted copy of
the robot credential captured at that moment.
"""



from gcrauth.client import docker_creds
from gcrauth.client import domain
from gcrauth.client import robot_creds

SCOPE = robot_creds.GCR_SCOPE

_LIVE = 'live'
_REMOTE = 'remote'


def Matches(requirements, gcr_server):
  """Whether a registry credential may be used for the given requirements.

  Args:
    requirements: a list of domain.Requirement.
    gcr_server: the allow-list of registry host patterns, separated by commas
      or whitespace.

  Returns:
    True if the requirements can be satisfied over https against one of the
    allowed hosts.  An allow-list without any pattern allows nothing.
  """
  if not domain.Split(gcr_server):
    return False
  gcr_domain = domain.Domain('GCR', '', [
      domain.SchemeSpecification('https'),
      domain.HostnameSpecification(gcr_server, ''),
  ])
  return gcr_domain.test(requirements)


class Module(object):
  """Derives identity and tokens from live robot credentials."""

  @property
  def requirement(self):
    return SCOPE

  def identity(self, unused_credentials):
    # Google Container Registry always expects this username.
    return docker_creds.USERNAME

  def token(self, credentials):
    """Retrieves an access token for the given robot credentials."""
    if credentials is None:
      return None
    return credentials.access_token(self.requirement)

  def for_remote(self, credentials):
    """Captures a module that no longer needs the credential store.

    Args:
      credentials: the live robot credentials to capture.

    Returns:
      A ForRemote module.

    Raises:
      robot_creds.SecurityConfigurationError: credentials are absent, or
        could not be restricted to our scope.
    """
    if credentials is None:
      raise robot_creds.SecurityConfigurationError(
          'No robot credentials available to capture.')
    return ForRemote(self.identity(credentials),
                     credentials.for_remote(self.requirement))

  def matches(self, requirements, gcr_server):
    return Matches(requirements, gcr_server)

  def to_dict(self):
    return {'kind': _LIVE}


class ForRemote(Module):
  """A module replaying identity and credentials captured on the controller."""

  def __init__(self, identity, credentials):
    self._identity = identity
    self._credentials = credentials

  @property
  def credentials(self):
    return self._credentials

  def identity(self, unused_credentials):
    return self._identity

  def token(self, unused_credentials):
    return super(ForRemote, self).token(self._credentials)

  def for_remote(self, unused_credentials):
    return self

  def to_dict(self):
    return {
        'kind': _REMOTE,
        'identity': self._identity,
        'credentials': self._credentials.to_dict(),
    }


def FromDict(data):
  """Restores a module from its to_dict() form."""
  kind = data.get('kind')
  if kind == _LIVE:
    return Module()
  if kind == _REMOTE:
    return ForRemote(data['identity'],
                     robot_creds.FromDict(data['credentials']))
  raise ValueError('Unknown credential module kind: %s' % kind)
