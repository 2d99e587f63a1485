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

"""This package exposes robot credentials as registry username/passwords.

Google Container Registry accepts a username/password combination that is
truly "_token:<oauth_token>".  GoogleContainerRegistryCredential wraps a robot
credential to provide it in this manner.
"""



import json
import logging

from gcrauth.client import docker_creds
from gcrauth.client import module as gcr_module
from gcrauth.client import robot_creds

_LOG = logging.getLogger(__name__)

_ID_PREFIX = 'gcr:'


class SerializationError(IOError):
  """Exception raised when a credential cannot be written for transmission."""


class GoogleContainerRegistryCredential(object):
  """A username/password credential proxying for robot credentials."""

  def __init__(self, credentials_id, context, module=None):
    """Constructor.

    Args:
      credentials_id: the id of the wrapped robot credentials.
      context: the context.Controller or context.Agent we execute in.
      module: the module establishing identity, a fresh Module by default.
    """
    if not credentials_id:
      raise ValueError('A robot credentials id must be specified')
    self._credentials_id = credentials_id
    self._context = context
    self._module = module or gcr_module.Module()

  @property
  def id(self):
    return _ID_PREFIX + self._credentials_id

  @property
  def credentials_id(self):
    return self._credentials_id

  @property
  def module(self):
    return self._module

  @property
  def email(self):
    return docker_creds.EMAIL

  @property
  def credentials(self):
    """The wrapped robot credentials, only available on the controller."""
    if not self._context.is_controller:
      return None
    return self._context.lookup(self._credentials_id)

  @property
  def description(self):
    creds = self.credentials
    return creds.name if creds is not None else self._credentials_id

  @property
  def display_name(self):
    return '%s (Google Container Registry)' % self.description

  @property
  def username(self):
    return self._module.identity(self.credentials)

  @property
  def password(self):
    return self._module.token(self.credentials)

  def matches(self, requirements):
    """This credential only authenticates against the allowed registries."""
    return self._module.matches(requirements,
                                self._context.config.gcr_server)

  def serialize(self):
    """Writes this credential out for another process or for disk.

    The written form always carries a module tailored to this credential, in
    case it is read by an agent.  The controller ignores it when reading.

    Returns:
      The JSON serialized credential.

    Raises:
      SerializationError: the robot credentials could not be captured.
    """
    try:
      remote = self._module.for_remote(self.credentials)
    except robot_creds.SecurityConfigurationError as e:
      raise SerializationError('Unable to serialize %s: %s' % (self.id, e))
    return json.dumps({
        'credentialsId': self._credentials_id,
        'module': remote.to_dict(),
    }, sort_keys=True)


def Deserialize(data, context):
  """Reads a credential written by serialize().

  Args:
    data: the JSON serialized credential.
    context: the context we are reading the credential in.

  Returns:
    A GoogleContainerRegistryCredential.  On the controller its module is
    always a fresh Module; elsewhere it is the module that was written.
  """
  parsed = json.loads(data)
  if context.is_controller:
    _LOG.debug('Discarding transmitted module for %s on the controller',
               parsed['credentialsId'])
    module = gcr_module.Module()
  else:
    module = gcr_module.FromDict(parsed['module'])
  return GoogleContainerRegistryCredential(
      parsed['credentialsId'], context, module=module)
