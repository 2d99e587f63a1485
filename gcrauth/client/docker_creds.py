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

"""This package exposes credentials for talking to a Docker registry."""



import abc
import base64
import collections


USERNAME = '_token'

# Google Container Registry ignores the email, but the Docker token format
# requires one.
EMAIL = 'not@val.id'


class AuthenticationTokenError(Exception):
  """Exception raised when a credential cannot be turned into a token."""


class Provider(metaclass=abc.ABCMeta):
  """Interface for providing User Credentials for use with a Docker Registry."""

  @abc.abstractmethod
  def Get(self):
    """Produces a value suitable for use in the Authorization header."""


class SchemeProvider(Provider):
  """Implementation for providing a challenge response credential."""

  def __init__(self, scheme):
    self._scheme = scheme

  @property
  @abc.abstractmethod
  def suffix(self):
    """Returns the authentication payload to follow the auth scheme."""

  def Get(self):
    """Gets the credential in a form suitable for an Authorization header."""
    return '%s %s' % (self._scheme, self.suffix)


class Basic(SchemeProvider):
  """Implementation for providing a username/password-based creds."""

  def __init__(self, username, password):
    super(Basic, self).__init__('Basic')
    self._username = username
    self._password = password

  @property
  def username(self):
    return self._username

  @property
  def password(self):
    return self._password

  @property
  def suffix(self):
    plain = (self.username + ':' + self.password).encode('utf-8')
    return base64.b64encode(plain).decode('ascii')


# The value handed to Docker-registry-aware consumers.
RegistryToken = collections.namedtuple('RegistryToken', ['email', 'token'])


def Convert(credential):
  """Converts a registry credential into a RegistryToken.

  Args:
    credential: a credential exposing 'email', 'username' and 'password'.

  Returns:
    A RegistryToken whose token is the base64 of "<username>:<password>".

  Raises:
    AuthenticationTokenError: the credential did not produce a password.
  """
  password = credential.password
  if password is None:
    raise AuthenticationTokenError(
        'No access token available for credential: %s' % credential.id)
  basic = Basic(credential.username, password)
  return RegistryToken(credential.email, basic.suffix)
