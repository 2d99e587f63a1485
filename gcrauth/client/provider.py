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

"""This package offers robot credentials as registry credentials.

Every robot credential in the controller's store is wrapped into a
GoogleContainerRegistryCredential, so that a robot credential can be reused
for Google Container Registry access by Docker-registry-aware consumers.
"""



import logging

from gcrauth.client import context as gcr_context
from gcrauth.client import credential as gcr_credential
from gcrauth.client import module as gcr_module
from gcrauth.client import robot_creds

_LOG = logging.getLogger(__name__)


class CredentialProvider(object):
  """Enumerates registry credentials derived from robot credentials."""

  def __init__(self, context):
    self._context = context

  def get_credentials(self, requirements=None,
                      authentication=gcr_context.SYSTEM):
    """Lists the registry credentials usable for the given requirements.

    Args:
      requirements: a list of domain.Requirement, empty admits everything.
      authentication: who is asking, only SYSTEM is offered credentials.

    Returns:
      A list of GoogleContainerRegistryCredential.
    """
    if authentication != gcr_context.SYSTEM:
      _LOG.warning('Refusing registry credentials to %s', authentication)
      return []

    if not self._context.is_controller:
      return []

    # Don't even suggest these credentials where they are not plausibly
    # appropriate.
    if not gcr_module.Matches(requirements or [],
                              self._context.config.gcr_server):
      return []

    # Nor lift robot credentials that may not be used for registry access.
    return [
        gcr_credential.GoogleContainerRegistryCredential(
            creds.id, self._context, module=gcr_module.Module())
        for creds in self._context.store.all(gcr_module.SCOPE)
        if isinstance(creds, robot_creds.RobotCredentials)
    ]

  def get(self, credential_id, requirements=None):
    """Finds a registry credential by its id (e.g. 'gcr:<robot id>')."""
    for creds in self.get_credentials(requirements):
      if creds.id == credential_id:
        return creds
    return None
