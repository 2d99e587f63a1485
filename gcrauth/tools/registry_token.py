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

"""This package prints a Docker registry auth entry for a service account.

The output is suitable for merging into ~/.docker/config.json, e.g.
  registry_token --keyfile key.json --registry gcr.io
"""



import argparse
import json
import logging
import sys

from gcrauth import config as gcr_config
from gcrauth.client import context as gcr_context
from gcrauth.client import credential as gcr_credential
from gcrauth.client import credential_store
from gcrauth.client import docker_creds
from gcrauth.client import domain
from gcrauth.client import robot_creds

import httplib2

parser = argparse.ArgumentParser(
    description='Print a Docker registry auth entry for a service account.')

parser.add_argument('--keyfile', action='store',
                    help='The service account JSON key file.')

parser.add_argument('--registry', action='store', default='gcr.io',
                    help='The registry to authenticate against.')

parser.add_argument('--config', action='store',
                    help=('An optional JSON file holding the allowed registry '
                          'hosts, e.g. {"gcrServer": "gcr.io,*.gcr.io"}'))

parser.add_argument('--verbose', action='store_true',
                    help='Log what is going on.')

_CREDENTIALS_ID = 'keyfile'


def main(argv=None):
  args = parser.parse_args(argv)

  logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

  if not args.keyfile:
    raise Exception('--keyfile is a required argument.')

  transport = httplib2.Http()
  config = gcr_config.GlobalConfig(path=args.config)

  robot = robot_creds.FromKeyfile(_CREDENTIALS_ID, args.keyfile, transport)
  store = credential_store.InMemory([robot])
  context = gcr_context.Controller(store, config)

  creds = gcr_credential.GoogleContainerRegistryCredential(
      _CREDENTIALS_ID, context)

  requirements = domain.FromUri('https://' + args.registry)
  if not creds.matches(requirements):
    sys.stderr.write('Registry %s is not one of the allowed hosts: %s\n' % (
        args.registry, config.gcr_server))
    return 1

  token = docker_creds.Convert(creds)

  json.dump({'auths': {args.registry: {
      'auth': token.token,
      'email': token.email,
  }}}, sys.stdout, indent=2)
  sys.stdout.write('\n')
  return 0


if __name__ == '__main__':
  sys.exit(main())
