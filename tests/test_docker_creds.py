"""Tests for gcrauth.client.docker_creds."""

import base64

from gcrauth.client import credential as gcr_credential
from gcrauth.client import credential_store
from gcrauth.client import context as gcr_context
from gcrauth.client import docker_creds
import pytest
from tests.conftest import CREDENTIALS_ID
from tests.conftest import TOKEN


def test_basic_suffix():
  basic = docker_creds.Basic('user', 'pass')
  assert basic.suffix == base64.b64encode(b'user:pass').decode('ascii')
  assert basic.Get() == 'Basic ' + basic.suffix


def test_basic_suffix_is_utf8():
  basic = docker_creds.Basic('_token', 'päss')
  assert base64.b64decode(basic.suffix) == '_token:päss'.encode('utf-8')


def test_convert(controller):
  creds = gcr_credential.GoogleContainerRegistryCredential(
      CREDENTIALS_ID, controller)

  token = docker_creds.Convert(creds)

  assert token.email == 'not@val.id'
  plain = ('_token:' + TOKEN).encode('utf-8')
  assert token.token == base64.b64encode(plain).decode('ascii')


def test_convert_missing_robot_credentials():
  context = gcr_context.Controller(credential_store.InMemory())
  creds = gcr_credential.GoogleContainerRegistryCredential(
      CREDENTIALS_ID, context)

  with pytest.raises(docker_creds.AuthenticationTokenError):
    docker_creds.Convert(creds)
