"""Shared pytest fixtures for the gcrauth tests."""

from unittest import mock

from gcrauth.client import context as gcr_context
from gcrauth.client import credential_store
from gcrauth.client import robot_creds
from oauth2client import client as oauth2client
import pytest

CREDENTIALS_ID = 'foobar-cred-id'
NAME = 'foo-bar Container Registry Account'
TOKEN = 'abc123'


@pytest.fixture
def oauth():
  """An oauth2client credential that hands out TOKEN without any network."""
  creds = mock.MagicMock()
  creds.create_scoped_required.return_value = False
  creds.get_access_token.return_value = oauth2client.AccessTokenInfo(
      TOKEN, 3600)
  return creds


@pytest.fixture
def robot(oauth):
  return robot_creds.GoogleRobotCredentials(
      CREDENTIALS_ID, oauth, mock.sentinel.transport, name=NAME)


@pytest.fixture
def store(robot):
  return credential_store.InMemory([robot])


@pytest.fixture
def controller(store):
  return gcr_context.Controller(store)


@pytest.fixture
def agent():
  return gcr_context.Agent()
