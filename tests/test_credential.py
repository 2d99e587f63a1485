"""Tests for gcrauth.client.credential."""

import json
from unittest import mock

from gcrauth import config as gcr_config
from gcrauth.client import context as gcr_context
from gcrauth.client import credential as gcr_credential
from gcrauth.client import credential_store
from gcrauth.client import domain
from gcrauth.client import module as gcr_module
from oauth2client import client as oauth2client
import pytest
from tests.conftest import CREDENTIALS_ID
from tests.conftest import NAME
from tests.conftest import TOKEN

USERNAME = '_token'


def _credential(context, module=None):
  return gcr_credential.GoogleContainerRegistryCredential(
      CREDENTIALS_ID, context, module=module)


class TestCredential(object):

  def test_ids(self, controller):
    creds = _credential(controller)
    assert creds.id == 'gcr:' + CREDENTIALS_ID
    assert creds.credentials_id == CREDENTIALS_ID
    assert creds.email == 'not@val.id'

  def test_requires_id(self, controller):
    with pytest.raises(ValueError):
      gcr_credential.GoogleContainerRegistryCredential('', controller)

  def test_default_module(self, controller):
    assert type(_credential(controller).module) is gcr_module.Module

  def test_description(self, controller):
    creds = _credential(controller)
    assert creds.description == NAME
    assert NAME in creds.display_name

  def test_username(self, controller):
    assert _credential(controller).username == USERNAME

  def test_password(self, controller):
    assert _credential(controller).password == TOKEN

  def test_password_follows_live_credentials(self, controller, oauth):
    creds = _credential(controller)
    oauth.get_access_token.return_value = oauth2client.AccessTokenInfo(
        'rotated', 3600)
    assert creds.password == 'rotated'

  def test_missing_robot_credentials(self):
    context = gcr_context.Controller(credential_store.InMemory())
    creds = _credential(context)

    assert creds.credentials is None
    assert creds.username == USERNAME
    assert creds.password is None
    assert creds.description == CREDENTIALS_ID

  def test_no_credentials_off_controller(self, agent):
    creds = _credential(agent)
    assert creds.credentials is None
    assert creds.password is None

  def test_matches(self, controller):
    creds = _credential(controller)
    assert creds.matches(domain.FromUri('https://gcr.io'))
    assert creds.matches(domain.FromUri('https://foo.gcr.io/v2/'))
    assert not creds.matches(domain.FromUri('https://evil.example.com'))

  def test_matches_uses_configuration(self, store):
    config = mock.MagicMock(gcr_server='registry.example.com')
    creds = _credential(gcr_context.Controller(store, config))

    assert creds.matches(domain.FromUri('https://registry.example.com'))
    assert not creds.matches(domain.FromUri('https://gcr.io'))


  @pytest.mark.parametrize('allow_list', [' , ', '   '])
  def test_patternless_allow_list_falls_back_to_default(self, store,
                                                       allow_list):
    config = gcr_config.GlobalConfig()
    config.configure({'gcrServer': allow_list})
    creds = _credential(gcr_context.Controller(store, config))

    assert not creds.matches(domain.FromUri('https://evil.example.com'))
    assert creds.matches(domain.FromUri('https://gcr.io'))

  def test_whitespace_separated_allow_list(self, store):
    config = gcr_config.GlobalConfig()
    config.configure({'gcrServer': 'gcr.io *.gcr.io'})
    creds = _credential(gcr_context.Controller(store, config))

    assert creds.matches(domain.FromUri('https://gcr.io'))
    assert creds.matches(domain.FromUri('https://foo.gcr.io'))


class TestSerialization(object):

  def test_serialize_snapshots_outgoing_copy(self, controller):
    creds = _credential(controller)

    data = json.loads(creds.serialize())

    assert data['credentialsId'] == CREDENTIALS_ID
    assert data['module']['kind'] == 'remote'
    assert data['module']['identity'] == USERNAME
    # The in memory original keeps deriving tokens from the store.
    assert type(creds.module) is gcr_module.Module

  def test_serialize_uses_module_for_remote(self, controller, robot):
    module = mock.MagicMock()
    module.for_remote.return_value.to_dict.return_value = {'kind': 'fake'}
    creds = _credential(controller, module=module)

    data = json.loads(creds.serialize())

    module.for_remote.assert_called_once_with(robot)
    assert data['module'] == {'kind': 'fake'}

  def test_round_trip_on_controller(self, controller):
    creds = _credential(controller)

    restored = gcr_credential.Deserialize(creds.serialize(), controller)

    assert restored is not creds
    assert restored.id == creds.id
    assert restored.credentials_id == creds.credentials_id
    assert type(restored.module) is gcr_module.Module

  def test_controller_discards_transmitted_module(self, controller, robot):
    remote = gcr_module.Module().for_remote(robot)
    creds = _credential(controller, module=remote)

    restored = gcr_credential.Deserialize(creds.serialize(), controller)

    assert isinstance(creds.module, gcr_module.ForRemote)
    assert type(restored.module) is gcr_module.Module

  def test_round_trip_on_agent(self, controller, agent):
    creds = _credential(controller)
    username, password = creds.username, creds.password

    restored = gcr_credential.Deserialize(creds.serialize(), agent)

    assert isinstance(restored.module, gcr_module.ForRemote)
    assert restored.username == username
    assert restored.password == password

  def test_agent_copy_is_isolated(self, controller, agent, oauth):
    creds = _credential(controller)
    restored = gcr_credential.Deserialize(creds.serialize(), agent)

    oauth.get_access_token.return_value = oauth2client.AccessTokenInfo(
        'rotated', 3600)

    assert creds.password == 'rotated'
    assert restored.password == TOKEN

  def test_reserialize_on_agent_is_stable(self, controller, agent):
    data = _credential(controller).serialize()

    restored = gcr_credential.Deserialize(data, agent)

    assert json.loads(restored.serialize()) == json.loads(data)

  def test_serialize_revoked_credentials(self, controller, oauth):
    oauth.get_access_token.side_effect = (
        oauth2client.HttpAccessTokenRefreshError('invalid_grant'))

    with pytest.raises(gcr_credential.SerializationError) as e:
      _credential(controller).serialize()
    assert isinstance(e.value, IOError)

  def test_serialize_missing_credentials(self):
    context = gcr_context.Controller(credential_store.InMemory())

    with pytest.raises(gcr_credential.SerializationError):
      _credential(context).serialize()

  def test_serialize_live_module_on_agent(self, agent):
    with pytest.raises(gcr_credential.SerializationError):
      _credential(agent).serialize()
