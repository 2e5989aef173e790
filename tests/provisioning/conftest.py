from unittest.mock import AsyncMock, Mock

import pytest


@pytest.fixture(autouse=True)
def _connector_settings(settings):
    settings.connector.image = 'cloudflare/cloudflared:2024.6.0'
    settings.connector.image_pull_policy = 'IfNotPresent'
    settings.connector.replicas = '2'


@pytest.fixture()
def store():
    """ A fake object store with no connectors in it, accepting all creations. """
    return Mock(
        list_objs=AsyncMock(return_value=[]),
        create_obj=AsyncMock(return_value={}),
    )


@pytest.fixture()
def credentials():
    """ A fake credential source with a predefined token. """
    return Mock(
        fetch_credential=AsyncMock(return_value='tok-123'),
    )
