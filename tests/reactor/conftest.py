from unittest.mock import AsyncMock, Mock

import pytest


@pytest.fixture(autouse=True)
def _fast_settings(settings):
    settings.connector.replicas = '1'
    settings.reconciliation.interval = 0
    settings.reconciliation.error_delay = 0


@pytest.fixture()
def store():
    return Mock(
        list_objs=AsyncMock(return_value=[]),
        create_obj=AsyncMock(return_value={}),
    )


@pytest.fixture()
def credentials():
    return Mock(
        fetch_credential=AsyncMock(return_value='tok-123'),
    )


@pytest.fixture()
def sleep(mocker):
    return mocker.patch('asyncio.sleep', AsyncMock())
