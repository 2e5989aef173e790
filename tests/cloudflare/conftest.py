import pytest

from tunnelkeeper._kits.cloudflare import CloudflareTunnelClient


@pytest.fixture()
def cf_hostname():
    return 'fake-cloudflare'


@pytest.fixture()
async def tunnel_client(cf_hostname, settings, logger):
    client = CloudflareTunnelClient(
        api_token='api-token',
        account_id='acc',
        tunnel_name='my-tunnel',
        settings=settings,
        logger=logger,
        server=f'https://{cf_hostname}/client/v4',
    )
    async with client:
        yield client
