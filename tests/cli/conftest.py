import functools

import click.testing
import pytest

from tunnelkeeper.cli import main

ENV_VARS = [
    'CLOUDFLARE_API_TOKEN',
    'CLOUDFLARE_ACCOUNT_ID',
    'CLOUDFLARE_TUNNEL_NAME',
    'CLOUDFLARED_IMAGE',
    'CLOUDFLARED_IMAGE_PULL_POLICY',
    'CLOUDFLARED_REPLICA_COUNT',
]


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def runner():
    runner = click.testing.CliRunner()
    return runner


@pytest.fixture()
def invoke(runner):
    return functools.partial(runner.invoke, main)


@pytest.fixture()
def cloudflare_env():
    return {
        'CLOUDFLARE_API_TOKEN': 'api-token',
        'CLOUDFLARE_ACCOUNT_ID': 'acc',
        'CLOUDFLARE_TUNNEL_NAME': 'my-tunnel',
    }


@pytest.fixture()
def real_run(mocker):
    return mocker.patch('tunnelkeeper._core.reactor.running.run')


@pytest.fixture()
def configure(mocker):
    return mocker.patch('tunnelkeeper._core.engines.loggers.configure')
