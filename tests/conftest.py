import json
import logging
from unittest.mock import AsyncMock, MagicMock, Mock

import pytest

from tunnelkeeper._cogs.clients import auth
from tunnelkeeper._cogs.clients.auth import APIContext
from tunnelkeeper._cogs.configs.configuration import OperatorSettings
from tunnelkeeper._cogs.structs.credentials import ConnectionInfo


@pytest.fixture()
def settings():
    return OperatorSettings()


@pytest.fixture()
def logger():
    return logging.getLogger('tunnelkeeper.tests')


@pytest.fixture()
def namespace():
    return 'ns'


#
# Mocks for the HTTP APIs (both Kubernetes and Cloudflare). Reasons:
# 1. We do not test aiohttp, we test the layers on top of it,
#    so everything low-level should be mocked and assumed to be functional.
# 2. No external calls must be made under any circumstances.
#    The unit-tests must be fully isolated from the environment.
#

@pytest.fixture()
def hostname():
    """ A fake hostname to be used in all aiohttp/aresponses tests. """
    return 'fake-host'


@pytest.fixture()
async def fake_context(mocker, hostname):
    """
    Provide a freshly created API context as if the operator has logged in.

    The context is injected into the API calls as if it was set by the runner.
    The context variable itself is not used, since the async fixtures and the
    tests can run in different contexts (as in ``contextvars``).
    """
    info = ConnectionInfo(server=f'https://{hostname}')
    context = APIContext(info)
    mocker.patch.object(auth, 'context_var', Mock(get=Mock(return_value=context)))
    try:
        yield context
    finally:
        await context.close()


class _UncopiedAsyncMock(AsyncMock):
    # `aresponses` re-registers a `copy()` of the callback for repeated routes;
    # keep the same mock there, so that all the calls are counted in one place.
    def __copy__(self):
        return self


@pytest.fixture()
def resp_mocker(fake_context, aresponses):
    """
    A factory of server-side callbacks for `aresponses` with mocking/spying.

    The value of the fixture is a function, which returns a coroutine mock.
    That coroutine mock should be passed to `aresponses.add` as a response
    callback function. When called, it calls the mock defined by the function's
    arguments (specifically, return_value or side_effects).

    The request's payload and query are preserved in the request object
    as ``request['data']`` and ``request['query']`` for later assertions.

    Sample usage::

        def test_me(resp_mocker):
            response = aiohttp.web.json_response({'a': 'b'})
            callback = resp_mocker(return_value=response)
            aresponses.add(hostname, '/path/', 'get', callback)
            do_something()
            assert callback.called
            assert callback.call_count == 1
    """
    def resp_maker(*args, **kwargs):
        actual_response = MagicMock(*args, **kwargs)

        async def resp_mock_effect(request):
            # The request's content can be read inside of the handler only. We preserve
            # the data into the request's storage, so that they could be asserted later.
            text = await request.text()
            try:
                request['data'] = json.loads(text) if text else None
            except json.JSONDecodeError:
                request['data'] = text
            request['query'] = dict(request.query)

            # Get a response/error as it was intended (via return_value/side_effect).
            return actual_response()

        # `aresponses` re-registers a `copy()` of the callback for repeated routes;
        # keep the copies as the same mock so that the calls are counted in one place.
        return _UncopiedAsyncMock(side_effect=resp_mock_effect)
    return resp_maker
