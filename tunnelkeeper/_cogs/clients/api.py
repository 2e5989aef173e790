"""
Raw JSON requests to K8s API, with retries of the transient failures.

Connection errors, timeouts, and the server-side errors (5xx) are retried
after the delays from ``settings.networking.error_backoffs``; when the delays
are over, the last error is escalated. The client-side errors (4xx) are
escalated immediately: repeating the same request will not fix them.
"""
import asyncio
from typing import Any, Optional

import aiohttp

from tunnelkeeper._cogs.clients import auth, errors
from tunnelkeeper._cogs.configs import configuration
from tunnelkeeper._cogs.helpers import typedefs

TRANSIENT_ERRORS = (aiohttp.ClientConnectionError, asyncio.TimeoutError, errors.APIServerError)


@auth.authenticated
async def request(
        method: str,
        url: str,  # relative to the server, unless absolute.
        *,
        settings: configuration.OperatorSettings,
        logger: typedefs.Logger,
        payload: Optional[object] = None,
        context: Optional[auth.APIContext] = None,  # injected by the decorator
) -> Any:
    if context is None:  # for type-checking!
        raise RuntimeError("API instance is not injected by the decorator.")

    if '://' not in url:
        url = context.server.rstrip('/') + '/' + url.lstrip('/')
    timeout = aiohttp.ClientTimeout(
        total=settings.networking.request_timeout,
        sock_connect=settings.networking.connect_timeout,
    )

    what = f"{method.upper()} {url}"
    delays = list(settings.networking.error_backoffs)
    attempts = len(delays) + 1
    for attempt in range(1, attempts + 1):
        try:
            async with context.session.request(method, url, json=payload, timeout=timeout) as rsp:
                await errors.check_response(rsp)
                result = await rsp.json()
        except TRANSIENT_ERRORS as e:
            if attempt == attempts:
                logger.error(f"{what} failed after {attempts} attempt(s): {e!r}")
                raise
            delay = delays[attempt - 1]
            logger.warning(f"{what} failed (attempt {attempt} of {attempts}); "
                           f"retrying in {delay}s: {e!r}")
            await asyncio.sleep(delay)
        else:
            if attempt > 1:
                logger.debug(f"{what} succeeded at attempt {attempt} of {attempts}.")
            return result

    raise RuntimeError("Broken retryable routine.")  # impossible, but needed for type-checking.


@auth.authenticated
async def get_default_namespace(
        *,
        context: Optional[auth.APIContext] = None,
) -> Optional[str]:
    if context is None:
        raise RuntimeError("API instance is not injected by the decorator.")
    return context.default_namespace
