"""
A minimalistic client of Cloudflare API for the tunnel tokens.

Only the calls needed to run a connector are implemented: find the tunnel
by its name, and fetch the tunnel's token for ``cloudflared tunnel run``.
The tunnels themselves are managed elsewhere (e.g. by the ingress controller).

Cloudflare API wraps all results into an envelope::

    {"success": true, "errors": [], "messages": [], "result": ...}

Failed calls, either by HTTP status or by the envelope, are escalated as
:class:`CloudflareAPIError`, with the API's own error messages if available.
"""
import json
from typing import Any, Collection, Mapping, Optional, Type

import aiohttp

from tunnelkeeper._cogs.configs import configuration
from tunnelkeeper._cogs.helpers import typedefs, versions

CLOUDFLARE_API_URL = 'https://api.cloudflare.com/client/v4'


class CloudflareAPIError(Exception):

    def __init__(
            self,
            message: str,
            *,
            status: Optional[int] = None,
            errors: Collection[Mapping[str, Any]] = (),
    ) -> None:
        super().__init__(message)
        self.status = status
        self.errors = list(errors)


class CloudflareTunnelClient:
    """
    A credential source for the connectors: fetches the tunnel's token.

    Usage::

        async with CloudflareTunnelClient(...) as client:
            token = await client.fetch_credential()

    The tunnel's id is looked up once by its name and then remembered,
    until the tunnel is not found by that id (e.g. if it is re-created).
    The token is fetched anew on every call and is never remembered.
    """

    def __init__(
            self,
            *,
            api_token: str,
            account_id: str,
            tunnel_name: str,
            settings: configuration.OperatorSettings,
            logger: typedefs.Logger,
            server: str = CLOUDFLARE_API_URL,
    ) -> None:
        super().__init__()
        self.account_id = account_id
        self.tunnel_name = tunnel_name
        self.settings = settings
        self.logger = logger
        self.server = server.rstrip('/')
        self._api_token = api_token
        self._tunnel_id: Optional[str] = None
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "CloudflareTunnelClient":
        self._session = aiohttp.ClientSession(
            headers={
                'Authorization': f'Bearer {self._api_token}',
                'User-Agent': f'tunnelkeeper/{versions.version or "unknown"}',
            },
            timeout=aiohttp.ClientTimeout(
                total=self.settings.networking.request_timeout,
                sock_connect=self.settings.networking.connect_timeout,
            ),
        )
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Any,
    ) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def fetch_credential(self) -> str:
        tunnel_id = await self.lookup_tunnel_id()
        path = f'/accounts/{self.account_id}/cfd_tunnel/{tunnel_id}/token'
        try:
            token = await self._call('get', path)
        except CloudflareAPIError as e:
            if e.status == 404:  # re-created under the same name? look it up again next time.
                self._tunnel_id = None
            raise
        if not isinstance(token, str) or not token:
            raise CloudflareAPIError(f"No token is returned for the tunnel {self.tunnel_name!r}.")
        self.logger.debug(f"Fetched a token for the tunnel {self.tunnel_name!r} ({tunnel_id}).")
        return token

    async def lookup_tunnel_id(self) -> str:
        if self._tunnel_id is None:
            tunnels = await self._call('get', f'/accounts/{self.account_id}/cfd_tunnel', params={
                'name': self.tunnel_name,
                'is_deleted': 'false',
            })
            if not tunnels:
                raise CloudflareAPIError(f"The tunnel {self.tunnel_name!r} is not found.")
            self._tunnel_id = str(tunnels[0]['id'])
            self.logger.debug(f"The tunnel {self.tunnel_name!r} is identified as {self._tunnel_id}.")
        return self._tunnel_id

    async def _call(
            self,
            method: str,
            path: str,
            *,
            params: Optional[Mapping[str, str]] = None,
    ) -> Any:
        if self._session is None:
            raise RuntimeError("The client is not opened; use it as an async context manager.")

        url = self.server + path
        async with self._session.request(method, url, params=params) as response:
            try:
                payload = await response.json(content_type=None)
            except (json.JSONDecodeError, aiohttp.ContentTypeError):
                payload = None

        if not isinstance(payload, dict):
            raise CloudflareAPIError(f"Unexpected response for {method.upper()} {path}.",
                                     status=response.status)

        if response.status >= 400 or not payload.get('success'):
            errors = payload.get('errors') or []
            reasons = '; '.join(str(error.get('message')) for error in errors) or 'no details'
            raise CloudflareAPIError(f"{method.upper()} {path} failed: {reasons}",
                                     status=response.status, errors=errors)

        return payload.get('result')
