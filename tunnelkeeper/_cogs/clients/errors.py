"""
K8s API errors, as seen by the connector's store.

Failed responses are turned into :class:`APIError` subclasses by the HTTP
status: the provisioning needs to tell a name conflict (409) from everything
else, and the request retrying needs to tell the server-side errors (5xx)
from the client-side ones (4xx). The reason and the message are taken from
the K8s ``Status`` payload if there is one; other payloads are never exposed.
"""
from typing import Dict, Optional, Type

import aiohttp


class APIError(Exception):

    def __init__(
            self,
            message: Optional[str],
            *,
            status: int,
            reason: Optional[str] = None,
    ) -> None:
        super().__init__(message or f"K8s API responded with HTTP {status}.")
        self.status = status
        self.reason = reason
        self.message = message


class APIClientError(APIError):
    pass


class APIServerError(APIError):
    pass


class APIUnauthorizedError(APIClientError):
    pass


class APIForbiddenError(APIClientError):
    pass


class APINotFoundError(APIClientError):
    pass


class APIConflictError(APIClientError):
    pass


_CLIENT_ERRORS: Dict[int, Type[APIClientError]] = {
    401: APIUnauthorizedError,
    403: APIForbiddenError,
    404: APINotFoundError,
    409: APIConflictError,
}


async def check_response(response: aiohttp.ClientResponse) -> None:
    if response.status < 400:
        return

    try:
        payload = await response.json(content_type=None)
    except ValueError:  # incl. json.JSONDecodeError
        payload = None
    if not isinstance(payload, dict) or payload.get('kind') != 'Status':
        payload = {}

    cls: Type[APIError]
    if response.status >= 500:
        cls = APIServerError
    else:
        cls = _CLIENT_ERRORS.get(response.status, APIClientError)

    # Keep aiohttp's error as the cause: it has the request info for the tracebacks.
    try:
        response.raise_for_status()
    except aiohttp.ClientResponseError as e:
        raise cls(payload.get('message'), status=response.status, reason=payload.get('reason')) from e
