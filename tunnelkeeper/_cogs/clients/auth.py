import base64
import contextlib
import functools
import ssl
import tempfile
from contextvars import ContextVar
from typing import Any, Callable, Dict, Optional, TypeVar, Union, cast

import aiohttp

from tunnelkeeper._cogs.helpers import versions
from tunnelkeeper._cogs.structs import credentials

# Per-operator exchange point for the authenticated API context.
# Set by the runner, so that every API call in the operator's task uses the same session.
context_var: ContextVar['APIContext'] = ContextVar('context_var')

# A typevar to show that we return a function with the same signature as given.
_F = TypeVar('_F', bound=Callable[..., Any])


def authenticated(fn: _F) -> _F:
    """
    A decorator to inject a pre-authenticated session to a requesting routine.

    If a context is explicitly passed, it is used as is. Otherwise, the context
    of the current operator's task is taken (see :data:`context_var`).
    """
    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        if kwargs.get('context') is None:
            try:
                kwargs['context'] = context_var.get()
            except LookupError:
                raise credentials.LoginError("The API context is not set; login first.") from None
        return await fn(*args, **kwargs)

    return cast(_F, wrapper)


class APIContext:
    """
    An aiohttp session authenticated as the login has prescribed.

    It is created once per operator run, shared by all API calls via
    :data:`context_var`, and closed when the operator exits.
    """

    session: aiohttp.ClientSession
    server: str
    default_namespace: Optional[str]

    def __init__(self, info: credentials.ConnectionInfo) -> None:
        super().__init__()
        self.server = info.server
        self.default_namespace = info.default_namespace

        headers: Dict[str, str] = {'User-Agent': f'tunnelkeeper/{versions.version or "unknown"}'}
        basic_auth: Optional[aiohttp.BasicAuth] = None
        if info.token:
            headers['Authorization'] = f'Bearer {info.token}'
        elif info.username and info.password:
            basic_auth = aiohttp.BasicAuth(info.username, info.password)

        self.session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(limit=0, ssl=make_ssl_context(info)),
            headers=headers,
            auth=basic_auth,
        )

    async def close(self) -> None:
        await self.session.close()


def make_ssl_context(info: credentials.ConnectionInfo) -> ssl.SSLContext:
    context = ssl.create_default_context(
        cafile=info.ca_path,
        cadata=decode_to_pem(info.ca_data) if info.ca_data else None,
    )
    if info.insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    # SSL accepts the client certificates as files only. The temporary files
    # are needed only while loading, and are not created if not needed at all.
    with contextlib.ExitStack() as stack:
        certfile = info.certificate_path or _as_temp_file(stack, info.certificate_data)
        keyfile = info.private_key_path or _as_temp_file(stack, info.private_key_data)
        if certfile and keyfile:
            context.load_cert_chain(certfile=certfile, keyfile=keyfile)
    return context


def _as_temp_file(stack: contextlib.ExitStack, data: Optional[str]) -> Optional[str]:
    if not data:
        return None
    file = stack.enter_context(tempfile.NamedTemporaryFile(buffering=0))
    file.write(decode_to_pem(data).encode('ascii'))
    return file.name


def decode_to_pem(data: Union[str, bytes]) -> str:
    if isinstance(data, str) and data.startswith('-----BEGIN '):
        return data
    elif isinstance(data, bytes) and data.startswith(b'-----BEGIN '):
        return data.decode('ascii')
    else:
        return base64.b64decode(data).decode('ascii')
