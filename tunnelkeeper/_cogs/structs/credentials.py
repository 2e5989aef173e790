"""
What the operator knows about its connection to K8s API after the login.

The fields mirror what a kubeconfig or a service account can provide:
the server, the CA to trust (or none, if insecure), the client certificate,
and either a bearer token or a username & password. The certificate data
can be either PEM or base64-encoded PEM (as in kubeconfigs).

.. seealso::
    :mod:`tunnelkeeper._core.intents.piggybacking` and :mod:`auth`.
"""
import dataclasses
from typing import Optional


class LoginError(Exception):
    """ Raised when the operator cannot login to the API. """


@dataclasses.dataclass(frozen=True)
class ConnectionInfo:
    server: str  # e.g. "https://localhost:443"
    ca_path: Optional[str] = None
    ca_data: Optional[str] = None
    insecure: Optional[bool] = None
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    certificate_path: Optional[str] = None
    certificate_data: Optional[str] = None
    private_key_path: Optional[str] = None
    private_key_data: Optional[str] = None
    default_namespace: Optional[str] = None
    priority: int = 0  # the highest wins if several logins succeed.
