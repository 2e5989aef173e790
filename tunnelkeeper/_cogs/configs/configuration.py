"""
All configuration flags, options, settings to fine-tune the operator.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

In this package, they are called *"settings"* (plural).
Combined, they form a *"configuration"* (singular).

The settings are never read from the environment here: it is the CLI's job
(see :mod:`tunnelkeeper.cli`). The provisioning routines get the settings
explicitly as arguments, so they can be tested without patching the env vars.
"""
import dataclasses
from typing import Iterable, Optional


@dataclasses.dataclass
class ConnectorSettings:
    """
    Settings of the connector's deployment, as it is created.
    """

    image: str = 'cloudflare/cloudflared:latest'
    """
    The container image of ``cloudflared`` to run.
    Usually set via ``CLOUDFLARED_IMAGE`` in the operator's environment.
    """

    image_pull_policy: str = ''
    """
    The container's image pull policy: ``Always``, ``IfNotPresent``, ``Never``.
    An empty string means that Kubernetes decides by its own defaults.
    Usually set via ``CLOUDFLARED_IMAGE_PULL_POLICY``.
    """

    replicas: Optional[str] = None
    """
    The number of the connector's replicas, as a string, unparsed.

    It comes raw from the operator's environment (``CLOUDFLARED_REPLICA_COUNT``)
    and is parsed only when the deployment is about to be created. An absent
    or malformed value fails the provisioning; there is no implicit default.
    """


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for the API requests, both to Kubernetes and to Cloudflare.
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for the TCP connection establishing (if not set, no timeout).
    """

    error_backoffs: Iterable[float] = (1, 1, 2, 3, 5, 8, 13)
    """
    Backoffs (in seconds) for the retries of failed requests.

    Only the connection errors, timeouts, and the server-side (5xx) errors
    are retried. The client-side errors (4xx) are escalated immediately.
    An empty sequence disables the retries.
    """


@dataclasses.dataclass
class ReconciliationSettings:

    interval: float = 60
    """
    How often (in seconds) to check if the connector's deployment exists.
    """

    error_delay: float = 10
    """
    How long (in seconds) to wait after a recoverable failure before retrying.
    """

    once: bool = False
    """
    Should the operator exit after the first successful provisioning?
    """


@dataclasses.dataclass
class OperatorSettings:
    connector: ConnectorSettings = dataclasses.field(default_factory=ConnectorSettings)
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    reconciliation: ReconciliationSettings = dataclasses.field(default_factory=ReconciliationSettings)
