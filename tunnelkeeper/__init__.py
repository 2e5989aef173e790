"""
The main module of tunnelkeeper for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the package's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from tunnelkeeper._cogs.clients.errors import (
    APIError,
    APIClientError,
    APIServerError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
)
from tunnelkeeper._cogs.clients.stores import (
    DeploymentStore,
)
from tunnelkeeper._cogs.configs.configuration import (
    OperatorSettings,
    ConnectorSettings,
    NetworkingSettings,
    ReconciliationSettings,
)
from tunnelkeeper._cogs.helpers.typedefs import (
    Logger,
    RawBody,
)
from tunnelkeeper._cogs.helpers.versions import (
    version as __version__,
)
from tunnelkeeper._cogs.structs.credentials import (
    LoginError,
    ConnectionInfo,
)
from tunnelkeeper._cogs.structs.failures import (
    ProvisioningError,
    ConfigurationError,
    InfrastructureError,
    UpstreamError,
)
from tunnelkeeper._cogs.structs.trustpools import (
    TrustPool,
    ConfigMapTrustPool,
    SecretTrustPool,
    resolve_trust_pool,
)
from tunnelkeeper._core.actions.provisioning import (
    ObjectStore,
    CredentialSource,
    provision,
)
from tunnelkeeper._core.actions.templating import (
    CONNECTOR_NAME,
    DISCRIMINATOR_LABELS,
    TrustVolume,
    build_trust_volume,
    build_deployment,
)
from tunnelkeeper._core.engines.loggers import (
    LogFormat,
    configure,
)
from tunnelkeeper._core.intents.piggybacking import (
    login,
    login_with_kubeconfig,
    login_with_service_account,
)
from tunnelkeeper._core.reactor.running import (
    run,
    operator,
    reconcile,
)
from tunnelkeeper._kits.cloudflare import (
    CloudflareAPIError,
    CloudflareTunnelClient,
)

__all__ = [
    'APIError', 'APIClientError', 'APIServerError',
    'APIUnauthorizedError', 'APIForbiddenError', 'APINotFoundError', 'APIConflictError',
    'DeploymentStore',
    'OperatorSettings', 'ConnectorSettings', 'NetworkingSettings', 'ReconciliationSettings',
    'Logger', 'RawBody',
    'LoginError', 'ConnectionInfo',
    'ProvisioningError', 'ConfigurationError', 'InfrastructureError', 'UpstreamError',
    'TrustPool', 'ConfigMapTrustPool', 'SecretTrustPool', 'resolve_trust_pool',
    'ObjectStore', 'CredentialSource', 'provision',
    'CONNECTOR_NAME', 'DISCRIMINATOR_LABELS', 'TrustVolume',
    'build_trust_volume', 'build_deployment',
    'LogFormat', 'configure',
    'login', 'login_with_kubeconfig', 'login_with_service_account',
    'run', 'operator', 'reconcile',
    'CloudflareAPIError', 'CloudflareTunnelClient',
]
