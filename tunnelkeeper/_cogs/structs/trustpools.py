"""
Custom CA pools for the connector's outgoing TLS connections.

A trust pool comes from exactly one named store in the connector's namespace:
either a config map or a secret. Both are modelled as separate classes,
so that "both at once" cannot be represented in the resolved value.
The raw inputs (e.g. CLI options) are independent though, so the resolver
still has to reject the contradicting combination.
"""
import dataclasses
from typing import Optional, Union

from tunnelkeeper._cogs.helpers import typedefs
from tunnelkeeper._cogs.structs import failures

DEFAULT_KEY = 'ca-certificates.crt'
DEFAULT_MOUNT_PATH = '/etc/ssl/certs'


@dataclasses.dataclass(frozen=True)
class ConfigMapTrustPool:
    name: str
    key: str = DEFAULT_KEY
    mount_path: str = DEFAULT_MOUNT_PATH

    def as_volume_source(self) -> typedefs.RawBody:
        return {'configMap': {'name': self.name}}


@dataclasses.dataclass(frozen=True)
class SecretTrustPool:
    name: str
    key: str = DEFAULT_KEY
    mount_path: str = DEFAULT_MOUNT_PATH

    def as_volume_source(self) -> typedefs.RawBody:
        return {'secret': {'secretName': self.name}}


TrustPool = Union[ConfigMapTrustPool, SecretTrustPool]


def resolve_trust_pool(
        *,
        config_map: Optional[str] = None,
        secret: Optional[str] = None,
        key: Optional[str] = None,
        mount_path: Optional[str] = None,
) -> Optional[TrustPool]:
    """
    Interpret the optional trust-pool inputs into a single trust pool, if any.

    Empty strings are treated as absent values: this is what the CLI passes
    when the options are sourced from empty environment variables.
    """
    if config_map and secret:
        raise failures.ConfigurationError(
            "Only one of --capool-config-map or --capool-secret may be specified.")

    key = key or DEFAULT_KEY
    mount_path = mount_path or DEFAULT_MOUNT_PATH
    if config_map:
        return ConfigMapTrustPool(name=config_map, key=key, mount_path=mount_path)
    elif secret:
        return SecretTrustPool(name=secret, key=key, mount_path=mount_path)
    else:
        return None
