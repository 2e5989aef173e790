"""
Rendering of the connector's deployment.

Everything here is deterministic: the same inputs give the same bodies.
The rendered bodies are plain JSON-compatible dicts, as sent to K8s API.
"""
import dataclasses
from typing import Dict, List, Optional

from tunnelkeeper._cogs.helpers import typedefs
from tunnelkeeper._cogs.structs import references, trustpools

CONNECTOR_NAME = 'controlled-cloudflared-connector'

# Marks the connector's deployments, and finds them for the existence check.
DISCRIMINATOR_LABELS: Dict[str, str] = {
    'tunnelkeeper.dev/connector': CONNECTOR_NAME,
}

METRICS_ADDRESS = '0.0.0.0:44483'
TRUST_VOLUME_NAME = 'ca-pool'


@dataclasses.dataclass(frozen=True)
class TrustVolume:
    """ A volume with the CA pool, and its mount into the connector's container. """
    volume: typedefs.RawBody
    mount: typedefs.RawBody


def build_trust_volume(trust_pool: Optional[trustpools.TrustPool]) -> Optional[TrustVolume]:
    if trust_pool is None:
        return None
    return TrustVolume(
        volume=dict(name=TRUST_VOLUME_NAME, **trust_pool.as_volume_source()),
        mount={
            'name': TRUST_VOLUME_NAME,
            'mountPath': trust_pool.mount_path,
            'subPath': trust_pool.key,
        },
    )


def build_command(token: str) -> List[str]:
    return [
        'cloudflared',
        '--no-autoupdate',
        'tunnel',
        '--metrics',
        METRICS_ADDRESS,
        'run',
        '--token',
        token,
    ]


def build_deployment(
        *,
        token: str,
        namespace: str,
        replicas: int,
        image: str,
        image_pull_policy: str = '',
        trust_volume: Optional[TrustVolume] = None,
) -> typedefs.RawBody:
    """
    Render the connector's deployment with the token embedded into the command.

    The pods are always restarted, and always expose the metrics endpoint;
    these are not configurable. An empty pull policy is omitted entirely,
    so that Kubernetes applies its own defaults.
    """
    selector_labels = {'app': CONNECTOR_NAME}
    labels = dict(selector_labels, **DISCRIMINATOR_LABELS)

    container: typedefs.RawBody = {
        'name': CONNECTOR_NAME,
        'image': image,
        'command': build_command(token),
        'volumeMounts': [trust_volume.mount] if trust_volume is not None else [],
    }
    if image_pull_policy:
        container['imagePullPolicy'] = image_pull_policy

    return {
        'apiVersion': references.DEPLOYMENTS.api_version,
        'kind': references.DEPLOYMENTS.kind,
        'metadata': {
            'name': CONNECTOR_NAME,
            'namespace': namespace,
            'labels': dict(labels),
        },
        'spec': {
            'replicas': replicas,
            'selector': {
                'matchLabels': dict(selector_labels),
            },
            'template': {
                'metadata': {
                    'name': CONNECTOR_NAME,
                    'labels': dict(labels),
                },
                'spec': {
                    'containers': [container],
                    'restartPolicy': 'Always',
                    'volumes': [trust_volume.volume] if trust_volume is not None else [],
                },
            },
        },
    }
