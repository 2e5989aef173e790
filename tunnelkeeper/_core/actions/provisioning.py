"""
Provisioning of the connector's deployment: once per namespace, if absent.

The routine is a single pass with no internal concurrency::

    list by labels -> exit if found -> fetch a token -> render -> create

It is supposed to be invoked repeatedly by a reconciliation loop
(see :mod:`tunnelkeeper._core.reactor.running`), and is idempotent
due to the existence check: the 2nd and later calls do nothing.

The existence check and the creation are not atomic. Two concurrent calls
can both see no deployments and both try to create one. The deployment's name
is fixed, so K8s API accepts only one of them; the other gets a conflict.
The conflict is a success only if the connector is now seen by its labels:
the name can also be taken by an unrelated deployment, which is an error.

All failures are escalated to the caller as :class:`ProvisioningError`
subclasses with the original errors chained. Nothing is rolled back:
a fetched token is simply dropped if the deployment is not created.
"""
import re
from typing import Collection, Mapping, Optional

from typing_extensions import Protocol

from tunnelkeeper._cogs.clients import errors
from tunnelkeeper._cogs.configs import configuration
from tunnelkeeper._cogs.helpers import typedefs
from tunnelkeeper._cogs.structs import failures, trustpools
from tunnelkeeper._core.actions import templating

PULL_POLICIES = frozenset({'Always', 'IfNotPresent', 'Never'})
MAX_REPLICAS = 2 ** 31 - 1  # int32 in K8s API.


class ObjectStore(Protocol):
    async def list_objs(
            self,
            *,
            namespace: str,
            labels: Mapping[str, str],
    ) -> Collection[typedefs.RawBody]: ...

    async def create_obj(
            self,
            *,
            body: typedefs.RawBody,
    ) -> Optional[typedefs.RawBody]: ...


class CredentialSource(Protocol):
    async def fetch_credential(self) -> str: ...


async def provision(
        *,
        store: ObjectStore,
        credentials: CredentialSource,
        namespace: str,
        trust_pool: Optional[trustpools.TrustPool],
        settings: configuration.OperatorSettings,
        logger: typedefs.Logger,
) -> None:
    try:
        existing = await store.list_objs(namespace=namespace, labels=templating.DISCRIMINATOR_LABELS)
    except Exception as e:
        raise failures.InfrastructureError(
            f"Failed to list the connectors in namespace {namespace}.") from e

    if existing:
        logger.debug(f"The connector already exists ({len(existing)} deployments); nothing to do.")
        return

    trust_volume = templating.build_trust_volume(trust_pool)

    try:
        token = await credentials.fetch_credential()
    except Exception as e:
        raise failures.UpstreamError("Failed to fetch the tunnel token.") from e

    replicas = parse_replicas(settings.connector.replicas)
    image = check_image(settings.connector.image)
    image_pull_policy = check_image_pull_policy(settings.connector.image_pull_policy)

    body = templating.build_deployment(
        token=token,
        namespace=namespace,
        replicas=replicas,
        image=image,
        image_pull_policy=image_pull_policy,
        trust_volume=trust_volume,
    )

    try:
        await store.create_obj(body=body)
    except errors.APIConflictError as e:
        await _confirm_concurrent_creation(store=store, namespace=namespace, conflict=e)
        logger.info("The connector is created by someone else in the meantime.")
    except Exception as e:
        raise failures.InfrastructureError(
            f"Failed to create the connector in namespace {namespace}.") from e
    else:
        logger.info(f"The connector is created with {replicas} replicas"
                    f"{' and a custom CA pool' if trust_volume is not None else ''}.")


async def _confirm_concurrent_creation(
        *,
        store: ObjectStore,
        namespace: str,
        conflict: errors.APIConflictError,
) -> None:
    """
    Tell a concurrent creation of the connector from a foreign name holder.

    A conflict alone only means that the name is taken. If it is taken by
    a deployment without the connector's labels (e.g. made by another tool),
    the existence check will never see it, so every pass would fetch a token
    and hit the same conflict again.
    """
    try:
        existing = await store.list_objs(namespace=namespace, labels=templating.DISCRIMINATOR_LABELS)
    except Exception as e:
        raise failures.InfrastructureError(
            f"Failed to list the connectors in namespace {namespace}.") from e
    if not existing:
        raise failures.InfrastructureError(
            f"Deployment {namespace}/{templating.CONNECTOR_NAME} exists but is not labelled "
            f"as the connector; relabel or remove it.") from conflict


def parse_replicas(value: Optional[str]) -> int:
    """
    Parse the replica count as configured: a non-negative int32, nothing else.

    An absent value is an error too: it is a misconfiguration of the operator,
    which must not be silently replaced by a guessed default.
    """
    if value is None or not value.strip():
        raise failures.ConfigurationError(
            "The replica count is not configured (CLOUDFLARED_REPLICA_COUNT).")
    if not re.fullmatch(r'\+?[0-9]+', value.strip()):
        raise failures.ConfigurationError(
            f"The replica count is not a non-negative integer (CLOUDFLARED_REPLICA_COUNT): {value!r}")
    replicas = int(value.strip(), 10)
    if replicas > MAX_REPLICAS:
        raise failures.ConfigurationError(
            f"The replica count is out of range (CLOUDFLARED_REPLICA_COUNT): {value!r}")
    return replicas


def check_image(value: str) -> str:
    if not value:
        raise failures.ConfigurationError(
            "The connector's image is not configured (CLOUDFLARED_IMAGE).")
    return value


def check_image_pull_policy(value: str) -> str:
    if value and value not in PULL_POLICIES:
        raise failures.ConfigurationError(
            f"The image pull policy is not one of {sorted(PULL_POLICIES)} "
            f"(CLOUDFLARED_IMAGE_PULL_POLICY): {value!r}")
    return value
