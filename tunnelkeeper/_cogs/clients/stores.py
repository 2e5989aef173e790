"""
The connector's view of the cluster's object store.

The provisioning needs only two operations: list the connector's deployments
by labels, and create a new deployment. They are bound here to the K8s API
clients with the operator's settings & logger, so that the provisioning code
does not depend on the URLs, resources, and other API specifics.
"""
from typing import Collection, Mapping, Optional

from tunnelkeeper._cogs.clients import creating, fetching
from tunnelkeeper._cogs.configs import configuration
from tunnelkeeper._cogs.helpers import typedefs
from tunnelkeeper._cogs.structs import references


class DeploymentStore:

    def __init__(
            self,
            *,
            settings: configuration.OperatorSettings,
            logger: typedefs.Logger,
    ) -> None:
        super().__init__()
        self.settings = settings
        self.logger = logger

    async def list_objs(
            self,
            *,
            namespace: str,
            labels: Mapping[str, str],
    ) -> Collection[typedefs.RawBody]:
        return await fetching.list_objs(
            resource=references.DEPLOYMENTS,
            namespace=namespace,
            labels=labels,
            settings=self.settings,
            logger=self.logger,
        )

    async def create_obj(
            self,
            *,
            body: typedefs.RawBody,
    ) -> Optional[typedefs.RawBody]:
        return await creating.create_obj(
            resource=references.DEPLOYMENTS,
            body=body,
            settings=self.settings,
            logger=self.logger,
        )
