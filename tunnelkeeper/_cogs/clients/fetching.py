from typing import Collection, List, Mapping, Optional

from tunnelkeeper._cogs.clients import api
from tunnelkeeper._cogs.configs import configuration
from tunnelkeeper._cogs.helpers import typedefs
from tunnelkeeper._cogs.structs import references


async def list_objs(
        *,
        settings: configuration.OperatorSettings,
        resource: references.Resource,
        namespace: str,
        labels: Optional[Mapping[str, str]] = None,
        logger: typedefs.Logger,
) -> Collection[typedefs.RawBody]:
    """
    List the objects of specific resource type, optionally filtered by labels.

    The labels are matched by equality on the server side (``labelSelector``).
    K8s API omits ``kind`` & ``apiVersion`` in the listed items; they are
    restored from the resource, unless present.
    """
    params = {'labelSelector': references.build_label_selector(labels)} if labels else None
    rsp = await api.request(
        'get',
        resource.get_url(namespace=namespace, params=params),
        settings=settings,
        logger=logger,
    )

    items: List[typedefs.RawBody] = []
    for item in rsp.get('items') or []:
        item.setdefault('kind', resource.kind)
        item.setdefault('apiVersion', resource.api_version)
        items.append(item)
    return items
