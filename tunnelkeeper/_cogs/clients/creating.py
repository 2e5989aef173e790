from tunnelkeeper._cogs.clients import api
from tunnelkeeper._cogs.configs import configuration
from tunnelkeeper._cogs.helpers import typedefs
from tunnelkeeper._cogs.structs import references


async def create_obj(
        *,
        settings: configuration.OperatorSettings,
        resource: references.Resource,
        body: typedefs.RawBody,
        logger: typedefs.Logger,
) -> typedefs.RawBody:
    """
    Create an object as rendered, in the namespace of its own metadata.
    """
    namespace = body.get('metadata', {}).get('namespace')
    if not namespace:
        raise ValueError("The object's body has no namespace in its metadata.")
    created: typedefs.RawBody = await api.request(
        'post',
        resource.get_url(namespace=namespace),
        payload=body,
        settings=settings,
        logger=logger,
    )
    return created
