"""
The failures of the connector provisioning, as seen by its callers.

The underlying clients have their own specialised errors (see
`tunnelkeeper._cogs.clients.errors` and `tunnelkeeper._kits.cloudflare`).
Those are never escalated as is from the provisioning routine: they are
chained as causes of the errors below, which tell the caller what to do next.
"""


class ProvisioningError(Exception):
    """ A failure of a single provisioning attempt. """


class ConfigurationError(ProvisioningError):
    """ The inputs are invalid or contradictory; retries are useless. """


class InfrastructureError(ProvisioningError):
    """ The cluster's object store has failed; the attempt can be retried. """


class UpstreamError(ProvisioningError):
    """ The tunnel credential could not be obtained; the attempt can be retried. """
