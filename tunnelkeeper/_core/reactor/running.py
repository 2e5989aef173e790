import asyncio
import contextlib
import logging
import signal
from typing import Callable, Iterator, Optional

from tunnelkeeper._cogs.clients import api, auth, stores
from tunnelkeeper._cogs.configs import configuration
from tunnelkeeper._cogs.helpers import typedefs
from tunnelkeeper._cogs.structs import credentials, failures, references, trustpools
from tunnelkeeper._core.actions import provisioning, templating
from tunnelkeeper._core.engines import loggers
from tunnelkeeper._core.intents import piggybacking
from tunnelkeeper._kits import cloudflare

logger = logging.getLogger(__name__)

LoginFn = Callable[..., credentials.ConnectionInfo]


def run(
        *,
        namespace: Optional[str] = None,
        trust_pool: Optional[trustpools.TrustPool] = None,
        cloudflare_api_token: str,
        cloudflare_account_id: str,
        cloudflare_tunnel_name: str,
        settings: Optional[configuration.OperatorSettings] = None,
        login_fn: LoginFn = piggybacking.login,
) -> None:
    """
    Run the operator synchronously until it is stopped or fails fatally.

    This is the entry point for the CLI. For embedding into other asyncio
    applications, use :func:`operator` directly.
    """
    with contextlib.suppress(asyncio.CancelledError):
        asyncio.run(operator(
            namespace=namespace,
            trust_pool=trust_pool,
            cloudflare_api_token=cloudflare_api_token,
            cloudflare_account_id=cloudflare_account_id,
            cloudflare_tunnel_name=cloudflare_tunnel_name,
            settings=settings,
            login_fn=login_fn,
        ))


async def operator(
        *,
        namespace: Optional[str] = None,
        trust_pool: Optional[trustpools.TrustPool] = None,
        cloudflare_api_token: str,
        cloudflare_account_id: str,
        cloudflare_tunnel_name: str,
        settings: Optional[configuration.OperatorSettings] = None,
        login_fn: LoginFn = piggybacking.login,
) -> None:
    """
    Login, then keep the connector provisioned in the namespace.

    The namespace defaults to the login's one (e.g. the service account's).
    The API context is closed on exit, regardless of the reason.
    """
    settings = settings if settings is not None else configuration.OperatorSettings()
    info = login_fn(logger=logger)
    context = auth.APIContext(info)
    context_token = auth.context_var.set(context)
    try:
        with _cancelled_on_signals():
            namespace = namespace or await api.get_default_namespace()
            if not namespace:
                raise failures.ConfigurationError(
                    "The namespace is neither specified, nor implied by the login.")

            object_logger = loggers.ObjectLogger(
                namespace=namespace,
                name=templating.CONNECTOR_NAME,
                kind=references.DEPLOYMENTS.kind,
                api_version=references.DEPLOYMENTS.api_version,
            )
            store = stores.DeploymentStore(settings=settings, logger=object_logger)
            async with cloudflare.CloudflareTunnelClient(
                api_token=cloudflare_api_token,
                account_id=cloudflare_account_id,
                tunnel_name=cloudflare_tunnel_name,
                settings=settings,
                logger=object_logger,
            ) as tunnel_client:
                await reconcile(
                    store=store,
                    credentials=tunnel_client,
                    namespace=namespace,
                    trust_pool=trust_pool,
                    settings=settings,
                    logger=object_logger,
                )
    finally:
        await context.close()
        auth.context_var.reset(context_token)


async def reconcile(
        *,
        store: provisioning.ObjectStore,
        credentials: provisioning.CredentialSource,
        namespace: str,
        trust_pool: Optional[trustpools.TrustPool],
        settings: configuration.OperatorSettings,
        logger: typedefs.Logger,
) -> None:
    """
    Provision the connector again and again, with delays between the attempts.

    The recoverable errors are logged and retried after a short delay.
    The configuration errors are escalated: the retries will not fix them.
    In the "once" mode, the first successful attempt ends the loop.
    """
    while True:
        delay: float
        try:
            await provisioning.provision(
                store=store,
                credentials=credentials,
                namespace=namespace,
                trust_pool=trust_pool,
                settings=settings,
                logger=logger,
            )
        except (failures.InfrastructureError, failures.UpstreamError) as e:
            delay = settings.reconciliation.error_delay
            logger.error(f"{e} Retrying in {delay} seconds. Caused by: {e.__cause__!r}")
        else:
            if settings.reconciliation.once:
                return
            delay = settings.reconciliation.interval
        await asyncio.sleep(delay)


@contextlib.contextmanager
def _cancelled_on_signals() -> Iterator[None]:
    """
    Cancel the current task on SIGINT/SIGTERM, for a graceful exit.

    Where the signal handlers are not supported (e.g. Windows),
    the default behaviour remains (i.e. KeyboardInterrupt on Ctrl+C).
    """
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    installed = []
    for signum in [signal.SIGINT, signal.SIGTERM]:
        try:
            loop.add_signal_handler(signum, _cancel_task, task, signum)
        except (NotImplementedError, RuntimeError, ValueError):
            pass  # not in the main thread, or not supported at all.
        else:
            installed.append(signum)
    try:
        yield
    finally:
        for signum in installed:
            loop.remove_signal_handler(signum)


def _cancel_task(task: Optional["asyncio.Task[None]"], signum: int) -> None:
    logger.info(f"Signal {signal.Signals(signum).name} is received. Stopping.")
    if task is not None:
        task.cancel()
