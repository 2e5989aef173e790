import functools
from typing import Any, Callable, Optional

import click

from tunnelkeeper._cogs.configs import configuration
from tunnelkeeper._cogs.structs import credentials, failures, trustpools
from tunnelkeeper._core.engines import loggers
from tunnelkeeper._core.reactor import running


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        if isinstance(value, loggers.LogFormat):
            return value
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


@click.version_option(prog_name='tunnelkeeper')
@click.group(name='tunnelkeeper', context_settings=dict(
    auto_envvar_prefix='TUNNELKEEPER',
))
def main() -> None:
    pass


@main.command()
@logging_options
@click.option('-n', '--namespace', type=str)
@click.option('--capool-config-map', type=str)
@click.option('--capool-secret', type=str)
@click.option('--capool-key', type=str)
@click.option('--capool-mount-path', type=str)
@click.option('--cloudflare-api-token', type=str, required=True, envvar='CLOUDFLARE_API_TOKEN')
@click.option('--cloudflare-account-id', type=str, required=True, envvar='CLOUDFLARE_ACCOUNT_ID')
@click.option('--cloudflare-tunnel-name', type=str, required=True, envvar='CLOUDFLARE_TUNNEL_NAME')
@click.option('--cloudflared-image', type=str, envvar='CLOUDFLARED_IMAGE')
@click.option('--cloudflared-image-pull-policy', type=str, envvar='CLOUDFLARED_IMAGE_PULL_POLICY')
@click.option('--cloudflared-replica-count', type=str, envvar='CLOUDFLARED_REPLICA_COUNT')
@click.option('--interval', type=click.FloatRange(min=0, min_open=True))
@click.option('--once', is_flag=True, default=None)
def run(
        namespace: Optional[str],
        capool_config_map: Optional[str],
        capool_secret: Optional[str],
        capool_key: Optional[str],
        capool_mount_path: Optional[str],
        cloudflare_api_token: str,
        cloudflare_account_id: str,
        cloudflare_tunnel_name: str,
        cloudflared_image: Optional[str],
        cloudflared_image_pull_policy: Optional[str],
        cloudflared_replica_count: Optional[str],
        interval: Optional[float],
        once: Optional[bool],
) -> None:
    """ Keep the tunnel connector provisioned in the namespace. """
    try:
        trust_pool = trustpools.resolve_trust_pool(
            config_map=capool_config_map,
            secret=capool_secret,
            key=capool_key,
            mount_path=capool_mount_path,
        )
    except failures.ConfigurationError as e:
        raise click.UsageError(str(e))

    settings = configuration.OperatorSettings()
    if cloudflared_image is not None:
        settings.connector.image = cloudflared_image
    if cloudflared_image_pull_policy is not None:
        settings.connector.image_pull_policy = cloudflared_image_pull_policy
    if cloudflared_replica_count is not None:
        settings.connector.replicas = cloudflared_replica_count
    if interval is not None:
        settings.reconciliation.interval = interval
    if once is not None:
        settings.reconciliation.once = once

    try:
        return running.run(
            namespace=namespace,
            trust_pool=trust_pool,
            cloudflare_api_token=cloudflare_api_token,
            cloudflare_account_id=cloudflare_account_id,
            cloudflare_tunnel_name=cloudflare_tunnel_name,
            settings=settings,
        )
    except (failures.ConfigurationError, credentials.LoginError) as e:
        raise click.ClickException(str(e))
