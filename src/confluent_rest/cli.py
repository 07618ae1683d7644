"""CLI interface for confluent-rest"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import click

from confluent_rest.domain.retry_policy import RETRY_POLICIES
from confluent_rest.infrastructure.cancellation import CancellationToken
from confluent_rest.infrastructure.config.config_manager import ConfigManager
from confluent_rest.infrastructure.http_client import DEFAULT_BASE_URL, ConfluentClient

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def _parse_body(data: Optional[str]) -> Any:
    if data is None:
        return None
    try:
        return json.loads(data)
    except ValueError as e:
        raise click.BadParameter(f"--data must be valid JSON: {e}") from e


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .confluent.yml config file",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path):
    """confluent-rest - Confluent Cloud REST client with retry"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("method", type=click.Choice(["GET", "POST", "PUT", "PATCH", "DELETE"], case_sensitive=False))
@click.argument("path", type=str)
@click.option("--data", type=str, help="JSON request body")
@click.option("--max-attempts", type=int, help="Total attempts including the first. Overrides config.")
@click.option(
    "--policy",
    type=click.Choice(list(RETRY_POLICIES.keys()), case_sensitive=False),
    help="Retry classification policy. Overrides config.",
)
@click.option("--no-jitter", is_flag=True, help="Disable backoff jitter")
@click.option("--timeout", type=float, help="Give up on the whole call after this many seconds")
@click.pass_context
def request(
    ctx,
    method: str,
    path: str,
    data: Optional[str],
    max_attempts: Optional[int],
    policy: Optional[str],
    no_jitter: bool,
    timeout: Optional[float],
):
    """Issue a single API call with automatic retry.

    METHOD: HTTP method
    PATH: Path relative to the API base URL (e.g. '/org/v2/environments')
    """
    verbose = ctx.obj.get("verbose", False)
    body = _parse_body(data)

    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
        api_config = config_manager.get_api_config()

        retry_config = config_manager.get_retry_config()
        if max_attempts is not None:
            retry_config = retry_config.with_max_attempts(max_attempts)
        if no_jitter:
            retry_config = retry_config.with_jitter(False)
        retry_config = retry_config.with_classification_policy(policy)

        try:
            client = ConfluentClient(
                base_url=api_config.base_url,
                api_key=api_config.api_key,
                api_secret=api_config.api_secret,
                timeout=api_config.timeout,
                retry_config=retry_config,
            )
        except ValueError as e:
            _die(str(e), verbose=verbose, exc=e)

        cancel = CancellationToken(timeout=timeout) if timeout is not None else None
        logger.info(f"{method.upper()} {path} (policy={retry_config.policy_name}, attempts={retry_config.max_attempts})")
        response = client.request(method, path, body=body, cancel=cancel)

        payload = response.json()
        if payload is None:
            click.echo(f"HTTP {response.status_code} (empty body)")
        else:
            click.echo(json.dumps(payload, indent=2))

    except click.ClickException:
        raise
    except Exception as e:
        _die(f"Request failed: {e}", verbose=verbose, exc=e)


@cli.command("show-config")
@click.pass_context
def show_config(ctx):
    """Print the effective API endpoint and retry settings."""
    verbose = ctx.obj.get("verbose", False)
    try:
        config_manager = ConfigManager(config_path=ctx.obj.get("config_path"))
    except Exception as e:
        _die(f"Fatal error: {e}", verbose=verbose, exc=e)

    api_config = config_manager.get_api_config()
    retry_config = config_manager.get_retry_config()

    click.echo(f"Base URL: {api_config.base_url or DEFAULT_BASE_URL}")
    click.echo(f"API key configured: {'yes' if api_config.api_key else 'no'}")
    click.echo(f"Request timeout: {api_config.timeout}s")
    click.echo(f"Max attempts: {retry_config.max_attempts}")
    click.echo(f"Initial backoff: {retry_config.initial_backoff}s")
    click.echo(f"Max backoff: {retry_config.max_backoff}s")
    click.echo(f"Multiplier: {retry_config.multiplier}")
    click.echo(f"Jitter: {'on' if retry_config.jitter else 'off'}")
    click.echo(f"Policy: {retry_config.policy_name}")


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
