"""
tezrpc CLI

Command-line access to a Tezos node's RPC interface.

Commands:
  head       - Show the current chain head
  constants  - Bootstrap and print the network constants
  balance    - Show the balance of an address
  call       - Issue a raw GET/POST/DELETE against the node
"""

from __future__ import annotations

import json
import logging
import sys
from typing import NoReturn, Optional

import click

from .config import ClientConfig
from .observability import configure_logging
from .rpc import blocks
from .rpc.client import TezosClient, new
from .rpc.errors import TezosError
from .rpc.query import RPCOption
from .utils import mutez_to_tez


# ============ Constants ============

VERSION = "1.0.0"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


# ============ Helpers ============


class _Settings:
    def __init__(self, host: Optional[str], config: ClientConfig) -> None:
        self.host = host
        self.config = config

    def client(self) -> TezosClient:
        return TezosClient(self.host, config=self.config)


def _fail(action: str, exc: TezosError) -> NoReturn:
    click.secho(f"{action} failed: {exc}", fg="red", err=True)
    sys.exit(exc.exit_code)


def _parse_param(value: str) -> RPCOption:
    if "=" not in value:
        raise click.BadParameter(f"expected key=value, got {value!r}")
    key, val = value.split("=", 1)
    return RPCOption(key, val)


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="tezrpc")
@click.option(
    "--host",
    envvar="TEZOS_RPC_URL",
    default=None,
    help="Tezos node URL (default: http://localhost:8732)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
)
@click.option("--log-json", is_flag=True, help="Emit JSON log lines")
@click.pass_context
def cli(ctx: click.Context, host: Optional[str], log_level: str, log_json: bool) -> None:
    """tezrpc: talk to a Tezos node over RPC."""
    configure_logging(level=getattr(logging, log_level.upper()), json_format=log_json)
    try:
        config = ClientConfig.from_env()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    ctx.obj = _Settings(host, config)


# ============ Commands ============


@cli.command()
@click.pass_obj
def head(settings: _Settings) -> None:
    """Show the current chain head."""
    try:
        block = settings.client().head()
    except TezosError as exc:
        _fail("Head", exc)

    click.echo(f"Hash:     {block.hash}")
    click.echo(f"Level:    {block.level}")
    click.echo(f"Protocol: {block.protocol}")
    if block.timestamp:
        click.echo(f"Time:     {block.timestamp}")


@cli.command()
@click.pass_obj
def constants(settings: _Settings) -> None:
    """Bootstrap against the node and print its network constants."""
    client, error = new(settings.host, config=settings.config)
    if error is not None:
        _fail("Bootstrap", error)

    click.echo(json.dumps(client.constants.to_dict(), indent=2, sort_keys=True))


@cli.command()
@click.argument("address")
@click.option("--block", "block_id", default="head", show_default=True, help="Block hash or alias")
@click.pass_obj
def balance(settings: _Settings, address: str, block_id: str) -> None:
    """Show the balance of ADDRESS."""
    try:
        amount = blocks.balance(settings.client(), block_id, address)
    except TezosError as exc:
        _fail("Balance", exc)

    click.secho(f"{mutez_to_tez(amount)} tez", fg="green")
    click.echo(f"({amount} mutez)")


@cli.command()
@click.argument("method", type=click.Choice(["GET", "POST", "DELETE"], case_sensitive=False))
@click.argument("path")
@click.option("--data", "-d", default=None, help="Request body (POST only)")
@click.option("--param", "-p", "params", multiple=True, help="Query parameter key=value")
@click.pass_obj
def call(
    settings: _Settings,
    method: str,
    path: str,
    data: Optional[str],
    params: tuple[str, ...],
) -> None:
    """Issue a raw RPC call and print the response body."""
    if not path.startswith("/"):
        raise click.BadParameter("path must start with '/'", param_hint="PATH")

    method = method.upper()
    if data is not None and method != "POST":
        raise click.BadParameter("only valid with POST", param_hint="--data")

    options = [_parse_param(p) for p in params]
    client = settings.client()

    try:
        if method == "POST":
            body = client.post(path, data or "", *options)
        elif method == "DELETE":
            body = client.delete(path, *options)
        else:
            body = client.get(path, *options)
    except TezosError as exc:
        _fail("Call", exc)

    click.echo(body.decode("utf-8", errors="replace"))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
