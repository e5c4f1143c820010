"""Command-line interface for the TDF client."""

import json
import logging
from typing import List, Optional

import typer
import yaml

from tdfclient.client import TdfClient
from tdfclient.config import load_config, settings_from_config, settings_from_env
from tdfclient.errors import TdfError, TransportError
from tdfclient.operations import DEFAULT_N, DEFAULT_SELECT, Security

app = typer.Typer(name="tdf", help="Tour de Finance trading client")

log = logging.getLogger("tdf")


@app.callback()
def main(
    ctx: typer.Context,
    protocol: Optional[str] = typer.Option(None, help="Protocol of the TDF server"),
    hostname: Optional[str] = typer.Option(None, help="Hostname of the TDF server"),
    port: Optional[int] = typer.Option(None, help="Port of the TDF server"),
    config: Optional[str] = typer.Option(None, help="YAML config file (default: $TDF_CONFIG or config/tdf.yaml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests"),
):
    """Talk to a Tour de Finance server."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    try:
        settings = settings_from_config(load_config(config), settings_from_env())
    except (ValueError, yaml.YAMLError) as exc:
        raise typer.BadParameter(str(exc)) from exc
    ctx.obj = settings.merged({"protocol": protocol, "hostname": hostname, "port": port})
    log.debug("server=%s", ctx.obj.base_url)


def _run(ctx: typer.Context, call):
    with TdfClient(ctx.obj) as client:
        try:
            result = call(client).result()
        except (TdfError, TransportError) as exc:
            typer.echo(f"error: {exc}", err=True)
            raise typer.Exit(code=1)
    typer.echo(json.dumps(result, indent=2))


def _parse_leg(text: str) -> Security:
    symbol, sep, amount = text.partition("=")
    if not sep or not symbol:
        raise typer.BadParameter(f"expected SYMBOL=AMOUNT, got {text!r}")
    try:
        value = int(amount)
    except ValueError:
        try:
            value = float(amount)
        except ValueError:
            raise typer.BadParameter(f"amount of {symbol} must be a number, got {amount!r}") from None
    return Security(symbol, value)


@app.command()
def version():
    """Print the tdfclient version."""
    from tdfclient import __version__
    typer.echo(f"tdfclient {__version__}")


@app.command()
def trade(
    ctx: typer.Context,
    agent_id: str = typer.Argument(..., help="Agent id"),
    legs: List[str] = typer.Argument(..., help="SYMBOL=AMOUNT, negative amounts sell"),
    api_key: str = typer.Option(..., "--api-key", envvar="TDF_API_KEY", help="Agent api key"),
):
    """Buy or sell securities for an agent."""
    securities = [_parse_leg(leg) for leg in legs]
    _run(ctx, lambda client: client.trade(securities, {"agentId": agent_id, "apiKey": api_key}))


@app.command()
def status(
    ctx: typer.Context,
    agent_id: str = typer.Argument(..., help="Agent id"),
    api_key: str = typer.Option(..., "--api-key", envvar="TDF_API_KEY", help="Agent api key"),
):
    """Show the composition of an agent."""
    _run(ctx, lambda client: client.agent_status({"agentId": agent_id, "apiKey": api_key}))


@app.command()
def history(
    ctx: typer.Context,
    symbol: Optional[str] = typer.Argument(None, help="Security symbol (all securities when omitted)"),
):
    """Show the price history of a security."""
    _run(ctx, lambda client: client.history(symbol))


@app.command("current-status")
def current_status(
    ctx: typer.Context,
    symbol: Optional[str] = typer.Option(None, help="Security symbol"),
):
    """Show the current status of all securities."""
    options = {"symbol": symbol} if symbol else {}
    _run(ctx, lambda client: client.current_status(options))


@app.command("all-histories")
def all_histories(
    ctx: typer.Context,
    select: str = typer.Option(DEFAULT_SELECT, help="all, bid, ask or last"),
    n: int = typer.Option(DEFAULT_N, "-n", help="Number of entries per security"),
):
    """Show all price histories."""
    _run(ctx, lambda client: client.all_histories({"select": select, "n": n}))


if __name__ == "__main__":
    app()
