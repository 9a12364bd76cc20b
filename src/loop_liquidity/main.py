"""CLI entrypoint for loop-liquidity."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Annotated, Any, TypeVar

import requests
import typer
from rich.console import Console

from .balances.formatter import format_balance_table
from .balances.reader import read_balances
from .dashboard.client import fetch_dashboard_data
from .errors import ConnectionCancelledError, LoopLiquidityError
from .logger import setup_logging
from .settings import CONFIG_ENV_VAR, LoopSettings, Network
from .state import AppState
from .transactions.poller import await_finality
from .transactions.models import LoopDepositRequest
from .transactions.submitter import prepare_loop_deposit, submit_loop_deposit
from .wallet.bridge import BridgeWalletProvider
from .wallet.session import ConnectOptions, WalletSession, connect
from .wallet.store import SessionStore, logout as clear_session

T = TypeVar("T")

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Approve and deposit into loop liquidity pools through a Starknet wallet.",
)

err_console = Console(stderr=True)


def _build_logger() -> logging.Logger:
    return logging.getLogger("loop_liquidity")


def _state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if not isinstance(state, AppState):
        raise typer.BadParameter("CLI state was not initialised")
    return state


def _run(coro_factory: Callable[[], Awaitable[T]]) -> T:
    """Run a coroutine and turn package errors into a clean exit."""

    async def _main() -> T:
        return await coro_factory()

    try:
        return asyncio.run(_main())
    except ConnectionCancelledError as e:
        err_console.print(f"[yellow]Cancelled:[/] {e}")
        raise typer.Exit(code=1) from e
    except LoopLiquidityError as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(code=1) from e
    except requests.exceptions.RequestException as e:
        err_console.print(f"[red]Network error:[/] {e}")
        raise typer.Exit(code=1) from e


def _provider(state: AppState) -> BridgeWalletProvider:
    try:
        return BridgeWalletProvider.from_settings(state.settings)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint=["LOOP_LIQUIDITY_WALLET_URL"]) from e


def _store(state: AppState) -> SessionStore:
    return SessionStore(state.settings.session_file)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [loop_liquidity] table).",
        ),
    ] = None,
    network: Annotated[
        Network | None,
        typer.Option("--network", "-n", help="Network to use (mainnet or sepolia)."),
    ] = None,
    rpc_url: Annotated[
        str | None,
        typer.Option("--rpc-url", help="Starknet node RPC; overrides the network default."),
    ] = None,
    wallet_url: Annotated[
        str | None,
        typer.Option("--wallet-url", help="Wallet API endpoint used for signing."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    show_config: Annotated[
        bool,
        typer.Option(
            "--show-config",
            help="Print effective config (with secrets redacted) and exit.",
        ),
    ] = False,
):
    """Load configuration shared by every command."""
    if config_path:
        os.environ[CONFIG_ENV_VAR] = str(config_path)

    init_kwargs: dict[str, Any] = {}
    if network is not None:
        init_kwargs["network"] = network
    if rpc_url is not None:
        init_kwargs["rpc_url"] = rpc_url
    if wallet_url is not None:
        init_kwargs["wallet_url"] = wallet_url
    if log_level is not None:
        init_kwargs["log_level"] = log_level.upper()

    settings = LoopSettings(**init_kwargs)
    setup_logging(settings.log_level)
    ctx.obj = AppState(settings=settings, logger=_build_logger())

    if show_config:
        typer.echo(json.dumps(settings.as_safe_dict(), indent=2))
        raise typer.Exit(code=0)


@app.command("connect")
def connect_command(
    ctx: typer.Context,
    silent: Annotated[
        bool,
        typer.Option("--silent", help="Reuse an existing authorisation without prompting."),
    ] = False,
):
    """Connect the wallet and remember its address."""
    state = _state(ctx)

    async def _connect() -> str:
        provider = _provider(state)
        try:
            options = ConnectOptions(
                silent=silent, modal_mode="canAsk" if silent else "alwaysAsk"
            )
            session = await connect(provider, options, store=_store(state))
            return session.current_address()
        finally:
            await provider.close()

    typer.echo(_run(_connect))


@app.command("balances")
def balances_command(
    ctx: typer.Context,
    address: Annotated[
        str | None,
        typer.Argument(help="Account to inspect; defaults to the connected wallet."),
    ] = None,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print symbol -> amount as JSON.")
    ] = False,
):
    """Show ETH, USDC and STRK balances."""
    state = _state(ctx)
    settings = state.settings

    async def _balances():
        provider = _provider(state)
        try:
            if address:
                session = WalletSession(provider)
                owner = address
            else:
                session = await connect(
                    provider, ConnectOptions(silent=True, modal_mode="canAsk")
                )
                owner = session.current_address()
            result = await read_balances(
                session,
                owner,
                settings.tokens,
                decimals=settings.balance_decimals,
                places=settings.balance_display_places,
            )
            return owner, result
        finally:
            await provider.close()

    owner, result = _run(_balances)
    if as_json:
        typer.echo(json.dumps(result.as_display(), indent=2))
    else:
        format_balance_table(owner, result)
    if result.failed_symbols:
        state.logger.warning(
            "Balance lookup failed for: %s", ", ".join(result.failed_symbols)
        )


@app.command("deposit")
def deposit_command(
    ctx: typer.Context,
    request_file: Annotated[
        Path,
        typer.Argument(
            exists=True,
            dir_okay=False,
            help="JSON file with approve_data and loop_liquidity_data.",
        ),
    ],
):
    """Approve the spender, then deposit into the pool, waiting for each."""
    state = _state(ctx)
    try:
        payload = json.loads(request_file.read_text())
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"Invalid JSON: {e}", param_hint="REQUEST_FILE") from e

    async def _deposit():
        request = LoopDepositRequest.from_dict(payload)
        prepare_loop_deposit(request)
        provider = _provider(state)
        try:
            session = await connect(provider, store=_store(state))
            return await submit_loop_deposit(
                session, request, state.settings.poll_policy
            )
        finally:
            await provider.close()

    result = _run(_deposit)
    typer.echo(json.dumps(result.to_dict(), indent=2))


@app.command("wait")
def wait_command(
    ctx: typer.Context,
    transaction_hash: Annotated[str, typer.Argument(help="Transaction hash to watch.")],
):
    """Wait until a transaction is accepted."""
    state = _state(ctx)

    async def _wait():
        provider = _provider(state)
        try:
            return await await_finality(
                WalletSession(provider), transaction_hash, state.settings.poll_policy
            )
        finally:
            await provider.close()

    receipt = _run(_wait)
    typer.echo(
        json.dumps(
            {
                "transaction_hash": receipt.transaction_hash,
                "finality_status": receipt.finality_status,
                "execution_status": receipt.execution_status,
            },
            indent=2,
        )
    )


@app.command("dashboard")
def dashboard_command(
    ctx: typer.Context,
    wallet_id: Annotated[
        str | None,
        typer.Option("--wallet-id", help="Wallet id; defaults to the stored one."),
    ] = None,
):
    """Print the dashboard payload for the wallet."""
    state = _state(ctx)
    wallet_id = wallet_id or _store(state).load()

    data = _run(
        lambda: fetch_dashboard_data(
            state.settings.dashboard_api_url,
            wallet_id,
            timeout=state.settings.rpc_timeout,
        )
    )
    if data is None:
        err_console.print("No wallet id known; run `connect` or pass --wallet-id.")
        return
    typer.echo(json.dumps(data, indent=2))


@app.command("logout")
def logout_command(ctx: typer.Context):
    """Forget the stored wallet id."""
    clear_session(_store(_state(ctx)))


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
