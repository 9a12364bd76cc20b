"""Rich console output for token balances."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .reader import TokenBalanceSet


def _truncate_address(address: str) -> str:
    return f"{address[:10]}...{address[-4:]}"


def format_balance_table(
    address: str, balances: TokenBalanceSet, console: Console | None = None
) -> None:
    """Print balances as a table; failed lookups are flagged, not zeroed."""
    console = console or Console()

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 1))
    table.add_column("Token", style="cyan")
    table.add_column("Balance", justify="right")
    table.add_column("Contract", style="dim")

    for symbol, result in balances.balances.items():
        amount = balances.formatted(symbol)
        table.add_row(
            symbol,
            amount if amount is not None else "[red]lookup failed[/]",
            _truncate_address(result.token_address),
        )

    console.print(
        Panel(
            table,
            title=f"[bold]Balances[/] {_truncate_address(address)}",
            border_style="blue",
        )
    )
