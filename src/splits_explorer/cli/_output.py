from collections.abc import Sequence

from rich.console import Console
from rich.table import Table

from splits_explorer.domain.columns import Column
from splits_explorer.domain.load_state import LoadState
from splits_explorer.domain.player import PlayerCandidate
from splits_explorer.domain.split_row import SplitGroup, SplitRow, SplitTable
from splits_explorer.domain.tier import Tier
from splits_explorer.services.baseline_provider import BaselineProvider

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

TIER_STYLES: dict[Tier, str] = {
    Tier.POOR: "bold red",
    Tier.BELOW_AVERAGE: "red",
    Tier.AVERAGE: "",
    Tier.ABOVE_AVERAGE: "green",
    Tier.ELITE: "bold green",
}


def print_error(message: str) -> None:
    err_console.print(f"[red bold]Error:[/red bold] {message}")


def print_candidates(candidates: Sequence[PlayerCandidate]) -> None:
    if not candidates:
        console.print("No matching players.")
        return
    table = Table(title="Players")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Team")
    table.add_column("Season", justify="right")
    for c in candidates:
        table.add_row(c.id, c.name, c.team, str(c.season))
    console.print(table)


def print_baseline_status(provider: BaselineProvider) -> None:
    if provider.state is LoadState.ERROR:
        err_console.print(
            f"[yellow]League baseline unavailable for {provider.season}; tiers use the displayed sample.[/yellow]"
        )
    elif provider.current is None:
        err_console.print(f"[yellow]No league baseline for {provider.season}; tiers use the displayed sample.[/yellow]")


def _cell(table: SplitTable, group: SplitGroup, row: SplitRow, column: Column) -> str:
    stats = row.stats_for(table.context)
    text = column.format(getattr(stats, column.key, None))
    tier = table.tier(group.key, row.key, column.key)
    style = TIER_STYLES.get(tier, "") if tier is not None else ""
    return f"[{style}]{text}[/{style}]" if style and text else text


def print_split_table(table: SplitTable, columns: Sequence[Column], title: str) -> None:
    if not table.rows:
        console.print(f"No {table.view} splits to show.")
        return
    for group in table.groups:
        heading = f"{title} — {group.label}" if group.label else title
        rich_table = Table(title=heading)
        rich_table.add_column("Split", style="bold")
        for column in columns:
            rich_table.add_column(column.label, justify="right" if column.numeric else "left")
        for row in group.rows:
            rich_table.add_row(row.label, *(_cell(table, group, row, c) for c in columns))
        console.print(rich_table)


def print_views(flat: Sequence[str], compound: Sequence[str]) -> None:
    console.print("[bold]Flat views:[/bold]")
    for name in flat:
        console.print(f"  {name}")
    console.print("[bold]Grouped views:[/bold]")
    for name in compound:
        console.print(f"  {name}")
