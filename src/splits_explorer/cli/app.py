from pathlib import Path
from typing import Annotated

import typer

from splits_explorer.cli._logging import configure_logging
from splits_explorer.cli._output import (
    console,
    print_baseline_status,
    print_candidates,
    print_error,
    print_split_table,
    print_views,
)
from splits_explorer.cli.factory import build_session
from splits_explorer.config import ConfigError, ExplorerSettings, create_config, load_settings
from splits_explorer.domain.columns import columns_for
from splits_explorer.domain.result import Err, Ok
from splits_explorer.domain.tier import StatContext
from splits_explorer.export.csv_export import export_table
from splits_explorer.services.split_views import COMPOUND_VIEWS, FLAT_VIEWS, UnknownViewError

app = typer.Typer(name="splits", help="Situational batting and pitching splits with tiered rates")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable DEBUG logging")] = False,
    quiet: Annotated[bool, typer.Option("--quiet", "-q", help="Only log warnings and errors")] = False,
    config_path: Annotated[str, typer.Option("--config", help="YAML settings file")] = "splits.yaml",
) -> None:
    """Situational split explorer."""
    configure_logging(verbose=verbose, quiet=quiet)
    ctx.obj = {"config_path": config_path}
    if ctx.invoked_subcommand is None:
        raise typer.Exit()


_SeasonOpt = Annotated[int | None, typer.Option("--season", help="Season year (defaults to configured season)")]


def _settings(ctx: typer.Context, season: int | None) -> ExplorerSettings:
    config_path = (ctx.obj or {}).get("config_path", "splits.yaml")
    try:
        return load_settings(create_config(yaml_path=config_path), season=season)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=2) from None


@app.command()
def search(
    ctx: typer.Context,
    query: Annotated[str, typer.Argument(help="Part of a player's name")],
    season: _SeasonOpt = None,
    team: Annotated[str | None, typer.Option("--team", help="Restrict to a team code, e.g. NYY")] = None,
    limit: Annotated[int, typer.Option("--limit", min=1, max=100, help="Maximum candidates")] = 20,
) -> None:
    """Find players with split data."""
    with build_session(_settings(ctx, season)) as session:
        match session.search(query, team=team, limit=limit):
            case Ok(candidates):
                print_candidates(candidates)
            case Err(e):
                print_error(e.message)
                raise typer.Exit(code=1)


@app.command()
def views() -> None:
    """List the available split views."""
    print_views(list(FLAT_VIEWS), list(COMPOUND_VIEWS))


@app.command()
def show(
    ctx: typer.Context,
    team: Annotated[str, typer.Argument(help="Team code, e.g. NYY")],
    player: Annotated[str, typer.Argument(help="Player name, e.g. 'Aaron Judge'")],
    season: _SeasonOpt = None,
    view: Annotated[str, typer.Option("--view", help="Split view (see `splits views`)")] = "location",
    mode: Annotated[StatContext, typer.Option("--mode", help="Batting or pitching columns")] = StatContext.BATTING,
    sort: Annotated[str | None, typer.Option("--sort", help="Column key to sort by, e.g. ops or label")] = None,
    ascending: Annotated[bool, typer.Option("--asc", help="Sort ascending")] = False,
    text_filter: Annotated[str | None, typer.Option("--filter", help="Only splits whose label contains this")] = None,
    total: Annotated[bool, typer.Option("--total", help="Append a total row to flat views")] = False,
    combine: Annotated[
        list[str] | None, typer.Option("--combine", help="Bucket key to fold into a combined row (repeatable)")
    ] = None,
    csv_path: Annotated[Path | None, typer.Option("--csv", help="Also write the view to this CSV file")] = None,
) -> None:
    """Show a player's situational splits with tiered rates."""
    if view not in FLAT_VIEWS and view not in COMPOUND_VIEWS:
        print_error(f"Unknown view {view!r}. Run `splits views` for the list.")
        raise typer.Exit(code=2)

    settings = _settings(ctx, season)
    with build_session(settings) as session:
        match session.load(team, player, settings.season):
            case Err(e):
                reason = "No split data found" if e.not_found else "Failed to load splits"
                print_error(f"{reason} for {player} ({team.upper()}, {settings.season}): {e.message}")
                raise typer.Exit(code=1)
            case Ok(_):
                pass
        print_baseline_status(session.baseline)

        try:
            table = session.render(
                view,
                mode,
                sort_key=sort,
                descending=not ascending,
                text_filter=text_filter,
                include_total=total,
                combine=combine or (),
            )
        except UnknownViewError as e:
            print_error(str(e))
            raise typer.Exit(code=2) from None

        if combine and view in FLAT_VIEWS and session.combined(view, combine) is None:
            print_error(f"None of {', '.join(combine)} found in {view}")

        columns = columns_for(mode)
        title = f"{player} — {view} ({mode.value}, {settings.season})"
        print_split_table(table, columns, title)

        if csv_path is not None:
            csv_path.write_text(export_table(table, columns))
            console.print(f"Wrote {csv_path}")
