"""leaderlens versions — manage a leader's analysis versions."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from leaderlens.catalog.store import InvalidVersionIndexError, LeaderNotFoundError
from leaderlens.cli.common import open_catalog
from leaderlens.utils.progress import log_error, log_success

console = Console()


@click.group()
def versions_cmd() -> None:
    """List, delete and designate analysis versions.

    Versions are addressed by their position as shown by `versions list`.
    """


@versions_cmd.command("list")
@click.argument("name")
@click.pass_context
def list_versions(ctx: click.Context, name: str) -> None:
    """List the analysis versions of a leader."""
    _, store = open_catalog(ctx)
    try:
        leader = store.get(name)
    except LeaderNotFoundError as e:
        log_error(str(e))
        raise SystemExit(1)

    table = Table(title=f"Analysis versions — {leader.display_title}")
    table.add_column("#", justify="right")
    table.add_column("Version")
    table.add_column("Created")
    table.add_column("Q&A", justify="right")
    table.add_column("Chapters", justify="right")
    table.add_column("Default")
    for i, version in enumerate(leader.analysis_versions):
        created = version.timestamp.strftime("%Y-%m-%d %H:%M") if version.timestamp else "—"
        is_default = version.version_id == leader.latest_analysis_version
        table.add_row(
            str(i),
            version.version_id,
            created,
            str(len(version.qa_segments)),
            str(len(version.chapter_markers)),
            "[green]●[/green]" if is_default else "",
        )
    console.print(table)


@versions_cmd.command("delete")
@click.argument("name")
@click.argument("index", type=int)
@click.pass_context
def delete(ctx: click.Context, name: str, index: int) -> None:
    """Delete the version at INDEX."""
    _, store = open_catalog(ctx)
    try:
        leader = store.delete_version(name, index)
    except (LeaderNotFoundError, InvalidVersionIndexError) as e:
        log_error(str(e))
        raise SystemExit(1)
    default = leader.latest_analysis_version or "none"
    log_success(f"Deleted version {index}; default is now {default}")


@versions_cmd.command("default")
@click.argument("name")
@click.argument("index", type=int)
@click.pass_context
def set_default(ctx: click.Context, name: str, index: int) -> None:
    """Designate the version at INDEX as the default."""
    _, store = open_catalog(ctx)
    try:
        leader = store.set_default_version(name, index)
    except (LeaderNotFoundError, InvalidVersionIndexError) as e:
        log_error(str(e))
        raise SystemExit(1)
    log_success(f"Default version is now {leader.latest_analysis_version}")
