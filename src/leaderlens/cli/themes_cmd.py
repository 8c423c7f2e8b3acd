"""leaderlens themes / network — corpus theme analytics."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from leaderlens.cli.common import open_catalog, write_output
from leaderlens.themes.extract import SORT_ORDERS, extract_themes, rank_themes
from leaderlens.utils.progress import log, log_error, log_success, log_warning, plural

console = Console()

MODES = ("official", "custom")


@click.command()
@click.option("--mode", type=click.Choice(MODES), default=None, help="Official or custom themes")
@click.option("--sort", "sort_order", type=click.Choice(SORT_ORDERS), default="frequency")
@click.option("--limit", type=int, default=None, help="Show only the first N themes in sort order")
@click.pass_context
def themes_cmd(ctx: click.Context, mode: str | None, sort_order: str, limit: int | None) -> None:
    """Show how many interviews each theme appears in."""
    config, store = open_catalog(ctx)
    mode = mode or config.network.mode

    tallies = extract_themes(store.read_all())
    ranked = rank_themes(tallies.frequency(mode), sort=sort_order, limit=limit)
    if not ranked:
        console.print(f"[dim]No {mode} themes found. Annotate some interviews first.[/dim]")
        return

    table = Table(title=f"{mode.capitalize()} themes across {plural(tallies.interviews, 'interview')}")
    table.add_column("Theme", style="bold")
    table.add_column("Interviews", justify="right")
    for theme, count in ranked:
        table.add_row(theme, str(count))
    console.print(table)


@click.command()
@click.option("--mode", type=click.Choice(MODES), default=None)
@click.option("--threshold", type=click.IntRange(1, 10), default=None, help="Minimum co-occurrence")
@click.option("--max-nodes", type=click.Choice(["20", "30", "50", "100"]), default=None)
@click.option("--out", "-o", type=click.Path(), default=None, help="Write the layout JSON here")
@click.pass_context
def network_cmd(
    ctx: click.Context,
    mode: str | None,
    threshold: int | None,
    max_nodes: str | None,
    out: str | None,
) -> None:
    """Build the theme co-occurrence network and lay it out."""
    config, store = open_catalog(ctx)

    from leaderlens.layout.network import layout_network
    from leaderlens.themes.network import build_network

    mode = mode or config.network.mode
    threshold = threshold or config.network.min_co_occurrence
    limit = int(max_nodes) if max_nodes else config.network.max_nodes

    tallies = extract_themes(store.read_all())
    network = build_network(tallies.frequency(mode), tallies.pairs(mode), threshold, limit)
    if not network.edges:
        log_warning(
            f"No theme connections at threshold {threshold}. "
            "Lower the threshold or annotate more interviews."
        )
        return

    log(f"{len(network.nodes)} themes, {len(network.edges)} connections")
    try:
        layout = layout_network(network, mode, config.layout)
    except ValueError as e:
        log_error(str(e))
        raise SystemExit(1)

    if out:
        write_output(out, layout.to_dict())
        log_success(f"Layout written to {out} ({layout.ticks} ticks)")
        return

    table = Table(title="Most connected themes")
    table.add_column("Theme", style="bold")
    table.add_column("Interviews", justify="right")
    table.add_column("Connections", justify="right")
    for node in sorted(layout.nodes, key=lambda n: -n.degree)[:15]:
        table.add_row(node.id, str(node.value), str(node.degree))
    console.print(table)
