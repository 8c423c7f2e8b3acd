"""Root CLI group for LeaderLens."""

from __future__ import annotations

from pathlib import Path

import click

from leaderlens import __version__
from leaderlens.utils.progress import set_quiet


@click.group()
@click.version_option(version=__version__, prog_name="leaderlens")
@click.option(
    "--catalog", "-c",
    default="catalog.yaml",
    type=click.Path(),
    help="Path to catalog.yaml",
)
@click.option("--quiet", "-q", is_flag=True, help="Only show errors and results")
@click.pass_context
def cli(ctx: click.Context, catalog: str, quiet: bool) -> None:
    """LeaderLens — interview cataloging, AI annotation and theme analytics."""
    set_quiet(quiet)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(catalog).resolve()


# Import and register subcommands
from leaderlens.cli.init_cmd import init_cmd  # noqa: E402
from leaderlens.cli.leader_cmd import leader_cmd  # noqa: E402
from leaderlens.cli.versions_cmd import versions_cmd  # noqa: E402
from leaderlens.cli.annotate_cmd import annotate_cmd  # noqa: E402
from leaderlens.cli.themes_cmd import network_cmd, themes_cmd  # noqa: E402
from leaderlens.cli.topics_cmd import topics_cmd  # noqa: E402

cli.add_command(init_cmd, "init")
cli.add_command(leader_cmd, "leader")
cli.add_command(versions_cmd, "versions")
cli.add_command(annotate_cmd, "annotate")
cli.add_command(themes_cmd, "themes")
cli.add_command(network_cmd, "network")
cli.add_command(topics_cmd, "topics")
