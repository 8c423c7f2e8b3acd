"""leaderlens annotate — generate a new analysis version for a leader."""

from __future__ import annotations

import click

from leaderlens.cli.common import open_catalog
from leaderlens.utils.progress import log_error


@click.command()
@click.argument("name")
@click.pass_context
def annotate_cmd(ctx: click.Context, name: str) -> None:
    """Identify Q&A segments and chapters in NAME's transcript."""
    config, store = open_catalog(ctx)

    from leaderlens.annotation.annotate import annotate_leader
    from leaderlens.annotation.gateway import AnnotationGateway

    try:
        annotate_leader(store, AnnotationGateway(config.gateway), name)
    except Exception as e:
        log_error(f"Annotation failed: {e}")
        raise SystemExit(1)
