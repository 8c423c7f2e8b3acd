"""Shared helpers for subcommands."""

from __future__ import annotations

from pathlib import Path

import click

from leaderlens.catalog.store import LeaderStore
from leaderlens.catalog.workspace import load_config, open_store
from leaderlens.models.config import CatalogConfig
from leaderlens.utils.io import write_json
from leaderlens.utils.progress import log_error


def open_catalog(ctx: click.Context) -> tuple[CatalogConfig, LeaderStore]:
    """Load the catalog named on the root group, or exit if it is missing."""
    config_path: Path = ctx.obj["config_path"]
    if not config_path.exists():
        log_error(f"Catalog not found: {config_path} (run `leaderlens init`)")
        raise SystemExit(1)
    try:
        config = load_config(config_path)
    except Exception as e:
        log_error(f"Invalid catalog config: {e}")
        raise SystemExit(1)
    return config, open_store(config_path, config)


def write_output(path: str, data: dict) -> None:
    write_json(Path(path), data)
