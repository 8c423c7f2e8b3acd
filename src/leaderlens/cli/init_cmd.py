"""leaderlens init — scaffold a new catalog."""

from __future__ import annotations

import click

from leaderlens.catalog.workspace import open_store, save_config
from leaderlens.models.config import CatalogConfig
from leaderlens.utils.progress import log_error, log_success, show_summary


@click.command()
@click.option("--name", default="Interview Catalog", help="Catalog name")
@click.option("--store-dir", default="store", help="Document store directory, relative to the config")
@click.option("--model", default=None, help="LLM model used for annotation")
@click.option("--force", is_flag=True, help="Overwrite an existing catalog.yaml")
@click.pass_context
def init_cmd(
    ctx: click.Context,
    name: str,
    store_dir: str,
    model: str | None,
    force: bool,
) -> None:
    """Create catalog.yaml and an empty document store."""
    config_path = ctx.obj["config_path"]
    if config_path.exists() and not force:
        log_error(f"Catalog already exists: {config_path} (use --force to overwrite)")
        raise SystemExit(1)

    config = CatalogConfig(name=name, store_dir=store_dir)
    if model:
        config.gateway.llm_model = model

    config_path.parent.mkdir(parents=True, exist_ok=True)
    save_config(config_path, config)
    store = open_store(config_path, config)
    store.leaders_dir.mkdir(parents=True, exist_ok=True)

    log_success(f"Catalog created: {config_path}")
    show_summary(config.name, {
        "Config": config_path,
        "Store": store.root,
        "Model": config.gateway.llm_model,
    })
