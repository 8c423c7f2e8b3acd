"""Catalog workspace — ``catalog.yaml`` plus its document store."""

from __future__ import annotations

from pathlib import Path

from leaderlens.catalog.store import LeaderStore
from leaderlens.models.config import CatalogConfig
from leaderlens.utils.io import read_yaml, write_yaml


def load_config(config_path: Path) -> CatalogConfig:
    """Load ``catalog.yaml``; a missing file yields the defaults."""
    if not config_path.exists():
        return CatalogConfig()
    return CatalogConfig(**read_yaml(config_path))


def save_config(config_path: Path, config: CatalogConfig) -> None:
    write_yaml(config_path, config.model_dump(mode="json"))


def open_store(config_path: Path, config: CatalogConfig) -> LeaderStore:
    """Open the store, resolving ``store_dir`` against the config location."""
    store_dir = Path(config.store_dir)
    if not store_dir.is_absolute():
        store_dir = config_path.parent / store_dir
    return LeaderStore(store_dir)
