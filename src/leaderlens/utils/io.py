"""File I/O for catalog documents — atomic writes, YAML config, JSON documents."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any, Iterator

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

_yaml = YAML()
_yaml.preserve_quotes = True
_yaml.default_flow_style = False

_MISSING = object()


class DocumentReadError(ValueError):
    """Raised when a stored document exists but cannot be decoded."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Cannot read {path.name}: {reason}")


def write_atomic(path: Path | str, data: Any, *, as_yaml: bool = False) -> None:
    """Write to a sibling temp file, then swap it into place.

    Readers never see a half-written document.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.stem}-",
        suffix=path.suffix,
        delete=False,
        encoding="utf-8",
    ) as tmp:
        if as_yaml:
            _yaml.dump(data, tmp)
        else:
            json.dump(data, tmp, indent=2, ensure_ascii=False, default=str)
            tmp.write("\n")
        tmp_path = Path(tmp.name)

    tmp_path.replace(path)


def read_yaml(path: Path | str) -> dict:
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = _yaml.load(f)
    except YAMLError as e:
        raise DocumentReadError(path, str(e)) from e
    return dict(data or {})


def write_yaml(path: Path | str, data: dict) -> None:
    write_atomic(path, data, as_yaml=True)


def read_json(path: Path | str, default: Any = _MISSING) -> Any:
    """Read a JSON document; ``default`` is returned if the file is absent."""
    path = Path(path)
    if default is not _MISSING and not path.exists():
        return default
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise DocumentReadError(path, str(e)) from e


def write_json(path: Path | str, data: Any) -> None:
    write_atomic(path, data)


def iter_json_documents(directory: Path | str) -> Iterator[tuple[Path, Any]]:
    """Yield (path, data) for every ``*.json`` file, in filename order.

    Undecodable files are yielded with a ``DocumentReadError`` as data so
    the caller decides whether to skip them.
    """
    directory = Path(directory)
    if not directory.is_dir():
        return
    for path in sorted(directory.glob("*.json")):
        if path.name.startswith("."):
            continue
        try:
            yield path, read_json(path)
        except DocumentReadError as e:
            yield path, e
