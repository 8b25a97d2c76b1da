"""Filesystem helpers."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

from clinic_points.common.errors import ConfigError, InputError, OutputError


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot load YAML from {path}: {exc}") from exc


def read_lines(path: Path) -> list[str]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return f.readlines()
    except (OSError, UnicodeDecodeError) as exc:
        raise InputError(f"Cannot read input listing {path}: {exc}") from exc


def is_stdout_target(path: str | Path | None) -> bool:
    return path is None or str(path) in ("", "-")


@contextmanager
def open_output(path: str | Path | None) -> Iterator[IO[str]]:
    """Yield a writable text stream: stdout for ``None``/``-``, else a created file."""
    if is_stdout_target(path):
        yield sys.stdout
        sys.stdout.flush()
        return

    out_path = Path(path)
    try:
        ensure_dir(out_path.parent)
        f = out_path.open("w", encoding="utf-8")
    except OSError as exc:
        raise OutputError(f"Cannot create output file {out_path}: {exc}") from exc
    with f:
        yield f
