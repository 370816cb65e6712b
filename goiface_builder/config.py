from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any


FORMATTERS = {"builtin", "gofmt"}
DEFAULT_GOFMT_COMMAND = ("gofmt",)


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class Config:
    path: Path | None
    raw: dict[str, Any]
    formatter: str
    gofmt_command: tuple[str, ...]
    match_pointer_receivers: bool


def default_config() -> Config:
    return Config(
        path=None,
        raw={},
        formatter="builtin",
        gofmt_command=DEFAULT_GOFMT_COMMAND,
        match_pointer_receivers=True,
    )


def load_config(path: Path) -> Config:
    if not path.exists():
        raise ConfigError(f"CONFIG_NOT_FOUND: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"CONFIG_INVALID_JSON: {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"CONFIG_INVALID_VALUE: {path}: top level must be an object")
    return config_from_dict(raw, path)


def config_from_dict(raw: dict[str, Any], path: Path | None = None) -> Config:
    where = path if path is not None else "<config>"

    formatter = raw.get("formatter", "builtin")
    if formatter not in FORMATTERS:
        raise ConfigError(
            f"CONFIG_INVALID_VALUE: {where}: formatter must be one of {sorted(FORMATTERS)}, got {formatter!r}"
        )

    gofmt_command = raw.get("gofmt_command", list(DEFAULT_GOFMT_COMMAND))
    if isinstance(gofmt_command, str):
        gofmt_command = [gofmt_command]
    if (
        not isinstance(gofmt_command, list)
        or not gofmt_command
        or not all(isinstance(part, str) and part for part in gofmt_command)
    ):
        raise ConfigError(f"CONFIG_INVALID_VALUE: {where}: gofmt_command must be a non-empty list of strings")

    match_pointer_receivers = raw.get("match_pointer_receivers", True)
    if not isinstance(match_pointer_receivers, bool):
        raise ConfigError(f"CONFIG_INVALID_VALUE: {where}: match_pointer_receivers must be a boolean")

    return Config(
        path=path,
        raw=raw,
        formatter=formatter,
        gofmt_command=tuple(gofmt_command),
        match_pointer_receivers=match_pointer_receivers,
    )
