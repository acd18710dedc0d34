from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import Token
from datetime import date, datetime, time
from pathlib import Path
from typing import Iterator, TypeAlias
import tomllib

from pydantic import BaseModel, ConfigDict

from flip.policy import BoolPolicy, reset_bool_policy, set_bool_policy

DEFAULT_CONFIG_NAME = "flip.toml"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]

logger = logging.getLogger(__name__)


class FlipConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    bool_policy: BoolPolicy = BoolPolicy.COERCE

    @classmethod
    def from_table(cls, table: TomlTable | None) -> "FlipConfig":
        if not isinstance(table, dict):
            return cls()
        return cls.model_validate(table)


def _load_toml(path: Path) -> TomlTable:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError):
        return {}
    except tomllib.TOMLDecodeError:
        logger.debug("ignoring malformed config file %s", path)
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def flip_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("flip", {})
    return section if isinstance(section, dict) else {}


def read_config(root: Path | None = None, config_path: Path | None = None) -> FlipConfig:
    config = FlipConfig.from_table(flip_defaults(root=root, config_path=config_path))
    logger.debug("loaded flip config: bool_policy=%s", config.bool_policy.value)
    return config


def apply_config(config: FlipConfig) -> Token[BoolPolicy | None]:
    logger.debug("applying bool policy %s", config.bool_policy.value)
    return set_bool_policy(config.bool_policy)


@contextmanager
def config_scope(config: FlipConfig) -> Iterator[FlipConfig]:
    token = apply_config(config)
    try:
        yield config
    finally:
        reset_bool_policy(token)
