"""
config.py

Responsibility: Load the optional `.xchelper.yml` config file and set up logging.

The config file is a flat YAML mapping keyed by the same uppercase names that
the environment uses, e.g.:

    DOCKER_BUILD_IMAGE_NAME: swift:5.10
    UPLOAD_ARCHIVE_S3_BUCKET: my-releases
    GIT_TAG_PUSH: true

Values sit below the environment and above declared defaults in the lookup
order (see `arguments.py`).
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from xchelper.errors import ConfigError

CONFIG_FILENAME = ".xchelper.yml"
CONFIG_ENV = "XCHELPER_CONFIG"
LOG_LEVEL_ENV = "XCHELPER_LOG_LEVEL"

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _scalar_to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def find_config_file(environ: Mapping[str, str], cwd: str | Path) -> Path | None:
    explicit = environ.get(CONFIG_ENV)
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise ConfigError(f"Config file does not exist: {path}")
        return path
    candidate = Path(cwd) / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def parse_config(text: str, known_keys: Iterable[str]) -> dict[str, list[str]]:
    """
    Parse config text into `{ENV_KEY: [values...]}`.

    Lists become multiple values; None values are dropped.
    """
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ConfigError("Config file must be a mapping/object at the top level.")

    known = set(known_keys)
    out: dict[str, list[str]] = {}
    for raw_key, raw_value in data.items():
        key = str(raw_key).strip()
        if key not in known:
            raise ConfigError(f"Unknown config key: {key}")
        if raw_value is None:
            continue
        if isinstance(raw_value, dict):
            raise ConfigError(f"`{key}` must be a scalar or a list.")
        if isinstance(raw_value, list):
            out[key] = [_scalar_to_str(v) for v in raw_value if v is not None]
        else:
            out[key] = [_scalar_to_str(raw_value)]
    return out


def load_config(environ: Mapping[str, str], cwd: str | Path, known_keys: Iterable[str]) -> dict[str, list[str]]:
    path = find_config_file(environ, cwd)
    if path is None:
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    try:
        return parse_config(text, known_keys)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e


def configure_logging(environ: Mapping[str, str]) -> None:
    level_name = (environ.get(LOG_LEVEL_ENV) or "WARNING").strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.WARNING
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=level, handlers=[handler], force=True)
