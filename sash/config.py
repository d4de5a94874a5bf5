#!/usr/bin/env python3
# sash/config.py
from __future__ import annotations

"""
Shell configuration.

Sources, later ones overriding earlier ones:
  1) DEFAULTS below
  2) files in the working directory, in this order:
     .env, sash.ini, sash.json, sash.toml
  3) SASH_* environment variables

File sections are folded into UPPER_SNAKE keys, so these are the same setting:
    sash.toml:  [sash]            environment:  SASH_HISTORY_SIZE=500
                history_size = 500

Keys:
  SASH_BACKEND         auto | prompt_toolkit | readline | plain
  SASH_PROMPT          default prompt text
  SASH_PROMPT_COLOR    style names from sash.ui.ANSI, comma separated
  SASH_HISTORY_DIR     directory for per-mode history files (not created here)
  SASH_HISTORY_SIZE    int >= 1
  SASH_UNIQUE_HISTORY  bool
  SASH_LOG_LEVEL       DEBUG | INFO | WARNING | ERROR | CRITICAL
  SASH_LOG_FILE_PATH   rotating log file
"""

import configparser
import json
import logging
import os
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from sash.ui import init_logger, validate_styles

DEFAULTS: dict[str, Any] = {
    "SASH_BACKEND": "auto",
    "SASH_PROMPT": ">",
    "SASH_PROMPT_COLOR": None,
    "SASH_HISTORY_DIR": None,
    "SASH_HISTORY_SIZE": 1000,
    "SASH_UNIQUE_HISTORY": True,
    "SASH_LOG_LEVEL": None,
    "SASH_LOG_FILE_PATH": None,
}

BACKEND_NAMES = ("auto", "prompt_toolkit", "readline", "plain")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_ENV_NAME = re.compile(r"SASH_[A-Z0-9_]+")
_DOTENV_LINE = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(.*)")


@dataclass(frozen=True)
class ShellConfig:
    backend: str = "auto"
    prompt: str = ">"
    prompt_color: tuple[str, ...] = ()
    history_dir: Optional[Path] = None
    history_size: int = 1000
    unique_history: bool = True
    log_level: Optional[str] = None
    log_file_path: Optional[Path] = None

    # SASH_* keys this version does not know about
    extra: dict[str, Any] = field(default_factory=dict)


# ---------- readers: each returns a flat {UPPER_KEY: value} dict ----------

def _fold_keys(data: Any, prefix: str = "") -> dict[str, Any]:
    """{'sash': {'history_size': 10}} -> {'SASH_HISTORY_SIZE': 10}"""
    folded: dict[str, Any] = {}
    if not isinstance(data, Mapping):
        return folded
    for key, value in data.items():
        name = f"{prefix}_{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            folded.update(_fold_keys(value, name))
        else:
            folded[name.upper()] = value
    return folded


def _read_dotenv(path: Path) -> dict[str, Any]:
    """KEY=VALUE lines; '#' comments, blank lines and malformed lines are skipped."""
    values: dict[str, Any] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line.startswith("#"):
            continue
        match = _DOTENV_LINE.fullmatch(line)
        if match is None:
            continue
        key, value = match.group(1), match.group(2).strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        values[key.upper()] = value
    return values


def _read_ini(path: Path) -> dict[str, Any]:
    parser = configparser.ConfigParser()
    with path.open(encoding="utf-8") as handle:
        parser.read_file(handle)
    return _fold_keys({section: dict(parser[section]) for section in parser.sections()})


def _read_json(path: Path) -> dict[str, Any]:
    try:
        return _fold_keys(json.loads(path.read_text(encoding="utf-8")))
    except json.JSONDecodeError:
        return {}


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return _fold_keys(tomllib.load(handle))
    except tomllib.TOMLDecodeError:
        return {}


_FILE_READERS: tuple[tuple[str, Callable[[Path], dict[str, Any]]], ...] = (
    (".env", _read_dotenv),
    ("sash.ini", _read_ini),
    ("sash.json", _read_json),
    ("sash.toml", _read_toml),
)


def _collect(directory: Path) -> dict[str, Any]:
    merged = dict(DEFAULTS)
    for filename, reader in _FILE_READERS:
        path = directory / filename
        if path.is_file():
            merged.update(reader(path))
    merged.update({key: value for key, value in os.environ.items()
                   if _ENV_NAME.fullmatch(key)})
    return merged


# ---------- converters ----------

_TRUE_WORDS = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "n", "off"})


def _is_unset(value: Any) -> bool:
    return value is None or str(value).strip().lower() in ("", "none")


def _to_backend(value: Any) -> str:
    name = str(value).strip().lower()
    if name not in BACKEND_NAMES:
        raise ValueError(f"SASH_BACKEND must be one of {list(BACKEND_NAMES)}, got {value!r}")
    return name


def _to_prompt(value: Any) -> str:
    return DEFAULTS["SASH_PROMPT"] if value is None else str(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ValueError(f"Expected a boolean, got {value!r}")


def _to_history_size(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"SASH_HISTORY_SIZE must be an integer, got {value!r}")
    try:
        size = int(str(value).strip())
    except ValueError:
        raise ValueError(f"SASH_HISTORY_SIZE must be an integer, got {value!r}") from None
    if size < 1:
        raise ValueError("SASH_HISTORY_SIZE must be >= 1")
    return size


def _to_log_level(value: Any) -> Optional[str]:
    if _is_unset(value):
        return None
    level = str(value).strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"SASH_LOG_LEVEL must be one of {list(LOG_LEVELS)}, got {value!r}")
    return level


def _to_path(value: Any) -> Optional[Path]:
    if _is_unset(value):
        return None
    return Path(os.path.expandvars(os.path.expanduser(str(value)))).resolve()


def _to_styles(value: Any) -> tuple[str, ...]:
    if _is_unset(value):
        return ()
    parts = value if isinstance(value, (list, tuple)) else str(value).split(",")
    return validate_styles([str(part).strip() for part in parts if str(part).strip()])


# config key -> (ShellConfig field, converter)
_FIELDS: dict[str, tuple[str, Callable[[Any], Any]]] = {
    "SASH_BACKEND": ("backend", _to_backend),
    "SASH_PROMPT": ("prompt", _to_prompt),
    "SASH_PROMPT_COLOR": ("prompt_color", _to_styles),
    "SASH_HISTORY_DIR": ("history_dir", _to_path),
    "SASH_HISTORY_SIZE": ("history_size", _to_history_size),
    "SASH_UNIQUE_HISTORY": ("unique_history", _to_bool),
    "SASH_LOG_LEVEL": ("log_level", _to_log_level),
    "SASH_LOG_FILE_PATH": ("log_file_path", _to_path),
}


def _build(raw: Mapping[str, Any]) -> ShellConfig:
    values = {attr: convert(raw.get(key, DEFAULTS[key]))
              for key, (attr, convert) in _FIELDS.items()}
    extra = {key: value for key, value in raw.items()
             if key.startswith("SASH_") and key not in _FIELDS}
    return ShellConfig(**values, extra=extra)


# ---------- public API ----------

def load_config(directory: Optional[Path] = None) -> ShellConfig:
    """
    Read every source for `directory` (default: the working directory) and
    return the validated result. Raises ValueError for invalid values.
    """
    return _build(_collect(Path(directory) if directory is not None else Path.cwd()))


def configure_logging(config: ShellConfig, name: str = "sash") -> logging.Logger:
    """Apply the logging keys of `config` to the package logger (INFO by default)."""
    return init_logger(name, level=config.log_level or logging.INFO,
                       logfile=config.log_file_path)
