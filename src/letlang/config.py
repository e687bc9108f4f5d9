"""Initial bindings and logging configuration for the Let-language tools.

Programs are evaluated under an environment that can be pre-populated from
YAML binding files:

    schema_version: "1.0"
    bindings:
      x: 33
      y: 22
      verbose: true

Search order for default binding files:
    1. Files listed in the LETLANG_BINDINGS environment variable
       (os.pathsep separated)
    2. User config file (~/.config/letlang/bindings.yaml)

Explicit files and NAME=VALUE overrides are layered on top, so a later
binding shadows an earlier one of the same name.

Environment Variables:
    LETLANG_BINDINGS: Binding files to load by default.
    LOGLEVEL: Logging level name for the command line tools (default WARNING).
"""

from __future__ import annotations

import logging
import os
import string
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from .errors import ConfigError
from .tokens import is_keyword
from .runtime.values import Value, int_val, bool_val
from .runtime.environment import Environment

__all__ = [
    "LETLANG_BINDINGS",
    "binding_paths",
    "load_bindings",
    "parse_binding",
    "initial_environment",
    "get_log_level",
    "clear_cache",
]

logger = logging.getLogger(__name__)

# Environment variable name for default binding files
LETLANG_BINDINGS = "LETLANG_BINDINGS"


def clear_cache() -> None:
    """Forget the cached default binding file search.

    Call this after changing LETLANG_BINDINGS or the user config file.
    """
    binding_paths.cache_clear()


@lru_cache(maxsize=None)
def binding_paths() -> tuple[Path, ...]:
    """Return default binding files that exist, in load order."""
    paths: List[Path] = []

    # 1. Environment variable
    env_path = os.environ.get(LETLANG_BINDINGS)
    if env_path:
        for p in env_path.split(os.pathsep):
            p = p.strip()
            if p:
                path = Path(p).expanduser().resolve()
                if path.is_file():
                    paths.append(path)
                else:
                    logger.warning("binding file %s from %s not found", path, LETLANG_BINDINGS)

    # 2. User config directory
    if sys.platform == "win32":
        config_base = Path(os.environ.get("APPDATA", "~")).expanduser()
    else:
        config_base = Path.home() / ".config"

    user_config = config_base / "letlang" / "bindings.yaml"
    if user_config.is_file():
        paths.append(user_config)

    return tuple(paths)


def _is_identifier(name: Any) -> bool:
    return (isinstance(name, str) and name != ""
            and all(ch in string.ascii_letters for ch in name)
            and not is_keyword(name))


def _to_value(name: str, raw: Any, origin: str) -> Value:
    """Convert a raw YAML/CLI scalar to a Value."""
    if isinstance(raw, bool):
        return bool_val(raw)
    if isinstance(raw, int):
        try:
            return int_val(raw)
        except ValueError as e:
            raise ConfigError(f"{origin}: binding '{name}': {e}") from e
    raise ConfigError(
        f"{origin}: binding '{name}' must be an integer or a boolean, got {raw!r}"
    )


def load_bindings(path: Path) -> Dict[str, Value]:
    """Load and validate a YAML binding file.

    Raises:
        FileNotFoundError: If path does not exist
        ConfigError: If the file has an invalid format
    """
    path = Path(path)
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid binding file {path}: expected mapping at root")

    schema_version = data.get("schema_version", "1.0")
    if not isinstance(schema_version, str) or not schema_version.startswith("1."):
        raise ConfigError(
            f"Unsupported schema version '{schema_version}' in {path}. "
            f"Expected version 1.x"
        )

    raw_bindings = data.get("bindings") or {}
    if not isinstance(raw_bindings, dict):
        raise ConfigError(f"Invalid binding file {path}: 'bindings' must be a mapping")

    bindings: Dict[str, Value] = {}
    for name, raw in raw_bindings.items():
        if not _is_identifier(name):
            raise ConfigError(f"{path}: '{name}' is not a valid variable name")
        bindings[name] = _to_value(name, raw, str(path))

    logger.debug("loaded %d binding(s) from %s", len(bindings), path)
    return bindings


def parse_binding(text: str) -> Tuple[str, Value]:
    """Parse a 'name=value' string into (name, Value).

    Values are 'true', 'false' or a decimal integer.
    """
    if '=' not in text:
        raise ConfigError(f"Invalid binding format: {text} (expected name=value)")

    name, value_str = text.split('=', 1)
    name = name.strip()
    value_str = value_str.strip()

    if not _is_identifier(name):
        raise ConfigError(f"'{name}' is not a valid variable name")

    if value_str == 'true':
        return (name, bool_val(True))
    if value_str == 'false':
        return (name, bool_val(False))

    try:
        raw = int(value_str)
    except ValueError:
        raise ConfigError(
            f"binding '{name}' must be an integer or true/false, got '{value_str}'"
        ) from None
    return (name, _to_value(name, raw, "command line"))


def initial_environment(
    paths: Optional[Iterable[Path]] = None,
    overrides: Optional[Dict[str, Value]] = None,
    use_defaults: bool = True,
) -> Environment:
    """Build the environment a program starts under.

    Args:
        paths: Extra binding files, loaded after the default ones
        overrides: Bindings applied last (e.g. from the command line)
        use_defaults: Whether to load the default binding files

    Returns:
        Environment with all bindings, later sources shadowing earlier ones
    """
    env = Environment()
    files: List[Path] = list(binding_paths()) if use_defaults else []
    files.extend(Path(p) for p in paths or ())

    for path in files:
        env = Environment.from_bindings(load_bindings(path), env)
    if overrides:
        env = Environment.from_bindings(overrides, env)
    return env


def get_log_level() -> int:
    """
    Determine log level from LOGLEVEL environment variable.
    Defaults to WARNING if not set.
    """
    loglevel_env = os.getenv("LOGLEVEL", "").upper()
    if loglevel_env:
        level = getattr(logging, loglevel_env, None)
        if isinstance(level, int):
            return level

    return logging.WARNING
