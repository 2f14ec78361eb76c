from __future__ import annotations
import os
from pathlib import Path

from aiscript.errors import ConfigError


# Resolve installation dir (aiscript package directory)
_AISCRIPT_DIR = Path(__file__).resolve().parent

# Defaults
_DEFAULT_DEFINITIONS = _AISCRIPT_DIR / 'definitions' / 'data' / 'rule_definitions.xml'
_DEFAULT_INDENT_SIZE = 4
_DEFAULT_VIEWPORT_LINES = 100


def path_from_env(var: str, default: Path) -> Path:
    raw = os.environ.get(var)
    if not raw or not raw.strip():
        return Path(default)
    return Path(raw.strip())


def int_from_env(var: str, default: int, minimum: int = 0) -> int:
    raw = os.environ.get(var)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{var} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ConfigError(f"{var} must be >= {minimum}, got {value}")
    return value


def get_definitions_path() -> Path:
    return path_from_env('AISCRIPT_DEFINITIONS', _DEFAULT_DEFINITIONS)


def get_indent_size() -> int:
    return int_from_env('AISCRIPT_INDENT_SIZE', _DEFAULT_INDENT_SIZE)


def get_viewport_lines() -> int:
    # number of lines the brace matcher may walk away from the cursor line
    return int_from_env('AISCRIPT_VIEWPORT_LINES', _DEFAULT_VIEWPORT_LINES, minimum=1)
