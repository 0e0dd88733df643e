"""Where specread keeps its settings, and how the layers combine.

Settings live in ``config.json`` under the XDG config directory (or
``~/.specread`` off Linux/BSD). :func:`resolve_config` stacks, from lowest
to highest precedence: defaults, that file, ``./specread.json``,
``SPECREAD_*`` variables and CLI flags.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from functools import reduce
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import ValidationError

from specread.exceptions import ConfigError
from specread.models import GlobalConfig

_APP_NAME = "specread"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "specread.json"

# kind -> (XDG variable, default under $HOME, fallback under ~/.specread)
_XDG_DIRS: dict[str, tuple[str, tuple[str, ...], tuple[str, ...]]] = {
    "config": ("XDG_CONFIG_HOME", (".config",), ()),
    "data": ("XDG_DATA_HOME", (".local", "share"), ("logs",)),
}


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(kind: str) -> Path:
    env_var, home_default, fallback = _XDG_DIRS[kind]
    if _is_xdg_platform():
        base = Path(os.environ.get(env_var) or Path.home().joinpath(*home_default))
        path = base / _APP_NAME
    else:
        path = Path.home().joinpath(f".{_APP_NAME}", *fallback)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Return (and create) ``$XDG_CONFIG_HOME/specread`` or ``~/.specread``."""
    return _app_dir("config")


def get_data_dir() -> Path:
    """Return (and create) ``$XDG_DATA_HOME/specread`` or ``~/.specread/logs``."""
    return _app_dir("data")


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* through a synced temp file in the same directory.

    A failed write leaves the previous file untouched and no temp file behind.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _read_json_object(path: Path, label: str) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} at {path}: expected a JSON object")
    return data


def load_global_config() -> GlobalConfig:
    """Load ``config.json``, or defaults when it does not exist.

    Raises:
        ConfigError: The file is not a JSON object or fails validation.
    """
    path = get_config_dir() / _CONFIG_FILENAME
    if not path.is_file():
        return GlobalConfig()
    data = _read_json_object(path, "global config")
    try:
        return GlobalConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    data = json.dumps(config.model_dump(mode="json"), indent=2) + "\n"
    _atomic_write(get_config_dir() / _CONFIG_FILENAME, data)


def load_project_config() -> Optional[dict[str, Any]]:
    """Return the raw ``./specread.json`` mapping, or ``None`` when absent.

    Any subset of the global config's keys may be given; validation happens
    once the layers are merged.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json_object(path, "project config")


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _env_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {name} must be an integer, got {raw!r}") from exc


def _env_bool(name: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"Environment variable {name} must be a boolean, got {raw!r}")


# variable -> (section, key, parser); an empty value counts as unset
_ENV_OVERRIDES: dict[str, tuple[str, str, Callable[[str, str], Any]]] = {
    "SPECREAD_MAX_DEPTH": ("decoder", "max_depth", _env_int),
    "SPECREAD_STRICT_DEFAULT_RESPONSE": ("decoder", "strict_default_response", _env_bool),
    "SPECREAD_FORMAT": ("output", "format", lambda name, raw: raw),
}


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for name, (section, key, parse) in _ENV_OVERRIDES.items():
        raw = os.environ.get(name)
        if raw:
            overrides.setdefault(section, {})[key] = parse(name, raw)
    return overrides


def resolve_config(
    cli_max_depth: Optional[int] = None,
    cli_strict_default_response: Optional[bool] = None,
    cli_format: Optional[str] = None,
) -> GlobalConfig:
    """Merge every config layer into the effective :class:`GlobalConfig`.

    Precedence, highest first: CLI flags, ``SPECREAD_MAX_DEPTH`` /
    ``SPECREAD_STRICT_DEFAULT_RESPONSE`` / ``SPECREAD_FORMAT``,
    ``./specread.json``, the user's ``config.json``, defaults. A ``None``
    CLI argument leaves the lower layers in charge.

    Raises:
        ConfigError: A layer is malformed or the merged result is invalid.
    """
    cli = {
        "decoder": {
            "max_depth": cli_max_depth,
            "strict_default_response": cli_strict_default_response,
        },
        "output": {"format": cli_format},
    }
    layers = [
        load_global_config().model_dump(mode="json"),
        load_project_config() or {},
        _env_overrides(),
        {section: {k: v for k, v in values.items() if v is not None} for section, values in cli.items()},
    ]
    try:
        return GlobalConfig.model_validate(reduce(_merge, layers))
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
