from __future__ import annotations

"""
Backend Configuration.

Declarative description of backends, loadable from JSON, and the wiring
that turns those descriptions into configured Backend and Registry
instances.

Document layout:

    {
      "backends": [
        {"name": "console", "output": "stdout", "level": "info"},
        {"name": "app", "output": "/var/log/app.log", "rotate": "day",
         "colored": false, "flags": "date,time,shortfile"}
      ]
    }
"""

import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from multilog.core.backend import Backend
from multilog.core.registry import Registry
from multilog.domain.errors import ConfigError
from multilog.domain.levels import string_to_level
from multilog.infra.formatting import LineFlag, parse_flags

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
STREAM_OUTPUTS = ("stdout", "stderr")
ROTATE_MODES = ("day", "hour", "size")

_KNOWN_KEYS = {
    "name", "level", "output", "colored", "flags", "prefix", "rotate", "rotate_size",
}


@dataclass(frozen=True)
class BackendConfig:
    """
    Immutable description of one backend.

    Attributes:
        name: Registry key.
        level: Level name ("fatal", "error", "warn", "warning", "info",
            "debug"); anything else enables every severity.
        output: "stdout", "stderr" or a file path.
        colored: ANSI-color the severity tag and message.
        flags: Line metadata.
        prefix: Text placed in front of every line.
        rotate: None, "day", "hour" or "size".
        rotate_size: Threshold in bytes for size rotation.
    """
    name: str
    level: str = "all"
    output: str = "stdout"
    colored: bool = True
    flags: LineFlag = LineFlag.STD_FLAGS
    prefix: str = ""
    rotate: Optional[str] = None
    rotate_size: int = 0

    @property
    def is_file(self) -> bool:
        return self.output not in STREAM_OUTPUTS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BackendConfig":
        """
        Validate a raw mapping and build a BackendConfig.

        Raises:
            ConfigError: On missing name, wrong types, unknown keys or an
                inconsistent rotation setup.
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Backend entry must be an object, got {type(data).__name__}")

        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            raise ConfigError(f"Unknown backend keys: {', '.join(sorted(unknown))}")

        name = _as_str(data, "name", "")
        if not name:
            raise ConfigError("Backend entry is missing 'name'")

        flags_raw = data.get("flags")
        if flags_raw is None:
            flags = LineFlag.STD_FLAGS
        elif isinstance(flags_raw, str):
            try:
                flags = parse_flags(flags_raw)
            except ValueError as e:
                raise ConfigError(f"Backend '{name}': {e}") from e
        else:
            raise ConfigError(f"Backend '{name}': 'flags' must be a string")

        rotate = data.get("rotate")
        if rotate is not None and rotate not in ROTATE_MODES:
            raise ConfigError(
                f"Backend '{name}': 'rotate' must be one of {', '.join(ROTATE_MODES)}"
            )

        rotate_size = data.get("rotate_size", 0)
        if isinstance(rotate_size, bool) or not isinstance(rotate_size, int) or rotate_size < 0:
            raise ConfigError(f"Backend '{name}': 'rotate_size' must be a non-negative integer")
        if rotate == "size" and rotate_size <= 0:
            raise ConfigError(f"Backend '{name}': size rotation needs a positive 'rotate_size'")

        colored = data.get("colored", True)
        if not isinstance(colored, bool):
            raise ConfigError(f"Backend '{name}': 'colored' must be a boolean")

        cfg = cls(
            name=name,
            level=_as_str(data, "level", "all"),
            output=_as_str(data, "output", "stdout") or "stdout",
            colored=colored,
            flags=flags,
            prefix=_as_str(data, "prefix", ""),
            rotate=rotate,
            rotate_size=rotate_size,
        )
        if cfg.rotate and not cfg.is_file:
            logger.warning(f"Backend '{name}': rotation has no effect on '{cfg.output}'")
        return cfg


# -----------------------------------------------------------------------------
# Loading
# -----------------------------------------------------------------------------

def parse_config(document: Any) -> List[BackendConfig]:
    """
    Validate a decoded configuration document.

    Raises:
        ConfigError: If the document or any backend entry is invalid, or
            a backend name repeats.
    """
    if not isinstance(document, dict) or not isinstance(document.get("backends"), list):
        raise ConfigError("Configuration must be an object with a 'backends' list")

    configs: List[BackendConfig] = []
    seen = set()
    for entry in document["backends"]:
        cfg = BackendConfig.from_dict(entry)
        if cfg.name in seen:
            raise ConfigError(f"Duplicate backend name: {cfg.name!r}")
        seen.add(cfg.name)
        configs.append(cfg)
    return configs


def load_config(path: str) -> List[BackendConfig]:
    """
    Read and validate a JSON configuration file.

    Raises:
        ConfigError: If the file cannot be read, is not JSON, or is invalid.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in '{path}': {e}") from e

    configs = parse_config(document)
    logger.debug(f"Loaded {len(configs)} backend(s) from {path}")
    return configs


# -----------------------------------------------------------------------------
# Wiring
# -----------------------------------------------------------------------------

def build_backend(cfg: BackendConfig, **backend_options: Any) -> Backend:
    """
    Instantiate a backend from its description.

    File outputs are opened before the rotation mode is applied, so the
    first rotation check already sees a live file.

    Args:
        cfg: Backend description.
        **backend_options: Extra Backend keyword arguments (fatal_hook,
            exit_on_open_error, clock).

    Raises:
        OSError: If a file output cannot be opened.
    """
    stream = sys.stderr if cfg.output == "stderr" else sys.stdout
    backend = Backend(
        stream,
        cfg.prefix,
        string_to_level(cfg.level),
        cfg.colored,
        cfg.flags,
        **backend_options,
    )

    if cfg.is_file:
        backend.set_output_by_name(cfg.output)

    if cfg.rotate == "day":
        backend.set_rotate_by_day()
    elif cfg.rotate == "hour":
        backend.set_rotate_by_hour()
    elif cfg.rotate == "size":
        backend.set_rotate_by_size(cfg.rotate_size)

    return backend


def build_registry(configs: Iterable[BackendConfig], **backend_options: Any) -> Registry:
    """Instantiate and register one backend per description."""
    registry = Registry()
    for cfg in configs:
        registry.add_backend(cfg.name, build_backend(cfg, **backend_options))
    return registry


# -----------------------------------------------------------------------------
# Private Helpers
# -----------------------------------------------------------------------------

def _as_str(data: Dict[str, Any], key: str, default: str) -> str:
    value = data.get(key, default)
    if value is None:
        return default
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string, got {type(value).__name__}")
    return value
