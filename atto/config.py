"""Editor configuration file.

The configuration is a small JSON object:

    {"key_binding_preset": "atto", "vim_mode": false}

It is looked up in a few well-known places (see `candidate_paths`). When no
file exists anywhere a default one is written to the user's config
directory so there is something to edit.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import platformdirs

from .keybindings import DEFAULT_PRESET

logger = logging.getLogger(__name__)

APP_NAME = "atto"
CONFIG_FILENAMES = ("atto.json", "config.json")
SYSTEM_CONFIG_DIRS = ("/etc/atto", "/usr/local/etc/atto")
CONFIG_ENV_VAR = "ATTO_CONFIG"


@dataclass(frozen=True)
class EditorConfig:
    """Settings consumed by the editor core."""
    key_binding_preset: str = DEFAULT_PRESET
    vim_mode: bool = False


def user_config_dir() -> Path:
    return Path(platformdirs.user_config_dir(APP_NAME, appauthor=False))


def _parents(start: Path) -> Iterable[Path]:
    yield start
    yield from start.parents


def candidate_paths(cwd: Optional[Path] = None) -> list[Path]:
    """Return config file locations in lookup order.

    $ATTO_CONFIG comes first, then the user and system config directories,
    then `atto.json` in the working directory and each of its parents.
    """
    paths: list[Path] = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        paths.append(Path(env_path))
    for directory in (user_config_dir(), *map(Path, SYSTEM_CONFIG_DIRS)):
        paths.extend(directory / name for name in CONFIG_FILENAMES)
    try:
        start = (cwd or Path.cwd()).resolve()
    except OSError as e:
        logger.warning(f"Could not resolve working directory: {e}")
    else:
        paths.extend(directory / CONFIG_FILENAMES[0] for directory in _parents(start))
    return paths


def find_config_file(cwd: Optional[Path] = None) -> Optional[Path]:
    """Return the first existing config file, or None."""
    for path in candidate_paths(cwd):
        if path.is_file():
            return path
    return None


def validate_setting(key: str, value: Any) -> bool:
    """Check a single setting's type.

    Unknown keys are accepted (and ignored) for forward compatibility.
    """
    if key == "key_binding_preset":
        return isinstance(value, str)
    if key == "vim_mode":
        return isinstance(value, bool)
    return True


def parse_config(data: Any, source: str = "<config>") -> EditorConfig:
    """Build an EditorConfig from decoded JSON, skipping invalid values."""
    if not isinstance(data, dict):
        logger.warning(f"{source} has invalid format (not an object), using defaults")
        return EditorConfig()
    values: Dict[str, Any] = {}
    for key in ("key_binding_preset", "vim_mode"):
        if key not in data:
            continue
        if validate_setting(key, data[key]):
            values[key] = data[key]
        else:
            logger.warning(f"Ignoring invalid {key!r} in {source}: {data[key]!r}")
    return EditorConfig(**values)


def load_config_file(path: Path) -> EditorConfig:
    """Read one config file. Unreadable or malformed files give defaults."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not load config from {path}: {e}")
        return EditorConfig()
    return parse_config(data, source=str(path))


def write_default_config(path: Optional[Path] = None) -> Optional[Path]:
    """Write the default config file atomically.

    Returns:
        The path written, or None if it could not be written
    """
    path = path or user_config_dir() / CONFIG_FILENAMES[0]
    temp_file = path.with_suffix('.tmp')
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_file, 'w', encoding='utf-8') as f:
            json.dump(asdict(EditorConfig()), f, indent=2)
            f.write("\n")
        temp_file.replace(path)
    except OSError as e:
        logger.warning(f"Could not write default config to {path}: {e}")
        try:
            if temp_file.exists():
                temp_file.unlink()
        except OSError:
            pass
        return None
    logger.info(f"Created default config at {path}")
    return path


def load_config(cwd: Optional[Path] = None) -> EditorConfig:
    """Locate and load the configuration, creating a default file if none exists."""
    path = find_config_file(cwd)
    if path is None:
        write_default_config()
        return EditorConfig()
    logger.debug(f"Using config {path}")
    return load_config_file(path)
