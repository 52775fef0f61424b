# ==============================================
# Path Resolution
# ==============================================
#
# FILE STRUCTURE:
# ---------------
#   <root>/
#   ├── config/<consumer_id>/<file>           → properties (YAML)
#   ├── playerdata/<file>                     → StorageDomain.PLAYER
#   ├── plugindata/<file>                     → StorageDomain.SERVER
#   └── worlds/<world>/plugindata/<file>      → StorageDomain.WORLD
#
# ==============================================

import os
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from sconfig.errors import MissingContainerError, StorageConfigurationError

PathLike = Union[str, "os.PathLike[str]"]

CONFIG_DIR = "config"
PLAYER_DIR = "playerdata"
PLUGIN_DIR = "plugindata"
WORLDS_DIR = "worlds"


class StorageDomain(Enum):
    """
    Scope of a key-value store. Only decides where the file lives.

    - PLAYER: per-entity data under playerdata/
    - WORLD: per-world data under worlds/<world>/plugindata/
    - SERVER: global data under plugindata/
    """
    PLAYER = "player"
    WORLD = "world"
    SERVER = "server"


def ensure_parent(path: Path) -> None:
    """Create the parent directory of path (recursively) if missing."""
    path.parent.mkdir(parents=True, exist_ok=True)


def properties_path(root: PathLike, consumer_id: str, relative: PathLike) -> Path:
    """Absolute path of a consumer's properties file."""
    if not consumer_id:
        raise ValueError("consumer_id must be a non-empty string")
    return (Path(root) / CONFIG_DIR / consumer_id / relative).resolve()


def storage_path(
    root: PathLike,
    domain: Union[StorageDomain, str],
    relative: PathLike,
    world: Optional[str] = None,
) -> Path:
    """
    Absolute path of a key-value store file.

    Args:
        root: Server root directory
        domain: StorageDomain (or its string value)
        relative: File path inside the domain directory
        world: World name, required for StorageDomain.WORLD

    Raises:
        StorageConfigurationError: unknown domain
        MissingContainerError: WORLD domain without a world name
    """
    try:
        domain = StorageDomain(domain)
    except ValueError:
        raise StorageConfigurationError(f"Invalid storage type: {domain!r}.") from None

    base = Path(root)
    if domain is StorageDomain.WORLD:
        if not world:
            raise MissingContainerError(f"Invalid world name: {world!r}.")
        directory = base / WORLDS_DIR / world / PLUGIN_DIR
    elif domain is StorageDomain.PLAYER:
        directory = base / PLAYER_DIR
    else:
        directory = base / PLUGIN_DIR

    return (directory / relative).resolve()


def display_path(path: Path) -> str:
    """Path relative to the working directory, for log messages."""
    try:
        return os.path.relpath(path)
    except ValueError:
        # different drive on Windows
        return str(path)
