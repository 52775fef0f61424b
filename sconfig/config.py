# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load process-wide defaults for the stores from environment
#   variables / .env file.
#
# CLASSES:
# --------
# - AppConfig (dataclass)
#     root_dir: str      (default ".")   → root for config/, playerdata/,
#                                          plugindata/ and worlds/
#     debug: bool        (default False) → verbose store diagnostics
#     json_indent: int   (default 2)     → pretty-print width of .json stores
#
# FUNCTION:
# ---------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# USAGE:
# ------
#   from sconfig.config import get_config
#   config = get_config()
#   print(config.root_dir)
#
# ==============================================

import os
from dataclasses import dataclass
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv


TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    root_dir: str = "."
    debug: bool = False
    json_indent: int = 2

    @property
    def root_path(self) -> Path:
        """Absolute root directory for all stores."""
        return Path(self.root_dir).resolve()


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in TRUE_VALUES


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # .env in the working directory, where the host application runs
    load_dotenv(dotenv_path=Path.cwd() / ".env")

    _config_instance = AppConfig(
        root_dir=os.getenv("SCONFIG_ROOT", "."),
        debug=_env_flag("SCONFIG_DEBUG"),
        json_indent=int(os.getenv("SCONFIG_JSON_INDENT", "2")),
    )

    return _config_instance
