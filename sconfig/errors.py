# ==============================================
# Errors
# ==============================================
#
# PURPOSE:
#   Exception types raised by the properties and storage stores.
#
# WHAT IS RECOVERED vs. RAISED:
#   - Unparsable properties file    → recovered (delete + regenerate)
#   - Unreadable JSON storage file  → recovered (defaults stand alone)
#   - SQLite row write failure      → logged, key marked pending
#   - Bad domain / extension / missing container → raised at open()
#   - Filesystem errors (OSError)   → always propagate to the caller
#
# ==============================================


class SConfigError(Exception):
    """Base class for all sconfig errors."""


class TemplateError(SConfigError, ValueError):
    """A properties template does not describe a key/value mapping."""


class StorageConfigurationError(SConfigError, ValueError):
    """A key-value store was opened with an invalid domain or path."""


class UnsupportedBackendError(StorageConfigurationError):
    """The storage file extension does not map to a known backend."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(
            f'Storage accepts ".json" or ".sqlite", got "{extension or "<none>"}".'
        )


class MissingContainerError(StorageConfigurationError):
    """A world-scoped store was opened without a world name."""


class StoreNotReadyError(SConfigError, RuntimeError):
    """A store was accessed before it finished loading."""
