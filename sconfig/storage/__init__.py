# ==============================================
# STORAGE (JSON file / SQLite key-value data)
# ==============================================
#
# Modules:
# --------
# - backends.py  → JsonBackend, SQLiteBackend, LoadResult
# - store.py     → KeyValueStore (domain paths, backend selection, get/set)
#
# ==============================================

from sconfig.paths import StorageDomain
from .backends import JsonBackend, SQLiteBackend, LoadResult
from .store import KeyValueStore

__all__ = [
    "StorageDomain",
    "JsonBackend",
    "SQLiteBackend",
    "LoadResult",
    "KeyValueStore",
]
