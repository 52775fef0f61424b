# ==============================================
# KeyValueStore
# ==============================================
#
# PURPOSE:
#   Typed key-value data for a consumer, scoped to a StorageDomain
#   and persisted to either a JSON file or a SQLite table.
#
# WHY THIS CLASS EXISTS:
#   Consumers should not care which medium their data sits on.
#   The file extension picks the backend; defaults are always
#   merged underneath whatever was persisted.
#
# CLASS: KeyValueStore
# --------------------
#   Constructor:
#   ------------
#   - open(domain, relative_file, defaults, container=None,
#          root=None, diagnostics=None)
#       .json   → JsonBackend
#       .sqlite → SQLiteBackend
#       anything else → UnsupportedBackendError
#
#   Methods:
#   --------
#   - get(key, default=None)  → in-memory lookup
#   - set(key, value)         → update memory, persist through backend
#   - pending_keys            → keys whose last write failed (SQLite only)
#   - flush()                 → retry the pending keys
#   - close()                 → release the backend connection
#
# ==============================================

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Set, Union

from sconfig.config import get_config
from sconfig.diagnostics import QUIET, Diagnostics
from sconfig.errors import UnsupportedBackendError
from sconfig.lifecycle import StoreState, require_ready
from sconfig.paths import PathLike, StorageDomain, display_path, ensure_parent, storage_path
from sconfig.storage.backends import JsonBackend, LoadResult, SQLiteBackend

logger = logging.getLogger(__name__)

BACKENDS = {
    ".json": JsonBackend,
    ".sqlite": SQLiteBackend,
}

_MISSING = object()


def _check_key(key: Any) -> None:
    if not isinstance(key, str):
        raise TypeError(f"Storage keys must be strings, got {type(key).__name__}: {key!r}")


class KeyValueStore:
    """Default-merging key-value store over a JSON or SQLite backend."""

    def __init__(self, path: Path, domain: StorageDomain, defaults: Dict[str, Any],
                 backend: Union[JsonBackend, SQLiteBackend],
                 diagnostics: Diagnostics = QUIET):
        self.path = Path(path)
        self.domain = domain
        self.backend = backend
        self.diagnostics = diagnostics
        self.relative = display_path(self.path)

        self.state = StoreState.UNINITIALIZED
        for key in defaults:
            _check_key(key)
        self._defaults = copy.deepcopy(defaults)
        self._values: Dict[str, Any] = copy.deepcopy(defaults)
        self._pending: Set[str] = set()

    @classmethod
    def open(
        cls,
        domain: Union[StorageDomain, str],
        relative_file: PathLike,
        defaults: Dict[str, Any],
        container: Optional[str] = None,
        root: Optional[PathLike] = None,
        diagnostics: Optional[Diagnostics] = None,
    ) -> "KeyValueStore":
        """
        Open a key-value store, creating its file or table if needed.

        Args:
            domain: PLAYER, WORLD or SERVER
            relative_file: File inside the domain directory (.json or .sqlite)
            defaults: Default values; persisted values override them
            container: World name, required for StorageDomain.WORLD
            root: Server root directory (AppConfig.root_dir by default)
            diagnostics: Verbosity handle (quiet by default)

        Raises:
            StorageConfigurationError: unknown domain
            MissingContainerError: WORLD without container
            UnsupportedBackendError: extension is not .json or .sqlite
        """
        config = get_config()
        diagnostics = diagnostics or QUIET
        path = storage_path(root if root is not None else config.root_dir,
                            domain, relative_file, container)
        # storage_path has validated the domain
        domain = StorageDomain(domain)

        backend_cls = BACKENDS.get(path.suffix)
        if backend_cls is None:
            raise UnsupportedBackendError(path.suffix)
        if backend_cls is JsonBackend:
            backend: Union[JsonBackend, SQLiteBackend] = JsonBackend(
                path, indent=config.json_indent, diagnostics=diagnostics
            )
        else:
            backend = SQLiteBackend(path, diagnostics=diagnostics)

        ensure_parent(path)

        store = cls(path, domain, defaults, backend, diagnostics)
        store.load()
        return store

    def load(self) -> LoadResult:
        self.state = StoreState.LOADING
        result = self.backend.load(self._values)
        self._values = result.values
        self._pending = set(result.unpersisted)
        self.state = StoreState.READY

        if result.created:
            self.diagnostics.success(logger, 'Created storage file at "%s".', self.relative)
        self.diagnostics.success(logger, 'Parsed storage file at "%s".', self.relative)
        return result

    # === PUBLIC API ===

    @property
    def backend_name(self) -> str:
        return self.backend.name

    @property
    def values(self) -> Dict[str, Any]:
        """Shallow copy of the current values."""
        return dict(self._values)

    @property
    def defaults(self) -> Dict[str, Any]:
        return copy.deepcopy(self._defaults)

    @property
    def pending_keys(self) -> Set[str]:
        """Keys updated in memory whose value is not yet persisted."""
        return set(self._pending)

    def __contains__(self, key: str) -> bool:
        return key in self._values

    def get(self, key: str, default: Any = None) -> Any:
        require_ready(self.state, self.relative)
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> bool:
        """
        Update key in memory and persist it.

        Args:
            key: String key. JSON objects and the key_value table only
                hold string keys, so other types are rejected
            value: JSON-serializable value

        Returns:
            True if the value reached disk. False means the SQLite row
            write failed; the in-memory value is still updated and the
            key is listed in pending_keys until flush() succeeds.

        Raises:
            TypeError: key is not a string, or (JSON backend) value is
                not serializable; the previous value is kept
        """
        require_ready(self.state, self.relative)
        _check_key(key)
        previous = self._values.get(key, _MISSING)
        self._values[key] = value
        try:
            return self._persist(key)
        except Exception:
            # The JSON file was not rewritten; memory goes back to match it
            if previous is _MISSING:
                del self._values[key]
            else:
                self._values[key] = previous
            raise

    def flush(self) -> int:
        """
        Retry writing every pending key.

        Returns:
            Number of keys still pending
        """
        require_ready(self.state, self.relative)
        for key in sorted(self._pending, key=str):
            self._persist(key)
        return len(self._pending)

    def close(self) -> None:
        self.backend.close()

    # === INTERNALS ===

    def _persist(self, key: str) -> bool:
        if self.backend.write(self._values, key):
            # A JSON rewrite persists every key at once
            if isinstance(self.backend, JsonBackend):
                self._pending.clear()
            else:
                self._pending.discard(key)
            return True
        self._pending.add(key)
        return False

    def __repr__(self) -> str:
        return (f"KeyValueStore(domain={self.domain.value}, path={str(self.path)!r}, "
                f"backend={self.backend_name})")
