# ==============================================
# SConfigPlugin
# ==============================================
#
# PURPOSE:
#   The seam between a host application and the stores. A host gives
#   the plugin a root directory and calls its lifecycle hooks; other
#   consumers ask it for stores.
#
# WHAT IT DOES:
#   1. on_initialize() loads the plugin's own properties.yaml and
#      reads its "debug" key once into a Diagnostics value and a
#      console log handler at the matching level.
#   2. open_properties() / open_storage() hand out one store per
#      resolved path, all sharing that Diagnostics value.
#   3. on_start_up() logs the loaded banner.
#   4. on_shutdown() closes the key-value stores and removes the
#      console log handler installed by on_initialize().
#
# ==============================================

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from sconfig import __version__
from sconfig.config import AppConfig, get_config
from sconfig.diagnostics import Diagnostics
from sconfig.examples import EXAMPLE_PROPERTIES_TEMPLATE, EXAMPLE_STORAGE_DEFAULTS
from sconfig.logging_config import setup_logging, teardown_logging
from sconfig.paths import PathLike, StorageDomain, properties_path, storage_path
from sconfig.properties.store import PropertiesStore
from sconfig.properties.template import Template
from sconfig.storage.store import KeyValueStore

logger = logging.getLogger(__name__)


class SConfigPlugin:
    """Host-facing facade that owns the shared verbosity and store registry."""

    identifier = "serenity-config"
    version = __version__

    def __init__(self, root: Optional[PathLike] = None,
                 config: Optional[AppConfig] = None,
                 console_logging: bool = True):
        """
        Args:
            root: Server root directory (AppConfig.root_dir by default)
            config: Settings; get_config() by default
            console_logging: Install a console handler in on_initialize().
                Hosts that configure logging themselves pass False.
        """
        self.config = config or get_config()
        self.root = Path(root if root is not None else self.config.root_dir).resolve()
        self.diagnostics = Diagnostics.from_config(self.config)
        self.console_logging = console_logging
        self.properties: Optional[PropertiesStore] = None
        self._properties: Dict[Path, PropertiesStore] = {}
        self._storages: Dict[Path, KeyValueStore] = {}
        self._log_handler: Optional[logging.Handler] = None

    # === HOST LIFECYCLE ===

    def on_initialize(self) -> None:
        self.properties = self.open_properties(
            self.identifier, "properties.yaml", EXAMPLE_PROPERTIES_TEMPLATE
        )
        # The only point where the debug flag is read
        debug = bool(self.properties.get("debug", False)) or self.config.debug
        self.diagnostics = Diagnostics(verbose=debug)
        self.properties.diagnostics = self.diagnostics
        if self.console_logging:
            self._log_handler = setup_logging(debug=debug)

    def on_start_up(self) -> None:
        logger.info("Loaded SConfig by palm1 - v%s", self.version)

    def on_shutdown(self) -> None:
        for store in self._storages.values():
            store.close()
        if self._log_handler is not None:
            teardown_logging(self._log_handler)
            self._log_handler = None

    # === STORE REGISTRY ===

    def open_properties(self, consumer_id: str, relative_file: PathLike,
                        template: Union[Template, str]) -> PropertiesStore:
        """Properties store for consumer_id, shared per resolved path."""
        path = properties_path(self.root, consumer_id, relative_file)
        store = self._properties.get(path)
        if store is None:
            store = PropertiesStore.open(self.root, consumer_id, relative_file,
                                         template, self.diagnostics)
            self._properties[path] = store
        return store

    def open_storage(self, domain: Union[StorageDomain, str], relative_file: PathLike,
                     defaults: Dict[str, Any],
                     container: Optional[str] = None) -> KeyValueStore:
        """Key-value store for domain/relative_file, shared per resolved path."""
        path = storage_path(self.root, domain, relative_file, container)
        store = self._storages.get(path)
        if store is None:
            store = KeyValueStore.open(domain, relative_file, defaults,
                                       container=container, root=self.root,
                                       diagnostics=self.diagnostics)
            self._storages[path] = store
        return store

    def initialize_storage_example(self) -> KeyValueStore:
        """Example player store: players.sqlite with {"example": False}."""
        storage = self.open_storage(StorageDomain.PLAYER, "players.sqlite",
                                    EXAMPLE_STORAGE_DEFAULTS)
        storage.set("example", True)
        return storage
