# ==============================================
# PropertiesStore
# ==============================================
#
# PURPOSE:
#   Self-healing, human-editable YAML properties file for one
#   consumer (plugin), seeded from a Template.
#
# WHY THIS CLASS EXISTS:
#   Server owners edit these files by hand. A typo must not crash
#   the consumer, and a plugin update that adds a new setting must
#   not wipe the owner's existing values or comments.
#
# CLASS: PropertiesStore
# ----------------------
#   Stateful: holds the raw text, its Document model and the
#   parsed values. Disk is re-read after every write.
#
#   Constructor:
#   ------------
#   - open(root, consumer_id, relative_file, template, diagnostics=None)
#       1. Create <root>/config/<consumer_id>/ if needed
#       2. Write the template if the file does not exist
#       3. Parse; if unparsable → delete, rewrite from template, parse
#       4. Append every template key missing from the file
#
#   Methods:
#   --------
#   - get(key, default=None)         → in-memory lookup, no I/O
#   - set(key, value)                → rewrite that key's line, write, re-read
#   - add(key, value, comment=None)  → append key (+ comment), write, re-read
#   - reload()                       → re-read from disk
#   - as_schema(cls)                 → dataclass view of the values
#
# ==============================================

import dataclasses
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from sconfig.diagnostics import QUIET, Diagnostics
from sconfig.lifecycle import StoreState, require_ready
from sconfig.paths import PathLike, display_path, ensure_parent, properties_path
from sconfig.properties.document import (
    Document,
    PropertiesParseError,
    comment_lines,
    parse_values,
    render_value,
)
from sconfig.properties.template import Template

logger = logging.getLogger(__name__)


class PropertiesStore:
    """
    Comment-preserving YAML properties file kept in sync with memory.

    Use PropertiesStore.open(...) rather than the constructor; the
    constructor does not touch the filesystem.
    """

    def __init__(self, path: Path, template: Template,
                 diagnostics: Diagnostics = QUIET):
        self.path = Path(path)
        self.template = template
        self.diagnostics = diagnostics
        # Only used for log messages
        self.relative = display_path(self.path)

        self.state = StoreState.UNINITIALIZED
        self.raw = ""
        self.document = Document()
        self._values: Dict[Any, Any] = {}

    @classmethod
    def open(
        cls,
        root: PathLike,
        consumer_id: str,
        relative_file: PathLike,
        template: Union[Template, str],
        diagnostics: Optional[Diagnostics] = None,
    ) -> "PropertiesStore":
        """
        Open (creating or repairing as needed) a consumer's properties file.

        Args:
            root: Server root directory
            consumer_id: Stable identifier of the consumer
            relative_file: File name inside <root>/config/<consumer_id>/
            template: Template or raw template text
            diagnostics: Verbosity handle (quiet by default)

        Returns:
            A READY PropertiesStore
        """
        if not isinstance(template, Template):
            template = Template(template)
        store = cls(properties_path(root, consumer_id, relative_file), template,
                    diagnostics or QUIET)
        store.load()
        return store

    def load(self) -> None:
        """Load, repair and reconcile the file. Leaves the store READY."""
        self.state = StoreState.LOADING
        try:
            self._values = self._read()
        except PropertiesParseError as e:
            self.state = StoreState.REPAIRING
            self.diagnostics.warning(
                logger, 'Invalid properties file at "%s" (%s), regenerating...',
                self.relative, e,
            )
            self.path.unlink()
            self.state = StoreState.LOADING
            self._values = self._read()

        self._reconcile()

        self.state = StoreState.READY
        self.diagnostics.success(logger, 'Parsed properties file at "%s".', self.relative)

    # === PUBLIC API ===

    @property
    def values(self) -> Dict[Any, Any]:
        """Shallow copy of the parsed values."""
        return dict(self._values)

    def __contains__(self, key: Any) -> bool:
        return key in self._values

    def get(self, key: Any, default: Any = None) -> Any:
        require_ready(self.state, self.relative)
        return self._values.get(key, default)

    def set(self, key: Any, value: Any) -> None:
        """
        Set key to value. Keys missing from the file are added.

        Raises:
            ValueError: key cannot be written as a YAML key; nothing changes
        """
        require_ready(self.state, self.relative)
        self._set(key, value)

    def add(self, key: Any, value: Any, comment: Optional[str] = None) -> None:
        """
        Append key to the file. Keys already present are set instead.
        Keys such as "#tag" or "a: b" are written quoted.
        """
        require_ready(self.state, self.relative)
        self._add(key, value, comment)

    def reload(self) -> None:
        """Re-read the file, picking up external edits."""
        require_ready(self.state, self.relative)
        self._values = self._read()

    def as_schema(self, schema: type) -> Any:
        """
        Build an instance of a dataclass schema from the current values.
        Keys the dataclass does not declare are ignored.
        """
        names = {f.name for f in dataclasses.fields(schema) if f.init}
        kwargs = {key: value for key, value in self._values.items() if key in names}
        return schema(**kwargs)

    # === INTERNALS ===

    def _set(self, key: Any, value: Any) -> None:
        if key not in self._values:
            return self._add(key, value)

        text = render_value(value)
        if not self.document.set(key, text):
            # key written in a form the line model does not read ("? key");
            # a later duplicate wins when the file is parsed
            self.document.append(key, text)
        self._values[key] = value
        self._write()

    def _add(self, key: Any, value: Any, comment: Optional[str] = None) -> None:
        if key in self._values:
            return self._set(key, value)

        # append() rejects keys YAML cannot read back before anything changes
        self.document.append(key, render_value(value), comment_lines(comment))
        self._values[key] = value
        self._write()

    def _reconcile(self) -> None:
        # One-directional: add missing template keys, never remove or overwrite
        for key, default in self.template.defaults.items():
            if key not in self._values:
                self.diagnostics.success(
                    logger, 'Adding missing property "%s" to "%s".', key, self.relative
                )
                self._add(key, default, self.template.comment_for(key))

    def _read(self) -> Dict[Any, Any]:
        ensure_parent(self.path)

        if not self.path.exists():
            self._write_text(self.template.text)
            self.diagnostics.success(logger, 'Created properties file at "%s".', self.relative)

        with open(self.path, "rb") as f:
            data = f.read()
        try:
            raw = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PropertiesParseError(f"not valid UTF-8: {e}") from e

        self.raw = raw
        self.document = Document.parse(raw)
        return parse_values(raw)

    def _write(self) -> None:
        self.raw = self.document.render()
        self._write_text(self.raw)
        # Disk is the source of truth
        self._values = self._read()

    def _write_text(self, text: str) -> None:
        with open(self.path, "w", encoding="utf-8", newline="") as f:
            f.write(text)

    def __repr__(self) -> str:
        return f"PropertiesStore(path={str(self.path)!r}, state={self.state.value})"
