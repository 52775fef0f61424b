# ==============================================
# Properties Document Model
# ==============================================
#
# PURPOSE:
#   Keep a properties file as an ordered list of entries so that
#   human-written comments, blank lines and key order survive
#   programmatic updates.
#
# LINE CLASSIFICATION:
# --------------------
#   - Key line:      top-level "key: value"     → starts a new Entry
#                    (plain, 'single' or "double" quoted key)
#   - Comment line:  "# ..."                    → attached to the entry above
#   - Blank line                                → attached to the entry above
#   - Continuation:  indented / "- item" lines  → part of the entry's value
#   Lines before the first key line form the preamble.
#
# Document.parse(text).render() == text for any input.
#
# CLASSES:
# --------
# - Entry     → one top-level key and the lines that follow it
# - Document  → preamble + entries, parse/render, set/append
#
# FUNCTIONS:
# ----------
# - parse_values(text) -> dict     YAML mapping, or PropertiesParseError
# - render_value(value) -> str     single-line YAML scalar/flow value
# - render_key(key) -> str         key text that reads back as key
#
# ==============================================

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from sconfig.errors import SConfigError


KEY_LINE = re.compile(
    r"^(?P<head>(?P<key>"
    r"\"(?:[^\"\\]|\\.)*\""
    r"|'(?:[^']|'')*'"
    r"|[^\s#'\"\-?:,\[\]{}&*!|>%@`][^:#]*?"
    r")\s*:)(?P<rest>(?=\s|$).*)$"
)


class PropertiesParseError(SConfigError):
    """Properties text is not a YAML mapping. Recovered by regeneration."""


@dataclass
class Entry:
    """
    A top-level key line plus the lines attached below it.

    key is the value YAML reads from the line (so 'a b' and a b are the
    same key); key_text is how it is spelled in the file.
    """
    key: Any
    key_text: str
    head: str
    rest: str
    lines: List[str] = field(default_factory=list)

    @property
    def comment(self) -> Optional[str]:
        """The comment line directly below the key, if there is one."""
        if self.lines and self.lines[0].lstrip().startswith("#"):
            return self.lines[0]
        return None

    def replace_value(self, text: str) -> None:
        # Drop the old value's continuation lines, keep comments and blanks
        self.head = f"{self.key_text}:"
        self.rest = f" {text}" if text else ""
        self.lines = [line for line in self.lines if not _is_continuation(line)]

    def render_lines(self) -> List[str]:
        return [self.head + self.rest] + self.lines


def _is_continuation(line: str) -> bool:
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return False
    return True


class Document:
    """Ordered, comment-preserving view of a properties file."""

    def __init__(self, preamble: Optional[List[str]] = None,
                 entries: Optional[List[Entry]] = None,
                 trailing_newline: bool = True):
        self.preamble = preamble if preamble is not None else []
        self.entries = entries if entries is not None else []
        self.trailing_newline = trailing_newline

    @classmethod
    def parse(cls, text: str) -> "Document":
        doc = cls(trailing_newline=text.endswith("\n"))
        if not text:
            return doc

        lines = text.split("\n")
        if doc.trailing_newline:
            lines.pop()

        current: Optional[Entry] = None
        for line in lines:
            match = KEY_LINE.match(line)
            if match:
                current = Entry(
                    key=_parse_key(match.group("key")),
                    key_text=match.group("key"),
                    head=match.group("head"),
                    rest=match.group("rest"),
                )
                doc.entries.append(current)
            elif current is None:
                doc.preamble.append(line)
            else:
                current.lines.append(line)
        return doc

    def render(self) -> str:
        lines = list(self.preamble)
        for entry in self.entries:
            lines.extend(entry.render_lines())
        text = "\n".join(lines)
        if self.trailing_newline and lines:
            text += "\n"
        return text

    def keys(self) -> List[Any]:
        return [entry.key for entry in self.entries]

    def find(self, key: Any) -> Optional[Entry]:
        # YAML keeps the last duplicate
        for entry in reversed(self.entries):
            if entry.key == key:
                return entry
        return None

    def comments(self) -> Dict[Any, str]:
        """Map key → its single comment line, for keys that have one."""
        result = {}
        for entry in self.entries:
            if entry.comment is not None:
                result[entry.key] = entry.comment
        return result

    def set(self, key: Any, text: str) -> bool:
        """
        Replace the value of every line for key.

        Returns:
            False if no line for key exists
        """
        found = False
        for entry in self.entries:
            if entry.key == key:
                entry.replace_value(text)
                found = True
        return found

    def append(self, key: Any, text: str, comment_lines: Optional[List[str]] = None) -> Entry:
        """
        Add key at the end of the document, followed by its comment lines.

        Raises:
            ValueError: key cannot be written as a top-level YAML key
        """
        key_text = render_key(key)
        last = self._last_line()
        if self.trailing_newline and last is not None and last.strip():
            # blank line between the old content and the new key
            self._attach("")

        entry = Entry(key=key, key_text=key_text, head=f"{key_text}:",
                      rest=f" {text}" if text else "",
                      lines=list(comment_lines or []))
        self.entries.append(entry)
        self.trailing_newline = True
        return entry

    def _last_line(self) -> Optional[str]:
        if self.entries:
            return self.entries[-1].render_lines()[-1]
        if self.preamble:
            return self.preamble[-1]
        return None

    def _attach(self, line: str) -> None:
        if self.entries:
            self.entries[-1].lines.append(line)
        else:
            self.preamble.append(line)


def comment_lines(comment: Optional[str]) -> List[str]:
    """Turn a comment string into '#'-prefixed lines."""
    if not comment:
        return []
    lines = []
    for line in comment.splitlines():
        if line.lstrip().startswith("#"):
            lines.append(line)
        else:
            lines.append(f"# {line}")
    return lines


def parse_values(text: str) -> Dict[Any, Any]:
    """
    Parse properties text into a mapping.

    Raises:
        PropertiesParseError: invalid YAML, or a document that is not a mapping
    """
    try:
        values = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise PropertiesParseError(str(e)) from e
    if not isinstance(values, dict):
        raise PropertiesParseError(
            f"expected a mapping, got {type(values).__name__}"
        )
    return values


def render_value(value: Any) -> str:
    """Render value as YAML that fits on the line after 'key: '."""
    text = yaml.safe_dump(value, default_flow_style=True, width=float("inf"),
                          allow_unicode=True, sort_keys=False)
    text = _strip_document_end(text)
    if "\n" in text:
        text = _strip_document_end(
            yaml.safe_dump(value, default_flow_style=True, default_style='"',
                           width=float("inf"), allow_unicode=True, sort_keys=False)
        )
    return text


def _strip_document_end(text: str) -> str:
    text = text.rstrip("\n")
    if text.endswith("\n..."):
        text = text[: -len("\n...")]
    elif text == "...":
        text = ""
    return text.strip()


def render_key(key: Any) -> str:
    """
    Render key as it should appear before the ':' of a top-level line.

    Keys that are not plain YAML scalars ("#tag", "a: b") are quoted.

    Raises:
        ValueError: key has no single-line form that reads back as key
    """
    try:
        hash(key)
        candidates = [render_value(key)]
    except (TypeError, yaml.YAMLError):
        raise ValueError(f"Unsupported properties key: {key!r}") from None

    if isinstance(key, str):
        candidates.append(_strip_document_end(
            yaml.safe_dump(key, default_style='"', width=float("inf"), allow_unicode=True)
        ))
    for text in candidates:
        line = f"{text}: 0"
        if not KEY_LINE.match(line):
            continue
        try:
            if parse_values(line) == {key: 0}:
                return text
        except PropertiesParseError:
            continue
    raise ValueError(f"Unsupported properties key: {key!r}")


def _parse_key(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        return text
