# ==============================================
# Template
# ==============================================
#
# PURPOSE:
#   The reference document a properties file is seeded from and
#   reconciled against: canonical key set, default values and an
#   optional one-line comment per key.
#
# BUILDING A TEMPLATE:
# --------------------
#   Template("debug: false\n# Enable debug logging.\nport: 8080\n")
#
#   Template.from_fields([
#       TemplateField("debug", False, "Enable debug logging."),
#       TemplateField("port", 8080),
#   ])
#
#   @dataclass
#   class ServerProperties:
#       debug: bool = field(default=False, metadata={"comment": "Enable debug logging."})
#       port: int = 8080
#
#   Template.from_dataclass(ServerProperties)
#
# ==============================================

import copy
import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from sconfig.errors import TemplateError
from sconfig.properties.document import (
    Document,
    PropertiesParseError,
    comment_lines,
    parse_values,
    render_key,
    render_value,
)


@dataclass(frozen=True)
class TemplateField:
    """Declarative description of one template key."""
    key: str
    default: Any
    comment: Optional[str] = None


class Template:
    """Immutable template text with its parsed defaults and comments."""

    def __init__(self, text: str):
        try:
            defaults = parse_values(text)
        except PropertiesParseError as e:
            raise TemplateError(f"Template is not a key/value mapping: {e}") from e

        self._text = text
        self._defaults = defaults
        self._comments = Document.parse(text).comments()

    @classmethod
    def from_fields(cls, fields: Iterable[TemplateField]) -> "Template":
        lines: List[str] = []
        for item in fields:
            lines.append(f"{render_key(item.key)}: {render_value(item.default)}".rstrip())
            lines.extend(comment_lines(item.comment))
        return cls("\n".join(lines) + "\n")

    @classmethod
    def from_dataclass(cls, schema: type) -> "Template":
        """
        Build a template from a dataclass whose fields all have defaults.
        A field's comment is read from metadata["comment"].
        """
        if not dataclasses.is_dataclass(schema):
            raise TemplateError(f"{schema!r} is not a dataclass")

        fields = []
        for f in dataclasses.fields(schema):
            if f.default is not dataclasses.MISSING:
                default = f.default
            elif f.default_factory is not dataclasses.MISSING:  # type: ignore[misc]
                default = f.default_factory()  # type: ignore[misc]
            else:
                raise TemplateError(
                    f"Field '{f.name}' of {schema.__name__} has no default value"
                )
            fields.append(TemplateField(f.name, default, f.metadata.get("comment")))
        return cls.from_fields(fields)

    @property
    def text(self) -> str:
        return self._text

    @property
    def defaults(self) -> Dict[Any, Any]:
        """A fresh copy of the default mapping."""
        return copy.deepcopy(self._defaults)

    def keys(self) -> List[Any]:
        return list(self._defaults.keys())

    def comment_for(self, key: Any) -> Optional[str]:
        """The comment line that follows key in the template text."""
        return self._comments.get(key)

    def __repr__(self) -> str:
        return f"Template(keys={self.keys()!r})"
