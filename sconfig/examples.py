"""
Example schema, template and storage defaults used by SConfigPlugin.
"""

from dataclasses import dataclass, field

from sconfig.properties.template import Template


@dataclass
class ExampleProperties:
    """Typed view of the plugin's own properties.yaml."""
    debug: bool = field(default=False, metadata={"comment": "# Enable debug logging for properties and storage."})
    example: str = field(default="Hello, world!", metadata={"comment": "# An example string property."})


EXAMPLE_PROPERTIES_TEMPLATE = Template.from_dataclass(ExampleProperties)

EXAMPLE_STORAGE_DEFAULTS = {
    "example": False,
}
