"""Documentation helpers describing the properties a resource exposes."""

from __future__ import annotations

import dataclasses
from typing import Any


def generate_properties_map(data: Any) -> dict[str, str]:
    """Map property names of a dataclass to their descriptions.

    Field metadata may hold "description" and "property"; the latter is a
    comma-separated option list where "-" hides the field, "name=X" renames it
    and "prefix=P" prefixes it.
    """
    properties: dict[str, str] = {}
    if data is None:
        return properties
    if not dataclasses.is_dataclass(data):
        raise TypeError(f"expected a dataclass, got {type(data).__name__}")

    for fld in dataclasses.fields(data):
        if fld.name.startswith("_"):
            continue

        options = fld.metadata.get("property", "").split(",")
        if options[0] == "-":
            continue

        name = fld.name
        prefix = ""
        for option in options:
            parts = option.split("=")
            if len(parts) != 2:
                continue
            key, value = parts
            if key == "name":
                name = value
            elif key == "prefix":
                prefix = value

        if prefix and name != "Tags":
            name = f"{prefix}:{name}"

        description = fld.metadata.get("description", "")

        if name == "Tags":
            original_name = name
            tag_prefix = f"tag:{prefix}:" if prefix else "tag:"
            description = (
                f"This resource has tags with property `{original_name}`. "
                "These are key/value pairs that are\n\t"
                f"added as their own property with the prefix of `{tag_prefix}` "
                f'(e.g. [{tag_prefix}example: "value"]) '
            )
            name = f"tag:{prefix}:<key>:" if prefix else "tag:<key>:"

        properties[name] = description

    return properties