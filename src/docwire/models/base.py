"""Base model class and docwire-specific Pydantic configuration.

This module provides the WireModel class that all wire-format models inherit from.
Wire models use snake_case attribute names in Python and the store's camelCase
names on the wire.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base class for all docwire wire models.

    Fields are declared in snake_case and serialized under their camelCase
    alias, so ``string_value`` travels as ``stringValue``.

    Presence matters on the wire: a key that was present in the input is
    recorded in ``model_fields_set`` even when its value is ``None``. This is
    how ``{"nullValue": null}`` is told apart from an empty value ``{}``.

    Example:
        >>> value = WireValue.model_validate({"nullValue": None})
        >>> "null_value" in value.model_fields_set
        True
        >>> value.to_wire()
        {'nullValue': None}
    """

    model_config = ConfigDict(
        # camelCase on the wire
        alias_generator=to_camel,
        # Allow construction with Python names as well as aliases
        populate_by_name=True,
        # Unknown keys (e.g. geoPointValue, referenceValue) are ignored
        extra="ignore",
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the JSON-ready wire shape.

        Only keys that were explicitly set are emitted, under their aliases.

        Returns:
            Dictionary suitable for a JSON request body
        """
        return self.model_dump(by_alias=True, exclude_unset=True)
