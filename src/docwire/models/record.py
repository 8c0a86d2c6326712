"""Native records returned to callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TypeVar, Union

from pydantic import BaseModel, ValidationError

from ..exceptions import DecodeError

NativeValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]

T = TypeVar("T", bound=BaseModel)


@dataclass
class NativeRecord:
    """One decoded document.

    Attributes:
        id: Short document identifier (last segment of the resource path)
        data: Field name to native value

    Example:
        >>> record = NativeRecord(id="xyz", data={"name": "Ada"})
        >>> record.flatten()
        {'id': 'xyz', 'name': 'Ada'}
    """

    id: str
    data: Dict[str, NativeValue] = field(default_factory=dict)

    def flatten(self) -> dict[str, Any]:
        """Merge the id into the data mapping.

        A data field literally named ``id`` is overridden by the document id.
        """
        return {**self.data, "id": self.id}

    def as_model(self, model_class: type[T]) -> T:
        """Validate this record into a Pydantic model.

        The model receives the flattened record, so it may declare an ``id``
        field.

        Args:
            model_class: Pydantic model class to build

        Returns:
            Model instance

        Raises:
            DecodeError: If the record does not satisfy the model
        """
        try:
            return model_class.model_validate(self.flatten())
        except ValidationError as e:
            raise DecodeError(
                f"Record {self.id!r} does not fit {model_class.__name__}: {e}"
            ) from e


@dataclass
class DocumentPage:
    """One page of a collection listing.

    Attributes:
        records: Decoded documents in server order
        next_page_token: Continuation token, or None on the last page
    """

    records: List[NativeRecord]
    next_page_token: Optional[str] = None
