"""Named scalar metadata attached to a Tree or FeedTree."""

from dataclasses import dataclass
from typing import Union

FieldValue = Union[str, int, float, bool]

FIELD_VALUE_TYPES = (str, int, float, bool)


def check_name(name: object, what: str) -> str:
    """Validate a Field, Branch, Feed or container name.

    Raises:
        ValueError: If the name is not a non-empty string
    """
    if not isinstance(name, str) or not name:
        raise ValueError(f"{what} name must be a non-empty string, got {name!r}")
    return name


@dataclass(frozen=True)
class Field:
    """One immutable name/value metadata entry.

    Attributes:
        name: Unique within the owning container
        value: Text, int, float or bool
    """

    name: str
    value: FieldValue

    def __post_init__(self) -> None:
        check_name(self.name, "Field")
        if not isinstance(self.value, FIELD_VALUE_TYPES):
            raise TypeError(
                f"Field '{self.name}' value must be str, int, float or bool, "
                f"got {type(self.value).__name__}"
            )
