"""Named, type-tagged, append-only Collections stored in a FeedTree."""

from typing import Iterable, TypeVar

from containers.base import Series
from values.contract import coerce_element, coerce_elements

T = TypeVar("T")


class Feed(Series[T]):
    """A Collection that grows over the life of a run.

    Usage:
        feed = Feed("energy", "f64")
        for step in range(steps):
            feed.record(system.energy())
    """

    def append(self, items: Iterable[T]) -> int:
        """Append a batch of elements.

        The whole batch is checked before anything is stored.

        Returns:
            Number of elements appended

        Raises:
            TypeTagMismatchError: If any element does not match the feed's tag
        """
        batch = coerce_elements(items, self.type_tag, self._types)
        self._data.extend(batch)
        return len(batch)

    def record(self, item: T) -> None:
        """Append a single element."""
        self._data.push(coerce_element(item, self.type_tag, self._types))
