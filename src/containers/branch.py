"""Named, type-tagged Collections stored in a Tree."""

import logging
from typing import TypeVar

from containers.base import Series
from values.collection import Collection

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Branch(Series[T]):
    """A named Collection inside a Tree.

    Branches are write-once output. ``extract`` exists for the odd case where
    the data is needed again in-process, but a Tree is an output sink, not a
    store to query.
    """

    def extract(self) -> Collection[T]:
        """Return a copy of the stored Collection."""
        logger.debug(f"Extracting branch '{self.name}' from a Tree; keep your own Collection instead")
        return super().extract()
