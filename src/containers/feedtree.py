"""FeedTree: fully round-trippable container of append-only Feeds.

Every encoding stores feed elements in their verbose keyed shape, so any
registered Serializable comes back from every form. The price is size: a
FeedTree of composite values is larger than the equivalent Tree.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from codec import binary, compact, verbose
from codec.elements import TypeMap
from codec.layout import FEEDTREE
from config import CodecConfig, Config
from containers.base import SeriesContainer, check_type_tag, reject_opaque_tag
from containers.feed import Feed
from errors import DuplicateNameError

logger = logging.getLogger(__name__)


class FeedTree(SeriesContainer[Feed]):
    """A named set of Fields and type-tagged Feeds.

    Usage:
        snapshots = FeedTree("run_42")
        snapshots.add_field("dt", 0.01)
        snapshots.add_feed("energy", [], "f64")
        for step in range(steps):
            snapshots.record("energy", system.energy())
            snapshots.add_feed("particles", system.particles())
    """

    kind = FEEDTREE
    series_kind = "Feed"

    def _new_series(self, name: str, type_tag: str, items: List[Any], types: TypeMap = None) -> Feed:
        reject_opaque_tag(type_tag, self.series_kind)
        return Feed(name, type_tag, items, types)

    def add_feed(self, name: str, items: Iterable[Any], type_tag: Optional[str] = None) -> Feed:
        """Create a Feed, or append a batch to an existing one.

        The first call for a name creates the feed (inferring the tag when
        ``type_tag`` is None). Later calls append ``items`` to it; a given
        ``type_tag`` must then equal the feed's tag.

        Raises:
            DuplicateNameError: If the feed exists with a different type tag
            TypeTagMismatchError: If an element does not match the tag, the
                tag is ``Object``, or it cannot be inferred from an empty batch
        """
        feed = self._series.get(name)
        if feed is None:
            return self._add_series(name, items, type_tag)

        if type_tag is not None and check_type_tag(type_tag) != feed.type_tag:
            raise DuplicateNameError(self.series_kind, name, self._name)
        added = feed.append(items)
        logger.debug(f"FeedTree '{self._name}': appended {added} items to '{name}'")
        return feed

    def record(self, name: str, item: Any) -> None:
        """Append one element to an existing feed.

        Raises:
            UnknownNameError: If no feed has this name
            TypeTagMismatchError: If the element does not match the feed's tag
        """
        self._get_series(name).record(item)

    def get_feed(self, name: str) -> Feed:
        """Return a Feed by name.

        Raises:
            UnknownNameError: If no feed has this name
        """
        return self._get_series(name)

    def feed_names(self) -> List[str]:
        return self._series_names()

    @property
    def feeds(self) -> List[Feed]:
        return list(self._series.values())

    @classmethod
    def from_json(
        cls, text: Union[str, bytes], types: TypeMap = None, config: Optional[CodecConfig] = None
    ) -> "FeedTree":
        """Decode verbose JSON text.

        Args:
            text: Payload
            types: Optional tag -> class mapping consulted before the registry
            config: Encoder options the text was written with; NaN and
                Infinity are accepted only if it allows non-finite values

        Raises:
            UnsupportedReadTypeError: If a feed's tag has no known class
            MalformedPayloadError: If the payload is structurally invalid
        """
        return cls._decode(verbose, text, types, config)

    @classmethod
    def from_jsonc(
        cls, text: Union[str, bytes], types: TypeMap = None, config: Optional[CodecConfig] = None
    ) -> "FeedTree":
        """Decode compact JSON text."""
        return cls._decode(compact, text, types, config)

    @classmethod
    def from_msg(cls, payload: bytes, types: TypeMap = None) -> "FeedTree":
        """Decode MessagePack bytes."""
        return cls._decode(binary, payload, types)

    @classmethod
    def read(
        cls,
        path: Union[str, Path],
        fmt: Optional[str] = None,
        types: TypeMap = None,
        config: Optional[Config] = None,
    ) -> "FeedTree":
        """Read a FeedTree file, picking the format from the extension unless given."""
        from codec.files import read_feedtree
        return read_feedtree(path, fmt=fmt, types=types, config=config)
