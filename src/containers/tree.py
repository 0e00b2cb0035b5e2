"""Tree: write-everything, read-built-ins output container.

A Tree holds Fields and Branches. Any Serializable can be written to a
Branch, but only the built-in tags (f64, u64, String, Bin, PointBin, Point)
can be read back, because the compact forms store elements positionally
with no shape information for arbitrary classes. Use a FeedTree for data
that must round-trip.
"""

from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from codec import binary, compact, verbose
from codec.elements import TypeMap
from codec.layout import TREE
from config import CodecConfig, Config
from containers.base import SeriesContainer
from containers.branch import Branch


class Tree(SeriesContainer[Branch]):
    """A named set of Fields and type-tagged Branches.

    Usage:
        tree = Tree("run_42")
        tree.add_field("desc", "baseline")
        tree.add_branch("radius", radii, "f64")
        tree.add_branch("radius_hist", radii.hist(50))
        tree.write("out/run_42.msg")
    """

    kind = TREE
    series_kind = "Branch"

    def _new_series(self, name: str, type_tag: str, items: List[Any], types: TypeMap = None) -> Branch:
        return Branch(name, type_tag, items)

    def add_branch(self, name: str, collection: Iterable[Any], type_tag: Optional[str] = None) -> Branch:
        """Add a Branch holding a copy of ``collection``.

        Args:
            name: Branch name, unique within the Tree
            collection: Collection (or any iterable) of elements
            type_tag: Element type tag; inferred from the elements when None.
                ``Object`` accepts any Serializable (write-only).

        Raises:
            DuplicateNameError: If a branch with this name exists
            TypeTagMismatchError: If an element does not match the tag, or the
                tag cannot be inferred from an empty collection
        """
        return self._add_series(name, collection, type_tag)

    def get_branch(self, name: str) -> Branch:
        """Return a Branch by name.

        Raises:
            UnknownNameError: If no branch has this name
        """
        return self._get_series(name)

    def branch_names(self) -> List[str]:
        return self._series_names()

    @property
    def branches(self) -> List[Branch]:
        return list(self._series.values())

    @classmethod
    def from_json(cls, text: Union[str, bytes], config: Optional[CodecConfig] = None) -> "Tree":
        """Decode verbose JSON text.

        Args:
            text: Payload
            config: Encoder options the text was written with; NaN and
                Infinity are accepted only if it allows non-finite values

        Raises:
            UnsupportedReadTypeError: If a branch holds a non built-in tag
            MalformedPayloadError: If the payload is structurally invalid
        """
        return cls._decode(verbose, text, config=config)

    @classmethod
    def from_jsonc(cls, text: Union[str, bytes], config: Optional[CodecConfig] = None) -> "Tree":
        """Decode compact JSON text."""
        return cls._decode(compact, text, config=config)

    @classmethod
    def from_msg(cls, payload: bytes) -> "Tree":
        """Decode MessagePack bytes."""
        return cls._decode(binary, payload)

    @classmethod
    def read(cls, path: Union[str, Path], fmt: Optional[str] = None, config: Optional[Config] = None) -> "Tree":
        """Read a Tree file, picking the format from the extension unless given."""
        from codec.files import read_tree
        return read_tree(path, fmt=fmt, config=config)
