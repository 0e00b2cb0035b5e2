"""Named containers for simulation output.

This package provides:
- Field metadata entries
- Branch / Tree: write-everything, read-built-ins output sink
- Feed / FeedTree: append-only, fully round-trippable snapshots
"""

from containers.field import Field
from containers.branch import Branch
from containers.tree import Tree
from containers.feed import Feed
from containers.feedtree import FeedTree

__all__ = [
    # Metadata
    "Field",
    # Write-only output
    "Branch",
    "Tree",
    # Round-trippable output
    "Feed",
    "FeedTree",
]
