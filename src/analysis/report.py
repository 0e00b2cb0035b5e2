"""Text summaries of Trees and FeedTrees.

Separates console output from the containers themselves.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import numpy as np

from constants import TAG_BIN, TAG_F64, TAG_U64
from containers.feedtree import FeedTree
from containers.tree import Tree


@dataclass
class SeriesSummary:
    """Statistics for one Branch or Feed.

    Attributes:
        name: Series name
        type_tag: Element type tag
        length: Number of elements
        mean/minimum/maximum: Numeric series only
        total_count: Sum of bin counts, Bin series only
    """

    name: str
    type_tag: str
    length: int
    mean: Optional[float] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    total_count: Optional[int] = None


@dataclass
class ContainerSummary:
    kind: str
    name: str
    fields: Dict[str, Any] = field(default_factory=dict)
    series: List[SeriesSummary] = field(default_factory=list)


def summarize(container: Union[Tree, FeedTree]) -> ContainerSummary:
    """Collect per-series statistics for a container."""
    if isinstance(container, Tree):
        all_series = container.branches
    else:
        all_series = container.feeds

    summary = ContainerSummary(
        kind=type(container).__name__,
        name=container.name,
        fields=container.fields,
    )
    for s in all_series:
        entry = SeriesSummary(name=s.name, type_tag=s.type_tag, length=len(s))
        if s.type_tag in (TAG_F64, TAG_U64) and len(s) > 0:
            values = np.asarray(list(s), dtype=np.float64)
            entry.mean = float(np.mean(values))
            entry.minimum = float(np.min(values))
            entry.maximum = float(np.max(values))
        elif s.type_tag == TAG_BIN:
            entry.total_count = sum(b.count for b in s)
        summary.series.append(entry)
    return summary


def print_summary(container: Union[Tree, FeedTree]) -> None:
    """Print a container summary to the console."""
    summary = summarize(container)

    print("\n" + "=" * 80)
    print(f"{summary.kind.upper()}: {summary.name}")
    print("=" * 80)

    print(f"\n--- FIELDS ({len(summary.fields)}) ---")
    for key, value in summary.fields.items():
        print(f"  {key}: {value!r}")

    label = "BRANCHES" if summary.kind == "Tree" else "FEEDS"
    print(f"\n--- {label} ({len(summary.series)}) ---")
    for s in summary.series:
        line = f"  {s.name:<24} {s.type_tag:<10} {s.length:>8} items"
        if s.mean is not None:
            line += f"  mean={s.mean:.4g} min={s.minimum:.4g} max={s.maximum:.4g}"
        if s.total_count is not None:
            line += f"  counts={s.total_count}"
        print(line)
    print("=" * 80)
