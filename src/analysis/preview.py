"""PNG previews of the plottable series in a Tree or FeedTree.

This module turns stored analytics back into pictures for a quick look.
Single Responsibility: draw series, never decode or modify them.
"""

from typing import List, Optional, Tuple, Union
import logging
import math

import matplotlib.pyplot as plt
from matplotlib.collections import PatchCollection
from matplotlib.patches import Rectangle
import numpy as np

from config import PreviewConfig
from constants import TAG_BIN, TAG_F64, TAG_POINT, TAG_POINT_BIN, TAG_U64
from containers.base import Series
from containers.feedtree import FeedTree
from containers.tree import Tree

logger = logging.getLogger(__name__)

PREVIEWABLE_TAGS = (TAG_BIN, TAG_POINT_BIN, TAG_POINT, TAG_F64, TAG_U64)


def _span(low: float, high: float) -> Tuple[float, float]:
    # A synthetic bucket has zero width; give it unit width to draw
    if low == high:
        return low - 0.5, high + 0.5
    return low, high


def previewable_series(container: Union[Tree, FeedTree]) -> List[Series]:
    """Return the non-empty series whose tag has a chart, in container order."""
    if isinstance(container, Tree):
        series = container.branches
    else:
        series = container.feeds
    return [s for s in series if s.type_tag in PREVIEWABLE_TAGS and len(s) > 0]


class PreviewGenerator:
    """Draws one panel per plottable series of a container.

    Bin series become bar charts, PointBin series heatmaps, Point series
    scatter plots and numeric series line plots against their index.

    Args:
        container: Tree or FeedTree to preview
        config: Colors, point size, dpi and panel limit
    """

    def __init__(self, container: Union[Tree, FeedTree], config: Optional[PreviewConfig] = None) -> None:
        self.container = container
        self.config = config or PreviewConfig()

    def generate_to_file(self, file_path: str) -> bool:
        """Render the preview to an image file without a GUI.

        Returns:
            True if a file was written, False if there was nothing to draw
        """
        original_backend = plt.get_backend()
        plt.switch_backend('Agg')
        fig = None
        try:
            fig = self.create_figure()
            if fig is None:
                return False
            fig.savefig(file_path, dpi=self.config.dpi, bbox_inches='tight')
            logger.info(f"Preview saved to {file_path}")
            return True
        finally:
            if fig is not None:
                plt.close(fig)
            plt.switch_backend(original_backend)

    def create_figure(self) -> Optional[plt.Figure]:
        """Build the figure, or return None if no series can be drawn."""
        series = previewable_series(self.container)
        if not series:
            logger.warning(f"'{self.container.name}' has no series to preview")
            return None
        if len(series) > self.config.max_panels:
            logger.warning(
                f"Previewing the first {self.config.max_panels} of {len(series)} series"
            )
            series = series[:self.config.max_panels]

        cols = min(3, len(series))
        rows = math.ceil(len(series) / cols)
        fig, axes = plt.subplots(rows, cols, figsize=(5 * cols, 4 * rows), squeeze=False)
        fig.suptitle(self.container.name, fontsize=14, fontweight='bold')

        for ax, s in zip(axes.flat, series):
            self._plot_series(ax, s)
        for ax in list(axes.flat)[len(series):]:
            ax.set_visible(False)

        fig.tight_layout(rect=[0, 0, 1, 0.95])
        return fig

    # =========================================================================
    # Individual Panels
    # =========================================================================

    def _plot_series(self, ax: plt.Axes, series: Series) -> None:
        if series.type_tag == TAG_BIN:
            self._plot_bins(ax, series)
        elif series.type_tag == TAG_POINT_BIN:
            self._plot_point_bins(ax, series)
        elif series.type_tag == TAG_POINT:
            self._plot_points(ax, series)
        else:
            self._plot_values(ax, series)
        ax.set_title(f'{series.name} ({series.type_tag})')

    def _plot_bins(self, ax: plt.Axes, series: Series) -> None:
        bins = list(series)
        lefts = [b.in_edge for b in bins]
        counts = [b.count for b in bins]
        # A zero-width synthetic bin still needs a visible bar
        widths = [b.width if b.width > 0 else 1.0 for b in bins]
        aligns = 'center' if all(b.width == 0 for b in bins) else 'edge'
        ax.bar(lefts, counts, width=widths, align=aligns,
               color=self.config.bins_color, edgecolor='white', linewidth=0.5)
        ax.set_xlabel('Value')
        ax.set_ylabel('Count')

    def _plot_point_bins(self, ax: plt.Axes, series: Series) -> None:
        """Draw every cell on its own edges, colored by count.

        Cells need not form one regular grid; a Feed may hold several
        appended grids or hand-built cells.
        """
        cells = []
        for b in series:
            x0, x1 = _span(b.in_edge_x, b.ex_edge_x)
            y0, y1 = _span(b.in_edge_y, b.ex_edge_y)
            cells.append(Rectangle((x0, y0), x1 - x0, y1 - y0))
        patches = PatchCollection(cells, cmap='viridis', edgecolor='white', linewidth=0.3)
        patches.set_array(np.array([b.count for b in series], dtype=float))
        ax.add_collection(patches)
        ax.autoscale_view()
        ax.figure.colorbar(patches, ax=ax, label='Count')
        ax.set_xlabel('x')
        ax.set_ylabel('y')

    def _plot_points(self, ax: plt.Axes, series: Series) -> None:
        xs = [p.x for p in series]
        ys = [p.y for p in series]
        ax.scatter(xs, ys, s=self.config.point_size, color=self.config.points_color, alpha=0.7)
        ax.set_xlabel('x')
        ax.set_ylabel('y')
        ax.grid(True, alpha=0.3)

    def _plot_values(self, ax: plt.Axes, series: Series) -> None:
        values = list(series)
        ax.plot(range(len(values)), values, color=self.config.bins_color, linewidth=1)
        ax.set_xlabel('Index')
        ax.set_ylabel('Value')
        ax.grid(True, alpha=0.3)
