"""Tests for chart previews and text summaries."""

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import pytest
from matplotlib.figure import Figure

from analysis.preview import PreviewGenerator, previewable_series
from analysis.report import print_summary, summarize
from config import PreviewConfig
from containers import FeedTree, Tree
from values import Collection, Point, PointBin


class TestPreviewGenerator:
    """Tests for PNG previews."""

    def test_previewable_series(self, sample_tree):
        """Only Bin, PointBin, Point and numeric series are drawn."""
        names = [s.name for s in previewable_series(sample_tree)]
        assert names == ["radius", "hits", "radius_hist", "trajectory", "density"]

    def test_generate_to_file(self, temp_dir, sample_tree):
        """Test that a PNG is written for a Tree."""
        path = temp_dir / "preview.png"
        assert PreviewGenerator(sample_tree).generate_to_file(str(path)) is True
        assert path.stat().st_size > 0

    def test_feedtree_preview(self, temp_dir, sample_feedtree):
        """Test that FeedTrees preview their built-in feeds."""
        path = temp_dir / "feeds.png"
        assert PreviewGenerator(sample_feedtree).generate_to_file(str(path)) is True

    def test_nothing_to_draw(self, temp_dir, particles):
        """Test that a container without plottable series writes nothing."""
        tree = Tree("T")
        tree.add_branch("labels", ["a", "b"])
        tree.add_branch("particles", particles)
        path = temp_dir / "empty.png"

        assert PreviewGenerator(tree).generate_to_file(str(path)) is False
        assert not path.exists()

    def test_panel_limit(self):
        """Test that max_panels caps the number of visible axes."""
        tree = Tree("T")
        for i in range(5):
            tree.add_branch(f"b{i}", [float(i), float(i + 1)])

        fig = PreviewGenerator(tree, PreviewConfig(max_panels=2)).create_figure()
        visible = [ax for ax in fig.axes if ax.get_visible()]
        assert len(visible) == 2

    def test_synthetic_bin(self, temp_dir):
        """Test that a zero-width histogram still renders."""
        tree = Tree("T")
        tree.add_branch("flat", Collection([1.0, 1.0]).hist(4))
        tree.add_branch("grid", Collection([Point(0.0, 0.0), Point(0.0, 1.0)]).hist2d(3, 2))
        assert PreviewGenerator(tree).generate_to_file(str(temp_dir / "flat.png")) is True

    def test_irregular_point_bins(self, temp_dir):
        """Test that PointBin cells which are not one full grid still draw."""
        tree = Tree("T")
        tree.add_branch("cells", [
            PointBin(0.0, 1.0, 0.0, 1.0, 1),
            PointBin(0.0, 1.0, 1.0, 2.0, 2),
            PointBin(1.0, 2.0, 0.0, 1.0, 3),
        ])
        assert PreviewGenerator(tree).generate_to_file(str(temp_dir / "cells.png")) is True

    def test_appended_point_bin_feed(self):
        """Test a Feed holding two appended grids of different shape."""
        points = Collection([Point(0.0, 0.0), Point(1.0, 2.0), Point(3.0, 1.0)])
        feedtree = FeedTree("F")
        feedtree.add_feed("density", points.hist2d(2, 2))
        feedtree.add_feed("density", points.hist2d(3, 1))

        fig = PreviewGenerator(feedtree).create_figure()
        assert fig is not None
        plt.close(fig)

    def test_figure_closed_when_save_fails(self, temp_dir, sample_tree, monkeypatch):
        """Test that a failed save does not leave the figure open."""
        def fail(*args, **kwargs):
            raise OSError("disk full")

        generator = PreviewGenerator(sample_tree)
        created = []
        build = generator.create_figure

        def tracked_figure():
            created.append(build())
            return created[-1]

        monkeypatch.setattr(generator, "create_figure", tracked_figure)
        monkeypatch.setattr(Figure, "savefig", fail)
        monkeypatch.setattr(plt, "switch_backend", lambda name: None)

        with pytest.raises(OSError):
            generator.generate_to_file(str(temp_dir / "x.png"))
        assert created[0].number not in plt.get_fignums()


class TestReport:
    """Tests for text summaries."""

    def test_summarize(self, sample_tree):
        """Test per-series statistics."""
        summary = summarize(sample_tree)
        by_name = {s.name: s for s in summary.series}

        assert summary.kind == "Tree"
        assert summary.fields["desc"] == "baseline run"
        assert by_name["hits"].maximum == 12.0
        assert by_name["hits"].minimum == 0.0
        assert by_name["radius_hist"].total_count == 200
        assert by_name["labels"].mean is None

    def test_print_summary(self, capsys, sample_feedtree):
        """Test console output lists fields and feeds."""
        print_summary(sample_feedtree)
        out = capsys.readouterr().out
        assert "FEEDTREE: snapshots" in out
        assert "FEEDS (5)" in out
        assert "particles" in out

    def test_empty_container(self, capsys):
        """Test that an empty FeedTree still prints."""
        print_summary(FeedTree("F"))
        assert "FIELDS (0)" in capsys.readouterr().out
