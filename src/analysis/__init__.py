"""Visualization and summaries of Trees and FeedTrees."""

from analysis.preview import PreviewGenerator, previewable_series
from analysis.report import ContainerSummary, SeriesSummary, summarize, print_summary

__all__ = [
    'PreviewGenerator',
    'previewable_series',
    'ContainerSummary',
    'SeriesSummary',
    'summarize',
    'print_summary',
]
