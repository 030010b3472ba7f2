"""minidream measure — metric registry, filters, normalization and summaries."""

from minidream.measure.filters import filter_records
from minidream.measure.metrics import MetricRegistry
from minidream.measure.normalizer import Normalizer, aggregate, apply_overrides
from minidream.measure.summary import highest_group, scores_to_frame, summarize_scores

__all__ = [
    "MetricRegistry",
    "Normalizer",
    "aggregate",
    "apply_overrides",
    "filter_records",
    "highest_group",
    "scores_to_frame",
    "summarize_scores",
]
