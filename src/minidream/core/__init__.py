"""minidream core — data models and exceptions."""

from minidream.core.exceptions import (
    ConfigError,
    MiniDreamError,
    SubmissionError,
    ValidationError,
)
from minidream.core.models import (
    CompositeScore,
    Condition,
    ConditionOverride,
    Measurement,
    NormalizedMetric,
    PredictionRecord,
)

__all__ = [
    "CompositeScore",
    "Condition",
    "ConditionOverride",
    "Measurement",
    "NormalizedMetric",
    "PredictionRecord",
    "MiniDreamError",
    "ConfigError",
    "ValidationError",
    "SubmissionError",
]
