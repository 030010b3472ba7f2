"""Data models for the minidream core module."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class Condition:
    """Surface material and stiffness a sample was grown on.

    Some surfaces have no published stiffness; those arrive with
    ``stiffness=None`` and are filled in through a ConditionOverride.
    """

    surface: str
    stiffness: float | None = None

    def __post_init__(self) -> None:
        if not self.surface:
            raise ValueError("Condition surface must not be empty")
        if self.stiffness is not None and self.stiffness < 0:
            raise ValueError(f"Stiffness must be non-negative, got {self.stiffness}")


CONDITION_FIELDS = frozenset(f.name for f in fields(Condition))


@dataclass(frozen=True)
class Measurement:
    """One observed metric value for one sample."""

    sample_id: str
    cell_line: str
    condition: Condition
    metric: str
    value: float | None
    diagnosis: str | None = None

    def __post_init__(self) -> None:
        if not self.metric:
            raise ValueError("Measurement metric must not be empty")
        if self.value is not None and self.value < 0:
            raise ValueError(
                f"Measurement value must be non-negative, got {self.value} "
                f"for {self.sample_id}/{self.metric}"
            )


@dataclass(frozen=True)
class NormalizedMetric:
    """A measurement rescaled by the max of its (metric, cell line) group.

    ``normalized_value`` is None when the raw value is absent or the group
    max is zero or absent.
    """

    sample_id: str
    cell_line: str
    condition: Condition
    metric: str
    raw_value: float | None
    normalized_value: float | None
    diagnosis: str | None = None


@dataclass(frozen=True)
class CompositeScore:
    """Mean normalized motility for one sample."""

    sample_id: str
    cell_line: str
    condition: Condition
    score: float
    n_metrics: int = 1
    diagnosis: str | None = None


@dataclass(frozen=True)
class ConditionOverride:
    """Supply a condition property that is missing from the primary dataset.

    Every record whose ``condition.<match_field>`` equals ``match`` gets
    ``condition.<attribute>`` replaced by ``value``.
    """

    attribute: str
    match: str
    value: Any
    match_field: str = "surface"


@dataclass(frozen=True)
class PredictionRecord:
    """Answers for one challenge module, ready for submission."""

    module: str
    answers: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the answers mapping along with the record
        object.__setattr__(self, "answers", MappingProxyType(dict(self.answers)))

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form used for YAML submission files."""
        return {"module": self.module, **dict(self.answers)}

    def to_yaml(self, path) -> None:
        """Serialize this record to a YAML submission file."""
        from minidream.io.serialization import record_to_yaml

        record_to_yaml(self, path)

    @classmethod
    def from_yaml(cls, path) -> PredictionRecord:
        """Deserialize a record from a YAML submission file."""
        from minidream.io.serialization import record_from_yaml

        return record_from_yaml(path)
