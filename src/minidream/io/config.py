"""Analysis configuration: data source, column remap, filters and overrides."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from minidream.core.models import ConditionOverride


@dataclass
class AnalysisConfig:
    """Everything one run of the motility pipeline needs besides the answers.

    Overrides supply condition properties missing from the primary dataset
    (e.g. a published stiffness for a surface the dataset leaves blank).
    """

    module: str
    source: Path | None = None
    columns: dict[str, str] = field(default_factory=dict)
    filters: dict[str, Any] = field(default_factory=dict)
    overrides: list[ConditionOverride] = field(default_factory=list)
    evaluation_id: str | None = None
    parent_id: str | None = None
    team: str | None = None

    def to_yaml(self, path: Path) -> None:
        """Serialize this config to a YAML file."""
        from minidream.io.serialization import config_to_yaml

        config_to_yaml(self, path)

    @classmethod
    def from_yaml(cls, path: Path) -> AnalysisConfig:
        """Deserialize an AnalysisConfig from a YAML file."""
        from minidream.io.serialization import config_from_yaml

        return config_from_yaml(path)
