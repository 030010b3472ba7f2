"""PipelineStep base class and step result."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass
class StepResult:
    """Result of executing a pipeline step."""

    status: str  # "completed", "failed"
    message: str = ""
    outputs: dict[str, Any] = field(default_factory=dict)
    elapsed_seconds: float = 0.0


class PipelineStep(ABC):
    """Base class for all pipeline steps.

    A step reads what it needs from the outputs of earlier steps and
    returns new outputs; it never mutates the context it is given.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Step identifier (e.g., 'load', 'normalize', 'submit')."""

    @property
    def requires(self) -> list[str]:
        """Context keys this step reads. Override to declare inputs."""
        return []

    @property
    def provides(self) -> list[str]:
        """Context keys this step adds. Override to declare outputs."""
        return []

    @abstractmethod
    def execute(self, context: Mapping[str, Any]) -> StepResult:
        """Execute this step against the outputs of earlier steps."""
