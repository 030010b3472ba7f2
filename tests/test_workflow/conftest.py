"""Shared fixtures for workflow tests."""

from __future__ import annotations

from typing import Any, Mapping

import pytest

from minidream.core.models import PredictionRecord
from minidream.workflow.step import PipelineStep, StepResult


class MockStep(PipelineStep):
    """Configurable step that records the context it saw."""

    def __init__(
        self,
        step_name: str = "mock",
        outputs: dict[str, Any] | None = None,
        requires: list[str] | None = None,
    ):
        self._name = step_name
        self._outputs = outputs or {}
        self._requires = requires or []
        self.contexts: list[dict[str, Any]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def requires(self) -> list[str]:
        return self._requires

    @property
    def provides(self) -> list[str]:
        return list(self._outputs)

    def execute(self, context: Mapping[str, Any]) -> StepResult:
        self.contexts.append(dict(context))
        return StepResult(status="completed", outputs=dict(self._outputs))


class FailingStep(PipelineStep):
    """Step that always fails with an exception."""

    def __init__(self, step_name: str = "failing", error: Exception | None = None):
        self._name = step_name
        self._error = error or RuntimeError("Intentional failure")

    @property
    def name(self) -> str:
        return self._name

    def execute(self, context: Mapping[str, Any]) -> StepResult:
        raise self._error


class RecordingSubmitter:
    """Submitter that remembers what it was asked to submit."""

    def __init__(self) -> None:
        self.records: list[PredictionRecord] = []

    def submit(self, record: PredictionRecord) -> str:
        self.records.append(record)
        return f"sub-{len(self.records)}"
