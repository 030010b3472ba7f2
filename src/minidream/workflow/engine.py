"""PipelineEngine: runs pipeline steps in order, failing fast."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Sequence

from minidream.workflow.step import PipelineStep, StepResult

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Summary of a complete pipeline run."""

    outputs: dict[str, Any] = field(default_factory=dict)
    step_results: dict[str, StepResult] = field(default_factory=dict)
    total_elapsed_seconds: float = 0.0

    @property
    def steps_completed(self) -> int:
        return sum(1 for r in self.step_results.values() if r.status == "completed")


class PipelineEngine:
    """Executes a linear sequence of steps.

    Each step sees a read-only view of the run inputs plus every earlier
    step's outputs. The first exception aborts the run and is re-raised
    unchanged, so later steps (submission in particular) never run.

    Args:
        steps: Steps in execution order. Names must be unique.
    """

    def __init__(self, steps: Sequence[PipelineStep]) -> None:
        names = [s.name for s in steps]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate step name(s): {', '.join(duplicates)}")
        self.steps = list(steps)

    @property
    def step_names(self) -> list[str]:
        return [s.name for s in self.steps]

    def validate(self, inputs: Mapping[str, Any] | None = None) -> list[str]:
        """Check that every step's required keys are produced upstream.

        Step outputs are only known at run time, so a key counts as
        available if it is in ``inputs`` or declared by an earlier step.

        Returns:
            Error messages; empty if the pipeline is consistent.
        """
        available = set(inputs or {})
        errors: list[str] = []
        for step in self.steps:
            for key in step.requires:
                if key not in available:
                    errors.append(f"Step '{step.name}' requires '{key}' which no earlier step provides")
            available.update(step.provides)
        return errors

    def run(
        self,
        inputs: Mapping[str, Any] | None = None,
        progress_callback: Callable[[str, str], None] | None = None,
    ) -> PipelineResult:
        """Execute all steps in order.

        Args:
            inputs: Initial context values.
            progress_callback: Called with (step_name, status_msg) per step.

        Returns:
            PipelineResult with every step's outputs merged.

        Raises:
            ValueError: If a step requires a key nothing provides.
            Exception: Whatever the failing step raised.
        """
        errors = self.validate(inputs)
        if errors:
            raise ValueError(f"Pipeline validation failed: {'; '.join(errors)}")

        result = PipelineResult(outputs=dict(inputs or {}))
        start_time = time.monotonic()

        for step in self.steps:
            context = MappingProxyType(dict(result.outputs))
            logger.info("Running step %s", step.name)
            start = time.monotonic()
            try:
                step_result = step.execute(context)
            except Exception as exc:
                elapsed = time.monotonic() - start
                result.step_results[step.name] = StepResult(
                    status="failed", message=str(exc), elapsed_seconds=elapsed,
                )
                logger.error("Step %s failed: %s", step.name, exc)
                if progress_callback:
                    progress_callback(step.name, f"failed: {exc}")
                raise

            step_result.elapsed_seconds = time.monotonic() - start
            result.step_results[step.name] = step_result
            result.outputs.update(step_result.outputs)
            if progress_callback:
                progress_callback(step.name, step_result.message or "completed")

        result.total_elapsed_seconds = time.monotonic() - start_time
        return result
