"""Built-in pipeline steps and the standard motility pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Mapping

import pandas as pd

from minidream.core.exceptions import ConfigError
from minidream.io.config import AnalysisConfig
from minidream.io.loader import load_table, measurements_from_table
from minidream.measure.filters import filter_records
from minidream.measure.metrics import MetricRegistry
from minidream.measure.normalizer import Normalizer, Overrides, aggregate
from minidream.measure.summary import highest_group
from minidream.submit.client import Submitter
from minidream.submit.record import RecordBuilder
from minidream.workflow.engine import PipelineEngine
from minidream.workflow.step import PipelineStep, StepResult

logger = logging.getLogger(__name__)

AnswerDeriver = Callable[[Mapping[str, Any]], Mapping[str, Any]]


class LoadStep(PipelineStep):
    """Read the measurement table and unpack it into Measurement records."""

    def __init__(
        self,
        source: str | Path | pd.DataFrame,
        columns: Mapping[str, str] | None = None,
        registry: MetricRegistry | None = None,
    ) -> None:
        self._source = source
        self._columns = dict(columns or {})
        self._registry = registry

    @property
    def name(self) -> str:
        return "load"

    @property
    def provides(self) -> list[str]:
        return ["measurements"]

    def execute(self, context: Mapping[str, Any]) -> StepResult:
        frame = load_table(self._source)
        measurements = measurements_from_table(frame, self._columns, self._registry)
        return StepResult(
            status="completed",
            message=f"{len(measurements)} measurement(s)",
            outputs={"measurements": measurements},
        )


class FilterStep(PipelineStep):
    """Restrict measurements to the analysis subset."""

    def __init__(self, criteria: Mapping[str, Any] | None = None) -> None:
        self._criteria = dict(criteria or {})

    @property
    def name(self) -> str:
        return "filter"

    @property
    def requires(self) -> list[str]:
        return ["measurements"]

    @property
    def provides(self) -> list[str]:
        return ["selected"]

    def execute(self, context: Mapping[str, Any]) -> StepResult:
        selected = filter_records(context["measurements"], self._criteria)
        if self._criteria and not selected:
            logger.warning("No measurements match %s", self._criteria)
        return StepResult(
            status="completed",
            message=f"{len(selected)} of {len(context['measurements'])} kept",
            outputs={"selected": selected},
        )


class NormalizeStep(PipelineStep):
    """Normalize the selected measurements and compute composite scores."""

    def __init__(self, overrides: Overrides | None = None) -> None:
        self._normalizer = Normalizer(overrides)

    @property
    def name(self) -> str:
        return "normalize"

    @property
    def requires(self) -> list[str]:
        return ["selected"]

    @property
    def provides(self) -> list[str]:
        return ["normalized", "scores"]

    def execute(self, context: Mapping[str, Any]) -> StepResult:
        normalized = self._normalizer.normalize(context["selected"])
        scores = aggregate(normalized)
        return StepResult(
            status="completed",
            message=f"{len(scores)} composite score(s)",
            outputs={"normalized": normalized, "scores": scores},
        )


def derive_motility_answers(context: Mapping[str, Any]) -> dict[str, Any]:
    """Answers that follow directly from the scores (the high group)."""
    group = highest_group(context.get("scores", []), by="surface")
    return {} if group is None else {"high_group": group}


class BuildRecordStep(PipelineStep):
    """Validate the analyst's answers and build the prediction record.

    Explicit answers win over derived ones.
    """

    def __init__(
        self,
        module: str,
        answers: Mapping[str, Any],
        derive: AnswerDeriver | None = None,
    ) -> None:
        self._builder = RecordBuilder(module)
        self._answers = dict(answers)
        self._derive = derive

    @property
    def name(self) -> str:
        return "build_record"

    @property
    def provides(self) -> list[str]:
        return ["record"]

    def execute(self, context: Mapping[str, Any]) -> StepResult:
        answers: dict[str, Any] = {}
        if self._derive is not None:
            answers.update(self._derive(context))
        answers.update({k: v for k, v in self._answers.items() if v is not None})
        record = self._builder.build(answers)
        return StepResult(
            status="completed",
            message=f"{record.module} record",
            outputs={"record": record},
        )


class SubmitStep(PipelineStep):
    """Hand the record to a submitter, exactly once."""

    def __init__(self, submitter: Submitter) -> None:
        self._submitter = submitter

    @property
    def name(self) -> str:
        return "submit"

    @property
    def requires(self) -> list[str]:
        return ["record"]

    @property
    def provides(self) -> list[str]:
        return ["submission_id"]

    def execute(self, context: Mapping[str, Any]) -> StepResult:
        submission_id = self._submitter.submit(context["record"])
        return StepResult(
            status="completed",
            message=f"submission {submission_id}",
            outputs={"submission_id": submission_id},
        )


def motility_pipeline(
    config: AnalysisConfig,
    answers: Mapping[str, Any] | None = None,
    submitter: Submitter | None = None,
    source: str | Path | pd.DataFrame | None = None,
    registry: MetricRegistry | None = None,
) -> PipelineEngine:
    """Load -> Filter -> Normalize [-> Build record [-> Submit]].

    Args:
        config: Source, column remap, filters and overrides.
        answers: Analyst answers. Without them the pipeline stops after
            normalization.
        submitter: Where to send the record. Requires ``answers``.
        source: Overrides ``config.source`` (a path or a DataFrame).
        registry: Allowed metrics for the loader.

    Raises:
        ConfigError: If no data source is configured, or a submitter is
            given without answers.
    """
    source = source if source is not None else config.source
    if source is None:
        raise ConfigError("No measurement source configured", field="source")
    if submitter is not None and answers is None:
        raise ConfigError("Cannot submit without answers", field="answers")

    steps: list[PipelineStep] = [
        LoadStep(source, config.columns, registry),
        FilterStep(config.filters),
        NormalizeStep(config.overrides),
    ]
    if answers is not None:
        derive = derive_motility_answers if config.module == "motility" else None
        steps.append(BuildRecordStep(config.module, answers, derive=derive))
    if submitter is not None:
        steps.append(SubmitStep(submitter))
    return PipelineEngine(steps)
