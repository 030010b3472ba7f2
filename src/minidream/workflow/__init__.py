"""minidream workflow — linear Load -> Filter -> Normalize -> Record -> Submit pipeline."""

from minidream.workflow.defaults import (
    BuildRecordStep,
    FilterStep,
    LoadStep,
    NormalizeStep,
    SubmitStep,
    derive_motility_answers,
    motility_pipeline,
)
from minidream.workflow.engine import PipelineEngine, PipelineResult
from minidream.workflow.step import PipelineStep, StepResult

__all__ = [
    "BuildRecordStep",
    "FilterStep",
    "LoadStep",
    "NormalizeStep",
    "PipelineEngine",
    "PipelineResult",
    "PipelineStep",
    "StepResult",
    "SubmitStep",
    "derive_motility_answers",
    "motility_pipeline",
]
