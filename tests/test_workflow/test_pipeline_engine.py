"""Tests for PipelineEngine."""

from __future__ import annotations

import pytest

from tests.test_workflow.conftest import FailingStep, MockStep
from minidream.workflow.engine import PipelineEngine


class TestPipelineEngine:
    def test_runs_steps_in_order_and_merges_outputs(self):
        first = MockStep("first", outputs={"a": 1})
        second = MockStep("second", outputs={"b": 2}, requires=["a"])
        result = PipelineEngine([first, second]).run({"seed": 0})

        assert result.outputs == {"seed": 0, "a": 1, "b": 2}
        assert second.contexts == [{"seed": 0, "a": 1}]
        assert result.steps_completed == 2
        assert list(result.step_results) == ["first", "second"]

    def test_context_is_read_only(self):
        class Mutating(MockStep):
            def execute(self, context):
                context["x"] = 1  # type: ignore[index]

        with pytest.raises(TypeError):
            PipelineEngine([Mutating("mutating")]).run()

    def test_fail_fast_skips_later_steps(self):
        later = MockStep("later")
        engine = PipelineEngine([MockStep("first"), FailingStep("boom"), later])

        with pytest.raises(RuntimeError, match="Intentional failure"):
            engine.run()
        assert later.contexts == []

    def test_progress_callback(self):
        events = []
        PipelineEngine([MockStep("a"), MockStep("b")]).run(
            progress_callback=lambda name, status: events.append((name, status)),
        )
        assert events == [("a", "completed"), ("b", "completed")]

    def test_progress_callback_reports_failure(self):
        events = []
        with pytest.raises(RuntimeError):
            PipelineEngine([FailingStep("boom")]).run(
                progress_callback=lambda name, status: events.append((name, status)),
            )
        assert events[0][0] == "boom"
        assert events[0][1].startswith("failed")

    def test_duplicate_names_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            PipelineEngine([MockStep("a"), MockStep("a")])

    def test_validate_missing_requirement(self):
        engine = PipelineEngine([MockStep("needs", requires=["measurements"])])
        errors = engine.validate()
        assert len(errors) == 1
        assert "measurements" in errors[0]
        with pytest.raises(ValueError, match="validation failed"):
            engine.run()

    def test_requirement_satisfied_by_inputs(self):
        engine = PipelineEngine([MockStep("needs", requires=["measurements"])])
        assert engine.validate({"measurements": []}) == []

    def test_step_names(self):
        assert PipelineEngine([MockStep("a"), MockStep("b")]).step_names == ["a", "b"]
