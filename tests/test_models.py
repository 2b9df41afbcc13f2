"""Tests for multisolve/models.py dataclasses."""

import dataclasses

import pytest

from multisolve.models import BackendResponse, Perspective, PipelineResult, Solution, Stage


def test_solution_optional_fields_default_to_absent():
    s = Solution(name="Invoice bot", description="Chases unpaid invoices by email.")
    assert s.advantages == []
    assert s.technologies == []
    assert s.complexity is None
    assert s.time_estimate is None
    assert s.perspective is None
    assert s.backend is None


def test_solution_is_immutable():
    s = Solution(name="Invoice bot", description="Chases unpaid invoices.")
    with pytest.raises(dataclasses.FrozenInstanceError):
        s.name = "Other"  # type: ignore[misc]


def test_perspective_fields():
    p = Perspective(label="Mobile-First", prompt="Track invoices from a phone")
    assert p.label == "Mobile-First"
    assert p.prompt == "Track invoices from a phone"


def test_backend_response_optional_token_count():
    r = BackendResponse(backend="gpt-4o", model="openai/gpt-4o", content="{}", latency_sec=0.4, token_count=None)
    assert r.token_count is None


def test_stage_labels_are_ordered_steps():
    assert Stage.PERSPECTIVES.label.startswith("Step 1/3")
    assert Stage.CANDIDATES.label.startswith("Step 2/3")
    assert Stage.JUDGING.label.startswith("Step 3/3")


def test_pipeline_result_fields():
    result = PipelineResult(
        problem="p",
        perspectives=[],
        candidate_count=0,
        solutions=[Solution("a", "b")],
        strategy="direct_fallback",
        strategy_backend="gpt-4o",
        duration_sec=1.0,
    )
    assert result.strategy == "direct_fallback"
    assert len(result.solutions) == 1
