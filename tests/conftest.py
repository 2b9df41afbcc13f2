"""Shared pytest fixtures."""

import json
from unittest.mock import AsyncMock

import pytest

from config.config_loader import AppConfig, BackendConfig, BudgetsConfig, PipelineConfig, PromptsConfig
from multisolve.backends.base import TextBackend
from multisolve.client import BackendClient
from multisolve.models import BackendResponse, Perspective, Solution


def solutions_json(count: int, prefix: str = "Idea", fenced: bool = False) -> str:
    """Completion text holding `count` well-formed solutions."""
    payload = {
        "solutions": [
            {
                "name": f"{prefix} {i}",
                "description": f"Description of {prefix.lower()} {i}. It does things well.",
                "advantages": ["fast", "cheap"],
                "complexity": "Medium",
                "timeEstimate": "2-3 days",
                "technologies": ["Python"],
            }
            for i in range(1, count + 1)
        ]
    }
    text = json.dumps(payload)
    return f"```json\n{text}\n```" if fenced else text


def perspectives_json(labels: list[str]) -> str:
    return json.dumps(
        {"perspectives": [{"label": label, "prompt": f"Problem seen as {label}"} for label in labels]}
    )


def make_solution(name: str = "Idea", perspective: str | None = "Enterprise", backend: str | None = "b1") -> Solution:
    return Solution(
        name=name,
        description=f"{name} explained in a few sentences. " * 5,
        advantages=["fast"],
        complexity="Low",
        time_estimate="1 week",
        technologies=["Python"],
        perspective=perspective,
        backend=backend,
    )


@pytest.fixture
def sample_backend_config() -> BackendConfig:
    return BackendConfig(
        name="test_backend",
        sdk="openai",
        model="test-model-1",
        api_key_env="TEST_API_KEY",
        timeout_sec=30,
        base_url=None,
    )


@pytest.fixture
def sample_pipeline_config() -> PipelineConfig:
    return PipelineConfig(
        expander="expander",
        roster=["gen_a", "gen_b", "gen_c"],
        primary_judge="judge",
        alternate_judges=["alt_1", "alt_2"],
        direct_fallbacks=["direct_a", "direct_b"],
        budgets=BudgetsConfig(),
    )


@pytest.fixture
def sample_prompts_config() -> PromptsConfig:
    return PromptsConfig(
        expand="Reframe {count} ways: {problem}",
        candidate="Perspective {label}: {perspective}\nOriginal: {problem}\nGive {count}.",
        judge="JUDGE {problem}\n{candidates}\nPick {count}.",
        alternate_judge="ALT {problem}\n{candidates}\nPick {count}.",
        direct="DIRECT {problem}\nGive {count}.",
    )


@pytest.fixture
def sample_app_config(
    sample_pipeline_config: PipelineConfig,
    sample_prompts_config: PromptsConfig,
) -> AppConfig:
    names = {"expander", "gen_a", "gen_b", "gen_c", "judge", "alt_1", "alt_2", "direct_a", "direct_b"}
    backends = {
        n: BackendConfig(name=n, sdk="openai", model=f"vendor/{n}", api_key_env="OPENROUTER_API_KEY", timeout_sec=30)
        for n in names
    }
    return AppConfig(
        pipeline=sample_pipeline_config,
        backends=backends,
        prompts=sample_prompts_config,
        available_backends=set(names),
    )


@pytest.fixture
def sample_problem() -> str:
    return "Help freelancers track unpaid invoices"


@pytest.fixture
def sample_perspectives() -> list[Perspective]:
    return [
        Perspective("Enterprise Focus", "Invoice tracking for agencies"),
        Perspective("Mobile-First", "Invoice tracking from a phone"),
        Perspective("UX-Centric", "Invoice tracking with zero setup"),
    ]


class MockBackend(TextBackend):
    """Test double TextBackend."""

    def __init__(self, backend_name: str = "mock", response_content: str = "Mock response") -> None:
        self._name = backend_name
        self._response_content = response_content
        # Shadow the class method with an AsyncMock at the instance level.
        # ABC check passes because generate is defined in the class body below.
        self.generate = AsyncMock(  # type: ignore[assignment]
            return_value=BackendResponse(
                backend=backend_name,
                model="mock-model",
                content=response_content,
                latency_sec=0.1,
                token_count=10,
            )
        )

    def name(self) -> str:
        return self._name

    def model_string(self) -> str:
        return "mock-model"

    async def generate(self, prompt: str, max_tokens: int) -> BackendResponse:  # type: ignore[override]
        """Default implementation; replaced by AsyncMock in __init__."""
        return BackendResponse(
            backend=self._name,
            model="mock-model",
            content=self._response_content,
            latency_sec=0.1,
            token_count=10,
        )


def make_client(**contents: str) -> tuple[BackendClient, dict[str, MockBackend]]:
    """BackendClient over MockBackends, keyed and answering as given."""
    backends = {name: MockBackend(name, content) for name, content in contents.items()}
    return BackendClient(backends), backends


@pytest.fixture
def mock_backend() -> MockBackend:
    return MockBackend()
