"""Pure dataclasses for the multisolve pipeline. No logic, no deps."""

from dataclasses import dataclass, field
from enum import Enum


class Stage(Enum):
    PERSPECTIVES = "perspectives"
    CANDIDATES = "candidates"
    JUDGING = "judging"

    @property
    def label(self) -> str:
        return _STAGE_LABELS[self]


_STAGE_LABELS = {
    Stage.PERSPECTIVES: "Step 1/3: Generating problem perspectives",
    Stage.CANDIDATES: "Step 2/3: Exploring multiple models",
    Stage.JUDGING: "Step 3/3: Ranking and merging solutions",
}


@dataclass(frozen=True)
class Perspective:
    label: str
    prompt: str            # problem restated from this angle


@dataclass(frozen=True)
class Solution:
    name: str
    description: str
    advantages: list[str] = field(default_factory=list)
    complexity: str | None = None      # "Low", "Medium", "High" or None
    time_estimate: str | None = None
    technologies: list[str] = field(default_factory=list)
    perspective: str | None = None     # label of the perspective that produced it
    backend: str | None = None         # backend that produced it


@dataclass
class BackendResponse:
    backend: str           # configured backend name, e.g. "gpt-4o-mini"
    model: str             # actual model string used
    content: str
    latency_sec: float
    token_count: int | None


@dataclass
class PipelineResult:
    problem: str
    perspectives: list[Perspective]
    candidate_count: int
    solutions: list[Solution]
    strategy: str          # "primary_judge", "alternate_judge", "top_candidates", "direct_fallback"
    strategy_backend: str | None
    duration_sec: float
