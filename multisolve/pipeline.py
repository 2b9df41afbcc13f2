"""Pipeline driver: perspectives -> parallel candidates -> judging."""

import logging
import time
from collections.abc import Callable

from config.config_loader import PipelineConfig, PromptsConfig
from multisolve import generator, judge, perspectives
from multisolve.client import BackendClient
from multisolve.errors import PipelineError
from multisolve.models import PipelineResult, Stage

logger = logging.getLogger(__name__)


class SolutionPipeline:
    """Runs the three stages for one problem statement."""

    def __init__(self, pipeline: PipelineConfig, prompts: PromptsConfig, client: BackendClient) -> None:
        self._pipeline = pipeline
        self._prompts = prompts
        self._client = client

    async def run(
        self,
        problem: str,
        on_stage: Callable[[Stage], None] | None = None,
    ) -> PipelineResult:
        """Run the full pipeline.

        Args:
            problem: Free-text problem statement.
            on_stage: Optional callback invoked as each stage starts.

        Returns:
            PipelineResult with at most result_size solutions.

        Raises:
            PipelineError: On blank input, a failed expander call, or when no
                candidates exist and every direct fallback fails.
        """
        problem = problem.strip()
        if not problem:
            raise PipelineError("Please enter a problem statement first")

        start = time.monotonic()

        def enter(stage: Stage) -> None:
            logger.info(stage.label)
            if on_stage:
                on_stage(stage)

        enter(Stage.PERSPECTIVES)
        found = await perspectives.expand(self._client, problem, self._pipeline, self._prompts)

        enter(Stage.CANDIDATES)
        candidates = await generator.generate(self._client, found, problem, self._pipeline, self._prompts)

        enter(Stage.JUDGING)
        reduction = await judge.reduce(self._client, candidates, problem, self._pipeline, self._prompts)

        duration = time.monotonic() - start
        logger.info(
            "Pipeline complete: %d solutions via %s in %.1fs",
            len(reduction.solutions),
            reduction.strategy,
            duration,
        )

        return PipelineResult(
            problem=problem,
            perspectives=found,
            candidate_count=len(candidates),
            solutions=reduction.solutions,
            strategy=reduction.strategy,
            strategy_backend=reduction.backend,
            duration_sec=duration,
        )
