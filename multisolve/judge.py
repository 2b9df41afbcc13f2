"""Judging: reduce candidates to the final set through a cascade of fallbacks.

Order of attempts:
    no candidates     -> direct fallback backends (raise if all fail)
    primary judge     -> alternate judges in order -> top raw candidates
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from config.config_loader import PipelineConfig, PromptsConfig
from multisolve.backends.base import BackendError, MalformedPayload
from multisolve.client import BackendClient
from multisolve.errors import NoSolutionsError
from multisolve.models import Solution
from multisolve.parsing import solutions_from_payload

logger = logging.getLogger(__name__)

PRIMARY_JUDGE = "primary_judge"
ALTERNATE_JUDGE = "alternate_judge"
TOP_CANDIDATES = "top_candidates"
DIRECT_FALLBACK = "direct_fallback"


@dataclass
class Reduction:
    solutions: list[Solution]
    strategy: str
    backend: str | None


@dataclass
class _Attempt:
    strategy: str
    backend: str
    run: Callable[[], Awaitable[list[Solution] | BackendError]]


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + "..."


def compress_candidates(
    candidates: list[Solution],
    summary_chars: int,
    with_perspective: bool = True,
) -> str:
    """One line per candidate: 'id. name (complexity) [perspective]: summary'."""
    lines: list[str] = []
    for idx, sol in enumerate(candidates, start=1):
        line = f"{idx}. {sol.name} ({sol.complexity or 'Unspecified'})"
        if with_perspective:
            line += f" [{sol.perspective or 'Unknown perspective'}]"
        lines.append(f"{line}: {_truncate(sol.description, summary_chars)}")
    return "\n".join(lines)


async def _ask_for_solutions(
    client: BackendClient,
    backend_id: str,
    prompt: str,
    max_tokens: int,
) -> list[Solution] | BackendError:
    """One call that must yield a non-empty solutions list, else a BackendError."""
    payload = await client.invoke_json(backend_id, prompt, max_tokens)
    if isinstance(payload, BackendError):
        return payload
    try:
        solutions = solutions_from_payload(payload, backend_id)
    except MalformedPayload as exc:
        logger.warning("%s", exc)
        return exc
    if not solutions:
        err = MalformedPayload(backend_id, "No usable solutions in payload")
        logger.warning("%s", err)
        return err
    return solutions


async def _first_success(attempts: list[_Attempt]) -> Reduction | None:
    """Try attempts in order, returning the first that yields solutions."""
    for attempt in attempts:
        logger.info("Trying %s: %s", attempt.strategy.replace("_", " "), attempt.backend)
        result = await attempt.run()
        if isinstance(result, BackendError):
            logger.warning("%s %s failed, moving on", attempt.strategy.replace("_", " "), attempt.backend)
            continue
        logger.info("Solutions from %s %s", attempt.strategy.replace("_", " "), attempt.backend)
        return Reduction(solutions=result, strategy=attempt.strategy, backend=attempt.backend)
    return None


def _attempt(
    client: BackendClient,
    strategy: str,
    backend_id: str,
    prompt: str,
    max_tokens: int,
) -> _Attempt:
    return _Attempt(
        strategy=strategy,
        backend=backend_id,
        run=lambda: _ask_for_solutions(client, backend_id, prompt, max_tokens),
    )


async def direct_fallback(
    client: BackendClient,
    problem: str,
    pipeline: PipelineConfig,
    prompts: PromptsConfig,
) -> Reduction:
    """Ask each direct fallback backend for solutions without any candidate context.

    Raises:
        NoSolutionsError: If every direct fallback backend fails.
    """
    prompt = prompts.direct.format(problem=problem, count=pipeline.result_size)
    attempts = [
        _attempt(client, DIRECT_FALLBACK, backend_id, prompt, pipeline.budgets.direct)
        for backend_id in pipeline.direct_fallbacks
    ]
    reduction = await _first_success(attempts)
    if reduction is None:
        raise NoSolutionsError(
            "All fallback models failed. Please check your API keys and credits."
        )
    reduction.solutions = reduction.solutions[:pipeline.result_size]
    return reduction


async def reduce(
    client: BackendClient,
    candidates: list[Solution],
    problem: str,
    pipeline: PipelineConfig,
    prompts: PromptsConfig,
) -> Reduction:
    """Select, deduplicate and merge candidates into at most result_size solutions.

    Args:
        client: Backend client for judge and fallback calls.
        candidates: Flat candidate list from generation, possibly empty.
        problem: The original problem statement.
        pipeline: Pipeline roles, sizes and budgets.
        prompts: Prompt templates from config.

    Returns:
        Reduction with the final solutions and the strategy that produced them.
        Non-empty whenever candidates is non-empty.

    Raises:
        NoSolutionsError: Only on the zero-candidate path when every direct
            fallback backend fails.
    """
    if not candidates:
        logger.info("No candidate solutions, using direct fallback")
        return await direct_fallback(client, problem, pipeline, prompts)

    judge_prompt = prompts.judge.format(
        problem=problem,
        candidates=compress_candidates(candidates, pipeline.judge_summary_chars),
        count=pipeline.result_size,
    )
    attempts = [_attempt(client, PRIMARY_JUDGE, pipeline.primary_judge, judge_prompt, pipeline.budgets.judge)]

    # Smaller-context alternates get tighter summaries without perspective tags.
    alternate_prompt = prompts.alternate_judge.format(
        problem=problem,
        candidates=compress_candidates(candidates, pipeline.alternate_summary_chars, with_perspective=False),
        count=pipeline.result_size,
    )
    attempts += [
        _attempt(client, ALTERNATE_JUDGE, backend_id, alternate_prompt, pipeline.budgets.alternate_judge)
        for backend_id in pipeline.alternate_judges
    ]

    logger.info("Judging %d candidates", len(candidates))
    reduction = await _first_success(attempts)
    if reduction is not None:
        reduction.solutions = reduction.solutions[:pipeline.result_size]
        return reduction

    logger.warning("All judge models failed, returning top %d candidates", pipeline.result_size)
    return Reduction(
        solutions=candidates[:pipeline.result_size],
        strategy=TOP_CANDIDATES,
        backend=None,
    )
