"""Parallel candidate generation: every perspective against every roster backend."""

import asyncio
import logging

from config.config_loader import PipelineConfig, PromptsConfig
from multisolve.backends.base import BackendError
from multisolve.client import BackendClient
from multisolve.models import Perspective, Solution
from multisolve.parsing import solutions_from_payload

logger = logging.getLogger(__name__)


async def _generate_one(
    client: BackendClient,
    backend_id: str,
    perspective: Perspective,
    problem: str,
    pipeline: PipelineConfig,
    prompts: PromptsConfig,
    semaphore: asyncio.Semaphore | None,
) -> list[Solution] | None:
    """One (perspective, backend) call. Returns None on any failure, never raises."""
    prompt = prompts.candidate.format(
        problem=problem,
        label=perspective.label,
        perspective=perspective.prompt,
        count=pipeline.solutions_per_request,
    )
    if semaphore is None:
        payload = await client.invoke_json(backend_id, prompt, pipeline.budgets.candidate)
    else:
        async with semaphore:
            payload = await client.invoke_json(backend_id, prompt, pipeline.budgets.candidate)

    if isinstance(payload, BackendError):
        return None
    try:
        return solutions_from_payload(payload, backend_id, perspective=perspective.label)
    except BackendError as exc:
        logger.warning("Candidate call %s / %s unusable: %s", perspective.label, backend_id, exc)
        return None


async def generate(
    client: BackendClient,
    perspectives: list[Perspective],
    problem: str,
    pipeline: PipelineConfig,
    prompts: PromptsConfig,
) -> list[Solution]:
    """Fan out perspectives x roster concurrently and flatten the results.

    Waits for every call to settle. Failed calls are dropped. Never raises.
    An empty perspective list gives an empty candidate list.
    """
    semaphore = asyncio.Semaphore(pipeline.max_concurrency) if pipeline.max_concurrency > 0 else None
    tasks = [
        _generate_one(client, backend_id, perspective, problem, pipeline, prompts, semaphore)
        for perspective in perspectives
        for backend_id in pipeline.roster
    ]
    if not tasks:
        logger.info("No perspectives, skipping candidate generation")
        return []

    logger.info("Launching %d candidate calls", len(tasks))
    results = await asyncio.gather(*tasks)

    candidates: list[Solution] = []
    succeeded = 0
    for result in results:
        if result is not None:
            succeeded += 1
            candidates.extend(result)

    logger.info(
        "Candidate generation: %d/%d calls succeeded, %d candidates",
        succeeded,
        len(tasks),
        len(candidates),
    )
    if succeeded * 2 < len(tasks):
        logger.warning(
            "Only %d/%d candidate calls succeeded. Candidate diversity is degraded.",
            succeeded,
            len(tasks),
        )
    return candidates
