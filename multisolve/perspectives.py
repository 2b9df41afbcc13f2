"""Perspective expansion: restate one problem from several different angles."""

import logging

from config.config_loader import PipelineConfig, PromptsConfig
from multisolve.backends.base import BackendError, MalformedPayload
from multisolve.client import BackendClient
from multisolve.errors import ExpansionError
from multisolve.models import Perspective
from multisolve.parsing import perspectives_from_payload

logger = logging.getLogger(__name__)


async def expand(
    client: BackendClient,
    problem: str,
    pipeline: PipelineConfig,
    prompts: PromptsConfig,
) -> list[Perspective]:
    """Ask the expander backend for alternative framings of the problem.

    Args:
        client: Backend client used for the single expander call.
        problem: The original problem statement.
        pipeline: Pipeline roles and budgets.
        prompts: Prompt templates from config.

    Returns:
        Up to pipeline.perspective_count perspectives. An unparseable or
        empty answer gives [], which sends the pipeline down its
        zero-candidate path.

    Raises:
        ExpansionError: If the expander call returns no text at all.
    """
    prompt = prompts.expand.format(problem=problem, count=pipeline.perspective_count)
    logger.info("Expanding problem via %s", pipeline.expander)

    payload = await client.invoke_json(pipeline.expander, prompt, pipeline.budgets.expand)

    if isinstance(payload, MalformedPayload):
        logger.warning("Perspective expansion unparseable, continuing with no perspectives")
        return []
    if isinstance(payload, BackendError):
        raise ExpansionError(f"Failed to generate problem perspectives: {payload}") from payload

    perspectives = perspectives_from_payload(payload)
    if len(perspectives) > pipeline.perspective_count:
        perspectives = perspectives[:pipeline.perspective_count]
    elif len(perspectives) < pipeline.perspective_count:
        logger.warning(
            "Expander returned %d/%d perspectives",
            len(perspectives),
            pipeline.perspective_count,
        )

    logger.info("Perspectives: %s", ", ".join(p.label for p in perspectives) or "(none)")
    return perspectives
