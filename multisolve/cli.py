"""Click CLI: loads config, builds backends, runs the pipeline, prints the result."""

import asyncio
import dataclasses
import logging
import sys
from pathlib import Path

import click
import yaml
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from config.config_loader import AppConfig, PipelineConfig, load_config, validate_roles
from multisolve.backends.anthropic import AnthropicBackend
from multisolve.backends.base import TextBackend
from multisolve.backends.gemini import GeminiBackend
from multisolve.backends.openai_compat import OpenAICompatBackend
from multisolve.client import BackendClient
from multisolve.errors import PipelineError
from multisolve.models import PipelineResult, Stage
from multisolve.output import print_result, result_to_json
from multisolve.pipeline import SolutionPipeline
from multisolve.problem_file import parse_problem_file

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

BACKEND_CLASSES: dict[str, type[TextBackend]] = {
    "openai": OpenAICompatBackend,
    "anthropic": AnthropicBackend,
    "gemini": GeminiBackend,
}


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
    # SDK request logging drowns out pipeline progress.
    for noisy in ("httpx", "httpcore", "openai", "anthropic", "google_genai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def _build_backends(config: AppConfig) -> dict[str, TextBackend]:
    """Build all available backends. Returns dict keyed by name."""
    backends: dict[str, TextBackend] = {}
    for name in sorted(config.available_backends):
        backend_cfg = config.backends[name]
        if backend_cfg.sdk not in BACKEND_CLASSES:
            logger.warning("Backend '%s' has unknown sdk '%s', skipping", name, backend_cfg.sdk)
            continue
        try:
            backends[name] = BACKEND_CLASSES[backend_cfg.sdk](backend_cfg)
        except Exception as exc:
            logger.warning("Failed to instantiate backend '%s': %s", name, exc)
    return backends


def _apply_overrides(
    pipeline: PipelineConfig,
    roster: list[str] | None,
    judge: str | None,
) -> PipelineConfig:
    """Return a copy of pipeline with roster/primary judge replaced when given."""
    changes: dict = {}
    if roster:
        changes["roster"] = roster
    if judge:
        changes["primary_judge"] = judge
    return dataclasses.replace(pipeline, **changes) if changes else pipeline


def _split_names(value: str | None) -> list[str] | None:
    if not value:
        return None
    return [n.strip() for n in value.split(",") if n.strip()]


async def _run_pipeline(
    problem: str,
    config: AppConfig,
    backends: dict[str, TextBackend],
    show_progress: bool,
) -> PipelineResult:
    runner = SolutionPipeline(config.pipeline, config.prompts, BackendClient(backends))
    if not show_progress:
        return await runner.run(problem)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Starting...", total=None)

        def on_stage(stage: Stage) -> None:
            progress.update(task, description=stage.label)

        return await runner.run(problem, on_stage=on_stage)


@click.command()
@click.argument("problem", required=False)
@click.option("--file", "problem_file", type=click.Path(exists=True), help="Read problem from .md file")
@click.option("--roster", default=None, help="Comma-separated generation backends, overrides config")
@click.option("--judge", default=None, help="Primary judge backend (default: from config)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--settings", "settings_path", default=None, type=click.Path(exists=True),
              help="Alternative settings.yaml")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
def main(
    problem: str | None,
    problem_file: str | None,
    roster: str | None,
    judge: str | None,
    as_json: bool,
    settings_path: str | None,
    verbose: bool,
) -> None:
    """multisolve -- Multi-model solution brainstorming.

    \b
    Examples:
      multisolve "Help freelancers track unpaid invoices"
      multisolve --file problem.md
      multisolve "Reduce no-shows at a dental clinic" --roster gpt-4o-mini,deepseek-r1
      multisolve "Reduce no-shows at a dental clinic" --judge gpt-4o --json
    """
    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config(Path(settings_path)) if settings_path else load_config()
    except (FileNotFoundError, KeyError, ValueError, TypeError, yaml.YAMLError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {escape(str(exc))}")
        sys.exit(1)

    file_overrides: dict = {}
    if problem_file:
        problem_text, file_overrides = parse_problem_file(Path(problem_file))
    elif problem:
        problem_text = problem
    else:
        console.print("[bold red]Error:[/bold red] Provide a PROBLEM argument or --file.")
        sys.exit(1)

    # CLI flags win over frontmatter
    pipeline = _apply_overrides(
        config.pipeline,
        roster=_split_names(roster) or file_overrides.get("roster"),
        judge=judge or file_overrides.get("judge"),
    )
    config = dataclasses.replace(config, pipeline=pipeline)

    unknown = validate_roles(config)
    if unknown:
        console.print(f"[bold red]Config error:[/bold red] unknown backends: {', '.join(unknown)}")
        sys.exit(1)

    backends = _build_backends(config)
    if not backends:
        console.print("[bold red]Error:[/bold red] No backends available. Check API keys in .env.")
        sys.exit(1)

    try:
        result = asyncio.run(
            _run_pipeline(problem_text, config, backends, show_progress=not as_json)
        )
    except PipelineError as exc:
        console.print(f"[bold red]Error generating solutions:[/bold red] {exc}")
        sys.exit(1)

    if as_json:
        click.echo(result_to_json(result))
    else:
        print_result(result)


if __name__ == "__main__":
    main()
