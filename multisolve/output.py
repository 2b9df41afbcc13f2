"""Rich console output and JSON dump for pipeline results."""

import json

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

from multisolve.models import PipelineResult, Solution
from multisolve.parsing import solution_to_dict

console = Console(legacy_windows=False)

_COMPLEXITY_STYLES = {
    "low": "green",
    "medium": "yellow",
    "high": "red",
}


def complexity_style(complexity: str | None) -> str:
    return _COMPLEXITY_STYLES.get((complexity or "").lower(), "dim")


def _solution_body(solution: Solution) -> Text:
    body = Text(solution.description)
    if solution.advantages:
        body.append("\n\nAdvantages\n", style="bold")
        body.append("\n".join(f"  + {a}" for a in solution.advantages))
    if solution.technologies:
        body.append("\n\nTechnologies: ", style="bold")
        body.append(", ".join(solution.technologies))
    return body


def _solution_subtitle(solution: Solution) -> str:
    style = complexity_style(solution.complexity)
    parts = [f"[{style}]{solution.complexity or 'Unspecified'}[/{style}]"]
    if solution.time_estimate:
        parts.append(escape(solution.time_estimate))
    return " | ".join(parts)


def print_result(result: PipelineResult) -> None:
    """Print every solution as a panel, with a short provenance line."""
    console.print(Rule("[bold green]Solutions[/bold green]"))
    source = result.strategy.replace("_", " ")
    if result.strategy_backend:
        source += f" ({result.strategy_backend})"
    console.print(
        Text(
            f"Perspectives: {len(result.perspectives)} | "
            f"Candidates: {result.candidate_count} | "
            f"Selected by: {source} | "
            f"Duration: {result.duration_sec:.1f}s",
            style="dim",
        )
    )
    for idx, solution in enumerate(result.solutions, start=1):
        console.print(
            Panel(
                _solution_body(solution),
                title=f"[bold]{idx}. {escape(solution.name)}[/bold]",
                subtitle=_solution_subtitle(solution),
                border_style=complexity_style(solution.complexity),
            )
        )


def result_to_json(result: PipelineResult) -> str:
    return json.dumps(
        {
            "problem": result.problem,
            "perspectives": [{"label": p.label, "prompt": p.prompt} for p in result.perspectives],
            "candidateCount": result.candidate_count,
            "strategy": result.strategy,
            "strategyBackend": result.strategy_backend,
            "durationSec": round(result.duration_sec, 2),
            "solutions": [solution_to_dict(s) for s in result.solutions],
        },
        indent=2,
        ensure_ascii=False,
    )
