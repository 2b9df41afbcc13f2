"""JSON extraction from model completions and coercion into Solution/Perspective."""

import json
import logging
import re
from typing import Any

from multisolve.backends.base import MalformedPayload
from multisolve.models import Perspective, Solution

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?", flags=re.IGNORECASE)
_COMPLEXITY_LABELS = {"low": "Low", "medium": "Medium", "high": "High"}


def extract_json(text: str, backend_name: str = "unknown") -> Any:
    """Parse a completion that may be wrapped in ``` fences or surrounded by prose.

    Raises:
        MalformedPayload: If no JSON document can be recovered.
    """
    cleaned = _FENCE_RE.sub("", text).strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    # Leading/trailing prose: retry on the outermost object span.
    start, end = cleaned.find("{"), cleaned.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(cleaned[start:end + 1])
        except json.JSONDecodeError as exc:
            raise MalformedPayload(backend_name, f"Invalid JSON: {exc}") from exc

    raise MalformedPayload(backend_name, "No JSON object in response")


def _str_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(v) for v in value if isinstance(v, (str, int, float)) and str(v).strip()]
    return []


def _optional_str(value: Any) -> str | None:
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        text = str(value).strip()
        return text or None
    return None


def normalize_complexity(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return _COMPLEXITY_LABELS.get(value.strip().lower())


def solution_from_dict(
    raw: Any,
    perspective: str | None = None,
    backend: str | None = None,
) -> Solution | None:
    """Build a Solution, or return None when name/description are missing."""
    if not isinstance(raw, dict):
        return None
    name = raw.get("name")
    description = raw.get("description")
    if not isinstance(name, str) or not name.strip():
        return None
    if not isinstance(description, str) or not description.strip():
        return None

    return Solution(
        name=name.strip(),
        description=description.strip(),
        advantages=_str_list(raw.get("advantages")),
        complexity=normalize_complexity(raw.get("complexity")),
        time_estimate=_optional_str(raw.get("timeEstimate", raw.get("time_estimate"))),
        technologies=_str_list(raw.get("technologies")),
        perspective=perspective,
        backend=backend,
    )


def solutions_from_payload(
    payload: Any,
    backend_name: str,
    perspective: str | None = None,
) -> list[Solution]:
    """Read the "solutions" list out of a parsed payload.

    Raises:
        MalformedPayload: If the payload has no "solutions" list.
    """
    raw_solutions = payload.get("solutions") if isinstance(payload, dict) else None
    if not isinstance(raw_solutions, list):
        raise MalformedPayload(backend_name, "Payload has no 'solutions' list")

    solutions = [
        s for s in (solution_from_dict(r, perspective, backend_name) for r in raw_solutions)
        if s is not None
    ]
    dropped = len(raw_solutions) - len(solutions)
    if dropped:
        logger.debug("%s: dropped %d malformed solution entries", backend_name, dropped)
    return solutions


def perspectives_from_payload(payload: Any) -> list[Perspective]:
    """Read perspectives out of a parsed payload. Missing or odd shapes give []."""
    if not isinstance(payload, dict):
        return []
    raw = payload.get("perspectives", payload.get("twists"))
    if not isinstance(raw, list):
        return []

    perspectives: list[Perspective] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, dict):
            continue
        label = _optional_str(item.get("label"))
        prompt = _optional_str(item.get("prompt"))
        if not label or not prompt or label.lower() in seen:
            continue
        seen.add(label.lower())
        perspectives.append(Perspective(label=label, prompt=prompt))
    return perspectives


def solution_to_dict(solution: Solution) -> dict[str, Any]:
    """JSON-ready dict using the camelCase keys the prompts ask for."""
    return {
        "name": solution.name,
        "description": solution.description,
        "advantages": list(solution.advantages),
        "complexity": solution.complexity,
        "timeEstimate": solution.time_estimate,
        "technologies": list(solution.technologies),
        "perspective": solution.perspective,
        "backend": solution.backend,
    }
