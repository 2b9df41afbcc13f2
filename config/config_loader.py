"""Load settings.yaml into typed dataclasses. Checks API keys at startup."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"


@dataclass
class BackendConfig:
    name: str
    sdk: str               # "openai", "anthropic" or "gemini"
    model: str
    api_key_env: str
    timeout_sec: int
    base_url: str | None = None


@dataclass
class BudgetsConfig:
    expand: int = 600
    candidate: int = 800
    judge: int = 1200
    alternate_judge: int = 1000
    direct: int = 1000


@dataclass
class PipelineConfig:
    expander: str
    roster: list[str]
    primary_judge: str
    alternate_judges: list[str] = field(default_factory=list)
    direct_fallbacks: list[str] = field(default_factory=list)
    perspective_count: int = 3
    solutions_per_request: int = 2
    result_size: int = 5
    judge_summary_chars: int = 100
    alternate_summary_chars: int = 80
    max_concurrency: int = 0          # 0 = unlimited
    budgets: BudgetsConfig = field(default_factory=BudgetsConfig)


@dataclass
class PromptsConfig:
    expand: str
    candidate: str
    judge: str
    alternate_judge: str
    direct: str


@dataclass
class AppConfig:
    pipeline: PipelineConfig
    backends: dict[str, BackendConfig]
    prompts: PromptsConfig
    available_backends: set[str] = field(default_factory=set)


def _load_pipeline(raw: dict) -> PipelineConfig:
    budgets_raw = raw.get("budgets", {})
    budgets = BudgetsConfig(**{k: int(v) for k, v in budgets_raw.items()})
    optional_ints = {
        key: int(raw[key])
        for key in (
            "perspective_count",
            "solutions_per_request",
            "result_size",
            "judge_summary_chars",
            "alternate_summary_chars",
            "max_concurrency",
        )
        if key in raw
    }
    return PipelineConfig(
        expander=str(raw["expander"]),
        roster=[str(n) for n in raw["roster"]],
        primary_judge=str(raw["primary_judge"]),
        alternate_judges=[str(n) for n in raw.get("alternate_judges", [])],
        direct_fallbacks=[str(n) for n in raw.get("direct_fallbacks", [])],
        budgets=budgets,
        **optional_ints,
    )


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing.
    Logs missing API keys but does not raise. Callers check
    available_backends.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    pipeline = _load_pipeline(raw["pipeline"])

    prompts_raw = raw["prompts"]
    prompts = PromptsConfig(
        expand=prompts_raw["expand"],
        candidate=prompts_raw["candidate"],
        judge=prompts_raw["judge"],
        alternate_judge=prompts_raw["alternate_judge"],
        direct=prompts_raw["direct"],
    )

    backends: dict[str, BackendConfig] = {}
    available_backends: set[str] = set()

    for backend_name, backend_raw in raw["backends"].items():
        backends[backend_name] = BackendConfig(
            name=backend_name,
            sdk=backend_raw["sdk"],
            model=backend_raw["model"],
            api_key_env=backend_raw["api_key_env"],
            timeout_sec=int(backend_raw["timeout_sec"]),
            base_url=backend_raw.get("base_url"),
        )

        api_key = os.environ.get(backend_raw["api_key_env"], "").strip()
        if api_key:
            available_backends.add(backend_name)
            logger.debug("Backend available: %s", backend_name)
        else:
            logger.debug(
                "Backend skipped (no API key): %s, set %s in .env",
                backend_name,
                backend_raw["api_key_env"],
            )

    return AppConfig(
        pipeline=pipeline,
        backends=backends,
        prompts=prompts,
        available_backends=available_backends,
    )


def validate_roles(config: AppConfig) -> list[str]:
    """Return "role: name" entries whose backend name is not declared under backends."""
    p = config.pipeline
    roles: list[tuple[str, str]] = [("expander", p.expander), ("primary_judge", p.primary_judge)]
    roles += [("roster", n) for n in p.roster]
    roles += [("alternate_judges", n) for n in p.alternate_judges]
    roles += [("direct_fallbacks", n) for n in p.direct_fallbacks]
    return [f"{role}: {name}" for role, name in roles if name not in config.backends]
