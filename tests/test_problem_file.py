"""Unit tests for multisolve/problem_file.py."""

import textwrap
from pathlib import Path

from multisolve.problem_file import parse_problem_file


def test_parse_problem_file_no_frontmatter(tmp_path: Path) -> None:
    f = tmp_path / "problem.md"
    f.write_text("Help freelancers track unpaid invoices\n", encoding="utf-8")
    problem, overrides = parse_problem_file(f)
    assert problem == "Help freelancers track unpaid invoices"
    assert overrides == {}


def test_parse_problem_file_with_frontmatter(tmp_path: Path) -> None:
    f = tmp_path / "problem.md"
    f.write_text(
        textwrap.dedent("""\
            ---
            roster: gpt-4o-mini, deepseek-r1
            judge: gpt-4o
            ---
            Reduce no-shows at a dental clinic.
        """),
        encoding="utf-8",
    )
    problem, overrides = parse_problem_file(f)
    assert problem == "Reduce no-shows at a dental clinic."
    assert overrides["roster"] == ["gpt-4o-mini", "deepseek-r1"]
    assert overrides["judge"] == "gpt-4o"


def test_parse_problem_file_roster_as_list(tmp_path: Path) -> None:
    f = tmp_path / "problem.md"
    f.write_text(
        textwrap.dedent("""\
            ---
            roster:
              - claude-3.5-sonnet
              - gemini-flash
            unrelated: ignored
            ---
            Plan a conference app.
        """),
        encoding="utf-8",
    )
    problem, overrides = parse_problem_file(f)
    assert overrides == {"roster": ["claude-3.5-sonnet", "gemini-flash"]}
