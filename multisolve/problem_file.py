"""Read a problem statement from a markdown file with optional YAML frontmatter."""

from pathlib import Path

import frontmatter


def parse_problem_file(file_path: Path) -> tuple[str, dict]:
    """Parse a markdown problem file.

    Returns:
        (problem, overrides) where problem is the body text and overrides
        holds the recognised frontmatter keys: roster (list[str]) and
        judge (str). Without frontmatter, overrides is {}.
    """
    post = frontmatter.load(str(file_path))
    problem = post.content.strip()

    overrides: dict = {}
    roster = post.metadata.get("roster")
    if isinstance(roster, str):
        overrides["roster"] = [n.strip() for n in roster.split(",") if n.strip()]
    elif isinstance(roster, list):
        overrides["roster"] = [str(n).strip() for n in roster if str(n).strip()]
    judge = post.metadata.get("judge")
    if judge:
        overrides["judge"] = str(judge).strip()
    return problem, overrides
