"""
Conventional commit message generation from `git status --short` output,
plus the attribution trailers appended after the attribution run.
"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Iterable, List, Tuple

_DEPENDENCY_MANIFESTS = {
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "requirements.txt",
    "pyproject.toml",
    "poetry.lock",
    "Pipfile",
    "Pipfile.lock",
    "go.mod",
    "go.sum",
    "Cargo.toml",
    "Cargo.lock",
}

FALLBACK_MESSAGE = "chore: update files"


@dataclass
class StatusSummary:
    modified: int = 0
    added: int = 0
    deleted: int = 0
    paths: List[str] = field(default_factory=list)


def _status_path(line: str) -> str:
    path = line[3:].strip()
    # Renames and copies are reported as "old -> new"
    if " -> " in path:
        path = path.split(" -> ", 1)[1]
    return path.strip('"')


def summarize_status(status_lines: Iterable[str]) -> StatusSummary:
    summary = StatusSummary()
    for line in status_lines:
        if len(line) < 4 or not line.strip():
            continue
        code = line[:2]
        summary.paths.append(_status_path(line))

        if code == "??" or code[0] == "A":
            summary.added += 1
        elif "D" in code:
            summary.deleted += 1
        elif "M" in code or "R" in code:
            summary.modified += 1
    return summary


def classify_change(summary: StatusSummary) -> Tuple[str, str, str]:
    """Pick (type, scope, description) for the conventional commit header."""
    names = [PurePosixPath(p).name for p in summary.paths]
    lowered = [p.lower() for p in summary.paths]

    if any(name in _DEPENDENCY_MANIFESTS for name in names):
        return "chore", "deps", "update dependencies"
    if any(p.endswith(".md") for p in lowered):
        return "docs", "", "update documentation"
    if any("test" in p or "spec" in p for p in lowered):
        return "test", "", "update tests"
    if summary.added > summary.modified:
        return "feat", "", "add new features"
    if summary.modified > 0:
        return "fix", "", "update implementation"
    return "chore", "", "update files"


def generate_commit_message(status_lines: Iterable[str]) -> str:
    summary = summarize_status(status_lines)
    if not summary.paths:
        return FALLBACK_MESSAGE

    kind, scope, description = classify_change(summary)
    header = f"{kind}({scope}): {description}" if scope else f"{kind}: {description}"

    counts = []
    if summary.modified:
        counts.append(f"{summary.modified} modified")
    if summary.added:
        counts.append(f"{summary.added} added")
    if summary.deleted:
        counts.append(f"{summary.deleted} deleted")

    if not counts:
        return header
    return f"{header}\n\n{', '.join(counts)}"


def append_attribution(message: str, result, co_author: str) -> str:
    """Add the AI-Generated line and, when warranted, the Co-authored-by trailer."""
    trailers = []
    if result.total_lines > 0:
        trailers.append(
            f"AI-Generated: {result.ai_generated_lines}/{result.total_lines} lines "
            f"({result.ai_percentage:.1f}%)"
        )
    if result.needs_co_author:
        trailers.append(f"Co-authored-by: {co_author}")

    if not trailers:
        return message
    return message + "\n\n" + "\n".join(trailers)
