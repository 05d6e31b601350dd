"""
Attribution Engine
──────────────────
Estimates how much of a pending change was produced by an AI assistant.

Each non-trivial added line in the working diff is compared, by TF-IDF cosine
similarity, against the lines recently recorded in AI editing snapshots. A line
whose best match reaches the threshold counts as AI-generated.

When there is no snapshot material to compare against, every line is counted
as AI-generated. Missing evidence biases towards over-attribution, never
towards silently reporting 0%.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from coauthor_cli.config import DEFAULT_CHANGES_DIR, DEFAULT_RETENTION_HOURS, DEFAULT_SNAPSHOT_LIMIT, DEFAULT_THRESHOLD
from coauthor_cli.detectors.similarity import cosine_similarity
from coauthor_cli.detectors.tfidf import build_vocabulary, vectorize
from coauthor_cli.git_client import get_current_diff
from coauthor_cli.logging_config import get_logger
from coauthor_cli.snapshots import load_recent_snapshots

logger = get_logger(__name__)

# Strictly above this share of AI lines, the commit gets a Co-authored-by trailer
CO_AUTHOR_MIN_PERCENTAGE = 10.0


def needs_co_author(ai_percentage: float) -> bool:
    return ai_percentage > CO_AUTHOR_MIN_PERCENTAGE


@dataclass(frozen=True)
class LineScore:
    file: str
    text: str
    similarity: float
    ai_generated: bool


@dataclass(frozen=True)
class AttributionResult:
    total_lines: int = 0
    ai_generated_lines: int = 0
    lines: Tuple[LineScore, ...] = field(default=(), compare=False, repr=False)
    used_fallback: bool = field(default=False, compare=False)

    @property
    def ai_percentage(self) -> float:
        if self.total_lines == 0:
            return 0.0
        return self.ai_generated_lines * 100 / self.total_lines

    @property
    def needs_co_author(self) -> bool:
        return needs_co_author(self.ai_percentage)

    def to_dict(self) -> dict:
        return {
            "total_lines": self.total_lines,
            "ai_generated_lines": self.ai_generated_lines,
            "ai_percentage": round(self.ai_percentage, 2),
            "needs_co_author": self.needs_co_author,
            "used_fallback": self.used_fallback,
        }


def is_skippable_line(line: str) -> bool:
    """Blank lines and comment lines are not attributable statements."""
    trimmed = line.strip()
    return not trimmed or trimmed.startswith(('//', '*'))


def collect_lines(additions: Iterable[str]) -> List[str]:
    return [line.strip() for line in additions if not is_skippable_line(line)]


def best_match(vector, candidates: Iterable, threshold: float) -> float:
    """
    Highest similarity between `vector` and any candidate, scanning in order
    and stopping at the first candidate that reaches `threshold`.
    """
    best = 0.0
    for candidate in candidates:
        score = cosine_similarity(vector, candidate)
        if score > best:
            best = score
        if score >= threshold:
            break
    return best


def attribute_lines(
    snapshot_lines: Sequence[str],
    current_diff: Mapping[str, Sequence[str]],
    threshold: float = DEFAULT_THRESHOLD,
) -> AttributionResult:
    """Classify every added line of `current_diff` against the snapshot corpus."""
    reference = collect_lines(snapshot_lines)
    current = [(path, line) for path, additions in current_diff.items() for line in collect_lines(additions)]

    if not current:
        return AttributionResult()

    if not reference:
        logger.warning("No recent AI snapshots to compare against; attributing all %d lines to AI", len(current))
        scores = tuple(LineScore(path, line, 0.0, True) for path, line in current)
        return AttributionResult(len(scores), len(scores), scores, used_fallback=True)

    # One shared vocabulary so both corpora are vectorized in the same space
    vocabulary = build_vocabulary(reference + [line for _, line in current])
    reference_vectors = [vectorize(line, vocabulary) for line in reference]
    logger.info(
        "Comparing %d diff lines against %d snapshot lines (vocabulary of %d tokens)",
        len(current), len(reference_vectors), vocabulary.size,
    )

    scores = []
    for path, line in current:
        similarity = best_match(vectorize(line, vocabulary), reference_vectors, threshold)
        scores.append(LineScore(path, line, similarity, similarity >= threshold))

    ai_lines = sum(1 for s in scores if s.ai_generated)
    return AttributionResult(len(scores), ai_lines, tuple(scores))


def attribute_changes(
    repo_root: str = ".",
    threshold: float = DEFAULT_THRESHOLD,
    limit: int = DEFAULT_SNAPSHOT_LIMIT,
    window: timedelta = timedelta(hours=DEFAULT_RETENTION_HOURS),
    changes_dir: str = DEFAULT_CHANGES_DIR,
    now: Optional[datetime] = None,
) -> AttributionResult:
    """Attribute the pending changes of the repository at `repo_root`."""
    snapshots = load_recent_snapshots(repo_root, limit=limit, window=window, now=now, changes_dir=changes_dir)
    current_diff = get_current_diff(repo_root)

    snapshot_lines = [line for snapshot in snapshots for line in snapshot.added_lines()]
    return attribute_lines(snapshot_lines, current_diff, threshold)
