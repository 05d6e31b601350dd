"""
Snapshot Repository
───────────────────
The editor integration records every AI editing session as a JSON file:

    <repo>/.cursor-changes/<branch>/<YYYY-MM-DD>/<anything>.json

    {
      "timestamp": "2026-10-18T09:41:07.120Z",
      "branch": "main",
      "changes": [
        {"file": "src/app.ts", "additions": ["..."], "deletions": ["..."]}
      ]
    }

The branch/date hierarchy is only a storage convenience. All branches are
flattened, then filtered to the retention window and sorted newest first.
Records that cannot be read or decoded are skipped one at a time.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from coauthor_cli.config import DEFAULT_CHANGES_DIR, DEFAULT_RETENTION_HOURS, DEFAULT_SNAPSHOT_LIMIT
from coauthor_cli.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileChange:
    file: str
    additions: Tuple[str, ...] = ()
    deletions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ChangeSnapshot:
    timestamp: datetime
    branch: str
    changes: Tuple[FileChange, ...] = ()

    def added_lines(self) -> Iterator[str]:
        for change in self.changes:
            yield from change.additions


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _string_lines(value) -> Tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(line, str) for line in value):
        raise ValueError("line list must be a list of strings")
    return tuple(value)


def _decode_change(entry) -> FileChange:
    if not isinstance(entry, dict):
        raise ValueError("change entry must be an object")
    return FileChange(
        file=str(entry.get("file", "")),
        additions=_string_lines(entry.get("additions")),
        deletions=_string_lines(entry.get("deletions")),
    )


def decode_snapshot(path: Path, branch: str) -> Optional[ChangeSnapshot]:
    """
    Read one snapshot record. Returns None when the file cannot be used.

    A record without a timestamp falls back to the file's modification time.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("snapshot root must be an object")

        raw_timestamp = data.get("timestamp")
        if raw_timestamp:
            timestamp = parse_timestamp(str(raw_timestamp))
        else:
            timestamp = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)

        changes = data.get("changes") or []
        if not isinstance(changes, list):
            raise ValueError("changes must be a list")

        return ChangeSnapshot(
            timestamp=timestamp,
            branch=branch,
            changes=tuple(_decode_change(entry) for entry in changes),
        )
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValueError, TypeError, RecursionError) as e:
        logger.debug("Skipping snapshot %s: %s", path, e)
        return None


def _iter_snapshot_files(changes_dir: Path) -> Iterator[Tuple[str, Path]]:
    """Yield (branch, path) for every record file under the changes directory."""
    try:
        branches = sorted(p for p in changes_dir.iterdir() if p.is_dir())
    except OSError:
        return

    for branch_dir in branches:
        try:
            dates = sorted(p for p in branch_dir.iterdir() if p.is_dir())
        except OSError as e:
            logger.debug("Cannot list branch directory %s: %s", branch_dir, e)
            continue
        for date_dir in dates:
            try:
                files = sorted(p for p in date_dir.iterdir() if p.suffix == ".json" and p.is_file())
            except OSError as e:
                logger.debug("Cannot list date directory %s: %s", date_dir, e)
                continue
            for path in files:
                yield branch_dir.name, path


def load_recent_snapshots(
    repo_root,
    limit: int = DEFAULT_SNAPSHOT_LIMIT,
    window: timedelta = timedelta(hours=DEFAULT_RETENTION_HOURS),
    now: Optional[datetime] = None,
    changes_dir: str = DEFAULT_CHANGES_DIR,
) -> List[ChangeSnapshot]:
    """
    Return at most `limit` snapshots recorded within `window` of `now`,
    most recent first. A missing changes directory yields an empty list.
    """
    root = Path(repo_root) / changes_dir
    if not root.is_dir():
        logger.debug("No snapshot directory at %s", root)
        return []

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    try:
        cutoff = now - window
    except OverflowError:
        cutoff = datetime.min.replace(tzinfo=timezone.utc)

    snapshots = []
    for branch, path in _iter_snapshot_files(root):
        snapshot = decode_snapshot(path, branch)
        if snapshot is None:
            continue
        if snapshot.timestamp < cutoff:
            continue
        snapshots.append(snapshot)

    snapshots.sort(key=lambda s: s.timestamp, reverse=True)
    recent = snapshots[:max(limit, 0)]
    logger.info("Loaded %d of %d recent snapshots from %s", len(recent), len(snapshots), root)
    return recent
