import git
from typing import Dict, List, Optional

from coauthor_cli.logging_config import get_logger

logger = get_logger(__name__)


class GitOperationError(RuntimeError):
    """A git command needed by the commit flow failed."""


def get_repo(path: str = "."):
    try:
        return git.Repo(path, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
        return None


def parse_added_lines(diff_text: str) -> Dict[str, List[str]]:
    """
    Map each file in a unified diff to its added (`+`) lines, in order.

    `+++` headers switch the current file and are never collected. Added lines
    seen before any header are filed under the empty key.
    """
    added: Dict[str, List[str]] = {}
    current_file = ""

    for line in diff_text.split('\n'):
        if line.startswith('+++'):
            current_file = _header_path(line)
            added.setdefault(current_file, [])
        elif line.startswith('+'):
            added.setdefault(current_file, []).append(line[1:])

    return added


def _header_path(header: str) -> str:
    path = header[3:].strip()
    # Some diff tools append a tab-separated timestamp to the path
    path = path.split('\t', 1)[0]
    if path.startswith('b/'):
        path = path[2:]
    return path


def get_working_diff(repo: git.Repo) -> str:
    """Working tree plus index against HEAD, as unified diff text."""
    try:
        return repo.git.diff("HEAD")
    except git.exc.GitCommandError as e:
        # No HEAD yet (fresh repository) or git itself failed
        logger.warning("Could not diff against HEAD (exit status %s)", e.status)
        logger.debug("git diff failed: %s", e)
        return ""


def get_current_diff(repo_root: str = ".") -> Dict[str, List[str]]:
    """Added lines of the pending changes per file; empty when unavailable."""
    repo = get_repo(repo_root)
    if repo is None:
        logger.warning("'%s' is not a git repository; no diff to attribute", repo_root)
        return {}
    return parse_added_lines(get_working_diff(repo))


def get_status_lines(repo: git.Repo) -> List[str]:
    try:
        status = repo.git.status("--short")
    except git.exc.GitCommandError as e:
        raise GitOperationError(f"Cannot read git status: {e}") from e
    return [l for l in status.split('\n') if l.strip()]


def stage_all(repo: git.Repo):
    try:
        repo.git.add(".")
    except git.exc.GitCommandError as e:
        raise GitOperationError(f"Staging failed: {e}") from e


def commit(repo: git.Repo, message: str) -> str:
    """Commit the index and return the new commit's hexsha."""
    try:
        repo.git.commit("-m", message)
    except git.exc.GitCommandError as e:
        raise GitOperationError(f"Commit failed: {e}") from e
    return repo.head.commit.hexsha


def push(repo: git.Repo):
    try:
        repo.git.push()
    except git.exc.GitCommandError as e:
        raise GitOperationError(f"Push failed, run 'git push' manually: {e}") from e


def working_tree_root(repo: Optional[git.Repo], fallback: str) -> str:
    if repo is None or repo.working_tree_dir is None:
        return fallback
    return str(repo.working_tree_dir)
