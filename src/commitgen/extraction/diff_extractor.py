"""Staged diff extraction from a Git working tree."""

import os
from pathlib import Path
from typing import Union

# A missing git executable must surface as ExecutionError, not fail the import
os.environ.setdefault("GIT_PYTHON_REFRESH", "quiet")

import git  # noqa: E402
import structlog  # noqa: E402
from git import Repo  # noqa: E402

from commitgen.errors import EmptyDiffError, ExecutionError  # noqa: E402

logger = structlog.get_logger(__name__)

# Staged changes, ignoring whitespace-only edits
STAGED_DIFF_ARGS = ("--cached", "--ignore-all-space")

GIT_NOT_FOUND_MESSAGE = "Git is not installed or not in PATH."


def get_staged_diff(working_directory: Union[str, Path]) -> str:
    """Get the staged diff for the repository containing a directory.

    Bytes that are not valid UTF-8 (e.g., Latin-1 files) are replaced with
    U+FFFD, so the returned text always encodes cleanly.

    Args:
        working_directory: Any directory inside the Git working tree

    Returns:
        The staged diff text, ignoring whitespace-only changes

    Raises:
        ExecutionError: If git is unavailable or the path is not in a repository
        EmptyDiffError: If the staged diff is empty or whitespace only
    """
    path = Path(working_directory)

    try:
        repo = Repo(path, search_parent_directories=True)
    except git.exc.NoSuchPathError as e:
        raise ExecutionError(f"Working directory does not exist: {path}") from e
    except git.exc.InvalidGitRepositoryError as e:
        raise ExecutionError(f"Not a Git repository: {path}") from e
    except git.exc.GitCommandNotFound as e:
        raise ExecutionError(GIT_NOT_FOUND_MESSAGE) from e

    try:
        raw = repo.git.diff(*STAGED_DIFF_ARGS, stdout_as_string=False)
    except git.exc.GitCommandNotFound as e:
        raise ExecutionError(GIT_NOT_FOUND_MESSAGE) from e
    except git.exc.GitCommandError as e:
        raise ExecutionError(
            f"Git command failed: git diff {' '.join(STAGED_DIFF_ARGS)}\n{e.stderr.strip()}"
        ) from e
    finally:
        repo.close()

    diff = raw.decode("utf-8", errors="replace")

    if not diff.strip():
        raise EmptyDiffError(
            "No staged changes found. Stage your changes first with: git add <files>"
        )

    logger.info("staged_diff_extracted", bytes=len(diff.encode("utf-8")))
    return diff
