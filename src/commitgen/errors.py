"""Exceptions raised while generating commit messages."""

import json
from typing import Any, Dict, List, Optional


class CommitgenError(Exception):
    """Base exception for commit message generation errors."""

    pass


class ExecutionError(CommitgenError):
    """Raised when git cannot be run for the working directory."""

    pass


class EmptyDiffError(CommitgenError):
    """Raised when nothing beyond whitespace is staged."""

    pass


class DiffTooLargeError(CommitgenError):
    """Raised when the staged diff exceeds the request size ceiling."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"Staged diff is {size} bytes, which exceeds the limit of {limit} bytes."
        )
        self.size = size
        self.limit = limit


class AttachmentError(CommitgenError):
    """Raised when uploading or indexing the diff fails.

    When wrapping another exception, it is kept on ``cause`` and chained as
    ``__cause__``.
    """

    def __init__(self, detail: object, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"Failed to create vector store or attach file: {detail}")
        self.cause = cause


class IndexingFailedError(AttachmentError):
    """Raised when the remote index reports a failed file."""

    pass


class IndexingTimeoutError(AttachmentError):
    """Raised when the remote index never finishes processing the file."""

    pass


class OutputSchemaError(CommitgenError):
    """Raised when the model's function call output does not match the schema."""

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        super().__init__(
            "OpenAI response did not match schema: " + json.dumps(errors, default=str)
        )
        self.errors = errors
