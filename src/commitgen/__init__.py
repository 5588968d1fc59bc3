"""Conventional Commit message candidates generated from staged changes."""

from commitgen.config import Settings, get_settings
from commitgen.errors import (
    AttachmentError,
    CommitgenError,
    DiffTooLargeError,
    EmptyDiffError,
    ExecutionError,
    IndexingFailedError,
    IndexingTimeoutError,
    OutputSchemaError,
)
from commitgen.extraction import get_staged_diff
from commitgen.generator import create_client, generate_commit_messages
from commitgen.models import CommitMessage, CommitType, GenerationRequest, RemoteAttachment

__all__ = [
    "AttachmentError",
    "CommitMessage",
    "CommitType",
    "CommitgenError",
    "DiffTooLargeError",
    "EmptyDiffError",
    "ExecutionError",
    "GenerationRequest",
    "IndexingFailedError",
    "IndexingTimeoutError",
    "OutputSchemaError",
    "RemoteAttachment",
    "Settings",
    "create_client",
    "generate_commit_messages",
    "get_settings",
    "get_staged_diff",
]
