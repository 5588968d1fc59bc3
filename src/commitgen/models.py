"""Data models for commit message generation."""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class CommitType(str, Enum):
    """Conventional Commit type tags."""

    FEAT = "feat"
    FIX = "fix"
    DOCS = "docs"
    STYLE = "style"
    REFACTOR = "refactor"
    PERF = "perf"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CHORE = "chore"
    REVERT = "revert"


class CommitMessage(BaseModel):
    """A single commit message candidate proposed by the model."""

    model_config = ConfigDict(extra="forbid")

    content: StrictStr = Field(
        ...,
        description="Commit message content, without the Conventional Commit type tag.",
    )
    type: CommitType = Field(..., description="One of the Conventional Commit types.")

    def header(self) -> str:
        """Render the message with its type prefix (e.g., "fix: handle empty input")."""
        return f"{self.type.value}: {self.content}"


class GenerationRequest(BaseModel):
    """Parameters for one commit message generation call."""

    desired_count: int = Field(..., gt=0, description="Number of candidates to return")
    working_directory: Path = Field(..., description="Directory inside the Git repository")
    model: str = Field(
        ...,
        min_length=1,
        description="OpenAI model name, also used to pick the tokenizer",
    )
    credential: Optional[str] = Field(None, description="OpenAI API key override")


class RemoteAttachment(BaseModel):
    """An uploaded diff file and the vector store indexing it.

    ``index_id`` is None while only the upload exists.
    """

    document_id: str = Field(..., description="OpenAI file ID of the uploaded diff")
    index_id: Optional[str] = Field(None, description="Vector store ID")
