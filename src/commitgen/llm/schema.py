"""Tool schemas and validation for commit message candidates.

The function tool offered to the model and the validator applied to its
output are both derived from the CommitMessage model.
"""

from typing import Annotated, Any, Dict, List

from pydantic import Field, TypeAdapter, ValidationError

from commitgen.errors import OutputSchemaError
from commitgen.models import CommitMessage, CommitType

PROPOSAL_TOOL_NAME = "propose_commit_message"
PROPOSAL_ARGS_FIELD = "args"


def commit_messages_schema(count: int) -> Dict[str, Any]:
    """Build the JSON schema for an array of commit message candidates.

    Args:
        count: Minimum number of candidates

    Returns:
        JSON schema dictionary
    """
    fields = CommitMessage.model_fields
    return {
        "type": "array",
        "items": {
            "type": "object",
            "properties": {
                "content": {
                    "type": "string",
                    "description": fields["content"].description,
                },
                "type": {
                    "type": "string",
                    "description": fields["type"].description,
                    "enum": [commit_type.value for commit_type in CommitType],
                },
            },
            "required": ["content", "type"],
            "additionalProperties": False,
        },
        "minItems": count,
    }


def proposal_tool(count: int) -> Dict[str, Any]:
    """Build the strict function tool the model answers through.

    Args:
        count: Minimum number of candidates per call

    Returns:
        Responses API function tool definition
    """
    return {
        "type": "function",
        "name": PROPOSAL_TOOL_NAME,
        "description": (
            "Propose commit messages for a git diff, separating the conventional "
            "commit type and the message content."
        ),
        "parameters": {
            "type": "object",
            "properties": {PROPOSAL_ARGS_FIELD: commit_messages_schema(count)},
            "required": [PROPOSAL_ARGS_FIELD],
            "additionalProperties": False,
        },
        "strict": True,
    }


def file_search_tool(index_id: str) -> Dict[str, Any]:
    """Build a file search tool bound to one vector store.

    Args:
        index_id: Vector store ID

    Returns:
        Responses API file search tool definition
    """
    return {"type": "file_search", "vector_store_ids": [index_id]}


def validate_candidates(candidates: List[Any], count: int) -> List[CommitMessage]:
    """Validate model output and trim it to the requested count.

    Args:
        candidates: Candidate objects collected from function calls
        count: Number of candidates requested

    Returns:
        Exactly ``count`` validated commit messages

    Raises:
        OutputSchemaError: If the candidates do not match the schema
    """
    adapter = TypeAdapter(Annotated[List[CommitMessage], Field(min_length=count)])
    try:
        messages = adapter.validate_python(candidates)
    except ValidationError as e:
        raise OutputSchemaError(e.errors()) from e

    return messages[:count]
