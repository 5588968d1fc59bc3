"""LLM integration for commit message generation."""

from commitgen.llm.prompts import PromptTemplates
from commitgen.llm.requester import CandidateRequester
from commitgen.llm.schema import (
    commit_messages_schema,
    file_search_tool,
    proposal_tool,
    validate_candidates,
)
from commitgen.llm.tokens import estimate_tokens, tokenizer_for

__all__ = [
    "CandidateRequester",
    "PromptTemplates",
    "commit_messages_schema",
    "estimate_tokens",
    "file_search_tool",
    "proposal_tool",
    "tokenizer_for",
    "validate_candidates",
]
