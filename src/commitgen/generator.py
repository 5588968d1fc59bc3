"""Commit message generation from staged changes."""

import asyncio
from typing import List, Optional

import structlog
from openai import AsyncOpenAI

from commitgen.config import Settings, get_settings
from commitgen.extraction import get_staged_diff
from commitgen.llm.requester import CandidateRequester
from commitgen.llm.schema import validate_candidates
from commitgen.llm.tokens import estimate_tokens
from commitgen.models import CommitMessage, GenerationRequest
from commitgen.storage import AttachmentManager

logger = structlog.get_logger(__name__)


def create_client(credential: Optional[str], settings: Settings) -> AsyncOpenAI:
    """Create an OpenAI client.

    Args:
        credential: Explicit API key. Falls back to the configured key, then
            to the OpenAI SDK's own environment lookup.
        settings: Client timeout and retry settings

    Returns:
        AsyncOpenAI client
    """
    return AsyncOpenAI(
        api_key=credential or settings.openai_api_key,
        timeout=settings.request_timeout,
        max_retries=settings.max_retries,
    )


async def generate_commit_messages(
    request: GenerationRequest,
    client: Optional[AsyncOpenAI] = None,
    settings: Optional[Settings] = None,
) -> List[CommitMessage]:
    """Generate commit message candidates for the staged changes.

    Small diffs are sent inline in the prompt. Larger diffs are uploaded to a
    temporary vector store that the model searches; the upload and the store
    are deleted before this returns or raises.

    Args:
        request: Count, working directory, model and optional credential
        client: Pre-configured OpenAI client. If None, one is created.
        settings: Settings override. If None, loads from environment.

    Returns:
        Exactly ``request.desired_count`` validated commit messages

    Raises:
        ExecutionError: If git cannot be run
        EmptyDiffError: If nothing is staged
        DiffTooLargeError: If the diff exceeds the size ceiling
        AttachmentError: If uploading or indexing the diff fails
        OutputSchemaError: If the model's output does not match the schema
    """
    settings = settings or get_settings()

    diff = await asyncio.to_thread(get_staged_diff, request.working_directory)

    owns_client = client is None
    if owns_client:
        client = create_client(request.credential, settings)

    try:
        messages = await _generate(client, diff, request, settings)
    finally:
        if owns_client:
            try:
                await client.close()
            except Exception as e:
                logger.warning("client_close_failed", error=str(e))

    logger.info("commit_messages_generated", count=len(messages), model=request.model)
    return messages


async def _generate(
    client: AsyncOpenAI,
    diff: str,
    request: GenerationRequest,
    settings: Settings,
) -> List[CommitMessage]:
    """Route the diff inline or through a vector store, then request and validate."""
    requester = CandidateRequester(
        client,
        request.model,
        document_name=settings.document_filename,
    )

    async with AttachmentManager(client, settings) as manager:
        tokens = await asyncio.to_thread(estimate_tokens, diff, request.model)
        inline = tokens <= settings.inline_diff_token_limit
        logger.info(
            "diff_token_estimate",
            tokens=tokens,
            limit=settings.inline_diff_token_limit,
            inline=inline,
        )

        attachment = None
        if not inline:
            attachment = await manager.attach(diff)

        candidates = await requester.generate(diff, request.desired_count, attachment)
        return validate_candidates(candidates, request.desired_count)
