"""Uploading oversized diffs to an OpenAI vector store for file search."""

import asyncio
from types import TracebackType
from typing import Optional, Type

import structlog
from openai import AsyncOpenAI

from commitgen.config import Settings
from commitgen.errors import (
    AttachmentError,
    DiffTooLargeError,
    IndexingFailedError,
    IndexingTimeoutError,
)
from commitgen.models import RemoteAttachment
from commitgen.storage.polling import ReadinessPoller

logger = structlog.get_logger(__name__)

INDEX_COMPLETED = "completed"
INDEX_FAILED = "failed"


class AttachmentManager:
    """Owns the uploaded file and vector store for one generation call.

    Use as an async context manager so the remote resources are deleted on
    every exit path:

        async with AttachmentManager(client, settings) as manager:
            attachment = await manager.attach(diff)
            ...
    """

    def __init__(
        self,
        client: AsyncOpenAI,
        settings: Settings,
        poller: Optional[ReadinessPoller] = None,
    ) -> None:
        """Initialize the manager.

        Args:
            client: OpenAI client
            settings: Limits and index settings
            poller: Poller for indexing status. Defaults to one built from settings.
        """
        self.client = client
        self.settings = settings
        self.poller = poller or ReadinessPoller(
            interval=settings.index_poll_interval,
            max_attempts=settings.index_poll_attempts,
        )
        self._attachment: Optional[RemoteAttachment] = None

    @property
    def attachment(self) -> Optional[RemoteAttachment]:
        """The remote resources created so far, if any."""
        return self._attachment

    async def __aenter__(self) -> "AttachmentManager":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        # Cancelling the caller must not cut the deletions short
        await asyncio.shield(self.release())

    async def attach(self, diff: str) -> RemoteAttachment:
        """Upload a diff and wait until the vector store has indexed it.

        Args:
            diff: Diff text to upload

        Returns:
            The uploaded file and vector store IDs

        Raises:
            DiffTooLargeError: If the diff exceeds the size ceiling (nothing is uploaded)
            IndexingFailedError: If the vector store fails to index the file
            IndexingTimeoutError: If indexing does not finish within the poll attempts
            AttachmentError: If uploading or creating the vector store fails
        """
        data = diff.encode("utf-8")
        if len(data) > self.settings.request_diff_size_limit:
            raise DiffTooLargeError(len(data), self.settings.request_diff_size_limit)

        try:
            return await self._upload_and_index(data)
        except AttachmentError:
            raise
        except Exception as e:
            raise AttachmentError(e, cause=e) from e

    async def _upload_and_index(self, data: bytes) -> RemoteAttachment:
        uploaded = await self.client.files.create(
            file=(self.settings.document_filename, data, "text/plain"),
            purpose="user_data",
        )
        self._attachment = RemoteAttachment(document_id=uploaded.id)
        logger.info("diff_uploaded", file_id=uploaded.id, bytes=len(data))

        vector_store = await self.client.vector_stores.create(
            name=self.settings.index_name,
            expires_after={
                "anchor": "last_active_at",
                "days": self.settings.index_expiry_days,
            },
        )
        self._attachment = RemoteAttachment(
            document_id=uploaded.id,
            index_id=vector_store.id,
        )
        logger.info("index_created", vector_store_id=vector_store.id)

        await self.client.vector_stores.files.create(
            vector_store_id=vector_store.id,
            file_id=uploaded.id,
        )
        logger.info("index_file_attached", vector_store_id=vector_store.id, file_id=uploaded.id)

        await self._wait_until_indexed(self._attachment)
        return self._attachment

    async def _wait_until_indexed(self, attachment: RemoteAttachment) -> None:
        """Wait for the vector store to finish processing the uploaded file.

        Raises:
            IndexingFailedError: If the file failed to index
            IndexingTimeoutError: If indexing did not finish within the attempts
        """

        async def file_status() -> str:
            page = await self.client.vector_stores.files.list(
                vector_store_id=attachment.index_id,
            )
            for entry in page.data:
                if entry.id == attachment.document_id:
                    return entry.status or ""
            return ""

        status = await self.poller.wait(
            file_status,
            lambda s: s in (INDEX_COMPLETED, INDEX_FAILED),
        )

        if status == INDEX_FAILED:
            raise IndexingFailedError("File indexing failed in vector store")
        if status != INDEX_COMPLETED:
            raise IndexingTimeoutError("File indexing did not complete in time")

        logger.info("index_ready", vector_store_id=attachment.index_id)

    async def release(self) -> None:
        """Delete the uploaded file, then the vector store.

        Each deletion is attempted even if the other fails. Failures are
        logged and never raised. Calling this again is a no-op.
        """
        attachment = self._attachment
        self._attachment = None
        if attachment is None:
            return

        try:
            await self.client.files.delete(attachment.document_id)
            logger.info("document_deleted", file_id=attachment.document_id)
        except Exception as e:
            logger.error("document_delete_failed", file_id=attachment.document_id, error=str(e))

        if attachment.index_id is None:
            return

        try:
            await self.client.vector_stores.delete(attachment.index_id)
            logger.info("index_deleted", vector_store_id=attachment.index_id)
        except Exception as e:
            logger.error("index_delete_failed", vector_store_id=attachment.index_id, error=str(e))
