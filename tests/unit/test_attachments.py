"""Tests for uploading diffs to a vector store."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from commitgen.config import Settings
from commitgen.errors import (
    AttachmentError,
    DiffTooLargeError,
    IndexingFailedError,
    IndexingTimeoutError,
)
from commitgen.storage.attachments import AttachmentManager
from commitgen.storage.polling import ReadinessPoller


def file_page(status, file_id="file-123"):
    """Create a vector store file listing with one entry."""
    return MagicMock(data=[MagicMock(id=file_id, status=status)])


@pytest.fixture
def settings():
    """Settings with a zero poll interval."""
    return Settings(index_poll_interval=0.0)


@pytest.fixture
def mock_openai_client():
    """Create mock OpenAI client for files and vector stores."""
    client = MagicMock()
    client.files.create = AsyncMock(return_value=MagicMock(id="file-123"))
    client.files.delete = AsyncMock()
    client.vector_stores.create = AsyncMock(return_value=MagicMock(id="vs-456"))
    client.vector_stores.delete = AsyncMock()
    client.vector_stores.files.create = AsyncMock()
    client.vector_stores.files.list = AsyncMock(return_value=file_page("completed"))
    return client


@pytest.fixture
def manager(mock_openai_client, settings):
    """Create manager with a poller that does not sleep."""
    poller = ReadinessPoller(interval=0.5, max_attempts=20, sleep=AsyncMock())
    return AttachmentManager(mock_openai_client, settings, poller=poller)


@pytest.mark.asyncio
async def test_attach_success(manager, mock_openai_client):
    """Test uploading, indexing and waiting for a diff."""
    attachment = await manager.attach("diff --git a/x b/x\n+x\n")

    assert attachment.document_id == "file-123"
    assert attachment.index_id == "vs-456"
    assert manager.attachment == attachment

    upload_kwargs = mock_openai_client.files.create.call_args.kwargs
    assert upload_kwargs["purpose"] == "user_data"
    assert upload_kwargs["file"][0] == "diff.txt"
    assert upload_kwargs["file"][1] == b"diff --git a/x b/x\n+x\n"

    store_kwargs = mock_openai_client.vector_stores.create.call_args.kwargs
    assert store_kwargs["expires_after"] == {"anchor": "last_active_at", "days": 1}

    mock_openai_client.vector_stores.files.create.assert_awaited_once_with(
        vector_store_id="vs-456", file_id="file-123"
    )


@pytest.mark.asyncio
async def test_attach_too_large(manager, mock_openai_client):
    """Test oversized diffs fail before anything is uploaded."""
    with pytest.raises(DiffTooLargeError) as exc_info:
        await manager.attach("x" * (1_048_576 + 1))

    assert exc_info.value.limit == 1_048_576
    mock_openai_client.files.create.assert_not_awaited()
    assert manager.attachment is None


@pytest.mark.asyncio
async def test_attach_size_limit_counts_bytes(manager, mock_openai_client):
    """Test the ceiling applies to encoded bytes, not characters."""
    # 3 bytes per character in UTF-8
    with pytest.raises(DiffTooLargeError):
        await manager.attach("€" * 400_000)

    mock_openai_client.files.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_attach_at_limit(manager):
    """Test a diff exactly at the ceiling is uploaded."""
    attachment = await manager.attach("x" * 1_048_576)

    assert attachment.index_id == "vs-456"


@pytest.mark.asyncio
async def test_indexing_waits_for_completion(manager, mock_openai_client):
    """Test in-progress statuses are polled until completion."""
    mock_openai_client.vector_stores.files.list = AsyncMock(
        side_effect=[
            MagicMock(data=[]),
            file_page("in_progress"),
            file_page("completed"),
        ]
    )

    await manager.attach("diff")

    assert mock_openai_client.vector_stores.files.list.await_count == 3


@pytest.mark.asyncio
async def test_indexing_failed(manager, mock_openai_client):
    """Test a failed file aborts with IndexingFailedError."""
    mock_openai_client.vector_stores.files.list = AsyncMock(return_value=file_page("failed"))

    with pytest.raises(IndexingFailedError) as exc_info:
        await manager.attach("diff")

    assert isinstance(exc_info.value, AttachmentError)
    assert str(exc_info.value) == (
        "Failed to create vector store or attach file: File indexing failed in vector store"
    )
    assert manager.attachment.index_id == "vs-456"


@pytest.mark.asyncio
async def test_indexing_timeout(manager, mock_openai_client):
    """Test exhausting every poll aborts with IndexingTimeoutError."""
    mock_openai_client.vector_stores.files.list = AsyncMock(return_value=file_page("in_progress"))

    with pytest.raises(IndexingTimeoutError) as exc_info:
        await manager.attach("diff")

    assert str(exc_info.value).startswith("Failed to create vector store or attach file: ")
    assert mock_openai_client.vector_stores.files.list.await_count == 20


@pytest.mark.asyncio
async def test_other_files_in_listing_ignored(manager, mock_openai_client):
    """Test only the uploaded file's status is considered."""
    mock_openai_client.vector_stores.files.list = AsyncMock(
        return_value=file_page("completed", file_id="file-other")
    )

    with pytest.raises(IndexingTimeoutError):
        await manager.attach("diff")


@pytest.mark.asyncio
async def test_upload_failure(manager, mock_openai_client):
    """Test upload errors are wrapped and nothing is tracked."""
    mock_openai_client.files.create = AsyncMock(side_effect=Exception("API Error"))

    with pytest.raises(AttachmentError, match="API Error") as exc_info:
        await manager.attach("diff")

    assert str(exc_info.value.cause) == "API Error"
    assert exc_info.value.__cause__ is exc_info.value.cause
    assert manager.attachment is None
    mock_openai_client.vector_stores.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_vector_store_failure_keeps_upload_tracked(manager, mock_openai_client):
    """Test the uploaded file is still cleaned up if the vector store fails."""
    mock_openai_client.vector_stores.create = AsyncMock(side_effect=Exception("API Error"))

    with pytest.raises(AttachmentError):
        await manager.attach("diff")

    assert manager.attachment.document_id == "file-123"
    assert manager.attachment.index_id is None

    await manager.release()

    mock_openai_client.files.delete.assert_awaited_once_with("file-123")
    mock_openai_client.vector_stores.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_release_deletes_file_then_store(manager, mock_openai_client):
    """Test release deletes both remote resources."""
    calls = []
    mock_openai_client.files.delete = AsyncMock(side_effect=lambda *a: calls.append("file"))
    mock_openai_client.vector_stores.delete = AsyncMock(side_effect=lambda *a: calls.append("store"))

    await manager.attach("diff")
    await manager.release()

    assert calls == ["file", "store"]
    mock_openai_client.vector_stores.delete.assert_awaited_once_with("vs-456")
    assert manager.attachment is None


@pytest.mark.asyncio
async def test_release_continues_after_file_delete_failure(manager, mock_openai_client):
    """Test the vector store is deleted even if the file deletion fails."""
    mock_openai_client.files.delete = AsyncMock(side_effect=Exception("gone"))

    await manager.attach("diff")
    await manager.release()

    mock_openai_client.vector_stores.delete.assert_awaited_once_with("vs-456")


@pytest.mark.asyncio
async def test_release_swallows_store_delete_failure(manager, mock_openai_client):
    """Test a vector store deletion failure is not raised."""
    mock_openai_client.vector_stores.delete = AsyncMock(side_effect=Exception("gone"))

    await manager.attach("diff")
    await manager.release()

    mock_openai_client.files.delete.assert_awaited_once_with("file-123")


@pytest.mark.asyncio
async def test_release_is_idempotent(manager, mock_openai_client):
    """Test a second release does nothing."""
    await manager.attach("diff")
    await manager.release()
    await manager.release()

    assert mock_openai_client.files.delete.await_count == 1
    assert mock_openai_client.vector_stores.delete.await_count == 1


@pytest.mark.asyncio
async def test_context_manager_releases_on_error(mock_openai_client, settings):
    """Test leaving the block with an error still deletes the resources."""
    with pytest.raises(RuntimeError):
        async with AttachmentManager(mock_openai_client, settings) as manager:
            await manager.attach("diff")
            raise RuntimeError("generation failed")

    mock_openai_client.files.delete.assert_awaited_once_with("file-123")
    mock_openai_client.vector_stores.delete.assert_awaited_once_with("vs-456")


@pytest.mark.asyncio
async def test_context_manager_without_attachment(mock_openai_client, settings):
    """Test no deletions happen when nothing was uploaded."""
    async with AttachmentManager(mock_openai_client, settings):
        pass

    mock_openai_client.files.delete.assert_not_awaited()
    mock_openai_client.vector_stores.delete.assert_not_awaited()


@pytest.mark.asyncio
async def test_cancelled_exit_still_deletes_store(manager, mock_openai_client):
    """Test cancelling during the file deletion does not skip the vector store."""

    async def slow_delete(*args):
        await asyncio.sleep(0.05)

    mock_openai_client.files.delete = AsyncMock(side_effect=slow_delete)
    await manager.attach("diff")

    task = asyncio.create_task(manager.__aexit__(None, None, None))
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    await asyncio.sleep(0.1)

    mock_openai_client.files.delete.assert_awaited_once_with("file-123")
    mock_openai_client.vector_stores.delete.assert_awaited_once_with("vs-456")
