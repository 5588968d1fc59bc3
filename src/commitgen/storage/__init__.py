"""Remote storage for diffs too large to send inline."""

from commitgen.storage.attachments import AttachmentManager
from commitgen.storage.polling import ReadinessPoller

__all__ = [
    "AttachmentManager",
    "ReadinessPoller",
]
