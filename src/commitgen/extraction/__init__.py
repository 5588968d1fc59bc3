"""Git data extraction."""

from commitgen.extraction.diff_extractor import get_staged_diff

__all__ = ["get_staged_diff"]
