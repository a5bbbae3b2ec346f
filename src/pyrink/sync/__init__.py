"""Snapshot-level load/save orchestration."""

from .service import WorkbookSync

__all__ = ["WorkbookSync"]
