"""
Export error types.

Only two conditions are raised as exceptions; empty page ranges and report
failures are recorded on the batch result instead (skip and continue).
"""

from __future__ import annotations

from pathlib import Path


class SourceUnavailableError(RuntimeError):
    """A source PDF cannot be read or parsed (missing link, corrupt, locked)."""

    def __init__(self, file_id: str, reason: str):
        super().__init__(f"Source '{file_id}' unavailable: {reason}")
        self.file_id = file_id
        self.reason = reason


class DeliveryError(RuntimeError):
    """
    The host could not save an archive.

    Attributes:
        archive_name: Name of the archive that failed.
        delivered: Archives already saved earlier in the same run.
    """

    def __init__(self, archive_name: str, reason: str, delivered: list[Path] | None = None):
        super().__init__(f"Could not deliver '{archive_name}': {reason}")
        self.archive_name = archive_name
        self.delivered = list(delivered or [])
