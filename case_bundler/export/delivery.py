"""
Archive delivery sinks.

A sink receives each packaged archive exactly once, as soon as its batch
is packaged. DirectoryDelivery saves archives into an output folder; any
object with a matching deliver(name, data) method can stand in for it
(a GUI save dialog, an upload).
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from case_bundler.errors import DeliveryError
from case_bundler.logging_config import info


class ArchiveDelivery(Protocol):
    def deliver(self, archive_name: str, data: bytes) -> Path:
        ...


class DirectoryDelivery:
    """Saves every delivered archive into one output directory."""

    def __init__(self, output_dir: Path | str):
        self.output_dir = Path(output_dir)

    def deliver(self, archive_name: str, data: bytes) -> Path:
        """
        Write one archive to the output directory.

        Raises:
            DeliveryError: The directory or file cannot be written.
        """
        target = self.output_dir / archive_name
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            raise DeliveryError(archive_name, str(e)) from e
        info(f"[DELIVERY] Saved {target} ({len(data) / (1024 * 1024):.1f} MB)")
        return target
