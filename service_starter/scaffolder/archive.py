"""Zip packaging for composed projects.

Every entry carries the same caller-supplied timestamp and fixed
permissions, so identical file sets always produce byte-identical archives.
"""

from __future__ import annotations

import io
import zipfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field

from ..wizard.models import DEFAULT_PROJECT_NAME
from .models import FileEntry
from .templates import clj_namespace

MIME_TYPE = "application/zip"

# Zip stores DOS timestamps, which cover 1980-2107 only.
_ZIP_MIN = datetime(1980, 1, 1)
_ZIP_MAX = datetime(2107, 12, 31, 23, 59, 58)

_FILE_MODE = 0o100644


class Archive(BaseModel):
    """A downloadable project archive."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(
        ...,
        pattern=r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$",
        description="Suggested download file name",
    )
    mime_type: str = Field(default=MIME_TYPE)
    content: bytes = Field(..., repr=False)

    def save(self, directory: str | Path) -> Path:
        """Write the archive into *directory* under its suggested name."""
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / self.filename
        target.write_bytes(self.content)
        return target


class ArchiveAssembler:
    """Packs a list of ``FileEntry`` objects into a zip ``Archive``."""

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED) -> None:
        self.compression = compression

    def assemble(
        self,
        files: Iterable[FileEntry],
        timestamp: datetime,
        *,
        project_name: str = DEFAULT_PROJECT_NAME,
    ) -> Archive:
        """Build the archive.

        Args:
            files: Entries in the order they should appear in the archive.
            timestamp: Modification time stamped on every entry.  Aware
                datetimes are converted to UTC first.
            project_name: Project name; its namespace form (see
                ``clj_namespace``) is the top-level directory inside the
                archive and the stem of the suggested file name.

        Returns:
            The ``Archive`` with its bytes in memory.
        """
        root = clj_namespace(project_name)
        date_time = zip_date_time(timestamp)
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=self.compression) as zf:
            for entry in files:
                info = zipfile.ZipInfo(f"{root}/{entry.path}", date_time=date_time)
                info.compress_type = self.compression
                info.create_system = 3  # unix, so external_attr carries the mode
                info.external_attr = _FILE_MODE << 16
                zf.writestr(info, entry.data)
        return Archive(filename=f"{root}.zip", content=buffer.getvalue())


def zip_date_time(timestamp: datetime) -> tuple[int, int, int, int, int, int]:
    """Clamp *timestamp* into the zip range and return its date_time tuple."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc).replace(tzinfo=None)
    timestamp = min(max(timestamp, _ZIP_MIN), _ZIP_MAX)
    # DOS time has two-second resolution.
    return (
        timestamp.year,
        timestamp.month,
        timestamp.day,
        timestamp.hour,
        timestamp.minute,
        timestamp.second - timestamp.second % 2,
    )
