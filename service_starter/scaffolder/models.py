"""Value types produced by the composition engine."""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class FileEntry(BaseModel):
    """One generated file: a project-relative POSIX path and its content."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1, description="Path relative to the project root")
    content: Union[str, bytes] = Field(default="", description="Rendered text or raw bytes")

    @property
    def data(self) -> bytes:
        """Content as bytes (text is UTF-8 encoded)."""
        if isinstance(self.content, bytes):
            return self.content
        return self.content.encode("utf-8")
