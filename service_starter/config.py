"""Service Starter configuration.

Typed settings for the command-line front end.  All settings use Pydantic
v2 models so they can be validated at construction time and serialised
to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from service_starter.wizard.models import DEFAULT_PROJECT_NAME, Selection
from service_starter.wizard.url_codec import DEFAULT_BASE_URL


class Config(BaseModel):
    """Global Service Starter configuration.

    Instances are typically created once by the CLI entry point and then
    passed to the wizard session.
    """

    base_url: str = Field(
        default=DEFAULT_BASE_URL, description="URL that wizard state is attached to"
    )
    project_name: str = Field(default=DEFAULT_PROJECT_NAME, min_length=1)
    output_dir: Path = Field(default=Path("./output"))
    archive_timestamp: Optional[datetime] = Field(
        default=None,
        description="Fixed timestamp for archive entries; the session clock is used when unset",
    )

    def defaults(self) -> Selection:
        """The ``Selection`` every URL field falls back to."""
        return Selection(project_name=self.project_name)

    def clock(self) -> Optional[Callable[[], datetime]]:
        """A clock pinned to ``archive_timestamp``, or ``None`` for wall time."""
        if self.archive_timestamp is None:
            return None
        pinned = self.archive_timestamp
        return lambda: pinned

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> Config:
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> Config:
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            STARTER_BASE_URL, STARTER_PROJECT_NAME, STARTER_OUTPUT_DIR,
            STARTER_TIMESTAMP (ISO 8601).
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("STARTER_BASE_URL"):
            kwargs["base_url"] = os.environ["STARTER_BASE_URL"]
        if os.environ.get("STARTER_PROJECT_NAME"):
            kwargs["project_name"] = os.environ["STARTER_PROJECT_NAME"]
        if os.environ.get("STARTER_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["STARTER_OUTPUT_DIR"])
        if os.environ.get("STARTER_TIMESTAMP"):
            kwargs["archive_timestamp"] = os.environ["STARTER_TIMESTAMP"]
        return cls(**kwargs)
