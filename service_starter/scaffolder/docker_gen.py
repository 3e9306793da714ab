"""Docker Compose file generation for the local development database.

Only server databases that are convenient to run in a container locally get
a ``docker-compose.yml``; embedded (SQLite) and licence-bound (SQL Server)
choices do not.
"""

from __future__ import annotations

from typing import Any, Optional

from ..wizard.models import Database, Selection
from .models import FileEntry
from .templates import TemplateRenderer


class DockerGenerator:
    """Renders ``docker-compose.yml`` when the chosen database calls for one."""

    COMPOSE_DATABASES: frozenset[Database] = frozenset({Database.POSTGRES, Database.MYSQL})
    TEMPLATE = "docker-compose.yml.j2"
    OUTPUT_PATH = "docker-compose.yml"

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def wants_compose(self, selection: Selection) -> bool:
        return selection.primary_database in self.COMPOSE_DATABASES

    def generate(
        self,
        selection: Selection,
        context: dict[str, Any],
    ) -> Optional[FileEntry]:
        """Render the Compose file, or return ``None`` if it is not needed.

        Args:
            selection: The wizard answers.
            context: Template rendering context; must carry ``database``.
        """
        if not self.wants_compose(selection):
            return None
        content = self.renderer.render(self.TEMPLATE, context)
        return FileEntry(path=self.OUTPUT_PATH, content=content)
