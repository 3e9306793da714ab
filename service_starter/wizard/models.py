"""Pydantic v2 models for the wizard's selection state.

A ``Selection`` is the single source of truth for a wizard session: the
current page plus every answer given so far.  Instances are frozen; every
user choice produces a new ``Selection`` from the previous one.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Page(str, Enum):
    """Wizard pages, in logical order."""
    GET_STARTED = "GetStarted"
    PREFERRED_EDITOR = "PreferredEditor"
    INTELLIJ_ADVICE = "IntelliJAdvice"
    VSCODE_ADVICE = "VSCodeAdvice"
    OTHER_EDITOR_ADVICE = "OtherEditorAdvice"
    DATA_FORMATS = "DataFormats"
    PRIMARY_DATABASE = "PrimaryDatabase"
    PICK_LOGGING_FRAMEWORK = "PickLoggingFramework"
    FINISH = "Finish"


class Editor(str, Enum):
    """Editor the user develops Clojure in."""
    INTELLIJ = "IntelliJ"
    VSCODE = "VSCode"
    OTHER = "Other"


class DataFormat(str, Enum):
    """Data formats the service speaks. Declaration order is significant."""
    JSON = "JSON"
    HTML = "HTML"
    GRAPHQL = "GraphQL"
    XML = "XML"


class Database(str, Enum):
    """Primary database backing the service."""
    POSTGRES = "Postgres"
    MYSQL = "MySQL"
    SQLITE = "SQLite"
    MSSQL = "MSSQL"


class LoggingFramework(str, Enum):
    """SLF4J backend wired into the service."""
    SLF4J_SIMPLE = "Slf4jSimple"
    LOGBACK = "Logback"
    LOG4J = "Log4j"


ADVICE_PAGES: tuple[Page, ...] = (
    Page.INTELLIJ_ADVICE,
    Page.VSCODE_ADVICE,
    Page.OTHER_EDITOR_ADVICE,
)

DEFAULT_PROJECT_NAME = "my-service"


def advice_page_for(editor: Optional[Editor]) -> Page:
    """Advice page shown after the editor question."""
    if editor is Editor.INTELLIJ:
        return Page.INTELLIJ_ADVICE
    if editor is Editor.VSCODE:
        return Page.VSCODE_ADVICE
    return Page.OTHER_EDITOR_ADVICE


_E = TypeVar("_E", bound=Enum)


def _toggle(current: Optional[_E], value: _E) -> Optional[_E]:
    """Single-choice toggle: picking the current value clears it."""
    return None if current == value else value


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

class Selection(BaseModel):
    """Immutable record of the user's answers plus the current wizard page."""

    model_config = ConfigDict(frozen=True)

    page: Page = Field(default=Page.GET_STARTED, description="Current wizard page")
    data_formats: frozenset[DataFormat] = Field(
        default_factory=frozenset, description="Selected data formats (may be empty)"
    )
    primary_database: Optional[Database] = Field(default=None)
    logging_framework: Optional[LoggingFramework] = Field(default=None)
    preferred_editor: Optional[Editor] = Field(default=None)
    project_name: str = Field(default=DEFAULT_PROJECT_NAME, min_length=1)

    # -- Transitions -------------------------------------------------------

    def with_page(self, page: Page) -> Selection:
        return self.model_copy(update={"page": page})

    def choose_editor(self, editor: Editor) -> Selection:
        chosen = _toggle(self.preferred_editor, editor)
        update: dict[str, object] = {"preferred_editor": chosen}
        if self.page in ADVICE_PAGES:
            update["page"] = advice_page_for(chosen)
        return self.model_copy(update=update)

    def choose_database(self, database: Database) -> Selection:
        return self.model_copy(
            update={"primary_database": _toggle(self.primary_database, database)}
        )

    def choose_logging_framework(self, framework: LoggingFramework) -> Selection:
        return self.model_copy(
            update={"logging_framework": _toggle(self.logging_framework, framework)}
        )

    def toggle_data_format(self, data_format: DataFormat) -> Selection:
        """Add *data_format* if absent, remove it if present."""
        return self.model_copy(
            update={"data_formats": self.data_formats ^ {data_format}}
        )

    # -- Queries -----------------------------------------------------------

    def sorted_data_formats(self) -> list[DataFormat]:
        """Selected formats in enumeration order, never selection order."""
        return [f for f in DataFormat if f in self.data_formats]

    def summary(self) -> dict[str, str]:
        """Human-readable ``{label: value}`` mapping of every answer."""
        return {
            "Project": self.project_name,
            "Editor": self.preferred_editor.value if self.preferred_editor else "-",
            "Data formats": ", ".join(f.value for f in self.sorted_data_formats()) or "-",
            "Database": self.primary_database.value if self.primary_database else "-",
            "Logging": self.logging_framework.value if self.logging_framework else "-",
        }
