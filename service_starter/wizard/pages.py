"""Display metadata for each wizard page.

The core never reads these; they exist so a front end can render a page
from its ``Page`` value alone.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .models import ADVICE_PAGES, DataFormat, Database, Editor, LoggingFramework, Page


@dataclass(frozen=True)
class PageOption:
    value: str
    label: str


@dataclass(frozen=True)
class PageSpec:
    """What a front end needs to draw one page."""

    page: Page
    title: str
    prompt: str
    options: list[PageOption] = field(default_factory=list)
    multi_select: bool = False
    advice: str = ""


PAGE_SPECS: dict[Page, PageSpec] = {
    Page.GET_STARTED: PageSpec(
        page=Page.GET_STARTED,
        title="Get Started",
        prompt=(
            "Answer a few questions and download a ready-to-run Clojure "
            "service with build, CI, tests and a REPL workflow."
        ),
    ),
    Page.PREFERRED_EDITOR: PageSpec(
        page=Page.PREFERRED_EDITOR,
        title="Preferred Editor",
        prompt="Which editor will you use?",
        options=[
            PageOption(Editor.INTELLIJ.value, "IntelliJ IDEA with Cursive"),
            PageOption(Editor.VSCODE.value, "VS Code with Calva"),
            PageOption(Editor.OTHER.value, "Something else"),
        ],
    ),
    Page.INTELLIJ_ADVICE: PageSpec(
        page=Page.INTELLIJ_ADVICE,
        title="Setting up IntelliJ",
        prompt="Install the Cursive plugin, then open the project's deps.edn.",
        advice=(
            "The project ships a shared REPL run configuration under .run/. "
            "Start it, then load dev/user.clj and call (go)."
        ),
    ),
    Page.VSCODE_ADVICE: PageSpec(
        page=Page.VSCODE_ADVICE,
        title="Setting up VS Code",
        prompt="Install the Calva extension from the marketplace.",
        advice=(
            "Run 'Calva: Start a Project REPL and Connect' and pick the "
            "deps.edn project type with the :dev and :test aliases."
        ),
    ),
    Page.OTHER_EDITOR_ADVICE: PageSpec(
        page=Page.OTHER_EDITOR_ADVICE,
        title="Setting up your editor",
        prompt="Any editor with nREPL support works.",
        advice="Run 'clojure -M:dev' and connect your editor to the REPL.",
    ),
    Page.DATA_FORMATS: PageSpec(
        page=Page.DATA_FORMATS,
        title="Data Formats",
        prompt="Which data formats will the service produce or consume?",
        options=[
            PageOption(DataFormat.JSON.value, "JSON"),
            PageOption(DataFormat.HTML.value, "HTML pages"),
            PageOption(DataFormat.GRAPHQL.value, "GraphQL"),
            PageOption(DataFormat.XML.value, "XML"),
        ],
        multi_select=True,
    ),
    Page.PRIMARY_DATABASE: PageSpec(
        page=Page.PRIMARY_DATABASE,
        title="Primary Database",
        prompt="Which database will you store data in?",
        options=[
            PageOption(Database.POSTGRES.value, "PostgreSQL"),
            PageOption(Database.MYSQL.value, "MySQL"),
            PageOption(Database.SQLITE.value, "SQLite"),
            PageOption(Database.MSSQL.value, "Microsoft SQL Server"),
        ],
    ),
    Page.PICK_LOGGING_FRAMEWORK: PageSpec(
        page=Page.PICK_LOGGING_FRAMEWORK,
        title="Logging",
        prompt="Which SLF4J backend should the service log through?",
        options=[
            PageOption(LoggingFramework.SLF4J_SIMPLE.value, "slf4j-simple"),
            PageOption(LoggingFramework.LOGBACK.value, "Logback"),
            PageOption(LoggingFramework.LOG4J.value, "Log4j 2"),
        ],
    ),
    Page.FINISH: PageSpec(
        page=Page.FINISH,
        title="Finish",
        prompt="Your project is ready to download.",
    ),
}

TOTAL_STEPS = 7


def page_spec(page: Page) -> PageSpec:
    return PAGE_SPECS[page]


def step_number(page: Page) -> int:
    """1-based step position.  The three advice pages share one step."""
    if page in ADVICE_PAGES:
        return 3
    order = [p for p in Page if p not in ADVICE_PAGES]
    position = order.index(page) + 1
    return position + 1 if position >= 3 else position
