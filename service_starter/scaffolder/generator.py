"""Composition engine: turns a wizard ``Selection`` into project files.

``compose`` is a pure function of the selection.  It resolves the
dependency lists, renders every template with one shared context, decides
which optional files belong in the project, and returns the files in a
fixed order.  It writes nothing and keeps no state between calls.
"""

from __future__ import annotations

from typing import Any, Optional

from jinja2 import TemplateError

from ..wizard.models import DataFormat, Database, Editor, LoggingFramework, Selection
from .dependencies import (
    DependencyTable,
    default_table,
    edn_map,
    resolve_dependencies,
    resolve_test_dependencies,
)
from .docker_gen import DockerGenerator
from .models import FileEntry
from .templates import TemplateRenderer, clj_namespace, clj_path


class CompositionError(Exception):
    """Raised when composition breaks one of its own invariants.

    This signals a defect in the templates or tables, never bad user input.
    """


# Column of the opening brace of each dependency map in deps.edn.j2.
DEPS_MAP_COLUMN = 7
TEST_DEPS_MAP_COLUMN = 21


# ---------------------------------------------------------------------------
# Static lookup tables
# ---------------------------------------------------------------------------

# Template -> output path for files every project gets, in output order.
# ``{ns_path}`` is filled in from the project name.
_ALWAYS: list[tuple[str, str]] = [
    ("deps.edn.j2", "deps.edn"),
    ("tests.edn.j2", "tests.edn"),
    ("github/workflows/lint.yml.j2", ".github/workflows/lint.yml"),
    ("github/workflows/test.yml.j2", ".github/workflows/test.yml"),
    ("gitignore.j2", ".gitignore"),
    ("bb.edn.j2", "bb.edn"),
    ("README.md.j2", "README.md"),
    ("clj-kondo/config.edn.j2", ".clj-kondo/config.edn"),
    ("dev/user.clj.j2", "dev/user.clj"),
    ("src/main.clj.j2", "src/{ns_path}/main.clj"),
    ("src/system.clj.j2", "src/{ns_path}/system.clj"),
    ("src/routes.clj.j2", "src/{ns_path}/routes.clj"),
    ("test/main_test.clj.j2", "test/{ns_path}/main_test.clj"),
]

_LOGGING_CONFIG: dict[LoggingFramework, tuple[str, str]] = {
    LoggingFramework.SLF4J_SIMPLE: (
        "resources/simplelogger.properties.j2",
        "resources/simplelogger.properties",
    ),
    LoggingFramework.LOGBACK: ("resources/logback.xml.j2", "resources/logback.xml"),
    LoggingFramework.LOG4J: ("resources/log4j2.xml.j2", "resources/log4j2.xml"),
}

_EDITOR_FILES: dict[Editor, list[tuple[str, str]]] = {
    Editor.INTELLIJ: [("editors/intellij/REPL.run.xml.j2", ".run/REPL.run.xml")],
    Editor.VSCODE: [
        ("editors/vscode/settings.json.j2", ".vscode/settings.json"),
        ("editors/vscode/extensions.json.j2", ".vscode/extensions.json"),
    ],
}

_DB_TEST_TEMPLATE = "test/db_test.clj.j2"
_RESOURCES_PLACEHOLDER = "resources/.keep"

_DATABASE_PROFILES: dict[Database, dict[str, Any]] = {
    Database.POSTGRES: {
        "key": "postgres",
        "label": "PostgreSQL",
        "jdbc_url": "jdbc:postgresql://localhost:5432/{db}?user={db}&password=secret",
        "container": True,
        "image": "postgres:16-alpine",
        "port": 5432,
        "container_env": [("POSTGRES_PASSWORD", "secret")],
        "compose_env": [
            ("POSTGRES_DB", "{db}"),
            ("POSTGRES_USER", "{db}"),
            ("POSTGRES_PASSWORD", "secret"),
        ],
        "test_url_prefix": "jdbc:postgresql://localhost:",
        "test_url_suffix": "/postgres?user=postgres&password=secret",
        "data_path": "/var/lib/postgresql/data",
    },
    Database.MYSQL: {
        "key": "mysql",
        "label": "MySQL",
        "jdbc_url": "jdbc:mysql://localhost:3306/{db}?user={db}&password=secret",
        "container": True,
        "image": "mysql:8.4",
        "port": 3306,
        "container_env": [("MYSQL_ROOT_PASSWORD", "secret"), ("MYSQL_DATABASE", "test")],
        "compose_env": [
            ("MYSQL_DATABASE", "{db}"),
            ("MYSQL_USER", "{db}"),
            ("MYSQL_PASSWORD", "secret"),
            ("MYSQL_ROOT_PASSWORD", "secret"),
        ],
        "test_url_prefix": "jdbc:mysql://localhost:",
        "test_url_suffix": "/test?user=root&password=secret",
        "data_path": "/var/lib/mysql",
    },
    Database.SQLITE: {
        "key": "sqlite",
        "label": "SQLite",
        "jdbc_url": "jdbc:sqlite:{db}.db",
        "container": False,
    },
    Database.MSSQL: {
        "key": "mssql",
        "label": "SQL Server",
        "jdbc_url": (
            "jdbc:sqlserver://localhost:1433;databaseName={db};"
            "user=sa;password=Secret-Passw0rd;encrypt=false"
        ),
        "container": True,
        "image": "mcr.microsoft.com/mssql/server:2022-latest",
        "port": 1433,
        "container_env": [("ACCEPT_EULA", "Y"), ("MSSQL_SA_PASSWORD", "Secret-Passw0rd")],
        "compose_env": [],
        "test_url_prefix": "jdbc:sqlserver://localhost:",
        "test_url_suffix": ";user=sa;password=Secret-Passw0rd;encrypt=false",
        "data_path": "/var/opt/mssql",
    },
}

_FORMAT_SUMMARY: dict[DataFormat, str] = {
    DataFormat.JSON: "JSON responses via cheshire",
    DataFormat.HTML: "HTML pages via hiccup",
    DataFormat.GRAPHQL: "GraphQL (no library wired in yet)",
    DataFormat.XML: "XML (no library wired in yet)",
}


# ---------------------------------------------------------------------------
# Composer
# ---------------------------------------------------------------------------


class ProjectComposer:
    """Renders the complete file set for a ``Selection``.

    The generated project is a Clojure service with:
    - ``deps.edn`` whose dependencies match the emitted source files
    - kaocha tests, clj-kondo lint config and babashka tasks
    - GitHub Actions lint and test workflows
    - a system namespace wiring Jetty, reitit routes and an optional
      HikariCP datasource
    - optional docker-compose, database integration test, logging config
      and editor settings
    """

    def __init__(
        self,
        renderer: Optional[TemplateRenderer] = None,
        table: Optional[DependencyTable] = None,
    ) -> None:
        self.renderer = renderer or TemplateRenderer()
        self.table = table or default_table()
        self.docker_gen = DockerGenerator(self.renderer)

    # -- Public API --------------------------------------------------------

    def compose(self, selection: Selection) -> list[FileEntry]:
        """Return every file of the project, in a fixed order.

        Raises:
            CompositionError: If a template fails to render or the resulting
                file set breaks an invariant.
        """
        context = self.build_context(selection)
        ns_path = context["ns_path"]

        files: list[FileEntry] = [
            self._render(template, path.format(ns_path=ns_path), context)
            for template, path in _ALWAYS
        ]

        # Database integration test, one per database
        database = context["database"]
        if database is not None:
            files.append(
                self._render(_DB_TEST_TEMPLATE, f"test/{ns_path}/{database['test_file']}", context)
            )

        # Local database container
        try:
            compose_file = self.docker_gen.generate(selection, context)
        except TemplateError as exc:
            raise CompositionError(f"Failed to render docker-compose.yml: {exc}") from exc
        if compose_file is not None:
            files.append(compose_file)

        # Logging backend configuration
        if selection.logging_framework is not None:
            template, path = _LOGGING_CONFIG[selection.logging_framework]
            files.append(self._render(template, path, context))

        # Editor settings
        if selection.preferred_editor is not None:
            for template, path in _EDITOR_FILES.get(selection.preferred_editor, []):
                files.append(self._render(template, path, context))

        # Keep resources/ on the classpath even when nothing lands in it
        if not any(f.path.startswith("resources/") for f in files):
            files.append(FileEntry(path=_RESOURCES_PLACEHOLDER, content=""))

        _check_invariants(files, ns_path)
        return files

    # -- Context building --------------------------------------------------

    def build_context(self, selection: Selection) -> dict[str, Any]:
        """Build the Jinja2 template context from the selection."""
        ns = clj_namespace(selection.project_name)
        ns_path = clj_path(ns)
        deps = resolve_dependencies(selection, self.table)
        test_deps = resolve_test_dependencies(selection, self.table)
        database = (
            _database_context(selection.primary_database, ns_path)
            if selection.primary_database is not None
            else None
        )
        json_enabled = DataFormat.JSON in selection.data_formats
        html_enabled = DataFormat.HTML in selection.data_formats

        return {
            "project_name": selection.project_name,
            "ns": ns,
            "ns_path": ns_path,
            "deps_map": edn_map(deps, DEPS_MAP_COLUMN),
            "test_deps_map": edn_map(test_deps, TEST_DEPS_MAP_COLUMN),
            "json": json_enabled,
            "html": html_enabled,
            "route_table": "\n   ".join(_routes(json_enabled, html_enabled)),
            "database": database,
            "compose": self.docker_gen.wants_compose(selection),
            "logging": selection.logging_framework.value if selection.logging_framework else None,
            "editor": selection.preferred_editor.value if selection.preferred_editor else None,
            "summary": _summary(selection, database),
        }

    # -- Internal ----------------------------------------------------------

    def _render(self, template: str, path: str, context: dict[str, Any]) -> FileEntry:
        try:
            content = self.renderer.render(template, context)
        except TemplateError as exc:
            raise CompositionError(f"Failed to render {template} for {path}: {exc}") from exc
        return FileEntry(path=path, content=content)


def compose(selection: Selection, composer: Optional[ProjectComposer] = None) -> list[FileEntry]:
    """Compose the project for *selection* with a default ``ProjectComposer``."""
    return (composer or ProjectComposer()).compose(selection)


# ---------------------------------------------------------------------------
# Context helpers
# ---------------------------------------------------------------------------

def _database_context(database: Database, db_name: str) -> dict[str, Any]:
    """Fill a database profile in for this project's database name."""
    profile = _DATABASE_PROFILES[database]
    key = profile["key"]
    context: dict[str, Any] = {
        **profile,
        "jdbc_url": profile["jdbc_url"].format(db=db_name),
        "test_ns": f"{key}-test",
        "test_file": f"{key}_test.clj",
    }
    if profile["container"]:
        context["env_map"] = _edn_string_map(profile["container_env"])
        context["compose_env"] = [
            (name, value.format(db=db_name)) for name, value in profile["compose_env"]
        ]
    return context


def _edn_string_map(pairs: list[tuple[str, str]]) -> str:
    return "{" + " ".join(f'"{name}" "{value}"' for name, value in pairs) + "}"


def _routes(json_enabled: bool, html_enabled: bool) -> list[str]:
    routes = ['["/health" {:get health}]']
    if json_enabled:
        routes.append('["/api/status" {:get status}]')
    if html_enabled:
        routes.append('["/" {:get home}]')
    return routes


def _summary(selection: Selection, database: Optional[dict[str, Any]]) -> list[str]:
    lines = ["HTTP with Ring, Jetty and reitit"]
    lines.extend(_FORMAT_SUMMARY[f] for f in selection.sorted_data_formats())
    if database is not None:
        lines.append(f"{database['label']} through next.jdbc and HikariCP")
    if selection.logging_framework is not None:
        lines.append(f"Logging with {selection.logging_framework.value} via clojure.tools.logging")
    lines.append("Tests with kaocha")
    return lines


def _check_invariants(files: list[FileEntry], ns_path: str) -> None:
    paths = [f.path for f in files]
    duplicates = sorted({p for p in paths if paths.count(p) > 1})
    if duplicates:
        raise CompositionError(f"Duplicate output paths: {duplicates}")

    db_tests = {
        f"test/{ns_path}/{profile['key']}_test.clj" for profile in _DATABASE_PROFILES.values()
    }
    emitted = [p for p in paths if p in db_tests]
    if len(emitted) > 1:
        raise CompositionError(f"More than one database test file: {emitted}")
