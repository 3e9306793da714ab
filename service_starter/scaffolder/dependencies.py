"""Dependency resolution and ``deps.edn`` formatting.

The mapping from answers to Maven coordinates is data, not code: it lives
in ``dependencies.yaml`` next to this module and is validated into a
``DependencyTable`` on load.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..wizard.models import DataFormat, Database, LoggingFramework, Selection

_DEFAULT_TABLE_PATH = Path(__file__).parent / "dependencies.yaml"


class DependencyTableError(Exception):
    """Raised when the dependency table file is missing or invalid."""


class Dependency(BaseModel):
    """A single Maven coordinate."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="group/artifact, e.g. 'cheshire/cheshire'")
    version: str = Field(..., min_length=1)


class DependencyTable(BaseModel):
    """Every dependency group the composer can emit."""

    model_config = ConfigDict(frozen=True)

    base: list[Dependency] = Field(default_factory=list)
    logging: dict[LoggingFramework, list[Dependency]] = Field(default_factory=dict)
    data_formats: dict[DataFormat, list[Dependency]] = Field(default_factory=dict)
    data_access: list[Dependency] = Field(default_factory=list)
    databases: dict[Database, list[Dependency]] = Field(default_factory=dict)
    test_base: list[Dependency] = Field(default_factory=list)
    test_databases: dict[Database, list[Dependency]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_groups_disjoint(self) -> DependencyTable:
        # Resolution never deduplicates, so groups that can be combined must
        # not share a name.  Data formats are multi-select: every format
        # group can co-occur with every other.
        fixed = {"base": self.base, "data_access": self.data_access}
        fixed.update(
            (f"data_formats.{key.value}", group) for key, group in self.data_formats.items()
        )
        _require_disjoint(
            "main", fixed, {"logging": self.logging, "databases": self.databases}
        )
        _require_disjoint(
            "test", {"test_base": self.test_base}, {"test_databases": self.test_databases}
        )
        return self

    @classmethod
    def load(cls, path: Optional[Path] = None) -> DependencyTable:
        """Load and validate a YAML dependency table.

        Raises:
            DependencyTableError: If the file cannot be read or fails validation.
        """
        source = Path(path) if path is not None else _DEFAULT_TABLE_PATH
        try:
            raw = yaml.safe_load(source.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise DependencyTableError(f"Cannot read dependency table {source}: {exc}") from exc
        try:
            return cls.model_validate(raw or {})
        except ValidationError as exc:
            raise DependencyTableError(f"Invalid dependency table {source}: {exc}") from exc


@lru_cache(maxsize=1)
def default_table() -> DependencyTable:
    """The packaged dependency table, loaded once."""
    return DependencyTable.load()


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def resolve_dependencies(
    selection: Selection, table: Optional[DependencyTable] = None
) -> list[Dependency]:
    """Main dependency list for *selection*.

    Order: base, logging framework, data formats (enumeration order), the
    data-access pair when any database is chosen, then the driver group for
    that database.
    """
    table = table or default_table()
    deps: list[Dependency] = list(table.base)
    if selection.logging_framework is not None:
        deps.extend(table.logging.get(selection.logging_framework, []))
    for data_format in selection.sorted_data_formats():
        deps.extend(table.data_formats.get(data_format, []))
    if selection.primary_database is not None:
        deps.extend(table.data_access)
        deps.extend(table.databases.get(selection.primary_database, []))
    return deps


def resolve_test_dependencies(
    selection: Selection, table: Optional[DependencyTable] = None
) -> list[Dependency]:
    """Dependencies for the ``:test`` alias."""
    table = table or default_table()
    deps: list[Dependency] = list(table.test_base)
    if selection.primary_database is not None:
        deps.extend(table.test_databases.get(selection.primary_database, []))
    return deps


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def alignment_width(deps: list[Dependency]) -> int:
    """Column where versions start: one past the longest name in *deps*."""
    if not deps:
        return 0
    return 1 + max(len(dep.name) for dep in deps)


def format_dependencies(deps: list[Dependency], indent: int = 0) -> str:
    """Render *deps* as aligned ``name {:mvn/version "x"}`` lines.

    The first line carries no indentation (it follows the opening brace in
    the template); every following line is indented by *indent* spaces.
    """
    width = alignment_width(deps)
    lines = [f'{dep.name.ljust(width)}{{:mvn/version "{dep.version}"}}' for dep in deps]
    return ("\n" + " " * indent).join(lines)


def edn_map(deps: list[Dependency], column: int) -> str:
    """Render *deps* as an EDN map whose opening brace sits at *column*."""
    return "{" + format_dependencies(deps, indent=column + 1) + "}"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _require_disjoint(
    block: str,
    fixed: dict[str, list[Dependency]],
    keyed: dict[str, dict],
) -> None:
    """Reject names that could be emitted twice in one resolved list.

    Sibling entries of a keyed group are alternatives (only one key is ever
    chosen), so they may share names with each other but not with any other
    group.
    """
    slots: list[tuple[str, list[list[Dependency]]]] = [
        (label, [group]) for label, group in fixed.items()
    ]
    slots.extend((label, list(groups.values())) for label, groups in keyed.items())

    seen: dict[str, str] = {}
    for label, alternatives in slots:
        names: set[str] = set()
        for group in alternatives:
            group_names = [dep.name for dep in group]
            if len(set(group_names)) != len(group_names):
                raise ValueError(f"{block} group {label!r} lists a dependency twice")
            names.update(group_names)
        for name in sorted(names):
            if name in seen:
                raise ValueError(
                    f"{block} dependency {name!r} appears in both {seen[name]!r} and {label!r}"
                )
            seen[name] = label
