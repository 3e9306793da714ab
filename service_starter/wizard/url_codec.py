"""Bidirectional mapping between a ``Selection`` and URL query parameters.

The URL is the only place wizard state survives a refresh, a bookmark or a
shared link, so decoding is deliberately forgiving: every field is parsed on
its own and an unrecognised value falls back to that field's default without
touching the others.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, TypeVar, Union

import httpx

from .models import (
    ADVICE_PAGES,
    DataFormat,
    Database,
    Editor,
    LoggingFramework,
    Page,
    Selection,
    advice_page_for,
)

PAGE_PARAM = "page"
EDITOR_PARAM = "preferredEditor"
DATA_FORMAT_PARAM = "dataFormat"
DATABASE_PARAM = "primaryDatabase"
LOGGING_PARAM = "loggingFramework"

DEFAULT_BASE_URL = "https://start.example.dev/"

QueryInput = Union[httpx.QueryParams, Mapping[str, Any], str]

_E = TypeVar("_E", bound=Enum)


def serialize(selection: Selection) -> httpx.QueryParams:
    """Encode *selection* as an ordered query-parameter set.

    Unset optional fields are omitted.  ``dataFormat`` is repeated once per
    selected format, in enumeration order.
    """
    items: list[tuple[str, str]] = [(PAGE_PARAM, selection.page.value)]
    if selection.preferred_editor is not None:
        items.append((EDITOR_PARAM, selection.preferred_editor.value))
    for data_format in selection.sorted_data_formats():
        items.append((DATA_FORMAT_PARAM, data_format.value))
    if selection.primary_database is not None:
        items.append((DATABASE_PARAM, selection.primary_database.value))
    if selection.logging_framework is not None:
        items.append((LOGGING_PARAM, selection.logging_framework.value))
    return httpx.QueryParams(items)


def deserialize(params: QueryInput, defaults: Optional[Selection] = None) -> Selection:
    """Rebuild a ``Selection`` from query parameters.

    Args:
        params: ``httpx.QueryParams``, a plain mapping, or a raw query string.
        defaults: Supplies the value of every field that is absent or
            malformed in *params*.  Defaults to a fresh ``Selection()``.

    Returns:
        A new ``Selection``.  Never raises for bad parameter values.  An
        advice page that does not match the decoded editor is replaced by
        the one that does.
    """
    defaults = defaults if defaults is not None else Selection()
    query = httpx.QueryParams(params)

    # Each repeated value stands alone; only if none parse does the default apply.
    parsed_formats = frozenset(
        parsed
        for parsed in (_parse(DataFormat, raw) for raw in query.get_list(DATA_FORMAT_PARAM))
        if parsed is not None
    )
    data_formats = parsed_formats or defaults.data_formats

    editor = _single(query, EDITOR_PARAM, Editor, defaults.preferred_editor)
    page = _single(query, PAGE_PARAM, Page, defaults.page)
    # Advice pages are derived from the editor, never taken from the link.
    if page in ADVICE_PAGES:
        page = advice_page_for(editor)

    return Selection(
        page=page,
        preferred_editor=editor,
        data_formats=data_formats,
        primary_database=_single(query, DATABASE_PARAM, Database, defaults.primary_database),
        logging_framework=_single(
            query, LOGGING_PARAM, LoggingFramework, defaults.logging_framework
        ),
        project_name=defaults.project_name,
    )


def to_url(base_url: str, selection: Selection) -> str:
    """Return *base_url* with its query replaced by the encoded *selection*."""
    return str(httpx.URL(base_url).copy_with(params=serialize(selection)))


def from_url(url: str, defaults: Optional[Selection] = None) -> Selection:
    """Decode the query string of *url*.  A malformed URL yields *defaults*."""
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return defaults if defaults is not None else Selection()
    return deserialize(parsed.params, defaults)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse(enum_cls: type[_E], raw: str) -> Optional[_E]:
    try:
        return enum_cls(raw)
    except ValueError:
        return None


def _single(
    query: httpx.QueryParams,
    key: str,
    enum_cls: type[_E],
    default: Any,
) -> Any:
    """Parse the first occurrence of *key*, falling back to *default*."""
    raw = query.get(key)
    if raw is None:
        return default
    parsed = _parse(enum_cls, raw)
    return default if parsed is None else parsed
