"""Shared pytest fixtures for the Service Starter test suite.

Provides reusable fixtures for:
- Representative selections (empty, Postgres, everything chosen)
- A pinned clock so archives are reproducible
- A history navigator wired to a wizard controller
- A project composer using the packaged templates and dependency table
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from service_starter.scaffolder.generator import ProjectComposer
from service_starter.wizard.controller import WizardController
from service_starter.wizard.models import (
    DataFormat,
    Database,
    Editor,
    LoggingFramework,
    Page,
    Selection,
)
from service_starter.wizard.navigator import HistoryNavigator

FIXED_TIME = datetime(2024, 5, 17, 12, 30, 0, tzinfo=timezone.utc)
BASE_URL = "https://start.example.dev/"


# ---------------------------------------------------------------------------
# Selections
# ---------------------------------------------------------------------------

@pytest.fixture
def empty_selection() -> Selection:
    """A fresh selection: start page, nothing chosen."""
    return Selection()


@pytest.fixture
def postgres_selection() -> Selection:
    """Postgres chosen, no data formats, no logging framework."""
    return Selection(page=Page.FINISH, primary_database=Database.POSTGRES)


@pytest.fixture
def full_selection() -> Selection:
    """Every question answered."""
    return Selection(
        page=Page.FINISH,
        preferred_editor=Editor.VSCODE,
        data_formats=frozenset({DataFormat.JSON, DataFormat.HTML}),
        primary_database=Database.MYSQL,
        logging_framework=LoggingFramework.LOGBACK,
    )


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

@pytest.fixture
def fixed_clock():
    """Clock that always reports ``FIXED_TIME``."""
    return lambda: FIXED_TIME


@pytest.fixture
def navigator() -> HistoryNavigator:
    return HistoryNavigator()


@pytest.fixture
def controller(navigator: HistoryNavigator, fixed_clock) -> WizardController:
    """A started controller subscribed to its navigator."""
    ctrl = WizardController(navigator, base_url=BASE_URL, clock=fixed_clock)
    navigator.subscribe(ctrl.url_changed)
    ctrl.start()
    return ctrl


@pytest.fixture
def composer() -> ProjectComposer:
    return ProjectComposer()
