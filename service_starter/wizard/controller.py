"""Wizard state machine and the session controller that drives it.

``advance`` and ``retreat`` are the whole navigation graph, written as two
total functions over ``(page, selection)`` and kept next to each other so
that ``retreat(advance(p, s), s) == p`` can be checked by reading them side
by side.  ``WizardController`` owns the live ``Selection`` for one session
and publishes every change to a ``Navigator`` as a URL.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

from ..scaffolder.archive import Archive, ArchiveAssembler
from ..scaffolder.generator import ProjectComposer
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
from .navigator import Navigator
from .url_codec import DEFAULT_BASE_URL, from_url, to_url

Clock = Callable[[], datetime]

# Linear part of the graph; the editor branch is handled explicitly below.
_LINEAR_NEXT: dict[Page, Page] = {
    Page.GET_STARTED: Page.PREFERRED_EDITOR,
    Page.DATA_FORMATS: Page.PRIMARY_DATABASE,
    Page.PRIMARY_DATABASE: Page.PICK_LOGGING_FRAMEWORK,
    Page.PICK_LOGGING_FRAMEWORK: Page.FINISH,
}
_LINEAR_PREVIOUS: dict[Page, Page] = {nxt: prev for prev, nxt in _LINEAR_NEXT.items()}


# ---------------------------------------------------------------------------
# Transition functions
# ---------------------------------------------------------------------------

def advance(page: Page, selection: Selection) -> Page:
    """Page reached by "Next" from *page*.  ``Finish`` maps to itself."""
    if page is Page.PREFERRED_EDITOR:
        return advice_page_for(selection.preferred_editor)
    if page in ADVICE_PAGES:
        return Page.DATA_FORMATS
    return _LINEAR_NEXT.get(page, page)


def retreat(page: Page, selection: Selection) -> Page:
    """Page reached by "Back" from *page*.  ``GetStarted`` maps to itself."""
    if page is Page.DATA_FORMATS:
        return advice_page_for(selection.preferred_editor)
    if page in ADVICE_PAGES:
        return Page.PREFERRED_EDITOR
    return _LINEAR_PREVIOUS.get(page, page)


def can_advance(page: Page, selection: Selection) -> bool:
    """Whether "Next" is enabled on *page*."""
    if page is Page.FINISH:
        return False
    if page is Page.PREFERRED_EDITOR:
        return selection.preferred_editor is not None
    return True


def can_retreat(page: Page) -> bool:
    return page is not Page.GET_STARTED


# ---------------------------------------------------------------------------
# Session controller
# ---------------------------------------------------------------------------

def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WizardController:
    """Holds the live selection for one wizard session.

    Every method that changes the selection re-encodes it and pushes the URL
    to the navigator, so the history always mirrors the session.  Refused
    transitions and no-op choices leave both untouched.

    Attributes:
        selection: Current ``Selection``.
        navigator: Receives one ``push`` per state change.
        base_url: URL the query string is attached to.
        started_at: Clock reading taken once at construction; used as the
            timestamp of every archive this session produces.
    """

    def __init__(
        self,
        navigator: Navigator,
        *,
        selection: Optional[Selection] = None,
        base_url: str = DEFAULT_BASE_URL,
        clock: Optional[Clock] = None,
        composer: Optional[ProjectComposer] = None,
        assembler: Optional[ArchiveAssembler] = None,
    ) -> None:
        self.navigator = navigator
        self.selection = selection if selection is not None else Selection()
        self.base_url = base_url
        self.started_at = (clock or _utc_now)()
        self.composer = composer or ProjectComposer()
        self.assembler = assembler or ArchiveAssembler()

    @classmethod
    def from_url(
        cls,
        url: str,
        navigator: Navigator,
        *,
        defaults: Optional[Selection] = None,
        **kwargs,
    ) -> WizardController:
        """Resume a session from a bookmarked or shared URL."""
        return cls(
            navigator,
            selection=from_url(url, defaults),
            base_url=url,
            **kwargs,
        )

    @property
    def url(self) -> str:
        return to_url(self.base_url, self.selection)

    @property
    def page(self) -> Page:
        return self.selection.page

    def start(self) -> None:
        """Publish the initial state without adding a history entry."""
        self.navigator.replace(self.url)

    # -- Navigation ----------------------------------------------------------

    def can_go_next(self) -> bool:
        return can_advance(self.page, self.selection)

    def can_go_back(self) -> bool:
        return can_retreat(self.page)

    def next(self) -> bool:
        """Move forward.  Returns ``False`` when the transition is refused."""
        if not self.can_go_next():
            return False
        return self._commit(self.selection.with_page(advance(self.page, self.selection)))

    def back(self) -> bool:
        return self._commit(self.selection.with_page(retreat(self.page, self.selection)))

    # -- Choices -------------------------------------------------------------

    def choose_editor(self, editor: Editor) -> bool:
        return self._commit(self.selection.choose_editor(editor))

    def toggle_data_format(self, data_format: DataFormat) -> bool:
        return self._commit(self.selection.toggle_data_format(data_format))

    def choose_database(self, database: Database) -> bool:
        return self._commit(self.selection.choose_database(database))

    def choose_logging_framework(self, framework: LoggingFramework) -> bool:
        return self._commit(self.selection.choose_logging_framework(framework))

    # -- External events -------------------------------------------------------

    def url_changed(self, url: str) -> None:
        """Adopt the state encoded in *url* (browser back/forward, reload).

        This is an echo of navigation that already happened, so nothing is
        pushed.
        """
        self.selection = from_url(
            url, Selection(project_name=self.selection.project_name)
        )

    def download(self) -> Optional[Archive]:
        """Build the project archive.  Only available on the ``Finish`` page."""
        if self.page is not Page.FINISH:
            return None
        files = self.composer.compose(self.selection)
        return self.assembler.assemble(
            files, self.started_at, project_name=self.selection.project_name
        )

    # -- Internal --------------------------------------------------------------

    def _commit(self, selection: Selection) -> bool:
        if selection == self.selection:
            return False
        self.selection = selection
        self.navigator.push(self.url)
        return True
