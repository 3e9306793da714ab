"""Tests for wizard navigation (service_starter.wizard.controller).

Covers:
- advance / retreat over the whole page graph, including the editor branch
- The inverse law between advance and retreat
- Forward guard on the editor page
- WizardController: history pushes, refused transitions, URL adoption,
  downloads and deep links
"""

from __future__ import annotations

import io
import zipfile
from datetime import datetime, timedelta, timezone

import pytest

from service_starter.scaffolder.archive import MIME_TYPE
from service_starter.wizard.controller import (
    WizardController,
    advance,
    can_advance,
    can_retreat,
    retreat,
)
from service_starter.wizard.models import (
    ADVICE_PAGES,
    DataFormat,
    Database,
    Editor,
    LoggingFramework,
    Page,
    Selection,
)
from service_starter.wizard.navigator import HistoryNavigator
from service_starter.wizard.url_codec import deserialize, from_url, serialize

pytestmark = pytest.mark.unit

BASE_URL = "https://start.example.dev/"

ADVICE_FOR = {
    Editor.INTELLIJ: Page.INTELLIJ_ADVICE,
    Editor.VSCODE: Page.VSCODE_ADVICE,
    Editor.OTHER: Page.OTHER_EDITOR_ADVICE,
}


# ---------------------------------------------------------------------------
# Transition functions
# ---------------------------------------------------------------------------


class TestAdvance:
    def test_linear_pages(self, empty_selection):
        assert advance(Page.GET_STARTED, empty_selection) is Page.PREFERRED_EDITOR
        assert advance(Page.DATA_FORMATS, empty_selection) is Page.PRIMARY_DATABASE
        assert advance(Page.PRIMARY_DATABASE, empty_selection) is Page.PICK_LOGGING_FRAMEWORK
        assert advance(Page.PICK_LOGGING_FRAMEWORK, empty_selection) is Page.FINISH

    @pytest.mark.parametrize("editor,expected", list(ADVICE_FOR.items()))
    def test_editor_branch(self, editor, expected):
        selection = Selection(preferred_editor=editor)
        assert advance(Page.PREFERRED_EDITOR, selection) is expected

    @pytest.mark.parametrize("page", ADVICE_PAGES)
    def test_advice_pages_lead_to_data_formats(self, page, empty_selection):
        assert advance(page, empty_selection) is Page.DATA_FORMATS

    def test_finish_is_terminal(self, full_selection):
        assert advance(Page.FINISH, full_selection) is Page.FINISH


class TestRetreat:
    def test_linear_pages(self, empty_selection):
        assert retreat(Page.FINISH, empty_selection) is Page.PICK_LOGGING_FRAMEWORK
        assert retreat(Page.PICK_LOGGING_FRAMEWORK, empty_selection) is Page.PRIMARY_DATABASE
        assert retreat(Page.PRIMARY_DATABASE, empty_selection) is Page.DATA_FORMATS
        assert retreat(Page.PREFERRED_EDITOR, empty_selection) is Page.GET_STARTED

    @pytest.mark.parametrize("editor,expected", list(ADVICE_FOR.items()))
    def test_data_formats_returns_to_matching_advice(self, editor, expected):
        selection = Selection(preferred_editor=editor)
        assert retreat(Page.DATA_FORMATS, selection) is expected

    @pytest.mark.parametrize("page", ADVICE_PAGES)
    def test_advice_pages_return_to_editor(self, page, empty_selection):
        assert retreat(page, empty_selection) is Page.PREFERRED_EDITOR

    def test_get_started_is_initial(self, empty_selection):
        assert retreat(Page.GET_STARTED, empty_selection) is Page.GET_STARTED


class TestInverseLaw:
    @pytest.mark.parametrize("editor", [None, *Editor])
    @pytest.mark.parametrize("page", [p for p in Page if p is not Page.FINISH])
    def test_retreat_undoes_advance_from_any_link(self, page, editor):
        selection = deserialize(serialize(Selection(page=page, preferred_editor=editor)))
        start = selection.page
        assert retreat(advance(start, selection), selection) is start

    @pytest.mark.parametrize("linked", ADVICE_PAGES)
    @pytest.mark.parametrize("editor", [None, *Editor])
    def test_mismatched_advice_link(self, linked, editor):
        selection = from_url(f"{BASE_URL}?page={linked.value}"
                             + (f"&preferredEditor={editor.value}" if editor else ""))
        assert selection.page is ADVICE_FOR.get(editor, Page.OTHER_EDITOR_ADVICE)
        after = advance(selection.page, selection)
        assert retreat(after, selection) is selection.page

    def test_full_walk_there_and_back(self):
        selection = Selection(preferred_editor=Editor.INTELLIJ)
        forward = [Page.GET_STARTED]
        while forward[-1] is not Page.FINISH:
            forward.append(advance(forward[-1], selection))
        backward = [Page.FINISH]
        while backward[-1] is not Page.GET_STARTED:
            backward.append(retreat(backward[-1], selection))
        assert backward == list(reversed(forward))
        assert Page.INTELLIJ_ADVICE in forward


class TestGuards:
    def test_editor_page_blocked_until_chosen(self, empty_selection):
        assert can_advance(Page.PREFERRED_EDITOR, empty_selection) is False
        chosen = empty_selection.choose_editor(Editor.OTHER)
        assert can_advance(Page.PREFERRED_EDITOR, chosen) is True

    def test_finish_cannot_advance(self, full_selection):
        assert can_advance(Page.FINISH, full_selection) is False

    def test_other_pages_always_advance(self, empty_selection):
        for page in (Page.GET_STARTED, Page.DATA_FORMATS, Page.PRIMARY_DATABASE):
            assert can_advance(page, empty_selection) is True

    def test_get_started_cannot_retreat(self):
        assert can_retreat(Page.GET_STARTED) is False
        assert can_retreat(Page.FINISH) is True


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


class TestControllerHistory:
    def test_start_publishes_without_push(self, controller, navigator):
        assert navigator.entries == [f"{BASE_URL}?page=GetStarted"]
        assert controller.page is Page.GET_STARTED

    def test_each_change_pushes_once(self, controller, navigator):
        controller.next()
        controller.choose_editor(Editor.VSCODE)
        assert len(navigator.entries) == 3
        assert navigator.current == controller.url

    def test_refused_next_pushes_nothing(self, controller, navigator):
        controller.next()
        before = list(navigator.entries)
        assert controller.next() is False
        assert navigator.entries == before
        assert controller.page is Page.PREFERRED_EDITOR

    def test_back_on_first_page_pushes_nothing(self, controller, navigator):
        assert controller.back() is False
        assert len(navigator.entries) == 1

    def test_url_changed_does_not_push(self, controller, navigator):
        controller.next()
        controller.url_changed(f"{BASE_URL}?page=Finish&primaryDatabase=SQLite")
        assert controller.page is Page.FINISH
        assert controller.selection.primary_database is Database.SQLITE
        assert len(navigator.entries) == 2

    def test_history_back_restores_selection(self, controller, navigator):
        controller.next()
        controller.choose_editor(Editor.INTELLIJ)
        controller.next()
        navigator.back()
        assert controller.page is Page.PREFERRED_EDITOR
        navigator.back()
        assert controller.selection.preferred_editor is None
        navigator.forward()
        navigator.forward()
        assert controller.page is Page.INTELLIJ_ADVICE

    def test_push_after_back_drops_forward_entries(self, controller, navigator):
        controller.next()
        controller.choose_editor(Editor.OTHER)
        navigator.back()
        controller.choose_editor(Editor.VSCODE)
        assert navigator.can_go_forward() is False
        assert from_url(navigator.current).preferred_editor is Editor.VSCODE


class TestControllerScenarios:
    def test_editor_branch_round_trip(self, controller):
        controller.next()
        assert controller.page is Page.PREFERRED_EDITOR
        assert controller.can_go_next() is False

        controller.choose_editor(Editor.VSCODE)
        assert controller.can_go_next() is True
        controller.next()
        assert controller.page is Page.VSCODE_ADVICE

        controller.next()
        assert controller.page is Page.DATA_FORMATS
        controller.back()
        assert controller.page is Page.VSCODE_ADVICE

    def test_toggle_twice_restores_formats(self, controller):
        controller.toggle_data_format(DataFormat.JSON)
        original = controller.selection.data_formats
        controller.toggle_data_format(DataFormat.XML)
        controller.toggle_data_format(DataFormat.XML)
        assert controller.selection.data_formats == original

    def test_reselect_database_clears(self, controller):
        controller.choose_database(Database.MYSQL)
        controller.choose_database(Database.MYSQL)
        assert controller.selection.primary_database is None

    def test_choices_do_not_move_page(self, controller):
        controller.choose_logging_framework(LoggingFramework.LOG4J)
        assert controller.page is Page.GET_STARTED


class TestControllerDownload:
    def test_unavailable_before_finish(self, controller):
        assert controller.download() is None

    def test_download_on_finish(self, navigator, fixed_clock, full_selection):
        ctrl = WizardController(navigator, selection=full_selection, clock=fixed_clock)
        archive = ctrl.download()
        assert archive is not None
        assert archive.filename == "my-service.zip"
        assert archive.mime_type == MIME_TYPE
        with zipfile.ZipFile(io.BytesIO(archive.content)) as zf:
            assert "my-service/deps.edn" in zf.namelist()

    def test_repeated_downloads_identical(self, navigator, full_selection):
        ticks = iter(range(100))

        def clock():
            return datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(hours=next(ticks))

        ctrl = WizardController(navigator, selection=full_selection, clock=clock)
        assert ctrl.download().content == ctrl.download().content


class TestDeepLinks:
    def test_resume_from_url(self, fixed_clock):
        navigator = HistoryNavigator()
        url = f"{BASE_URL}?page=PrimaryDatabase&preferredEditor=IntelliJ&dataFormat=HTML"
        ctrl = WizardController.from_url(url, navigator, clock=fixed_clock)
        ctrl.start()
        assert ctrl.page is Page.PRIMARY_DATABASE
        assert ctrl.selection.data_formats == {DataFormat.HTML}
        assert navigator.entries == [ctrl.url]

    def test_mismatched_advice_page_follows_editor(self, fixed_clock):
        url = f"{BASE_URL}?page=IntelliJAdvice&preferredEditor=VSCode"
        ctrl = WizardController.from_url(url, HistoryNavigator(), clock=fixed_clock)
        assert ctrl.page is Page.VSCODE_ADVICE
        ctrl.next()
        assert ctrl.page is Page.DATA_FORMATS
        ctrl.back()
        assert ctrl.page is Page.VSCODE_ADVICE

    def test_garbage_url_starts_fresh(self, fixed_clock):
        ctrl = WizardController.from_url(
            f"{BASE_URL}?page=Nope&primaryDatabase=Oracle", HistoryNavigator(), clock=fixed_clock
        )
        assert ctrl.selection == Selection()
