"""Tests for page display metadata (service_starter.wizard.pages)."""

from __future__ import annotations

import pytest

from service_starter.wizard.models import ADVICE_PAGES, DataFormat, Database, Page
from service_starter.wizard.pages import PAGE_SPECS, TOTAL_STEPS, page_spec, step_number

pytestmark = pytest.mark.unit


class TestPageSpecs:
    def test_every_page_described(self):
        assert set(PAGE_SPECS) == set(Page)

    def test_spec_knows_its_page(self):
        for page in Page:
            assert page_spec(page).page is page

    def test_only_data_formats_is_multi_select(self):
        multi = [page for page, spec in PAGE_SPECS.items() if spec.multi_select]
        assert multi == [Page.DATA_FORMATS]

    def test_options_use_enum_values(self):
        formats = [opt.value for opt in page_spec(Page.DATA_FORMATS).options]
        assert formats == [f.value for f in DataFormat]
        databases = [opt.value for opt in page_spec(Page.PRIMARY_DATABASE).options]
        assert databases == [d.value for d in Database]

    def test_advice_pages_carry_advice(self):
        for page in ADVICE_PAGES:
            assert page_spec(page).advice


class TestStepNumber:
    def test_first_and_last(self):
        assert step_number(Page.GET_STARTED) == 1
        assert step_number(Page.FINISH) == TOTAL_STEPS

    @pytest.mark.parametrize("page", ADVICE_PAGES)
    def test_advice_pages_share_a_step(self, page):
        assert step_number(page) == 3

    def test_steps_increase_along_the_path(self):
        path = [
            Page.GET_STARTED,
            Page.PREFERRED_EDITOR,
            Page.VSCODE_ADVICE,
            Page.DATA_FORMATS,
            Page.PRIMARY_DATABASE,
            Page.PICK_LOGGING_FRAMEWORK,
            Page.FINISH,
        ]
        assert [step_number(p) for p in path] == list(range(1, TOTAL_STEPS + 1))
