"""
Test suite for page parsing helpers.

This module tests:
- Form widget values as a browser reports them
- Label lookup and text normalization
- Ordered form field accumulation

Run with: pytest tests/test_pages.py -v
"""
from __future__ import annotations

import pytest

from src.survey_crawler.pages.form_data import FormFields
from src.survey_crawler.pages.parsed import ParsedPage


class TestWidgetValues:
    """Test suite for ParsedPage.value_of and friends."""

    def test_select_uses_selected_option(self):
        page = ParsedPage(
            '<select name="m"><option value="1">1</option><option value="2" selected>2</option></select>'
        )
        assert page.value_of(page.find_by_attribute("select", {"name": "m"})) == "2"

    def test_select_defaults_to_first_option(self):
        page = ParsedPage('<select name="m"><option value="a">A</option><option value="b">B</option></select>')
        assert page.value_of(page.find_by_attribute("select", {"name": "m"})) == "a"

    def test_option_without_value_uses_text(self):
        page = ParsedPage('<select name="m"><option> Tokyo </option></select>')
        assert page.value_of(page.find_by_attribute("select", {"name": "m"})) == "Tokyo"

    def test_empty_select_is_blank(self):
        page = ParsedPage('<select name="m"></select>')
        assert page.value_of(page.find_by_attribute("select", {"name": "m"})) == ""

    def test_checkbox_without_value_reports_on(self):
        page = ParsedPage('<input type="checkbox" name="agree">')
        assert page.value_of(page.find_by_attribute("input", {"name": "agree"})) == "on"

    def test_textarea_value_is_its_text(self):
        page = ParsedPage('<textarea name="t">hello</textarea>')
        assert page.value_of(page.find_by_attribute("textarea", {"name": "t"})) == "hello"

    def test_missing_element_is_blank(self):
        page = ParsedPage("<p>nothing</p>")
        assert page.value_of(page.find_by_attribute("input", {"name": "x"})) == ""

    @pytest.mark.parametrize("markup,expected", [
        ('<input name="a">', "text"),
        ('<input type="RADIO" name="a">', "radio"),
        ('<input type="" name="a">', "text"),
        ('<input type="hidden" name="a">', "hidden"),
    ])
    def test_effective_input_type(self, markup, expected):
        page = ParsedPage(markup)
        assert page.input_type(page.find_by_attribute("input", {"name": "a"})) == expected


class TestQueries:
    """Test suite for element lookup."""

    def test_inputs_filters_by_prefix_and_type(self):
        page = ParsedPage(
            '<input type="checkbox" name="q_1_a"><input type="text" name="q_1_b">'
            '<input type="checkbox" name="q_2_a">'
        )
        names = [page.attr(el, "name") for el in page.inputs(name_prefix="q_1", input_type="checkbox")]
        assert names == ["q_1_a"]

    def test_label_for_returns_collapsed_text(self):
        page = ParsedPage('<input type="radio" id="r1" name="q"><label for="r1">  Very\n  good </label>')
        radio = page.find_by_attribute("input", {"id": "r1"})
        assert page.label_for(radio) == "Very good"

    def test_label_for_without_id_is_none(self):
        page = ParsedPage('<input type="radio" name="q">')
        assert page.label_for(page.find_by_attribute("input", {"name": "q"})) is None

    def test_contains_text_searches_raw_body(self):
        page = ParsedPage('<a href="/coupon/view">x</a>')
        assert page.contains_text("/coupon/")
        assert not page.contains_text("/missing/")


class TestFormFields:
    """Test suite for ordered form field accumulation."""

    def test_set_replaces_in_place(self):
        form = FormFields()
        form.set("a", "1")
        form.set("b", "2")
        form.set("a", "3")

        assert form.items() == [("a", "3"), ("b", "2")]

    def test_append_keeps_duplicates(self):
        form = FormFields()
        form.append("q[]", "1")
        form.append("q[]", "2")

        assert form.items() == [("q[]", "1"), ("q[]", "2")]
        assert form.get("q[]") == "1"

    def test_set_collapses_appended_values(self):
        form = FormFields()
        form.append("x", "1")
        form.append("y", "2")
        form.append("x", "3")
        form.set("x", "9")

        assert form.items() == [("x", "9"), ("y", "2")]

    def test_empty_form_is_falsy(self):
        form = FormFields()
        assert not form
        assert "a" not in form
