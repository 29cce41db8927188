"""
Form synthesizer: builds the next request for a classified page.

One handler per page kind:

- INIT: receipt and visit identifiers plus the agreement checkbox.
- QUESTION: every hidden field carried forward, then one answer per
  question id. Answers always take the first available option: the first
  radio, else the first checkbox, else blank text for every text field.
  Questions with none of these widgets are left unanswered.
- TRANSITION: every named input and select submitted with its current
  value, as a browser would on a plain form submit.

COMPLETION has no handler; the loop stops before asking for one.

Example Usage:
    >>> synthesizer = FormSynthesizer()
    >>> submission = synthesizer.synthesize(PageKind.INIT, page, current_url)
    >>> submission.body
    'mode=init&shop_code=123&receipt_code=RJP0001&...&agree=on'
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Optional
from urllib.parse import urlparse

from ..errors import UnrecognizedPageError
from ..models.envelope import HttpMethod
from ..models.page_kind import FormSubmission, PageKind
from .classifier import PageClassifier
from .form_data import FormFields
from .parsed import ParsedPage


__all__ = [
    "FormSynthesizer",
    "INIT_SELECT_FIELDS",
    "RECEIPT_CODE_PREFIX",
]

logger = logging.getLogger(__name__)


# Visit date/time selects every init form submits, present or not
INIT_SELECT_FIELDS = ("month", "day", "visit_hour")

# Receipt codes carried in the survey URL path start with this
RECEIPT_CODE_PREFIX = "RJP"

QUESTION_TITLE_CLASS = "question_title"

# Input types never submitted as form values
BUTTON_INPUT_TYPES = frozenset({"submit", "button"})

Handler = Callable[[ParsedPage, str], FormSubmission]


class FormSynthesizer:
    """
    Builds a FormSubmission for INIT, QUESTION and TRANSITION pages.

    Holds no state between pages.
    """

    def __init__(self) -> None:
        self._handlers: dict[PageKind, Handler] = {
            PageKind.INIT: self._synthesize_init,
            PageKind.QUESTION: self._synthesize_question,
            PageKind.TRANSITION: self._synthesize_transition,
        }

    def synthesize(self, kind: PageKind, page: ParsedPage, current_url: str) -> FormSubmission:
        """
        Build the next request for a page.

        Args:
            kind: Page kind from the classifier.
            page: Parsed page.
            current_url: URL the page was served from.

        Returns:
            FormSubmission with method and fields.

        Raises:
            UnrecognizedPageError: A transition page has nothing to submit.
            ValueError: The page kind has no form (COMPLETION).
        """
        handler = self._handlers.get(kind)
        if handler is None:
            raise ValueError(f"No form to synthesize for {kind.value} pages")
        return handler(page, current_url)

    # -------------------------------------------------------------------------
    # INIT
    # -------------------------------------------------------------------------

    def _synthesize_init(self, page: ParsedPage, current_url: str) -> FormSubmission:
        form = FormFields()
        form.set("mode", "init")
        form.set("shop_code", self._input_value(page, "shop_code"))

        receipt_code = self._input_value(page, "receipt_code") or self.receipt_code_from_url(current_url)
        form.set("receipt_code", receipt_code)

        for name in INIT_SELECT_FIELDS:
            form.set(name, self._select_value(page, name))

        for select in page.find_all_by_attribute("select", {"name": True}):
            name = page.attr(select, "name")
            if name and name not in form:
                form.set(name, page.select_value(select))

        form.set("agree", "on")

        return FormSubmission(
            kind=PageKind.INIT,
            method=HttpMethod.POST,
            fields=form.items(),
            title="Init",
            answers=[f"Receipt code: {receipt_code or '(none)'}"],
        )

    @staticmethod
    def receipt_code_from_url(url: str) -> str:
        """Last path segment of the URL if it looks like a receipt code, else ''."""
        last_segment = urlparse(url).path.split("/")[-1]
        return last_segment if last_segment.startswith(RECEIPT_CODE_PREFIX) else ""

    @staticmethod
    def _input_value(page: ParsedPage, name: str) -> str:
        return page.value_of(page.find_by_attribute("input", {"name": name}))

    @staticmethod
    def _select_value(page: ParsedPage, name: str) -> str:
        select = page.find_by_attribute("select", {"name": name})
        return page.select_value(select) if select is not None else ""

    # -------------------------------------------------------------------------
    # QUESTION
    # -------------------------------------------------------------------------

    def _synthesize_question(self, page: ParsedPage, current_url: str) -> FormSubmission:
        form = FormFields()

        for hidden in page.inputs(input_type="hidden"):
            name = page.attr(hidden, "name")
            if not name:
                continue
            if name.endswith("[]"):
                form.append(name, page.value_of(hidden))
            else:
                form.set(name, page.value_of(hidden))

        answers: list[str] = []
        for question_id in PageClassifier.question_ids(page):
            answer = self._answer_question(page, form, f"q_{question_id}")
            if answer is None:
                logger.debug(f"No answer widget for question {question_id}, leaving it unanswered")
            elif answer:
                answers.append(answer)

        return FormSubmission(
            kind=PageKind.QUESTION,
            method=HttpMethod.POST,
            fields=form.items(),
            title=" | ".join(self.question_titles(page)),
            answers=answers,
        )

    @staticmethod
    def _answer_question(page: ParsedPage, form: FormFields, prefix: str) -> Optional[str]:
        """
        Fill one question into the form.

        Returns:
            A description of the choice, '' for blank text answers, or
            None when the question has no answer widget.
        """
        radios = page.inputs(name=prefix, input_type="radio")
        if radios:
            radio = radios[0]
            value = page.value_of(radio)
            form.set(prefix, value)
            return f"Radio: {page.label_for(radio) or value}"

        checkboxes = page.inputs(name_prefix=prefix, input_type="checkbox")
        if checkboxes:
            checkbox = checkboxes[0]
            value = page.value_of(checkbox)
            form.set(page.attr(checkbox, "name"), value)
            return f"Checkbox: {page.label_for(checkbox) or value}"

        text_fields = [
            el for el in page.find_all_by_attribute(
                ["input", "textarea"], {"name": re.compile("^" + re.escape(prefix))}
            )
            if el.name == "textarea" or page.input_type(el) == "text"
        ]
        if text_fields:
            for field in text_fields:
                form.set(page.attr(field, "name"), "")
            return ""

        return None

    @staticmethod
    def question_titles(page: ParsedPage) -> list[str]:
        """Visible question titles on a question page."""
        titles = (page.text_of(el) for el in page.find_all_by_class(QUESTION_TITLE_CLASS))
        return [title for title in titles if title]

    # -------------------------------------------------------------------------
    # TRANSITION
    # -------------------------------------------------------------------------

    def _synthesize_transition(self, page: ParsedPage, current_url: str) -> FormSubmission:
        form = FormFields()

        for element in page.find_all_by_attribute(["input", "select"]):
            name = page.attr(element, "name")
            if not name:
                continue
            if element.name == "input":
                input_type = page.input_type(element)
                if input_type in BUTTON_INPUT_TYPES:
                    continue
                if input_type in ("radio", "checkbox") and not page.is_checked(element):
                    continue
            form.set(name, page.value_of(element))

        if not form:
            raise UnrecognizedPageError(current_url)

        return FormSubmission(
            kind=PageKind.TRANSITION,
            method=HttpMethod.POST,
            fields=form.items(),
            title="Transition",
        )
