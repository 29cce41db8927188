"""
Page classifier for the survey form engine.

Assigns exactly one PageKind to a parsed page, first match wins:

1. COMPLETION - the page looks like the coupon screen (a `.number_wrap`
   block, or the raw body mentions `/coupon/` or `クーポンコード`) and it
   is not an init page. The init page can carry the same words in its
   legal/help copy, so the init marker vetoes completion.
2. INIT - the first input named `mode` has the value `init`.
3. QUESTION - at least one input named `q[]` is present.
4. TRANSITION - anything else.

Classification depends only on the page content, so classifying the same
page twice always gives the same kind.

Example Usage:
    >>> classifier = PageClassifier()
    >>> classifier.classify(ParsedPage(html))
    <PageKind.QUESTION: 'question'>
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..models.page_kind import PageKind
from .parsed import ParsedPage


__all__ = [
    "PageClassifier",
    "COUPON_CLASS",
    "COUPON_TEXT_MARKERS",
    "INIT_MODE_VALUE",
    "QUESTION_ID_FIELD",
]

logger = logging.getLogger(__name__)


# CSS class of the block that shows the coupon number
COUPON_CLASS = "number_wrap"

# Substrings of the raw body that only appear around the coupon
COUPON_TEXT_MARKERS = (
    "/coupon/",
    "クーポンコード",
)

INIT_MODE_VALUE = "init"

# Hidden field repeated once per question on a question page
QUESTION_ID_FIELD = "q[]"


class PageClassifier:
    """
    Decides what kind of survey page a ParsedPage is.

    Attributes:
        coupon_class: CSS class marking the coupon block.
        coupon_text_markers: Raw-body substrings marking the coupon page.
    """

    def __init__(
        self,
        coupon_class: str = COUPON_CLASS,
        coupon_text_markers: Optional[Iterable[str]] = None,
    ) -> None:
        self.coupon_class = coupon_class
        self.coupon_text_markers = tuple(
            COUPON_TEXT_MARKERS if coupon_text_markers is None else coupon_text_markers
        )

    def classify(self, page: ParsedPage) -> PageKind:
        """
        Classify a page.

        Args:
            page: Parsed response body.

        Returns:
            The page kind.
        """
        is_init = self.is_init_page(page)

        if self.is_coupon_like(page) and not is_init:
            kind = PageKind.COMPLETION
        elif is_init:
            kind = PageKind.INIT
        elif self.question_ids(page):
            kind = PageKind.QUESTION
        else:
            kind = PageKind.TRANSITION

        logger.debug(f"Classified page as {kind.value}")
        return kind

    def is_coupon_like(self, page: ParsedPage) -> bool:
        """Whether the page carries any coupon marker."""
        if page.find_by_class(self.coupon_class) is not None:
            return True
        return any(page.contains_text(marker) for marker in self.coupon_text_markers)

    @staticmethod
    def is_init_page(page: ParsedPage) -> bool:
        """Whether the first `mode` input says `init`."""
        mode_input = page.find_by_attribute("input", {"name": "mode"})
        return mode_input is not None and page.value_of(mode_input) == INIT_MODE_VALUE

    @staticmethod
    def question_ids(page: ParsedPage) -> list[str]:
        """Opaque question ids from the `q[]` inputs, in document order."""
        return [
            page.value_of(el)
            for el in page.find_all_by_attribute("input", {"name": QUESTION_ID_FIELD})
        ]
