from __future__ import annotations

from enum import Enum
from typing import Optional
from urllib.parse import urlencode

from pydantic import BaseModel, Field

from .envelope import HttpMethod


__all__ = [
    "PageKind",
    "FormSubmission",
]


class PageKind(str, Enum):
    """
    Classification of one fetched survey page.

    Recomputed from the page content on every iteration.
    """
    INIT = "init"               # Receipt/shop identifiers, first step
    QUESTION = "question"       # One or more q[] questions
    TRANSITION = "transition"   # Consent or interstitial page with a form
    COMPLETION = "completion"   # Coupon screen, terminal


class FormSubmission(BaseModel):
    """
    The next request synthesized from a page.

    Attributes:
        kind: Page kind the submission was built for.
        method: Request method for the next request.
        fields: Ordered form fields; names may repeat.
        title: Short human-readable description of the page.
        answers: Human-readable answer choices, one per answered question.
    """
    kind: PageKind = Field(description="Page kind this submission answers")
    method: HttpMethod = Field(default=HttpMethod.POST, description="Next request method")
    fields: list[tuple[str, str]] = Field(default_factory=list, description="Form fields")
    title: str = Field(default="", description="Page description for progress output")
    answers: list[str] = Field(default_factory=list, description="Answer descriptions")

    @property
    def body(self) -> str:
        """Url-encoded form body."""
        return urlencode(self.fields)

    def get(self, name: str) -> Optional[str]:
        """Get the last value submitted under a field name."""
        values = [value for key, value in self.fields if key == name]
        return values[-1] if values else None
