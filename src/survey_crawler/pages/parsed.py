"""
Read-only view over a fetched survey page.

ParsedPage wraps a BeautifulSoup tree and exposes the few queries the
classifier and synthesizer need: find elements by tag and attributes,
read the text of an element, and read form widgets the way a browser
would (current value, checked state, effective input type).

Example Usage:
    >>> page = ParsedPage('<input type="hidden" name="mode" value="init">')
    >>> page.value_of(page.find_by_attribute("input", {"name": "mode"}))
    'init'
"""
from __future__ import annotations

import re
from typing import Any, Iterable, Optional, Union

from bs4 import BeautifulSoup, Tag


__all__ = ["ParsedPage", "HTML_PARSER"]


HTML_PARSER = "html.parser"

_WHITESPACE = re.compile(r"\s+")

TagNames = Union[str, Iterable[str]]


class ParsedPage:
    """
    Queryable page built from a response body.

    Attributes:
        html: The raw response body.
    """

    def __init__(self, html: str) -> None:
        self.html = html or ""
        self._soup = BeautifulSoup(self.html, HTML_PARSER)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def find_by_attribute(
        self,
        tag: TagNames,
        attrs: Optional[dict[str, Any]] = None,
    ) -> Optional[Tag]:
        """
        First element matching the tag name(s) and attributes.

        Attribute values may be a string (exact match), a compiled regex
        or True (attribute present).
        """
        found = self._soup.find(self._tag_names(tag), attrs=attrs or {})
        return found if isinstance(found, Tag) else None

    def find_all_by_attribute(
        self,
        tag: TagNames,
        attrs: Optional[dict[str, Any]] = None,
    ) -> list[Tag]:
        """All elements matching the tag name(s) and attributes, in document order."""
        return [
            el for el in self._soup.find_all(self._tag_names(tag), attrs=attrs or {})
            if isinstance(el, Tag)
        ]

    def find_by_class(self, css_class: str) -> Optional[Tag]:
        """First element carrying the CSS class."""
        found = self._soup.find(class_=css_class)
        return found if isinstance(found, Tag) else None

    def find_all_by_class(self, css_class: str) -> list[Tag]:
        return [el for el in self._soup.find_all(class_=css_class) if isinstance(el, Tag)]

    def inputs(
        self,
        name: Optional[str] = None,
        name_prefix: Optional[str] = None,
        input_type: Optional[str] = None,
    ) -> list[Tag]:
        """
        Input elements filtered by exact name, name prefix and effective type.

        Args:
            name: Exact name attribute.
            name_prefix: Required start of the name attribute.
            input_type: Effective type (missing type counts as "text").

        Returns:
            Matching <input> elements in document order.
        """
        attrs: dict[str, Any] = {}
        if name is not None:
            attrs["name"] = name
        elif name_prefix is not None:
            attrs["name"] = re.compile("^" + re.escape(name_prefix))

        elements = self.find_all_by_attribute("input", attrs)
        if input_type is not None:
            elements = [el for el in elements if self.input_type(el) == input_type]
        return elements

    def contains_text(self, marker: str) -> bool:
        """Whether the raw body contains a substring."""
        return marker in self.html

    def label_for(self, element: Tag) -> Optional[str]:
        """Text of the <label for=...> pointing at an element, if any."""
        element_id = element.get("id")
        if not element_id:
            return None
        label = self.find_by_attribute("label", {"for": element_id})
        if label is None:
            return None
        return self.text_of(label) or None

    # -------------------------------------------------------------------------
    # Element helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def text_of(element: Optional[Tag]) -> str:
        """Visible text of an element with whitespace collapsed."""
        if element is None:
            return ""
        return _WHITESPACE.sub(" ", element.get_text(" ")).strip()

    @staticmethod
    def attr(element: Tag, name: str) -> str:
        """Attribute value as a string ('' when missing)."""
        value = element.get(name)
        if value is None:
            return ""
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    @classmethod
    def input_type(cls, element: Tag) -> str:
        """Effective input type, lower-cased; 'text' when absent."""
        return cls.attr(element, "type").strip().lower() or "text"

    @staticmethod
    def is_checked(element: Tag) -> bool:
        return element.has_attr("checked")

    @classmethod
    def option_value(cls, option: Tag) -> str:
        """Value of an <option>: its value attribute, else its text."""
        if option.has_attr("value"):
            return cls.attr(option, "value")
        return cls.text_of(option)

    @classmethod
    def select_value(cls, select: Tag) -> str:
        """
        Current value of a <select>.

        The first option marked selected, otherwise the first option,
        otherwise ''.
        """
        options = [el for el in select.find_all("option") if isinstance(el, Tag)]
        if not options:
            return ""
        selected = next((opt for opt in options if opt.has_attr("selected")), options[0])
        return cls.option_value(selected)

    @classmethod
    def value_of(cls, element: Optional[Tag]) -> str:
        """
        Current value of a form widget as a browser reports it.

        Radios and checkboxes without a value attribute report 'on'.
        """
        if element is None:
            return ""
        if element.name == "select":
            return cls.select_value(element)
        if element.name == "textarea":
            return element.get_text()
        if element.name == "input" and cls.input_type(element) in ("radio", "checkbox"):
            return cls.attr(element, "value") if element.has_attr("value") else "on"
        return cls.attr(element, "value")

    @staticmethod
    def _tag_names(tag: TagNames) -> Union[str, list[str]]:
        return tag if isinstance(tag, str) else list(tag)
