from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from cssselect import SelectorError
from lxml import etree, html
from lxml.cssselect import CSSSelector

from .errors import InvalidInputError, LocatorSyntaxError
from .models import LocatorKind

if TYPE_CHECKING:
    from playwright.sync_api import Page


class QueryEngine(Protocol):
    def query(self, locator: str, locator_type: LocatorKind) -> list[Any]:
        """Return every node matched by ``locator``; raise LocatorSyntaxError on failure."""
        ...


class HtmlDocument:
    """Query engine over an lxml HTML tree."""

    def __init__(self, root: etree._Element) -> None:
        if not etree.iselement(root):
            raise InvalidInputError("HtmlDocument requires an lxml element as root.")
        self.root = root

    @classmethod
    def from_string(cls, markup: str) -> HtmlDocument:
        return cls(html.document_fromstring(markup))

    @classmethod
    def for_node(cls, node: etree._Element) -> HtmlDocument:
        if not etree.iselement(node):
            raise InvalidInputError("Invalid element: must be an lxml element.")
        return cls(node.getroottree().getroot())

    def query(self, locator: str, locator_type: LocatorKind) -> list[Any]:
        if locator_type == "XPath":
            return self._query_xpath(locator)
        if locator_type == "CSS":
            return self._query_css(locator)
        raise LocatorSyntaxError(locator, str(locator_type), "unsupported locator type")

    def first(self, locator: str, locator_type: LocatorKind) -> etree._Element | None:
        matches = [item for item in self.query(locator, locator_type) if etree.iselement(item)]
        return matches[0] if matches else None

    def _query_xpath(self, locator: str) -> list[Any]:
        try:
            result = self.root.xpath(locator)
        except (etree.XPathError, ValueError) as exc:
            raise LocatorSyntaxError(locator, "XPath", str(exc)) from exc
        if not isinstance(result, list):
            raise LocatorSyntaxError(locator, "XPath", "expression does not select nodes")
        return result

    def _query_css(self, locator: str) -> list[Any]:
        try:
            selector = CSSSelector(locator, translator="html")
        except (SelectorError, etree.XPathError, ValueError) as exc:
            raise LocatorSyntaxError(locator, "CSS", str(exc)) from exc
        try:
            return list(selector(self.root))
        except (etree.XPathError, ValueError) as exc:
            raise LocatorSyntaxError(locator, "CSS", str(exc)) from exc


def capture_page_document(page: Page) -> HtmlDocument:
    """Snapshot the current DOM of a Playwright page into an HtmlDocument."""
    markup = page.content()
    if not markup or not markup.strip():
        raise InvalidInputError("Page returned empty content.")
    return HtmlDocument.from_string(markup)
