import pytest

from locatorscore.document import HtmlDocument, capture_page_document
from locatorscore.errors import InvalidInputError, LocatorSyntaxError

_MARKUP = """
<html>
  <body>
    <form id="login"><button id="submit-btn" class="btn primary">Go</button></form>
    <ul><li>One</li><li>Two</li><li>Three</li></ul>
  </body>
</html>
"""


class _FakePage:
    def __init__(self, markup: str) -> None:
        self._markup = markup

    def content(self) -> str:
        return self._markup


def test_query_counts_xpath_and_css_matches() -> None:
    document = HtmlDocument.from_string(_MARKUP)
    assert len(document.query("//li", "XPath")) == 3
    assert len(document.query("ul > li", "CSS")) == 3
    assert len(document.query("#submit-btn", "CSS")) == 1
    assert len(document.query("//*[@id='submit-btn']", "XPath")) == 1
    assert document.query("//table", "XPath") == []


def test_invalid_locators_raise_syntax_error() -> None:
    document = HtmlDocument.from_string(_MARKUP)
    with pytest.raises(LocatorSyntaxError):
        document.query("//li[", "XPath")
    with pytest.raises(LocatorSyntaxError):
        document.query("li[", "CSS")


def test_control_characters_raise_syntax_error() -> None:
    document = HtmlDocument.from_string(_MARKUP)
    with pytest.raises(LocatorSyntaxError):
        document.query("//li[@title='\x01']", "XPath")
    with pytest.raises(LocatorSyntaxError):
        document.query("li[title='\x01']", "CSS")


def test_non_node_xpath_result_is_rejected() -> None:
    document = HtmlDocument.from_string(_MARKUP)
    with pytest.raises(LocatorSyntaxError) as excinfo:
        document.query("count(//li)", "XPath")
    assert excinfo.value.locator_type == "XPath"


def test_first_returns_first_matching_element() -> None:
    document = HtmlDocument.from_string(_MARKUP)
    first = document.first("li", "CSS")
    assert first is not None
    assert first.text == "One"
    assert document.first("//table", "XPath") is None


def test_for_node_uses_document_root() -> None:
    document = HtmlDocument.from_string(_MARKUP)
    item = document.first("//li[2]", "XPath")
    derived = HtmlDocument.for_node(item)
    assert derived.root.tag == "html"
    assert len(derived.query("//li", "XPath")) == 3


def test_rejects_non_element_root() -> None:
    with pytest.raises(InvalidInputError):
        HtmlDocument("<html></html>")
    with pytest.raises(InvalidInputError):
        HtmlDocument.for_node(None)


def test_capture_page_document_snapshots_page_content() -> None:
    document = capture_page_document(_FakePage(_MARKUP))
    button = document.first("#submit-btn", "CSS")
    assert button is not None
    assert button.get("class") == "btn primary"


def test_capture_page_document_rejects_empty_page() -> None:
    with pytest.raises(InvalidInputError):
        capture_page_document(_FakePage("   "))
