import pytest
from lxml import etree

from locatorscore.document import HtmlDocument
from locatorscore.errors import InvalidInputError
from locatorscore.locator_generator import (
    build_css_selector,
    build_xpath,
    element_attributes,
    generate_alternative_locators,
)

_MARKUP = """
<html>
  <body>
    <form id="login"><button id="submit-btn" class="btn primary">Go</button></form>
    <div id="panel"><span class="label  main">A</span></div>
    <ul><li>One</li><li>Two</li><li>Three</li></ul>
  </body>
</html>
"""


def _document() -> HtmlDocument:
    return HtmlDocument.from_string(_MARKUP)


def test_element_attributes_snapshot() -> None:
    button = _document().first("#submit-btn", "CSS")
    assert element_attributes(button) == {"id": "submit-btn", "class": "btn primary"}


def test_element_attributes_rejects_non_element_nodes() -> None:
    with pytest.raises(InvalidInputError):
        element_attributes(etree.Comment("note"))
    with pytest.raises(InvalidInputError):
        element_attributes({"id": "x"})


def test_synthesizers_use_id_shortcut() -> None:
    button = _document().first("#submit-btn", "CSS")
    assert build_xpath(button) == "//*[@id='submit-btn']"
    assert build_css_selector(button) == "#submit-btn"


def test_synthesizers_build_positional_paths() -> None:
    document = _document()
    second = document.first("//li[2]", "XPath")
    xpath = build_xpath(second)
    css = build_css_selector(second)

    assert xpath == "/html/body[1]/ul[1]/li[2]"
    assert css == "body > ul > li:nth-of-type(2)"
    assert document.query(xpath, "XPath") == [second]
    assert document.query(css, "CSS") == [second]


def test_css_synthesizer_stops_at_ancestor_id() -> None:
    span = _document().first("span", "CSS")
    assert build_css_selector(span) == "#panel > span.label.main"


def test_alternatives_from_id_and_class() -> None:
    alternatives = generate_alternative_locators({"id": "submit-btn", "class": "btn  primary btn"})
    assert [(item.locator, item.locator_type, item.rule) for item in alternatives] == [
        ("#submit-btn", "CSS", "alt:id"),
        ("//*[@id='submit-btn']", "XPath", "alt:id"),
        (".btn.primary", "CSS", "alt:class"),
        ("//*[contains(@class, 'btn')]", "XPath", "alt:class"),
    ]


def test_alternatives_skip_missing_or_blank_attributes() -> None:
    assert generate_alternative_locators({}) == []
    assert generate_alternative_locators({"id": "  ", "class": ""}) == []
    assert generate_alternative_locators({"name": "q"}) == []


def test_alternatives_escape_unsafe_ids() -> None:
    alternatives = generate_alternative_locators({"id": "123"})
    assert alternatives[0].locator == '[id="123"]'
    assert alternatives[0].locator_type == "CSS"
    assert alternatives[1].locator == "//*[@id='123']"


def test_padded_id_is_used_verbatim() -> None:
    document = HtmlDocument.from_string("<html><body><button id=' go '>Go</button><a id='go'>x</a></body></html>")
    button = document.first("button", "CSS")

    assert build_xpath(button) == "//*[@id=' go ']"
    assert build_css_selector(button) == '[id=" go "]'
    assert document.query(build_xpath(button), "XPath") == [button]
    assert document.query(build_css_selector(button), "CSS") == [button]
    assert [item.locator for item in generate_alternative_locators(element_attributes(button))] == [
        '[id=" go "]',
        "//*[@id=' go ']",
    ]
