from __future__ import annotations

from typing import Any, Callable, Mapping

from lxml import etree

from .models import LocatorCandidate
from .selector_rules import classify_locator, css_id_selector, normalize_classes, xpath_literal
from .validation import validate_node

Synthesizer = Callable[[Any], str]


def element_attributes(node: Any) -> dict[str, str]:
    element = validate_node(node)
    return {str(key): str(value) for key, value in element.attrib.items()}


def _attr(attributes: Mapping[str, str], key: str) -> str | None:
    raw = attributes.get(key)
    if raw is None:
        return None
    value = str(raw)
    return value if value.strip() else None


def _tag(node: etree._Element) -> str:
    return str(node.tag).lower()


def _same_tag_index(node: etree._Element) -> int:
    index = 1
    for sibling in node.itersiblings(preceding=True):
        if sibling.tag == node.tag:
            index += 1
    return index


def build_xpath(node: Any) -> str:
    """Positional XPath for ``node``, short-circuited by its id attribute."""
    element = validate_node(node)
    id_value = _attr(element.attrib, "id")
    if id_value:
        return f"//*[@id={xpath_literal(id_value)}]"

    steps: list[str] = []
    current: etree._Element | None = element
    while current is not None:
        parent = current.getparent()
        if parent is None:
            steps.append(_tag(current))
        else:
            steps.append(f"{_tag(current)}[{_same_tag_index(current)}]")
        current = parent
    return "/" + "/".join(reversed(steps))


def build_css_selector(node: Any) -> str:
    """Child-combinator chain of tag, classes and :nth-of-type up to the nearest id."""
    element = validate_node(node)
    id_value = _attr(element.attrib, "id")
    if id_value:
        return css_id_selector(id_value)

    parts: list[str] = []
    current: etree._Element | None = element
    while current is not None and current.getparent() is not None:
        ancestor_id = _attr(current.attrib, "id")
        if ancestor_id:
            parts.append(css_id_selector(ancestor_id))
            break
        selector = _tag(current)
        classes = normalize_classes(current.get("class"))
        if classes:
            selector += "." + ".".join(classes)
        index = _same_tag_index(current)
        if index > 1:
            selector += f":nth-of-type({index})"
        parts.append(selector)
        current = current.getparent()

    if not parts:
        return _tag(element)
    return " > ".join(reversed(parts))


def generate_alternative_locators(attributes: Mapping[str, str]) -> list[LocatorCandidate]:
    alternatives: list[LocatorCandidate] = []

    id_value = _attr(attributes, "id")
    if id_value:
        for locator in (css_id_selector(id_value), f"//*[@id={xpath_literal(id_value)}]"):
            alternatives.append(LocatorCandidate(locator, classify_locator(locator), "alt:id"))

    classes = normalize_classes(attributes.get("class"))
    if classes:
        for locator in ("." + ".".join(classes), f"//*[contains(@class, {xpath_literal(classes[0])})]"):
            alternatives.append(LocatorCandidate(locator, classify_locator(locator), "alt:class"))

    return alternatives
