from __future__ import annotations

from typing import Any

from lxml import etree

from .errors import InvalidInputError


def validate_locator_text(locator: Any, label: str) -> str:
    if not isinstance(locator, str) or not locator.strip():
        raise InvalidInputError(f"Invalid {label}: must be a non-empty string")
    return locator


def validate_node(node: Any) -> etree._Element:
    # comments and processing instructions are lxml elements too, but never locator targets
    if not etree.iselement(node) or not isinstance(node.tag, str):
        raise InvalidInputError("Invalid element: must be an lxml element node")
    return node


def validate_input(xpath: Any, css: Any, node: Any) -> None:
    validate_locator_text(xpath, "XPath")
    validate_locator_text(css, "CSS selector")
    validate_node(node)
