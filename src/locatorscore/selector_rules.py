from __future__ import annotations

import re
from typing import Sequence

from .models import LocatorKind

_XPATH_SEPARATOR_PATTERN = re.compile(r"//|/")
_PREDICATE_PATTERN = re.compile(r"\[.*?\]")
_CSS_PSEUDO_PATTERN = re.compile(r":[a-zA-Z\-()]+")
_ASCII_LETTER_PATTERN = re.compile(r"[a-zA-Z]")
_NON_ALPHANUMERIC_PATTERN = re.compile(r"[^a-zA-Z0-9]")
_WORD_PATTERN = re.compile(r"[a-zA-Z]+")
_CSS_SAFE_ID_PATTERN = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_-]*$")

XPATH_SIBLING_AXES = ("following-sibling", "preceding-sibling")
CSS_POSITIONAL_PSEUDOS = (":nth-child", ":nth-of-type")

UNIQUENESS_BONUS = 50.0
EXECUTION_FAILURE_PENALTY = 50.0


def xpath_specificity_points(xpath: str) -> float:
    points = 0.0
    if "id(" in xpath:
        points += 100
    if "@class" in xpath:
        points += 10
    if "@" in xpath:
        points += 20
    points += len(_XPATH_SEPARATOR_PATTERN.findall(xpath)) * 5
    points += len(_PREDICATE_PATTERN.findall(xpath)) * 15
    return points


def css_specificity_points(css: str) -> float:
    points = 0.0
    points += css.count("#") * 100
    points += css.count(".") * 10
    points += len(_PREDICATE_PATTERN.findall(css)) * 10
    points += len(_CSS_PSEUDO_PATTERN.findall(css)) * 10
    # element-name density
    points += len(_ASCII_LETTER_PATTERN.findall(css))
    return points


def specificity_points(locator: str, locator_type: LocatorKind) -> float:
    if locator_type == "XPath":
        return xpath_specificity_points(locator)
    return css_specificity_points(locator)


def readability_points(locator: str) -> float:
    special_chars = len(_NON_ALPHANUMERIC_PATTERN.findall(locator))
    words = len(_WORD_PATTERN.findall(locator))
    return 10 - special_chars * 0.5 + words * 2


def robustness_points(locator: str, locator_type: LocatorKind) -> float:
    """Syntax-only change-resistance points, before the uniqueness probe."""
    points = 0.0
    if locator_type == "XPath":
        if "id(" in locator:
            points += 50
        if "@class" in locator:
            points += 30
        if "contains" in locator:
            points += 20
        if "text()" in locator:
            points += 10
        if any(axis in locator for axis in XPATH_SIBLING_AXES):
            points += 15
        if locator.startswith("//"):
            points -= 10
        return points

    if "#" in locator:
        points += 50
    if "." in locator:
        points += 30
    if "[" in locator:
        points += 20
    if any(pseudo in locator for pseudo in CSS_POSITIONAL_PSEUDOS):
        points += 15
    if ">" in locator:
        points += 10
    return points


def uniqueness_points(match_count: int | None) -> float:
    if match_count is None:
        return -EXECUTION_FAILURE_PENALTY
    return UNIQUENESS_BONUS if match_count == 1 else 0.0


def classify_locator(locator: str) -> LocatorKind:
    text = locator.strip()
    if text.startswith("/") or text.startswith("("):
        return "XPath"
    return "CSS"


def normalize_classes(raw: Sequence[str] | str | None) -> list[str]:
    if not raw:
        return []
    if isinstance(raw, str):
        items = raw.split()
    else:
        items = [item for item in raw if isinstance(item, str)]

    seen: set[str] = set()
    normalized: list[str] = []
    for item in items:
        clean = item.strip()
        if not clean or clean in seen:
            continue
        seen.add(clean)
        normalized.append(clean)
    return normalized


def is_css_safe_id(value: str) -> bool:
    return bool(_CSS_SAFE_ID_PATTERN.fullmatch(value))


def escape_css_attribute_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def css_id_selector(id_value: str) -> str:
    if is_css_safe_id(id_value):
        return f"#{id_value}"
    return f'[id="{escape_css_attribute_value(id_value)}"]'


def xpath_literal(value: str) -> str:
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    pieces = value.split("'")
    quoted = [f"'{piece}'" for piece in pieces]
    return "concat(" + ", \"'\", ".join(quoted) + ")"
