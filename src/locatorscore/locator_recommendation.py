from __future__ import annotations

import logging
from typing import Any

from .document import HtmlDocument, QueryEngine
from .errors import LocatorScoreError
from .locator_generator import (
    Synthesizer,
    build_css_selector,
    build_xpath,
    element_attributes,
    generate_alternative_locators,
)
from .models import (
    DEFAULT_PROBE_SETTINGS,
    DEFAULT_WEIGHTS,
    EvaluationResult,
    LocatorCandidate,
    LocatorKind,
    ProbeSettings,
    Recommendation,
    Verdict,
    WeightTable,
)
from .probes import check_uniqueness, check_uniqueness_async
from .scoring import evaluate_locator, evaluate_locator_async
from .validation import validate_node

logger = logging.getLogger(__name__)

ADVICE_USE_XPATH = "Use the recommended XPath for best results"
ADVICE_USE_CSS = "Use the recommended CSS selector for best results"
ADVICE_CONSIDER_XPATH = "Consider using the XPath for unique element identification"
ADVICE_CONSIDER_CSS = "Consider using the CSS selector for unique element identification"
ADVICE_BOTH_HAVE_ISSUES = (
    "Both locators have issues. Consider refining the element's attributes or structure for better identification"
)
ADVICE_ERROR = "Unable to provide recommendation due to error"


def is_improvement(candidate: EvaluationResult, incumbent: EvaluationResult) -> bool:
    return candidate.xpath_score > incumbent.xpath_score or candidate.css_score > incumbent.css_score


def pair_with_counterpart(alternative: LocatorCandidate, xpath: str, css: str) -> tuple[str, str]:
    if alternative.locator_type == "XPath":
        return alternative.locator, css
    return xpath, alternative.locator


def recommended_locators(result: EvaluationResult) -> tuple[str | None, str | None]:
    xpath = result.xpath if result.verdict in ("XPATH_BETTER", "EQUIVALENT") else None
    css = result.css if result.verdict in ("CSS_BETTER", "EQUIVALENT") else None
    return xpath, css


def choose_locator_kind(verdict: Verdict | None, xpath_unique: bool, css_unique: bool) -> LocatorKind | None:
    if verdict == "XPATH_BETTER" and xpath_unique:
        return "XPath"
    if verdict == "CSS_BETTER" and css_unique:
        return "CSS"
    if xpath_unique:
        return "XPath"
    if css_unique:
        return "CSS"
    return None


def overall_recommendation(verdict: Verdict | None, xpath_unique: bool, css_unique: bool) -> str:
    if verdict == "XPATH_BETTER" and xpath_unique:
        return ADVICE_USE_XPATH
    if verdict == "CSS_BETTER" and css_unique:
        return ADVICE_USE_CSS
    if xpath_unique:
        return ADVICE_CONSIDER_XPATH
    if css_unique:
        return ADVICE_CONSIDER_CSS
    return ADVICE_BOTH_HAVE_ISSUES


def _build_recommendation(result: EvaluationResult, xpath_unique: bool, css_unique: bool) -> Recommendation:
    recommended_xpath, recommended_css = recommended_locators(result)
    kind = choose_locator_kind(result.verdict, xpath_unique, css_unique)
    best_locator = {"XPath": result.xpath, "CSS": result.css}.get(kind) if kind else None
    advice = overall_recommendation(result.verdict, xpath_unique, css_unique)
    logger.info("Recommendation for %s: %s (%s)", result.verdict, best_locator, advice)
    return Recommendation(
        verdict=result.verdict,
        best_locator=best_locator,
        best_locator_type=kind,
        xpath_score=result.xpath_score,
        css_score=result.css_score,
        recommended_xpath=recommended_xpath,
        recommended_css=recommended_css,
        xpath_unique=xpath_unique,
        css_unique=css_unique,
        overall_advice=advice,
    )


def _error_recommendation(exc: LocatorScoreError) -> Recommendation:
    logger.warning("Locator evaluation failed: %s", exc)
    return Recommendation(
        verdict=None,
        best_locator=None,
        best_locator_type=None,
        xpath_score=0.0,
        css_score=0.0,
        recommended_xpath=None,
        recommended_css=None,
        xpath_unique=None,
        css_unique=None,
        overall_advice=ADVICE_ERROR,
        error=str(exc),
    )


def find_best_evaluation(
    node: Any,
    *,
    engine: QueryEngine | None = None,
    xpath_synthesizer: Synthesizer = build_xpath,
    css_synthesizer: Synthesizer = build_css_selector,
    weights: WeightTable = DEFAULT_WEIGHTS,
    settings: ProbeSettings = DEFAULT_PROBE_SETTINGS,
) -> EvaluationResult:
    """Score the synthesized pair, then every alternative against the initial counterpart.

    An alternative only replaces the incumbent when it strictly improves the
    XPath score or the CSS score, so ties keep the first result seen.
    """
    element = validate_node(node)
    query_engine = engine if engine is not None else HtmlDocument.for_node(element)

    initial_xpath = xpath_synthesizer(element)
    initial_css = css_synthesizer(element)
    best = evaluate_locator(initial_xpath, initial_css, element, engine=query_engine, weights=weights, settings=settings)

    for alternative in generate_alternative_locators(element_attributes(element)):
        xpath, css = pair_with_counterpart(alternative, initial_xpath, initial_css)
        result = evaluate_locator(xpath, css, element, engine=query_engine, weights=weights, settings=settings)
        logger.debug(
            "Alternative %s %r scored xpath=%.4f css=%.4f",
            alternative.rule,
            alternative.locator,
            result.xpath_score,
            result.css_score,
        )
        if is_improvement(result, best):
            best = result
    return best


async def find_best_evaluation_async(
    node: Any,
    *,
    engine: QueryEngine | None = None,
    xpath_synthesizer: Synthesizer = build_xpath,
    css_synthesizer: Synthesizer = build_css_selector,
    weights: WeightTable = DEFAULT_WEIGHTS,
    settings: ProbeSettings = DEFAULT_PROBE_SETTINGS,
) -> EvaluationResult:
    element = validate_node(node)
    query_engine = engine if engine is not None else HtmlDocument.for_node(element)

    initial_xpath = xpath_synthesizer(element)
    initial_css = css_synthesizer(element)
    best = await evaluate_locator_async(
        initial_xpath, initial_css, element, engine=query_engine, weights=weights, settings=settings
    )

    for alternative in generate_alternative_locators(element_attributes(element)):
        xpath, css = pair_with_counterpart(alternative, initial_xpath, initial_css)
        result = await evaluate_locator_async(xpath, css, element, engine=query_engine, weights=weights, settings=settings)
        logger.debug(
            "Alternative %s %r scored xpath=%.4f css=%.4f",
            alternative.rule,
            alternative.locator,
            result.xpath_score,
            result.css_score,
        )
        if is_improvement(result, best):
            best = result
    return best


def suggest_best_locator(
    node: Any,
    *,
    engine: QueryEngine | None = None,
    xpath_synthesizer: Synthesizer = build_xpath,
    css_synthesizer: Synthesizer = build_css_selector,
    weights: WeightTable = DEFAULT_WEIGHTS,
    settings: ProbeSettings = DEFAULT_PROBE_SETTINGS,
) -> Recommendation:
    """Top-level entry: only an invalid node raises, locator problems end up in the advice."""
    element = validate_node(node)
    query_engine = engine if engine is not None else HtmlDocument.for_node(element)

    try:
        best = find_best_evaluation(
            element,
            engine=query_engine,
            xpath_synthesizer=xpath_synthesizer,
            css_synthesizer=css_synthesizer,
            weights=weights,
            settings=settings,
        )
    except LocatorScoreError as exc:
        return _error_recommendation(exc)

    xpath_unique = check_uniqueness(query_engine, best.xpath, "XPath", settings.timeout_ms)
    css_unique = check_uniqueness(query_engine, best.css, "CSS", settings.timeout_ms)
    return _build_recommendation(best, xpath_unique, css_unique)


async def suggest_best_locator_async(
    node: Any,
    *,
    engine: QueryEngine | None = None,
    xpath_synthesizer: Synthesizer = build_xpath,
    css_synthesizer: Synthesizer = build_css_selector,
    weights: WeightTable = DEFAULT_WEIGHTS,
    settings: ProbeSettings = DEFAULT_PROBE_SETTINGS,
) -> Recommendation:
    element = validate_node(node)
    query_engine = engine if engine is not None else HtmlDocument.for_node(element)

    try:
        best = await find_best_evaluation_async(
            element,
            engine=query_engine,
            xpath_synthesizer=xpath_synthesizer,
            css_synthesizer=css_synthesizer,
            weights=weights,
            settings=settings,
        )
    except LocatorScoreError as exc:
        return _error_recommendation(exc)

    xpath_unique = await check_uniqueness_async(query_engine, best.xpath, "XPath", settings.timeout_ms)
    css_unique = await check_uniqueness_async(query_engine, best.css, "CSS", settings.timeout_ms)
    return _build_recommendation(best, xpath_unique, css_unique)
