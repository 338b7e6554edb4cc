from __future__ import annotations

import logging
from typing import Any

from .document import HtmlDocument, QueryEngine
from .models import (
    DEFAULT_PROBE_SETTINGS,
    DEFAULT_WEIGHTS,
    DimensionScores,
    EvaluationResult,
    LocatorKind,
    MatchProbe,
    ProbeSettings,
    Verdict,
    WeightTable,
)
from .normalization import normalize
from .probes import measure_performance, measure_performance_async, probe_matches, probe_matches_async
from .selector_rules import readability_points, robustness_points, specificity_points, uniqueness_points
from .validation import validate_input

logger = logging.getLogger(__name__)

LENGTH_RANGE = (0.0, 100.0)
SPECIFICITY_RANGE = (0.0, 200.0)
READABILITY_RANGE = (0.0, 20.0)
ROBUSTNESS_RANGE = (0.0, 200.0)
VERDICT_THRESHOLD = 0.1


def length_score(locator: str) -> float:
    return normalize(len(locator), *LENGTH_RANGE)


def specificity_score(locator: str, locator_type: LocatorKind) -> float:
    return normalize(specificity_points(locator, locator_type), *SPECIFICITY_RANGE)


def readability_score(locator: str) -> float:
    return normalize(readability_points(locator), *READABILITY_RANGE)


def _robustness_from_probe(locator: str, locator_type: LocatorKind, probe: MatchProbe) -> float:
    points = robustness_points(locator, locator_type)
    if probe.timed_out:
        # no empirical signal either way
        logger.warning("Robustness uniqueness check timed out for %s %r", locator_type, locator)
    else:
        points += uniqueness_points(probe.match_count if probe.executed else None)
    return normalize(points, *ROBUSTNESS_RANGE)


def robustness_score(
    engine: QueryEngine,
    locator: str,
    locator_type: LocatorKind,
    timeout_ms: int | None = DEFAULT_PROBE_SETTINGS.timeout_ms,
) -> float:
    probe = probe_matches(engine, locator, locator_type, timeout_ms)
    return _robustness_from_probe(locator, locator_type, probe)


async def robustness_score_async(
    engine: QueryEngine,
    locator: str,
    locator_type: LocatorKind,
    timeout_ms: int | None = DEFAULT_PROBE_SETTINGS.timeout_ms,
) -> float:
    probe = await probe_matches_async(engine, locator, locator_type, timeout_ms)
    return _robustness_from_probe(locator, locator_type, probe)


def combine_scores(
    locator: str,
    locator_type: LocatorKind,
    *,
    performance: float,
    robustness: float,
    weights: WeightTable = DEFAULT_WEIGHTS,
) -> DimensionScores:
    length = length_score(locator)
    specificity = specificity_score(locator, locator_type)
    readability = readability_score(locator)

    total = 0.0
    total += length * -weights.length
    total += specificity * weights.specificity
    total += readability * weights.readability
    total += performance * weights.performance
    total += robustness * weights.robustness

    return DimensionScores(
        length=length,
        specificity=specificity,
        readability=readability,
        performance=performance,
        robustness=robustness,
        total=total,
    )


def decide_verdict(xpath_score: float, css_score: float, threshold: float = VERDICT_THRESHOLD) -> Verdict:
    # Relative threshold against the other score; negative scores are not special-cased.
    if xpath_score > css_score * (1 + threshold):
        return "XPATH_BETTER"
    if css_score > xpath_score * (1 + threshold):
        return "CSS_BETTER"
    return "EQUIVALENT"


def _resolve_engine(node: Any, engine: QueryEngine | None) -> QueryEngine:
    return engine if engine is not None else HtmlDocument.for_node(node)


def _build_result(xpath: str, css: str, xpath_scores: DimensionScores, css_scores: DimensionScores) -> EvaluationResult:
    verdict = decide_verdict(xpath_scores.total, css_scores.total)
    logger.debug(
        "Evaluated xpath=%r (%.4f) css=%r (%.4f) -> %s",
        xpath,
        xpath_scores.total,
        css,
        css_scores.total,
        verdict,
    )
    return EvaluationResult(
        verdict=verdict,
        xpath_score=xpath_scores.total,
        css_score=css_scores.total,
        xpath=xpath,
        css=css,
        xpath_breakdown=xpath_scores,
        css_breakdown=css_scores,
    )


def evaluate_locator(
    xpath: str,
    css: str,
    node: Any,
    *,
    engine: QueryEngine | None = None,
    weights: WeightTable = DEFAULT_WEIGHTS,
    settings: ProbeSettings = DEFAULT_PROBE_SETTINGS,
) -> EvaluationResult:
    validate_input(xpath, css, node)
    query_engine = _resolve_engine(node, engine)

    xpath_performance = measure_performance(query_engine, xpath, "XPath", settings.iterations, settings.timeout_ms)
    css_performance = measure_performance(query_engine, css, "CSS", settings.iterations, settings.timeout_ms)
    xpath_robustness = robustness_score(query_engine, xpath, "XPath", settings.timeout_ms)
    css_robustness = robustness_score(query_engine, css, "CSS", settings.timeout_ms)

    xpath_scores = combine_scores(
        xpath, "XPath", performance=xpath_performance, robustness=xpath_robustness, weights=weights
    )
    css_scores = combine_scores(css, "CSS", performance=css_performance, robustness=css_robustness, weights=weights)
    return _build_result(xpath, css, xpath_scores, css_scores)


async def evaluate_locator_async(
    xpath: str,
    css: str,
    node: Any,
    *,
    engine: QueryEngine | None = None,
    weights: WeightTable = DEFAULT_WEIGHTS,
    settings: ProbeSettings = DEFAULT_PROBE_SETTINGS,
) -> EvaluationResult:
    validate_input(xpath, css, node)
    query_engine = _resolve_engine(node, engine)

    xpath_performance = await measure_performance_async(
        query_engine, xpath, "XPath", settings.iterations, settings.timeout_ms
    )
    css_performance = await measure_performance_async(query_engine, css, "CSS", settings.iterations, settings.timeout_ms)
    xpath_robustness = await robustness_score_async(query_engine, xpath, "XPath", settings.timeout_ms)
    css_robustness = await robustness_score_async(query_engine, css, "CSS", settings.timeout_ms)

    xpath_scores = combine_scores(
        xpath, "XPath", performance=xpath_performance, robustness=xpath_robustness, weights=weights
    )
    css_scores = combine_scores(css, "CSS", performance=css_performance, robustness=css_robustness, weights=weights)
    return _build_result(xpath, css, xpath_scores, css_scores)
