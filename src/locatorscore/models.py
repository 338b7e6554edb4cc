from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

LocatorKind = Literal["XPath", "CSS"]
Verdict = Literal["XPATH_BETTER", "CSS_BETTER", "EQUIVALENT"]


@dataclass(frozen=True, slots=True)
class LocatorCandidate:
    locator: str
    locator_type: LocatorKind
    rule: str = "synth"


@dataclass(frozen=True, slots=True)
class WeightTable:
    length: float = 0.1
    specificity: float = 0.2
    readability: float = 0.2
    performance: float = 0.3
    robustness: float = 0.2


DEFAULT_WEIGHTS = WeightTable()


@dataclass(frozen=True, slots=True)
class ProbeSettings:
    iterations: int = 1000
    timeout_ms: int = 1000


DEFAULT_PROBE_SETTINGS = ProbeSettings()


@dataclass(frozen=True, slots=True)
class DimensionScores:
    length: float
    specificity: float
    readability: float
    performance: float
    robustness: float
    total: float


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    verdict: Verdict
    xpath_score: float
    css_score: float
    xpath: str
    css: str
    xpath_breakdown: DimensionScores | None = None
    css_breakdown: DimensionScores | None = None


@dataclass(frozen=True, slots=True)
class MatchProbe:
    match_count: int
    executed: bool
    timed_out: bool
    message: str

    @property
    def unique(self) -> bool:
        return self.executed and self.match_count == 1


@dataclass(frozen=True, slots=True)
class Recommendation:
    verdict: Verdict | None
    best_locator: str | None
    best_locator_type: LocatorKind | None
    xpath_score: float
    css_score: float
    recommended_xpath: str | None
    recommended_css: str | None
    xpath_unique: bool | None
    css_unique: bool | None
    overall_advice: str
    error: str | None = None
