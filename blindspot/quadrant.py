"""Risk x testability quadrants and the score bands shown next to them."""

from dataclasses import dataclass
from enum import Enum

from blindspot.models import Assumption


class Quadrant(str, Enum):
    TEST_NOW = "testNow"
    CRITICAL_RISK = "criticalRisk"
    QUICK_WINS = "quickWins"
    DEFER = "defer"


@dataclass(frozen=True)
class QuadrantThresholds:
    high_risk: int = 7
    high_testability: int = 8


DEFAULT_THRESHOLDS = QuadrantThresholds()


@dataclass(frozen=True)
class QuadrantInfo:
    title: str
    subtitle: str
    color: str
    why: str


# Display order everywhere: Test Now, Critical Risk, Quick Wins, Defer.
QUADRANT_INFO: dict[Quadrant, QuadrantInfo] = {
    Quadrant.TEST_NOW: QuadrantInfo(
        title="Test Now",
        subtitle="Validate these FIRST before building anything",
        color="#10B981",
        why=(
            "This is both critical AND easy to test - your top priority. "
            "Test this immediately before building anything else."
        ),
    ),
    Quadrant.CRITICAL_RISK: QuadrantInfo(
        title="Critical Risk",
        subtitle="High stakes, hard to test. Plan carefully.",
        color="#EF4444",
        why=(
            "This is a critical assumption that's expensive or time-consuming to validate. "
            "If wrong, your business model fails."
        ),
    ),
    Quadrant.QUICK_WINS: QuadrantInfo(
        title="Quick Wins",
        subtitle="Easy validations, do these alongside Test Now",
        color="#F59E0B",
        why=(
            "This is a low-risk assumption that's cheap and easy to validate. "
            "Test it quickly to optimize your approach."
        ),
    ),
    Quadrant.DEFER: QuadrantInfo(
        title="Defer / Monitor",
        subtitle="Lower priority, revisit after critical assumptions",
        color="#3B82F6",
        why=(
            "This assumption has lower impact and is harder to test. "
            "Consider deferring validation until you've tested critical assumptions."
        ),
    ),
}


def classify(risk: int, testability: int, thresholds: QuadrantThresholds = DEFAULT_THRESHOLDS) -> Quadrant:
    high_risk = risk >= thresholds.high_risk
    high_testability = testability >= thresholds.high_testability
    if high_risk and high_testability:
        return Quadrant.TEST_NOW
    if high_risk:
        return Quadrant.CRITICAL_RISK
    if high_testability:
        return Quadrant.QUICK_WINS
    return Quadrant.DEFER


def classify_assumption(item: Assumption, thresholds: QuadrantThresholds = DEFAULT_THRESHOLDS) -> Quadrant:
    return classify(item.risk, item.testability, thresholds)


def group_by_quadrant(
    assumptions: list[Assumption],
    thresholds: QuadrantThresholds = DEFAULT_THRESHOLDS,
) -> dict[Quadrant, list[Assumption]]:
    """Bucket assumptions by quadrant, keeping input order inside each bucket.

    Every quadrant key is present, in display order, even when empty.
    """
    grouped: dict[Quadrant, list[Assumption]] = {q: [] for q in Quadrant}
    for item in assumptions:
        grouped[classify_assumption(item, thresholds)].append(item)
    return grouped


def why_this_matters(item: Assumption, thresholds: QuadrantThresholds = DEFAULT_THRESHOLDS) -> str:
    return QUADRANT_INFO[classify_assumption(item, thresholds)].why


@dataclass(frozen=True)
class Band:
    level: str
    emoji: str
    explanation: str


def risk_band(risk: int) -> Band:
    if risk >= 8:
        return Band("Critical", "🔴", "If this assumption is wrong, it could be fatal to the business.")
    if risk >= 5:
        return Band("Moderate", "🟡", "If this assumption is wrong, it will require significant pivoting.")
    return Band("Low", "🟢", "If this assumption is wrong, it can be easily adjusted.")


def testability_band(testability: int) -> Band:
    if testability >= 8:
        return Band("Easy", "✅", "This can be validated quickly and cheaply.")
    if testability >= 5:
        return Band("Moderate", "🔶", "This requires moderate time and resources to validate.")
    return Band("Difficult", "⚠️", "This is expensive or time-consuming to validate properly.")
