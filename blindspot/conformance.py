"""Post-hoc rubric checks over an admitted AnalysisResult.

These never reject a result. They produce human-readable warnings when the
model ignored the scoring policy it was given: testability must fall as
experiment cost and duration rise, and AI-mode batches should be spread
across risk bands with 2-3 hidden blind spots.
"""

import logging
import re
from dataclasses import dataclass

from blindspot.models import AnalysisResult, Assumption, Mode

log = logging.getLogger(__name__)

# (cost ceiling in dollars, max testability allowed above it)
COST_LIMITS: tuple[tuple[float, int], ...] = ((5000, 4), (1500, 7))
# Experiments longer than this many weeks may not score above 7.
TIMEFRAME_LIMIT_WEEKS = 3
TIMEFRAME_MAX_TESTABILITY = 7

_WEEKS_PER_UNIT = {"day": 1 / 7, "week": 1.0, "month": 52 / 12}

_NUM = r"(\d[\d,]*(?:\.\d+)?)\s*([kK](?![A-Za-z]))?"
_COST_RE = re.compile(r"\$\s*" + _NUM + r"(?:\s*(?:-|–|to)\s*\$?\s*" + _NUM + r")?")
_TIME_RE = re.compile(
    r"(\d+(?:\.\d+)?)(?:\s*(?:-|–|to)\s*(\d+(?:\.\d+)?))?\s*(day|week|month)s?",
    re.IGNORECASE,
)
# Separators between cost components that add up.
_SUM_SPLIT_RE = re.compile(r"\s*(?:\+|\band\b|\bplus\b)\s*", re.IGNORECASE)
_FREE_RE = re.compile(r"\bfree\b|\bno cost\b", re.IGNORECASE)


@dataclass(frozen=True)
class RubricWarning:
    assumption_id: str
    rule: str
    message: str


def _amount(number: str, suffix: str | None) -> float:
    value = float(number.replace(",", ""))
    return value * 1000 if suffix else value


def _term_cost(term: str) -> float | None:
    amounts = []
    for m in _COST_RE.finditer(term):
        amounts.append(_amount(m.group(1), m.group(2)))
        if m.group(3):
            amounts.append(_amount(m.group(3), m.group(4)))
    return max(amounts) if amounts else None


def parse_cost(text: str) -> float | None:
    """Total dollar cost of an experiment, or None if no figure is given.

    Components joined by "+", "and" or "plus" are added up; inside each
    component the highest figure counts, so a range gives its upper end.
    "$500, landing page, 100 signups" -> 500; "$1,000-3,000" -> 3000;
    "$1,000 prototype + $1,000 user testing" -> 2000; "Free" -> 0.
    Numbers without a $ are ignored.
    """
    costs = [c for c in map(_term_cost, _SUM_SPLIT_RE.split(text)) if c is not None]
    if costs:
        return sum(costs)
    if _FREE_RE.search(text):
        return 0.0
    return None


def parse_timeframe_weeks(text: str) -> float | None:
    """Upper bound of a duration string in weeks, or None if unparseable.

    "1-2 weeks" -> 2; "10 days" -> ~1.43; "2 months" -> ~8.67.
    """
    weeks = []
    for m in _TIME_RE.finditer(text):
        upper = float(m.group(2) or m.group(1))
        weeks.append(upper * _WEEKS_PER_UNIT[m.group(3).lower()])
    return max(weeks) if weeks else None


def check_assumption(item: Assumption) -> list[RubricWarning]:
    warnings: list[RubricWarning] = []
    cost = parse_cost(item.experiment.cost)
    if cost is not None:
        for ceiling, max_score in COST_LIMITS:
            if cost > ceiling and item.testability > max_score:
                warnings.append(RubricWarning(
                    assumption_id=item.id,
                    rule=f"cost>{ceiling:g}",
                    message=(
                        f"{item.id}: testability {item.testability} exceeds {max_score} "
                        f"but experiment cost is ${cost:,.0f} (over ${ceiling:,.0f})"
                    ),
                ))
                break

    weeks = parse_timeframe_weeks(item.experiment.timeframe)
    if weeks is not None and weeks > TIMEFRAME_LIMIT_WEEKS and item.testability > TIMEFRAME_MAX_TESTABILITY:
        warnings.append(RubricWarning(
            assumption_id=item.id,
            rule=f"timeframe>{TIMEFRAME_LIMIT_WEEKS}w",
            message=(
                f"{item.id}: testability {item.testability} exceeds {TIMEFRAME_MAX_TESTABILITY} "
                f"but experiment takes about {weeks:.1f} weeks (over {TIMEFRAME_LIMIT_WEEKS})"
            ),
        ))
    return warnings


def check_distribution(result: AnalysisResult) -> list[str]:
    """Soft batch-level policy for AI mode."""
    items = result.assumptions
    notes: list[str] = []
    if not 6 <= len(items) <= 8:
        notes.append(f"expected 6-8 assumptions, got {len(items)}")

    hidden = sum(1 for a in items if a.is_hidden_blind_spot)
    if not 2 <= hidden <= 3:
        notes.append(f"expected 2-3 hidden blind spots, got {hidden}")

    high = sum(1 for a in items if a.risk >= 7)
    moderate = sum(1 for a in items if 5 <= a.risk <= 6)
    low = sum(1 for a in items if a.risk <= 4)
    if high < 2:
        notes.append(f"expected at least 2 assumptions at risk 7-10, got {high}")
    if not 2 <= moderate <= 3:
        notes.append(f"expected 2-3 assumptions at risk 5-6, got {moderate}")
    if not 1 <= low <= 2:
        notes.append(f"expected 1-2 assumptions at risk 1-4, got {low}")
    return notes


def check_conformance(result: AnalysisResult, mode: Mode = "ai") -> list[str]:
    messages = [w.message for item in result.assumptions for w in check_assumption(item)]
    if mode == "ai":
        messages.extend(check_distribution(result))
    if messages:
        log.info("Rubric conformance: %d warning(s)", len(messages))
    return messages
