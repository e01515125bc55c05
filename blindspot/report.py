"""Plain-text exports: the full quadrant digest and a single experiment plan."""

from datetime import date

from blindspot.models import AnalysisResult, Assumption
from blindspot.quadrant import Quadrant, group_by_quadrant

_RULE = "========================"

_SECTION_HEADINGS: dict[Quadrant, str] = {
    Quadrant.TEST_NOW: "🎯 TEST NOW — Validate these FIRST before building anything",
    Quadrant.CRITICAL_RISK: "⚠️ CRITICAL RISK — High stakes, hard to test. Plan carefully.",
    Quadrant.QUICK_WINS: "✅ QUICK WINS — Easy validations, do these alongside Test Now",
    Quadrant.DEFER: "📊 DEFER / MONITOR — Lower priority, revisit after critical assumptions",
}


_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def format_date(d: date) -> str:
    """'October 19, 2026' regardless of locale."""
    return f"{_MONTHS[d.month - 1]} {d.day}, {d.year}"


def format_assumption(a: Assumption) -> str:
    blind_spot = " 🚨 Hidden Blind Spot" if a.is_hidden_blind_spot else ""
    return (
        f"- {a.text}\n"
        f"  Risk: {a.risk}/10 | Testability: {a.testability}/10{blind_spot}\n"
        f"  Experiment: {a.experiment.name}\n"
        f"  How: {a.experiment.method}\n"
        f"  Cost: {a.experiment.cost} | Time: {a.experiment.timeframe}"
    )


def format_experiment_plan(a: Assumption) -> str:
    return (
        f"Experiment: {a.experiment.name}\n"
        f"Assumption: {a.text}\n"
        f"Risk: {a.risk}/10\n"
        f"Method: {a.experiment.method}\n"
        f"Cost: {a.experiment.cost}\n"
        f"Time: {a.experiment.timeframe}"
    )


def format_digest(result: AnalysisResult, user_input: str, generated: date) -> str:
    """Clipboard digest grouped by quadrant. Empty quadrants are omitted."""
    sections = []
    for quadrant, items in group_by_quadrant(result.assumptions).items():
        if not items:
            continue
        body = "\n\n".join(format_assumption(a) for a in items)
        sections.append(f"{_SECTION_HEADINGS[quadrant]}\n\n{body}")

    lines = [
        "BLINDSPOT SPOTTER ANALYSIS",
        "",
        user_input,
        "",
        f"Generated: {format_date(generated)}",
        "",
        f"💡 First principles: {result.first_principles_insight}",
        "",
        _RULE,
        "",
        "\n\n".join(sections),
        "",
        _RULE,
        "",
        "🔑 NEXT STEP: Start with your TEST NOW assumptions.",
        "These are high risk AND easy to validate - no excuse to skip them.",
        "",
        _RULE,
    ]
    return "\n".join(lines)
