from blindspot.models import CATEGORIES, AnalyzeRequest

_PERSONA = (
    "You are a sharp product strategist with deep experience in startups and "
    "FAANG growth teams."
)

_RISK_RUBRIC = """\
## RISK (how bad if this assumption is wrong)
- 9-10 (CRITICAL): If wrong, the entire business model collapses. Core value prop fails.
  Examples: "Users will pay for this", "The core technology works at required accuracy", "Legal/regulatory allows this"
- 7-8 (HIGH): Significantly impacts growth, unit economics, or requires a major pivot.
  Examples: "Users return monthly", "CAC < $100 and LTV > $300", "We can acquire 1000 users in 6 months"
- 5-6 (MODERATE): Affects efficiency or speed but the business can adapt.
  Examples: "Users prefer self-service over demos", "Onboarding takes <5 min", "Feature X drives retention"
- 1-4 (LOW): Nice-to-have features or optimizations.
  Examples: "Users like dark mode", "Push notifications increase engagement by 20%"
"""

_TESTABILITY_RUBRIC = """\
## TESTABILITY (how cheap and fast to validate)
Assumption testing must be affordable for bootstrapped founders. Higher testability = cheaper + faster.

- 8-10 (EASY): 3-14 days, <$1000
  Methods: landing pages + ads ($200-800), user interviews ($0-500), surveys ($100-300), desk research ($0-200), concierge MVP (manual service), mockups + 10-20 user tests
  Examples: "Test willingness to pay with pricing page", "Interview 15 target users", "Run Google Ads to a fake door"
- 5-7 (MODERATE): 2-4 weeks, $1000-3000
  Methods: simple prototype + user testing ($500-2000), wizard-of-oz MVP ($800-2500), small pilot with 20-50 users ($1000-3000), contractors for a one-day test ($500-1500)
  Examples: "Build clickable prototype + test with 30 users", "Run manual valet service for 3 days"
- 1-4 (HARD): 4-12 weeks, $3000-10000
  Methods: working MVP with real backend, regulatory/legal approval, multi-week field testing with equipment, specialized facilities/insurance
  Examples: "Build functional AI model + test accuracy", "Get insurance underwriting approval", "Deploy IoT sensors for 6 weeks"

Rules:
- If an experiment costs >$10000 it is too expensive for assumption testing: reduce scope.
- If an experiment takes >3 months, break it into smaller testable assumptions.
- Always start with the cheapest possible test that gives a valid signal.

## ENFORCEMENT
- NEVER assign testability >7 if cost exceeds $1500.
- NEVER assign testability >7 if timeframe exceeds 3 weeks.
- NEVER assign testability >4 if cost exceeds $5000.
- Cost and testability MUST be inversely related: higher cost = lower testability score.
- Check every experiment: if the testability score does not match the cost/time, adjust the score down.
"""

_CATEGORY_LIST = ", ".join(f'"{c}"' for c in CATEGORIES)

_METHOD_EXAMPLE = (
    "Practical 3-sentence test method. (1) What to build/create and set up, "
    "(2) How to execute and what specific metrics to track, "
    "(3) Success criteria with concrete numbers/benchmarks."
)


def _schema_example(text: str, hidden: str, risk: int, testability: int, cost: str) -> str:
    return (
        "{\n"
        '  "firstPrinciplesInsight": "One sentence: the core belief this idea depends on",\n'
        '  "assumptions": [\n'
        "    {\n"
        '      "id": "assumption-1",\n'
        f'      "text": "{text}",\n'
        f'      "isHiddenBlindSpot": {hidden},\n'
        f'      "risk": {risk},\n'
        f'      "testability": {testability},\n'
        '      "category": "User Behavior",\n'
        '      "experiment": {\n'
        '        "name": "Short, action-oriented name (2-4 words)",\n'
        f'        "method": "{_METHOD_EXAMPLE}",\n'
        '        "timeframe": "1-2 weeks",\n'
        f'        "cost": "{cost}"\n'
        "      }\n"
        "    }\n"
        "  ]\n"
        "}"
    )


_OUTPUT_FORMAT = """\
## OUTPUT FORMAT
Respond with ONLY valid JSON: a single object, no markdown, no code fences, no text before or after it.
STRICTLY USE THIS SCHEMA (property names must match exactly):
{example}

Field notes:
- "id": "assumption-1", "assumption-2", ... in order
- "risk" and "testability": integers from 1 to 10
- "category": one of {categories}
- "experiment.cost": dollar amount or range plus the tools needed
- "experiment.timeframe": duration in days or weeks
"""

_AI_TASK = """\
{persona} You help founders uncover hidden assumptions using first principles thinking. Be direct, practical, and concrete.

The user described their product idea:
"{product_context}"

Your job: break this down into 6-8 specific, testable assumptions. Think like a skeptical investor asking "what has to be true for this to work?"

Cover these strategic areas:
- USER BEHAVIOR: Will people actually use this? Change their habits? Pay for it?
- MARKET DYNAMICS: Does the market work the way we assume? Competitive landscape? Distribution channels?
- TECHNICAL FEASIBILITY: Can we build this at the quality/scale needed? Data availability?
- BUSINESS MODEL: Will unit economics work? Pricing? Customer acquisition cost?
- OPERATIONS: Can we deliver this sustainably? Team capabilities? Partnerships needed?
"""

_AI_RULES = """\
## QUALITY GUIDELINES
DO: "High school counselors will actively recommend our tool to 50+ students each"
DO: "Parents will pay $15/month for college guidance vs. using free alternatives"
DON'T: "Users want personalized recommendations" (too vague)
DON'T: "The product will be easy to use" (not specific or testable)
DON'T: "Students care about college admissions" (known fact, not an assumption)

## RULES
- Generate exactly 6-8 assumptions.
- Mark exactly 2-3 as hidden blind spots (isHiddenBlindSpot: true): the MOST dangerous and least obvious ones the founder likely has not considered.
- Spread across risk levels: at least 2 critical/high (risk 7-10), 2-3 moderate (risk 5-6), 1-2 lower (risk 1-4).
- Spread assumptions across the four risk/testability quadrants.
- Make assumptions falsifiable and concrete.
- Experiments must be realistic, actionable, and include success metrics.

Respond with ONLY the JSON object, nothing else.
"""

_MANUAL_TASK = """\
{persona} The user has provided these assumptions about their product idea:

{numbered}

Your job: analyze each assumption and assess its RISK and TESTABILITY, using the exact assumption text provided by the user.
"""

_MANUAL_RULES = """\
## RULES
- Return exactly {count} assumptions: one per user assumption, in the same order.
- "text" must be the EXACT assumption text from the user input, character for character. Do not paraphrase.
- Mark ALL as isHiddenBlindSpot: false (the user stated these explicitly, so none are hidden).
- Experiments must be realistic, actionable, and include success metrics.

Respond with ONLY the JSON object, nothing else.
"""


def build_ai_prompt(product_context: str) -> str:
    """Instruction payload for free-text idea mode."""
    example = _schema_example(
        text=(
            "Clear, specific statement (e.g., 'Students will input accurate GPA data "
            "without verification' not 'data quality is good')"
        ),
        hidden="true",
        risk=9,
        testability=7,
        cost="$500, landing page, 100 signups",
    )
    parts = [
        _AI_TASK.format(persona=_PERSONA, product_context=product_context),
        _RISK_RUBRIC,
        _TESTABILITY_RUBRIC,
        _OUTPUT_FORMAT.format(example=example, categories=_CATEGORY_LIST),
        _AI_RULES,
    ]
    return "\n".join(parts)


def build_manual_prompt(assumptions: list[str]) -> str:
    """Instruction payload for an explicit, ordered list of assumptions."""
    numbered = "\n".join(f"{i}. {text}" for i, text in enumerate(assumptions, start=1))
    example = _schema_example(
        text="The exact assumption text from user input",
        hidden="false",
        risk=7,
        testability=8,
        cost="$500, specific tools needed",
    )
    parts = [
        _MANUAL_TASK.format(persona=_PERSONA, numbered=numbered),
        _RISK_RUBRIC,
        _TESTABILITY_RUBRIC,
        _OUTPUT_FORMAT.format(example=example, categories=_CATEGORY_LIST),
        _MANUAL_RULES.format(count=len(assumptions)),
    ]
    return "\n".join(parts)


def build_prompt(req: AnalyzeRequest) -> str:
    if req.mode == "manual":
        return build_manual_prompt(req.manual_assumptions or [])
    return build_ai_prompt(req.product_context or "")
