"""Admission of model replies.

The reply is untrusted input: fences are stripped, the remainder is parsed
as JSON, and the result must match the AnalysisResult shape exactly.
Nothing is repaired here; out-of-range scores are rejected, not clamped.
"""

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from blindspot.errors import MalformedResponse, SchemaViolation
from blindspot.models import AnalysisResult, Assumption, Mode

log = logging.getLogger(__name__)

# Prompt asks for 6-8; one short is tolerated.
MIN_AI_ASSUMPTIONS = 5
MAX_AI_ASSUMPTIONS = 8

_OPEN_FENCE = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*\r?\n?")
_CLOSE_FENCE = re.compile(r"\r?\n?```\s*$")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```lang fence and a trailing ``` fence, then trim."""
    text = text.strip()
    text = _OPEN_FENCE.sub("", text, count=1)
    text = _CLOSE_FENCE.sub("", text, count=1)
    return text.strip()


def parse_json(text: str) -> Any:
    cleaned = strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise MalformedResponse(f"Model reply is not valid JSON: {exc}", raw=text) from exc


def _format_error(index: int, err: dict[str, Any]) -> str:
    loc = "".join(f"[{p}]" if isinstance(p, int) else f".{p}" for p in err["loc"])
    return f"assumptions[{index}]{loc}: {err['msg']}"


def _validate_items(raw_items: list[Any]) -> tuple[list[Assumption], list[str]]:
    items: list[Assumption] = []
    problems: list[str] = []
    seen: set[str] = set()
    for i, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            problems.append(f"assumptions[{i}]: must be an object")
            continue
        try:
            item = Assumption.model_validate(raw)
        except ValidationError as exc:
            problems.extend(_format_error(i, err) for err in exc.errors())
            continue
        if item.id in seen:
            problems.append(f"assumptions[{i}].id: duplicate id {item.id!r}")
        seen.add(item.id)
        items.append(item)
    return items, problems


def _check_manual_echo(items: list[Assumption], inputs: list[str]) -> list[str]:
    problems = []
    for i, (item, expected) in enumerate(zip(items, inputs)):
        if item.text != expected:
            problems.append(
                f"assumptions[{i}].text: expected the user's text {expected!r}, got {item.text!r}"
            )
        if item.is_hidden_blind_spot:
            problems.append(f"assumptions[{i}].isHiddenBlindSpot: must be false in manual mode")
    return problems


def validate_analysis(
    data: Any,
    mode: Mode = "ai",
    manual_assumptions: list[str] | None = None,
) -> AnalysisResult:
    """Admit a parsed reply as an AnalysisResult or raise SchemaViolation.

    In manual mode the reply must hold exactly one entry per input, in the
    same order, echoing each input verbatim with isHiddenBlindSpot false.
    In AI mode at least MIN_AI_ASSUMPTIONS entries are required.
    """
    if not isinstance(data, dict):
        raise SchemaViolation([f"top-level value must be an object, got {type(data).__name__}"])

    problems: list[str] = []
    insight = data.get("firstPrinciplesInsight")
    if not isinstance(insight, str) or not insight.strip():
        problems.append("firstPrinciplesInsight: must be a non-empty string")

    raw_items = data.get("assumptions")
    if not isinstance(raw_items, list):
        problems.append("assumptions: must be a list")
        raise SchemaViolation(problems)

    if mode == "manual":
        expected = len(manual_assumptions or [])
        if len(raw_items) != expected:
            problems.append(f"assumptions: expected {expected} entries, got {len(raw_items)}")
    elif len(raw_items) < MIN_AI_ASSUMPTIONS:
        problems.append(
            f"assumptions: expected at least {MIN_AI_ASSUMPTIONS} entries, got {len(raw_items)}"
        )
    if problems:
        raise SchemaViolation(problems)

    items, problems = _validate_items(raw_items)
    if mode == "manual" and not problems:
        problems = _check_manual_echo(items, manual_assumptions or [])
    if problems:
        raise SchemaViolation(problems)

    if mode == "ai" and len(items) > MAX_AI_ASSUMPTIONS:
        log.warning("Model returned %d assumptions (asked for at most %d)", len(items), MAX_AI_ASSUMPTIONS)

    return AnalysisResult(first_principles_insight=insight, assumptions=items)


def parse_analysis(
    raw: str,
    mode: Mode = "ai",
    manual_assumptions: list[str] | None = None,
) -> AnalysisResult:
    """Fence-strip, parse and validate a raw model reply."""
    return validate_analysis(parse_json(raw), mode=mode, manual_assumptions=manual_assumptions)
