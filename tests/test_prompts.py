"""Prompt payloads for both input modes."""

from __future__ import annotations

from blindspot.models import CATEGORIES, AnalyzeRequest
from blindspot.prompts import build_ai_prompt, build_manual_prompt, build_prompt

_IDEA = "A valet parking app for San Francisco"
_MANUAL = ["Users will pay $10/mo", "Retention exceeds 30%"]


def test_ai_prompt_is_deterministic() -> None:
    assert build_ai_prompt(_IDEA) == build_ai_prompt(_IDEA)


def test_ai_prompt_embeds_idea_and_contract() -> None:
    prompt = build_ai_prompt(_IDEA)
    assert f'"{_IDEA}"' in prompt
    assert "6-8" in prompt
    assert "2-3 as hidden blind spots" in prompt
    for band in ("9-10 (CRITICAL)", "7-8 (HIGH)", "5-6 (MODERATE)", "1-4 (LOW)"):
        assert band in prompt
    for band in ("8-10 (EASY): 3-14 days, <$1000", "5-7 (MODERATE): 2-4 weeks, $1000-3000",
                 "1-4 (HARD): 4-12 weeks, $3000-10000"):
        assert band in prompt
    assert "NEVER assign testability >7 if cost exceeds $1500" in prompt
    assert "NEVER assign testability >7 if timeframe exceeds 3 weeks" in prompt
    assert "NEVER assign testability >4 if cost exceeds $5000" in prompt
    for category in CATEGORIES:
        assert category in prompt


def test_prompts_document_schema() -> None:
    for prompt in (build_ai_prompt(_IDEA), build_manual_prompt(_MANUAL)):
        for field in ('"firstPrinciplesInsight"', '"assumptions"', '"id"', '"text"', '"isHiddenBlindSpot"',
                      '"risk"', '"testability"', '"category"', '"experiment"', '"name"', '"method"',
                      '"timeframe"', '"cost"'):
            assert field in prompt
        assert "no code fences" in prompt


def test_manual_prompt_lists_inputs_in_order() -> None:
    prompt = build_manual_prompt(_MANUAL)
    first = prompt.index("1. Users will pay $10/mo")
    second = prompt.index("2. Retention exceeds 30%")
    assert first < second
    assert "exactly 2 assumptions" in prompt
    assert "isHiddenBlindSpot: false" in prompt
    assert "EXACT assumption text" in prompt


def test_braces_in_user_text_survive() -> None:
    assert "{price}" in build_ai_prompt("An app where {price} is set by users")
    assert "{x}" in build_manual_prompt(["{x} holds"])


def test_build_prompt_dispatches_on_mode() -> None:
    ai = AnalyzeRequest(mode="ai", product_context=_IDEA)
    manual = AnalyzeRequest(mode="manual", manual_assumptions=_MANUAL)
    assert build_prompt(ai) == build_ai_prompt(_IDEA)
    assert build_prompt(manual) == build_manual_prompt(_MANUAL)
