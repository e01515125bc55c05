import logging
import time

from blindspot import llm
from blindspot.conformance import check_conformance
from blindspot.errors import InvalidRequest, MalformedResponse
from blindspot.models import AnalyzeRequest, AnalyzeResponse
from blindspot.prompts import build_prompt
from blindspot.validation import parse_analysis

log = logging.getLogger(__name__)


def check_request(req: AnalyzeRequest) -> None:
    """Raise InvalidRequest when the selected mode is missing its input."""
    if req.mode == "ai":
        if not req.product_context or not req.product_context.strip():
            raise InvalidRequest("Product context is required")
        return
    assumptions = req.manual_assumptions or []
    if not assumptions:
        raise InvalidRequest("Manual assumptions are required")
    blank = [i for i, text in enumerate(assumptions, start=1) if not text.strip()]
    if blank:
        raise InvalidRequest(f"Manual assumptions must not be empty (entry {blank[0]})")


async def analyze(req: AnalyzeRequest) -> AnalyzeResponse:
    """Run one submission: prompt, single LLM call, admission, rubric checks.

    Any failure propagates as a BlindspotError; nothing is retried.
    """
    check_request(req)
    t0 = time.monotonic()
    prompt = build_prompt(req)

    raw = await llm.complete(prompt)
    log.info("LLM replied in %.2fs (%d chars)", time.monotonic() - t0, len(raw))

    try:
        result = parse_analysis(raw, mode=req.mode, manual_assumptions=req.manual_assumptions)
    except MalformedResponse as exc:
        log.warning("Unparseable model reply: %s\n%s", exc.details, exc.raw)
        raise

    warnings = check_conformance(result, mode=req.mode)
    for w in warnings:
        log.warning("Rubric: %s", w)
    return AnalyzeResponse(
        first_principles_insight=result.first_principles_insight,
        assumptions=result.assumptions,
        rubric_warnings=warnings,
    )
