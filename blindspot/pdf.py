"""Paginated A4 report built with fpdf2.

Layout: header block, product idea, first-principles insight, summary
counters, one colored section per non-empty quadrant with a card per
assumption, next-step footer. Pages break before any block that would not
fit above the bottom margin.
"""

import logging
from datetime import date

from fpdf import FPDF
from fpdf.enums import MethodReturnValue

from blindspot.models import AnalysisResult, Assumption
from blindspot.quadrant import Quadrant, group_by_quadrant
from blindspot.report import format_date

log = logging.getLogger(__name__)

MARGIN = 18.0
BOTTOM_RESERVE = 20.0

Color = tuple[int, int, int]

# title color, background color
_SECTION_STYLE: dict[Quadrant, tuple[str, Color, Color]] = {
    Quadrant.TEST_NOW: ("TEST NOW -- Validate these FIRST", (22, 101, 52), (220, 252, 231)),
    Quadrant.CRITICAL_RISK: ("CRITICAL RISK -- High stakes, plan carefully", (153, 27, 27), (254, 226, 226)),
    Quadrant.QUICK_WINS: ("QUICK WINS -- Easy validations", (133, 100, 4), (254, 249, 195)),
    Quadrant.DEFER: ("DEFER / MONITOR -- Lower priority", (30, 64, 175), (219, 234, 254)),
}

_GREEN: Color = (22, 163, 74)
_AMBER: Color = (202, 138, 4)
_RED: Color = (220, 38, 38)
_GRAY: Color = (107, 114, 128)

# Core PDF fonts are latin-1 only.
_REPLACEMENTS = {
    "—": "--", "–": "-", "‘": "'", "’": "'",
    "“": '"', "”": '"', "…": "...", "→": "->", "↑": "^",
}


def _latin1(text: str) -> str:
    for src, dst in _REPLACEMENTS.items():
        text = text.replace(src, dst)
    return text.encode("latin-1", "replace").decode("latin-1")


def _risk_color(risk: int) -> Color:
    if risk >= 8:
        return _RED
    if risk >= 5:
        return _AMBER
    return _GREEN


def _testability_color(testability: int) -> Color:
    if testability >= 8:
        return _GREEN
    if testability >= 5:
        return _AMBER
    return _RED


class _Report:
    def __init__(self):
        self.pdf = FPDF(orientation="P", unit="mm", format="A4")
        self.pdf.set_auto_page_break(False)
        self.pdf.set_margins(MARGIN, MARGIN, MARGIN)
        self.pdf.add_page()
        self.page_w = self.pdf.w
        self.page_h = self.pdf.h
        self.content_w = self.page_w - 2 * MARGIN
        self.y = MARGIN

    def check_page(self, needed: float) -> None:
        if self.y + needed > self.page_h - BOTTOM_RESERVE:
            self.pdf.add_page()
            self.y = MARGIN

    def font(self, style: str, size: float, color: Color) -> None:
        self.pdf.set_font("helvetica", style, size)
        self.pdf.set_text_color(*color)

    def text(self, x: float, y: float, value: str) -> None:
        self.pdf.text(x, y, _latin1(value))

    def split(self, value: str, width: float) -> list[str]:
        """Wrap text with the current font into lines no wider than width."""
        lines = self.pdf.multi_cell(width, 5, _latin1(value), dry_run=True, output=MethodReturnValue.LINES)
        return lines or [""]

    def lines(self, x: float, y: float, lines: list[str], leading: float) -> None:
        for i, line in enumerate(lines):
            self.pdf.text(x, y + i * leading, line)

    def box(self, x: float, y: float, w: float, h: float, fill: Color, border: Color | None = None) -> None:
        self.pdf.set_fill_color(*fill)
        if border:
            self.pdf.set_draw_color(*border)
            self.pdf.set_line_width(0.3)
            self.pdf.rect(x, y, w, h, style="FD")
        else:
            self.pdf.rect(x, y, w, h, style="F")


def _header(r: _Report, generated: date) -> None:
    r.box(MARGIN, r.y, r.content_w, 28, (245, 243, 255))
    r.font("B", 20, (88, 28, 135))
    r.text(MARGIN + 6, r.y + 12, "Blindspot Spotter")
    r.font("", 10, _GRAY)
    r.text(MARGIN + 6, r.y + 19, "AI-Powered Assumption Validation")
    today = format_date(generated)
    r.text(r.page_w - MARGIN - 6 - r.pdf.get_string_width(today), r.y + 12, today)
    r.y += 34


def _idea(r: _Report, user_input: str) -> None:
    r.font("B", 10, (55, 65, 81))
    r.text(MARGIN, r.y, "PRODUCT IDEA")
    r.y += 5
    r.font("", 10, (31, 41, 55))
    lines = r.split(user_input, r.content_w - 4)
    r.check_page(len(lines) * 5)
    r.lines(MARGIN + 2, r.y, lines, 5)
    r.y += len(lines) * 5 + 4


def _insight(r: _Report, insight: str) -> None:
    r.font("", 9, (55, 65, 81))
    lines = r.split(insight, r.content_w - 16)
    height = 10 + len(lines) * 4.5 + 4
    r.check_page(height + 6)
    r.box(MARGIN, r.y, r.content_w, height, (243, 232, 255), border=(192, 170, 230))
    r.font("B", 9, (88, 28, 135))
    r.text(MARGIN + 6, r.y + 7, "First Principles Insight")
    r.font("", 9, (55, 65, 81))
    r.lines(MARGIN + 6, r.y + 13, lines, 4.5)
    r.y += height + 6


def _summary(r: _Report, result: AnalysisResult, grouped: dict[Quadrant, list[Assumption]]) -> None:
    r.check_page(20)
    stats = [
        ("Total", len(result.assumptions), (59, 130, 246)),
        ("Test Now", len(grouped[Quadrant.TEST_NOW]), _GREEN),
        ("Critical", len(grouped[Quadrant.CRITICAL_RISK]), _RED),
        ("Blind Spots", sum(1 for a in result.assumptions if a.is_hidden_blind_spot), _RED),
    ]
    width = (r.content_w - 9) / 4
    for i, (label, value, color) in enumerate(stats):
        x = MARGIN + i * (width + 3)
        r.box(x, r.y, width, 16, (249, 250, 251))
        r.font("B", 16, color)
        r.text(x + (width - r.pdf.get_string_width(str(value))) / 2, r.y + 9, str(value))
        r.font("", 7, _GRAY)
        r.text(x + (width - r.pdf.get_string_width(label)) / 2, r.y + 14, label)
    r.y += 22


class _CardFrame:
    """Outlined card body that continues on the next page when it runs out of room."""

    def __init__(self, r: _Report):
        self.r = r
        self.x = MARGIN + 2
        self.w = r.content_w - 4
        self.top = r.y
        self.cy = r.y + 5

    def need(self, height: float) -> None:
        # Leave room for the padding under the last line.
        if self.cy + height + 2 <= self.r.page_h - BOTTOM_RESERVE:
            return
        self.close(self.cy)
        self.r.pdf.add_page()
        self.top = MARGIN
        self.cy = MARGIN + 5

    def lines(self, x: float, lines: list[str], leading: float) -> None:
        for line in lines:
            self.need(leading)
            self.r.pdf.text(x, self.cy, line)
            self.cy += leading

    def close(self, bottom: float) -> None:
        self.r.pdf.set_draw_color(229, 231, 235)
        self.r.pdf.set_line_width(0.3)
        self.r.pdf.rect(self.x, self.top, self.w, bottom - self.top, style="D")
        self.r.y = bottom


def _card(r: _Report, a: Assumption) -> None:
    inner_w = r.content_w - 20
    r.font("B", 9, (17, 24, 39))
    text_lines = r.split(a.text, inner_w)
    r.font("", 8, (55, 65, 81))
    method_lines = r.split(a.experiment.method, inner_w)
    r.font("", 7.5, _GRAY)
    cost_lines = r.split(f"Cost: {a.experiment.cost}  |  Time: {a.experiment.timeframe}", inner_w)
    blind_extra = 7 if a.is_hidden_blind_spot else 0
    height = 19.5 + len(text_lines) * 4.5 + blind_extra + len(method_lines) * 4 + len(cost_lines) * 4

    # Cards that fit on one page are never split.
    r.check_page(min(height + 4, r.page_h - BOTTOM_RESERVE - MARGIN))
    frame = _CardFrame(r)
    left = MARGIN + 8

    r.font("B", 9, (17, 24, 39))
    frame.lines(left, text_lines, 4.5)
    frame.cy += 1

    if a.is_hidden_blind_spot:
        frame.need(7)
        r.box(left, frame.cy - 1, 38, 5, (254, 226, 226))
        r.font("B", 6.5, (153, 27, 27))
        r.text(left + 2, frame.cy + 3, "Hidden Blind Spot")
        frame.cy += 7

    frame.need(10.5)
    cy = frame.cy
    r.font("", 8, _GRAY)
    r.text(left, cy, "Risk: ")
    offset = r.pdf.get_string_width("Risk: ")
    r.font("B", 8, _risk_color(a.risk))
    r.text(left + offset, cy, f"{a.risk}/10")
    test_x = MARGIN + 45
    r.font("", 8, _GRAY)
    r.text(test_x, cy, "Testability: ")
    offset = r.pdf.get_string_width("Testability: ")
    r.font("B", 8, _testability_color(a.testability))
    r.text(test_x + offset, cy, f"{a.testability}/10")
    cy += 6

    r.font("B", 8, (30, 64, 175))
    r.text(left, cy, f"Experiment: {a.experiment.name}")
    frame.cy = cy + 4.5
    r.font("", 8, (55, 65, 81))
    frame.lines(left, method_lines, 4)
    frame.cy += 1
    r.font("", 7.5, _GRAY)
    frame.lines(left, cost_lines, 4)

    frame.close(frame.cy + 2)
    r.y += 3


def _sections(r: _Report, grouped: dict[Quadrant, list[Assumption]]) -> None:
    for quadrant, items in grouped.items():
        if not items:
            continue
        title, title_color, bg = _SECTION_STYLE[quadrant]
        r.check_page(70)
        r.box(MARGIN, r.y, r.content_w, 10, bg)
        r.font("B", 10, title_color)
        r.text(MARGIN + 4, r.y + 7, title)
        r.y += 14
        for item in items:
            _card(r, item)
        r.y += 4


def _footer(r: _Report) -> None:
    r.check_page(30)
    r.box(MARGIN, r.y, r.content_w, 22, (239, 246, 255), border=(147, 197, 253))
    r.font("B", 9, (30, 64, 175))
    r.text(MARGIN + 6, r.y + 8, "Next Step")
    r.font("", 8, (55, 65, 81))
    r.text(MARGIN + 6, r.y + 14, "Start with your TEST NOW assumptions. High risk AND easy to validate.")
    r.font("", 7, _GRAY)
    r.text(MARGIN + 6, r.y + 19, "Generated by Blindspot Spotter")
    r.y += 22


def build_pdf(result: AnalysisResult, user_input: str, generated: date) -> bytes:
    grouped = group_by_quadrant(result.assumptions)
    r = _Report()
    _header(r, generated)
    if user_input:
        _idea(r, user_input)
    if result.first_principles_insight:
        _insight(r, result.first_principles_insight)
    _summary(r, result, grouped)
    _sections(r, grouped)
    _footer(r)
    data = bytes(r.pdf.output())
    log.info("Built PDF report: %d pages, %d bytes", r.pdf.page_no(), len(data))
    return data


def pdf_filename(generated: date) -> str:
    return f"blindspot-analysis-{generated.isoformat()}.pdf"
