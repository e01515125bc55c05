"""SVG rendering of the risk x testability matrix."""

import html

from blindspot.interaction import IDLE, MatrixState
from blindspot.layout import (
    DEFAULT_CANVAS,
    CanvasConfig,
    PlacedPoint,
    label_box,
    layout_points,
    priority_box,
    quadrant_dividers,
    tooltip_position,
    truncate_label,
)
from blindspot.models import Assumption
from blindspot.quadrant import Quadrant, QUADRANT_INFO, risk_band, testability_band

_BLIND_SPOT_COLOR = "#EF4444"
_DOT_COLOR = "#10B981"
_GRID_COLOR = "#D1D5DB"
_AXIS_TEXT = "#6B7280"
_TOOLTIP_TITLE_CHARS = 40


def _esc(text) -> str:
    return html.escape(str(text), quote=True)


def _shorten(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _quadrant_labels(canvas: CanvasConfig) -> list[str]:
    (mid_x, _, _, _), (_, mid_y, _, _) = quadrant_dividers(canvas)
    left_cx = (canvas.plot_min + mid_x) / 2
    right_cx = (mid_x + canvas.plot_max) / 2
    top_y = (canvas.plot_min + mid_y) / 2
    bottom_y = (mid_y + canvas.plot_max) / 2
    spots = [
        (Quadrant.CRITICAL_RISK, left_cx, top_y),
        (Quadrant.TEST_NOW, right_cx, top_y),
        (Quadrant.DEFER, left_cx, bottom_y),
        (Quadrant.QUICK_WINS, right_cx, bottom_y),
    ]
    parts = []
    for quadrant, cx, cy in spots:
        info = QUADRANT_INFO[quadrant]
        parts.append(
            f'<text x="{cx:.2f}" y="{cy:.2f}" text-anchor="middle" font-size="11"'
            f' font-weight="600" fill="{info.color}">{_esc(info.title)}</text>'
        )
    return parts


def _point(item: Assumption, point: PlacedPoint, canvas: CanvasConfig, state: MatrixState) -> list[str]:
    color = _BLIND_SPOT_COLOR if item.is_hidden_blind_spot else _DOT_COLOR
    focus_id = state.tooltip_id or state.detail_id
    is_focused = focus_id == item.id
    dimmed = focus_id is not None and not is_focused
    radius = 10 if is_focused else 8
    box = label_box(point, canvas)
    lp = point.label

    parts = [f'<g data-id="{_esc(item.id)}" opacity="{0.4 if dimmed else 1}">']
    if item.is_hidden_blind_spot:
        parts.append(f'<circle cx="{point.x:.2f}" cy="{point.y:.2f}" r="12" fill="{color}" opacity="0.3"/>')
    parts.append(f'<circle cx="{point.x:.2f}" cy="{point.y:.2f}" r="{radius}" fill="{color}" opacity="0.9"/>')
    if state.detail_id == item.id:
        parts.append(
            f'<circle class="selected" cx="{point.x:.2f}" cy="{point.y:.2f}" r="14"'
            ' fill="none" stroke="#111827" stroke-width="2"/>'
        )
    parts.append(
        f'<rect x="{box.x:.2f}" y="{box.y:.2f}" width="{box.width:.0f}" height="{box.height:.0f}"'
        ' fill="white" opacity="0.9" rx="3"/>'
    )
    parts.append(
        f'<text x="{point.x + lp.dx:.2f}" y="{point.y + lp.dy:.2f}" text-anchor="{lp.anchor}"'
        f' font-size="8" font-weight="600" fill="#374151">{_esc(truncate_label(item.text, canvas))}</text>'
    )
    parts.append("</g>")
    return parts


def _tooltip(item: Assumption, point: PlacedPoint, canvas: CanvasConfig) -> list[str]:
    left, top = tooltip_position(point.x, point.y, canvas)
    rb = risk_band(item.risk)
    tb = testability_band(item.testability)
    lines = [
        f"Risk: {item.risk}/10 {rb.emoji} {rb.level}",
        f"Testability: {item.testability}/10 {tb.emoji} {tb.level}",
    ]
    if item.is_hidden_blind_spot:
        lines.append("🚨 Hidden Blind Spot")
    lines.append("Click for experiment details →")

    parts = [
        '<g class="tooltip">',
        f'<rect x="{left:.2f}" y="{top:.2f}" width="{canvas.tooltip_width:.0f}"'
        f' height="{canvas.tooltip_height:.0f}" fill="white" stroke="#E5E7EB" rx="8"/>',
        f'<text x="{left + 12:.2f}" y="{top + 22:.2f}" font-size="10" font-weight="600"'
        f' fill="#111827">{_esc(_shorten(item.text, _TOOLTIP_TITLE_CHARS))}</text>',
    ]
    for i, line in enumerate(lines):
        parts.append(
            f'<text x="{left + 12:.2f}" y="{top + 46 + i * 18:.2f}" font-size="9"'
            f' fill="#4B5563">{_esc(line)}</text>'
        )
    parts.append("</g>")
    return parts


def render_matrix_svg(
    assumptions: list[Assumption],
    canvas: CanvasConfig = DEFAULT_CANVAS,
    state: MatrixState = IDLE,
) -> str:
    """Self-contained SVG of the matrix as it looks in ``state``.

    A hovering or locked state draws that item's tooltip. An open detail
    panel rings the selected dot instead. Either way the other dots are dimmed.
    """
    size = canvas.size
    box = priority_box(canvas)
    points = layout_points(assumptions, canvas)

    svg = [
        f'<svg viewBox="0 0 {size:.0f} {size:.0f}" xmlns="http://www.w3.org/2000/svg">',
        f'<rect width="{size:.0f}" height="{size:.0f}" fill="#FAFAFA" rx="8"/>',
        f'<rect x="{box.x:.2f}" y="{box.y:.2f}" width="{box.width:.2f}" height="{box.height:.2f}"'
        ' fill="#10B981" opacity="0.05" rx="4"/>',
        f'<rect x="{box.x:.2f}" y="{box.y:.2f}" width="{box.width:.2f}" height="{box.height:.2f}"'
        ' fill="none" stroke="#10B981" stroke-width="2" opacity="0.3" rx="4"/>',
    ]
    for x1, y1, x2, y2 in quadrant_dividers(canvas):
        svg.append(
            f'<line x1="{x1:.2f}" y1="{y1:.2f}" x2="{x2:.2f}" y2="{y2:.2f}"'
            f' stroke="{_GRID_COLOR}" stroke-width="2"/>'
        )

    axis_y = canvas.plot_max + canvas.margin * 0.4
    risk_label_y = canvas.plot_min + (canvas.plot_max - canvas.plot_min) * 0.27
    svg.extend([
        f'<text x="30" y="{risk_label_y:.2f}" text-anchor="middle" font-size="12" font-weight="600"'
        f' fill="{_AXIS_TEXT}" transform="rotate(-90 30 {risk_label_y:.2f})">Risk if Wrong ↑</text>',
        f'<text x="{canvas.plot_min + 30:.2f}" y="{axis_y:.2f}" text-anchor="start" font-size="11"'
        f' font-weight="600" fill="{_AXIS_TEXT}">Hard to Test</text>',
        f'<text x="{canvas.plot_max - 30:.2f}" y="{axis_y:.2f}" text-anchor="end" font-size="11"'
        f' font-weight="600" fill="{_AXIS_TEXT}">Easy to Test →</text>',
    ])
    svg.extend(_quadrant_labels(canvas))

    tooltip: tuple[Assumption, PlacedPoint] | None = None
    for item, point in zip(assumptions, points):
        svg.extend(_point(item, point, canvas, state))
        if item.id == state.tooltip_id:
            tooltip = (item, point)
    # Drawn last so it sits above every dot.
    if tooltip:
        svg.extend(_tooltip(*tooltip, canvas))

    svg.append(
        f'<rect width="{size:.0f}" height="{size:.0f}" fill="none" stroke="{_GRID_COLOR}"'
        ' stroke-width="2" rx="8"/>'
    )
    svg.append("</svg>")
    return "\n".join(svg)
