"""Deterministic placement of scored assumptions on the square matrix canvas.

Coordinates are SVG user units: origin top-left, y grows downward. Higher
testability is further right, higher risk is further up. Every position is
a pure function of (risk, testability, id) plus the item's index for the
label preset, so re-renders never move a dot.
"""

import math
import zlib
from dataclasses import dataclass
from typing import NamedTuple

import numpy as np

from blindspot.config import MatrixConfig, settings
from blindspot.models import Assumption

SCORE_MIN = 1
SCORE_MAX = 10


@dataclass(frozen=True)
class CanvasConfig:
    size: float = 400.0
    margin: float = 50.0
    inset: float = 10.0
    jitter: int = 15
    label_width: float = 80.0
    label_height: float = 18.0
    label_max_chars: int = 15
    tooltip_width: float = 240.0
    tooltip_height: float = 130.0
    tooltip_gap: float = 10.0
    # Visual "Test Now" box: independent of the classifier thresholds.
    box_min_testability: float = 5.5
    box_min_risk: float = 5.5

    def __post_init__(self):
        if self.inset <= 0:
            raise ValueError("inset must be positive so points never touch the plot border")
        if self.size - 2 * (self.margin + self.inset) <= 0:
            raise ValueError("margin and inset leave no room to plot")
        if self.jitter < 0:
            raise ValueError("jitter must not be negative")

    @classmethod
    def from_settings(cls, cfg: MatrixConfig | None = None) -> "CanvasConfig":
        cfg = cfg or settings.matrix
        return cls(size=cfg.size, margin=cfg.margin, inset=cfg.inset, jitter=cfg.jitter)

    @property
    def plot_min(self) -> float:
        return self.margin

    @property
    def plot_max(self) -> float:
        return self.size - self.margin

    @property
    def inner_min(self) -> float:
        return self.margin + self.inset

    @property
    def inner_max(self) -> float:
        return self.size - self.margin - self.inset


DEFAULT_CANVAS = CanvasConfig()


class LabelPlacement(NamedTuple):
    dx: float
    dy: float
    anchor: str  # SVG text-anchor: "start" or "end"


# upper-right, upper-left, lower-right, lower-left
LABEL_PRESETS: tuple[LabelPlacement, ...] = (
    LabelPlacement(12, -8, "start"),
    LabelPlacement(-12, -8, "end"),
    LabelPlacement(12, 20, "start"),
    LabelPlacement(-12, 20, "end"),
)


class Box(NamedTuple):
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class PlacedPoint:
    id: str
    index: int
    base_x: float
    base_y: float
    dx: int
    dy: int
    x: float
    y: float
    label: LabelPlacement


def _score(value) -> float:
    """Coerce a score into [1, 10]. Non-numeric or NaN falls to the minimum."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return float(SCORE_MIN)
    if math.isnan(v):
        return float(SCORE_MIN)
    return min(max(v, SCORE_MIN), SCORE_MAX)


def _fraction(score) -> float:
    return (_score(score) - SCORE_MIN) / (SCORE_MAX - SCORE_MIN)


def testability_to_x(testability, canvas: CanvasConfig = DEFAULT_CANVAS) -> float:
    return canvas.inner_min + _fraction(testability) * (canvas.inner_max - canvas.inner_min)


def risk_to_y(risk, canvas: CanvasConfig = DEFAULT_CANVAS) -> float:
    return canvas.inner_max - _fraction(risk) * (canvas.inner_max - canvas.inner_min)


def jitter_for(item_id: str, canvas: CanvasConfig = DEFAULT_CANVAS) -> tuple[int, int]:
    """Stable (dx, dy) offset in [-jitter, +jitter], derived from the id alone."""
    if canvas.jitter == 0:
        return 0, 0
    span = 2 * canvas.jitter + 1
    h = zlib.crc32(str(item_id).encode("utf-8"))
    return h % span - canvas.jitter, (h // span) % span - canvas.jitter


def clamp_point(x: float, y: float, canvas: CanvasConfig = DEFAULT_CANVAS) -> tuple[float, float]:
    lo, hi = canvas.inner_min, canvas.inner_max
    return min(max(x, lo), hi), min(max(y, lo), hi)


def label_placement(index: int) -> LabelPlacement:
    return LABEL_PRESETS[index % len(LABEL_PRESETS)]


def label_box(point: PlacedPoint, canvas: CanvasConfig = DEFAULT_CANVAS) -> Box:
    """Background rectangle behind a point's label."""
    lp = point.label
    left = point.x + lp.dx if lp.anchor == "start" else point.x + lp.dx - canvas.label_width
    return Box(left, point.y + lp.dy - 10, canvas.label_width, canvas.label_height)


def truncate_label(text: str, canvas: CanvasConfig = DEFAULT_CANVAS) -> str:
    if len(text) <= canvas.label_max_chars:
        return text
    return text[: canvas.label_max_chars] + "..."


def place(item: Assumption, index: int = 0, canvas: CanvasConfig = DEFAULT_CANVAS) -> PlacedPoint:
    base_x = testability_to_x(item.testability, canvas)
    base_y = risk_to_y(item.risk, canvas)
    dx, dy = jitter_for(item.id, canvas)
    x, y = clamp_point(base_x + dx, base_y + dy, canvas)
    return PlacedPoint(
        id=item.id,
        index=index,
        base_x=base_x,
        base_y=base_y,
        dx=dx,
        dy=dy,
        x=x,
        y=y,
        label=label_placement(index),
    )


def layout_points(assumptions: list[Assumption], canvas: CanvasConfig = DEFAULT_CANVAS) -> list[PlacedPoint]:
    """Place every assumption; same result as calling place() per item."""
    if not assumptions:
        return []
    lo, hi = canvas.inner_min, canvas.inner_max
    t = np.array([_score(a.testability) for a in assumptions])
    r = np.array([_score(a.risk) for a in assumptions])
    base_x = lo + (t - SCORE_MIN) / (SCORE_MAX - SCORE_MIN) * (hi - lo)
    base_y = hi - (r - SCORE_MIN) / (SCORE_MAX - SCORE_MIN) * (hi - lo)
    jit = np.array([jitter_for(a.id, canvas) for a in assumptions], dtype=int).reshape(-1, 2)
    x = np.clip(base_x + jit[:, 0], lo, hi)
    y = np.clip(base_y + jit[:, 1], lo, hi)

    return [
        PlacedPoint(
            id=a.id,
            index=i,
            base_x=float(base_x[i]),
            base_y=float(base_y[i]),
            dx=int(jit[i, 0]),
            dy=int(jit[i, 1]),
            x=float(x[i]),
            y=float(y[i]),
            label=label_placement(i),
        )
        for i, a in enumerate(assumptions)
    ]


def tooltip_position(x: float, y: float, canvas: CanvasConfig = DEFAULT_CANVAS) -> tuple[float, float]:
    """Top-left corner of the hover tooltip for a point at (x, y).

    Centered above the point by default; below it when there is no room
    above; pushed to the right or left of the point near a side edge;
    finally clamped so the whole box stays on the canvas.
    """
    w, h, gap = canvas.tooltip_width, canvas.tooltip_height, canvas.tooltip_gap
    left = x - w / 2
    top = y - h - gap
    if top < 0:
        top = y + gap
    if left < 0:
        left = x + gap
    elif left + w > canvas.size:
        left = x - w - gap
    left = min(max(left, 0.0), max(canvas.size - w, 0.0))
    top = min(max(top, 0.0), max(canvas.size - h, 0.0))
    return left, top


def priority_box(canvas: CanvasConfig = DEFAULT_CANVAS) -> Box:
    """Highlighted upper-right region of the plot."""
    left = testability_to_x(canvas.box_min_testability, canvas)
    bottom = risk_to_y(canvas.box_min_risk, canvas)
    return Box(left, canvas.plot_min, canvas.plot_max - left, bottom - canvas.plot_min)


def quadrant_dividers(canvas: CanvasConfig = DEFAULT_CANVAS) -> tuple[tuple[float, float, float, float], ...]:
    """(x1, y1, x2, y2) for the vertical and horizontal divider lines."""
    mid_x = testability_to_x(canvas.box_min_testability, canvas)
    mid_y = risk_to_y(canvas.box_min_risk, canvas)
    return (
        (mid_x, canvas.plot_min, mid_x, canvas.plot_max),
        (canvas.plot_min, mid_y, canvas.plot_max, mid_y),
    )
