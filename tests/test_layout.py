"""Deterministic matrix layout."""

from __future__ import annotations

import pytest

from blindspot import layout
from blindspot.layout import (
    DEFAULT_CANVAS,
    LABEL_PRESETS,
    CanvasConfig,
    clamp_point,
    jitter_for,
    label_box,
    label_placement,
    layout_points,
    place,
    priority_box,
    quadrant_dividers,
    risk_to_y,
    tooltip_position,
    truncate_label,
)
from blindspot.models import Assumption, Experiment


def _assumption(item_id: str, risk: int, testability: int) -> Assumption:
    return Assumption(
        id=item_id,
        text=f"Assumption {item_id}",
        is_hidden_blind_spot=False,
        risk=risk,
        testability=testability,
        category="Technical Feasibility",
        experiment=Experiment(name="Spike", method="Build it.", cost="$300", timeframe="1 week"),
    )


def _strictly_inside(x: float, y: float, canvas: CanvasConfig = DEFAULT_CANVAS) -> bool:
    return canvas.plot_min < x < canvas.plot_max and canvas.plot_min < y < canvas.plot_max


def test_axis_endpoints() -> None:
    c = DEFAULT_CANVAS
    assert layout.testability_to_x(1) == c.inner_min
    assert layout.testability_to_x(10) == c.inner_max
    assert risk_to_y(1) == c.inner_max
    assert risk_to_y(10) == c.inner_min


def test_axis_is_linear_and_oriented() -> None:
    xs = [layout.testability_to_x(t) for t in range(1, 11)]
    ys = [risk_to_y(r) for r in range(1, 11)]
    assert xs == sorted(xs)
    assert ys == sorted(ys, reverse=True)
    steps = {round(b - a, 9) for a, b in zip(xs, xs[1:])}
    assert len(steps) == 1


def test_out_of_range_scores_are_clamped() -> None:
    assert layout.testability_to_x(-3) == layout.testability_to_x(1)
    assert layout.testability_to_x(42) == layout.testability_to_x(10)
    assert risk_to_y(float("nan")) == risk_to_y(1)
    assert risk_to_y("not a number") == risk_to_y(1)


def test_jitter_is_stable_and_bounded() -> None:
    for n in range(200):
        dx, dy = jitter_for(f"assumption-{n}")
        assert (dx, dy) == jitter_for(f"assumption-{n}")
        assert -DEFAULT_CANVAS.jitter <= dx <= DEFAULT_CANVAS.jitter
        assert -DEFAULT_CANVAS.jitter <= dy <= DEFAULT_CANVAS.jitter


def test_jitter_spreads_identical_scores() -> None:
    items = [_assumption(f"assumption-{n}", 8, 8) for n in range(1, 9)]
    points = layout_points(items)
    assert len({(p.x, p.y) for p in points}) > 1


def test_zero_jitter() -> None:
    assert jitter_for("anything", CanvasConfig(jitter=0)) == (0, 0)


def test_place_is_deterministic() -> None:
    item = _assumption("assumption-3", 7, 4)
    assert place(item, 2) == place(item, 2)


def test_layout_matches_single_placement_and_ignores_order() -> None:
    items = [_assumption(f"assumption-{n}", n % 10 + 1, (n * 3) % 10 + 1) for n in range(8)]
    forward = {p.id: (p.x, p.y) for p in layout_points(items)}
    backward = {p.id: (p.x, p.y) for p in layout_points(list(reversed(items)))}
    assert forward.keys() == backward.keys()
    for item_id, (x, y) in forward.items():
        assert backward[item_id] == pytest.approx((x, y))
    for i, item in enumerate(items):
        single = place(item, i)
        batch = layout_points(items)[i]
        assert (batch.x, batch.y) == pytest.approx((single.x, single.y))
        assert batch.label == single.label


def test_all_points_strictly_inside_plot() -> None:
    ids = [f"assumption-{n}" for n in range(1, 41)]
    for risk in range(1, 11):
        for testability in range(1, 11):
            for item_id in ids:
                p = place(_assumption(item_id, risk, testability))
                assert _strictly_inside(p.x, p.y), (risk, testability, item_id)


def test_bounds_hold_on_custom_canvas() -> None:
    canvas = CanvasConfig(size=200, margin=20, inset=4, jitter=30)
    items = [_assumption(f"a{n}", 10, 10) for n in range(30)] + [_assumption(f"b{n}", 1, 1) for n in range(30)]
    for p in layout_points(items, canvas):
        assert _strictly_inside(p.x, p.y, canvas)


def test_clamp_point() -> None:
    c = DEFAULT_CANVAS
    assert clamp_point(-100, 1000) == (c.inner_min, c.inner_max)
    assert clamp_point(200, 200) == (200, 200)


def test_canvas_rejects_zero_inset() -> None:
    with pytest.raises(ValueError):
        CanvasConfig(inset=0)


def test_label_presets_round_robin() -> None:
    assert [label_placement(i) for i in range(8)] == list(LABEL_PRESETS) * 2
    assert LABEL_PRESETS[0].anchor == "start"
    assert LABEL_PRESETS[1].anchor == "end"


def test_label_box_side_follows_anchor() -> None:
    items = [_assumption(f"assumption-{n}", 5, 5) for n in range(2)]
    start, end = layout_points(items)
    assert label_box(start).x == pytest.approx(start.x + 12)
    assert label_box(end).x == pytest.approx(end.x - 12 - DEFAULT_CANVAS.label_width)


def test_truncate_label() -> None:
    assert truncate_label("Short") == "Short"
    assert truncate_label("Users will pay for premium tiers") == "Users will pay ..."


def _tooltip_inside(left: float, top: float) -> bool:
    c = DEFAULT_CANVAS
    return 0 <= left and left + c.tooltip_width <= c.size and 0 <= top and top + c.tooltip_height <= c.size


def test_tooltip_defaults_above_point() -> None:
    left, top = tooltip_position(200, 300)
    assert left == pytest.approx(200 - DEFAULT_CANVAS.tooltip_width / 2)
    assert top + DEFAULT_CANVAS.tooltip_height < 300


def test_tooltip_flips_below_near_top() -> None:
    left, top = tooltip_position(200, 70)
    assert top > 70


def test_tooltip_flips_horizontally_near_sides() -> None:
    left, _ = tooltip_position(60, 300)
    assert left > 60
    left, _ = tooltip_position(340, 300)
    assert left + DEFAULT_CANVAS.tooltip_width < 340


def test_tooltip_always_on_canvas() -> None:
    for x in range(0, 401, 20):
        for y in range(0, 401, 20):
            assert _tooltip_inside(*tooltip_position(x, y)), (x, y)


def test_priority_box_is_upper_right() -> None:
    c = DEFAULT_CANVAS
    box = priority_box()
    assert box.x == pytest.approx(c.size / 2)
    assert box.y == c.plot_min
    assert box.x + box.width == pytest.approx(c.plot_max)
    assert box.y + box.height == pytest.approx(c.size / 2)


def test_quadrant_dividers_cross_at_center() -> None:
    vertical, horizontal = quadrant_dividers()
    assert vertical[0] == pytest.approx(200)
    assert horizontal[1] == pytest.approx(200)
