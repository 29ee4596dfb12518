import math
import xml.etree.ElementTree as ET

import pytest

from langchart.models import RenderRequest
from langchart.rendering.layouts import RENDERERS
from langchart.rendering.layouts import Layout
from langchart.rendering.layouts import get_renderer
from langchart.rendering.layouts import render_chart
from langchart.rendering.layouts import render_compact
from langchart.rendering.layouts import render_hidden
from langchart.rendering.primitives import arc_path
from langchart.rendering.primitives import deg_to_rad
from langchart.rendering.primitives import sweep_angles
from langchart.rendering.primitives import wedge_path
from langchart.rendering.style import DEFAULT_STYLE
from langchart.rendering.style import Theme
from langchart.services.normalizer import normalize_usage


SVG = "{http://www.w3.org/2000/svg}"


def parse(document: str) -> ET.Element:
    return ET.fromstring(document)


def texts(root: ET.Element) -> list[str]:
    return [(element.text or "").strip() for element in root.iter(f"{SVG}text")]


def test_deg_to_rad_converts_half_turn() -> None:
    assert math.isclose(deg_to_rad(180), math.pi)


def test_arc_path_uses_small_arc_for_quarter_turn() -> None:
    assert arc_path(0, 0, 10, 0, 90) == "M 10 0 A 10 10 0 0 1 0 10"


def test_arc_path_uses_large_arc_past_half_turn() -> None:
    assert arc_path(0, 0, 10, 0, 270) == "M 10 0 A 10 10 0 1 1 0 -10"


def test_arc_path_draws_full_circle_as_two_halves() -> None:
    assert arc_path(0, 0, 10, 0, 360) == (
        "M 10 0 A 10 10 0 0 1 -10 0 A 10 10 0 0 1 10 0"
    )


def test_wedge_path_closes_back_to_center() -> None:
    assert wedge_path(50, 50, 10, 0, 90) == "M 50 50 L 60 50 A 10 10 0 0 1 50 60 Z"


def test_sweep_angles_tile_full_circle() -> None:
    entries = normalize_usage({f"Lang{index}": index + 1 for index in range(30)}, 15)

    angles = list(sweep_angles(entries))

    assert angles[0][0] == 0.0
    assert all(
        math.isclose(previous[1], current[0])
        for previous, current in zip(angles, angles[1:])
    )
    assert math.isclose(angles[-1][1], 360.0)


def test_layout_parse_defaults_to_compact() -> None:
    assert Layout.parse("donut-vertical") is Layout.DONUT_VERTICAL
    assert Layout.parse("PIE") is Layout.PIE
    assert Layout.parse("spiral") is Layout.COMPACT
    assert Layout.parse(None) is Layout.COMPACT
    assert get_renderer("nope") is render_compact


def test_theme_resolution_falls_back_to_light() -> None:
    assert DEFAULT_STYLE.theme_colors("dark").background == "#0d1117"
    assert DEFAULT_STYLE.theme_colors("default") == DEFAULT_STYLE.theme_colors("light")
    assert DEFAULT_STYLE.theme_colors("neon") == DEFAULT_STYLE.themes[Theme.LIGHT]


@pytest.mark.parametrize("layout", list(Layout))
def test_every_layout_renders_placeholder_without_data(layout: Layout) -> None:
    root = parse(RENDERERS[layout]([], "solarized", 4))

    assert texts(root) == ["No languages found"]
    assert list(root.iter(f"{SVG}path")) == []
    assert list(root.iter(f"{SVG}rect"))[0].get("fill") == "#fdf6e3"


@pytest.mark.parametrize("layout", list(Layout))
def test_every_layout_clamps_dimensions(layout: Layout) -> None:
    totals = {f"Lang{index}": 5000 - index for index in range(50)}
    entries = normalize_usage(totals, max_items=15)
    size = DEFAULT_STYLE.sizes[layout]

    root = parse(RENDERERS[layout](entries, "light", 12))

    assert len(entries) == 16
    assert int(root.get("width")) <= size.max_width
    assert int(root.get("height")) <= size.max_height
    assert root.get("viewBox") == f"0 0 {root.get('width')} {root.get('height')}"
    assert root.get("preserveAspectRatio") == "xMidYMid meet"


@pytest.mark.parametrize("layout", list(Layout))
def test_height_grows_with_item_count(layout: Layout) -> None:
    few = normalize_usage({"A": 3, "B": 1}, 6)
    many = normalize_usage({f"L{index}": 100 - index for index in range(30)}, 15)

    few_height = int(parse(RENDERERS[layout](few)).get("height"))
    many_height = int(parse(RENDERERS[layout](many)).get("height"))

    assert few_height < many_height


def test_pie_chart_end_to_end_with_dark_theme_and_streak() -> None:
    request = RenderRequest(
        totals={"JavaScript": 800, "CSS": 200},
        layout="pie",
        theme="dark",
        streak=5,
    )

    root = parse(render_chart(request))

    wedges = list(root.iter(f"{SVG}path"))
    assert len(wedges) == 2
    assert [wedge.get("fill") for wedge in wedges] == ["#f1e05a", "#563d7c"]
    assert wedges[0].get("d").startswith("M 130 180 L 240 180 A 110 110 0 1 1")
    assert list(root.iter(f"{SVG}rect"))[0].get("fill") == "#0d1117"
    assert "Activity Streak: 5 days" in texts(root)
    assert "JavaScript (80.0%)" in texts(root)

    entries = normalize_usage(request.totals)
    assert math.isclose(sum(end - start for start, end in sweep_angles(entries)), 360.0)


def test_donut_draws_one_stroked_arc_per_entry() -> None:
    entries = normalize_usage({"Python": 5, "Go": 3, "C": 2})

    root = parse(RENDERERS[Layout.DONUT](entries, "blue"))

    arcs = list(root.iter(f"{SVG}path"))
    assert len(arcs) == 3
    assert all(arc.get("fill") == "none" for arc in arcs)
    assert len(list(root.iter(f"{SVG}circle"))) == 3


def test_single_language_donut_draws_closed_ring() -> None:
    entries = normalize_usage({"Rust": 10})

    root = parse(RENDERERS[Layout.DONUT_VERTICAL](entries))

    (arc,) = list(root.iter(f"{SVG}path"))
    assert arc.get("d").count("A ") == 2


def test_compact_bars_scale_against_largest_entry() -> None:
    entries = normalize_usage({"JavaScript": 800, "CSS": 200})

    root = parse(render_compact(entries, "light"))

    bars = list(root.iter(f"{SVG}rect"))[1:]
    assert [bar.get("width") for bar in bars] == ["250", "62.5"]
    assert "Activity Streak" not in " ".join(texts(root))


def test_hidden_layout_lists_text_only() -> None:
    entries = normalize_usage({"Python": 3, "Shell": 1})

    root = parse(render_hidden(entries, "dark", 1))

    assert list(root.iter(f"{SVG}path")) == []
    assert list(root.iter(f"{SVG}circle")) == []
    assert len(list(root.iter(f"{SVG}rect"))) == 1
    assert texts(root) == [
        "Most Used Languages",
        "• Python (75.0%)",
        "• Shell (25.0%)",
        "Activity Streak: 1 day",
    ]


def test_labels_are_escaped() -> None:
    entries = normalize_usage({"<script>&": 1})

    document = render_hidden(entries)

    assert "<script>" not in document
    assert "• <script>& (100.0%)" in texts(parse(document))


def arc_closes_or_moves(d: str) -> bool:
    """True when path data draws a closed circle or an arc between distinct points."""

    if d.count("A ") == 2:
        return True
    tokens = d.replace("Z", "").split()
    anchor = tokens.index("L") if "L" in tokens else tokens.index("M")
    return tokens[anchor + 1 : anchor + 3] != tokens[-2:]


@pytest.mark.parametrize("layout", [Layout.DONUT, Layout.DONUT_VERTICAL, Layout.PIE])
def test_dominant_language_still_draws_visible_slice(layout: Layout) -> None:
    entries = normalize_usage({"JavaScript": 10_000_000, "Dockerfile": 50})

    root = parse(RENDERERS[layout](entries))

    dominant, sliver = [path.get("d") for path in root.iter(f"{SVG}path")]
    assert arc_closes_or_moves(dominant)
    assert dominant.count("A ") == 2
    # A sliver far below one coordinate unit stays a small arc.
    assert " 0 0 1 " in sliver


def test_large_arc_with_distinct_endpoints_is_not_closed() -> None:
    d = arc_path(0, 0, 100, 0, 350)

    assert d.count("A ") == 1
    assert arc_closes_or_moves(d)
