import math
from collections.abc import Iterable
from collections.abc import Iterator
from collections.abc import Sequence
from html import escape

from langchart.models import NormalizedEntry
from langchart.rendering.style import ChartStyle
from langchart.rendering.style import ThemeColors

FULL_CIRCLE = 360.0
FULL_CIRCLE_EPSILON = 1e-6


def deg_to_rad(degrees: float) -> float:
    return degrees * math.pi / 180


def fmt(value: float) -> str:
    """Format a coordinate compactly, dropping float noise and trailing zeros."""

    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in {"-0", ""} else text


def polar_point(cx: float, cy: float, r: float, angle: float) -> tuple[float, float]:
    """Point on a circle; 0° is 3 o'clock and angles grow clockwise in SVG space."""

    radians = deg_to_rad(angle)
    return cx + r * math.cos(radians), cy + r * math.sin(radians)


def _is_full_circle(
    cx: float, cy: float, r: float, start_angle: float, end_angle: float
) -> bool:
    """Whether an arc closes on itself once its endpoints are formatted.

    A large sweep whose start and end print as the same point is drawn as a
    closed circle, since SVG skips arcs with coincident endpoints.
    """

    sweep = end_angle - start_angle
    if sweep >= FULL_CIRCLE - FULL_CIRCLE_EPSILON:
        return True
    if sweep <= 180:
        return False
    start_x, start_y = polar_point(cx, cy, r, start_angle)
    end_x, end_y = polar_point(cx, cy, r, end_angle)
    return (fmt(start_x), fmt(start_y)) == (fmt(end_x), fmt(end_y))


def _arc_command(r: float, sweep: float, x: float, y: float) -> str:
    large_arc = 1 if sweep > 180 else 0
    return f"A {fmt(r)} {fmt(r)} 0 {large_arc} 1 {fmt(x)} {fmt(y)}"


def arc_path(cx: float, cy: float, r: float, start_angle: float, end_angle: float) -> str:
    """Path data for a clockwise circular arc from `start_angle` to `end_angle`."""

    start_x, start_y = polar_point(cx, cy, r, start_angle)
    if _is_full_circle(cx, cy, r, start_angle, end_angle):
        mid_x, mid_y = polar_point(cx, cy, r, start_angle + 180)
        return " ".join(
            [
                f"M {fmt(start_x)} {fmt(start_y)}",
                _arc_command(r, 180, mid_x, mid_y),
                _arc_command(r, 180, start_x, start_y),
            ]
        )

    end_x, end_y = polar_point(cx, cy, r, end_angle)
    return " ".join(
        [
            f"M {fmt(start_x)} {fmt(start_y)}",
            _arc_command(r, end_angle - start_angle, end_x, end_y),
        ]
    )


def wedge_path(cx: float, cy: float, r: float, start_angle: float, end_angle: float) -> str:
    """Path data for a filled pie sector between two angles."""

    if _is_full_circle(cx, cy, r, start_angle, end_angle):
        return f"{arc_path(cx, cy, r, start_angle, end_angle)} Z"

    start_x, start_y = polar_point(cx, cy, r, start_angle)
    end_x, end_y = polar_point(cx, cy, r, end_angle)
    return " ".join(
        [
            f"M {fmt(cx)} {fmt(cy)}",
            f"L {fmt(start_x)} {fmt(start_y)}",
            _arc_command(r, end_angle - start_angle, end_x, end_y),
            "Z",
        ]
    )


def sweep_angles(entries: Iterable[NormalizedEntry]) -> Iterator[tuple[float, float]]:
    """Yield consecutive `(start, end)` angles; the last end is 360°."""

    start_angle = 0.0
    for entry in entries:
        end_angle = start_angle + entry.fraction * FULL_CIRCLE
        yield start_angle, end_angle
        start_angle = end_angle


def fit_row_spacing(
    count: int,
    preferred: float,
    offset: float,
    bottom_padding: float,
    max_height: float,
) -> float:
    """Shrink row spacing so `count` rows fit between `offset` and the bottom."""

    if count <= 0:
        return preferred
    available = max_height - offset - bottom_padding
    return max(0.0, min(preferred, available / count))


def dynamic_height(
    count: int,
    spacing: float,
    offset: float,
    bottom_padding: float,
    min_height: int,
    max_height: int,
) -> int:
    needed = math.ceil(offset + count * spacing + bottom_padding)
    return min(max(min_height, needed), max_height)


def responsive_svg(width: int, height: int, background: str, children: Sequence[str]) -> str:
    """Wrap chart elements in a root `<svg>` that scales to its container."""

    body = "\n".join(f"  {child}" for child in children)
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}" preserveAspectRatio="xMidYMid meet" '
        f'style="max-width: 100%; height: auto;">\n'
        f'  <rect width="100%" height="100%" fill="{background}" />\n'
        f"{body}\n"
        f"</svg>\n"
    )


def text(
    x: float,
    y: float,
    content: str,
    fill: str,
    font_size: int,
    style: ChartStyle,
    *,
    anchor: str = "start",
    weight: str = "normal",
) -> str:
    return (
        f'<text x="{fmt(x)}" y="{fmt(y)}" fill="{fill}" font-size="{font_size}" '
        f'font-family="{escape(style.font_family)}" font-weight="{weight}" '
        f'text-anchor="{anchor}">{escape(content)}</text>'
    )


def empty_state(width: int, height: int, colors: ThemeColors, style: ChartStyle) -> str:
    return (
        f'<text x="{fmt(width / 2)}" y="{fmt(height / 2)}" fill="{colors.text}" '
        f'font-size="{style.font_size_empty}" font-family="{escape(style.font_family)}" '
        f'text-anchor="middle" dominant-baseline="middle">{escape(style.empty_message)}</text>'
    )


def title(colors: ThemeColors, style: ChartStyle) -> str:
    return text(
        style.margin,
        style.margin + style.font_size_header,
        style.title,
        colors.text,
        style.font_size_header,
        style,
        weight="bold",
    )


def legend(
    entries: Sequence[NormalizedEntry],
    x: float,
    y: float,
    spacing: float,
    colors: ThemeColors,
    style: ChartStyle,
) -> list[str]:
    """One colored marker plus `label (pct%)` per entry, stacked from `y`."""

    elements: list[str] = []
    for index, entry in enumerate(entries):
        row_y = y + index * spacing
        elements.append(
            f'<circle cx="{fmt(x)}" cy="{fmt(row_y)}" '
            f'r="{style.legend_marker_radius}" fill="{entry.color}" />'
        )
        elements.append(
            text(
                x + style.legend_marker_radius * 2 + 4,
                row_y + style.font_size_percent / 3,
                f"{entry.label} ({entry.percentage}%)",
                colors.text,
                style.font_size_percent,
                style,
            )
        )
    return elements


def streak_footer(
    width: int,
    height: int,
    streak: int | None,
    colors: ThemeColors,
    style: ChartStyle,
) -> list[str]:
    """Bottom-right streak annotation, only for positive streaks."""

    if not streak or streak <= 0:
        return []
    unit = "day" if streak == 1 else "days"
    return [
        text(
            width - 10,
            height - 10,
            f"Activity Streak: {streak} {unit}",
            colors.text,
            style.font_size_streak,
            style,
            anchor="end",
        )
    ]
