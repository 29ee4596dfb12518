from collections.abc import Callable
from collections.abc import Sequence
from enum import StrEnum

from langchart.models import NormalizedEntry
from langchart.models import RenderRequest
from langchart.rendering.primitives import arc_path
from langchart.rendering.primitives import dynamic_height
from langchart.rendering.primitives import empty_state
from langchart.rendering.primitives import fit_row_spacing
from langchart.rendering.primitives import fmt
from langchart.rendering.primitives import legend
from langchart.rendering.primitives import responsive_svg
from langchart.rendering.primitives import streak_footer
from langchart.rendering.primitives import sweep_angles
from langchart.rendering.primitives import text
from langchart.rendering.primitives import title
from langchart.rendering.primitives import wedge_path
from langchart.rendering.style import DEFAULT_STYLE
from langchart.rendering.style import ChartStyle
from langchart.rendering.style import LayoutSize
from langchart.rendering.style import ThemeColors
from langchart.services.normalizer import normalize_usage


class Layout(StrEnum):
    COMPACT = "compact"
    DONUT = "donut"
    DONUT_VERTICAL = "donut-vertical"
    PIE = "pie"
    HIDDEN = "hidden"

    @classmethod
    def parse(cls, value: str | None) -> "Layout":
        """Map a query value to a layout, treating unknown values as compact."""

        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.COMPACT


Renderer = Callable[..., str]


def _frame(
    layout: Layout,
    count: int,
    offset: float,
    spacing: float,
    style: ChartStyle,
) -> tuple[int, int, float]:
    """Return clamped `(width, height, row_spacing)` for `count` rows."""

    size: LayoutSize = style.sizes[layout]
    width = min(size.width, size.max_width)
    row_spacing = fit_row_spacing(
        count, spacing, offset, style.bottom_padding, size.max_height
    )
    height = dynamic_height(
        count,
        row_spacing,
        offset,
        style.bottom_padding,
        size.min_height,
        size.max_height,
    )
    return width, height, row_spacing


def _empty_chart(layout: Layout, colors: ThemeColors, style: ChartStyle) -> str:
    size = style.sizes[layout]
    width = min(size.width, size.max_width)
    height = min(size.min_height, size.max_height)
    return responsive_svg(
        width, height, colors.background, [empty_state(width, height, colors, style)]
    )


def render_compact(
    entries: Sequence[NormalizedEntry],
    theme: str | None = None,
    streak: int | None = None,
    style: ChartStyle = DEFAULT_STYLE,
) -> str:
    """Horizontal bars scaled against the largest entry."""

    colors = style.theme_colors(theme)
    if not entries:
        return _empty_chart(Layout.COMPACT, colors, style)

    width, height, spacing = _frame(
        Layout.COMPACT, len(entries), style.header_height, style.item_spacing, style
    )
    max_bytes = max(entry.bytes for entry in entries) or 1
    elements = [title(colors, style)]
    for index, entry in enumerate(entries):
        row_y = style.header_height + index * spacing
        bar_width = entry.bytes / max_bytes * style.bar_max_width
        baseline = row_y + style.bar_height - 3
        elements.append(
            text(style.margin, baseline, entry.label, colors.text, style.font_size_label, style)
        )
        elements.append(
            f'<rect x="{style.bar_x}" y="{fmt(row_y)}" width="{fmt(bar_width)}" '
            f'height="{style.bar_height}" rx="{style.bar_radius}" ry="{style.bar_radius}" '
            f'fill="{entry.color}" />'
        )
        elements.append(
            text(
                style.bar_x + bar_width + 8,
                baseline,
                f"{entry.percentage}%",
                colors.text,
                style.font_size_percent,
                style,
            )
        )
    elements.extend(streak_footer(width, height, streak, colors, style))
    return responsive_svg(width, height, colors.background, elements)


def _ring(
    entries: Sequence[NormalizedEntry], cx: float, cy: float, style: ChartStyle
) -> list[str]:
    return [
        f'<path d="{arc_path(cx, cy, style.donut_radius, start, end)}" '
        f'stroke="{entry.color}" stroke-width="{style.donut_stroke_width}" fill="none" />'
        for entry, (start, end) in zip(entries, sweep_angles(entries))
    ]


def render_donut(
    entries: Sequence[NormalizedEntry],
    theme: str | None = None,
    streak: int | None = None,
    style: ChartStyle = DEFAULT_STYLE,
) -> str:
    """Donut ring on the left with the legend beside it."""

    colors = style.theme_colors(theme)
    if not entries:
        return _empty_chart(Layout.DONUT, colors, style)

    width, height, spacing = _frame(
        Layout.DONUT, len(entries), style.header_height, style.legend_spacing, style
    )
    ring_radius = style.donut_radius + style.donut_stroke_width / 2
    cx = style.margin + ring_radius
    cy = style.header_height + ring_radius
    elements = [title(colors, style)]
    elements.extend(_ring(entries, cx, cy, style))
    elements.extend(
        legend(entries, style.legend_x, style.header_height + spacing / 2, spacing, colors, style)
    )
    elements.extend(streak_footer(width, height, streak, colors, style))
    return responsive_svg(width, height, colors.background, elements)


def render_donut_vertical(
    entries: Sequence[NormalizedEntry],
    theme: str | None = None,
    streak: int | None = None,
    style: ChartStyle = DEFAULT_STYLE,
) -> str:
    """Donut ring centered on top with the legend below it."""

    colors = style.theme_colors(theme)
    if not entries:
        return _empty_chart(Layout.DONUT_VERTICAL, colors, style)

    ring_radius = style.donut_radius + style.donut_stroke_width / 2
    legend_top = style.header_height + ring_radius * 2 + style.margin
    width, height, spacing = _frame(
        Layout.DONUT_VERTICAL, len(entries), legend_top, style.legend_spacing, style
    )
    cx = width / 2
    cy = style.header_height + ring_radius
    elements = [title(colors, style)]
    elements.extend(_ring(entries, cx, cy, style))
    elements.extend(
        legend(entries, style.margin * 2, legend_top + spacing / 2, spacing, colors, style)
    )
    elements.extend(streak_footer(width, height, streak, colors, style))
    return responsive_svg(width, height, colors.background, elements)


def render_pie(
    entries: Sequence[NormalizedEntry],
    theme: str | None = None,
    streak: int | None = None,
    style: ChartStyle = DEFAULT_STYLE,
) -> str:
    """Filled wedges from the center with the legend beside the circle."""

    colors = style.theme_colors(theme)
    if not entries:
        return _empty_chart(Layout.PIE, colors, style)

    width, height, spacing = _frame(
        Layout.PIE, len(entries), style.header_height, style.legend_spacing, style
    )
    cx = style.margin + style.pie_radius
    cy = style.header_height + style.pie_radius
    elements = [title(colors, style)]
    for entry, (start, end) in zip(entries, sweep_angles(entries)):
        elements.append(
            f'<path d="{wedge_path(cx, cy, style.pie_radius, start, end)}" '
            f'fill="{entry.color}" />'
        )
    elements.extend(
        legend(entries, style.legend_x, style.header_height + spacing / 2, spacing, colors, style)
    )
    elements.extend(streak_footer(width, height, streak, colors, style))
    return responsive_svg(width, height, colors.background, elements)


def render_hidden(
    entries: Sequence[NormalizedEntry],
    theme: str | None = None,
    streak: int | None = None,
    style: ChartStyle = DEFAULT_STYLE,
) -> str:
    """Bulleted text lines only."""

    colors = style.theme_colors(theme)
    if not entries:
        return _empty_chart(Layout.HIDDEN, colors, style)

    width, height, spacing = _frame(
        Layout.HIDDEN, len(entries), style.header_height, style.legend_spacing, style
    )
    elements = [title(colors, style)]
    for index, entry in enumerate(entries):
        elements.append(
            text(
                style.margin,
                style.header_height + index * spacing + style.font_size_label,
                f"• {entry.label} ({entry.percentage}%)",
                colors.text,
                style.font_size_label,
                style,
            )
        )
    elements.extend(streak_footer(width, height, streak, colors, style))
    return responsive_svg(width, height, colors.background, elements)


RENDERERS: dict[Layout, Renderer] = {
    Layout.COMPACT: render_compact,
    Layout.DONUT: render_donut,
    Layout.DONUT_VERTICAL: render_donut_vertical,
    Layout.PIE: render_pie,
    Layout.HIDDEN: render_hidden,
}


def get_renderer(layout: str | Layout | None) -> Renderer:
    resolved = layout if isinstance(layout, Layout) else Layout.parse(layout)
    return RENDERERS[resolved]


def render_chart(request: RenderRequest, style: ChartStyle = DEFAULT_STYLE) -> str:
    """Normalize the request's totals and render them with its layout."""

    entries = normalize_usage(
        request.totals,
        request.max_items,
        colors=style.language_colors,
        fallback_color=style.fallback_color,
    )
    renderer = get_renderer(request.layout)
    return renderer(entries, request.theme, request.streak, style)
