from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from enum import StrEnum
from types import MappingProxyType


FALLBACK_COLOR = "#cccccc"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"
    BLUE = "blue"
    SOLARIZED = "solarized"

    @classmethod
    def parse(cls, value: str | None) -> "Theme":
        """Map a query value to a theme, treating unknown values as light."""

        normalized = (value or "").strip().lower()
        if normalized == "default":
            return cls.LIGHT
        try:
            return cls(normalized)
        except ValueError:
            return cls.LIGHT


@dataclass(frozen=True)
class ThemeColors:
    background: str
    text: str


@dataclass(frozen=True)
class LayoutSize:
    """Base width and height bounds of one layout, in SVG user units."""

    width: int
    min_height: int
    max_width: int
    max_height: int


LANGUAGE_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "JavaScript": "#f1e05a",
        "TypeScript": "#3178c6",
        "HTML": "#e34c26",
        "CSS": "#563d7c",
        "SCSS": "#c6538c",
        "Python": "#3572A5",
        "Java": "#b07219",
        "C": "#555555",
        "C++": "#f34b7d",
        "C#": "#178600",
        "Go": "#00ADD8",
        "PHP": "#4F5D95",
        "Ruby": "#701516",
        "Swift": "#ffac45",
        "Kotlin": "#A97BFF",
        "Dart": "#00B4AB",
        "Rust": "#dea584",
        "R": "#198CE7",
        "Scala": "#c22d40",
        "Shell": "#89e051",
        "Objective-C": "#438eff",
        "Perl": "#0298c3",
        "Lua": "#000080",
        "Haskell": "#5e5086",
        "Elixir": "#4e2a8e",
        "Clojure": "#db5855",
        "Groovy": "#4298b8",
        "CoffeeScript": "#244776",
        "Erlang": "#B83998",
        "OCaml": "#3be133",
        "PowerShell": "#012456",
        "Vim Script": "#199f4b",
        "Makefile": "#427819",
        "Dockerfile": "#384d54",
        "Jupyter Notebook": "#DA5B0B",
        "Vue": "#41b883",
        "Other": "#8b949e",
    }
)

THEMES: Mapping[Theme, ThemeColors] = MappingProxyType(
    {
        Theme.LIGHT: ThemeColors(background="#ffffff", text="#333333"),
        Theme.DARK: ThemeColors(background="#0d1117", text="#c9d1d9"),
        Theme.BLUE: ThemeColors(background="#e0f7fa", text="#006064"),
        Theme.SOLARIZED: ThemeColors(background="#fdf6e3", text="#657b83"),
    }
)


@dataclass(frozen=True)
class ChartStyle:
    """Immutable visual configuration shared by every layout."""

    language_colors: Mapping[str, str] = field(default_factory=lambda: LANGUAGE_COLORS)
    fallback_color: str = FALLBACK_COLOR
    themes: Mapping[Theme, ThemeColors] = field(default_factory=lambda: THEMES)
    title: str = "Most Used Languages"
    empty_message: str = "No languages found"
    font_family: str = "'Segoe UI', 'Roboto', 'Arial', 'Liberation Sans', 'DejaVu Sans', sans-serif"
    font_size_header: int = 22
    font_size_label: int = 15
    font_size_percent: int = 13
    font_size_streak: int = 13
    font_size_empty: int = 16
    margin: int = 20
    header_height: int = 70
    bottom_padding: int = 36
    item_spacing: int = 36
    legend_spacing: int = 24
    legend_marker_radius: int = 6
    bar_height: int = 16
    bar_radius: int = 5
    bar_x: int = 170
    bar_max_width: int = 250
    donut_radius: int = 90
    donut_stroke_width: int = 28
    pie_radius: int = 110
    legend_x: int = 300
    sizes: Mapping[str, LayoutSize] = field(
        default_factory=lambda: MappingProxyType(
            {
                "compact": LayoutSize(width=500, min_height=160, max_width=540, max_height=640),
                "donut": LayoutSize(width=540, min_height=314, max_width=540, max_height=420),
                "donut-vertical": LayoutSize(
                    width=400, min_height=360, max_width=540, max_height=720
                ),
                "pie": LayoutSize(width=540, min_height=326, max_width=540, max_height=420),
                "hidden": LayoutSize(width=500, min_height=160, max_width=540, max_height=640),
            }
        )
    )

    def theme_colors(self, theme: str | Theme | None) -> ThemeColors:
        """Resolve a theme name to its colors, falling back to the light theme."""

        resolved = theme if isinstance(theme, Theme) else Theme.parse(theme)
        return self.themes.get(resolved, self.themes[Theme.LIGHT])


DEFAULT_STYLE = ChartStyle()
