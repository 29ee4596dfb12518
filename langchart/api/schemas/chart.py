from pydantic import BaseModel
from pydantic import Field
from pydantic import field_validator

from langchart.rendering.layouts import Layout
from langchart.rendering.style import Theme
from langchart.services.normalizer import DEFAULT_MAX_ITEMS
from langchart.services.normalizer import MAX_ITEMS_LIMIT


class ChartOptions(BaseModel):
    """Presentation options parsed from the chart query string.

    Unknown layouts and themes fall back to their defaults instead of
    failing, and the item cap is clamped into range.
    """

    layout: Layout = Layout.COMPACT
    theme: Theme = Theme.LIGHT
    max_items: int = Field(default=DEFAULT_MAX_ITEMS)
    streak: bool = True

    @field_validator("layout", mode="before")
    @classmethod
    def parse_layout(cls, value: object) -> Layout:
        return value if isinstance(value, Layout) else Layout.parse(str(value))

    @field_validator("theme", mode="before")
    @classmethod
    def parse_theme(cls, value: object) -> Theme:
        return value if isinstance(value, Theme) else Theme.parse(str(value))

    @field_validator("max_items")
    @classmethod
    def clamp_max_items(cls, value: int) -> int:
        return max(1, min(value, MAX_ITEMS_LIMIT))
