from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from datetime import date


@dataclass(frozen=True)
class RawLanguageEdge:
    """Bytes of one language observed in one repository."""

    language: str
    size: int
    repository: str | None = None


@dataclass(frozen=True)
class ContributionDay:
    date: date
    count: int


@dataclass(frozen=True)
class NormalizedEntry:
    """Ranked, color-assigned language share ready for rendering."""

    label: str
    bytes: int
    fraction: float
    percentage: str
    color: str


@dataclass(frozen=True)
class RenderRequest:
    """Everything one layout needs to produce a chart document."""

    totals: Mapping[str, int] = field(default_factory=dict)
    layout: str = "compact"
    theme: str = "light"
    streak: int | None = None
    max_items: int | None = None
