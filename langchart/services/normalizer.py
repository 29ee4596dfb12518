from collections.abc import Mapping

from langchart.models import NormalizedEntry
from langchart.rendering.style import FALLBACK_COLOR
from langchart.rendering.style import LANGUAGE_COLORS

DEFAULT_MAX_ITEMS = 6
MAX_ITEMS_LIMIT = 15
OTHER_LABEL = "Other"


def clamp_max_items(
    requested: int | None,
    default: int = DEFAULT_MAX_ITEMS,
    limit: int = MAX_ITEMS_LIMIT,
) -> int:
    """Bound a caller-supplied item cap to `1..limit`."""

    if requested is None:
        requested = default
    return max(1, min(requested, limit))


def normalize_usage(
    totals: Mapping[str, int],
    max_items: int | None = DEFAULT_MAX_ITEMS,
    colors: Mapping[str, str] = LANGUAGE_COLORS,
    fallback_color: str = FALLBACK_COLOR,
    limit: int = MAX_ITEMS_LIMIT,
) -> list[NormalizedEntry]:
    """Rank language totals and fold everything past the cap into `Other`.

    Returns an empty list when there are no bytes at all. Ties keep the
    insertion order of `totals`; the `Other` entry, when present, is last.
    """

    total = sum(totals.values())
    if total <= 0:
        return []

    cap = clamp_max_items(max_items, limit=limit)
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    if len(ranked) > cap:
        folded = sum(size for _, size in ranked[cap:])
        ranked = ranked[:cap] + [(OTHER_LABEL, folded)]

    entries: list[NormalizedEntry] = []
    for label, size in ranked:
        fraction = size / total
        entries.append(
            NormalizedEntry(
                label=label,
                bytes=size,
                fraction=fraction,
                percentage=f"{fraction * 100:.1f}",
                color=colors.get(label, fallback_color),
            )
        )
    return entries
