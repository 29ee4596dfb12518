from collections.abc import Iterable

from langchart.models import RawLanguageEdge


def aggregate_usage(edges: Iterable[RawLanguageEdge]) -> dict[str, int]:
    """Sum language bytes across all repositories."""

    totals: dict[str, int] = {}
    for edge in edges:
        if edge.size < 0:
            raise ValueError(f"negative byte size for {edge.language}")
        totals[edge.language] = totals.get(edge.language, 0) + edge.size
    return totals
