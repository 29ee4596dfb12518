import logging
from concurrent.futures import Future
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

import httpx

from langchart.api.schemas.chart import ChartOptions
from langchart.core.errors import RemoteQueryError
from langchart.core.errors import StreakUnavailableError
from langchart.core.errors import UserNotFoundError
from langchart.github_api import fetch_contribution_days
from langchart.github_api import fetch_language_edges
from langchart.models import RenderRequest
from langchart.rendering.layouts import render_chart
from langchart.services.streak import calculate_streak
from langchart.services.usage import aggregate_usage
from langchart.settings import Settings

logger = logging.getLogger(__name__)


def get_language_usage(username: str, settings: Settings) -> dict[str, int]:
    """Fetch and sum language bytes across the user's repositories."""

    try:
        edges = fetch_language_edges(
            username=username,
            token=settings.github_token,
            graphql_url=settings.github_graphql_url,
            api_base_url=settings.github_api_base_url,
            timeout=settings.github_timeout_seconds,
        )
    except (UserNotFoundError, RemoteQueryError):
        raise
    except (httpx.HTTPError, ValueError) as exc:
        raise RemoteQueryError("GitHub API request failed") from exc

    return aggregate_usage(edges)


def get_activity_streak(username: str, settings: Settings) -> int:
    """Compute the current streak or raise `StreakUnavailableError`."""

    try:
        days = fetch_contribution_days(
            username=username,
            token=settings.github_token,
            graphql_url=settings.github_graphql_url,
            timeout=settings.github_timeout_seconds,
        )
    except (httpx.HTTPError, ValueError, UserNotFoundError, RemoteQueryError) as exc:
        raise StreakUnavailableError(str(exc)) from exc

    if not days:
        raise StreakUnavailableError("contribution calendar is empty")
    return calculate_streak(days)


def _await_streak(future: Future[int], username: str, timeout: float) -> int:
    try:
        try:
            return future.result(timeout=timeout)
        except FutureTimeoutError as exc:
            raise StreakUnavailableError("contribution calendar timed out") from exc
    except StreakUnavailableError as exc:
        logger.warning("Activity streak unavailable for %s: %s", username, exc)
        return 0


def build_chart(username: str, options: ChartOptions, settings: Settings) -> str:
    """Fetch a user's data and render the requested chart layout.

    The totals and calendar queries run side by side. Totals failures
    propagate; the streak waits at most `streak_wait_seconds` and degrades
    to no annotation on any failure.
    """

    executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="langchart")
    try:
        totals_future = executor.submit(get_language_usage, username, settings)
        streak_future = (
            executor.submit(get_activity_streak, username, settings)
            if options.streak
            else None
        )

        totals = totals_future.result()
        streak = (
            _await_streak(streak_future, username, settings.streak_wait_seconds)
            if streak_future is not None
            else None
        )
    finally:
        # A late calendar query is abandoned rather than awaited.
        executor.shutdown(wait=False, cancel_futures=True)

    request = RenderRequest(
        totals=totals,
        layout=options.layout,
        theme=options.theme,
        streak=streak,
        max_items=options.max_items,
    )
    logger.info(
        "Rendering %s chart for %s with %d languages",
        options.layout,
        username,
        len(totals),
    )
    return render_chart(request)
