import logging
from collections.abc import Mapping
from datetime import date
from datetime import timedelta
from typing import Any

import httpx

from langchart.core.errors import RemoteQueryError
from langchart.core.errors import UserNotFoundError
from langchart.models import ContributionDay
from langchart.models import RawLanguageEdge

logger = logging.getLogger(__name__)

USER_AGENT = "langchart"

REPOSITORY_LANGUAGES_QUERY = """
query($login: String!, $after: String) {
  user(login: $login) {
    repositories(
      first: 100
      after: $after
      isFork: false
      ownerAffiliations: [OWNER, COLLABORATOR]
    ) {
      pageInfo {
        hasNextPage
        endCursor
      }
      nodes {
        name
        languages(first: 100, orderBy: {field: SIZE, direction: DESC}) {
          edges {
            size
            node {
              name
            }
          }
        }
      }
    }
  }
}
"""

CONTRIBUTION_CALENDAR_QUERY = """
query($login: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $login) {
    contributionsCollection(from: $from, to: $to) {
      contributionCalendar {
        weeks {
          contributionDays {
            date
            contributionCount
          }
        }
      }
    }
  }
}
"""


def _headers(token: str | None) -> dict[str, str]:
    headers = {
        "Accept": "application/vnd.github+json",
        "User-Agent": USER_AGENT,
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _post_graphql(
    graphql_url: str,
    token: str,
    query: str,
    variables: Mapping[str, Any],
    timeout: float,
) -> Mapping[str, Any]:
    response = httpx.post(
        graphql_url,
        json={"query": query, "variables": dict(variables)},
        headers=_headers(token),
        timeout=timeout,
    )
    response.raise_for_status()

    payload: Any = response.json()
    if not isinstance(payload, Mapping):
        raise RemoteQueryError("GitHub GraphQL response is invalid")
    return payload


def _resolve_user(payload: Mapping[str, Any], username: str) -> Mapping[str, Any]:
    """Return the `user` object of a GraphQL payload or raise a domain error.

    GraphQL reports a missing login as a `NOT_FOUND` error next to
    `"user": null`; any other error without usable data is a query failure.
    Errors accompanying a resolved user are partial failures and only logged.
    """

    errors = payload.get("errors") or []
    data = payload.get("data")
    user = data.get("user") if isinstance(data, Mapping) else None

    if not isinstance(user, Mapping):
        if any(
            isinstance(error, Mapping) and error.get("type") == "NOT_FOUND"
            for error in errors
        ):
            raise UserNotFoundError(username)
        if errors:
            messages = "; ".join(
                str(error.get("message", "unknown error"))
                for error in errors
                if isinstance(error, Mapping)
            )
            raise RemoteQueryError(f"GitHub GraphQL returned errors: {messages}")
        raise UserNotFoundError(username)

    if errors:
        logger.warning(
            "GitHub GraphQL returned %d partial error(s) for %s",
            len(errors),
            username,
        )
    return user


def _edges_from_repository(node: Mapping[str, Any]) -> list[RawLanguageEdge]:
    repository = node.get("name") if isinstance(node.get("name"), str) else None
    languages = node.get("languages")
    if not isinstance(languages, Mapping):
        logger.warning("Skipping repository %s without language data", repository)
        return []

    edges: list[RawLanguageEdge] = []
    for edge in languages.get("edges") or []:
        if not isinstance(edge, Mapping):
            continue
        language = edge.get("node")
        name = language.get("name") if isinstance(language, Mapping) else None
        size = edge.get("size")
        if isinstance(name, str) and isinstance(size, int) and size >= 0:
            edges.append(RawLanguageEdge(language=name, size=size, repository=repository))
    return edges


def fetch_graphql_language_edges(
    username: str,
    token: str,
    graphql_url: str,
    timeout: float = 20.0,
) -> list[RawLanguageEdge]:
    """Collect language edges of every non-fork repository, page by page."""

    edges: list[RawLanguageEdge] = []
    cursor: str | None = None
    page = 0

    while True:
        payload = _post_graphql(
            graphql_url,
            token,
            REPOSITORY_LANGUAGES_QUERY,
            {"login": username, "after": cursor},
            timeout,
        )
        user = _resolve_user(payload, username)

        repositories = user.get("repositories")
        if not isinstance(repositories, Mapping):
            raise RemoteQueryError("GitHub repositories connection is missing")

        for node in repositories.get("nodes") or []:
            if isinstance(node, Mapping):
                edges.extend(_edges_from_repository(node))

        page += 1
        page_info = repositories.get("pageInfo")
        if not isinstance(page_info, Mapping) or not page_info.get("hasNextPage"):
            break

        cursor = page_info.get("endCursor")
        if not isinstance(cursor, str) or not cursor:
            raise RemoteQueryError("GitHub pageInfo reported more pages without a cursor")
        logger.debug("Fetching repository page %d for %s", page + 1, username)

    logger.debug(
        "Collected %d language edges from %d page(s) for %s",
        len(edges),
        page,
        username,
    )
    return edges


def _fetch_repository_languages(
    languages_url: str,
    repository: str,
    token: str | None,
    timeout: float,
) -> list[RawLanguageEdge]:
    response = httpx.get(languages_url, headers=_headers(token), timeout=timeout)
    response.raise_for_status()

    payload: Any = response.json()
    if not isinstance(payload, Mapping):
        raise ValueError("GitHub languages response is invalid")

    return [
        RawLanguageEdge(language=name, size=size, repository=repository)
        for name, size in payload.items()
        if isinstance(name, str) and isinstance(size, int) and size >= 0
    ]


def fetch_rest_language_edges(
    username: str,
    api_base_url: str,
    token: str | None = None,
    timeout: float = 20.0,
) -> list[RawLanguageEdge]:
    """Collect language edges of a user's public, owned, non-fork repositories.

    Follows `Link: rel="next"` continuation across repository pages. A
    failure while reading one repository's languages skips that repository.
    """

    url: str | None = f"{api_base_url.rstrip('/')}/users/{username}/repos"
    params: dict[str, str | int] | None = {"type": "owner", "per_page": 100}
    edges: list[RawLanguageEdge] = []

    while url:
        response = httpx.get(url, params=params, headers=_headers(token), timeout=timeout)
        if response.status_code == 404:
            raise UserNotFoundError(username)
        response.raise_for_status()

        repositories: Any = response.json()
        if not isinstance(repositories, list):
            raise RemoteQueryError("GitHub repository list response is invalid")

        for repository in repositories:
            if not isinstance(repository, Mapping) or repository.get("fork"):
                continue
            name = str(repository.get("name", "unknown"))
            languages_url = repository.get("languages_url")
            if not isinstance(languages_url, str):
                continue
            try:
                edges.extend(
                    _fetch_repository_languages(languages_url, name, token, timeout)
                )
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Error fetching languages for repo %s: %s", name, exc)

        next_link = response.links.get("next")
        url = next_link.get("url") if next_link else None
        # The next link already carries the query string.
        params = None

    return edges


def fetch_language_edges(
    username: str,
    token: str | None,
    graphql_url: str,
    api_base_url: str,
    timeout: float = 20.0,
) -> list[RawLanguageEdge]:
    """Fetch language edges through GraphQL when a token is available, else REST."""

    if token:
        return fetch_graphql_language_edges(username, token, graphql_url, timeout)
    return fetch_rest_language_edges(username, api_base_url, None, timeout)


def fetch_contribution_days(
    username: str,
    token: str | None,
    graphql_url: str,
    timeout: float = 20.0,
    today: date | None = None,
) -> list[ContributionDay]:
    """Fetch one-year contribution days for a user from GitHub GraphQL API."""

    if not token:
        raise ValueError("GITHUB_TOKEN is required for GraphQL requests")

    to_day = today or date.today()
    from_day = to_day - timedelta(days=364)
    variables = {
        "login": username,
        "from": f"{from_day.isoformat()}T00:00:00Z",
        "to": f"{to_day.isoformat()}T23:59:59Z",
    }

    payload = _post_graphql(
        graphql_url, token, CONTRIBUTION_CALENDAR_QUERY, variables, timeout
    )
    user = _resolve_user(payload, username)

    collection = user.get("contributionsCollection")
    if not isinstance(collection, Mapping):
        raise ValueError("GitHub contributionsCollection is missing")

    calendar = collection.get("contributionCalendar")
    if not isinstance(calendar, Mapping):
        raise ValueError("GitHub contributionCalendar is missing")

    weeks = calendar.get("weeks")
    if not isinstance(weeks, list):
        raise ValueError("GitHub contribution weeks are missing")

    days: list[ContributionDay] = []
    for week in weeks:
        if not isinstance(week, Mapping):
            continue
        for item in week.get("contributionDays") or []:
            if not isinstance(item, Mapping):
                continue
            raw_date = item.get("date")
            raw_count = item.get("contributionCount")
            if not isinstance(raw_date, str) or not isinstance(raw_count, int):
                continue
            try:
                parsed_day = date.fromisoformat(raw_date)
            except ValueError:
                continue
            days.append(ContributionDay(date=parsed_day, count=max(0, raw_count)))

    return days
