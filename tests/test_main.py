import pytest
from fastapi.testclient import TestClient

from langchart.core.errors import RemoteQueryError
from langchart.core.errors import UserNotFoundError
from langchart.main import app
from langchart.settings import Settings
from langchart.settings import get_settings


client = TestClient(app)


@pytest.fixture
def chart_client() -> TestClient:
    def override_get_settings() -> Settings:
        return Settings(github_token="secret", max_items_limit=15)

    app.dependency_overrides[get_settings] = override_get_settings

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def test_read_root_returns_hello_world() -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Hello World"}


def test_health_live_returns_ok() -> None:
    response = client.get("/health/live")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_settings_reads_github_token_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_example")
    monkeypatch.setenv("MAX_ITEMS_LIMIT", "10")

    settings = Settings()

    assert settings.github_token == "ghp_example"
    assert settings.max_items_limit == 10


def test_chart_returns_svg_with_parsed_options(
    monkeypatch: pytest.MonkeyPatch, chart_client: TestClient
) -> None:
    calls: list[dict[str, object]] = []

    def fake_build_chart(username, options, settings) -> str:
        calls.append({"username": username, "options": options})
        return '<svg xmlns="http://www.w3.org/2000/svg"></svg>'

    monkeypatch.setattr(
        "langchart.api.routes.charts.build_chart", fake_build_chart
    )

    response = chart_client.get(
        "/chart",
        params={
            "username": "octocat",
            "layout": "donut-vertical",
            "theme": "solarized",
            "maxItems": 40,
            "streak": "false",
        },
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert response.text.startswith("<svg")
    options = calls[0]["options"]
    assert calls[0]["username"] == "octocat"
    assert options.layout == "donut-vertical"
    assert options.theme == "solarized"
    assert options.max_items == 15
    assert options.streak is False


def test_chart_defaults_unknown_layout_to_compact(
    monkeypatch: pytest.MonkeyPatch, chart_client: TestClient
) -> None:
    monkeypatch.setattr(
        "langchart.services.chart_service.fetch_language_edges",
        lambda **kwargs: [],
    )
    monkeypatch.setattr(
        "langchart.services.chart_service.fetch_contribution_days",
        lambda **kwargs: [],
    )

    response = chart_client.get("/chart?username=octocat&layout=spiral")

    assert response.status_code == 200
    assert 'width="500"' in response.text
    assert "No languages found" in response.text


def test_chart_returns_404_for_missing_user(
    monkeypatch: pytest.MonkeyPatch, chart_client: TestClient
) -> None:
    def fake_build_chart(username, options, settings) -> str:
        raise UserNotFoundError(username)

    monkeypatch.setattr(
        "langchart.api.routes.charts.build_chart", fake_build_chart
    )

    response = chart_client.get("/chart?username=ghost")

    assert response.status_code == 404
    assert response.json() == {"detail": "user not found"}


def test_chart_returns_502_when_github_fails(
    monkeypatch: pytest.MonkeyPatch, chart_client: TestClient
) -> None:
    def fake_build_chart(username, options, settings) -> str:
        raise RemoteQueryError("GitHub GraphQL returned errors")

    monkeypatch.setattr(
        "langchart.api.routes.charts.build_chart", fake_build_chart
    )

    response = chart_client.get("/chart?username=octocat")

    assert response.status_code == 502
    assert response.json() == {"detail": "GitHub API request failed"}


def test_chart_requires_username(chart_client: TestClient) -> None:
    response = chart_client.get("/chart")

    assert response.status_code == 422


@pytest.mark.parametrize("username", ["../orgs/x", "a?b=c", "-octocat", "octo cat"])
def test_chart_rejects_usernames_outside_github_login_format(
    monkeypatch: pytest.MonkeyPatch, chart_client: TestClient, username: str
) -> None:
    def unexpected_build_chart(username, options, settings) -> str:
        raise AssertionError("invalid login reached the chart pipeline")

    monkeypatch.setattr(
        "langchart.api.routes.charts.build_chart", unexpected_build_chart
    )

    response = chart_client.get("/chart", params={"username": username})

    assert response.status_code == 422
