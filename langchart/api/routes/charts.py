from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import Response

from langchart.api.schemas.chart import ChartOptions
from langchart.core.errors import RemoteQueryError
from langchart.core.errors import UserNotFoundError
from langchart.services.chart_service import build_chart
from langchart.settings import Settings
from langchart.settings import get_settings


router = APIRouter()

SVG_MEDIA_TYPE = "image/svg+xml"
GITHUB_LOGIN_PATTERN = r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,38})$"


@router.get("/")
async def root() -> dict[str, str]:
    """Return a basic service greeting."""

    return {"message": "Hello World"}


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Report that the service process is up."""

    return {"status": "ok"}


@router.get("/chart", response_class=Response)
def get_language_chart(
    username: str = Query(min_length=1, max_length=39, pattern=GITHUB_LOGIN_PATTERN),
    layout: str = Query(default="compact"),
    theme: str = Query(default="light"),
    max_items: int | None = Query(default=None, alias="maxItems"),
    streak: bool = Query(default=True),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Render the language usage chart of a GitHub user as SVG."""

    requested_items = settings.default_max_items if max_items is None else max_items
    options = ChartOptions(
        layout=layout,
        theme=theme,
        max_items=min(requested_items, settings.max_items_limit),
        streak=streak,
    )

    try:
        svg = build_chart(username.strip(), options, settings)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail="user not found") from exc
    except RemoteQueryError as exc:
        raise HTTPException(
            status_code=502, detail="GitHub API request failed"
        ) from exc

    return Response(content=svg, media_type=SVG_MEDIA_TYPE)
