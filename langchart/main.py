from fastapi import FastAPI

from langchart.api.routes.charts import router
from langchart.core.middleware import ChartRateLimitMiddleware
from langchart.core.observability import configure_logging
from langchart.core.observability import init_sentry
from langchart.settings import Settings


def create_app() -> FastAPI:
    """Build the chart service with settings read from the environment."""

    settings = Settings()
    configure_logging(settings.log_level)
    init_sentry(settings)

    app = FastAPI(title="langchart")
    app.add_middleware(
        ChartRateLimitMiddleware,
        requests_per_window=settings.rate_limit_per_minute,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.include_router(router)
    return app


app = create_app()
