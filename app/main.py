"""FastAPI application setup and static file serving for Storm Tracker WX."""

from typing import Optional

from fastapi import FastAPI

from .api import router as api_router
from .config import Settings
from .data_sources import ForecastDataSource, build_data_source
from .middleware import install_middleware
from .static import SinglePageStaticFiles
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="app/main")

JOB_NAME = "storm_tracker_wx"


def create_app(settings: Optional[Settings] = None,
               data_source: Optional[ForecastDataSource] = None) -> FastAPI:
    """Build the application from an explicit configuration value.

    ``data_source`` defaults to whatever ``settings.forecast_source`` selects;
    tests pass a fake instead.
    """
    settings = settings or Settings()
    setup_logging(level=settings.log_level, job_name=JOB_NAME)

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.data_source = data_source if data_source is not None else build_data_source(settings)

    install_middleware(app)

    # API routes first so the catch-all static mount never shadows them
    app.include_router(api_router, prefix="/api")

    app.mount(
        "/",
        SinglePageStaticFiles(
            directory=settings.static_dir,
            index_document=settings.index_document,
            cache_control=settings.cache_control,
        ),
        name="static",
    )

    logger.info(
        "Application configured",
        extra={"static_dir": str(settings.static_dir), "user_agent": settings.user_agent},
    )
    return app


app = create_app()
