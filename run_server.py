import uvicorn

from app.config import Settings
from utils.logging_utils import get_tagged_logger, setup_logging

logger = get_tagged_logger(__name__, tag="server")


if __name__ == "__main__":
    settings = Settings()
    setup_logging(level=settings.log_level, job_name="storm_tracker_wx")
    logger.info(f"{settings.app_name} running on http://localhost:{settings.port}")

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_config=None,
    )
