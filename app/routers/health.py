from datetime import datetime, timezone
from fastapi import APIRouter, BackgroundTasks
from starlette import status
from app import database
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


def _check_database() -> None:
    if database.check_connection():
        logger.info("Health check: database reachable")
    else:
        logger.warning("Health check: database unreachable")


@router.get("/health", status_code=status.HTTP_200_OK)
def health_check(background_tasks: BackgroundTasks):
    """Answers immediately; the database probe runs after the response is sent."""
    background_tasks.add_task(_check_database)
    return {
        "success": True,
        "message": "API is running",
        "database": "checking",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
