from starlette.middleware.cors import CORSMiddleware
from app.config import settings
import logging

logger = logging.getLogger(__name__)


class FallbackCORSMiddleware(CORSMiddleware):
    """CORS with a fixed origin list that still lets unlisted origins through.

    Unlisted origins are logged so they can be added to ``ALLOWED_ORIGINS``.
    Set ``CORS_STRICT=true`` to reject them instead.
    """

    def is_allowed_origin(self, origin: str) -> bool:
        if super().is_allowed_origin(origin):
            return True
        if settings.CORS_STRICT:
            logger.warning(f"CORS blocked origin: {origin}")
            return False
        logger.warning(f"CORS: allowing unlisted origin {origin}")
        return True
