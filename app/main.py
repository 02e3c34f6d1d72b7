from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.database import Base, engine
from app.config import settings
from app.exceptions import AppException
from app.logging_config import setup_logging
from app.Middleware.cors import FallbackCORSMiddleware
from app.Middleware.request_logging import request_logging_middleware
from app import models  # noqa: F401 (registers tables on Base.metadata)
from app.limits import limiter, RateLimitExceeded, SlowAPIMiddleware
from app.routers import email, health, inquiries, properties, reviews
from app.services.schema_migrator import run_startup_migrations
from app.utils.store_errors import classify_store_error, store_diagnostic
from slowapi import _rate_limit_exceeded_handler
import logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Starting {settings.BRAND_NAME} API ({settings.ENVIRONMENT})")
    # Production schemas come from Alembic; local SQLite databases are created here
    if engine.dialect.name == "sqlite":
        Base.metadata.create_all(bind=engine)
    run_startup_migrations(engine)
    if not settings.smtp_configured:
        logger.warning("SMTP credentials not set; inquiry emails will not be delivered")
    yield
    engine.dispose()


app = FastAPI(title=f"{settings.BRAND_NAME} API", lifespan=lifespan)
app.middleware("http")(request_logging_middleware)

app.add_middleware(
    FallbackCORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Rate limiting middleware and handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message} ({exc.error})")
    else:
        logger.info(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Store failures that escaped a service without being wrapped."""
    kind = classify_store_error(exc)
    logger.error(f"Database error ({kind.value}): {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "message": "Database error occurred",
            "error": store_diagnostic(exc),
        },
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": f"{field}: {message}" if field else message,
            "error": "; ".join(
                f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}"
                for err in errors
            ),
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "success": False,
                "message": "API endpoint not found",
                "requestedPath": request.url.path,
                "requestedMethod": request.method,
                "hint": "Check /api/health to confirm the API is running",
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


app.include_router(health.router)
app.include_router(properties.router)
app.include_router(inquiries.router)
app.include_router(reviews.router)
app.include_router(email.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT)
