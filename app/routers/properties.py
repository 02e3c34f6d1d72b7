import asyncio
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, Path
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette import status
from app import database
from app.config import settings
from app.dependencies import db_dependency, property_service_dependency
from app.exceptions import DatabaseUnavailableError
from app.schemas.property import ListingsResponse, PropertyFilters
from app.services.property_service import PropertyService
from app.utils.store_errors import store_diagnostic
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/properties", tags=["properties"])

property_body = Body(..., media_type="application/json")


class ListingQueryError(Exception):
    pass


def _close_when_done(task: asyncio.Future) -> None:
    """Release the session of a connect that finishes after we stopped waiting."""

    def _close(done: asyncio.Future) -> None:
        if done.cancelled() or done.exception() is not None:
            return
        done.result().close()
        logger.info("Released session from an abandoned connection attempt")

    task.add_done_callback(_close)


async def _acquire_session() -> Session:
    attempts = settings.LIST_CONNECT_ATTEMPTS
    for attempt in range(1, attempts + 1):
        logger.info(f"Connection attempt {attempt}/{attempts}")
        task = asyncio.ensure_future(run_in_threadpool(database.connect))
        try:
            return await asyncio.wait_for(
                asyncio.shield(task), settings.LIST_CONNECT_TIMEOUT
            )
        except asyncio.TimeoutError:
            _close_when_done(task)
            logger.warning(
                f"Connection attempt {attempt} timed out after {settings.LIST_CONNECT_TIMEOUT}s"
            )
        except asyncio.CancelledError:
            _close_when_done(task)
            raise
        except Exception as e:
            logger.warning(f"Connection attempt {attempt} failed: {e}")

        if attempt < attempts:
            await asyncio.sleep(settings.LIST_RETRY_BACKOFF * attempt)

    raise DatabaseUnavailableError(
        f"Database connection failed after {attempts} attempts. "
        "Please check database configuration and credentials."
    )


async def _fetch_listings(service: PropertyService, filters: PropertyFilters) -> List[Dict[str, Any]]:
    db = await _acquire_session()
    task = asyncio.ensure_future(run_in_threadpool(service.list_properties, db, filters))
    abandoned = False
    try:
        return await asyncio.wait_for(asyncio.shield(task), settings.LIST_QUERY_TIMEOUT)
    except asyncio.TimeoutError:
        abandoned = True
        task.add_done_callback(lambda _: db.close())
        raise ListingQueryError("Query timeout")
    except asyncio.CancelledError:
        abandoned = True
        task.add_done_callback(lambda _: db.close())
        raise
    except SQLAlchemyError as e:
        raise ListingQueryError(store_diagnostic(e)) from e
    finally:
        if not abandoned:
            db.close()


def _empty(message: str, error: Optional[str] = None) -> dict:
    return ListingsResponse(message=message, error=error).model_dump(exclude_none=True)


@router.get("", status_code=status.HTTP_200_OK)
async def get_properties(
    service: property_service_dependency,
    filters: PropertyFilters = Depends(PropertyFilters.from_query),
):
    """Listings never fail the page: store problems come back as an empty result."""
    try:
        listings = await asyncio.wait_for(
            _fetch_listings(service, filters), settings.LIST_REQUEST_TIMEOUT
        )
    except asyncio.TimeoutError:
        logger.warning("Request timeout - returning empty result")
        return _empty("Database connection timeout. Please try again.")
    except DatabaseUnavailableError as e:
        logger.error("All database connection attempts failed")
        return _empty(e.message)
    except ListingQueryError as e:
        logger.error(f"Listing query failed: {e}")
        return _empty(f"Query failed: {e}")
    except Exception as e:
        logger.exception("Error fetching properties")
        return _empty(f"Error: {e}", str(e))

    logger.info(f"Returning {len(listings)} properties to client")
    return ListingsResponse(listings=listings, total=len(listings)).model_dump(exclude_none=True)


@router.get("/owner", status_code=status.HTTP_200_OK)
def get_properties_by_owner(
    db: db_dependency,
    service: property_service_dependency,
    ownerEmail: Optional[str] = None,
):
    listings = service.get_properties_by_owner(db, ownerEmail)
    return {"success": True, "listings": listings, "total": len(listings)}


@router.get("/{property_id}/reviews", status_code=status.HTTP_200_OK)
def get_property_reviews(
    db: db_dependency,
    service: property_service_dependency,
    property_id: int = Path(gt=0),
):
    reviews = service.get_property_reviews(db, property_id)
    return {"success": True, "reviews": reviews, "total": len(reviews)}


@router.get("/{property_id}", status_code=status.HTTP_200_OK)
def get_property(
    db: db_dependency,
    service: property_service_dependency,
    property_id: int = Path(gt=0),
):
    return {"success": True, "data": service.get_property(db, property_id)}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_property(
    db: db_dependency,
    service: property_service_dependency,
    body: Dict[str, Any] = property_body,
):
    return {
        "success": True,
        "message": "Property created successfully",
        "data": service.create_property(db, body),
    }


@router.put("/{property_id}", status_code=status.HTTP_200_OK)
def update_property(
    db: db_dependency,
    service: property_service_dependency,
    property_id: int = Path(gt=0),
    body: Dict[str, Any] = property_body,
):
    return {
        "success": True,
        "message": "Property updated successfully",
        "data": service.update_property(db, property_id, body),
    }


@router.delete("/{property_id}", status_code=status.HTTP_200_OK)
def delete_property(
    db: db_dependency,
    service: property_service_dependency,
    property_id: int = Path(gt=0),
):
    service.delete_property(db, property_id)
    return {"success": True, "message": "Property deleted successfully"}
