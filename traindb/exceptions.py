import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from traindb.services.exceptions import OriginNotAllowedError, TrainCarsQueryError

logger = logging.getLogger(__name__)

GENERIC_QUERY_ERROR = "An error occurred while fetching train cars data. Please try again later."
UNAUTHORIZED_ORIGIN = "Unauthorized: API can only be called from this website."
RATE_LIMITED = "Rate limit exceeded. Please try again later."


async def query_exception_handler(request: Request, exc: TrainCarsQueryError):
    # Details were logged where the query failed; callers only get the generic message
    return JSONResponse(status_code=500, content={"error": GENERIC_QUERY_ERROR})


async def origin_exception_handler(request: Request, exc: OriginNotAllowedError):
    return JSONResponse(status_code=403, content={"error": UNAUTHORIZED_ORIGIN})


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit exceeded for {request.url.path}: {exc.detail}")
    return JSONResponse(status_code=429, content={"error": RATE_LIMITED})


def register_exception_handlers(app):
    app.add_exception_handler(TrainCarsQueryError, query_exception_handler)
    app.add_exception_handler(OriginNotAllowedError, origin_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
