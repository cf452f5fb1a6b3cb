from typing import Optional

from fastapi import APIRouter, Depends, Request

from traindb.core.db import ConnectionScope, get_db
from traindb.core.environment import get_rate_limit
from traindb.middleware.origin_guard import verify_same_origin
from traindb.middleware.rate_limit import limiter
from traindb.schemas.train_car import ErrorResponse, TrainCarsQuery, TrainCarsResponse
from traindb.services.train_car_service import TrainCarService

router = APIRouter(prefix="/api", tags=["train-cars"])


def get_train_car_service(scope: ConnectionScope = Depends(get_db)) -> TrainCarService:
    return TrainCarService(scope)


def get_train_cars_query(
    search: str = "",
    groupByMarriage: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
) -> TrainCarsQuery:
    # Raw strings on purpose: bad numbers are clamped or defaulted, never rejected
    return TrainCarsQuery(
        search=search,
        group_by_marriage=groupByMarriage,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/train-cars",
    response_model=TrainCarsResponse,
    dependencies=[Depends(verify_same_origin)],
    responses={
        403: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
@limiter.limit(get_rate_limit)
async def list_train_cars(
    request: Request,
    params: TrainCarsQuery = Depends(get_train_cars_query),
    service: TrainCarService = Depends(get_train_car_service),
):
    """
    Paginated, searchable train car listing.
    With groupByMarriage=true every car and every marriage is returned unpaginated.
    """
    return await service.list_train_cars(params)
