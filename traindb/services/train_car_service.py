import asyncio
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import Text, cast, func, or_, select
from sqlalchemy.sql import Select

from traindb.core.db import ConnectionScope
from traindb.core.metrics import track_performance
from traindb.core.sql import padded_id
from traindb.models import CarMarriage, TrainCar, TrainModel
from traindb.schemas.train_car import TrainCarsQuery, TrainCarsResponse
from traindb.services.exceptions import TrainCarsQueryError

logger = logging.getLogger(__name__)


LISTING_COLUMNS = (
    TrainCar.vehicle_id,
    TrainCar.name,
    TrainCar.status,
    TrainCar.delivery_date,
    TrainCar.enter_service_date,
    TrainCar.batch_id,
    TrainCar.notes,
    TrainModel.common_name.label("model_common_name"),
    TrainModel.manufacturer,
    TrainModel.manufacture_location,
    TrainModel.years_manufactured,
    TrainModel.full_name,
)


def search_condition(search: str):
    """
    Single case-insensitive "contains" pattern OR-ed across every searchable column.

    The id is matched both zero-padded and raw, since it is displayed padded but
    may be typed either way.
    """
    pattern = f"%{search}%"
    return or_(
        padded_id(TrainCar.vehicle_id).ilike(pattern),
        cast(TrainCar.vehicle_id, Text).ilike(pattern),
        TrainCar.name.ilike(pattern),
        cast(TrainCar.status, Text).ilike(pattern),
        TrainCar.delivery_date.ilike(pattern),
        TrainCar.enter_service_date.ilike(pattern),
        TrainCar.notes.ilike(pattern),
        TrainModel.common_name.ilike(pattern),
    )


def _with_model(stmt: Select) -> Select:
    return stmt.outerjoin(TrainModel, TrainCar.batch_id == TrainModel.batch_id)


def build_listing_query(params: TrainCarsQuery) -> Select:
    stmt = _with_model(select(*LISTING_COLUMNS).select_from(TrainCar))

    # Grouped mode returns everything; the presentation layer filters whole marriages
    if params.group_by_marriage:
        return stmt.order_by(TrainCar.vehicle_id)

    if params.search:
        stmt = stmt.where(search_condition(params.search))

    return stmt.order_by(TrainCar.vehicle_id).limit(params.limit).offset(params.offset)


def build_count_query(params: TrainCarsQuery) -> Select:
    stmt = select(func.count().label("total")).select_from(TrainCar)
    if params.search and not params.group_by_marriage:
        stmt = _with_model(stmt).where(search_condition(params.search))
    return stmt


def build_last_updated_query() -> Select:
    return select(func.max(TrainCar.last_modified).label("last_modified"))


def build_marriages_query() -> Select:
    return select(
        CarMarriage.marriage_id,
        CarMarriage.batch_id,
        CarMarriage.cars,
        CarMarriage.marriage_size,
    ).order_by(CarMarriage.marriage_id)


class TrainCarService:
    """
    Read-only query service behind the train car listing.

    Each lookup (listing, count, last-modified timestamp and, when grouping, the
    marriages table) is independent, so they run concurrently, each on its own
    connection from the request's ConnectionScope. The scope owns releasing them.
    """

    def __init__(self, scope: ConnectionScope):
        self.scope = scope

    async def _fetch_rows(self, stmt: Select) -> List[Dict[str, Any]]:
        conn = await self.scope.connect()
        result = await conn.execute(stmt)
        return [dict(row) for row in result.mappings().all()]

    async def _fetch_scalar(self, stmt: Select) -> Optional[Any]:
        conn = await self.scope.connect()
        result = await conn.execute(stmt)
        return result.scalar()

    async def _gather(self, *lookups):
        # Wait for every lookup before failing so no query is still running when the scope closes
        results = await asyncio.gather(*lookups, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return results

    @track_performance(service_name="TrainCarService")
    async def list_train_cars(self, params: TrainCarsQuery) -> TrainCarsResponse:
        lookups = [
            self._fetch_rows(build_listing_query(params)),
            self._fetch_scalar(build_count_query(params)),
            self._fetch_scalar(build_last_updated_query()),
        ]
        if params.group_by_marriage:
            lookups.append(self._fetch_rows(build_marriages_query()))

        try:
            results = await self._gather(*lookups)
        except Exception as e:
            logger.exception(
                f"Database error while listing train cars: {e}",
                extra={
                    "search": params.search,
                    "group_by_marriage": params.group_by_marriage,
                    "limit": params.limit,
                    "offset": params.offset,
                }
            )
            raise TrainCarsQueryError("Failed to fetch train cars") from e

        rows, total, last_updated = results[:3]
        marriages = results[3] if params.group_by_marriage else None

        logger.info(
            f"Listed {len(rows)} train cars (total={total}, grouped={params.group_by_marriage})"
        )

        return TrainCarsResponse.model_validate({
            "data": rows,
            "total": int(total or 0),
            "limit": params.limit,
            "offset": params.offset,
            "lastUpdated": last_updated,
            "marriages": marriages,
        })
