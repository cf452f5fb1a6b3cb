from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse

from traindb.core.environment import get_rate_limit
from traindb.exceptions import GENERIC_QUERY_ERROR
from traindb.middleware.rate_limit import limiter
from traindb.presentation import PAGE_SIZE, ViewState, build_table, get_css, get_js, render_page
from traindb.routers.train_cars import get_train_car_service
from traindb.schemas.train_car import TrainCarsQuery, parse_int
from traindb.services.exceptions import TrainCarsQueryError
from traindb.services.train_car_service import TrainCarService


router = APIRouter(tags=["frontend"])


@router.get("/styles.css")
async def styles():
    return Response(content=get_css(), media_type="text/css")


@router.get("/app.js")
async def script():
    return Response(content=get_js(), media_type="application/javascript")


# Registered last: every path not claimed by another route renders the browser page
@router.get("/{full_path:path}", response_class=HTMLResponse)
@limiter.limit(get_rate_limit)
async def index(
    request: Request,
    full_path: str,
    page: Optional[str] = None,
    search: str = "",
    groupByMarriage: Optional[str] = None,
    service: TrainCarService = Depends(get_train_car_service),
):
    page_number = max(parse_int(page, 0), 0)
    group_by_marriage = groupByMarriage == "true"
    params = TrainCarsQuery(
        search=search,
        group_by_marriage=group_by_marriage,
        limit=PAGE_SIZE,
        offset=page_number * PAGE_SIZE,
    )

    try:
        listing = await service.list_train_cars(params)
    except TrainCarsQueryError:
        state = ViewState.from_error(GENERIC_QUERY_ERROR, page_number, search, group_by_marriage)
        return HTMLResponse(render_page(build_table(state)), status_code=500)

    state = ViewState.from_response(listing, page_number, search, group_by_marriage)
    return HTMLResponse(render_page(build_table(state)))
