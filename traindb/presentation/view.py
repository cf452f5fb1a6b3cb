"""
Immutable view state and the pure function that turns it into a renderable table.

A ViewState is built once per fetch (from a listing envelope or from an error) and
never mutated; `build_table` derives everything the template needs from it.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from traindb.presentation.formatting import (
    format_last_updated,
    format_vehicle_id,
    mark_v_tooltip,
    status_class,
)
from traindb.presentation.pagination import (
    PageWindow,
    index_cars,
    paginate_marriages,
    paginate_rows,
)
from traindb.schemas.train_car import MarriageOut, TrainCarOut, TrainCarsResponse

PAGE_SIZE = 50
GENERIC_FETCH_ERROR = "Failed to fetch data"

TABLE_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("vehicle_id", "VEHICLE ID"),
    ("model_common_name", "MODEL"),
    ("name", "NAME"),
    ("status", "STATUS"),
    ("delivery_date", "DELIVERY DATE"),
    ("enter_service_date", "ENTERED SERVICE"),
    ("notes", "NOTES"),
)

VEHICLE_DETAIL_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("vehicle_id", "Vehicle ID"),
    ("name", "Name"),
    ("status", "Status"),
    ("delivery_date", "Delivery Date"),
    ("enter_service_date", "Entered Service"),
    ("notes", "Notes"),
)

MODEL_DETAIL_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("model_common_name", "Model"),
    ("full_name", "Full Model Name"),
    ("manufacturer", "Manufacturer"),
    ("manufacture_location", "Manufacture Location"),
    ("years_manufactured", "Years Manufactured"),
)


@dataclass(frozen=True)
class ViewState:
    page: int = 0
    page_size: int = PAGE_SIZE
    search: str = ""
    group_by_marriage: bool = False
    cars: Tuple[TrainCarOut, ...] = ()
    marriages: Optional[Tuple[MarriageOut, ...]] = None
    total: int = 0
    last_updated: Optional[datetime] = None
    error: Optional[str] = None

    @classmethod
    def from_response(
        cls,
        response: TrainCarsResponse,
        page: int,
        search: str,
        group_by_marriage: bool,
        page_size: int = PAGE_SIZE,
    ) -> "ViewState":
        return cls(
            page=page,
            page_size=page_size,
            search=search,
            group_by_marriage=group_by_marriage,
            cars=tuple(response.data),
            marriages=tuple(response.marriages) if response.marriages is not None else None,
            total=response.total,
            last_updated=response.last_updated,
        )

    @classmethod
    def from_error(
        cls,
        message: Optional[str],
        page: int,
        search: str,
        group_by_marriage: bool,
    ) -> "ViewState":
        return cls(
            page=page,
            search=search,
            group_by_marriage=group_by_marriage,
            error=message or GENERIC_FETCH_ERROR,
        )

    @property
    def grouped(self) -> bool:
        return self.group_by_marriage and self.marriages is not None


@dataclass(frozen=True)
class DetailField:
    label: str
    value: Optional[str]
    multiline: bool = False
    tooltip: Optional[str] = None
    badge_class: Optional[str] = None


@dataclass(frozen=True)
class CarDetail:
    vehicle_id: int
    title: str
    vehicle_fields: List[DetailField]
    model_fields: List[DetailField]


@dataclass(frozen=True)
class CarRow:
    vehicle_id: int
    display_id: str
    tooltip: Optional[str]
    cells: Dict[str, Optional[str]]
    status_class: Optional[str]
    detail: CarDetail
    marriage_index: Optional[int] = None


@dataclass(frozen=True)
class MarriageRow:
    marriage_index: int
    marriage_id: int
    car_ids: str
    cells: Dict[str, Optional[str]]
    status_class: Optional[str]
    has_notes: bool
    cars: List[CarRow] = field(default_factory=list)


@dataclass(frozen=True)
class Stats:
    summary: str
    page_info: str
    last_updated: Optional[str]
    has_previous: bool
    has_next: bool
    previous_page: int
    next_page: int


@dataclass(frozen=True)
class TableView:
    state: ViewState
    columns: Tuple[Tuple[str, str], ...] = TABLE_COLUMNS
    rows: List[CarRow] = field(default_factory=list)
    marriage_rows: List[MarriageRow] = field(default_factory=list)
    stats: Optional[Stats] = None

    @property
    def is_empty(self) -> bool:
        return self.state.error is None and not self.rows and not self.marriage_rows

    @property
    def details(self) -> List[CarDetail]:
        if self.marriage_rows:
            return [car.detail for row in self.marriage_rows for car in row.cars]
        return [row.detail for row in self.rows]


def car_detail(car: TrainCarOut) -> CarDetail:
    values = car.model_dump()
    vehicle_fields = []
    for key, label in VEHICLE_DETAIL_FIELDS:
        if key == "vehicle_id":
            detail = DetailField(
                label=label,
                value=format_vehicle_id(car.vehicle_id),
                tooltip=mark_v_tooltip(car.vehicle_id),
            )
        elif key == "status":
            detail = DetailField(
                label=label,
                value=car.status,
                badge_class=status_class(car.status) if car.status else None,
            )
        else:
            detail = DetailField(label=label, value=values[key], multiline=key == "notes")
        vehicle_fields.append(detail)

    model_fields = [
        DetailField(label=label, value=values[key], multiline=key == "manufacture_location")
        for key, label in MODEL_DETAIL_FIELDS
    ]

    return CarDetail(
        vehicle_id=car.vehicle_id,
        title=car.name or "Train Car Details",
        vehicle_fields=vehicle_fields,
        model_fields=model_fields,
    )


def car_row(car: TrainCarOut, marriage_index: Optional[int] = None) -> CarRow:
    values = car.model_dump()
    cells = {key: values[key] for key, _ in TABLE_COLUMNS if key != "vehicle_id"}
    return CarRow(
        vehicle_id=car.vehicle_id,
        display_id=format_vehicle_id(car.vehicle_id),
        tooltip=mark_v_tooltip(car.vehicle_id),
        cells=cells,
        status_class=status_class(car.status) if car.status else None,
        detail=car_detail(car),
        marriage_index=marriage_index,
    )


def marriage_row(
    marriage: MarriageOut,
    marriage_index: int,
    cars_by_id: Dict[int, TrainCarOut],
) -> Optional[MarriageRow]:
    """Header row from the first resolvable car, followed by every resolvable member."""
    members = [cars_by_id[car_id] for car_id in marriage.cars if car_id in cars_by_id]
    if not members:
        return None

    first = members[0]
    has_notes = any(car.notes and car.notes.strip() for car in members)
    cells = {
        "model_common_name": first.model_common_name,
        "name": f"Marriage {marriage.marriage_id} ({marriage.marriage_size} cars)",
        "status": first.status,
        "delivery_date": first.delivery_date,
        "enter_service_date": first.enter_service_date,
        "notes": "See individual cars" if has_notes else None,
    }

    return MarriageRow(
        marriage_index=marriage_index,
        marriage_id=marriage.marriage_id,
        car_ids=", ".join(format_vehicle_id(car_id) for car_id in marriage.cars),
        cells=cells,
        status_class=status_class(first.status) if first.status else None,
        has_notes=has_notes,
        cars=[car_row(car, marriage_index) for car in members],
    )


def build_stats(state: ViewState, window: PageWindow) -> Stats:
    item_type = "marriages" if state.grouped else "train cars"
    if state.search:
        summary = f"Showing {window.total} {item_type} (filtered)"
    else:
        summary = f"Showing {window.start} to {window.end} of {window.total} {item_type}"

    return Stats(
        summary=summary,
        page_info=f"Page {state.page + 1} of {window.total_pages or 1}",
        last_updated=format_last_updated(state.last_updated),
        has_previous=window.has_previous,
        has_next=window.has_next,
        previous_page=max(state.page - 1, 0),
        next_page=state.page + 1,
    )


def build_table(state: ViewState) -> TableView:
    if state.error is not None:
        return TableView(state=state)

    if not state.grouped:
        window = paginate_rows(state.total, state.page, state.page_size)
        return TableView(
            state=state,
            rows=[car_row(car) for car in state.cars],
            stats=build_stats(state, window),
        )

    cars_by_id = index_cars(state.cars)
    marriage_page = paginate_marriages(
        state.marriages, cars_by_id, state.search, state.page, state.page_size
    )
    positions = {marriage.marriage_id: index for index, marriage in enumerate(state.marriages)}

    marriage_rows = []
    for marriage in marriage_page.marriages:
        row = marriage_row(marriage, positions[marriage.marriage_id], cars_by_id)
        if row is not None:
            marriage_rows.append(row)

    return TableView(
        state=state,
        marriage_rows=marriage_rows,
        stats=build_stats(state, marriage_page.window),
    )

