"""
The two pagination strategies used by the browser.

Flat listings are paginated by the server, so the page window is derived from the
reported total. Marriage listings arrive whole and unfiltered, so marriages are
filtered and sliced here instead.
"""
import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence

from traindb.presentation.formatting import id_matches
from traindb.schemas.train_car import MarriageOut, TrainCarOut

SEARCHABLE_FIELDS = (
    "name",
    "status",
    "delivery_date",
    "enter_service_date",
    "notes",
    "model_common_name",
)


@dataclass(frozen=True)
class PageWindow:
    page: int
    page_size: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size)

    @property
    def start(self) -> int:
        return self.page * self.page_size + 1

    @property
    def end(self) -> int:
        return min((self.page + 1) * self.page_size, self.total)

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def has_next(self) -> bool:
        return self.end < self.total


@dataclass(frozen=True)
class MarriagePage:
    window: PageWindow
    marriages: List[MarriageOut]


def paginate_rows(total: int, page: int, page_size: int) -> PageWindow:
    return PageWindow(page=page, page_size=page_size, total=total)


def index_cars(cars: Sequence[TrainCarOut]) -> Dict[int, TrainCarOut]:
    return {car.vehicle_id: car for car in cars}


def car_matches(car: TrainCarOut, term: str) -> bool:
    """term must already be lower-cased."""
    if id_matches(car.vehicle_id, term):
        return True
    for field in SEARCHABLE_FIELDS:
        value = getattr(car, field)
        if value and term in value.lower():
            return True
    return False


def filter_marriages(
    marriages: Sequence[MarriageOut],
    cars_by_id: Mapping[int, TrainCarOut],
    search: str,
) -> List[MarriageOut]:
    """Keeps a whole marriage when any of its resolvable cars matches the search."""
    term = search.lower()
    if not term:
        return list(marriages)

    return [
        marriage for marriage in marriages
        if any(
            car_id in cars_by_id and car_matches(cars_by_id[car_id], term)
            for car_id in marriage.cars
        )
    ]


def paginate_marriages(
    marriages: Sequence[MarriageOut],
    cars_by_id: Mapping[int, TrainCarOut],
    search: str,
    page: int,
    page_size: int,
) -> MarriagePage:
    matching = filter_marriages(marriages, cars_by_id, search)
    window = PageWindow(page=page, page_size=page_size, total=len(matching))
    start = page * page_size
    return MarriagePage(window=window, marriages=matching[start:start + page_size])
