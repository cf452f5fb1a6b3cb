"""
Display helpers shared by the table, marriage rows and the detail overlay.
"""
from datetime import datetime
from typing import Optional

import pytz

from traindb.core.environment import get_display_timezone

MARK_V_FIRST_ID = 6000
MARK_V_LAST_ID = 6999
STANDARD_ID_WIDTH = 3
MARK_V_ID_WIDTH = 4


def is_mark_v(vehicle_id: int) -> bool:
    """Mark V cars use 4-digit ids in the 6xxx band."""
    return MARK_V_FIRST_ID <= vehicle_id <= MARK_V_LAST_ID


def format_vehicle_id(vehicle_id: int) -> str:
    width = MARK_V_ID_WIDTH if is_mark_v(vehicle_id) else STANDARD_ID_WIDTH
    return str(vehicle_id).zfill(width)


def mark_v_tooltip(vehicle_id: int) -> Optional[str]:
    """
    Explains how a Mark V id maps onto its VCC pair.

    Vehicle control computers treat each 5-car Mark V train as a 2-car pair with
    3-digit identifiers: 6012 belongs to pair 601/602, whose cars are 6011, 6022,
    6023, 6024 and 6025. Returns None outside the Mark V band.
    """
    if not is_mark_v(vehicle_id):
        return None

    pair_number = vehicle_id // 10
    if pair_number % 2 == 0:
        odd, even = pair_number - 1, pair_number
    else:
        odd, even = pair_number, pair_number + 1

    cars = [f"{odd}1", f"{even}2", f"{even}3", f"{even}4", f"{even}5"]
    train_id = format_vehicle_id(vehicle_id)

    return (
        "Mark V trains have 5 cars with 4-digit IDs, but vehicle control computers (VCCs) "
        "treat them as 2-car pairs using 3-digit identifiers. "
        f"Train {train_id} is part of VCC pair {odd}/{even} and has cars "
        f"{', '.join(cars[:-1])}, and {cars[-1]}."
    )


def id_matches(vehicle_id: int, term: str) -> bool:
    """Case-folded term found in the 3-digit padded or the raw id."""
    return term in str(vehicle_id).zfill(STANDARD_ID_WIDTH) or term in str(vehicle_id)


def status_class(status: str) -> str:
    return "status-" + "-".join(status.lower().split())


def ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_last_updated(value: Optional[datetime], tz_name: Optional[str] = None) -> Optional[str]:
    """'Database last updated October 3rd, 2025' in the display timezone."""
    if value is None:
        return None

    tz = pytz.timezone(tz_name or get_display_timezone())
    if value.tzinfo is None:
        value = pytz.UTC.localize(value)
    local = value.astimezone(tz)

    return f"Database last updated {local.strftime('%B')} {ordinal(local.day)}, {local.year}"
