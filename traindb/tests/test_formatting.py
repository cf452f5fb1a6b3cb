from datetime import datetime

import pytest
import pytz

from traindb.presentation.formatting import (
    format_last_updated,
    format_vehicle_id,
    id_matches,
    is_mark_v,
    mark_v_tooltip,
    ordinal,
    status_class,
)


class TestVehicleIds:

    @pytest.mark.parametrize("vehicle_id,expected", [
        (1, "001"),
        (42, "042"),
        (301, "301"),
        (1000, "1000"),
        (6011, "6011"),
    ])
    def test_format(self, vehicle_id, expected):
        assert format_vehicle_id(vehicle_id) == expected

    @pytest.mark.parametrize("vehicle_id,expected", [
        (5999, False),
        (6000, True),
        (6999, True),
        (7000, False),
    ])
    def test_mark_v_band(self, vehicle_id, expected):
        assert is_mark_v(vehicle_id) is expected

    def test_tooltip_for_odd_pair(self):
        tooltip = mark_v_tooltip(6011)

        assert tooltip.startswith("Mark V trains have 5 cars with 4-digit IDs")
        assert "Train 6011 is part of VCC pair 601/602" in tooltip
        assert tooltip.endswith("has cars 6011, 6022, 6023, 6024, and 6025.")

    def test_tooltip_for_even_pair_names_the_same_train(self):
        tooltip = mark_v_tooltip(6024)

        assert "Train 6024 is part of VCC pair 601/602" in tooltip
        assert tooltip.endswith("has cars 6011, 6022, 6023, 6024, and 6025.")

    def test_no_tooltip_outside_mark_v(self):
        assert mark_v_tooltip(301) is None
        assert mark_v_tooltip(7001) is None

    @pytest.mark.parametrize("vehicle_id,term,expected", [
        (1, "001", True),
        (1, "1", True),
        (42, "04", True),
        (6011, "601", True),
        (6022, "601", False),
        (201, "001", False),
    ])
    def test_id_matches(self, vehicle_id, term, expected):
        assert id_matches(vehicle_id, term) is expected


@pytest.mark.parametrize("status,expected", [
    ("In Service", "status-in-service"),
    ("Retired", "status-retired"),
    ("In  Testing", "status-in-testing"),
])
def test_status_class(status, expected):
    assert status_class(status) == expected


@pytest.mark.parametrize("day,expected", [
    (1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"),
    (11, "11th"), (12, "12th"), (13, "13th"),
    (21, "21st"), (22, "22nd"), (23, "23rd"), (31, "31st"),
])
def test_ordinal(day, expected):
    assert ordinal(day) == expected


class TestLastUpdated:

    def test_converted_to_display_timezone(self):
        value = datetime(2025, 1, 1, 5, 0, tzinfo=pytz.UTC)

        assert format_last_updated(value) == "Database last updated December 31st, 2024"

    def test_naive_values_are_utc(self):
        assert format_last_updated(datetime(2025, 10, 4, 3, 0)) == "Database last updated October 3rd, 2025"

    def test_explicit_timezone(self):
        value = datetime(2025, 1, 1, 5, 0, tzinfo=pytz.UTC)

        assert format_last_updated(value, "UTC") == "Database last updated January 1st, 2025"

    def test_missing(self):
        assert format_last_updated(None) is None
