"""Unit tests for the timesheet derivation engine.

Covers hours math, time range validation, wire encodings and the merge
policy used when updating a stored record.
"""

import datetime as dt

import pytest

from timepro_mcp.derivation import (
    Assignment,
    BreakUnit,
    DerivedDuration,
    TimeEncoding,
    TimeRange,
    WireFormat,
    derive_for_create,
    derive_for_update,
    parse_clock_time,
    record_time_range,
)
from timepro_mcp.errors import InvalidTimeRange, ValidationError
from timepro_mcp.models import TimesheetRecord

DAY = dt.date(2025, 1, 29)


def make_range(start: str, end: str, break_minutes: float = 0) -> TimeRange:
    return TimeRange(DAY, parse_clock_time(start), parse_clock_time(end), break_minutes)


def create(time_range: TimeRange, **kwargs):
    defaults = dict(employee_id="ABC", sell_price=150.0, sales_tax_pct=0.1)
    defaults.update(kwargs)
    return derive_for_create(Assignment("SSW", "TP", "WEBDEV"), time_range, **defaults)


class TestParseClockTime:
    """Test clock time parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("09:00", dt.time(9, 0)),
            ("9:05", dt.time(9, 5)),
            ("00:00", dt.time(0, 0)),
            ("23:59", dt.time(23, 59)),
            ("17:30:15", dt.time(17, 30, 15)),
            (" 08:30 ", dt.time(8, 30)),
        ],
    )
    def test_valid_times(self, value, expected):
        assert parse_clock_time(value) == expected

    @pytest.mark.parametrize("value", ["24:00", "12:60", "9am", "0900", "", "12:00:61", None])
    def test_invalid_times(self, value):
        with pytest.raises(ValidationError, match="Invalid time"):
            parse_clock_time(value)

    def test_passes_time_through(self):
        assert parse_clock_time(dt.time(7, 15)) == dt.time(7, 15)


class TestTimeRangeDuration:
    """Test billable/total hours derivation."""

    def test_standard_day(self):
        """09:00-18:00 with a one hour break is 8 billable, 9 total."""
        duration = make_range("09:00", "18:00", 60).duration()
        assert duration.billable_hours == 8.0
        assert duration.total_hours == 9.0

    def test_no_break(self):
        duration = make_range("09:00", "17:00").duration()
        assert duration == DerivedDuration(total_hours=8.0, billable_hours=8.0)

    @pytest.mark.parametrize(
        "start,end,break_minutes",
        [
            ("09:00", "17:30", 30),
            ("08:15", "12:45", 0),
            ("00:00", "23:59", 45),
            ("13:10", "13:11", 0),
            ("07:00", "19:00", 719),
            ("10:00", "16:20", 17.5),
        ],
    )
    def test_hours_identities(self, start, end, break_minutes):
        time_range = make_range(start, end, break_minutes)
        duration = time_range.duration()

        span = (dt.datetime.combine(DAY, time_range.end) - dt.datetime.combine(DAY, time_range.start))
        span_minutes = span.total_seconds() / 60
        assert duration.billable_hours == pytest.approx((span_minutes - break_minutes) / 60)
        assert duration.total_hours - duration.billable_hours == pytest.approx(break_minutes / 60)
        assert duration.break_hours == pytest.approx(break_minutes / 60)

    def test_edge_of_day(self):
        duration = make_range("00:00", "23:59").duration()
        assert duration.billable_hours == pytest.approx(1439 / 60)

    def test_seconds_are_counted(self):
        duration = make_range("09:00:00", "09:00:30").duration()
        assert duration.billable_hours == pytest.approx(0.5 / 60)

    def test_break_equal_to_span_is_rejected(self):
        """Net worked time of zero is invalid."""
        with pytest.raises(InvalidTimeRange) as exc_info:
            make_range("09:00", "10:00", 60).duration()
        message = str(exc_info.value)
        assert "09:00" in message
        assert "10:00" in message
        assert "60" in message

    @pytest.mark.parametrize("break_minutes", [61, 120, 600])
    def test_break_longer_than_span_is_rejected(self, break_minutes):
        with pytest.raises(InvalidTimeRange):
            make_range("09:00", "10:00", break_minutes).duration()

    @pytest.mark.parametrize("start,end", [("18:00", "09:00"), ("09:00", "09:00"), ("22:00", "00:00")])
    def test_end_not_after_start_is_rejected(self, start, end):
        with pytest.raises(InvalidTimeRange):
            make_range(start, end).duration()

    def test_negative_break_is_rejected(self):
        with pytest.raises(InvalidTimeRange) as exc_info:
            make_range("09:00", "17:00", -30).duration()
        assert "break -30 minutes" in str(exc_info.value)
        assert exc_info.value.fields == ("start_time", "end_time", "break_minutes")


class TestWireFormat:
    """Encodings only change representation, never hours."""

    def test_datetime_encoding(self):
        fmt = WireFormat(time_encoding=TimeEncoding.DATETIME)
        assert fmt.encode_time(DAY, dt.time(9, 0)) == "2025-01-29T09:00:00"

    def test_time_encoding(self):
        fmt = WireFormat(time_encoding=TimeEncoding.TIME)
        assert fmt.encode_time(DAY, dt.time(9, 0)) == "09:00:00"

    def test_break_units(self):
        assert WireFormat(break_unit=BreakUnit.HOURS).encode_break(90) == 1.5
        assert WireFormat(break_unit=BreakUnit.MINUTES).encode_break(90) == 90

    def test_hours_identical_across_encodings(self):
        time_range = make_range("09:00", "18:00", 60)
        payloads = [
            create(time_range, wire_format=WireFormat(encoding, unit))
            for encoding in TimeEncoding
            for unit in BreakUnit
        ]
        assert {(p.time_billable, p.time_total) for p in payloads} == {(8.0, 9.0)}


class TestDeriveForCreate:
    """Test payload construction for new timesheets."""

    def test_standard_day_payload(self):
        payload = create(make_range("09:00", "18:00", 60), note="Bot work", location_id="Home")
        wire = payload.to_wire()

        assert "TimeID" not in wire
        assert wire["EmpID"] == "ABC"
        assert wire["ClientID"] == "SSW"
        assert wire["ProjectID"] == "TP"
        assert wire["CategoryID"] == "WEBDEV"
        assert wire["LocationID"] == "Home"
        assert wire["DateCreated"] == "2025-01-29"
        assert wire["TimeStart"] == "2025-01-29T09:00:00"
        assert wire["TimeEnd"] == "2025-01-29T18:00:00"
        assert wire["TimeLess"] == 1.0
        assert wire["TimeBillable"] == 8.0
        assert wire["TimeTotal"] == 9.0
        assert wire["SellPrice"] == 150.0
        assert wire["SalesTaxPct"] == 0.1
        assert wire["Notes"] == "Bot work"

    def test_optional_fields_omitted(self):
        wire = create(make_range("09:00", "17:00")).to_wire()
        assert "BillableID" not in wire
        assert "Notes" not in wire
        assert "LocationID" not in wire

    def test_rate_is_placed_as_is(self):
        wire = create(make_range("09:00", "17:00"), sell_price=0).to_wire()
        assert wire["SellPrice"] == 0

    def test_minutes_break_unit(self):
        wire = create(
            make_range("09:00", "18:00", 60),
            wire_format=WireFormat(TimeEncoding.TIME, BreakUnit.MINUTES),
        ).to_wire()
        assert wire["TimeLess"] == 60
        assert wire["TimeStart"] == "09:00:00"

    def test_invalid_range(self):
        with pytest.raises(InvalidTimeRange):
            create(make_range("09:00", "10:00", 60))

    @pytest.mark.parametrize("field", ["client_id", "project_id", "category_id"])
    def test_assignment_ids_required(self, field):
        ids = {"client_id": "SSW", "project_id": "TP", "category_id": "WEBDEV", field: "  "}
        with pytest.raises(ValidationError) as exc_info:
            Assignment(**ids)
        assert exc_info.value.fields == (field,)


class TestRecordTimeRange:
    def test_bare_times(self, stored_record):
        time_range = record_time_range(TimesheetRecord.model_validate(stored_record))
        assert time_range == TimeRange(DAY, dt.time(9), dt.time(18), 60)

    def test_datetime_times(self, stored_record):
        stored_record.update(StartTime="2025-01-29T08:30:00", EndTime="2025-01-29T17:00:00")
        time_range = record_time_range(TimesheetRecord.model_validate(stored_record))
        assert time_range.start == dt.time(8, 30)
        assert time_range.end == dt.time(17, 0)


class TestDeriveForUpdate:
    """Test the merge policy for updates."""

    @pytest.fixture
    def existing(self, stored_record) -> TimesheetRecord:
        return TimesheetRecord.model_validate(stored_record)

    def test_empty_overrides_keep_everything(self, existing):
        wire = derive_for_update(existing, {}).to_wire()

        assert wire["TimeID"] == 186232353
        assert wire["TimeBillable"] == 8.0
        assert wire["TimeTotal"] == 9.0
        assert wire["TimeLess"] == 1.0
        assert wire["ClientID"] == "SSW"
        assert wire["ProjectID"] == "TP"
        assert wire["CategoryID"] == "WEBDEV"
        assert wire["LocationID"] == "Home"
        assert wire["BillableID"] == "B"
        assert wire["DateCreated"] == "2025-01-29"
        assert wire["TimeStart"] == "2025-01-29T09:00:00"
        assert wire["Notes"] == "Sprint review"
        assert wire["EmpID"] == "ABC"

    def test_stored_hours_kept_when_times_untouched(self, stored_record):
        """Manually adjusted hours survive a note-only edit."""
        stored_record.update(TimeBillable=7.5, TimeTotal=8.5)
        existing = TimesheetRecord.model_validate(stored_record)
        wire = derive_for_update(existing, {"note": "Reviewed"}).to_wire()
        assert wire["TimeBillable"] == 7.5
        assert wire["TimeTotal"] == 8.5

    def test_stored_hours_recomputed_when_times_change(self, stored_record):
        stored_record.update(TimeBillable=7.5, TimeTotal=8.5)
        existing = TimesheetRecord.model_validate(stored_record)
        wire = derive_for_update(existing, {"end_time": "17:00"}).to_wire()
        assert wire["TimeBillable"] == 7.0
        assert wire["TimeTotal"] == 8.0
        assert wire["TimeEnd"] == "2025-01-29T17:00:00"

    def test_empty_note_clears(self, existing):
        wire = derive_for_update(existing, {"note": ""}).to_wire()
        assert wire["Notes"] == ""

    def test_absent_note_preserved(self, existing):
        wire = derive_for_update(existing, {"category_id": "MTAS"}).to_wire()
        assert wire["Notes"] == "Sprint review"
        assert wire["CategoryID"] == "MTAS"

    def test_empty_billable_and_location_are_honored(self, existing):
        wire = derive_for_update(existing, {"billable_id": "", "location_id": ""}).to_wire()
        assert wire["BillableID"] == ""
        assert wire["LocationID"] == ""

    def test_break_override_in_minutes(self, existing):
        wire = derive_for_update(existing, {"break_minutes": 30}).to_wire()
        assert wire["TimeBillable"] == 8.5
        assert wire["TimeTotal"] == 9.0
        assert wire["TimeLess"] == 0.5

    def test_zero_break_override(self, existing):
        wire = derive_for_update(existing, {"break_minutes": 0}).to_wire()
        assert wire["TimeBillable"] == 9.0
        assert wire["TimeTotal"] == 9.0
        assert wire["TimeLess"] == 0

    def test_date_override_moves_times(self, existing):
        wire = derive_for_update(existing, {"date": "2025-02-03"}).to_wire()
        assert wire["DateCreated"] == "2025-02-03"
        assert wire["TimeStart"] == "2025-02-03T09:00:00"
        assert wire["TimeBillable"] == 8.0

    def test_sell_price_carried_forward(self, existing):
        wire = derive_for_update(existing, {"client_id": "NORTHWIND"}).to_wire()
        assert wire["ClientID"] == "NORTHWIND"
        assert wire["SellPrice"] == 150.0

    def test_sales_tax_defaults_when_missing(self, stored_record):
        del stored_record["SalesTaxPct"]
        existing = TimesheetRecord.model_validate(stored_record)
        wire = derive_for_update(existing, {}, default_sales_tax_pct=0.1).to_wire()
        assert wire["SalesTaxPct"] == 0.1

    def test_zero_sales_tax_is_kept(self, stored_record):
        stored_record["SalesTaxPct"] = 0
        existing = TimesheetRecord.model_validate(stored_record)
        wire = derive_for_update(existing, {}, default_sales_tax_pct=0.1).to_wire()
        assert wire["SalesTaxPct"] == 0

    def test_resolved_employee_and_id_win(self, existing):
        wire = derive_for_update(existing, {}, timesheet_id=42, employee_id="XYZ").to_wire()
        assert wire["TimeID"] == 42
        assert wire["EmpID"] == "XYZ"

    def test_merged_range_invalid(self, existing):
        """A break override alone can make the stored range invalid."""
        with pytest.raises(InvalidTimeRange):
            derive_for_update(existing, {"break_minutes": 540})

    def test_end_before_stored_start(self, existing):
        with pytest.raises(InvalidTimeRange):
            derive_for_update(existing, {"end_time": "08:00"})

    def test_empty_client_rejected(self, existing):
        with pytest.raises(ValidationError):
            derive_for_update(existing, {"client_id": ""})

    def test_unknown_field_rejected(self, existing):
        with pytest.raises(ValidationError, match="SellPrice"):
            derive_for_update(existing, {"SellPrice": 200})

    def test_minutes_wire_unit(self, existing):
        wire = derive_for_update(
            existing, {}, wire_format=WireFormat(TimeEncoding.TIME, BreakUnit.MINUTES)
        ).to_wire()
        assert wire["TimeLess"] == 60
        assert wire["TimeStart"] == "09:00:00"
