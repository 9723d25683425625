"""Timesheet derivation engine.

Turns partial, human-supplied inputs (a date, two clock times, a break and
optional overrides) into a complete SaveTimesheet payload:

- Billable hours = (End - Start - Break) / 60
- Total hours    = Billable hours + Break / 60

Break durations are held in minutes everywhere inside this module, matching
what TimePRO returns on the read path. The wire unit for the break and the
wire encoding of start/end times are chosen by a WireFormat and only applied
when the payload is built, so the hours math is identical for every encoding.
"""
import datetime as dt
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping

from dateutil import parser as date_parser

from .errors import InvalidTimeRange, ValidationError
from .models import TimesheetPayload, TimesheetRecord

MINUTES_PER_HOUR = 60

TIME_AFFECTING_FIELDS = frozenset({"start_time", "end_time", "break_minutes"})
UPDATABLE_FIELDS = frozenset({
    "client_id", "project_id", "category_id", "location_id", "billable_id",
    "date", "start_time", "end_time", "break_minutes", "note",
})

_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2})(?::(\d{2}))?")


class TimeEncoding(str, Enum):
    DATETIME = "datetime"  # 2025-01-29T09:00:00
    TIME = "time"          # 09:00:00


class BreakUnit(str, Enum):
    HOURS = "hours"
    MINUTES = "minutes"


@dataclass(frozen=True)
class WireFormat:
    """How times and the break are written into a SaveTimesheet body."""

    time_encoding: TimeEncoding = TimeEncoding.DATETIME
    break_unit: BreakUnit = BreakUnit.HOURS

    def encode_time(self, date: dt.date, time: dt.time) -> str:
        clock = time.strftime("%H:%M:%S")
        if self.time_encoding is TimeEncoding.DATETIME:
            return f"{date.isoformat()}T{clock}"
        return clock

    def encode_break(self, break_minutes: float) -> float:
        if self.break_unit is BreakUnit.HOURS:
            return break_minutes / MINUTES_PER_HOUR
        return break_minutes


def parse_clock_time(value: str | dt.time) -> dt.time:
    """Parse a 24-hour ``HH:MM`` or ``HH:MM:SS`` clock time.

    Args:
        value: Clock time string, or an already parsed dt.time

    Returns:
        The parsed time

    Raises:
        ValidationError: If the value is not a valid 24-hour clock time

    Example:
        >>> parse_clock_time("09:30")
        datetime.time(9, 30)
        >>> parse_clock_time("23:59:59")
        datetime.time(23, 59, 59)
    """
    if isinstance(value, dt.time):
        return value
    match = _CLOCK_RE.fullmatch(value.strip()) if isinstance(value, str) else None
    if match:
        hour, minute, second = (int(part or 0) for part in match.groups())
        if hour <= 23 and minute <= 59 and second <= 59:
            return dt.time(hour, minute, second)
    raise ValidationError(f"Invalid time '{value}': expected HH:MM or HH:MM:SS in 24-hour format")


def clock_minutes(time: dt.time) -> float:
    """Minutes since midnight, seconds included as a fraction.

    Example:
        >>> clock_minutes(dt.time(9, 30))
        570.0
    """
    return float(time.hour * 60 + time.minute) + time.second / 60


@dataclass(frozen=True)
class DerivedDuration:
    """Hours derived from a TimeRange.

    Attributes:
        total_hours: Gross elapsed time, break included
        billable_hours: Net worked time, break excluded
    """

    total_hours: float
    billable_hours: float

    @classmethod
    def from_minutes(cls, worked_minutes: float, break_minutes: float) -> "DerivedDuration":
        billable = worked_minutes / MINUTES_PER_HOUR
        return cls(total_hours=billable + break_minutes / MINUTES_PER_HOUR, billable_hours=billable)

    @property
    def break_hours(self) -> float:
        return self.total_hours - self.billable_hours


@dataclass(frozen=True)
class TimeRange:
    """One day's work: date, start, end and break in minutes. Same day, no timezone."""

    date: dt.date
    start: dt.time
    end: dt.time
    break_minutes: float = 0

    def worked_minutes(self) -> float:
        return clock_minutes(self.end) - clock_minutes(self.start) - self.break_minutes

    def duration(self) -> DerivedDuration:
        """Derive total and billable hours.

        Raises:
            InvalidTimeRange: If the break is negative or net worked time is zero or negative

        Example:
            >>> TimeRange(dt.date(2025, 1, 29), dt.time(9), dt.time(18), 60).duration()
            DerivedDuration(total_hours=9.0, billable_hours=8.0)
        """
        worked = self.worked_minutes()
        if self.break_minutes < 0 or worked <= 0:
            raise InvalidTimeRange(
                self.start.strftime("%H:%M"), self.end.strftime("%H:%M"), self.break_minutes
            )
        return DerivedDuration.from_minutes(worked, self.break_minutes)


@dataclass(frozen=True)
class Assignment:
    """Who the work is booked against. All three ids are required."""

    client_id: str
    project_id: str
    category_id: str

    def __post_init__(self):
        missing = [
            name for name in ("client_id", "project_id", "category_id")
            if not isinstance(getattr(self, name), str) or not getattr(self, name).strip()
        ]
        if missing:
            raise ValidationError(f"{', '.join(missing)} must be a non-empty string", fields=tuple(missing))


def derive_for_create(
    assignment: Assignment,
    time_range: TimeRange,
    *,
    employee_id: str,
    sell_price: float | None,
    sales_tax_pct: float | None,
    note: str | None = None,
    location_id: str | None = None,
    billable_id: str | None = None,
    wire_format: WireFormat = WireFormat(),
) -> TimesheetPayload:
    """Build the payload for a new timesheet.

    The sell price is whatever the rate lookup returned for this client and
    employee; it is placed into the payload as-is.

    Args:
        assignment: Client, project and category ids
        time_range: Date, start, end and break
        employee_id: Resolved employee identity
        sell_price: Unit rate from the rate lookup
        sales_tax_pct: Sales-tax fraction (0.1 for 10%)
        note: Description of the work
        location_id: Work location id
        billable_id: Billable category id
        wire_format: Output encoding for times and the break

    Returns:
        TimesheetPayload without a TimeID

    Raises:
        InvalidTimeRange: If net worked time is zero or negative

    Example:
        >>> payload = derive_for_create(
        ...     Assignment("SSW", "TP", "WEBDEV"),
        ...     TimeRange(dt.date(2025, 1, 29), dt.time(9), dt.time(18), 60),
        ...     employee_id="ABC",
        ...     sell_price=150.0,
        ...     sales_tax_pct=0.1,
        ... )
        >>> payload.time_billable, payload.time_total, payload.time_less
        (8.0, 9.0, 1.0)
    """
    duration = time_range.duration()
    return _build_payload(
        timesheet_id=None,
        employee_id=employee_id,
        assignment=assignment,
        time_range=time_range,
        duration=duration,
        sell_price=sell_price,
        sales_tax_pct=sales_tax_pct,
        note=note,
        location_id=location_id,
        billable_id=billable_id,
        wire_format=wire_format,
    )


def record_time_range(record: TimesheetRecord) -> TimeRange:
    """Rebuild the TimeRange of a stored record (read-back break is in minutes)."""
    return TimeRange(
        date=date_parser.isoparse(record.date_created).date(),
        start=_stored_clock(record.start_time),
        end=_stored_clock(record.end_time),
        break_minutes=record.break_minutes,
    )


def derive_for_update(
    existing: TimesheetRecord,
    overrides: Mapping[str, Any],
    *,
    timesheet_id: int | None = None,
    employee_id: str | None = None,
    default_sales_tax_pct: float | None = None,
    wire_format: WireFormat = WireFormat(),
) -> TimesheetPayload:
    """Merge explicit overrides into a stored record and build the full replacement payload.

    Only keys present in ``overrides`` change; a present empty string (e.g.
    ``note=""``) is honored as a clear, an absent key keeps the stored value.
    The merged range is always validated. Hours are recomputed whenever a
    start, end or break override is present, otherwise the stored hours are
    kept. The sell price is never looked up again.

    Args:
        existing: Record as returned by GetEditTimesheetsView
        overrides: Explicitly provided fields, keyed by tool argument name
        timesheet_id: Id to replace, defaults to the record's own
        employee_id: Resolved employee identity, defaults to the record's own
        default_sales_tax_pct: Used when the record carries no sales tax
        wire_format: Output encoding for times and the break

    Returns:
        TimesheetPayload including TimeID

    Raises:
        ValidationError: On unknown override keys, empty assignment ids or a bad date/time
        InvalidTimeRange: If the merged range has no positive worked time
    """
    unknown = sorted(set(overrides) - UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown update fields: {', '.join(unknown)}", fields=tuple(unknown))

    current = record_time_range(existing)
    time_range = TimeRange(
        date=_as_date(overrides["date"]) if "date" in overrides else current.date,
        start=parse_clock_time(overrides["start_time"]) if "start_time" in overrides else current.start,
        end=parse_clock_time(overrides["end_time"]) if "end_time" in overrides else current.end,
        break_minutes=overrides.get("break_minutes", current.break_minutes),
    )
    duration = time_range.duration()
    if (
        TIME_AFFECTING_FIELDS.isdisjoint(overrides)
        and existing.total_hours is not None
        and existing.billable_hours is not None
    ):
        duration = DerivedDuration(existing.total_hours, existing.billable_hours)

    assignment = Assignment(
        client_id=overrides.get("client_id", existing.client_id),
        project_id=overrides.get("project_id", existing.project_id),
        category_id=overrides.get("category_id", existing.category_id),
    )
    sales_tax_pct = existing.sales_tax_pct if existing.sales_tax_pct is not None else default_sales_tax_pct

    return _build_payload(
        timesheet_id=timesheet_id if timesheet_id is not None else existing.timesheet_id,
        employee_id=employee_id or existing.employee_id,
        assignment=assignment,
        time_range=time_range,
        duration=duration,
        sell_price=existing.sell_price,
        sales_tax_pct=sales_tax_pct,
        note=overrides.get("note", existing.note),
        location_id=overrides.get("location_id", existing.location_id),
        billable_id=overrides.get("billable_id", existing.billable_id),
        wire_format=wire_format,
    )


def _build_payload(
    *,
    timesheet_id: int | None,
    employee_id: str,
    assignment: Assignment,
    time_range: TimeRange,
    duration: DerivedDuration,
    sell_price: float | None,
    sales_tax_pct: float | None,
    note: str | None,
    location_id: str | None,
    billable_id: str | None,
    wire_format: WireFormat,
) -> TimesheetPayload:
    return TimesheetPayload(
        timesheet_id=timesheet_id,
        employee_id=employee_id,
        client_id=assignment.client_id,
        project_id=assignment.project_id,
        category_id=assignment.category_id,
        location_id=location_id,
        billable_id=billable_id,
        date_created=time_range.date.isoformat(),
        time_start=wire_format.encode_time(time_range.date, time_range.start),
        time_end=wire_format.encode_time(time_range.date, time_range.end),
        time_less=wire_format.encode_break(time_range.break_minutes),
        time_total=duration.total_hours,
        time_billable=duration.billable_hours,
        sell_price=sell_price,
        sales_tax_pct=sales_tax_pct,
        notes=note,
    )


def _as_date(value: str | dt.date) -> dt.date:
    if isinstance(value, dt.date):
        return value
    try:
        return dt.date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date '{value}': expected YYYY-MM-DD", fields=("date",)) from None


def _stored_clock(value: str) -> dt.time:
    # GetEditTimesheetsView returns either "09:00:00" or "2025-01-29T09:00:00"
    if "T" in value:
        return date_parser.isoparse(value).time().replace(tzinfo=None)
    return dt.time.fromisoformat(value)
