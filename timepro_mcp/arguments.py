"""Argument models for each tool. Decoding happens before any remote call."""
import datetime as dt
from datetime import date, datetime, timedelta
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from .derivation import parse_clock_time
from .errors import ValidationError

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def resolve_date(v: Any) -> str:
    """Resolve 'today'/'yesterday'/'tomorrow' or an ISO date to YYYY-MM-DD."""
    if isinstance(v, date):
        return v.isoformat()
    if not isinstance(v, str):
        raise ValueError("expected a date in YYYY-MM-DD format")
    v_lower = v.lower().strip()
    if v_lower in ["today", "now"]:
        return date.today().isoformat()
    if v_lower == "yesterday":
        return (date.today() - timedelta(days=1)).isoformat()
    if v_lower == "tomorrow":
        return (date.today() + timedelta(days=1)).isoformat()
    try:
        return datetime.fromisoformat(v.strip()).date().isoformat()
    except ValueError:
        raise ValueError(f"Invalid date '{v}': expected YYYY-MM-DD") from None


class ToolArguments(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ListClientsArgs(ToolArguments):
    search_text: str = ""

    @field_validator("search_text", mode="before")
    @classmethod
    def null_to_empty(cls, v):
        return v or ""


class ListProjectsArgs(ToolArguments):
    client_id: NonEmptyStr


class NoArgs(ToolArguments):
    pass


class TimesheetDefaultsArgs(ToolArguments):
    date: str

    @field_validator("date", mode="before")
    @classmethod
    def iso_date(cls, v):
        return resolve_date(v)


class ListTimesheetsArgs(ToolArguments):
    start_date: str
    end_date:   str

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def iso_date(cls, v):
        return resolve_date(v)

    @model_validator(mode="after")
    def ordered(self):
        if self.start_date > self.end_date:
            raise ValueError(f"start_date {self.start_date} is after end_date {self.end_date}")
        return self


class TimesheetIdArgs(ToolArguments):
    timesheet_id: int = Field(gt=0)


class CreateTimesheetArgs(ToolArguments):
    client_id:     NonEmptyStr
    project_id:    NonEmptyStr
    category_id:   NonEmptyStr
    date:          str
    start_time:    dt.time
    end_time:      dt.time
    break_minutes: float | None = Field(None, ge=0)
    location_id:   NonEmptyStr
    billable_id:   str | None = None
    note:          str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def iso_date(cls, v):
        return resolve_date(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def clock_time(cls, v):
        return parse_clock_time(v)


class UpdateTimesheetArgs(TimesheetIdArgs):
    client_id:     NonEmptyStr | None = None
    project_id:    NonEmptyStr | None = None
    category_id:   NonEmptyStr | None = None
    date:          str | None = None
    start_time:    dt.time | None = None
    end_time:      dt.time | None = None
    break_minutes: float | None = Field(None, ge=0)
    location_id:   str | None = None
    billable_id:   str | None = None
    note:          str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def iso_date(cls, v):
        return None if v is None else resolve_date(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def clock_time(cls, v):
        return None if v is None else parse_clock_time(v)

    def overrides(self) -> dict[str, Any]:
        """Fields the caller actually sent. An explicit null counts as not sent."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name != "timesheet_id" and getattr(self, name) is not None
        }


def decode(model: type[ToolArguments], arguments: dict[str, Any] | None) -> ToolArguments:
    """Validate a raw argument bag into `model`, raising ValidationError naming the bad fields."""
    try:
        return model.model_validate(arguments or {})
    except PydanticValidationError as e:
        fields, problems = [], []
        for err in e.errors():
            name = ".".join(str(part) for part in err["loc"]) or "arguments"
            fields.append(name)
            if err["type"] == "missing":
                problems.append(f"{name} is required")
            else:
                problems.append(f"{name}: {err['msg'].removeprefix('Value error, ')}")
        raise ValidationError(f"Invalid arguments: {'; '.join(problems)}", fields=tuple(fields)) from None
