"""Wire models for TimePRO timesheet records."""
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class TimesheetRecord(BaseModel):
    """A timesheet as read back from GetEditTimesheetsView.

    TimeLess is always minutes on the read path.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    timesheet_id: int | None = Field(None, validation_alias=AliasChoices("TimesheetID", "TimeID"))
    employee_id: str | None = Field(None, alias="EmpID")
    client_id:   str = Field("", alias="ClientID")
    client_name: str | None = Field(None, alias="ClientName")
    project_id:  str = Field("", alias="ProjectID")
    category_id: str = Field("", alias="CategoryID")
    location_id: str | None = Field(None, alias="LocationID")
    billable_id: str | None = Field(None, alias="BillableID")
    date_created: str = Field(alias="DateCreated")
    start_time:  str = Field(validation_alias=AliasChoices("StartTime", "TimeStart"))
    end_time:    str = Field(validation_alias=AliasChoices("EndTime", "TimeEnd"))
    break_minutes: float = Field(0, alias="TimeLess")
    total_hours:   float | None = Field(None, alias="TimeTotal")
    billable_hours: float | None = Field(None, alias="TimeBillable")
    sell_price:    float | None = Field(None, alias="SellPrice")
    sales_tax_pct: float | None = Field(None, alias="SalesTaxPct")
    note: str | None = Field(None, validation_alias=AliasChoices("Note", "Notes"))

    @field_validator("break_minutes", mode="before")
    @classmethod
    def null_break(cls, v):
        return 0 if v is None else v


class TimesheetPayload(BaseModel):
    """Body for SaveTimesheet. Serialize with `to_wire()`."""

    model_config = ConfigDict(populate_by_name=True)

    timesheet_id:  int | None = Field(None, alias="TimeID")
    employee_id:   str = Field(alias="EmpID")
    client_id:     str = Field(alias="ClientID")
    project_id:    str = Field(alias="ProjectID")
    category_id:   str = Field(alias="CategoryID")
    location_id:   str | None = Field(None, alias="LocationID")
    billable_id:   str | None = Field(None, alias="BillableID")
    date_created:  str = Field(alias="DateCreated")
    time_start:    str = Field(alias="TimeStart")
    time_end:      str = Field(alias="TimeEnd")
    time_less:     float = Field(alias="TimeLess")
    time_total:    float = Field(alias="TimeTotal")
    time_billable: float = Field(alias="TimeBillable")
    sell_price:    float | None = Field(None, alias="SellPrice")
    sales_tax_pct: float | None = Field(None, alias="SalesTaxPct")
    notes:         str | None = Field(None, alias="Notes")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
