"""Timesheet CRUD tools."""
import logging
from datetime import date

from ..arguments import CreateTimesheetArgs, ListTimesheetsArgs, TimesheetIdArgs, UpdateTimesheetArgs
from ..derivation import Assignment, TimeRange, derive_for_create, derive_for_update
from ..models import TimesheetRecord
from ..routing import ToolContext, ToolRouter

logger = logging.getLogger(__name__)

router = ToolRouter()


@router.tool("list_timesheets", ListTimesheetsArgs)
async def list_timesheets(args: ListTimesheetsArgs, ctx: ToolContext):
    return await ctx.client.list_timesheets(args.start_date, args.end_date)


@router.tool("get_timesheet", TimesheetIdArgs)
async def get_timesheet(args: TimesheetIdArgs, ctx: ToolContext):
    return await ctx.client.get_timesheet(args.timesheet_id)


@router.tool("create_timesheet", CreateTimesheetArgs)
async def create_timesheet(args: CreateTimesheetArgs, ctx: ToolContext):
    """Create a timesheet. The rate is looked up here and only here."""
    time_range = TimeRange(
        date=date.fromisoformat(args.date),
        start=args.start_time,
        end=args.end_time,
        break_minutes=args.break_minutes or 0,
    )
    assignment = Assignment(args.client_id, args.project_id, args.category_id)
    time_range.duration()  # reject bad ranges before touching TimePRO

    emp_id = await ctx.client.get_employee_id()
    rate_info = await ctx.client.get_client_rate(args.client_id)

    payload = derive_for_create(
        assignment,
        time_range,
        employee_id=emp_id,
        sell_price=rate_info.get("Rate") if isinstance(rate_info, dict) else None,
        sales_tax_pct=ctx.sales_tax_pct,
        note=args.note,
        location_id=args.location_id,
        billable_id=args.billable_id,
        wire_format=ctx.wire_format,
    )
    result = await ctx.client.create_timesheet(payload.to_wire())
    logger.info("Created timesheet %s (%s hours)", result.get("TimesheetID"), payload.time_billable)
    return {
        "success": True,
        "timesheet_id": result.get("TimesheetID"),
        "message": "Timesheet created successfully",
        "details": {
            "id":      result.get("TimesheetID"),
            "client":  result.get("ClientName"),
            "project": result.get("ProjectID"),
            "date":    result.get("DateCreated"),
            "hours":   result.get("TimeBillable"),
        },
    }


@router.tool("update_timesheet", UpdateTimesheetArgs)
async def update_timesheet(args: UpdateTimesheetArgs, ctx: ToolContext):
    """Replace a timesheet with the stored record merged with the fields sent."""
    overrides = args.overrides()
    if "start_time" in overrides and "end_time" in overrides:
        TimeRange(
            date=date.today(),
            start=overrides["start_time"],
            end=overrides["end_time"],
            break_minutes=overrides.get("break_minutes", 0),
        ).duration()

    existing = TimesheetRecord.model_validate(await ctx.client.get_timesheet(args.timesheet_id))
    emp_id = await ctx.client.get_employee_id()
    payload = derive_for_update(
        existing,
        overrides,
        timesheet_id=args.timesheet_id,
        employee_id=emp_id,
        default_sales_tax_pct=ctx.sales_tax_pct,
        wire_format=ctx.wire_format,
    )
    await ctx.client.update_timesheet(payload.to_wire())
    logger.info("Updated timesheet %s (fields: %s)", args.timesheet_id, ", ".join(sorted(overrides)) or "none")
    return {"success": True, "message": f"Timesheet {args.timesheet_id} updated successfully"}


@router.tool("delete_timesheet", TimesheetIdArgs)
async def delete_timesheet(args: TimesheetIdArgs, ctx: ToolContext):
    await ctx.client.delete_timesheet(args.timesheet_id)
    logger.info("Deleted timesheet %s", args.timesheet_id)
    return {"success": True, "message": f"Timesheet {args.timesheet_id} deleted successfully"}
