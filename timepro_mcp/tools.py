"""Tool catalogue: one table of tools and one table of parameters."""
from dataclasses import dataclass, field
from typing import Mapping

from mcp.types import Tool

# ---------------- parameter definitions -----------------
PARAMETERS: dict[str, dict] = {
    "search_text": {
        "type": "string",
        "description": "Filter clients by name (optional). Leave empty to list all clients.",
    },
    "client_id": {
        "type": "string",
        "description": "Client ID string from list_clients Value field (e.g., 'SSW', 'LR8R0L')",
    },
    "project_id": {
        "type": "string",
        "description": "Project ID string from list_projects ProjectID field (e.g., 'TP', 'BM1001')",
    },
    "category_id": {
        "type": "string",
        "description": "Category ID string from list_categories CategoryID field (e.g., 'BOT', 'MTAS', 'WEBDEV')",
    },
    "date": {
        "type": "string",
        "description": "Date in YYYY-MM-DD format (e.g., '2025-01-29'). 'today', 'yesterday' and 'tomorrow' are also accepted.",
    },
    "start_date": {
        "type": "string",
        "description": "Start date YYYY-MM-DD (e.g., '2025-01-01'). TIP: use the last 2-4 weeks to find recent project usage",
    },
    "end_date": {
        "type": "string",
        "description": "End date YYYY-MM-DD (e.g., '2025-01-31')",
    },
    "start_time": {
        "type": "string",
        "description": "Start time in 24-hour HH:MM format. Usually '09:00'. Examples: '08:30', '10:00'",
    },
    "end_time": {
        "type": "string",
        "description": "End time in 24-hour HH:MM format, same day as start. Usually '18:00' (8 billable hours with a 1 hour break)",
    },
    "break_minutes": {
        "type": "number",
        "description": "Break/lunch time in minutes. Standard is 60 for 09:00-18:00 = 8 billable hours. Must be less than the time between start and end. 0 or omitted for no break.",
    },
    "location_id": {
        "type": "string",
        "description": "Location ID from list_locations: 'SSW' (office), 'Client' (client site), 'Home' (remote), 'Travel', 'Other'",
    },
    "billable_id": {
        "type": "string",
        "description": "Billable category ID (optional, usually auto-determined)",
    },
    "note": {
        "type": "string",
        "description": "Description of work performed (optional but recommended)",
    },
    "timesheet_id": {
        "type": "number",
        "description": "Numeric timesheet ID from list_timesheets (e.g., 186232353)",
    },
}

TIMESHEET_FIELDS = (
    "client_id", "project_id", "category_id", "date", "start_time", "end_time",
    "break_minutes", "location_id", "billable_id", "note",
)

UPDATE_DESCRIPTIONS = {
    "client_id":     "New client ID string (e.g., 'SSW')",
    "project_id":    "New project ID string (e.g., 'TP')",
    "category_id":   "New category ID string (e.g., 'BOT')",
    "date":          "New date in YYYY-MM-DD format",
    "start_time":    "New start time in HH:MM format (e.g., '09:00')",
    "end_time":      "New end time in HH:MM format (e.g., '17:00')",
    "break_minutes": "New break time in minutes",
    "location_id":   "New location ID (e.g., 'SSW', 'Client', 'Home')",
    "billable_id":   "New billable category ID",
    "note":          "New description of work performed. An empty string clears the note; omit to keep it.",
    "timesheet_id":  "Numeric timesheet ID to update (e.g., 186232353)",
}


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    required: tuple[str, ...] = ()
    optional: tuple[str, ...] = ()
    descriptions: Mapping[str, str] = field(default_factory=dict)

    def input_schema(self) -> dict:
        properties = {}
        for param in self.required + self.optional:
            prop = dict(PARAMETERS[param])
            if param in self.descriptions:
                prop["description"] = self.descriptions[param]
            properties[param] = prop
        schema = {"type": "object", "properties": properties}
        if self.required:
            schema["required"] = list(self.required)
        return schema

    def to_tool(self) -> Tool:
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema())


# ---------------- tool table -----------------
CATALOGUE: list[ToolSpec] = [
    ToolSpec(
        "list_clients",
        "Search for clients/customers to use in timesheets. Returns an array with Value (client ID string "
        "like 'SSW' or 'LR8R0L') and Text (display name). Use the Value field as client_id when creating timesheets.",
        optional=("search_text",),
    ),
    ToolSpec(
        "list_projects",
        "Get projects for a specific client. Returns ProjectID and ProjectName. TIP: if several projects exist "
        "or names are unclear, use list_recent_projects or list_timesheets to find recent bookings for this client "
        "and reuse the same ProjectID. Projects starting with 'zz' or 'yy' are archived.",
        required=("client_id",),
        descriptions={"client_id": "Client ID from list_clients Value field (e.g., 'SSW', 'LR8R0L')"},
    ),
    ToolSpec(
        "list_recent_projects",
        "Get the projects the current user booked time against most recently. Returns ProjectID, ProjectName "
        "and ClientID. Useful to pick the right project for a client without asking.",
    ),
    ToolSpec(
        "list_categories",
        "Get available timesheet categories. Returns an array with CategoryID (string like 'BOT', 'MTAS', 'WEBDEV') "
        "and CategoryName. Use CategoryID as category_id when creating timesheets.",
    ),
    ToolSpec(
        "list_locations",
        "Get available work locations. Returns an array with LocationID (string like 'SSW', 'Client', 'Home') "
        "and LocationName. Use LocationID as location_id when creating timesheets.",
    ),
    ToolSpec(
        "get_timesheet_defaults",
        "Get default values based on the last timesheet, including client, project, location and rates. "
        "NOTE: do not copy TimeLess from this response into break_minutes; only set break_minutes if the user asks.",
        required=("date",),
    ),
    ToolSpec(
        "list_timesheets",
        "List the user's timesheets in a date range. Returns id, title (client + project name) and start/end times. "
        "Useful for finding the project used for a client recently, verifying a timesheet was created, and finding "
        "timesheet ids for updates/deletes. Use get_timesheet with an id for full details.",
        required=("start_date", "end_date"),
    ),
    ToolSpec(
        "get_timesheet",
        "Get full details of a specific timesheet including client, project, category, times, notes and billing info. "
        "Use the numeric id from list_timesheets. TimeLess (break) is in minutes.",
        required=("timesheet_id",),
    ),
    ToolSpec(
        "create_timesheet",
        "Create a new timesheet entry. WORKFLOW: 1) list_clients to find client_id, 2) list_projects to find "
        "project_id (if unclear, reuse the project from recent bookings for that client), 3) list_categories to find "
        "category_id. Typical day: 09:00-18:00 with a 60 minute break = 8 billable hours. Rate and sales tax are "
        "filled in automatically.",
        required=("client_id", "project_id", "category_id", "date", "start_time", "end_time", "location_id"),
        optional=("break_minutes", "billable_id", "note"),
    ),
    ToolSpec(
        "update_timesheet",
        "Update an existing timesheet. Only provide the fields you want to change; everything else keeps its "
        "current value. Hours are recalculated when times or the break change. The rate is never changed. "
        "Use get_timesheet first to see current values.",
        required=("timesheet_id",),
        optional=TIMESHEET_FIELDS,
        descriptions=UPDATE_DESCRIPTIONS,
    ),
    ToolSpec(
        "delete_timesheet",
        "Permanently delete a timesheet. This cannot be undone.",
        required=("timesheet_id",),
        descriptions={"timesheet_id": "Numeric timesheet ID to delete (e.g., 186232353)"},
    ),
]

schemas: list[Tool] = [spec.to_tool() for spec in CATALOGUE]
