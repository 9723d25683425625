"""Read-only lookups: clients, projects, categories, locations and defaults."""
from ..arguments import ListClientsArgs, ListProjectsArgs, NoArgs, TimesheetDefaultsArgs
from ..routing import ToolContext, ToolRouter

router = ToolRouter()


@router.tool("list_clients", ListClientsArgs)
async def list_clients(args: ListClientsArgs, ctx: ToolContext):
    return await ctx.client.search_clients(args.search_text)


@router.tool("list_projects", ListProjectsArgs)
async def list_projects(args: ListProjectsArgs, ctx: ToolContext):
    return await ctx.client.get_projects_for_client(args.client_id)


@router.tool("list_recent_projects")
async def list_recent_projects(args: NoArgs, ctx: ToolContext):
    return await ctx.client.get_recent_projects()


@router.tool("list_categories")
async def list_categories(args: NoArgs, ctx: ToolContext):
    return await ctx.client.get_categories()


@router.tool("list_locations")
async def list_locations(args: NoArgs, ctx: ToolContext):
    return await ctx.client.get_locations()


@router.tool("get_timesheet_defaults", TimesheetDefaultsArgs)
async def get_timesheet_defaults(args: TimesheetDefaultsArgs, ctx: ToolContext):
    return await ctx.client.get_timesheet_defaults(args.date)
