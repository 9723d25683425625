"""TimePRO MCP server: exposes TimePRO timesheets as MCP tools over stdio."""
import asyncio
import logging
import sys

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolRequest, CallToolResult, ServerResult, TextContent, Tool

from . import __version__
from .config import Settings, load_settings
from .dispatcher import Dispatcher
from .errors import ConfigurationError
from .logging_config import configure_logging
from .routing import ToolContext
from .timepro import TimeProClient
from .tools import schemas

logger = logging.getLogger(__name__)


def create_server(dispatcher: Dispatcher) -> Server:
    server = Server("timepro-mcp-server", version=__version__)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return schemas

    # Registered as a raw request handler: McpError raised by the dispatcher
    # must reach the session as a JSON-RPC error, code and data intact.
    async def call_tool(req: CallToolRequest) -> ServerResult:
        result = await dispatcher.call(req.params.name, req.params.arguments)
        return ServerResult(
            CallToolResult(content=[TextContent(type="text", text=result.text)], isError=result.is_error)
        )

    server.request_handlers[CallToolRequest] = call_tool

    return server


def build_dispatcher(settings: Settings) -> Dispatcher:
    ctx = ToolContext(
        client=TimeProClient.from_settings(settings),
        wire_format=settings.wire_format,
        sales_tax_pct=settings.sales_tax_pct,
    )
    return Dispatcher(ctx)


async def serve(settings: Settings) -> None:
    server = create_server(build_dispatcher(settings))
    async with stdio_server() as (read_stream, write_stream):
        logger.info("TimePRO MCP Server running on stdio (%s)", settings.api_url)
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    configure_logging()
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error("%s", e)
        sys.exit(1)

    configure_logging(settings.log_level)
    try:
        asyncio.run(serve(settings))
    except KeyboardInterrupt:
        pass
    except Exception:
        logger.exception("Fatal error")
        sys.exit(1)


if __name__ == "__main__":
    main()
