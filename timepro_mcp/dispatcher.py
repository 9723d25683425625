"""Runs one tool call and folds the outcome into a single text payload."""
import json
import logging
from typing import Any, Mapping, NamedTuple

from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData

from .arguments import decode
from .errors import RemoteServiceError, ValidationError
from .handlers import routes as default_routes
from .routing import ToolContext, ToolRoute

logger = logging.getLogger(__name__)


class ToolResult(NamedTuple):
    text: str
    is_error: bool = False


def render(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def failure(message: str) -> ToolResult:
    return ToolResult(render({"success": False, "error": message}), is_error=True)


class Dispatcher:
    """Decode arguments, run the handler, render the result.

    Bad arguments (including an invalid time range) become an INVALID_PARAMS
    protocol error and never reach TimePRO. TimePRO errors and anything
    unexpected become a failed tool result so the assistant can react.
    """

    def __init__(self, ctx: ToolContext, routes: Mapping[str, ToolRoute] | None = None):
        self.ctx = ctx
        self.routes = dict(default_routes if routes is None else routes)

    async def call(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        route = self.routes.get(name)
        if route is None:
            raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))

        logger.info("Tool call: %s", name)
        try:
            args = decode(route.arguments, arguments)
            result = await route.endpoint(args, self.ctx)
        except ValidationError as e:
            logger.info("Rejected %s: %s", name, e)
            raise McpError(
                ErrorData(code=INVALID_PARAMS, message=str(e), data={"fields": list(e.fields)})
            ) from e
        except RemoteServiceError as e:
            logger.warning("%s failed: %s", name, e)
            return failure(str(e))
        except Exception as e:
            logger.exception("Unexpected error in %s", name)
            return failure(str(e) or type(e).__name__)
        return ToolResult(render(result))
