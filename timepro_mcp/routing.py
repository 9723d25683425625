"""Tool routing: handlers register themselves by tool name with a decorator."""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, NamedTuple

from .arguments import NoArgs, ToolArguments
from .derivation import WireFormat
from .timepro import TimeProClient


@dataclass
class ToolContext:
    """What a handler needs besides its arguments."""

    client: TimeProClient
    wire_format: WireFormat = WireFormat()
    sales_tax_pct: float = 0.1


Endpoint = Callable[[Any, ToolContext], Awaitable[Any]]


class ToolRoute(NamedTuple):
    name: str
    arguments: type[ToolArguments]
    endpoint: Endpoint


class ToolRouter:
    def __init__(self):
        self.routes: dict[str, ToolRoute] = {}

    def tool(self, name: str, arguments: type[ToolArguments] = NoArgs):
        """Register the decorated coroutine as the handler for `name`."""
        def decorator(func: Endpoint) -> Endpoint:
            if name in self.routes:
                raise ValueError(f"Tool {name!r} registered twice")
            self.routes[name] = ToolRoute(name, arguments, func)
            return func
        return decorator
