"""MCP server for TimePRO timesheets."""

__version__ = "1.0.0"
