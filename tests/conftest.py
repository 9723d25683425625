"""
Global pytest configuration and fixtures.
"""
from typing import Any, Dict
from unittest.mock import AsyncMock

import pytest

from timepro_mcp.dispatcher import Dispatcher
from timepro_mcp.routing import ToolContext


@pytest.fixture
def test_env_vars() -> Dict[str, str]:
    """Environment for a fully configured server."""
    return {
        "TIMEPRO_API_URL": "https://ssw.sswtimepro.com/",
        "TIMEPRO_API_KEY": "test-api-key",
        "TIMEPRO_TENANT_ID": "test-tenant",
        "LOG_LEVEL": "debug",
    }


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No TIMEPRO_* variables and no .env file in the working directory."""
    for key in ("TIMEPRO_API_URL", "TIMEPRO_API_KEY", "TIMEPRO_TENANT_ID", "TIMEPRO_TIME_FORMAT",
                "TIMEPRO_BREAK_UNIT", "TIMEPRO_SALES_TAX_PCT", "TIMEPRO_REQUEST_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def mock_env(clean_env, test_env_vars, monkeypatch):
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)
    yield test_env_vars


@pytest.fixture
def stored_record() -> Dict[str, Any]:
    """A timesheet as returned by GetEditTimesheetsView (TimeLess in minutes)."""
    return {
        "TimesheetID": 186232353,
        "EmpID": "ABC",
        "EmpName": "Alice Brown",
        "ClientID": "SSW",
        "ClientName": "SSW",
        "ProjectID": "TP",
        "ProjectType": "T",
        "CategoryID": "WEBDEV",
        "CategoryName": "Web Development",
        "IsNonWorkingCategory": False,
        "LocationID": "Home",
        "Location": "Home",
        "BillableID": "B",
        "DateCreated": "2025-01-29T00:00:00",
        "DateUpdated": "2025-01-29T18:05:00",
        "StartTime": "09:00:00",
        "EndTime": "18:00:00",
        "TimeLess": 60,
        "TimeTotal": 9.0,
        "TimeBillable": 8.0,
        "SellPrice": 150.0,
        "SalesTaxPct": 0.1,
        "Note": "Sprint review",
        "IsOverridden": False,
        "IsOverwriteRate": False,
        "InvoiceID": None,
    }


@pytest.fixture
def mock_client(stored_record) -> AsyncMock:
    """A fully mocked TimeProClient."""
    client = AsyncMock()
    client.get_employee_id.return_value = "ABC"
    client.search_clients.return_value = [{"Value": "SSW", "Text": "SSW"}]
    client.get_projects_for_client.return_value = [{"ProjectID": "TP", "ProjectName": "TimePRO", "ClientID": "SSW"}]
    client.get_recent_projects.return_value = [{"ProjectID": "TP", "ProjectName": "TimePRO", "ClientID": "SSW"}]
    client.get_categories.return_value = [{"CategoryID": "WEBDEV", "CategoryName": "Web Development"}]
    client.get_locations.return_value = [{"LocationID": "Home", "LocationName": "Home"}]
    client.get_timesheet_defaults.return_value = {"EmpID": "ABC", "ClientID": "SSW"}
    client.get_client_rate.return_value = {"EmpID": "ABC", "ClientID": "SSW", "Rate": 150.0, "PrepaidRate": 0}
    client.list_timesheets.return_value = [
        {"id": 186232353, "title": "SSW - TimePRO", "start": "2025-01-29T09:00:00", "end": "2025-01-29T18:00:00"}
    ]
    client.get_timesheet.return_value = stored_record
    client.create_timesheet.return_value = {
        "TimesheetID": 186232400,
        "ClientName": "SSW",
        "ProjectID": "TP",
        "DateCreated": "2025-01-30T00:00:00",
        "TimeBillable": 8.0,
    }
    client.update_timesheet.return_value = None
    client.delete_timesheet.return_value = None
    return client


@pytest.fixture
def dispatcher(mock_client) -> Dispatcher:
    return Dispatcher(ToolContext(client=mock_client))


def pytest_collection_modifyitems(config, items):
    """Mark everything under tests/unit/ as a unit test."""
    for item in items:
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
