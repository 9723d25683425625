"""Async client for the TimePRO REST API."""
import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx

from .errors import RemoteServiceError, TimeProError

logger = logging.getLogger(__name__)


class TimeProClient:
    """Thin request/response wrapper around TimePRO.

    One attempt per call, no retries. The employee id is resolved on first
    use and kept for the life of the client.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        tenant_id: str,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.headers = {
            "Content-Type": "application/json",
            "x-timepro-api-key": api_key,
            "x-timepro-tenant-id": tenant_id,
        }
        self.timeout = timeout
        self._transport = transport
        self._employee_id: str | None = None
        self._identity_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings) -> "TimeProClient":
        return cls(settings.api_url, settings.api_key, settings.tenant_id, timeout=settings.request_timeout)

    async def _request(self, method: str, path: str, params: dict | None = None, json_body: dict | None = None) -> Any:
        async with httpx.AsyncClient(
            base_url=self.base_url, headers=self.headers, timeout=self.timeout, transport=self._transport
        ) as client:
            r = await client.request(method, path, params=params, json=json_body)
        logger.debug("%s %s -> %s", method, path, r.status_code)
        if not r.is_success:
            raise RemoteServiceError(r.status_code, r.text or r.reason_phrase)
        if not r.content:
            return {}
        return r.json()

    # --- identity -----------------------------------------------------------
    async def get_employee_id(self) -> str:
        """Resolve the caller's employee id once; concurrent callers share one lookup."""
        if self._employee_id is not None:
            return self._employee_id
        async with self._identity_lock:
            if self._employee_id is None:
                data = await self._request("GET", "/api/Employees/GetEmployeeID")
                emp_id = data.get("EmpID") if isinstance(data, dict) else None
                if not emp_id:
                    raise TimeProError(f"GetEmployeeID returned no EmpID: {data!r}")
                self._employee_id = str(emp_id)
                logger.info("Resolved employee id %s", self._employee_id)
        return self._employee_id

    # --- reference data -----------------------------------------------------
    async def search_clients(self, search_text: str = "") -> list:
        return await self._request(
            "GET", "/api/Timesheets/GetClientListForAddTimesheet", params={"searchText": search_text}
        )

    async def get_projects_for_client(self, client_id: str) -> list:
        return await self._request("GET", f"/api/Projects/Client/{quote(client_id, safe='')}")

    async def get_recent_projects(self) -> list:
        emp_id = await self.get_employee_id()
        return await self._request("GET", "/api/Projects/GetRecentProjects", params={"empId": emp_id})

    async def get_categories(self) -> list:
        return await self._request("GET", "/api/Timesheets/GetTimesheetCategories")

    async def get_locations(self) -> list:
        return await self._request("GET", "/api/Timesheets/GetTimesheetLocation")

    async def get_timesheet_defaults(self, date: str) -> dict:
        emp_id = await self.get_employee_id()
        return await self._request(
            "GET", "/api/Timesheets/GetAddTimesheetsView", params={"empID": emp_id, "date": date}
        )

    async def get_client_rate(self, client_id: str) -> dict:
        emp_id = await self.get_employee_id()
        return await self._request(
            "GET", "/api/Timesheets/GetClientRate", params={"empID": emp_id, "clientID": client_id}
        )

    # --- timesheets ---------------------------------------------------------
    async def list_timesheets(self, start_date: str, end_date: str) -> list:
        emp_id = await self.get_employee_id()
        return await self._request(
            "GET",
            "/api/Timesheets/Summary",
            params={"employeeID": emp_id, "start": start_date, "end": end_date},
        )

    async def get_timesheet(self, timesheet_id: int) -> dict:
        return await self._request("GET", "/api/Timesheets/GetEditTimesheetsView", params={"timeID": timesheet_id})

    async def create_timesheet(self, payload: dict) -> dict:
        return await self._request(
            "POST",
            "/api/Timesheets/SaveTimesheet",
            params={"isEdit": "false", "isSuggested": "false"},
            json_body=payload,
        )

    async def update_timesheet(self, payload: dict) -> None:
        await self._request(
            "POST",
            "/api/Timesheets/SaveTimesheet",
            params={"isEdit": "true", "isSuggested": "false"},
            json_body=payload,
        )

    async def delete_timesheet(self, timesheet_id: int) -> None:
        await self._request("DELETE", f"/api/Timesheets/DeleteTimesheet/{timesheet_id}")
