"""Employee directory: the authoritative flat set of employee records.

Records live either in process memory or in an Azure Cosmos DB container.
The directory knows nothing about the chart; it only stores and returns
records in a stable iteration order.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

from azure.cosmos.aio import CosmosClient
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from app.core.config import Settings
from app.models.employee import PLACEHOLDER_CREDENTIAL, Employee, Role

logger = logging.getLogger(__name__)

# Employee attribute names → Cosmos DB document keys
_FIELD_MAP: list[tuple[str, str]] = [
    ("first_name", "firstName"),
    ("last_name", "lastName"),
    ("email", "email"),
    ("phone", "phone"),
    ("position", "post"),
    ("department", "service"),
    ("status", "status"),
    ("supervisor_name", "supervisor"),
    ("credential", "password"),
]


class EmployeeNotFoundError(LookupError):
    label = "Employee"

    def __init__(self, employee_id: str) -> None:
        super().__init__(f"{self.label} '{employee_id}' not found")
        self.employee_id = employee_id


def new_employee_id() -> str:
    return uuid.uuid4().hex


class EmployeeDirectory:
    def __init__(self) -> None:
        self.client: CosmosClient | None = None
        self.container: Any = None
        self.backend: str = "memory"
        self.initialized: bool = False
        self._records: dict[str, Employee] = {}

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if settings.DIRECTORY_BACKEND == "cosmos":
            endpoint = settings.COSMOS_DB_ENDPOINT
            key = settings.COSMOS_DB_KEY
            if endpoint and key:
                container_name = settings.COSMOS_DB_EMPLOYEES_CONTAINER
                self.client = CosmosClient(endpoint, key)
                db = self.client.get_database_client(settings.COSMOS_DB_DATABASE)
                self.container = db.get_container_client(container_name)
                self.backend = "cosmos"
                self.initialized = True
                logger.info("EmployeeDirectory initialized (container=%s)", container_name)
                return
            logger.warning("Cosmos DB credentials missing, falling back to in-memory directory")

        self.backend = "memory"
        self.initialized = True
        logger.info("EmployeeDirectory initialized (in-memory)")

    async def close(self) -> None:
        if self.client:
            await self.client.close()
        self.client = None
        self.container = None
        self.backend = "memory"
        self.initialized = False
        self._records.clear()

    async def list_employees(self) -> list[Employee]:
        if not self.container:
            return [record.model_copy(deep=True) for record in self._records.values()]

        results: list[Employee] = []
        async for item in self.container.query_items(
            query="SELECT * FROM c",
            enable_cross_partition_query=True,
        ):
            results.append(self._transform_employee(item))
        return results

    async def get_employee(self, employee_id: str) -> Employee | None:
        if not self.container:
            record = self._records.get(employee_id)
            return record.model_copy(deep=True) if record else None

        try:
            item = await self.container.read_item(item=employee_id, partition_key=employee_id)
        except CosmosResourceNotFoundError:
            return None
        return self._transform_employee(item)

    async def add_employee(self, employee: Employee) -> Employee:
        if not self.container:
            self._records[employee.id] = employee.model_copy(deep=True)
        else:
            await self.container.create_item(body=self._to_document(employee))
        logger.debug("Stored employee %s", employee.id)
        return employee

    async def save_employee(self, employee: Employee) -> Employee:
        if not self.container:
            if employee.id not in self._records:
                raise EmployeeNotFoundError(employee.id)
            self._records[employee.id] = employee.model_copy(deep=True)
            return employee

        try:
            await self.container.replace_item(item=employee.id, body=self._to_document(employee))
        except CosmosResourceNotFoundError as err:
            raise EmployeeNotFoundError(employee.id) from err
        return employee

    async def delete_employee(self, employee_id: str) -> None:
        if not self.container:
            if self._records.pop(employee_id, None) is None:
                raise EmployeeNotFoundError(employee_id)
            return

        try:
            await self.container.delete_item(item=employee_id, partition_key=employee_id)
        except CosmosResourceNotFoundError as err:
            raise EmployeeNotFoundError(employee_id) from err

    async def check_connection(self) -> bool:
        if not self.container:
            return self.initialized
        try:
            async for _ in self.container.query_items(
                query="SELECT VALUE COUNT(1) FROM c",
                enable_cross_partition_query=True,
            ):
                return True
            return True
        except Exception:
            logger.exception("Cosmos DB connection check failed")
            return False

    def _transform_employee(self, raw: dict[str, Any]) -> Employee:
        data: dict[str, Any] = {"id": str(raw.get("id") or "unknown")}

        for python_key, cosmos_key in _FIELD_MAP:
            value = raw.get(cosmos_key)
            if value is not None:
                data[python_key] = value

        roles = raw.get("roles")
        if isinstance(roles, list):
            # Stored roles may carry a "ROLE_" prefix from older portal data
            data["roles"] = [
                Role(name) for name in (str(r).removeprefix("ROLE_") for r in roles) if name in Role.__members__
            ]

        return Employee(**data)

    def _to_document(self, employee: Employee) -> dict[str, Any]:
        doc: dict[str, Any] = {"id": employee.id}
        for python_key, cosmos_key in _FIELD_MAP:
            doc[cosmos_key] = getattr(employee, python_key)
        doc["roles"] = [role.value for role in employee.roles]
        if not doc["password"]:
            doc["password"] = PLACEHOLDER_CREDENTIAL
        return doc


employee_directory = EmployeeDirectory()
