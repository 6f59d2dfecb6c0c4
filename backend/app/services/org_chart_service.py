"""Organization chart queries and mutations on top of the employee directory."""

from __future__ import annotations

import logging

from app.core.config import Settings, settings as default_settings
from app.models.employee import (
    Employee,
    EmployeeCreate,
    EmployeeUpdate,
    OrgChartEmployee,
    Role,
    SupervisorChoice,
)
from app.services.employee_directory import (
    EmployeeDirectory,
    EmployeeNotFoundError,
    employee_directory,
    new_employee_id,
)
from app.services.hierarchy import (
    ChartNode,
    build_forest,
    employee_full_name,
    parent_map,
    supervisor_choices,
)

logger = logging.getLogger(__name__)

_PLAIN_FIELDS = ("email", "phone", "position", "department")


class SupervisorNotFoundError(EmployeeNotFoundError):
    label = "Supervisor"


def to_chart_employee(employee: Employee, superior_id: str | None = None) -> OrgChartEmployee:
    return OrgChartEmployee(
        id=employee.id,
        name=employee_full_name(employee),
        first_name=employee.first_name or "",
        last_name=employee.last_name or "",
        email=employee.email or "",
        phone=employee.phone or "",
        position=employee.position or "",
        department=employee.department or "",
        superior_id=superior_id,
    )


def serialize_forest(forest: list[ChartNode], superior_id: str | None = None) -> list[OrgChartEmployee]:
    result: list[OrgChartEmployee] = []
    for node in forest:
        item = to_chart_employee(node.employee, superior_id)
        item.children = serialize_forest(node.children, node.id)
        result.append(item)
    return result


def matches_search(employee: Employee, search: str) -> bool:
    needle = search.strip().lower()
    if not needle:
        return True
    name = f"{employee.first_name or ''} {employee.last_name or ''}".lower()
    return needle in name or needle in (employee.email or "").lower()


class OrgChartService:
    def __init__(self, directory: EmployeeDirectory | None = None, settings: Settings | None = None) -> None:
        self.directory = directory or employee_directory
        self.settings = settings or default_settings

    async def get_hierarchy(self) -> list[OrgChartEmployee]:
        employees = await self.directory.list_employees()
        return serialize_forest(build_forest(employees))

    async def get_supervisor_choices(self, employee_id: str | None = None) -> list[SupervisorChoice]:
        employees = await self.directory.list_employees()
        if employee_id is not None and not any(e.id == employee_id for e in employees):
            raise EmployeeNotFoundError(employee_id)

        return [
            SupervisorChoice(id=e.id, name=employee_full_name(e), position=e.position or "")
            for e in supervisor_choices(employees, employee_id)
        ]

    async def list_employees(self, search: str = "", skip: int = 0, limit: int = 50) -> list[Employee]:
        employees = await self.directory.list_employees()
        matching = [e for e in employees if matches_search(e, search)]
        return matching[skip : skip + limit]

    async def get_employee(self, employee_id: str) -> Employee:
        employee = await self.directory.get_employee(employee_id)
        if employee is None:
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def add_employee(self, payload: EmployeeCreate) -> OrgChartEmployee:
        supervisor_name = await self._supervisor_name_for(payload.superior_id)

        employee = Employee(
            id=new_employee_id(),
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            phone=payload.phone,
            position=payload.position,
            department=payload.department,
            roles=payload.roles or [Role(self.settings.DEFAULT_EMPLOYEE_ROLE)],
            status=payload.status or self.settings.DEFAULT_EMPLOYEE_STATUS,
            supervisor_name=supervisor_name,
        )
        await self.directory.add_employee(employee)
        logger.info("Added employee %s (supervisor=%r)", employee.id, supervisor_name)
        return await self._echo(employee)

    async def update_employee(self, employee_id: str, payload: EmployeeUpdate) -> OrgChartEmployee:
        employee = await self.get_employee(employee_id)
        present = payload.model_fields_set

        changes: dict[str, object] = {}
        if "superior_id" in present:
            changes["supervisor_name"] = await self._supervisor_name_for(payload.superior_id)
        if "first_name" in present:
            changes["first_name"] = payload.first_name or ""
        if "last_name" in present:
            changes["last_name"] = payload.last_name or ""
        for name in _PLAIN_FIELDS:
            if name in present:
                changes[name] = getattr(payload, name)
        if "roles" in present and payload.roles is not None:
            changes["roles"] = payload.roles
        if "status" in present and payload.status:
            changes["status"] = payload.status

        updated = employee.model_copy(update=changes)
        await self.directory.save_employee(updated)
        logger.info("Updated employee %s (fields=%s)", employee_id, sorted(changes))
        return await self._echo(updated)

    async def delete_employee(self, employee_id: str) -> None:
        # Reports keep their stored supervisor name; it simply stops resolving.
        await self.directory.delete_employee(employee_id)
        logger.info("Deleted employee %s", employee_id)

    async def _supervisor_name_for(self, superior_id: str | None) -> str | None:
        if not superior_id:
            return None
        superior = await self.directory.get_employee(superior_id)
        if superior is None:
            raise SupervisorNotFoundError(superior_id)
        return employee_full_name(superior)

    async def _echo(self, employee: Employee) -> OrgChartEmployee:
        parents = parent_map(build_forest(await self.directory.list_employees()))
        return to_chart_employee(employee, parents.get(employee.id))


org_chart_service = OrgChartService()
