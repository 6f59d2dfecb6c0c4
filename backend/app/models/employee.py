"""Employee models for the directory and the organization chart."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    USER = "USER"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


CHART_ROLES = frozenset({Role.MANAGER, Role.ADMIN})

PLACEHOLDER_CREDENTIAL = "!"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Employee(_CamelModel):
    """Stored employee record.

    ``supervisor_name`` is the only link to a parent: the display name of the
    supervisor at the time it was assigned, never an id.
    """

    id: str
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    phone: str | None = None
    position: str | None = None
    department: str | None = None
    roles: list[Role] = Field(default_factory=lambda: [Role.USER])
    status: str = "Active"
    supervisor_name: str | None = None
    credential: str = Field(default=PLACEHOLDER_CREDENTIAL, exclude=True)


class EmployeeCreate(_CamelModel):
    """Request body for adding an employee to the chart."""

    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    email: str | None = Field(default=None, max_length=180)
    phone: str | None = Field(default=None, max_length=30)
    position: str | None = Field(default=None, max_length=100)
    department: str | None = Field(default=None, max_length=100)
    superior_id: str | None = None
    roles: list[Role] | None = None
    status: str | None = None


class EmployeeUpdate(_CamelModel):
    """Partial update; only fields present in the body are applied."""

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=180)
    phone: str | None = Field(default=None, max_length=30)
    position: str | None = Field(default=None, max_length=100)
    department: str | None = Field(default=None, max_length=100)
    superior_id: str | None = None
    roles: list[Role] | None = None
    status: str | None = None


class OrgChartEmployee(_CamelModel):
    """One node of the organization chart as returned to clients."""

    id: str
    name: str
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    position: str = ""
    department: str = ""
    superior_id: str | None = None
    children: list[OrgChartEmployee] = []


class OrgChartResponse(_CamelModel):
    employees: list[OrgChartEmployee]


class EmployeeMutationResponse(_CamelModel):
    success: bool = True
    employee: OrgChartEmployee


class SuccessResponse(_CamelModel):
    success: bool = True


class SupervisorChoice(_CamelModel):
    id: str
    name: str
    position: str = ""
