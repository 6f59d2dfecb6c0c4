from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.core.dependencies import get_current_user, require_admin
from app.models.auth import UserInfo
from app.models.employee import (
    EmployeeCreate,
    EmployeeMutationResponse,
    EmployeeUpdate,
    OrgChartResponse,
    SuccessResponse,
    SupervisorChoice,
)
from app.services.employee_directory import EmployeeNotFoundError
from app.services.org_chart_service import org_chart_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/org-chart", tags=["org-chart"])


def _not_found(err: EmployeeNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(err))


@router.get("", response_model=OrgChartResponse)
async def get_org_chart(
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        employees = await org_chart_service.get_hierarchy()
    except Exception as err:
        logger.exception("Failed to build org chart")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build organization chart",
        ) from err
    return OrgChartResponse(employees=employees)


@router.get("/supervisor-choices", response_model=list[SupervisorChoice])
async def get_supervisor_choices(
    employee_id: str | None = Query(default=None, alias="employeeId"),
    user: UserInfo = Depends(get_current_user),  # noqa: B008
):
    try:
        return await org_chart_service.get_supervisor_choices(employee_id)
    except EmployeeNotFoundError as err:
        raise _not_found(err) from err


@router.post("", response_model=EmployeeMutationResponse)
async def add_employee(
    request: EmployeeCreate,
    user: UserInfo = Depends(require_admin),  # noqa: B008
):
    try:
        employee = await org_chart_service.add_employee(request)
    except EmployeeNotFoundError as err:
        raise _not_found(err) from err

    logger.info("Employee %s added by user=%s", employee.id, user.name)
    return EmployeeMutationResponse(employee=employee)


@router.put("/{employee_id}", response_model=EmployeeMutationResponse)
async def update_employee(
    employee_id: str,
    request: EmployeeUpdate,
    user: UserInfo = Depends(require_admin),  # noqa: B008
):
    try:
        employee = await org_chart_service.update_employee(employee_id, request)
    except EmployeeNotFoundError as err:
        raise _not_found(err) from err

    logger.info("Employee %s updated by user=%s", employee_id, user.name)
    return EmployeeMutationResponse(employee=employee)


@router.delete("/{employee_id}", response_model=SuccessResponse)
async def delete_employee(
    employee_id: str,
    user: UserInfo = Depends(require_admin),  # noqa: B008
):
    try:
        await org_chart_service.delete_employee(employee_id)
    except EmployeeNotFoundError as err:
        raise _not_found(err) from err

    logger.info("Employee %s deleted by user=%s", employee_id, user.name)
    return SuccessResponse()
