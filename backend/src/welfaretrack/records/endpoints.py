"""Record API endpoints: customers, departments, users and work records."""

import math
from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Path, Query, Response
from pydantic import BaseModel, Field

from welfaretrack.auth.dependencies import (
    require_authenticated,
    require_minimum_role,
    require_self_or_minimum_role,
)
from welfaretrack.auth.roles import Role
from welfaretrack.auth.types import Identity
from welfaretrack.errors import MalformedRequestError
from welfaretrack.records.schema import MAX_RECORD_ID
from welfaretrack.records.serializers import RecordSerializer, user_json
from welfaretrack.records.service import RecordService

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100
MAX_PAGE = MAX_RECORD_ID // MAX_PER_PAGE

RecordId = Annotated[int, Field(ge=1, le=MAX_RECORD_ID)]
RecordIdPath = Annotated[int, Path(ge=1, le=MAX_RECORD_ID)]


class CustomerParams(BaseModel):
    name: str | None = None
    customer_type: str | None = None
    status: str | None = None
    department_id: RecordId | None = None


class CustomerRequest(BaseModel):
    customer: CustomerParams | None = None


class DepartmentParams(BaseModel):
    name: str | None = None
    address: str | None = None
    status: str | None = None
    department_type: str | None = None


class DepartmentRequest(BaseModel):
    department: DepartmentParams | None = None


class WorkRecordParams(BaseModel):
    customer_id: RecordId | None = None
    department_id: RecordId | None = None
    content: str | None = None
    work_date: date | None = None
    status: str | None = None
    work_type: str | None = None


class WorkRecordRequest(BaseModel):
    work_record: WorkRecordParams | None = None


def pagination_meta(page: int, per_page: int, total: int) -> dict[str, int]:
    return {
        "current_page": page,
        "total_pages": math.ceil(total / per_page) if per_page else 0,
        "total_count": total,
    }


def _require_param(value: BaseModel | None, name: str) -> BaseModel:
    if value is None:
        raise MalformedRequestError(f"param is missing or the value is empty: {name}")
    return value


def create_customers_router(records: RecordService, serializer: RecordSerializer) -> APIRouter:
    """Create the customers router.

    Args:
        records: Validated record writes
        serializer: Customer JSON with display labels

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/customers", tags=["customers"])
    store = records.store

    def render(customer: dict[str, Any]) -> dict[str, Any]:
        department = store.get("department", customer["department_id"])
        return serializer.customer_json(customer, department)

    @router.get("")
    async def list_customers(
        page: int = Query(1, ge=1, le=MAX_PAGE),
        per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE),
        _: Identity = Depends(require_authenticated),
    ) -> dict[str, Any]:
        customers, total = store.page("customer", page=page, per_page=per_page)
        departments = store.get_many("department", [c["department_id"] for c in customers])
        return {
            "customers": [
                serializer.customer_json(c, departments.get(c["department_id"])) for c in customers
            ],
            "pagination": pagination_meta(page, per_page, total),
        }

    @router.get("/{customer_id}")
    async def show_customer(customer_id: RecordIdPath, _: Identity = Depends(require_authenticated)) -> dict[str, Any]:
        return {"customer": render(records.get("customer", customer_id))}

    @router.post("", status_code=201)
    async def create_customer(
        body: CustomerRequest,
        _: Identity = Depends(require_authenticated),
    ) -> dict[str, Any]:
        params = _require_param(body.customer, "customer")
        customer = await records.create("customer", params.model_dump())
        return {"customer": render(customer)}

    async def update_customer(
        customer_id: RecordIdPath,
        body: CustomerRequest,
        _: Identity = Depends(require_authenticated),
    ) -> dict[str, Any]:
        params = _require_param(body.customer, "customer")
        customer = await records.update("customer", customer_id, params.model_dump(exclude_unset=True))
        return {"customer": render(customer)}

    router.add_api_route("/{customer_id}", update_customer, methods=["PATCH", "PUT"])

    @router.delete("/{customer_id}", status_code=204)
    async def delete_customer(
        customer_id: RecordIdPath,
        _: Identity = Depends(require_minimum_role(Role.MANAGER)),
    ) -> Response:
        """Delete a customer together with its work records."""
        records.get("customer", customer_id)
        store.delete_where("work_record", customer_id=customer_id)
        records.delete("customer", customer_id)
        return Response(status_code=204)

    return router


def create_departments_router(records: RecordService, serializer: RecordSerializer) -> APIRouter:
    router = APIRouter(prefix="/departments", tags=["departments"])
    store = records.store

    @router.get("")
    async def list_departments(_: Identity = Depends(require_authenticated)) -> dict[str, Any]:
        return {"departments": [serializer.department_json(d) for d in store.all("department")]}

    @router.get("/{department_id}")
    async def show_department(department_id: RecordIdPath, _: Identity = Depends(require_authenticated)) -> dict[str, Any]:
        return {"department": serializer.department_json(records.get("department", department_id))}

    @router.post("", status_code=201)
    async def create_department(
        body: DepartmentRequest,
        _: Identity = Depends(require_minimum_role(Role.ADMIN)),
    ) -> dict[str, Any]:
        params = _require_param(body.department, "department")
        department = await records.create("department", params.model_dump())
        return {"department": serializer.department_json(department)}

    @router.patch("/{department_id}")
    async def update_department(
        department_id: RecordIdPath,
        body: DepartmentRequest,
        _: Identity = Depends(require_minimum_role(Role.ADMIN)),
    ) -> dict[str, Any]:
        params = _require_param(body.department, "department")
        department = await records.update("department", department_id, params.model_dump(exclude_unset=True))
        return {"department": serializer.department_json(department)}

    return router


def create_users_router(records: RecordService) -> APIRouter:
    router = APIRouter(prefix="/users", tags=["users"])
    store = records.store

    @router.get("")
    async def list_users(
        page: int = Query(1, ge=1, le=MAX_PAGE),
        per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE),
        _: Identity = Depends(require_minimum_role(Role.MANAGER)),
    ) -> dict[str, Any]:
        users, total = store.page("user", page=page, per_page=per_page)
        return {
            "users": [user_json(u) for u in users],
            "pagination": pagination_meta(page, per_page, total),
        }

    @router.get("/{user_id}")
    async def show_user(
        user_id: RecordIdPath,
        _: Identity = Depends(require_self_or_minimum_role(Role.MANAGER)),
    ) -> dict[str, Any]:
        return {"user": user_json(records.get("user", user_id))}

    return router


def create_work_records_router(records: RecordService, serializer: RecordSerializer) -> APIRouter:
    router = APIRouter(prefix="/work_records", tags=["work_records"])
    store = records.store

    def render_all(work_records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        customers = store.get_many("customer", [w["customer_id"] for w in work_records])
        users = store.get_many("user", [w["staff_user_id"] for w in work_records])
        departments = store.get_many("department", [w["department_id"] for w in work_records])
        return [
            serializer.work_record_json(
                w,
                customers.get(w["customer_id"]),
                users.get(w["staff_user_id"]),
                departments.get(w["department_id"]),
            )
            for w in work_records
        ]

    @router.get("")
    async def list_work_records(
        page: int = Query(1, ge=1, le=MAX_PAGE),
        per_page: int = Query(DEFAULT_PER_PAGE, ge=1, le=MAX_PER_PAGE),
        _: Identity = Depends(require_authenticated),
    ) -> dict[str, Any]:
        work_records, total = store.page("work_record", page=page, per_page=per_page)
        return {
            "work_records": render_all(work_records),
            "pagination": pagination_meta(page, per_page, total),
        }

    @router.get("/{work_record_id}")
    async def show_work_record(work_record_id: RecordIdPath, _: Identity = Depends(require_authenticated)) -> dict[str, Any]:
        return {"work_record": render_all([records.get("work_record", work_record_id)])[0]}

    @router.post("", status_code=201)
    async def create_work_record(
        body: WorkRecordRequest,
        identity: Identity = Depends(require_authenticated),
    ) -> dict[str, Any]:
        """Record work done by the caller."""
        params = _require_param(body.work_record, "work_record")
        data = {**params.model_dump(), "staff_user_id": identity.user_id}
        work_record = await records.create("work_record", data)
        return {"work_record": render_all([work_record])[0]}

    return router


def create_record_routers(records: RecordService, serializer: RecordSerializer) -> list[APIRouter]:
    """All record routers, to be mounted under the API prefix."""
    return [
        create_customers_router(records, serializer),
        create_departments_router(records, serializer),
        create_users_router(records),
        create_work_records_router(records, serializer),
    ]
