"""
Finance Masters API Endpoints.

Parties, heads, payment types and payment modes share the same CRUD shape,
so their routes are registered from one table. Deletion only deactivates a
master; payment mode balances never change through these endpoints.
"""

from typing import List, Type

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from medops.core.models.io.finance import (
    HeadCreate,
    HeadRead,
    HeadUpdate,
    PartyCreate,
    PartyRead,
    PartyUpdate,
    PaymentModeCreate,
    PaymentModeRead,
    PaymentModeUpdate,
    PaymentTypeCreate,
    PaymentTypeRead,
    PaymentTypeUpdate,
)
from medops.server.core.rbac import Permission
from medops.server.core.security import require_permission
from medops.server.services.deps import FinanceMasterServiceDep

router = APIRouter()

_reader = [Depends(require_permission(Permission.FINANCE_READ))]
_writer = [Depends(require_permission(Permission.FINANCE_MASTERS_WRITE))]


def _register(
    kind: str,
    path: str,
    label: str,
    plural: str,
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
    read_model: Type[BaseModel],
) -> None:
    """Register list, create, get, update and delete routes for one master."""

    @router.get(
        f"/{path}",
        response_model=List[read_model],
        summary=f"List {plural}",
        description=f"List {plural.lower()}, optionally only active ones.",
        response_description=f"A list of {plural.lower()}.",
        dependencies=_reader,
        name=f"list_{kind}",
    )
    async def list_masters(service: FinanceMasterServiceDep, active_only: bool = False):
        return await service.list_masters(kind, active_only=active_only)

    @router.post(
        f"/{path}",
        response_model=read_model,
        status_code=201,
        summary=f"Create {label}",
        description=f"Create a {label.lower()}.",
        response_description=f"The created {label.lower()}.",
        responses={400: {"description": "Name already taken or invalid values"}},
        dependencies=_writer,
        name=f"create_{kind}",
    )
    async def create_master(payload: create_model, service: FinanceMasterServiceDep):  # type: ignore[valid-type]
        return await service.create_master(kind, payload)

    @router.get(
        f"/{path}/{{master_id}}",
        response_model=read_model,
        summary=f"Get {label}",
        description=f"Retrieve a {label.lower()}.",
        response_description=f"The {label.lower()}.",
        responses={404: {"description": f"{label} not found"}},
        dependencies=_reader,
        name=f"get_{kind}",
    )
    async def get_master(master_id: str, service: FinanceMasterServiceDep):
        return await service.get_master(kind, master_id)

    @router.patch(
        f"/{path}/{{master_id}}",
        response_model=read_model,
        summary=f"Update {label}",
        description=f"Update a {label.lower()}.",
        response_description=f"The updated {label.lower()}.",
        responses={
            400: {"description": "Name taken or field not editable"},
            404: {"description": f"{label} not found"},
        },
        dependencies=_writer,
        name=f"update_{kind}",
    )
    async def update_master(
        master_id: str, payload: update_model, service: FinanceMasterServiceDep  # type: ignore[valid-type]
    ):
        return await service.update_master(kind, master_id, payload)

    @router.delete(
        f"/{path}/{{master_id}}",
        response_model=read_model,
        summary=f"Deactivate {label}",
        description=f"Deactivate a {label.lower()}. Existing ledger entries keep referencing it.",
        response_description=f"The deactivated {label.lower()}.",
        responses={404: {"description": f"{label} not found"}},
        dependencies=_writer,
        name=f"delete_{kind}",
    )
    async def delete_master(master_id: str, service: FinanceMasterServiceDep):
        return await service.deactivate_master(kind, master_id)


_register("party", "parties", "Party", "Parties", PartyCreate, PartyUpdate, PartyRead)
_register("head", "heads", "Head", "Heads", HeadCreate, HeadUpdate, HeadRead)
_register(
    "payment_type",
    "payment-types",
    "Payment type",
    "Payment types",
    PaymentTypeCreate,
    PaymentTypeUpdate,
    PaymentTypeRead,
)
_register(
    "payment_mode",
    "payment-modes",
    "Payment mode",
    "Payment modes",
    PaymentModeCreate,
    PaymentModeUpdate,
    PaymentModeRead,
)
