"""
Service for the finance masters: parties, heads, payment types and payment modes.

Masters are never hard-deleted because ledger entries reference them;
deleting one marks it inactive. A payment mode's balances are owned by the
ledger, so they cannot be edited here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Type

from pydantic import BaseModel

from medops.core.database.entities.finance import Head, Party, PaymentMode, PaymentType
from medops.core.database.repositories import SqlRepoBundle
from medops.core.errors import ConflictError, NotFoundError, ValidationFailedError
from medops.core.logging_config import get_logger
from medops.core.rules.money import round_money

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Master:
    label: str
    entity: Type
    repo_attr: str
    unique_name: bool = True


MASTERS: Dict[str, _Master] = {
    "party": _Master("Party", Party, "parties", unique_name=False),
    "head": _Master("Head", Head, "heads"),
    "payment_type": _Master("Payment type", PaymentType, "payment_types"),
    "payment_mode": _Master("Payment mode", PaymentMode, "payment_modes"),
}


class FinanceMasterService:
    """Service for CRUD on the finance masters."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos

    def _repo(self, kind: str):
        return getattr(self.repos, MASTERS[kind].repo_attr)

    async def list_masters(self, kind: str, active_only: bool = False) -> List:
        return await self._repo(kind).list_masters(active_only=active_only)

    async def get_master(self, kind: str, master_id: str):
        master = await self._repo(kind).get_by_id(master_id)
        if master is None:
            raise NotFoundError(MASTERS[kind].label, master_id)
        return master

    async def _ensure_name_free(self, kind: str, name: str, current_id: Optional[str] = None) -> None:
        if not MASTERS[kind].unique_name:
            return
        existing = await self._repo(kind).get_by_name(name)
        if existing is not None and existing.id != current_id:
            raise ConflictError(f"{MASTERS[kind].label} with name '{name}' already exists")

    async def create_master(self, kind: str, data: BaseModel):
        """Create a master record.

        A payment mode starts with its current balance equal to its opening
        balance, which must not be negative.
        """
        master_kind = MASTERS[kind]
        values = data.model_dump()
        values["name"] = values["name"].strip()
        await self._ensure_name_free(kind, values["name"])

        if kind == "payment_mode":
            opening = values.get("opening_balance") or 0
            if opening < 0:
                raise ValidationFailedError("Opening balance cannot be negative")
            values["opening_balance"] = round_money(opening)
            values["current_balance"] = values["opening_balance"]
        if kind == "party" and values.get("party_type") is not None:
            values["party_type"] = values["party_type"].value

        master = await self._repo(kind).create(master_kind.entity(**values))
        logger.info(f"Created {master_kind.label.lower()} {master.id} ({master.name})")
        return master

    async def update_master(self, kind: str, master_id: str, data: BaseModel):
        master = await self.get_master(kind, master_id)
        changes = data.model_dump(exclude_unset=True)

        if kind == "payment_mode":
            if changes.pop("opening_balance", None) is not None:
                raise ValidationFailedError("Opening balance cannot be changed after creation")
            if changes.pop("current_balance", None) is not None:
                raise ValidationFailedError("Current balance can only change through ledger entries")

        if changes.get("name"):
            changes["name"] = changes["name"].strip()
            await self._ensure_name_free(kind, changes["name"], current_id=master.id)
        for key, value in changes.items():
            if value is None and key in ("name", "is_active", "party_type"):
                continue
            setattr(master, key, value.value if hasattr(value, "value") else value)
        return await self._repo(kind).update(master)

    async def deactivate_master(self, kind: str, master_id: str):
        master = await self.get_master(kind, master_id)
        master.is_active = False
        master = await self._repo(kind).update(master)
        logger.info(f"Deactivated {MASTERS[kind].label.lower()} {master_id}")
        return master
