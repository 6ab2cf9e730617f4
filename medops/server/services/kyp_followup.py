"""
Service for the KYP side conversations that run next to a pre-auth.

Insurance raises queries on a pre-auth that the BD answers and insurance then
resolves. Once the pre-auth is approved the BD records the patient follow-up,
which completes the KYP.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from medops.core.database.base import utc_now_naive
from medops.core.database.entities.leads import KYPSubmission, Lead, PatientFollowUp
from medops.core.database.entities.pre_auth import InsuranceQuery, PreAuthorization
from medops.core.database.entities.users import User
from medops.core.database.repositories import SqlRepoBundle
from medops.core.errors import InvalidStateError, NotFoundError, PermissionDeniedError
from medops.core.logging_config import get_logger
from medops.core.models.domain import KYPStatus, NotificationType, QueryStatus, UserRole
from medops.core.models.io.leads import FollowUpUpsert
from medops.core.models.io.pre_auth import InsuranceQueryAnswer, InsuranceQueryCreate
from medops.core.monitoring import log_workflow_event

from .notifications import NotificationService

logger = get_logger(__name__)

# Roles that may record a follow-up on a lead they do not own
FOLLOW_UP_OVERRIDE_ROLES = {UserRole.ADMIN.value, UserRole.SALES_HEAD.value}


class KYPFollowUpService:
    """Service for insurance queries and patient follow-ups."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos
        self.notifier = NotificationService(repos)

    async def _case_of_pre_auth(self, pre_auth_id: str) -> Tuple[PreAuthorization, KYPSubmission, Lead]:
        pre_auth = await self.repos.pre_auths.get_by_id(pre_auth_id)
        if pre_auth is None:
            raise NotFoundError("Pre-authorization", pre_auth_id)
        kyp = await self.repos.kyp.get_by_id(pre_auth.kyp_submission_id)
        if kyp is None:
            raise NotFoundError("KYP submission", pre_auth.kyp_submission_id)
        lead = await self.repos.leads.get_by_id(kyp.lead_id)
        if lead is None:
            raise NotFoundError("Lead", kyp.lead_id)
        return pre_auth, kyp, lead

    # ------------------------------------------------------------------
    # Insurance queries
    # ------------------------------------------------------------------

    async def list_queries(
        self, pre_auth_id: Optional[str] = None, status: Optional[QueryStatus] = None
    ) -> List[InsuranceQuery]:
        return await self.repos.insurance_queries.search(
            pre_auth_id=pre_auth_id, status=status.value if status else None
        )

    async def get_query(self, query_id: str) -> InsuranceQuery:
        query = await self.repos.insurance_queries.get_by_id(query_id)
        if query is None:
            raise NotFoundError("Query", query_id)
        return query

    async def raise_query(self, user: User, data: InsuranceQueryCreate) -> InsuranceQuery:
        """Open a query on a pre-auth and tell the BD who submitted the KYP."""
        pre_auth, kyp, lead = await self._case_of_pre_auth(data.pre_auth_id)
        query = InsuranceQuery(pre_auth_id=pre_auth.id, question=data.question.strip(), raised_by_id=user.id)
        await self.repos.insurance_queries.stage(query)
        await self.notifier.notify(
            kyp.submitted_by_id,
            NotificationType.QUERY_RAISED,
            "Query raised on pre-authorization",
            f"Insurance team has raised a query for {lead.patient_name} ({lead.lead_ref})",
            link=f"/leads/{lead.id}",
            related_id=query.id,
        )
        await self.repos.commit()
        log_workflow_event("query_raised", query.id, actor_id=user.id, pre_auth_id=pre_auth.id)
        return query

    async def answer_query(self, user: User, query_id: str, data: InsuranceQueryAnswer) -> InsuranceQuery:
        """Record the BD's answer. A BD may only answer queries on their own leads."""
        query = await self.get_query(query_id)
        if query.status == QueryStatus.RESOLVED.value:
            raise InvalidStateError("Query is already resolved")
        _, _, lead = await self._case_of_pre_auth(query.pre_auth_id)
        if user.role == UserRole.BD.value and lead.bd_id != user.id:
            raise PermissionDeniedError("You are not assigned to this lead")

        query.answer = data.answer.strip()
        query.answered_by_id = user.id
        query.answered_at = utc_now_naive()
        query.status = QueryStatus.ANSWERED.value
        await self.repos.insurance_queries.stage(query)
        await self.notifier.notify(
            query.raised_by_id,
            NotificationType.QUERY_ANSWERED,
            "Query answered",
            f"Your query for {lead.patient_name} ({lead.lead_ref}) has been answered",
            link=f"/leads/{lead.id}",
            related_id=query.id,
        )
        await self.repos.commit()
        log_workflow_event("query_answered", query.id, actor_id=user.id)
        return query

    async def resolve_query(self, user: User, query_id: str) -> InsuranceQuery:
        query = await self.get_query(query_id)
        if query.status != QueryStatus.ANSWERED.value:
            raise InvalidStateError("Query must be answered before it can be resolved")
        query.status = QueryStatus.RESOLVED.value
        query.resolved_at = utc_now_naive()
        await self.repos.insurance_queries.stage(query)
        await self.repos.commit()
        log_workflow_event("query_resolved", query.id, actor_id=user.id)
        return query

    # ------------------------------------------------------------------
    # Follow-up
    # ------------------------------------------------------------------

    async def _get_kyp(self, kyp_submission_id: str) -> KYPSubmission:
        kyp = await self.repos.kyp.get_by_id(kyp_submission_id)
        if kyp is None:
            raise NotFoundError("KYP submission", kyp_submission_id)
        return kyp

    async def get_follow_up(self, kyp_submission_id: str) -> PatientFollowUp:
        follow_up = await self.repos.follow_ups.get_by_kyp(kyp_submission_id)
        if follow_up is None:
            raise NotFoundError("Follow-up for KYP submission", kyp_submission_id)
        return follow_up

    async def record_follow_up(self, user: User, data: FollowUpUpsert) -> PatientFollowUp:
        """
        Create or update the follow-up of a KYP whose pre-auth is complete.

        The KYP moves to FOLLOW_UP_COMPLETE; its submitter and every insurance
        head are told.
        """
        kyp = await self._get_kyp(data.kyp_submission_id)
        lead = await self.repos.leads.get_by_id(kyp.lead_id)
        if lead is None:
            raise NotFoundError("Lead", kyp.lead_id)
        if lead.bd_id != user.id and user.role not in FOLLOW_UP_OVERRIDE_ROLES:
            raise PermissionDeniedError("You do not have permission to update follow-up for this lead")
        if kyp.status not in (KYPStatus.PRE_AUTH_COMPLETE.value, KYPStatus.FOLLOW_UP_COMPLETE.value):
            raise InvalidStateError("Pre-authorization must be completed before adding follow-up")

        details = data.model_dump(exclude={"kyp_submission_id"})
        follow_up = await self.repos.follow_ups.get_by_kyp(kyp.id)
        if follow_up is None:
            follow_up = PatientFollowUp(kyp_submission_id=kyp.id, updated_by_id=user.id, **details)
        else:
            for key, value in details.items():
                setattr(follow_up, key, value)
            follow_up.updated_by_id = user.id
        await self.repos.follow_ups.stage(follow_up)

        kyp.status = KYPStatus.FOLLOW_UP_COMPLETE.value
        await self.repos.kyp.stage(kyp)

        title = "Follow-up completed"
        message = f"Patient follow-up has been completed for {lead.patient_name} ({lead.lead_ref})"
        await self.notifier.notify(
            kyp.submitted_by_id,
            NotificationType.FOLLOW_UP_COMPLETE,
            title,
            message,
            link=f"/leads/{lead.id}",
            related_id=kyp.id,
        )
        await self.notifier.notify_role(
            UserRole.INSURANCE_HEAD,
            NotificationType.FOLLOW_UP_COMPLETE,
            title,
            message,
            link=f"/leads/{lead.id}",
            related_id=kyp.id,
        )
        await self.repos.commit()
        log_workflow_event("follow_up_recorded", follow_up.id, actor_id=user.id, kyp_id=kyp.id)
        return follow_up
