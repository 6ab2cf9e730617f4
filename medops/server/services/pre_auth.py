"""
Service for pre-authorization decisions and the insurance initiate form.

Every decision is validated by the pure state machine in
``medops.core.rules.pre_auth``; this service only gathers the facts it needs
and persists the outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from medops.core.database.base import utc_now_naive
from medops.core.database.entities.leads import KYPSubmission, Lead
from medops.core.database.entities.pre_auth import HospitalSuggestion, InsuranceInitiateForm, PreAuthorization
from medops.core.database.entities.users import User
from medops.core.database.repositories import SqlRepoBundle
from medops.core.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from medops.core.logging_config import get_logger
from medops.core.models.domain import (
    CaseStage,
    KYPStatus,
    NotificationType,
    PreAuthAction,
    PreAuthStatus,
)
from medops.core.models.io.pre_auth import (
    HospitalSuggestionRead,
    InitiateFormCreate,
    InitiateFormUpdate,
    PreAuthDetail,
    PreAuthRead,
)
from medops.core.monitoring import log_workflow_event
from medops.core.rules import case_flow
from medops.core.rules import pre_auth as pre_auth_rules
from medops.server.core.rbac import Permission, can_access_lead, has_permission

from .leads import record_stage_change
from .notifications import NotificationService

logger = get_logger(__name__)


@dataclass
class _PreAuthCase:
    kyp: KYPSubmission
    lead: Lead
    pre_auth: PreAuthorization
    suggestions: List[HospitalSuggestion]
    form: Optional[InsuranceInitiateForm]

    def context(self, rejection_reason: Optional[str] = None) -> pre_auth_rules.PreAuthContext:
        return pre_auth_rules.PreAuthContext(
            case_stage=CaseStage(self.lead.case_stage),
            has_hospital_suggestions=bool(self.suggestions),
            initiate_form_complete=(
                self.form is not None
                and pre_auth_rules.is_initiate_form_complete(self.form.total_bill_amount, self.form.copay)
            ),
            is_new_hospital_request=self.pre_auth.is_new_hospital_request,
            new_hospital_request_raised=self.pre_auth.new_hospital_request_raised_at is not None,
            rejection_reason=rejection_reason,
        )


class PreAuthService:
    """Service for insurance decisions on raised pre-auths."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos
        self.notifier = NotificationService(repos)

    async def _load(self, kyp_submission_id: str) -> _PreAuthCase:
        kyp = await self.repos.kyp.get_by_id(kyp_submission_id)
        if kyp is None:
            raise NotFoundError("KYP submission", kyp_submission_id)
        lead = await self.repos.leads.get_by_id(kyp.lead_id)
        if lead is None:
            raise NotFoundError("Lead", kyp.lead_id)
        pre_auth = await self.repos.pre_auths.get_by_kyp(kyp.id)
        if pre_auth is None:
            raise ValidationFailedError("Pre-auth data not found")
        suggestions = await self.repos.suggestions.list_for_pre_auth(pre_auth.id)
        form = await self.repos.initiate_forms.get_by_lead(lead.id)
        return _PreAuthCase(kyp=kyp, lead=lead, pre_auth=pre_auth, suggestions=suggestions, form=form)

    def _detail(self, case: _PreAuthCase) -> PreAuthDetail:
        base = PreAuthRead.model_validate(case.pre_auth).model_dump()
        return PreAuthDetail(
            **base,
            lead_id=case.lead.id,
            case_stage=case.lead.case_stage,
            suggestions=[HospitalSuggestionRead.model_validate(s) for s in case.suggestions],
            available_actions=pre_auth_rules.available_actions(
                PreAuthStatus(case.pre_auth.approval_status), case.context()
            ),
        )

    async def get_detail(self, user: User, kyp_submission_id: str) -> PreAuthDetail:
        """Pre-auth details for insurance users or anyone who can see the lead."""
        case = await self._load(kyp_submission_id)
        lead = case.lead
        if not has_permission(user.role, Permission.INSURANCE_READ) and not can_access_lead(
            user.role, user.id, user.team_id, lead.bd_id, lead.team_id
        ):
            raise PermissionDeniedError("You do not have access to this pre-auth")
        return self._detail(case)

    def _decide(
        self, user: User, case: _PreAuthCase, action: PreAuthAction, reason: Optional[str] = None
    ) -> PreAuthStatus:
        current = PreAuthStatus(case.pre_auth.approval_status)
        new_status = pre_auth_rules.transition(current, action, case.context(rejection_reason=reason))
        now = utc_now_naive()
        case.pre_auth.approval_status = new_status.value
        case.pre_auth.handled_by_id = user.id
        case.pre_auth.handled_at = now
        log_workflow_event(
            "pre_auth_decision",
            case.pre_auth.id,
            actor_id=user.id,
            action=action.value,
            from_status=current.value,
            to_status=new_status.value,
        )
        return new_status

    async def temp_approve(self, user: User, kyp_submission_id: str) -> PreAuthDetail:
        case = await self._load(kyp_submission_id)
        self._decide(user, case, PreAuthAction.TEMP_APPROVE)
        case.pre_auth.temp_approved_at = case.pre_auth.handled_at
        await self.repos.pre_auths.stage(case.pre_auth)
        await self.notifier.notify(
            case.lead.bd_id,
            NotificationType.PRE_AUTH_TEMP_APPROVED,
            "Pre-auth temporarily approved",
            f"Pre-auth for {case.lead.patient_name} was temporarily approved",
            link=f"/leads/{case.lead.id}",
            related_id=case.pre_auth.id,
        )
        await self.repos.commit()
        return self._detail(case)

    async def approve(self, user: User, kyp_submission_id: str, notes: Optional[str] = None) -> PreAuthDetail:
        """Approve the pre-auth and complete the pre-auth stage of the case."""
        case = await self._load(kyp_submission_id)
        self._decide(user, case, PreAuthAction.APPROVE)
        case.pre_auth.approved_at = case.pre_auth.handled_at
        case.pre_auth.approval_notes = notes
        await self.repos.pre_auths.stage(case.pre_auth)

        case.kyp.status = KYPStatus.PRE_AUTH_COMPLETE.value
        await self.repos.kyp.stage(case.kyp)
        await record_stage_change(self.repos, case.lead, CaseStage.PREAUTH_COMPLETE, user.id, "Pre-auth approved")
        await self.notifier.notify(
            case.lead.bd_id,
            NotificationType.PRE_AUTH_APPROVED,
            "Pre-auth approved",
            f"Pre-auth for {case.lead.patient_name} was approved",
            link=f"/leads/{case.lead.id}",
            related_id=case.pre_auth.id,
        )
        await self.repos.commit()
        logger.info(f"Pre-auth {case.pre_auth.id} approved by {user.id}")
        return self._detail(case)

    async def reject(self, user: User, kyp_submission_id: str, reason: str) -> PreAuthDetail:
        case = await self._load(kyp_submission_id)
        self._decide(user, case, PreAuthAction.REJECT, reason=reason)
        case.pre_auth.rejected_at = case.pre_auth.handled_at
        case.pre_auth.rejection_reason = reason.strip()
        await self.repos.pre_auths.stage(case.pre_auth)

        await record_stage_change(
            self.repos, case.lead, CaseStage.PREAUTH_RAISED, user.id, f"Pre-auth rejected: {reason.strip()}"
        )
        await self.notifier.notify(
            case.lead.bd_id,
            NotificationType.PRE_AUTH_REJECTED,
            "Pre-auth rejected",
            f"Pre-auth for {case.lead.patient_name} was rejected: {reason.strip()}",
            link=f"/leads/{case.lead.id}",
            related_id=case.pre_auth.id,
        )
        await self.repos.commit()
        logger.info(f"Pre-auth {case.pre_auth.id} rejected by {user.id}")
        return self._detail(case)

    async def mark_new_hospital_raised(self, user: User, kyp_submission_id: str) -> PreAuthDetail:
        """Record that insurance raised the request with a hospital that was not suggested."""
        case = await self._load(kyp_submission_id)
        if not case.pre_auth.is_new_hospital_request:
            raise ValidationFailedError("This pre-auth is not a new hospital request")
        if case.pre_auth.new_hospital_request_raised_at is None:
            case.pre_auth.new_hospital_request_raised_at = utc_now_naive()
            await self.repos.pre_auths.stage(case.pre_auth)
            await self.repos.commit()
            log_workflow_event("new_hospital_request_raised", case.pre_auth.id, actor_id=user.id)
        return self._detail(case)


class InitiateFormService:
    """Service for the insurance initiate form of a case."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos

    async def create_form(self, user: User, data: InitiateFormCreate) -> InsuranceInitiateForm:
        lead = await self.repos.leads.get_by_id(data.lead_id)
        if lead is None:
            raise NotFoundError("Lead", data.lead_id)
        case_flow.require_stage(lead.case_stage, case_flow.INITIATE_FORM_STAGES, "fill the initiate form")
        if await self.repos.initiate_forms.get_by_lead(lead.id):
            raise ConflictError("Initiate form already exists for this lead")

        form = InsuranceInitiateForm(created_by_id=user.id, **data.model_dump())
        form = await self.repos.initiate_forms.create(form)
        log_workflow_event("initiate_form_created", form.id, actor_id=user.id, lead_id=lead.id)
        return form

    async def get_by_lead(self, lead_id: str) -> InsuranceInitiateForm:
        form = await self.repos.initiate_forms.get_by_lead(lead_id)
        if form is None:
            raise NotFoundError("Initiate form for lead", lead_id)
        return form

    async def update_form(self, form_id: str, data: InitiateFormUpdate) -> InsuranceInitiateForm:
        form = await self.repos.initiate_forms.get_by_id(form_id)
        if form is None:
            raise NotFoundError("Initiate form", form_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is None and key != "copay" and key != "room_category":
                continue
            setattr(form, key, value)
        return await self.repos.initiate_forms.update(form)
