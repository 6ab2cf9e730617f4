"""
Service for leads and the case flow.

A lead moves through KYP, insurance suggestions, pre-auth, admission and
discharge. Each step checks the case stage with ``medops.core.rules.case_flow``,
records a stage history row whenever the stage changes and notifies the
people who act next.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from medops.core.database.base import utc_now_naive
from medops.core.database.entities.leads import AdmissionRecord, CaseStageHistory, KYPSubmission, Lead
from medops.core.database.entities.pre_auth import HospitalSuggestion, PreAuthorization
from medops.core.database.entities.users import User
from medops.core.database.repositories import SqlRepoBundle
from medops.core.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from medops.core.logging_config import get_logger
from medops.core.models.domain import (
    CaseStage,
    KYPStatus,
    NotificationType,
    PipelineStage,
    PreAuthStatus,
    UserRole,
)
from medops.core.models.io.leads import (
    AdmissionCreate,
    IPDMarkRequest,
    KYPBasicCreate,
    KYPSuggestionsCreate,
    LeadCreate,
    RaisePreAuthRequest,
)
from medops.core.monitoring import log_workflow_event
from medops.core.rules import case_flow
from medops.server.core.rbac import can_access_lead, lead_scope

from .notifications import NotificationService

logger = get_logger(__name__)


async def record_stage_change(
    repos: SqlRepoBundle, lead: Lead, to_stage: CaseStage, actor_id: Optional[str], note: Optional[str] = None
) -> None:
    """Move a lead to ``to_stage`` and stage a history row, without committing.

    Nothing is written when the lead already sits in ``to_stage`` unless a
    note is given.
    """
    from_stage = lead.case_stage
    to_value = CaseStage(to_stage).value
    if from_stage == to_value and note is None:
        return
    await repos.stage_history.stage(
        CaseStageHistory(
            lead_id=lead.id,
            from_stage=from_stage,
            to_stage=to_value,
            changed_by_id=actor_id,
            note=note,
        )
    )
    lead.case_stage = to_value
    await repos.leads.stage(lead)


class LeadService:
    """Service for lead records and the pre-admission case flow."""

    def __init__(self, repos: SqlRepoBundle):
        self.repos = repos
        self.notifier = NotificationService(repos)

    # ------------------------------------------------------------------
    # Access helpers
    # ------------------------------------------------------------------

    async def _get_lead(self, lead_id: str) -> Lead:
        lead = await self.repos.leads.get_by_id(lead_id)
        if lead is None:
            raise NotFoundError("Lead", lead_id)
        return lead

    @staticmethod
    def _ensure_visible(user: User, lead: Lead) -> None:
        if not can_access_lead(user.role, user.id, user.team_id, lead.bd_id, lead.team_id):
            raise PermissionDeniedError("You do not have access to this lead")

    @staticmethod
    def _ensure_owner(user: User, lead: Lead, action: str) -> None:
        if user.role != UserRole.ADMIN.value and lead.bd_id != user.id:
            raise PermissionDeniedError(f"Only the BD who owns this lead can {action}")

    # ------------------------------------------------------------------
    # Leads
    # ------------------------------------------------------------------

    async def create_lead(self, user: User, data: LeadCreate) -> Lead:
        """
        Create a lead in NEW_LEAD / SALES.

        A BD may only create leads for themselves. The team defaults to the
        owning BD's team.
        """
        bd_id = data.bd_id or user.id
        if user.role == UserRole.BD.value and bd_id != user.id:
            raise PermissionDeniedError("BDs can only create leads assigned to themselves")

        bd = await self.repos.users.get_by_id(bd_id)
        if bd is None:
            raise NotFoundError("User", bd_id)

        lead_ref = data.lead_ref.strip()
        if await self.repos.leads.get_by_ref(lead_ref):
            raise ConflictError(f"Lead with reference {lead_ref} already exists")

        lead = Lead(
            lead_ref=lead_ref,
            patient_name=data.patient_name.strip(),
            phone=data.phone,
            city=data.city,
            treatment=data.treatment,
            bd_id=bd_id,
            team_id=data.team_id or bd.team_id,
            case_stage=CaseStage.NEW_LEAD.value,
            pipeline_stage=PipelineStage.SALES.value,
        )
        await self.repos.leads.stage(lead)
        await self.repos.stage_history.stage(
            CaseStageHistory(
                lead_id=lead.id, to_stage=CaseStage.NEW_LEAD.value, changed_by_id=user.id, note="Lead created"
            )
        )
        await self.repos.commit()
        log_workflow_event("lead_created", lead.id, actor_id=user.id, lead_ref=lead.lead_ref)
        logger.info(f"Lead {lead.lead_ref} created by {user.id}")
        return lead

    async def list_leads(
        self,
        user: User,
        *,
        case_stage: Optional[CaseStage] = None,
        pipeline_stage: Optional[PipelineStage] = None,
        bd_id: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Lead], int]:
        """List the leads the user may see, filtered and paged."""
        scope = lead_scope(user.role, user.id, user.team_id)
        return await self.repos.leads.search(
            bd_id=scope.get("bd_id", bd_id),
            team_id=scope.get("team_id"),
            case_stage=case_stage.value if case_stage else None,
            pipeline_stage=pipeline_stage.value if pipeline_stage else None,
            search=search,
            limit=limit,
            offset=offset,
        )

    async def get_lead(self, user: User, lead_id: str) -> Lead:
        lead = await self._get_lead(lead_id)
        self._ensure_visible(user, lead)
        return lead

    async def stage_history(self, user: User, lead_id: str) -> List[CaseStageHistory]:
        await self.get_lead(user, lead_id)
        return await self.repos.stage_history.list_for_lead(lead_id)

    async def mark_lost(self, user: User, lead_id: str, reason: str) -> Lead:
        lead = await self._get_lead(lead_id)
        self._ensure_owner(user, lead, "mark it as lost")
        if not reason or not reason.strip():
            raise ValidationFailedError("Reason is required to mark a lead as lost")
        if lead.pipeline_stage == PipelineStage.LOST.value:
            raise InvalidStateError("Lead is already marked as lost")

        lead.pipeline_stage = PipelineStage.LOST.value
        lead.lost_reason = reason.strip()
        await self.repos.leads.stage(lead)
        await self.repos.commit()
        log_workflow_event("lead_lost", lead.id, actor_id=user.id, reason=lead.lost_reason)
        return lead

    # ------------------------------------------------------------------
    # KYP
    # ------------------------------------------------------------------

    async def submit_kyp_basic(self, user: User, lead_id: str, data: KYPBasicCreate) -> KYPSubmission:
        """Store the BD's KYP documents and hand the case to insurance."""
        lead = await self._get_lead(lead_id)
        self._ensure_owner(user, lead, "submit KYP")
        if not (data.aadhar or data.pan):
            raise ValidationFailedError("Either Aadhar or PAN is required")
        if not data.location or not data.location.strip():
            raise ValidationFailedError("Location is required")
        case_flow.require_stage(lead.case_stage, case_flow.KYP_BASIC_STAGES, "submit KYP")
        if await self.repos.kyp.get_by_lead(lead.id):
            raise ConflictError("KYP has already been submitted for this lead")

        kyp = KYPSubmission(
            lead_id=lead.id,
            submitted_by_id=user.id,
            status=KYPStatus.PENDING.value,
            aadhar=data.aadhar,
            pan=data.pan,
            insurance_card=data.insurance_card,
            disease=data.disease,
            location=data.location.strip(),
            remark=data.remark,
            patient_consent=data.patient_consent,
        )
        await self.repos.kyp.stage(kyp)
        await record_stage_change(self.repos, lead, CaseStage.KYP_BASIC_PENDING, user.id, "KYP basic submitted")
        await self.notifier.notify_role(
            UserRole.INSURANCE_HEAD,
            NotificationType.KYP_SUBMITTED,
            "KYP submitted",
            f"KYP submitted for {lead.patient_name} ({lead.lead_ref})",
            link=f"/leads/{lead.id}",
            related_id=kyp.id,
        )
        await self.repos.commit()
        log_workflow_event("kyp_submitted", kyp.id, actor_id=user.id, lead_id=lead.id)
        return kyp

    async def add_suggestions(self, user: User, kyp_id: str, data: KYPSuggestionsCreate) -> PreAuthorization:
        """Record policy details and hospital suggestions for a KYP submission."""
        kyp = await self.repos.kyp.get_by_id(kyp_id)
        if kyp is None:
            raise NotFoundError("KYP submission", kyp_id)
        lead = await self._get_lead(kyp.lead_id)
        case_flow.require_stage(lead.case_stage, case_flow.SUGGESTION_STAGES, "add insurance suggestions")
        if not data.sum_insured or not data.sum_insured.strip():
            raise ValidationFailedError("Sum insured is required")
        if not data.hospitals:
            raise ValidationFailedError("At least one hospital suggestion is required")

        pre_auth = await self.repos.pre_auths.get_by_kyp(kyp.id)
        if pre_auth is None:
            pre_auth = PreAuthorization(kyp_submission_id=kyp.id)
        pre_auth.sum_insured = data.sum_insured.strip()
        pre_auth.room_rent = data.room_rent
        pre_auth.capping = data.capping
        pre_auth.copay = data.copay
        pre_auth.icu = data.icu
        pre_auth.insurance = data.insurance
        pre_auth.tpa = data.tpa
        pre_auth.approval_status = PreAuthStatus.PENDING.value
        pre_auth.handled_by_id = user.id
        pre_auth.handled_at = utc_now_naive()
        await self.repos.pre_auths.stage(pre_auth)
        await self.repos.suggestions.replace_for_pre_auth(
            pre_auth.id, [HospitalSuggestion(pre_auth_id=pre_auth.id, **h.model_dump()) for h in data.hospitals]
        )

        kyp.status = KYPStatus.KYP_DETAILS_ADDED.value
        await self.repos.kyp.stage(kyp)
        lead.pipeline_stage = PipelineStage.INSURANCE.value
        await record_stage_change(
            self.repos, lead, CaseStage.KYP_BASIC_COMPLETE, user.id, "Insurance suggestions added"
        )
        await self.notifier.notify(
            kyp.submitted_by_id,
            NotificationType.GENERAL,
            "Hospital suggestions ready",
            f"Insurance added {len(data.hospitals)} hospital suggestion(s) for {lead.patient_name}",
            link=f"/leads/{lead.id}",
            related_id=pre_auth.id,
        )
        await self.repos.commit()
        log_workflow_event("suggestions_added", pre_auth.id, actor_id=user.id, hospitals=len(data.hospitals))
        return pre_auth

    async def submit_kyp_detailed(self, user: User, lead_id: str, payload: dict) -> KYPSubmission:
        lead = await self._get_lead(lead_id)
        self._ensure_owner(user, lead, "submit detailed KYP")
        case_flow.require_stage(lead.case_stage, case_flow.KYP_DETAILED_STAGES, "submit detailed KYP")
        kyp = await self.repos.kyp.get_by_lead(lead.id)
        if kyp is None:
            raise InvalidStateError("KYP basic must be submitted first")

        kyp.detailed_payload = payload
        kyp.detailed_submitted_at = utc_now_naive()
        await self.repos.kyp.stage(kyp)
        await record_stage_change(self.repos, lead, CaseStage.KYP_DETAILED_COMPLETE, user.id, "Detailed KYP submitted")
        await self.repos.commit()
        return kyp

    # ------------------------------------------------------------------
    # Pre-auth request, admission and discharge
    # ------------------------------------------------------------------

    async def raise_pre_auth(self, user: User, lead_id: str, data: RaisePreAuthRequest) -> PreAuthorization:
        """
        Raise the pre-auth with the hospital the BD picked.

        The hospital must be one of insurance's suggestions unless the BD asks
        for a new hospital, in which case its name is required.
        """
        lead = await self._get_lead(lead_id)
        self._ensure_owner(user, lead, "raise pre-auth")
        case_flow.require_stage(lead.case_stage, case_flow.RAISE_PREAUTH_STAGES, "raise pre-auth")
        kyp = await self.repos.kyp.get_by_lead(lead.id)
        if kyp is None:
            raise InvalidStateError("KYP must be submitted before raising pre-auth")
        pre_auth = await self.repos.pre_auths.get_by_kyp(kyp.id)
        if pre_auth is None:
            raise ValidationFailedError("Insurance suggestions must be added before raising pre-auth")
        if pre_auth.pre_auth_raised_at is not None:
            raise InvalidStateError("Pre-auth has already been raised for this case")

        suggestions = await self.repos.suggestions.list_for_pre_auth(pre_auth.id)
        choice = case_flow.validate_hospital_choice(
            [s.hospital_name for s in suggestions],
            data.requested_hospital_name,
            data.requested_room_type,
            data.is_new_hospital_request,
            data.new_hospital_name,
        )

        pre_auth.requested_hospital_name = choice.hospital_name
        pre_auth.requested_room_type = choice.room_type
        pre_auth.expected_admission_date = data.expected_admission_date
        pre_auth.expected_surgery_date = data.expected_surgery_date
        pre_auth.is_new_hospital_request = choice.is_new_hospital_request
        pre_auth.new_hospital_name = choice.hospital_name if choice.is_new_hospital_request else None
        pre_auth.pre_auth_raised_at = utc_now_naive()
        pre_auth.raised_by_id = user.id
        pre_auth.approval_status = PreAuthStatus.PENDING.value
        await self.repos.pre_auths.stage(pre_auth)

        await record_stage_change(
            self.repos, lead, CaseStage.PREAUTH_RAISED, user.id, f"Pre-auth raised for {choice.hospital_name}"
        )
        await self.notifier.notify_role(
            UserRole.INSURANCE_HEAD,
            NotificationType.PRE_AUTH_RAISED,
            "Pre-auth raised",
            f"Pre-auth raised for {lead.patient_name} at {choice.hospital_name}",
            link=f"/pre-auth/{kyp.id}",
            related_id=pre_auth.id,
        )
        await self.repos.commit()
        log_workflow_event(
            "pre_auth_raised", pre_auth.id, actor_id=user.id, new_hospital=choice.is_new_hospital_request
        )
        return pre_auth

    async def initiate(self, user: User, lead_id: str, data: AdmissionCreate) -> AdmissionRecord:
        lead = await self._get_lead(lead_id)
        self._ensure_owner(user, lead, "initiate admission")
        case_flow.require_stage(lead.case_stage, case_flow.INITIATE_STAGES, "initiate admission")
        if await self.repos.admissions.get_by_lead(lead.id):
            raise ConflictError("Admission has already been initiated for this lead")

        admission = AdmissionRecord(lead_id=lead.id, initiated_by_id=user.id, **data.model_dump())
        await self.repos.admissions.stage(admission)
        await record_stage_change(self.repos, lead, CaseStage.INITIATED, user.id, "Admission initiated")
        await self.repos.commit()
        log_workflow_event("admission_initiated", admission.id, actor_id=user.id, lead_id=lead.id)
        return admission

    async def mark_ipd(self, user: User, lead_id: str, data: IPDMarkRequest) -> AdmissionRecord:
        """Record the in-patient status of an initiated case."""
        lead = await self._get_lead(lead_id)
        self._ensure_owner(user, lead, "update IPD status")
        case_flow.require_stage(lead.case_stage, case_flow.IPD_MARK_STAGES, "update IPD status")
        admission = await self.repos.admissions.get_by_lead(lead.id)
        if admission is None:
            raise InvalidStateError("Admission must be initiated before updating IPD status")
        case_flow.validate_ipd_mark(data.status, data.reason, data.new_surgery_date, data.discharge_date)

        admission.ipd_status = data.status.value
        admission.ipd_status_reason = data.reason
        admission.ipd_status_notes = data.notes
        admission.new_surgery_date = data.new_surgery_date
        admission.ipd_discharge_date = data.discharge_date
        admission.ipd_status_updated_at = utc_now_naive()
        await self.repos.admissions.stage(admission)

        next_stage = case_flow.stage_after_ipd_mark(lead.case_stage, data.status)
        await record_stage_change(self.repos, lead, next_stage, user.id, f"IPD status: {data.status.value}")
        await self.notifier.notify_role(
            UserRole.INSURANCE_HEAD,
            NotificationType.IPD_MARKED,
            "IPD status updated",
            f"{lead.patient_name} marked {data.status.value}",
            link=f"/leads/{lead.id}",
            related_id=admission.id,
        )
        await self.repos.commit()
        log_workflow_event("ipd_marked", admission.id, actor_id=user.id, status=data.status.value)
        return admission

    async def discharge(self, user: User, lead_id: str, note: Optional[str] = None) -> Lead:
        lead = await self._get_lead(lead_id)
        self._ensure_owner(user, lead, "discharge the patient")
        case_flow.require_stage(lead.case_stage, case_flow.DISCHARGE_STAGES, "discharge")
        await record_stage_change(self.repos, lead, CaseStage.DISCHARGED, user.id, note or "Patient discharged")
        await self.repos.commit()
        log_workflow_event("lead_discharged", lead.id, actor_id=user.id)
        return lead
