"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances
sharing one session, so a service can change several tables and commit
them together.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlmodel.ext.asyncio.session import AsyncSession

from .finance import (
    HeadRepository,
    LedgerAuditLogRepository,
    LedgerEntryRepository,
    PartyRepository,
    PaymentModeRepository,
    PaymentTypeRepository,
)
from .hr import (
    AttendanceLogRepository,
    DepartmentRepository,
    EmployeeRepository,
    LeaveBalanceRepository,
    LeaveRequestRepository,
    LeaveTypeRepository,
)
from .ijp import JobPostingRepository, ReferralRepository
from .leads import (
    AdmissionRecordRepository,
    CaseStageHistoryRepository,
    KYPSubmissionRepository,
    LeadRepository,
    PatientFollowUpRepository,
)
from .notifications import NotificationRepository
from .pre_auth import (
    HospitalSuggestionRepository,
    InsuranceInitiateFormRepository,
    InsuranceQueryRepository,
    PreAuthorizationRepository,
)
from .request_logs import RequestLogRepository
from .settlement import DischargeSheetRepository, PLRecordRepository
from .tasks import TaskRepository
from .users import TeamRepository, UserRepository


@dataclass(frozen=True)
class SqlRepoBundle:
    """Convenience bundle of all SQL repositories for dependency injection."""

    session: AsyncSession
    users: UserRepository
    teams: TeamRepository
    leads: LeadRepository
    stage_history: CaseStageHistoryRepository
    kyp: KYPSubmissionRepository
    admissions: AdmissionRecordRepository
    follow_ups: PatientFollowUpRepository
    pre_auths: PreAuthorizationRepository
    suggestions: HospitalSuggestionRepository
    initiate_forms: InsuranceInitiateFormRepository
    insurance_queries: InsuranceQueryRepository
    discharge_sheets: DischargeSheetRepository
    pl_records: PLRecordRepository
    parties: PartyRepository
    heads: HeadRepository
    payment_types: PaymentTypeRepository
    payment_modes: PaymentModeRepository
    ledger: LedgerEntryRepository
    ledger_audit: LedgerAuditLogRepository
    departments: DepartmentRepository
    employees: EmployeeRepository
    attendance: AttendanceLogRepository
    leave_types: LeaveTypeRepository
    leave_balances: LeaveBalanceRepository
    leave_requests: LeaveRequestRepository
    job_postings: JobPostingRepository
    referrals: ReferralRepository
    tasks: TaskRepository
    notifications: NotificationRepository
    request_logs: RequestLogRepository

    async def commit(self) -> None:
        """Commit everything staged on the shared session."""
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


def build_sql_repos_from_session(*, session: AsyncSession) -> SqlRepoBundle:
    """Build a SqlRepoBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return SqlRepoBundle(
        session=session,
        users=UserRepository(session),
        teams=TeamRepository(session),
        leads=LeadRepository(session),
        stage_history=CaseStageHistoryRepository(session),
        kyp=KYPSubmissionRepository(session),
        admissions=AdmissionRecordRepository(session),
        follow_ups=PatientFollowUpRepository(session),
        pre_auths=PreAuthorizationRepository(session),
        suggestions=HospitalSuggestionRepository(session),
        initiate_forms=InsuranceInitiateFormRepository(session),
        insurance_queries=InsuranceQueryRepository(session),
        discharge_sheets=DischargeSheetRepository(session),
        pl_records=PLRecordRepository(session),
        parties=PartyRepository(session),
        heads=HeadRepository(session),
        payment_types=PaymentTypeRepository(session),
        payment_modes=PaymentModeRepository(session),
        ledger=LedgerEntryRepository(session),
        ledger_audit=LedgerAuditLogRepository(session),
        departments=DepartmentRepository(session),
        employees=EmployeeRepository(session),
        attendance=AttendanceLogRepository(session),
        leave_types=LeaveTypeRepository(session),
        leave_balances=LeaveBalanceRepository(session),
        leave_requests=LeaveRequestRepository(session),
        job_postings=JobPostingRepository(session),
        referrals=ReferralRepository(session),
        tasks=TaskRepository(session),
        notifications=NotificationRepository(session),
        request_logs=RequestLogRepository(session),
    )
