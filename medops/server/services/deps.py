"""
Service Dependencies.

Provides request-scoped repositories and services for API endpoints. Each
request gets one database session; every service built for that request
shares it, so a workflow commits as a single unit of work.
"""

from typing import Annotated

from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from medops.core.database import get_session
from medops.core.database.entities.users import User
from medops.core.database.repositories import SqlRepoBundle, build_sql_repos_from_session
from medops.server.core.config import settings
from medops.server.core.security import get_current_user

from .analytics import AnalyticsService
from .attendance import AttendanceService
from .finance_masters import FinanceMasterService
from .finance_reports import FinanceReportService
from .hr import DepartmentService, EmployeeService
from .ijp import IJPService
from .kyp_followup import KYPFollowUpService
from .leads import LeadService
from .leaves import LeaveService
from .ledger import LedgerService
from .notifications import NotificationService
from .pre_auth import InitiateFormService, PreAuthService
from .settlement import SettlementService
from .system import SystemService
from .tasks import TaskService
from .users import UserService

SessionDep = Annotated[AsyncSession, Depends(get_session)]
CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_repos(session: SessionDep) -> SqlRepoBundle:
    return build_sql_repos_from_session(session=session)


ReposDep = Annotated[SqlRepoBundle, Depends(get_repos)]


def get_user_service(repos: ReposDep) -> UserService:
    return UserService(repos)


def get_lead_service(repos: ReposDep) -> LeadService:
    return LeadService(repos)


def get_pre_auth_service(repos: ReposDep) -> PreAuthService:
    return PreAuthService(repos)


def get_initiate_form_service(repos: ReposDep) -> InitiateFormService:
    return InitiateFormService(repos)


def get_settlement_service(repos: ReposDep) -> SettlementService:
    return SettlementService(repos)


def get_finance_master_service(repos: ReposDep) -> FinanceMasterService:
    return FinanceMasterService(repos)


def get_ledger_service(repos: ReposDep) -> LedgerService:
    return LedgerService(repos, settings.finance)


def get_finance_report_service(repos: ReposDep) -> FinanceReportService:
    return FinanceReportService(repos)


def get_department_service(repos: ReposDep) -> DepartmentService:
    return DepartmentService(repos)


def get_employee_service(repos: ReposDep) -> EmployeeService:
    return EmployeeService(repos)


def get_attendance_service(repos: ReposDep) -> AttendanceService:
    return AttendanceService(repos, settings.attendance.late_cutoff)


def get_leave_service(repos: ReposDep) -> LeaveService:
    return LeaveService(repos)


def get_kyp_follow_up_service(repos: ReposDep) -> KYPFollowUpService:
    return KYPFollowUpService(repos)


def get_ijp_service(repos: ReposDep) -> IJPService:
    return IJPService(repos)


def get_task_service(repos: ReposDep) -> TaskService:
    return TaskService(repos)


def get_notification_service(repos: ReposDep) -> NotificationService:
    return NotificationService(repos)


def get_analytics_service(repos: ReposDep) -> AnalyticsService:
    return AnalyticsService(repos)


def get_system_service(repos: ReposDep) -> SystemService:
    return SystemService(repos)


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
LeadServiceDep = Annotated[LeadService, Depends(get_lead_service)]
PreAuthServiceDep = Annotated[PreAuthService, Depends(get_pre_auth_service)]
InitiateFormServiceDep = Annotated[InitiateFormService, Depends(get_initiate_form_service)]
SettlementServiceDep = Annotated[SettlementService, Depends(get_settlement_service)]
FinanceMasterServiceDep = Annotated[FinanceMasterService, Depends(get_finance_master_service)]
LedgerServiceDep = Annotated[LedgerService, Depends(get_ledger_service)]
FinanceReportServiceDep = Annotated[FinanceReportService, Depends(get_finance_report_service)]
DepartmentServiceDep = Annotated[DepartmentService, Depends(get_department_service)]
EmployeeServiceDep = Annotated[EmployeeService, Depends(get_employee_service)]
AttendanceServiceDep = Annotated[AttendanceService, Depends(get_attendance_service)]
LeaveServiceDep = Annotated[LeaveService, Depends(get_leave_service)]
KYPFollowUpServiceDep = Annotated[KYPFollowUpService, Depends(get_kyp_follow_up_service)]
IJPServiceDep = Annotated[IJPService, Depends(get_ijp_service)]
TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
NotificationServiceDep = Annotated[NotificationService, Depends(get_notification_service)]
AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
SystemServiceDep = Annotated[SystemService, Depends(get_system_service)]
