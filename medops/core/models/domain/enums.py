"""Domain enums for the MedOps service.

Values are stored as plain strings in the database, so every enum here is a
``str`` enum whose value matches its name.
"""

from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """Roles a user can hold. Permissions per role live in ``server.core.rbac``."""

    MD = "MD"
    SALES_HEAD = "SALES_HEAD"
    TEAM_LEAD = "TEAM_LEAD"
    BD = "BD"
    INSURANCE_HEAD = "INSURANCE_HEAD"
    PL_HEAD = "PL_HEAD"
    HR_HEAD = "HR_HEAD"
    FINANCE_HEAD = "FINANCE_HEAD"
    ADMIN = "ADMIN"
    USER = "USER"


class CaseStage(str, Enum):
    """
    Stage of a patient case.

    A case moves from the first sales contact through KYP, pre-auth and
    admission to discharge and settlement.
    """

    NEW_LEAD = "NEW_LEAD"
    KYP_BASIC_PENDING = "KYP_BASIC_PENDING"
    KYP_BASIC_COMPLETE = "KYP_BASIC_COMPLETE"
    KYP_DETAILED_PENDING = "KYP_DETAILED_PENDING"
    KYP_DETAILED_COMPLETE = "KYP_DETAILED_COMPLETE"
    KYP_PENDING = "KYP_PENDING"  # Legacy single-step KYP flow.
    KYP_COMPLETE = "KYP_COMPLETE"  # Legacy single-step KYP flow.
    PREAUTH_RAISED = "PREAUTH_RAISED"
    PREAUTH_COMPLETE = "PREAUTH_COMPLETE"
    INITIATED = "INITIATED"
    ADMITTED = "ADMITTED"
    IPD_DONE = "IPD_DONE"
    DISCHARGED = "DISCHARGED"
    PL_PENDING = "PL_PENDING"
    OUTSTANDING = "OUTSTANDING"


class PipelineStage(str, Enum):
    """Which team currently owns a lead."""

    SALES = "SALES"
    INSURANCE = "INSURANCE"
    PL = "PL"
    COMPLETED = "COMPLETED"
    LOST = "LOST"


class KYPStatus(str, Enum):
    """Progress of a KYP submission."""

    PENDING = "PENDING"
    KYP_DETAILS_ADDED = "KYP_DETAILS_ADDED"
    PRE_AUTH_COMPLETE = "PRE_AUTH_COMPLETE"
    FOLLOW_UP_COMPLETE = "FOLLOW_UP_COMPLETE"
    COMPLETED = "COMPLETED"


class PreAuthStatus(str, Enum):
    """Approval status of a pre-authorization."""

    PENDING = "PENDING"
    TEMP_APPROVED = "TEMP_APPROVED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class PreAuthAction(str, Enum):
    """Decisions insurance can take on a raised pre-authorization."""

    TEMP_APPROVE = "TEMP_APPROVE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"


class IPDStatus(str, Enum):
    """Admission outcome marked by the BD after initiation."""

    ADMITTED_DONE = "ADMITTED_DONE"
    POSTPONED = "POSTPONED"
    CANCELLED = "CANCELLED"
    DISCHARGED = "DISCHARGED"


class PayoutStatus(str, Enum):
    """Payout state of a P/L record share."""

    PENDING = "PENDING"
    PAID = "PAID"


class TransactionType(str, Enum):
    """Kind of ledger entry."""

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    SELF_TRANSFER = "SELF_TRANSFER"


class LedgerStatus(str, Enum):
    """Approval status of a ledger entry or of its edit request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class LedgerAuditAction(str, Enum):
    """Actions recorded in the ledger audit trail."""

    CREATED = "CREATED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"
    EDIT_REQUESTED = "EDIT_REQUESTED"
    EDIT_APPROVED = "EDIT_APPROVED"
    EDIT_REJECTED = "EDIT_REJECTED"
    UNDONE = "UNDONE"


class PartyType(str, Enum):
    """Counterparty classification in the finance masters."""

    BUYER = "BUYER"
    SELLER = "SELLER"
    VENDOR = "VENDOR"
    OTHER = "OTHER"


class PunchDirection(str, Enum):
    """Direction of a biometric attendance punch."""

    IN = "IN"
    OUT = "OUT"


class ApplicationStatus(str, Enum):
    """Status of an IJP referral."""

    PENDING = "PENDING"
    SHORTLISTED = "SHORTLISTED"
    REJECTED = "REJECTED"
    HIRED = "HIRED"


class TaskPriority(str, Enum):
    """Priority of a task."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class TaskStatus(str, Enum):
    """Lifecycle of a task."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class NotificationType(str, Enum):
    """Kinds of in-app notifications."""

    KYP_SUBMITTED = "KYP_SUBMITTED"
    PRE_AUTH_RAISED = "PRE_AUTH_RAISED"
    PRE_AUTH_TEMP_APPROVED = "PRE_AUTH_TEMP_APPROVED"
    PRE_AUTH_APPROVED = "PRE_AUTH_APPROVED"
    PRE_AUTH_REJECTED = "PRE_AUTH_REJECTED"
    IPD_MARKED = "IPD_MARKED"
    QUERY_RAISED = "QUERY_RAISED"
    QUERY_ANSWERED = "QUERY_ANSWERED"
    FOLLOW_UP_COMPLETE = "FOLLOW_UP_COMPLETE"
    TASK_ASSIGNED = "TASK_ASSIGNED"
    GENERAL = "GENERAL"


class LeaveStatus(str, Enum):
    """Decision on a leave request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class QueryStatus(str, Enum):
    """Lifecycle of an insurance query raised on a pre-auth."""

    PENDING = "PENDING"
    ANSWERED = "ANSWERED"
    RESOLVED = "RESOLVED"
