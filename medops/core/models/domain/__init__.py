"""Domain-level types shared by the rules, the database layer and the API."""

from __future__ import annotations

from .enums import (
    ApplicationStatus,
    CaseStage,
    IPDStatus,
    KYPStatus,
    LedgerAuditAction,
    LeaveStatus,
    LedgerStatus,
    NotificationType,
    PartyType,
    PayoutStatus,
    PipelineStage,
    PreAuthAction,
    PreAuthStatus,
    PunchDirection,
    QueryStatus,
    TaskPriority,
    TaskStatus,
    TransactionType,
    UserRole,
)

__all__ = [
    "ApplicationStatus",
    "CaseStage",
    "IPDStatus",
    "KYPStatus",
    "LedgerAuditAction",
    "LeaveStatus",
    "LedgerStatus",
    "NotificationType",
    "PartyType",
    "PayoutStatus",
    "PipelineStage",
    "PreAuthAction",
    "PreAuthStatus",
    "PunchDirection",
    "QueryStatus",
    "TaskPriority",
    "TaskStatus",
    "TransactionType",
    "UserRole",
]
