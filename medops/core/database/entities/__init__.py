"""
Database entity models.

This package contains all database entity models organized by business domain.
Importing it registers every table on the shared SQLModel metadata.

Modules:
- users: Users and sales teams
- leads: Leads, stage history, KYP submissions and admission records
- pre_auth: Pre-authorizations, hospital suggestions and initiate forms
- settlement: Discharge sheets and P/L records
- finance: Finance masters, ledger entries and the ledger audit trail
- hr: Departments, employees and attendance punches
- ijp: Internal job postings and referrals
- tasks: Tasks
- notifications: In-app notifications
- request_logs: Served API requests
"""

from . import (
    finance,
    hr,
    ijp,
    leads,
    notifications,
    pre_auth,
    request_logs,
    settlement,
    tasks,
    users,
)

__all__ = [
    "finance",
    "hr",
    "ijp",
    "leads",
    "notifications",
    "pre_auth",
    "request_logs",
    "settlement",
    "tasks",
    "users",
]
