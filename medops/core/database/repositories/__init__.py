"""
Database repository layer using SQLModel.

This package contains all repository classes organized by business domain.
Each module provides data access operations for its corresponding SQLModel
entity models.

Modules:
- base: AsyncBaseRepository interface, AsyncSqlRepository and AsyncQueryBuilder
- users: Users and sales teams
- leads: Leads, stage history, KYP submissions, patient follow-ups and admission records
- pre_auth: Pre-authorizations, hospital suggestions, initiate forms and insurance queries
- settlement: Discharge sheets and P/L records
- finance: Finance masters, ledger entries and ledger audit trail
- hr: Departments, employees, attendance punches and leave
- ijp: Job postings and referrals
- tasks: Tasks
- notifications: In-app notifications
- request_logs: Served API requests
- bundle: SqlRepoBundle for dependency injection
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
from .bundle import SqlRepoBundle, build_sql_repos_from_session

__all__ = [
    "SqlRepoBundle",
    "build_sql_repos_from_session",
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
