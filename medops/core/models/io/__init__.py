"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities so the API contract can evolve independently of the tables.

Modules:
- common: Pagination envelope and acknowledgements
- auth: Login, users and teams
- leads: Leads and the case flow up to admission
- pre_auth: Pre-authorization decisions, the initiate form and insurance queries
- settlement: Discharge sheets and P/L records
- finance: Finance masters, ledger and reports
- hr: Departments, employees, attendance and leave
- ijp: Job postings and referrals
- tasks: Tasks
- notifications: Notifications
- analytics: MD finance analytics
- admin: System health, metrics and request logs
"""

from .common import MessageResponse, PaginationMeta

__all__ = [
    "MessageResponse",
    "PaginationMeta",
]
