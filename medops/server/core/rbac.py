"""
Role based access control.

Maps each role to the permissions it holds and decides which leads a user
may see. ADMIN holds every permission.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Optional

from medops.core.models.domain import UserRole


class Permission:
    """Permission constants."""

    # Leads
    LEADS_READ = "leads:read"
    LEADS_WRITE = "leads:write"
    LEADS_ASSIGN = "leads:assign"

    # Sales targets and analytics
    TARGETS_READ = "targets:read"
    TARGETS_WRITE = "targets:write"
    ANALYTICS_READ = "analytics:read"
    REPORTS_EXPORT = "reports:export"

    # Users
    USERS_READ = "users:read"
    USERS_WRITE = "users:write"

    # Insurance and P/L
    INSURANCE_READ = "insurance:read"
    INSURANCE_WRITE = "insurance:write"
    PL_READ = "pl:read"
    PL_WRITE = "pl:write"

    # Finance
    FINANCE_READ = "finance:read"
    FINANCE_WRITE = "finance:write"
    FINANCE_APPROVE = "finance:approve"
    FINANCE_MASTERS_WRITE = "finance:masters:write"

    # HR
    EMPLOYEES_READ = "hrms:employees:read"
    EMPLOYEES_WRITE = "hrms:employees:write"
    ATTENDANCE_READ = "hrms:attendance:read"
    ATTENDANCE_WRITE = "hrms:attendance:write"
    LEAVES_READ = "hrms:leaves:read"
    LEAVES_WRITE = "hrms:leaves:write"


ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[str]] = {
    UserRole.MD: frozenset(
        {
            Permission.LEADS_READ,
            Permission.ANALYTICS_READ,
            Permission.REPORTS_EXPORT,
            Permission.USERS_READ,
            Permission.INSURANCE_READ,
            Permission.PL_READ,
            Permission.FINANCE_READ,
            Permission.FINANCE_APPROVE,
            Permission.EMPLOYEES_READ,
            Permission.ATTENDANCE_READ,
            Permission.LEAVES_READ,
        }
    ),
    UserRole.SALES_HEAD: frozenset(
        {
            Permission.LEADS_READ,
            Permission.LEADS_WRITE,
            Permission.LEADS_ASSIGN,
            Permission.TARGETS_READ,
            Permission.TARGETS_WRITE,
            Permission.ANALYTICS_READ,
            Permission.REPORTS_EXPORT,
        }
    ),
    UserRole.TEAM_LEAD: frozenset(
        {
            Permission.LEADS_READ,
            Permission.LEADS_WRITE,
            Permission.LEADS_ASSIGN,
            Permission.TARGETS_READ,
            Permission.ANALYTICS_READ,
        }
    ),
    UserRole.BD: frozenset(
        {Permission.LEADS_READ, Permission.LEADS_WRITE, Permission.TARGETS_READ, Permission.ANALYTICS_READ}
    ),
    UserRole.INSURANCE_HEAD: frozenset(
        {Permission.LEADS_READ, Permission.INSURANCE_READ, Permission.INSURANCE_WRITE, Permission.ANALYTICS_READ}
    ),
    UserRole.PL_HEAD: frozenset(
        {Permission.LEADS_READ, Permission.PL_READ, Permission.PL_WRITE, Permission.ANALYTICS_READ}
    ),
    UserRole.HR_HEAD: frozenset(
        {
            Permission.USERS_READ,
            Permission.USERS_WRITE,
            Permission.ANALYTICS_READ,
            Permission.EMPLOYEES_READ,
            Permission.EMPLOYEES_WRITE,
            Permission.ATTENDANCE_READ,
            Permission.ATTENDANCE_WRITE,
            Permission.LEAVES_READ,
            Permission.LEAVES_WRITE,
        }
    ),
    UserRole.FINANCE_HEAD: frozenset(
        {
            Permission.FINANCE_READ,
            Permission.FINANCE_WRITE,
            Permission.FINANCE_MASTERS_WRITE,
            Permission.ANALYTICS_READ,
        }
    ),
    UserRole.USER: frozenset(),
}

# Roles that see every lead regardless of owner or team
ALL_LEADS_ROLES: FrozenSet[UserRole] = frozenset(
    {UserRole.MD, UserRole.SALES_HEAD, UserRole.INSURANCE_HEAD, UserRole.PL_HEAD, UserRole.ADMIN}
)


def _role(role: str) -> Optional[UserRole]:
    try:
        return UserRole(role)
    except ValueError:
        return None


def has_permission(role: str, permission: str) -> bool:
    """
    Check if a role holds a specific permission.

    Args:
        role: User role value
        permission: Permission string (e.g., "finance:approve")

    Returns:
        True if the role holds the permission, False otherwise
    """
    user_role = _role(role)
    if user_role is None:
        return False
    if user_role == UserRole.ADMIN:
        return True
    return permission in ROLE_PERMISSIONS.get(user_role, frozenset())


def lead_scope(role: str, user_id: str, team_id: Optional[str]) -> Dict[str, Optional[str]]:
    """Filters limiting a lead query to what a user may see.

    An empty dict means every lead. A user who fits no rule gets a filter
    that matches only their own leads.
    """
    user_role = _role(role)
    if user_role in ALL_LEADS_ROLES:
        return {}
    if user_role == UserRole.TEAM_LEAD and team_id:
        return {"team_id": team_id}
    return {"bd_id": user_id}


def can_access_lead(
    role: str, user_id: str, team_id: Optional[str], lead_bd_id: str, lead_team_id: Optional[str]
) -> bool:
    """Whether a user may see a specific lead."""
    scope = lead_scope(role, user_id, team_id)
    if not scope:
        return True
    if "team_id" in scope:
        return lead_team_id == scope["team_id"]
    return lead_bd_id == user_id
