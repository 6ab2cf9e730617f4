"""MedOps CRM.

This package contains the backend service for a hospital operations CRM. It
tracks a patient case from the first sales lead through insurance
pre-authorization, admission, discharge and profit/loss settlement, and carries
the supporting finance, HR and task modules around that workflow.

Core subpackages
----------------

- ``medops.core``:

  - Logging, monitoring and the domain error taxonomy.
  - Domain enums and API I/O models.
  - ``rules``: pure business rules (pre-auth state machine, revenue split,
    ledger balances, attendance aggregation, task due status).
  - The SQLModel database layer (entities, repositories, session management).

- ``medops.server``:

  - The FastAPI application, its routers, middleware and exception handlers.
  - The service layer that applies the rules against the repositories.

Typical case flow
-----------------

1. A BD creates a lead and submits the basic KYP.
2. Insurance suggests hospitals, the BD completes the detailed KYP and raises
   the pre-auth.
3. Insurance temp-approves, approves or rejects the pre-auth.
4. The BD initiates admission, marks IPD status and discharge.
5. Insurance creates the discharge sheet, the P/L team settles the P/L record.
"""

__version__ = "1.0.0"
