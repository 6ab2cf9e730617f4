"""Initial schema for MedOps CRM

Revision ID: 20260101_000000
Revises: None
Create Date: 2026-01-01 00:00:00.000000

This is the initial migration that creates all tables of the MedOps service:
- Users and sales teams
- Leads, case stage history, KYP submissions and admission records
- Pre-authorizations, hospital suggestions and insurance initiate forms
- Discharge sheets and P/L records
- Finance masters, the ledger and its audit trail
- Departments, employees and attendance logs
- Job postings and referrals, tasks, notifications and request logs

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260101_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(64), nullable=False)


def _timestamps(updated: bool = True) -> list:
    columns = [sa.Column("created_at", sa.DateTime(), nullable=False)]
    if updated:
        columns.append(sa.Column("updated_at", sa.DateTime(), nullable=False))
    return columns


def _index(table: str, *columns: str, unique: bool = False) -> None:
    for column in columns:
        op.create_index(f"ix_{table}_{column}", table, [column], unique=unique)


def upgrade() -> None:
    """Create all tables."""

    # Users and teams
    op.create_table(
        "mo_teams",
        _id(),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("team_lead_id", sa.String(64), nullable=True),
        sa.Column("department_id", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    _index("mo_teams", "team_lead_id", "department_id")

    op.create_table(
        "mo_users",
        _id(),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(32), nullable=False),
        sa.Column("team_id", sa.String(64), sa.ForeignKey("mo_teams.id"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_users", "email", unique=True)
    _index("mo_users", "role", "team_id")

    # Leads and case flow
    op.create_table(
        "mo_leads",
        _id(),
        sa.Column("lead_ref", sa.String(64), nullable=False),
        sa.Column("patient_name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=True),
        sa.Column("city", sa.String(128), nullable=True),
        sa.Column("treatment", sa.String(255), nullable=True),
        sa.Column("bd_id", sa.String(64), sa.ForeignKey("mo_users.id"), nullable=False),
        sa.Column("team_id", sa.String(64), nullable=True),
        sa.Column("case_stage", sa.String(32), nullable=False),
        sa.Column("pipeline_stage", sa.String(16), nullable=False),
        sa.Column("lost_reason", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_leads", "lead_ref", unique=True)
    _index("mo_leads", "bd_id", "team_id", "case_stage", "pipeline_stage", "created_at")

    op.create_table(
        "mo_case_stage_history",
        _id(),
        sa.Column("lead_id", sa.String(64), sa.ForeignKey("mo_leads.id"), nullable=False),
        sa.Column("from_stage", sa.String(32), nullable=True),
        sa.Column("to_stage", sa.String(32), nullable=False),
        sa.Column("changed_by_id", sa.String(64), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_case_stage_history", "lead_id", "created_at")

    op.create_table(
        "mo_kyp_submissions",
        _id(),
        sa.Column("lead_id", sa.String(64), sa.ForeignKey("mo_leads.id"), nullable=False),
        sa.Column("submitted_by_id", sa.String(64), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("aadhar", sa.String(512), nullable=True),
        sa.Column("pan", sa.String(512), nullable=True),
        sa.Column("insurance_card", sa.String(512), nullable=True),
        sa.Column("disease", sa.String(255), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("remark", sa.Text(), nullable=True),
        sa.Column("patient_consent", sa.Boolean(), nullable=False),
        sa.Column("detailed_payload", sa.JSON(), nullable=True),
        sa.Column("detailed_submitted_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("lead_id"),
    )
    _index("mo_kyp_submissions", "submitted_by_id", "status")

    op.create_table(
        "mo_admission_records",
        _id(),
        sa.Column("lead_id", sa.String(64), sa.ForeignKey("mo_leads.id"), nullable=False),
        sa.Column("admission_date", sa.DateTime(), nullable=False),
        sa.Column("admission_time", sa.String(16), nullable=False),
        sa.Column("admitting_hospital", sa.String(255), nullable=False),
        sa.Column("hospital_address", sa.Text(), nullable=False),
        sa.Column("surgery_date", sa.DateTime(), nullable=False),
        sa.Column("surgery_time", sa.String(16), nullable=False),
        sa.Column("tpa", sa.String(128), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("initiated_by_id", sa.String(64), nullable=False),
        sa.Column("ipd_status", sa.String(32), nullable=True),
        sa.Column("ipd_status_reason", sa.Text(), nullable=True),
        sa.Column("ipd_status_notes", sa.Text(), nullable=True),
        sa.Column("new_surgery_date", sa.DateTime(), nullable=True),
        sa.Column("ipd_discharge_date", sa.DateTime(), nullable=True),
        sa.Column("ipd_status_updated_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("lead_id"),
    )

    # Pre-authorization
    op.create_table(
        "mo_pre_authorizations",
        _id(),
        sa.Column("kyp_submission_id", sa.String(64), sa.ForeignKey("mo_kyp_submissions.id"), nullable=False),
        sa.Column("sum_insured", sa.String(64), nullable=True),
        sa.Column("room_rent", sa.String(64), nullable=True),
        sa.Column("capping", sa.String(64), nullable=True),
        sa.Column("copay", sa.String(64), nullable=True),
        sa.Column("icu", sa.String(64), nullable=True),
        sa.Column("insurance", sa.String(128), nullable=True),
        sa.Column("tpa", sa.String(128), nullable=True),
        sa.Column("requested_hospital_name", sa.String(255), nullable=True),
        sa.Column("requested_room_type", sa.String(64), nullable=True),
        sa.Column("expected_admission_date", sa.DateTime(), nullable=True),
        sa.Column("expected_surgery_date", sa.DateTime(), nullable=True),
        sa.Column("is_new_hospital_request", sa.Boolean(), nullable=False),
        sa.Column("new_hospital_name", sa.String(255), nullable=True),
        sa.Column("new_hospital_request_raised_at", sa.DateTime(), nullable=True),
        sa.Column("pre_auth_raised_at", sa.DateTime(), nullable=True),
        sa.Column("raised_by_id", sa.String(64), nullable=True),
        sa.Column("approval_status", sa.String(16), nullable=False),
        sa.Column("handled_by_id", sa.String(64), nullable=True),
        sa.Column("handled_at", sa.DateTime(), nullable=True),
        sa.Column("temp_approved_at", sa.DateTime(), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("rejected_at", sa.DateTime(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("approval_notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("kyp_submission_id"),
    )
    _index("mo_pre_authorizations", "approval_status")

    op.create_table(
        "mo_hospital_suggestions",
        _id(),
        sa.Column("pre_auth_id", sa.String(64), sa.ForeignKey("mo_pre_authorizations.id"), nullable=False),
        sa.Column("hospital_name", sa.String(255), nullable=False),
        sa.Column("tentative_bill", sa.Float(), nullable=True),
        sa.Column("room_rent_general", sa.Float(), nullable=True),
        sa.Column("room_rent_private", sa.Float(), nullable=True),
        sa.Column("room_rent_icu", sa.Float(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_hospital_suggestions", "pre_auth_id")

    op.create_table(
        "mo_insurance_queries",
        _id(),
        sa.Column("pre_auth_id", sa.String(64), sa.ForeignKey("mo_pre_authorizations.id"), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("raised_by_id", sa.String(64), nullable=False),
        sa.Column("raised_at", sa.DateTime(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=True),
        sa.Column("answered_by_id", sa.String(64), nullable=True),
        sa.Column("answered_at", sa.DateTime(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_insurance_queries", "pre_auth_id", "status")

    op.create_table(
        "mo_patient_follow_ups",
        _id(),
        sa.Column("kyp_submission_id", sa.String(64), sa.ForeignKey("mo_kyp_submissions.id"), nullable=False),
        sa.Column("admission_date", sa.DateTime(), nullable=True),
        sa.Column("surgery_date", sa.DateTime(), nullable=True),
        sa.Column("hospital_name", sa.String(255), nullable=True),
        sa.Column("doctor_name", sa.String(255), nullable=True),
        sa.Column("prescription", sa.Text(), nullable=True),
        sa.Column("report", sa.Text(), nullable=True),
        sa.Column("prescription_file_url", sa.String(512), nullable=True),
        sa.Column("report_file_url", sa.String(512), nullable=True),
        sa.Column("updated_by_id", sa.String(64), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("kyp_submission_id"),
    )

    op.create_table(
        "mo_insurance_initiate_forms",
        _id(),
        sa.Column("lead_id", sa.String(64), sa.ForeignKey("mo_leads.id"), nullable=False),
        sa.Column("total_bill_amount", sa.Float(), nullable=False),
        sa.Column("discount", sa.Float(), nullable=False),
        sa.Column("other_reductions", sa.Float(), nullable=False),
        sa.Column("copay", sa.Float(), nullable=True),
        sa.Column("copay_buffer", sa.Float(), nullable=False),
        sa.Column("deductible", sa.Float(), nullable=False),
        sa.Column("policy_deductible_amount", sa.Float(), nullable=False),
        sa.Column("total_authorized_amount", sa.Float(), nullable=False),
        sa.Column("amount_to_be_paid_by_insurance", sa.Float(), nullable=False),
        sa.Column("room_category", sa.String(64), nullable=True),
        sa.Column("created_by_id", sa.String(64), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("lead_id"),
    )

    # Settlement
    share_columns = [
        sa.Column("hospital_share_pct", sa.Float(), nullable=True),
        sa.Column("mediend_share_pct", sa.Float(), nullable=True),
        sa.Column("hospital_share_amount", sa.Float(), nullable=False),
        sa.Column("mediend_share_amount", sa.Float(), nullable=False),
        sa.Column("doctor_share_amount", sa.Float(), nullable=False),
    ]
    op.create_table(
        "mo_discharge_sheets",
        _id(),
        sa.Column("lead_id", sa.String(64), sa.ForeignKey("mo_leads.id"), nullable=False),
        sa.Column("doctor_name", sa.String(255), nullable=True),
        sa.Column("surgery_name", sa.String(255), nullable=True),
        sa.Column("admission_date", sa.DateTime(), nullable=True),
        sa.Column("discharge_date", sa.DateTime(), nullable=True),
        sa.Column("room_rent_amount", sa.Float(), nullable=False),
        sa.Column("pharmacy_amount", sa.Float(), nullable=False),
        sa.Column("investigation_amount", sa.Float(), nullable=False),
        sa.Column("consumables_amount", sa.Float(), nullable=False),
        sa.Column("implants_amount", sa.Float(), nullable=False),
        sa.Column("instruments_amount", sa.Float(), nullable=False),
        sa.Column("total_bill_amount", sa.Float(), nullable=False),
        sa.Column("deduction_amount", sa.Float(), nullable=False),
        sa.Column("discount_amount", sa.Float(), nullable=False),
        sa.Column("waived_off_amount", sa.Float(), nullable=False),
        sa.Column("other_deductions", sa.Float(), nullable=False),
        sa.Column("total_deductions", sa.Float(), nullable=False),
        sa.Column("final_approved_amount", sa.Float(), nullable=True),
        sa.Column("net_settlement_amount", sa.Float(), nullable=False),
        *[c.copy() for c in share_columns],
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("created_by_id", sa.String(64), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("lead_id"),
    )

    op.create_table(
        "mo_pl_records",
        _id(),
        sa.Column("lead_id", sa.String(64), sa.ForeignKey("mo_leads.id"), nullable=False),
        sa.Column("discharge_sheet_id", sa.String(64), sa.ForeignKey("mo_discharge_sheets.id"), nullable=False),
        sa.Column("bill_amount", sa.Float(), nullable=False),
        sa.Column("total_amount", sa.Float(), nullable=False),
        *[c.copy() for c in share_columns],
        sa.Column("referral_amount", sa.Float(), nullable=False),
        sa.Column("cab_charges", sa.Float(), nullable=False),
        sa.Column("dc_charges", sa.Float(), nullable=False),
        sa.Column("doctor_charges", sa.Float(), nullable=False),
        sa.Column("implant_cost", sa.Float(), nullable=False),
        sa.Column("net_profit", sa.Float(), nullable=False),
        sa.Column("final_profit", sa.Float(), nullable=False),
        sa.Column("final_profit_override", sa.Float(), nullable=True),
        sa.Column("hospital_payout_status", sa.String(16), nullable=False),
        sa.Column("doctor_payout_status", sa.String(16), nullable=False),
        sa.Column("closed_at", sa.DateTime(), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        sa.Column("created_by_id", sa.String(64), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("lead_id"),
    )
    _index("mo_pl_records", "discharge_sheet_id", "hospital_payout_status", "doctor_payout_status")

    # Finance masters
    op.create_table(
        "mo_finance_parties",
        _id(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("party_type", sa.String(16), nullable=False),
        sa.Column("contact", sa.String(255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_finance_parties", "name")

    for table, name_length in (("mo_finance_heads", 255), ("mo_finance_payment_types", 128)):
        op.create_table(
            table,
            _id(),
            sa.Column("name", sa.String(name_length), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("is_active", sa.Boolean(), nullable=False),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("name"),
        )

    op.create_table(
        "mo_finance_payment_modes",
        _id(),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("opening_balance", sa.Float(), nullable=False),
        sa.Column("current_balance", sa.Float(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    # Ledger
    op.create_table(
        "mo_ledger_entries",
        _id(),
        sa.Column("serial_number", sa.String(16), nullable=False),
        sa.Column("transaction_type", sa.String(16), nullable=False),
        sa.Column("transaction_date", sa.DateTime(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("party_id", sa.String(64), sa.ForeignKey("mo_finance_parties.id"), nullable=False),
        sa.Column("head_id", sa.String(64), sa.ForeignKey("mo_finance_heads.id"), nullable=False),
        sa.Column("payment_type_id", sa.String(64), sa.ForeignKey("mo_finance_payment_types.id"), nullable=False),
        sa.Column("payment_mode_id", sa.String(64), nullable=True),
        sa.Column("received_amount", sa.Float(), nullable=True),
        sa.Column("payment_amount", sa.Float(), nullable=True),
        sa.Column("component_a", sa.Float(), nullable=True),
        sa.Column("component_b", sa.Float(), nullable=True),
        sa.Column("from_payment_mode_id", sa.String(64), nullable=True),
        sa.Column("to_payment_mode_id", sa.String(64), nullable=True),
        sa.Column("transfer_amount", sa.Float(), nullable=True),
        sa.Column("current_balance", sa.Float(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("approved_by_id", sa.String(64), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("edit_request_status", sa.String(16), nullable=True),
        sa.Column("edit_requested_changes", sa.JSON(), nullable=True),
        sa.Column("edit_request_reason", sa.Text(), nullable=True),
        sa.Column("edit_requested_by_id", sa.String(64), nullable=True),
        sa.Column("edit_requested_at", sa.DateTime(), nullable=True),
        sa.Column("edit_decided_by_id", sa.String(64), nullable=True),
        sa.Column("edit_decided_at", sa.DateTime(), nullable=True),
        sa.Column("edit_decision_reason", sa.Text(), nullable=True),
        sa.Column("edit_count", sa.Integer(), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("created_by_id", sa.String(64), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_ledger_entries", "serial_number", unique=True)
    _index(
        "mo_ledger_entries",
        "transaction_type",
        "transaction_date",
        "party_id",
        "head_id",
        "payment_type_id",
        "payment_mode_id",
        "status",
        "edit_request_status",
        "is_deleted",
    )

    op.create_table(
        "mo_ledger_audit_logs",
        _id(),
        sa.Column("ledger_entry_id", sa.String(64), sa.ForeignKey("mo_ledger_entries.id"), nullable=False),
        sa.Column("action", sa.String(32), nullable=False),
        sa.Column("previous_data", sa.JSON(), nullable=True),
        sa.Column("new_data", sa.JSON(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("performed_by_id", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_ledger_audit_logs", "ledger_entry_id", "created_at")

    # HR
    op.create_table(
        "mo_departments",
        _id(),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("head_id", sa.String(64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "mo_employees",
        _id(),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("mo_users.id"), nullable=False),
        sa.Column("employee_code", sa.String(32), nullable=False),
        sa.Column("department_id", sa.String(64), sa.ForeignKey("mo_departments.id"), nullable=True),
        sa.Column("designation", sa.String(128), nullable=True),
        sa.Column("date_of_joining", sa.Date(), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("salary", sa.Float(), nullable=True),
        sa.Column("biometric_code", sa.String(32), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )
    _index("mo_employees", "employee_code", unique=True)
    _index("mo_employees", "department_id", "biometric_code")

    op.create_table(
        "mo_attendance_logs",
        _id(),
        sa.Column("employee_id", sa.String(64), sa.ForeignKey("mo_employees.id"), nullable=False),
        sa.Column("log_date", sa.DateTime(), nullable=False),
        sa.Column("punch_direction", sa.String(8), nullable=False),
        sa.Column("device_id", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_attendance_logs", "employee_id", "log_date")

    op.create_table(
        "mo_leave_types",
        _id(),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("max_days", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "mo_leave_balances",
        _id(),
        sa.Column("employee_id", sa.String(64), sa.ForeignKey("mo_employees.id"), nullable=False),
        sa.Column("leave_type_id", sa.String(64), sa.ForeignKey("mo_leave_types.id"), nullable=False),
        sa.Column("allocated", sa.Float(), nullable=False),
        sa.Column("used", sa.Float(), nullable=False),
        sa.Column("remaining", sa.Float(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "leave_type_id"),
    )
    _index("mo_leave_balances", "employee_id", "leave_type_id")

    op.create_table(
        "mo_leave_requests",
        _id(),
        sa.Column("employee_id", sa.String(64), sa.ForeignKey("mo_employees.id"), nullable=False),
        sa.Column("leave_type_id", sa.String(64), sa.ForeignKey("mo_leave_types.id"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("days", sa.Integer(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("approved_by_id", sa.String(64), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("remarks", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_leave_requests", "employee_id", "leave_type_id", "status")

    # IJP
    op.create_table(
        "mo_job_postings",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("department", sa.String(128), nullable=True),
        sa.Column("location", sa.String(128), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_by_id", sa.String(64), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_job_postings", "is_active")

    op.create_table(
        "mo_referrals",
        _id(),
        sa.Column("job_posting_id", sa.String(64), sa.ForeignKey("mo_job_postings.id"), nullable=False),
        sa.Column("referred_by_id", sa.String(64), nullable=False),
        sa.Column("candidate_name", sa.String(255), nullable=False),
        sa.Column("candidate_email", sa.String(255), nullable=True),
        sa.Column("candidate_phone", sa.String(32), nullable=True),
        sa.Column("resume_url", sa.String(1024), nullable=False),
        sa.Column("documents", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("hr_notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_referrals", "job_posting_id", "referred_by_id", "status")

    # Tasks, notifications and request logs
    op.create_table(
        "mo_tasks",
        _id(),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("priority", sa.String(16), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("created_by_id", sa.String(64), nullable=False),
        sa.Column("assigned_to_id", sa.String(64), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_tasks", "due_date", "priority", "status", "created_by_id", "assigned_to_id")

    op.create_table(
        "mo_notifications",
        _id(),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("link", sa.String(512), nullable=True),
        sa.Column("related_id", sa.String(64), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_notifications", "user_id", "is_read", "created_at")

    op.create_table(
        "mo_request_logs",
        _id(),
        sa.Column("method", sa.String(8), nullable=False),
        sa.Column("path", sa.String(512), nullable=False),
        sa.Column("status_code", sa.Integer(), nullable=False),
        sa.Column("duration_ms", sa.Float(), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("user_agent", sa.String(512), nullable=True),
        sa.Column("error", sa.String(1024), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    _index("mo_request_logs", "path", "status_code", "created_at")


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    for table in (
        "mo_request_logs",
        "mo_notifications",
        "mo_tasks",
        "mo_referrals",
        "mo_job_postings",
        "mo_leave_requests",
        "mo_leave_balances",
        "mo_leave_types",
        "mo_attendance_logs",
        "mo_employees",
        "mo_departments",
        "mo_ledger_audit_logs",
        "mo_ledger_entries",
        "mo_finance_payment_modes",
        "mo_finance_payment_types",
        "mo_finance_heads",
        "mo_finance_parties",
        "mo_pl_records",
        "mo_discharge_sheets",
        "mo_insurance_initiate_forms",
        "mo_patient_follow_ups",
        "mo_insurance_queries",
        "mo_hospital_suggestions",
        "mo_pre_authorizations",
        "mo_admission_records",
        "mo_kyp_submissions",
        "mo_case_stage_history",
        "mo_leads",
        "mo_users",
        "mo_teams",
    ):
        op.drop_table(table)
