"""
Pure business rules for the MedOps service.

Nothing in this package touches the database or the web layer. The service
layer loads records, asks these functions what is allowed or what the numbers
are, and persists the outcome.

Modules:
- money: rounding and tolerance helpers for currency amounts
- pre_auth: pre-authorization approval state machine
- case_flow: case stage guards for the lead workflow
- revenue: discharge sheet totals and P/L revenue split
- ledger: ledger serials, balance effects and approval windows
- attendance: biometric punch normalization and daily aggregation
- tasks: task due-status classification
- leaves: leave day counts, probation, balance and overlap checks
"""
