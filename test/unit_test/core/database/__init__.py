"""Unit tests for the MedOps database layer.

Entity defaults and constraints, and the repositories against an in-memory
SQLite database.
"""
