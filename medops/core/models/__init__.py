"""Domain enums and API I/O models for the MedOps service."""
