"""
MedOps Server Package.

This package contains the web server implementation for the MedOps CRM.
It includes the API definition, the service layer, middleware and configuration.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Configuration, constants, authentication and role-based access control.
    exception_handlers: Mapping of domain errors and unhandled exceptions to responses.
    middleware: Request timing, monitoring and request log persistence.
    services: Business workflows built on the repositories and the core rules.
"""
