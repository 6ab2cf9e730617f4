"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers the exception handlers and includes all API
routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from medops.core.database import session as db_session
from medops.core.database.repositories import build_sql_repos_from_session
from medops.core.logging_config import get_logger, setup_logging
from medops.core.monitoring import initialize_logfire

from .api.v1 import (
    admin_system,
    analytics_md,
    attendance,
    auth,
    departments,
    discharge_sheet,
    employees,
    finance_masters,
    finance_reports,
    health,
    ijp,
    initiate_form,
    kyp,
    leads,
    leaves,
    ledger,
    notifications,
    pl,
    pre_auth,
    tasks,
    teams,
    users,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLogMiddleware
from .services.users import UserService

# Initialize logging
setup_logging()
logger = get_logger(__name__)


async def bootstrap_admin() -> None:
    """Create the configured ADMIN account when no user exists yet."""
    async with db_session.async_session_maker() as session:
        service = UserService(build_sql_repos_from_session(session=session))
        await service.ensure_bootstrap_admin(settings.auth)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Handles startup and shutdown events for the FastAPI application.
    This is the modern approach replacing the deprecated @app.on_event decorators.
    """
    # Startup
    try:
        logger.info("Starting up MedOps CRM Server...")
        await db_session.init_db()
        logger.info("Database initialized successfully")
        await bootstrap_admin()
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down MedOps CRM Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    MedOps CRM Server API

    This API provides the backend services for hospital operations: the patient case
    pipeline from lead to settlement, pre-authorization, the finance ledger, HR and
    attendance, tasks and notifications.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# Initialize Logfire monitoring
initialize_logfire(app)

# Set all CORS enabled origins
cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(RequestLogMiddleware)

setup_exception_handlers(app)

V1 = constant.API_V1_STR

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{V1}/auth", tags=["auth"])
app.include_router(users.router, prefix=f"{V1}/users", tags=["users"])
app.include_router(teams.router, prefix=f"{V1}/teams", tags=["teams"])
app.include_router(leads.router, prefix=f"{V1}/leads", tags=["leads"])
app.include_router(kyp.router, prefix=f"{V1}/kyp", tags=["leads"])
app.include_router(pre_auth.router, prefix=f"{V1}/pre-auth", tags=["pre-auth"])
app.include_router(initiate_form.router, prefix=f"{V1}/insurance-initiate-form", tags=["pre-auth"])
app.include_router(discharge_sheet.router, prefix=f"{V1}/discharge-sheet", tags=["settlement"])
app.include_router(pl.router, prefix=f"{V1}/pl", tags=["settlement"])
app.include_router(ledger.router, prefix=f"{V1}/finance/ledger", tags=["finance"])
app.include_router(finance_reports.router, prefix=f"{V1}/finance/reports", tags=["finance"])
app.include_router(finance_masters.router, prefix=f"{V1}/finance", tags=["finance"])
app.include_router(departments.router, prefix=f"{V1}/departments", tags=["hr"])
app.include_router(employees.router, prefix=f"{V1}/employees", tags=["hr"])
app.include_router(attendance.router, prefix=f"{V1}/attendance", tags=["hr"])
app.include_router(leaves.router, prefix=f"{V1}/leaves", tags=["hr"])
app.include_router(ijp.router, prefix=f"{V1}/hr/ijp", tags=["hr"])
app.include_router(tasks.router, prefix=f"{V1}/tasks", tags=["tasks"])
app.include_router(notifications.router, prefix=f"{V1}/notifications", tags=["notifications"])
app.include_router(analytics_md.router, prefix=f"{V1}/analytics/md", tags=["analytics"])
app.include_router(admin_system.router, prefix=f"{V1}/admin/system", tags=["admin"])


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    import uvicorn

    uvicorn.run(
        "medops.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
