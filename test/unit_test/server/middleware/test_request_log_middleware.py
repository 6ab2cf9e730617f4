"""
Unit tests for the request log middleware.

This test suite covers:
- Monitoring calls for successful and failing requests
- The process time header
- Request log persistence and its opt-out
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Request
from sqlmodel import select
from starlette.responses import Response

from medops.core.database.entities.request_logs import RequestLog
from medops.server.core.config import settings
from medops.server.middleware.request_log_middleware import RequestLogMiddleware

MODULE = "medops.server.middleware.request_log_middleware"


def _mock_request(method: str = "GET", path: str = "/api/v1/leads") -> MagicMock:
    request = AsyncMock(spec=Request)
    request.method = method
    request.url.path = path
    request.headers = {}
    request.client = None
    return request


async def _stored_logs(session_maker):
    async with session_maker() as session:
        return list((await session.exec(select(RequestLog))).all())


class TestDispatch:
    @pytest.mark.asyncio
    async def test_successful_request_is_reported(self, monkeypatch):
        monkeypatch.setattr(settings, "persist_request_logs", False)

        async def call_next(request):
            return Response(content="ok", status_code=200)

        middleware = RequestLogMiddleware(app=AsyncMock())
        with patch(f"{MODULE}.log_api_request") as mock_log:
            response = await middleware.dispatch(_mock_request(), call_next)

        assert response.status_code == 200
        assert "X-Process-Time" in response.headers
        kwargs = mock_log.call_args.kwargs
        assert (kwargs["method"], kwargs["path"], kwargs["status_code"]) == ("GET", "/api/v1/leads", 200)

    @pytest.mark.asyncio
    async def test_failing_request_is_reported_and_reraised(self, monkeypatch):
        monkeypatch.setattr(settings, "persist_request_logs", False)

        async def call_next(request):
            raise RuntimeError("handler exploded")

        middleware = RequestLogMiddleware(app=AsyncMock())
        with patch(f"{MODULE}.log_api_request") as mock_log:
            with pytest.raises(RuntimeError, match="handler exploded"):
                await middleware.dispatch(_mock_request("POST"), call_next)

        assert mock_log.call_args.kwargs["status_code"] == 500

    @pytest.mark.asyncio
    async def test_slow_request_warns(self, monkeypatch):
        monkeypatch.setattr(settings, "persist_request_logs", False)
        monkeypatch.setattr(f"{MODULE}.SLOW_REQUEST_MS", -1)

        async def call_next(request):
            return Response(status_code=204)

        middleware = RequestLogMiddleware(app=AsyncMock())
        with patch(f"{MODULE}.logger") as mock_logger, patch(f"{MODULE}.log_api_request"):
            await middleware.dispatch(_mock_request(), call_next)

        assert "Slow API request" in mock_logger.warning.call_args.args[0]


class TestPersistence:
    @pytest.mark.asyncio
    async def test_api_request_is_stored_with_user(self, client, session_maker, make_user, auth_headers, monkeypatch):
        monkeypatch.setattr(settings, "persist_request_logs", True)
        user = await make_user("BD")

        await client.get("/api/v1/auth/me", headers={**auth_headers(user), "User-Agent": "pytest-agent"})

        logs = await _stored_logs(session_maker)
        assert [(log.method, log.path, log.status_code) for log in logs] == [("GET", "/api/v1/auth/me", 200)]
        assert logs[0].user_id == user.id
        assert logs[0].user_agent == "pytest-agent"

    @pytest.mark.asyncio
    async def test_bad_token_is_stored_without_user(self, client, session_maker, monkeypatch):
        monkeypatch.setattr(settings, "persist_request_logs", True)

        await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer junk"})

        logs = await _stored_logs(session_maker)
        assert [(log.status_code, log.user_id) for log in logs] == [(401, None)]

    @pytest.mark.asyncio
    async def test_non_api_paths_are_not_stored(self, client, session_maker, monkeypatch):
        monkeypatch.setattr(settings, "persist_request_logs", True)

        await client.get("/health")

        assert await _stored_logs(session_maker) == []

    @pytest.mark.asyncio
    async def test_persistence_can_be_disabled(self, client, session_maker, monkeypatch):
        monkeypatch.setattr(settings, "persist_request_logs", False)

        await client.get("/api/v1/auth/me")

        assert await _stored_logs(session_maker) == []

    @pytest.mark.asyncio
    async def test_storage_failure_does_not_break_response(self, client, monkeypatch):
        monkeypatch.setattr(settings, "persist_request_logs", True)

        def broken_session_maker():
            raise RuntimeError("database down")

        monkeypatch.setattr("medops.core.database.session.async_session_maker", broken_session_maker)

        response = await client.get("/api/v1/auth/me")

        assert response.status_code == 401
