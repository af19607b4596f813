"""
Unit Tests for the Command Line
"""
import argparse

import pytest
from rich.console import Console

from coursedesk.logging_config import get_logger
from coursedesk.main import create_parser, parse_params, run_command, main

from conftest import json_response, body_of, bearer


def run_args(*argv):
    return create_parser().parse_args(list(argv))


@pytest.fixture
def console():
    return Console(record=True, width=120)


@pytest.fixture
def restore_logging():
    root = get_logger()
    saved_level, saved_handlers = root.level, list(root.handlers)
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestParser:
    """Test argument parsing"""

    def test_request_method_normalised(self):
        """Test that the HTTP method is upper-cased"""
        args = run_args("request", "patch", "/notifications/mark-all-read")

        assert args.method == "PATCH"
        assert args.param == []

    def test_request_rejects_unknown_method(self):
        """Test method choices"""
        with pytest.raises(SystemExit):
            run_args("request", "TRACE", "/auth/me")

    def test_global_options(self):
        """Test --server-url and --verbose"""
        args = run_args("--server-url", "https://uni.example/api", "-v", "status")

        assert args.server_url == "https://uni.example/api"
        assert args.verbose is True
        assert args.command == "status"

    def test_parse_params(self):
        """Test KEY=VALUE parsing"""
        assert parse_params(["formatId=f1", "q=a=b"]) == {"formatId": "f1", "q": "a=b"}

        with pytest.raises(ValueError):
            parse_params(["formatId"])


class TestRunCommand:
    """Test command execution against a fake backend"""

    @pytest.mark.asyncio
    async def test_requires_login(self, make_client, backend, console):
        """Test that resource commands need stored credentials"""
        async with make_client() as client:
            code = await run_command(run_args("courses"), client, console)

        assert code == 1
        assert "Authentication required" in console.export_text()
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_request_command(self, make_client, backend, logged_in, console):
        """Test raw request with body and params"""
        backend.on("POST", "/marks/students", json_response(201, {"success": True, "id": "s1"}))
        args = run_args("request", "post", "/marks/students",
                        "-d", '{"name": "Ayesha", "marks": [4]}', "-p", "formatId=f1")

        async with make_client() as client:
            code = await run_command(args, client, console)

        request = backend.calls("POST", "/marks/students")[0]
        assert code == 0
        assert body_of(request) == {"name": "Ayesha", "marks": [4]}
        assert request.url.params["formatId"] == "f1"
        assert bearer(request) == "Bearer A1"
        assert '"id": "s1"' in console.export_text()

    @pytest.mark.asyncio
    async def test_request_error_output(self, make_client, backend, logged_in, console):
        """Test that validation errors are listed"""
        backend.on("POST", "/auth/register", json_response(422, {
            "message": "Validation failed", "errors": {"email": "Email already in use"}
        }))

        async with make_client() as client:
            code = await run_command(run_args("request", "POST", "/auth/register"), client, console)

        output = console.export_text()
        assert code == 1
        assert "Validation failed" in output
        assert "Email already in use" in output

    @pytest.mark.asyncio
    async def test_courses_table(self, make_client, backend, logged_in, console):
        """Test course listing"""
        backend.on("GET", "/course-access/my-courses", json_response(200, {
            "success": True,
            "data": [{"code": "CSE101", "name": "Structured Programming",
                      "creditHours": 3, "department": {"name": "CSE"}}]
        }))

        async with make_client() as client:
            code = await run_command(run_args("courses"), client, console)

        output = console.export_text()
        assert code == 0
        assert "CSE101" in output
        assert "Structured Programming" in output

    @pytest.mark.asyncio
    async def test_notifications_unread(self, make_client, backend, logged_in, console):
        """Test that --unread filters on the server"""
        backend.on("GET", "/notifications", json_response(200, {
            "data": [{"title": "Request approved", "message": "CSE101 section A",
                      "isRead": False, "createdAt": "2026-03-01"}]
        }))

        async with make_client() as client:
            code = await run_command(run_args("notifications", "--unread"), client, console)

        assert code == 0
        assert backend.calls("GET", "/notifications")[0].url.params["unreadOnly"] == "true"
        assert "Request approved" in console.export_text()

    @pytest.mark.asyncio
    async def test_expired_session_from_terminal(self, make_client, backend, navigator,
                                                 session, console):
        """Test that an expired session clears state without navigating"""
        session.store.set("refreshToken", "R-old", days=7)
        backend.on("GET", "/course-access/my-courses", json_response(401))
        backend.on("POST", "/auth/refresh", json_response(401, {"message": "Invalid refresh token"}))
        navigator.current_path = "/login"

        async with make_client() as client:
            code = await run_command(run_args("courses"), client, console)

        assert code == 1
        assert session.refresh_token is None
        assert navigator.history == []

    @pytest.mark.asyncio
    async def test_unknown_command(self, make_client, logged_in, console):
        """Test fallback exit code"""
        async with make_client() as client:
            code = await run_command(argparse.Namespace(command="grades"), client, console)

        assert code == 2


class TestMain:
    """Test the console entry point"""

    def test_no_command_prints_help(self, capsys):
        """Test bare invocation"""
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 0
        assert "coursedesk" in capsys.readouterr().out

    def test_status_when_logged_out(self, monkeypatch, tmp_path, capsys, restore_logging):
        """Test status with an empty config directory"""
        for var in ("VITE_API_URL", "COURSEDESK_API_URL", "COURSEDESK_LOG_FORMAT",
                    "COURSEDESK_LOG_FILE", "COURSEDESK_TIMEOUT"):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setenv("COURSEDESK_CONFIG_DIR", str(tmp_path))
        monkeypatch.chdir(tmp_path)

        with pytest.raises(SystemExit) as exc_info:
            main(["status"])

        assert exc_info.value.code == 0
        assert "Not authenticated" in capsys.readouterr().out
