#!/usr/bin/env python3
"""
CourseDesk CLI - Main Entry Point

Usage:
    coursedesk login                         # Login with email/password
    coursedesk status                        # Show login status
    coursedesk courses                       # Courses you have access to
    coursedesk notifications --unread        # Unread notifications
    coursedesk request GET /auth/me          # Raw authenticated request
    coursedesk --help                        # Show help
"""

import argparse
import asyncio
import json
import sys
from typing import Optional, List, Dict, Any

from rich.console import Console
from rich.table import Table

from coursedesk import __version__
from coursedesk.auth import AuthManager
from coursedesk.client import AuthenticatedClient, APIResponse
from coursedesk.config import ClientConfig
from coursedesk.course_access import CourseAccessAPI
from coursedesk.exceptions import CourseDeskError, AuthenticationError
from coursedesk.logging_config import setup_logging
from coursedesk.models import unwrap_list
from coursedesk.navigation import SessionExpiredEvent
from coursedesk.notifications import NotificationAPI
from coursedesk.session import Session


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog="coursedesk",
        description="CourseDesk - command line client for the course management API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  coursedesk login                              Login to your account
  coursedesk logout                             Logout and clear credentials
  coursedesk whoami                             Show current user
  coursedesk courses                            List your courses
  coursedesk request GET /course-access/my-requests
  coursedesk request PATCH /notifications/mark-all-read

Environment:
  COURSEDESK_API_URL      Backend base URL (VITE_API_URL also honoured)
  COURSEDESK_LOG_LEVEL    DEBUG, INFO, WARNING, ...
  COURSEDESK_LOG_FORMAT   text or json
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    login_parser = subparsers.add_parser("login", help="Login to CourseDesk")
    login_parser.add_argument("--email", "-e", help="Account email (prompted if omitted)")

    subparsers.add_parser("logout", help="Logout from CourseDesk")
    subparsers.add_parser("status", help="Show authentication status")
    subparsers.add_parser("whoami", help="Show current user info")
    subparsers.add_parser("courses", help="List courses you can access")

    notifications_parser = subparsers.add_parser("notifications", help="List notifications")
    notifications_parser.add_argument("--unread", action="store_true", help="Only unread")
    notifications_parser.add_argument("--page", type=int, help="Page number")
    notifications_parser.add_argument("--limit", type=int, help="Page size")

    request_parser = subparsers.add_parser("request", help="Send an authenticated request")
    request_parser.add_argument(
        "method",
        type=str.upper,
        choices=["GET", "POST", "PUT", "PATCH", "DELETE"],
        help="HTTP method"
    )
    request_parser.add_argument("path", help="API path, e.g. /auth/me")
    request_parser.add_argument("--data", "-d", help="JSON request body")
    request_parser.add_argument(
        "--param", "-p",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter (repeatable)"
    )

    parser.add_argument(
        "--server-url",
        type=str,
        help="Backend API URL (default: config or http://localhost:5000/api)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def parse_params(pairs: List[str]) -> Dict[str, str]:
    """Turn ``KEY=VALUE`` strings into a dict"""
    params = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid parameter '{pair}', expected KEY=VALUE")
        params[key] = value
    return params


def print_response(console: Console, response: APIResponse) -> None:
    if response.success:
        if isinstance(response.data, (dict, list)):
            console.print_json(json.dumps(response.data, default=str))
        else:
            console.print(response.data)
        return

    error = response.error
    console.print(f"[red]✗ {error.message}[/red] [dim](status {response.status})[/dim]")
    for field_name, message in error.errors.items():
        console.print(f"  [yellow]{field_name}[/yellow]: {message}")


def print_courses(console: Console, response: APIResponse) -> None:
    table = Table(title="My Courses")
    table.add_column("Code", style="cyan")
    table.add_column("Name")
    table.add_column("Credits", justify="right")
    table.add_column("Department", style="dim")

    for course in unwrap_list(response.data):
        department = course.get("department") or {}
        table.add_row(
            str(course.get("code", "")),
            str(course.get("name", "")),
            str(course.get("creditHours", "")),
            str(department.get("name", "") if isinstance(department, dict) else department)
        )
    console.print(table)


def print_notifications(console: Console, response: APIResponse) -> None:
    table = Table(title="Notifications")
    table.add_column("", width=1)
    table.add_column("Title", style="bold")
    table.add_column("Message")
    table.add_column("Received", style="dim")

    for note in unwrap_list(response.data):
        table.add_row(
            "" if note.get("isRead") else "[cyan]●[/cyan]",
            str(note.get("title", "")),
            str(note.get("message", "")),
            str(note.get("createdAt", ""))
        )
    console.print(table)


async def run_command(args: argparse.Namespace, client: AuthenticatedClient,
                      console: Console) -> int:
    """Execute a parsed command; returns the process exit code"""
    auth_manager = AuthManager(client, console)

    if args.command == "login":
        success = await auth_manager.interactive_login(args.email)
        if success:
            console.print("\n[green]✓ Login successful![/green]")
            console.print(f"Welcome, [bold]{auth_manager.user.display_name}[/bold]!")
        return 0 if success else 1

    if args.command == "logout":
        await auth_manager.logout()
        return 0

    if args.command in ("status", "whoami"):
        auth_manager.show_status()
        return 0

    # Everything else needs a session
    try:
        auth_manager.require_auth()
    except AuthenticationError as e:
        console.print(f"\n[red]✗ {e.message}[/red]")
        console.print("\nPlease login first:  [cyan]coursedesk login[/cyan]")
        return 1

    if args.command == "courses":
        response = await CourseAccessAPI(client).my_courses()
        if response.success:
            print_courses(console, response)
        else:
            print_response(console, response)
        return 0 if response.success else 1

    if args.command == "notifications":
        response = await NotificationAPI(client).list(
            page=args.page, limit=args.limit, unread_only=True if args.unread else None
        )
        if response.success:
            print_notifications(console, response)
        else:
            print_response(console, response)
        return 0 if response.success else 1

    if args.command == "request":
        body = json.loads(args.data) if args.data else None
        response = await client.send(
            args.method, args.path, json=body, params=parse_params(args.param)
        )
        print_response(console, response)
        return 0 if response.success else 1

    return 2


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    console = Console()

    try:
        config = ClientConfig.load_default()
    except CourseDeskError as e:
        console.print(f"[red]✗ {e.message}[/red]")
        sys.exit(1)

    if args.server_url:
        config.api_base_url = args.server_url.rstrip("/")
    if args.verbose:
        config.verbose = True
        config.log_level = "DEBUG"

    setup_logging(config.log_level, config.log_format, config.log_file)

    def on_session_expired(event: SessionExpiredEvent) -> None:
        console.print("[yellow]Session expired. Please login again.[/yellow]")

    async def _run() -> int:
        session = Session.from_config(config)
        # A terminal has no page; treat it as the login surface so nothing redirects
        async with AuthenticatedClient(config, session,
                                       on_session_expired=on_session_expired) as client:
            client.navigator.current_path = config.login_path
            return await run_command(args, client, console)

    try:
        exit_code = asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("\n\nGoodbye!")
        sys.exit(0)
    except (ValueError, CourseDeskError) as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        sys.exit(1)
    except Exception as e:
        if args.verbose:
            console.print_exception()
        else:
            console.print(f"\n[red]✗ Error: {e}[/red]")
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
