"""
CourseDesk Authentication Module
================================

Auth endpoints of the course management API plus the interactive login
used by the command line:

  login              Email/password login
  logout             Logout and clear local credentials
  status / whoami    Show current user

Flow:
1. Staff account is created on the web portal (or via register)
2. ``coursedesk login`` exchanges email/password for a credential pair
3. Credentials are stored locally (~/.coursedesk/credentials.json)
4. Every request carries the access token; the client refreshes it on 401
"""

from typing import Optional, Dict, Any

from rich.console import Console
from rich.prompt import Prompt
from rich.panel import Panel

from coursedesk.client import AuthenticatedClient, APIResponse, REFRESH_PATH
from coursedesk.logging_config import get_logger, set_user_id
from coursedesk.exceptions import AuthenticationError
from coursedesk.models import User, AuthTokens


logger = get_logger("auth")


class AuthAPI:
    """Auth endpoints; successful logins are written to the client's session"""

    def __init__(self, client: AuthenticatedClient):
        self.client = client

    @property
    def session(self):
        return self.client.session

    def _store_credentials(self, response: APIResponse, event: str) -> APIResponse:
        if not response.success or not isinstance(response.data, dict):
            error = response.error
            logger.log_auth_event(event, False, reason=error.message if error else None)
            return response

        user = response.data.get("user") or {}
        tokens = AuthTokens.from_dict(response.data)
        if not tokens.access_token or not tokens.refresh_token:
            logger.log_auth_event(event, False, reason="response missing tokens")
            return response

        self.session.set_credentials(user, tokens.access_token, tokens.refresh_token)
        set_user_id(str(user.get("id") or user.get("_id") or ""))
        logger.log_auth_event(event, True, user_email=user.get("email"))
        return response

    async def register(self, data: Dict[str, Any]) -> APIResponse:
        """Register a new account"""
        response = await self.client.post("/auth/register", json=data)
        return self._store_credentials(response, "register")

    async def login(self, email: str, password: str) -> APIResponse:
        """Login with email and password"""
        response = await self.client.post(
            "/auth/login", json={"email": email, "password": password}
        )
        return self._store_credentials(response, "login")

    async def google_login(self, credential: str) -> APIResponse:
        """Login with a Google identity credential"""
        response = await self.client.post("/auth/google", json={"credential": credential})
        return self._store_credentials(response, "google_login")

    async def logout(self) -> APIResponse:
        """Logout; local credentials are cleared even if the call fails"""
        try:
            response = await self.client.post("/auth/logout")
        finally:
            self.session.clear()
            set_user_id("")
        logger.log_auth_event("logout", True)
        return response

    async def forgot_password(self, email: str) -> APIResponse:
        return await self.client.post("/auth/forgot-password", json={"email": email})

    async def reset_password(self, token: str, password: str) -> APIResponse:
        return await self.client.post(
            "/auth/reset-password", json={"token": token, "password": password}
        )

    async def verify_email(self, token: str) -> APIResponse:
        return await self.client.post("/auth/verify-email", json={"token": token})

    async def resend_verification(self) -> APIResponse:
        return await self.client.post("/auth/resend-verification")

    async def me(self) -> APIResponse:
        """Fetch the current user and refresh the stored copy"""
        response = await self.client.get("/auth/me")
        if response.success and isinstance(response.data, dict):
            user = response.data.get("user", response.data)
            if isinstance(user, dict):
                self.session.update_user(user)
        return response

    async def refresh(self, refresh_token: Optional[str] = None) -> APIResponse:
        """Explicit refresh; the client does this on its own when a request gets 401"""
        token = refresh_token or self.session.refresh_token
        response = await self.client.send(
            "POST", REFRESH_PATH, json={"refreshToken": token}, reauth=False
        )
        if response.success and isinstance(response.data, dict) and response.data.get("accessToken"):
            self.session.update_access_token(response.data["accessToken"])
        return response


class AuthManager:
    """Interactive login and status display for the command line"""

    def __init__(self, client: AuthenticatedClient, console: Optional[Console] = None):
        self.api = AuthAPI(client)
        self.console = console or Console()

    @property
    def user(self) -> Optional[User]:
        data = self.api.session.user
        return User.from_dict(data) if data else None

    def is_authenticated(self) -> bool:
        return self.api.session.is_authenticated

    def require_auth(self) -> None:
        """Raise unless there is a token to send or to refresh with"""
        session = self.api.session
        if not session.access_token and not session.refresh_token:
            raise AuthenticationError("Authentication required")

    async def interactive_login(self, email: Optional[str] = None) -> bool:
        """Prompt for credentials and login"""
        self.console.print(Panel(
            "[bold cyan]CourseDesk - Login[/bold cyan]\n\n"
            "Login with your staff account.\n"
            "If you don't have an account, register on the web portal.",
            border_style="cyan"
        ))

        email = email or Prompt.ask("Email")
        password = Prompt.ask("Password", password=True)

        response = await self.api.login(email, password)
        if response.success and self.is_authenticated():
            return True

        error = response.error
        message = error.message if error else "Invalid credentials"
        self.console.print(f"[red]Login failed: {message}[/red]")
        return False

    async def logout(self) -> None:
        response = await self.api.logout()
        if response.status == 0:
            self.console.print("[yellow]Server unreachable, cleared local credentials only[/yellow]")
        self.console.print("[green]Logged out successfully[/green]")

    def show_status(self) -> None:
        """Show current authentication status"""
        user = self.user
        if self.is_authenticated() and user:
            self.console.print(Panel(
                f"[green]Authenticated[/green]\n\n"
                f"[bold]User:[/bold] {user.display_name}\n"
                f"[bold]Email:[/bold] {user.email}\n"
                f"[bold]Role:[/bold] {user.role.value}\n"
                f"[bold]Verified:[/bold] {'yes' if user.is_email_verified else 'no'}",
                title="Authentication Status",
                border_style="green"
            ))
        else:
            self.console.print(Panel(
                "[red]Not authenticated[/red]\n\n"
                "Please login using: [cyan]coursedesk login[/cyan]",
                title="Authentication Status",
                border_style="red"
            ))
