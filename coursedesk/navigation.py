"""
Session-expiry navigation.

When the client gives up on a session it emits a ``SessionExpiredEvent``
instead of touching any UI directly. ``Navigator`` is the default
subscriber: it sends the user to the login page unless they are already on
one of the auth pages.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Callable, Iterable, List, Tuple

from coursedesk.config import AUTH_PATHS
from coursedesk.logging_config import get_logger


logger = get_logger("navigation")


@dataclass
class SessionExpiredEvent:
    """Emitted once per unrecoverable 401"""
    reason: str
    path: str
    redirect_to: str = "/login"
    occurred_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class Navigator:
    """Tracks the current page and performs login redirects"""

    def __init__(self, current_path: str = "/", login_path: str = "/login",
                 auth_paths: Iterable[str] = AUTH_PATHS,
                 on_navigate: Optional[Callable[[str], None]] = None):
        self.current_path = current_path
        self.login_path = login_path
        self.auth_paths: Tuple[str, ...] = tuple(auth_paths)
        self.on_navigate = on_navigate
        self.history: List[str] = []

    def is_auth_page(self, path: Optional[str] = None) -> bool:
        return (path if path is not None else self.current_path) in self.auth_paths

    def navigate(self, path: str) -> None:
        self.history.append(path)
        self.current_path = path
        if self.on_navigate:
            self.on_navigate(path)

    def handle_session_expired(self, event: SessionExpiredEvent) -> bool:
        """Redirect to login; returns False when already on an auth page"""
        if self.is_auth_page():
            logger.debug(f"Session expired on auth page {self.current_path}, staying put")
            return False

        logger.info(f"Session expired ({event.reason}), redirecting to {event.redirect_to}")
        self.navigate(event.redirect_to)
        return True
