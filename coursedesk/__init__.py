"""
CourseDesk - async client for the university course and document
management API.
"""

__version__ = "1.0.0"

from coursedesk.client import AuthenticatedClient, APIResponse
from coursedesk.config import ClientConfig
from coursedesk.navigation import Navigator, SessionExpiredEvent
from coursedesk.session import Session, CredentialStore

__all__ = [
    "__version__",
    "AuthenticatedClient",
    "APIResponse",
    "ClientConfig",
    "Navigator",
    "SessionExpiredEvent",
    "Session",
    "CredentialStore",
]
