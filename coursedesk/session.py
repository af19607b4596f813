"""
Session credential storage.

A ``Session`` owns the credential pair and the cached user record. It is
created once and handed to the API client, rather than read from ambient
global storage by every caller.

Cookie names and lifetimes follow the web client:
  accessToken   1 day
  refreshToken  7 days
  user          7 days (JSON encoded)
"""

import os
import json
from pathlib import Path
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Callable

from coursedesk.config import ClientConfig
from coursedesk.logging_config import get_logger


logger = get_logger("session")

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"
USER_KEY = "user"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _normalize_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """Backend documents carry Mongo-style ``_id``; expose it as ``id`` too"""
    if not user.get("id") and user.get("_id"):
        user = {**user, "id": str(user["_id"])}
    return user


@dataclass
class Cookie:
    """A stored credential value with browser-style attributes"""
    name: str
    value: str
    expires_at: Optional[str] = None
    secure: bool = False
    same_site: str = "lax"

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if not self.expires_at:
            return False
        expiry = datetime.fromisoformat(self.expires_at)
        return (now or _utcnow()) >= expiry


class CredentialStore:
    """
    Named cookie jar, optionally persisted to a JSON file.

    Expired entries read as missing and are dropped on access.
    """

    def __init__(self, path: Optional[Path] = None,
                 clock: Callable[[], datetime] = _utcnow):
        self.path = Path(path) if path else None
        self._clock = clock
        self._cookies: Dict[str, Cookie] = {}

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def get(self, name: str) -> Optional[str]:
        cookie = self._cookies.get(name)
        if cookie is None:
            return None
        if cookie.is_expired(self._clock()):
            self.remove(name)
            return None
        return cookie.value

    def get_cookie(self, name: str) -> Optional[Cookie]:
        if self.get(name) is None:
            return None
        return self._cookies[name]

    def set(self, name: str, value: str, days: Optional[float] = None,
            secure: bool = False, same_site: str = "lax") -> Cookie:
        expires_at = None
        if days is not None:
            expires_at = (self._clock() + timedelta(days=days)).isoformat()

        cookie = Cookie(
            name=name,
            value=value,
            expires_at=expires_at,
            secure=secure,
            same_site=same_site
        )
        self._cookies[name] = cookie
        self.save()
        return cookie

    def remove(self, name: str) -> None:
        if self._cookies.pop(name, None) is not None:
            self.save()

    def clear(self) -> None:
        self._cookies.clear()
        if self.path and self.path.exists():
            self.path.unlink()

    def load(self) -> bool:
        """Load cookies from file"""
        if not self.path or not self.path.exists():
            return False

        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load credentials from {self.path}: {e}")
            return False

        self._cookies = {
            name: Cookie(**entry) for name, entry in data.items()
            if isinstance(entry, dict)
        }
        return True

    def save(self) -> None:
        """Save cookies to file"""
        if not self.path:
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump({name: asdict(c) for name, c in self._cookies.items()}, f, indent=2)

        # Secure the file (Unix only)
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            logger.debug(f"Could not restrict permissions on {self.path}")


class Session:
    """
    Client-side authentication state.

    Token values are never logged.
    """

    def __init__(self, store: Optional[CredentialStore] = None,
                 config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()
        self.store = store if store is not None else CredentialStore()

    @classmethod
    def from_config(cls, config: ClientConfig) -> "Session":
        """Build a session backed by the configured credentials file"""
        path = config.credentials_path if config.persist_credentials else None
        store = CredentialStore(path)
        store.load()
        session = cls(store, config)
        session.initialize()
        return session

    @property
    def access_token(self) -> Optional[str]:
        return self.store.get(ACCESS_TOKEN_KEY)

    @property
    def refresh_token(self) -> Optional[str]:
        return self.store.get(REFRESH_TOKEN_KEY)

    def _load_user(self) -> Optional[Dict[str, Any]]:
        raw = self.store.get(USER_KEY)
        if not raw:
            return None
        try:
            user = json.loads(raw)
        except ValueError:
            return None
        if not isinstance(user, dict):
            return None
        return _normalize_user(user)

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        """The cached user record, or None when absent or malformed"""
        user = self._load_user()
        if user is None or not user.get("id") or not user.get("email"):
            return None
        return user

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token) and self.user is not None

    def set_credentials(self, user: Dict[str, Any], access_token: str,
                        refresh_token: str) -> None:
        """Store a fresh credential pair and user record after login"""
        secure = self.config.is_secure
        self.store.set(ACCESS_TOKEN_KEY, access_token,
                       days=self.config.access_token_ttl_days, secure=secure)
        self.store.set(REFRESH_TOKEN_KEY, refresh_token,
                       days=self.config.refresh_token_ttl_days, secure=secure)
        self.store.set(USER_KEY, json.dumps(_normalize_user(user)),
                       days=self.config.refresh_token_ttl_days, secure=secure)

    def update_access_token(self, access_token: str) -> None:
        """Replace the access token after a successful refresh"""
        self.store.set(ACCESS_TOKEN_KEY, access_token,
                       days=self.config.access_token_ttl_days,
                       secure=self.config.is_secure,
                       same_site="lax")

    def update_user(self, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge fields into the stored user; no-op without a user"""
        user = self.user
        if user is None:
            return None

        user.update(fields)
        user = _normalize_user(user)
        self.store.set(USER_KEY, json.dumps(user),
                       days=self.config.refresh_token_ttl_days,
                       secure=self.config.is_secure)
        return user

    def clear(self) -> None:
        """Drop every auth field"""
        self.store.remove(ACCESS_TOKEN_KEY)
        self.store.remove(REFRESH_TOKEN_KEY)
        self.store.remove(USER_KEY)

    def initialize(self) -> bool:
        """Bring stored state back in sync

        Malformed user records and a user without an access token are dropped.
        """
        if USER_KEY in self.store:
            if self.user is None:
                logger.warning("Stored user record is invalid, discarding it")
                self.store.remove(USER_KEY)
            elif not self.access_token:
                self.store.remove(USER_KEY)
        return self.is_authenticated
