"""
CourseDesk API Client
=====================

Async HTTP client for the course management backend with transparent
reauthentication:

1. Every request carries ``Authorization: Bearer <accessToken>`` when the
   session holds one, and the client's cookie jar is sent along.
2. A 401 triggers one ``POST /auth/refresh`` with the stored refresh token.
3. On success the new access token is stored and the original request is
   retried exactly once. The retried response is returned as-is, even if it
   is another 401.
4. Without a refresh token, or when the refresh fails for any reason, the
   session is cleared and a ``SessionExpiredEvent`` is emitted. The default
   ``Navigator`` listener redirects to ``/login`` unless already on an auth
   page. The original 401 is returned.

Concurrent 401s share a single in-flight refresh.

The client never raises for HTTP outcomes; transport failures come back as
``APIResponse(status=0)``.

Usage:
    async with AuthenticatedClient(config) as client:
        response = await client.get("/course-access/my-courses")
        if response.success:
            ...
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Callable, List

import httpx

from coursedesk.config import ClientConfig
from coursedesk.exceptions import APIError
from coursedesk.logging_config import get_logger, set_request_id, generate_request_id
from coursedesk.navigation import Navigator, SessionExpiredEvent
from coursedesk.session import Session


logger = get_logger("client")

REFRESH_PATH = "/auth/refresh"

SessionExpiredListener = Callable[[SessionExpiredEvent], Any]


@dataclass
class APIResponse:
    """API Response wrapper"""
    status: int
    data: Any
    headers: Dict[str, str] = field(default_factory=dict)
    success: bool = False
    content: bytes = b""

    @property
    def json(self) -> Any:
        return self.data

    @property
    def error(self) -> Optional[APIError]:
        """Normalized error for failed responses, None on success"""
        if self.success:
            return None
        return APIError.from_response(self)

    def raise_for_error(self) -> "APIResponse":
        error = self.error
        if error is not None:
            raise error
        return self


class AuthenticatedClient:
    """API client for the course management backend"""

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        session: Optional[Session] = None,
        navigator: Optional[Navigator] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_session_expired: Optional[SessionExpiredListener] = None
    ):
        self.config = config or ClientConfig()
        self.session = session if session is not None else Session(config=self.config)
        self.navigator = navigator if navigator is not None else Navigator(
            login_path=self.config.login_path,
            auth_paths=self.config.auth_paths
        )
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None
        self._refresh_task: Optional["asyncio.Task[Optional[str]]"] = None
        self._listeners: List[SessionExpiredListener] = [self.navigator.handle_session_expired]
        if on_session_expired is not None:
            self._listeners.append(on_session_expired)

    async def __aenter__(self) -> "AuthenticatedClient":
        self._get_http()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    def add_session_expired_listener(self, listener: SessionExpiredListener) -> None:
        self._listeners.append(listener)

    def _get_http(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(
                base_url=self.config.api_base_url,
                timeout=self.config.timeout,
                transport=self._transport
            )
        return self._http

    def _get_headers(self, token: Optional[str]) -> Dict[str, str]:
        """Get request headers"""
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    # ==================== Requests ====================

    async def send(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        files: Any = None,
        data: Optional[Dict[str, Any]] = None,
        reauth: bool = True
    ) -> APIResponse:
        """
        Send a request, refreshing the access token once on 401.

        ``files`` must be re-readable (bytes, not open streams) since the
        request may be sent twice. With ``reauth=False``, or for the refresh
        endpoint itself, a 401 is returned without recovery.
        """
        method = method.upper()
        # One id covers the original attempt and its retry
        set_request_id(generate_request_id())
        request_kwargs = {"json": json, "params": params, "files": files, "data": data}

        token = self.session.access_token
        result = await self._dispatch(method, path, token, **request_kwargs)
        if result.status != 401 or not reauth or path == REFRESH_PATH:
            return result

        new_token = await self._reauthenticate(token)
        if new_token is None:
            return result

        logger.debug(f"Retrying {method} {path} with refreshed token")
        return await self._dispatch(method, path, new_token, **request_kwargs)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> APIResponse:
        return await self.send("GET", path, params=params)

    async def post(self, path: str, json: Any = None, **kwargs) -> APIResponse:
        return await self.send("POST", path, json=json, **kwargs)

    async def put(self, path: str, json: Any = None, **kwargs) -> APIResponse:
        return await self.send("PUT", path, json=json, **kwargs)

    async def patch(self, path: str, json: Any = None, **kwargs) -> APIResponse:
        return await self.send("PATCH", path, json=json, **kwargs)

    async def delete(self, path: str, **kwargs) -> APIResponse:
        return await self.send("DELETE", path, **kwargs)

    async def _dispatch(
        self,
        method: str,
        path: str,
        token: Optional[str],
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        files: Any = None,
        data: Optional[Dict[str, Any]] = None
    ) -> APIResponse:
        """Make one HTTP request, no auth recovery"""
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        start = time.perf_counter()
        try:
            response = await self._get_http().request(
                method,
                path,
                json=json,
                params=params or None,
                files=files,
                data=data,
                headers=self._get_headers(token)
            )
        except httpx.HTTPError as e:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.log_request(method, path, 0, duration_ms, error=str(e))
            return APIResponse(
                status=0,
                data={"error": str(e)},
                headers={},
                success=False
            )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.log_request(method, path, response.status_code, duration_ms)

        try:
            response_data = response.json()
        except ValueError:
            response_data = response.text

        return APIResponse(
            status=response.status_code,
            data=response_data,
            headers=dict(response.headers),
            success=200 <= response.status_code < 300,
            content=response.content
        )

    # ==================== Reauthentication ====================

    async def _reauthenticate(self, stale_token: Optional[str]) -> Optional[str]:
        """Return a token to retry with, or None if the session is over"""
        current = self.session.access_token
        if current and current != stale_token:
            # Replaced by a refresh that finished while this request was in flight
            return current

        task = self._refresh_task
        owner = task is None
        if owner:
            refresh_token = self.session.refresh_token
            if not refresh_token:
                logger.log_auth_event("token_refresh", False, reason="no refresh token")
                self._end_session("No refresh token")
                return None

            task = asyncio.ensure_future(self._refresh(refresh_token))
            self._refresh_task = task

        try:
            return await asyncio.shield(task)
        finally:
            if owner and self._refresh_task is task:
                self._refresh_task = None

    async def _refresh(self, refresh_token: str) -> Optional[str]:
        result = await self._dispatch(
            "POST", REFRESH_PATH, None, json={"refreshToken": refresh_token}
        )

        new_token = None
        if result.success and isinstance(result.data, dict):
            new_token = result.data.get("accessToken")

        if not new_token:
            if result.status == 0:
                reason = "refresh endpoint unreachable"
            elif result.success:
                reason = "refresh response missing accessToken"
            else:
                reason = f"refresh rejected with {result.status}"
            logger.log_auth_event("token_refresh", False, reason=reason)
            self._end_session(reason)
            return None

        self.session.update_access_token(new_token)
        logger.log_auth_event("token_refresh", True)
        return new_token

    def _end_session(self, reason: str) -> None:
        """Clear credentials and tell listeners the session is gone"""
        event = SessionExpiredEvent(
            reason=reason,
            path=self.navigator.current_path,
            redirect_to=self.navigator.login_path
        )
        self.session.clear()
        logger.log_auth_event("session_end", False, reason=reason)

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.log_error_with_context(e, "session expired listener")
