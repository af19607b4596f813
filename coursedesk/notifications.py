"""
User notifications (request decisions, shared documents).
"""

from typing import Optional

from coursedesk.client import AuthenticatedClient, APIResponse


class NotificationAPI:
    def __init__(self, client: AuthenticatedClient):
        self.client = client

    async def list(self, page: Optional[int] = None, limit: Optional[int] = None,
                   unread_only: Optional[bool] = None) -> APIResponse:
        """Paginated notifications; unset filters are left off the query"""
        params = {"page": page, "limit": limit}
        if unread_only is not None:
            params["unreadOnly"] = "true" if unread_only else "false"
        return await self.client.get("/notifications", params=params)

    async def unread_count(self) -> APIResponse:
        return await self.client.get("/notifications/unread-count")

    async def mark_as_read(self, notification_id: str) -> APIResponse:
        return await self.client.patch(f"/notifications/{notification_id}/read")

    async def mark_all_as_read(self) -> APIResponse:
        return await self.client.patch("/notifications/mark-all-read")

    async def delete(self, notification_id: str) -> APIResponse:
        return await self.client.delete(f"/notifications/{notification_id}")
