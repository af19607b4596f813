"""
Document distribution: module leaders publish course documents per
batch/section and share them with teachers.
"""

import mimetypes
from pathlib import Path
from typing import Optional, Dict, Any, Iterable

from coursedesk.client import AuthenticatedClient, APIResponse
from coursedesk.models import DistributionStatus


FILTER_KEYS = {
    "page": "page",
    "limit": "limit",
    "category": "category",
    "course_code": "courseCode",
    "department": "department",
    "status": "status",
    "priority": "priority",
    "search": "search",
    "sort_by": "sortBy",
    "sort_order": "sortOrder",
}


def _to_query(filters: Dict[str, Any]) -> Dict[str, Any]:
    unknown = set(filters) - set(FILTER_KEYS)
    if unknown:
        raise ValueError(f"Unknown distribution filter(s): {', '.join(sorted(unknown))}")
    if filters.get("sort_order") not in (None, "asc", "desc"):
        raise ValueError("sort_order must be 'asc' or 'desc'")
    return {FILTER_KEYS[k]: v for k, v in filters.items() if v is not None}


class DocumentDistributionAPI:
    """Endpoints under /document-distribution"""

    def __init__(self, client: AuthenticatedClient):
        self.client = client

    async def create(self, data: Dict[str, Any]) -> APIResponse:
        return await self.client.post("/document-distribution", json=data)

    async def list(self, **filters) -> APIResponse:
        return await self.client.get("/document-distribution", params=_to_query(filters))

    async def get(self, distribution_id: str) -> APIResponse:
        return await self.client.get(f"/document-distribution/{distribution_id}")

    async def update(self, distribution_id: str, data: Dict[str, Any]) -> APIResponse:
        return await self.client.put(f"/document-distribution/{distribution_id}", json=data)

    async def update_status(self, distribution_id: str, status: str,
                            notes: Optional[str] = None,
                            reason: Optional[str] = None) -> APIResponse:
        body = {"status": DistributionStatus(status).value}
        if notes is not None:
            body["notes"] = notes
        if reason is not None:
            body["reason"] = reason
        return await self.client.patch(
            f"/document-distribution/{distribution_id}/status", json=body
        )

    async def upload_files(self, distribution_id: str,
                           paths: Iterable[str]) -> APIResponse:
        """Upload files as multipart ``files`` fields"""
        files = []
        for path in map(Path, paths):
            content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
            # Read eagerly so a retried request can resend the same bytes
            files.append(("files", (path.name, path.read_bytes(), content_type)))

        if not files:
            raise ValueError("At least one file is required")

        return await self.client.post(
            f"/document-distribution/{distribution_id}/files", files=files
        )

    async def analytics(self, distribution_id: str) -> APIResponse:
        return await self.client.get(f"/document-distribution/{distribution_id}/analytics")

    async def delete(self, distribution_id: str) -> APIResponse:
        return await self.client.delete(f"/document-distribution/{distribution_id}")

    async def shared_with_me(self) -> APIResponse:
        """Documents shared with the current teacher"""
        return await self.client.get("/document-distribution/shared/teacher")

    async def course_shared(self, course_id: str) -> APIResponse:
        return await self.client.get(f"/document-distribution/shared/course/{course_id}")

    async def course_distributions(self, course_id: str) -> APIResponse:
        return await self.client.get(f"/document-distribution/course/{course_id}")
