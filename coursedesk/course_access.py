"""
Course access requests.

Teachers ask a module leader for access to a course section; the module
leader approves or rejects, optionally sharing document distributions with
the teacher on approval.
"""

from typing import Optional, List

from coursedesk.client import AuthenticatedClient, APIResponse
from coursedesk.models import RequestStatus


RESPONSE_STATUSES = (RequestStatus.APPROVED, RequestStatus.REJECTED)


class CourseAccessAPI:
    def __init__(self, client: AuthenticatedClient):
        self.client = client

    # Teacher side

    async def create_request(self, course_id: str, semester: str, batch: int,
                             message: str, section: str,
                             module_leader_id: str) -> APIResponse:
        return await self.client.post("/course-access/request", json={
            "courseId": course_id,
            "data": {
                "semester": semester,
                "batch": batch,
                "message": message,
                "section": section,
                "moduleLeaderId": module_leader_id,
            }
        })

    async def my_requests(self) -> APIResponse:
        return await self.client.get("/course-access/my-requests")

    async def my_courses(self) -> APIResponse:
        return await self.client.get("/course-access/my-courses")

    async def department_courses(self) -> APIResponse:
        return await self.client.get("/course-access/department-courses")

    # Module leader side

    async def pending_requests(self) -> APIResponse:
        return await self.client.get("/course-access/pending-requests")

    async def all_requests(self) -> APIResponse:
        return await self.client.get("/course-access/all-requests")

    async def respond(self, request_id: str, status: str,
                      response_message: Optional[str] = None,
                      selected_documents: Optional[List[str]] = None) -> APIResponse:
        """Approve or reject a pending request"""
        status = RequestStatus(status)
        if status not in RESPONSE_STATUSES:
            raise ValueError(f"Cannot respond to a request with status '{status.value}'")

        body = {"status": status.value}
        if response_message is not None:
            body["responseMessage"] = response_message
        if selected_documents:
            body["selectedDocuments"] = list(selected_documents)

        return await self.client.patch(f"/course-access/respond/{request_id}", json=body)
