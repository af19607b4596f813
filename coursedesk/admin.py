"""
Administration: dashboard statistics, the academic structure (departments,
courses, batches, sections) and user management.

All endpoints live under /admin and require the admin role on the backend.
"""

from typing import Optional, Dict, Any

from coursedesk.client import AuthenticatedClient, APIResponse
from coursedesk.models import UserRole


class AdminAPI:
    """Endpoints under /admin"""

    def __init__(self, client: AuthenticatedClient):
        self.client = client

    async def dashboard_stats(self) -> APIResponse:
        return await self.client.get("/admin/dashboard/stats")

    # Departments

    async def list_departments(self) -> APIResponse:
        return await self.client.get("/admin/departments")

    async def get_department(self, department_id: str) -> APIResponse:
        return await self.client.get(f"/admin/departments/{department_id}")

    async def create_department(self, data: Dict[str, Any]) -> APIResponse:
        return await self.client.post("/admin/departments", json=data)

    async def update_department(self, department_id: str, data: Dict[str, Any]) -> APIResponse:
        return await self.client.put(f"/admin/departments/{department_id}", json=data)

    async def delete_department(self, department_id: str) -> APIResponse:
        return await self.client.delete(f"/admin/departments/{department_id}")

    # Courses

    async def list_courses(self, department: Optional[str] = None) -> APIResponse:
        return await self.client.get("/admin/courses", params={"department": department})

    async def get_course(self, course_id: str) -> APIResponse:
        return await self.client.get(f"/admin/courses/{course_id}")

    async def create_course(self, data: Dict[str, Any]) -> APIResponse:
        return await self.client.post("/admin/courses", json=data)

    async def update_course(self, course_id: str, data: Dict[str, Any]) -> APIResponse:
        return await self.client.put(f"/admin/courses/{course_id}", json=data)

    async def delete_course(self, course_id: str) -> APIResponse:
        return await self.client.delete(f"/admin/courses/{course_id}")

    # Batches

    async def list_batches(self, department: Optional[str] = None) -> APIResponse:
        return await self.client.get("/admin/batches", params={"department": department})

    async def get_batch(self, batch_id: str) -> APIResponse:
        return await self.client.get(f"/admin/batches/{batch_id}")

    async def create_batch(self, data: Dict[str, Any]) -> APIResponse:
        return await self.client.post("/admin/batches", json=data)

    async def update_batch(self, batch_id: str, data: Dict[str, Any]) -> APIResponse:
        return await self.client.put(f"/admin/batches/{batch_id}", json=data)

    async def delete_batch(self, batch_id: str) -> APIResponse:
        return await self.client.delete(f"/admin/batches/{batch_id}")

    # Sections

    async def list_sections(self, batch: Optional[str] = None,
                            course: Optional[str] = None) -> APIResponse:
        return await self.client.get("/admin/sections", params={"batch": batch, "course": course})

    async def get_section(self, section_id: str) -> APIResponse:
        return await self.client.get(f"/admin/sections/{section_id}")

    async def create_section(self, data: Dict[str, Any]) -> APIResponse:
        return await self.client.post("/admin/sections", json=data)

    async def update_section(self, section_id: str, data: Dict[str, Any]) -> APIResponse:
        return await self.client.put(f"/admin/sections/{section_id}", json=data)

    async def delete_section(self, section_id: str) -> APIResponse:
        return await self.client.delete(f"/admin/sections/{section_id}")

    async def assign_module_leader(self, section_id: str, module_leader_id: str) -> APIResponse:
        return await self.client.post("/admin/sections/assign-module-leader", json={
            "sectionId": section_id,
            "moduleLeaderId": module_leader_id,
        })

    # Users

    async def list_users(self, page: Optional[int] = None, limit: Optional[int] = None,
                         search: Optional[str] = None, role: Optional[str] = None,
                         is_blocked: Optional[bool] = None) -> APIResponse:
        params = {
            "page": page,
            "limit": limit,
            "search": search,
            "role": UserRole(role).value if role is not None else None,
        }
        if is_blocked is not None:
            params["isBlocked"] = "true" if is_blocked else "false"
        return await self.client.get("/admin/users", params=params)

    async def user_stats(self) -> APIResponse:
        return await self.client.get("/admin/users/stats")

    async def update_user_role(self, user_id: str, role: str) -> APIResponse:
        """Change a user's role; unknown roles raise ValueError"""
        return await self.client.put(
            f"/admin/users/{user_id}/role", json={"role": UserRole(role).value}
        )

    async def block_user(self, user_id: str, reason: str) -> APIResponse:
        if not reason or not reason.strip():
            raise ValueError("A reason is required to block a user")
        return await self.client.put(f"/admin/users/{user_id}/block", json={"reason": reason})

    async def unblock_user(self, user_id: str) -> APIResponse:
        return await self.client.put(f"/admin/users/{user_id}/unblock")

    async def delete_user(self, user_id: str) -> APIResponse:
        return await self.client.delete(f"/admin/users/{user_id}")
