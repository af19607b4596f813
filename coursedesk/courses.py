"""
Course catalog: courses, prerequisites, bulk import/export and statistics.
"""

from pathlib import Path
from typing import Optional, Dict, Any, List

from coursedesk.client import AuthenticatedClient, APIResponse


def _filters(department: Optional[str] = None, year: Optional[str] = None,
             semester: Optional[str] = None, is_active: Optional[bool] = None,
             module_leader: Optional[str] = None,
             search: Optional[str] = None) -> Dict[str, Any]:
    params = {
        "department": department,
        "year": year,
        "semester": semester,
        "moduleLeader": module_leader,
        "search": search,
    }
    if is_active is not None:
        params["isActive"] = "true" if is_active else "false"
    return params


class CourseAPI:
    """Endpoints under /courses"""

    def __init__(self, client: AuthenticatedClient):
        self.client = client

    async def list(self, **filters) -> APIResponse:
        """Filter by department, year, semester, is_active, module_leader, search"""
        return await self.client.get("/courses", params=_filters(**filters))

    async def get(self, course_id: str) -> APIResponse:
        return await self.client.get(f"/courses/{course_id}")

    async def by_department(self, department_id: str) -> APIResponse:
        return await self.client.get(f"/courses/department/{department_id}")

    async def by_module_leader(self, module_leader_id: str) -> APIResponse:
        return await self.client.get(f"/courses/module-leader/{module_leader_id}")

    async def by_year_semester(self, year: str, semester: str) -> APIResponse:
        return await self.client.get(f"/courses/year/{year}/semester/{semester}")

    async def create(self, data: Dict[str, Any]) -> APIResponse:
        return await self.client.post("/courses", json=data)

    async def update(self, course_id: str, data: Dict[str, Any]) -> APIResponse:
        return await self.client.put(f"/courses/{course_id}", json=data)

    async def delete(self, course_id: str) -> APIResponse:
        return await self.client.delete(f"/courses/{course_id}")

    async def toggle_status(self, course_id: str) -> APIResponse:
        return await self.client.patch(f"/courses/{course_id}/toggle-status")

    async def assign_module_leader(self, course_id: str, module_leader_id: str) -> APIResponse:
        return await self.client.patch(
            f"/courses/{course_id}/assign-module-leader",
            json={"moduleLeaderId": module_leader_id}
        )

    # Prerequisites

    async def prerequisites(self, course_id: str) -> APIResponse:
        return await self.client.get(f"/courses/{course_id}/prerequisites")

    async def courses_requiring(self, course_id: str) -> APIResponse:
        """Courses that list ``course_id`` as a prerequisite"""
        return await self.client.get(f"/courses/prerequisite/{course_id}")

    async def add_prerequisites(self, course_id: str, prerequisite_ids: List[str]) -> APIResponse:
        return await self.client.post(
            f"/courses/{course_id}/prerequisites",
            json={"prerequisiteIds": list(prerequisite_ids)}
        )

    async def remove_prerequisites(self, course_id: str,
                                   prerequisite_ids: List[str]) -> APIResponse:
        return await self.client.delete(
            f"/courses/{course_id}/prerequisites",
            json={"prerequisiteIds": list(prerequisite_ids)}
        )

    # Bulk and reporting

    async def bulk_create(self, courses: List[Dict[str, Any]]) -> APIResponse:
        return await self.client.post("/courses/bulk", json={"courses": list(courses)})

    async def bulk_update(self, courses: List[Dict[str, Any]]) -> APIResponse:
        """Each course dict must carry its ``id``"""
        if any("id" not in course for course in courses):
            raise ValueError("Every course in a bulk update needs an 'id'")
        return await self.client.put("/courses/bulk", json={"courses": list(courses)})

    async def export(self, **filters) -> APIResponse:
        """Exported file; the bytes are in ``response.content``"""
        return await self.client.get("/courses/export", params=_filters(**filters))

    async def import_file(self, path: str) -> APIResponse:
        path = Path(path)
        return await self.client.post(
            "/courses/import",
            files={"file": (path.name, path.read_bytes(), "application/octet-stream")}
        )

    async def statistics(self) -> APIResponse:
        return await self.client.get("/courses/statistics")

    async def search(self, term: str) -> APIResponse:
        return await self.client.get("/courses/search", params={"q": term})
