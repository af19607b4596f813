"""
Mark entry: question formats and per-student marks.
"""

from typing import Dict, Any, List

from coursedesk.client import AuthenticatedClient, APIResponse


def _format_body(name: str, questions: List[Dict[str, Any]]) -> Dict[str, Any]:
    for question in questions:
        if "label" not in question or "maxMark" not in question:
            raise ValueError("Each question needs a 'label' and a 'maxMark'")
        if question["maxMark"] < 0:
            raise ValueError(f"Negative maxMark for question '{question['label']}'")
    return {"name": name, "questions": questions}


class MarksAPI:
    """Endpoints under /marks"""

    def __init__(self, client: AuthenticatedClient):
        self.client = client

    # Question formats

    async def list_formats(self) -> APIResponse:
        return await self.client.get("/marks/formats")

    async def get_format(self, format_id: str) -> APIResponse:
        return await self.client.get(f"/marks/formats/{format_id}")

    async def create_format(self, name: str, questions: List[Dict[str, Any]]) -> APIResponse:
        return await self.client.post("/marks/formats", json=_format_body(name, questions))

    async def update_format(self, format_id: str, name: str,
                            questions: List[Dict[str, Any]]) -> APIResponse:
        return await self.client.put(
            f"/marks/formats/{format_id}", json=_format_body(name, questions)
        )

    async def delete_format(self, format_id: str) -> APIResponse:
        return await self.client.delete(f"/marks/formats/{format_id}")

    # Student marks

    async def list_student_marks(self, format_id: str) -> APIResponse:
        return await self.client.get("/marks/students", params={"formatId": format_id})

    async def get_student_marks(self, marks_id: str) -> APIResponse:
        return await self.client.get(f"/marks/students/{marks_id}")

    async def create_student_marks(self, format_id: str, name: str,
                                   marks: List[float]) -> APIResponse:
        return await self.client.post("/marks/students", json={
            "formatId": format_id, "name": name, "marks": list(marks)
        })

    async def update_student_marks(self, marks_id: str, format_id: str, name: str,
                                   marks: List[float]) -> APIResponse:
        return await self.client.put(f"/marks/students/{marks_id}", json={
            "formatId": format_id, "name": name, "marks": list(marks)
        })

    async def delete_student_marks(self, marks_id: str) -> APIResponse:
        return await self.client.delete(f"/marks/students/{marks_id}")

    async def bulk_import(self, format_id: str,
                          students: List[Dict[str, Any]]) -> APIResponse:
        """Import ``[{"name": ..., "marks": [...]}, ...]`` in one call"""
        return await self.client.post("/marks/students/bulk-import", json={
            "formatId": format_id,
            "studentsData": [
                {"name": s["name"], "marks": list(s["marks"])} for s in students
            ]
        })

    async def export(self, format_id: str) -> APIResponse:
        """Exported spreadsheet; the file bytes are in ``response.content``"""
        return await self.client.get("/marks/students/export", params={"formatId": format_id})

    async def statistics(self, format_id: str) -> APIResponse:
        return await self.client.get("/marks/statistics", params={"formatId": format_id})
