"""
Course document submissions.

A teacher keeps one submission per course section and semester, ticking off
theory and lab documents as they are uploaded, then submits it for review by
a module leader or admin.
"""

from typing import Optional, Dict, Any

from coursedesk.client import AuthenticatedClient, APIResponse


DOCUMENT_STATUSES = ("yes", "no", "pending")
DOCUMENT_CATEGORIES = ("theory", "lab")
REVIEW_STATUSES = ("pending", "approved", "rejected", "in-review")


class SubmissionAPI:
    """Endpoints under /documents/submissions"""

    def __init__(self, client: AuthenticatedClient):
        self.client = client

    # Teacher side

    async def list(self) -> APIResponse:
        return await self.client.get("/documents/submissions")

    async def current(self, course_code: str, course_section: str, semester: str,
                      **course_info) -> APIResponse:
        """Fetch, or have the backend create, the submission for a section

        Extra ``course_info`` (courseTitle, creditHours, classCount, batch,
        department) seeds a newly created submission.
        """
        params = {"courseCode": course_code, "courseSection": course_section,
                  "semester": semester, **course_info}
        return await self.client.get("/documents/submissions/current", params=params)

    async def get(self, submission_id: str) -> APIResponse:
        return await self.client.get(f"/documents/submissions/{submission_id}")

    async def save(self, data: Dict[str, Any],
                   submission_id: Optional[str] = None) -> APIResponse:
        body = dict(data)
        if submission_id is not None:
            body["submissionId"] = submission_id
        return await self.client.post("/documents/submissions", json=body)

    async def update_document_status(self, submission_id: str, document_id: str,
                                     status: str, category: str,
                                     uploaded_files: Optional[Dict[str, Any]] = None) -> APIResponse:
        if status not in DOCUMENT_STATUSES:
            raise ValueError(f"Document status must be one of {', '.join(DOCUMENT_STATUSES)}")
        if category not in DOCUMENT_CATEGORIES:
            raise ValueError(f"Document category must be one of {', '.join(DOCUMENT_CATEGORIES)}")

        body = {"documentId": document_id, "status": status, "category": category}
        if uploaded_files is not None:
            body["uploadedFiles"] = uploaded_files
        return await self.client.patch(
            f"/documents/submissions/{submission_id}/documents", json=body
        )

    async def submit(self, submission_id: str) -> APIResponse:
        return await self.client.post(f"/documents/submissions/{submission_id}/submit")

    async def delete(self, submission_id: str) -> APIResponse:
        """Only draft and partial submissions can be deleted"""
        return await self.client.delete(f"/documents/submissions/{submission_id}")

    # Reviewer side

    async def for_review(self, status: Optional[str] = None, course_code: Optional[str] = None,
                         department: Optional[str] = None, page: Optional[int] = None,
                         limit: Optional[int] = None) -> APIResponse:
        return await self.client.get("/documents/submissions/review/all", params={
            "status": status,
            "courseCode": course_code,
            "department": department,
            "page": page,
            "limit": limit,
        })

    async def review(self, submission_id: str, overall_status: str,
                     review_comments: Optional[str] = None) -> APIResponse:
        if overall_status not in REVIEW_STATUSES:
            raise ValueError(f"Review status must be one of {', '.join(REVIEW_STATUSES)}")

        body = {"overallStatus": overall_status}
        if review_comments is not None:
            body["reviewComments"] = review_comments
        return await self.client.patch(f"/documents/submissions/{submission_id}/review", json=body)
