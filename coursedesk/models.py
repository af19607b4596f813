"""
Data shapes returned by the course management API.

The backend speaks camelCase JSON with Mongo-style ``_id`` keys; these
dataclasses keep the snake_case names used everywhere else in the package.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List


class UserRole(str, Enum):
    """Account roles"""
    ADMIN = "admin"
    TEACHER = "teacher"
    MODULE_LEADER = "module-leader"
    USER = "user"


class RequestStatus(str, Enum):
    """Course access request states"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class DistributionStatus(str, Enum):
    """Document distribution states"""
    PENDING = "pending"
    DISTRIBUTED = "distributed"
    ARCHIVED = "archived"
    EXPIRED = "expired"


def _id_of(data: Dict[str, Any]) -> str:
    return str(data.get("id") or data.get("_id") or "")


@dataclass
class User:
    """Authenticated user record"""
    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    role: UserRole = UserRole.USER
    is_email_verified: bool = False
    avatar: Optional[str] = None
    name: str = ""
    created_at: str = ""
    updated_at: str = ""

    @property
    def display_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.name or self.email

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        role = data.get("role") or UserRole.USER.value
        try:
            role = UserRole(role)
        except ValueError:
            role = UserRole.USER

        return cls(
            id=_id_of(data),
            email=data.get("email", ""),
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            role=role,
            is_email_verified=bool(data.get("isEmailVerified", False)),
            avatar=data.get("avatar"),
            name=data.get("name", ""),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role.value,
            "isEmailVerified": self.is_email_verified,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.avatar:
            data["avatar"] = self.avatar
        if self.name:
            data["name"] = self.name
        return data


@dataclass
class AuthTokens:
    """Credential pair issued at login"""
    access_token: str
    refresh_token: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthTokens":
        return cls(
            access_token=data.get("accessToken", ""),
            refresh_token=data.get("refreshToken", ""),
        )


@dataclass
class CourseAccessRequest:
    """A teacher's request to teach a course section"""
    id: str
    status: RequestStatus
    course: Dict[str, Any] = field(default_factory=dict)
    teacher: Dict[str, Any] = field(default_factory=dict)
    module_leader: Dict[str, Any] = field(default_factory=dict)
    message: str = ""
    batch: Optional[int] = None
    semester: str = ""
    request_date: str = ""
    response_message: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CourseAccessRequest":
        return cls(
            id=_id_of(data),
            status=RequestStatus(data.get("status", RequestStatus.PENDING.value)),
            course=data.get("course") or {},
            teacher=data.get("teacher") or {},
            module_leader=data.get("moduleLeader") or {},
            message=data.get("message", ""),
            batch=data.get("batch"),
            semester=data.get("semester", ""),
            request_date=data.get("requestDate", ""),
            response_message=data.get("responseMessage"),
        )


def unwrap_list(data: Any) -> List[Dict[str, Any]]:
    """Pull the item list out of a ``{"success": ..., "data": [...]}`` envelope"""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        items = data.get("data")
        if isinstance(items, list):
            return items
    return []
