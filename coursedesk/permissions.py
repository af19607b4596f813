"""
Role-based permission tables.

The backend enforces access; these tables let a client decide which actions
and dashboards to offer a user.
"""

from typing import Optional, Dict, Any, Iterable, List, Union

from coursedesk.models import User, UserRole


ADMIN = UserRole.ADMIN
TEACHER = UserRole.TEACHER
MODULE_LEADER = UserRole.MODULE_LEADER

PERMISSIONS = {
    # Admin
    "MANAGE_USERS": frozenset([ADMIN]),
    "MANAGE_COURSES": frozenset([ADMIN]),
    "MANAGE_DEPARTMENTS": frozenset([ADMIN]),
    "MANAGE_BATCHES": frozenset([ADMIN]),
    "MANAGE_SECTIONS": frozenset([ADMIN]),
    "VIEW_ALL_MARKS": frozenset([ADMIN, MODULE_LEADER]),

    # Teacher
    "ENTER_MARKS": frozenset([ADMIN, TEACHER, MODULE_LEADER]),
    "VIEW_OWN_COURSES": frozenset([ADMIN, TEACHER, MODULE_LEADER]),
    "MANAGE_DOCUMENTS": frozenset([ADMIN, TEACHER, MODULE_LEADER]),

    # Module leader
    "MANAGE_SECTION_MARKS": frozenset([ADMIN, MODULE_LEADER]),
    "VIEW_SECTION_REPORTS": frozenset([ADMIN, MODULE_LEADER]),
}

ROLE_DISPLAY_NAMES = {
    TEACHER: "Teacher",
    MODULE_LEADER: "Module Leader",
    ADMIN: "Administrator",
}

UserLike = Union[User, Dict[str, Any], None]


def _role_of(user: UserLike) -> Optional[UserRole]:
    if user is None:
        return None
    if isinstance(user, User):
        return user.role
    try:
        return UserRole(user.get("role"))
    except ValueError:
        return None


def _id_of(user: UserLike) -> Optional[str]:
    if isinstance(user, User):
        return user.id
    if isinstance(user, dict):
        return user.get("id") or user.get("_id")
    return None


def has_permission(user: UserLike, permission: str) -> bool:
    """Unknown permissions raise KeyError; a missing user has none"""
    allowed = PERMISSIONS[permission]
    return _role_of(user) in allowed


def has_role(user: UserLike, roles: Iterable[Union[UserRole, str]]) -> bool:
    role = _role_of(user)
    if role is None:
        return False
    return role in {UserRole(r) for r in roles}


def is_admin(user: UserLike) -> bool:
    return _role_of(user) == ADMIN


def is_teacher_or_higher(user: UserLike) -> bool:
    return has_role(user, [ADMIN, TEACHER, MODULE_LEADER])


def is_module_leader_or_higher(user: UserLike) -> bool:
    return has_role(user, [ADMIN, MODULE_LEADER])


def get_role_display_name(role: Union[UserRole, str]) -> str:
    return ROLE_DISPLAY_NAMES.get(UserRole(role), UserRole(role).value)


def get_available_roles() -> List[Dict[str, str]]:
    """Roles an admin can assign"""
    return [
        {"value": role.value, "label": label}
        for role, label in ROLE_DISPLAY_NAMES.items()
    ]


def can_manage_user(current_user: UserLike, target_user: UserLike) -> bool:
    """Only admins manage users, and never themselves"""
    if current_user is None or target_user is None:
        return False
    if not is_admin(current_user):
        return False
    return _id_of(current_user) != _id_of(target_user)


def get_navigation_permissions(user: UserLike) -> Dict[str, bool]:
    return {
        "can_view_admin": has_role(user, [ADMIN]),
        "can_view_module_leader": has_role(user, [ADMIN, MODULE_LEADER]),
        "can_view_teacher": has_role(user, [ADMIN, TEACHER, MODULE_LEADER]),
        "can_view_marks_entry": has_permission(user, "ENTER_MARKS"),
        "can_view_documents": has_permission(user, "MANAGE_DOCUMENTS"),
        "can_view_reports": has_permission(user, "VIEW_ALL_MARKS"),
    }
