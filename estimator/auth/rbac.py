"""Role-based access control.

admin manages everything, estimator maintains projects, master data and hour mappings
and submits estimations, viewer only reads.
"""
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    ESTIMATOR = "estimator"
    VIEWER = "viewer"


ROLE_NAMES = [r.value for r in Role]


def _has_any(roles: list[str], allowed: list[Role]) -> bool:
    allowed_names = [r.value for r in allowed]
    return any(r.lower() in allowed_names for r in roles)


def can_manage_projects(roles: list[str]) -> bool:
    return _has_any(roles, [Role.ADMIN, Role.ESTIMATOR])


def can_manage_master_data(roles: list[str]) -> bool:
    return _has_any(roles, [Role.ADMIN, Role.ESTIMATOR])


def can_create_estimation(roles: list[str]) -> bool:
    return _has_any(roles, [Role.ADMIN, Role.ESTIMATOR])


def can_delete_project(roles: list[str]) -> bool:
    return _has_any(roles, [Role.ADMIN])


def can_manage_users(roles: list[str]) -> bool:
    return _has_any(roles, [Role.ADMIN])
