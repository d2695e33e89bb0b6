"""
Identity for the Portfolio Status Dashboard

There is no login: the server acts as a fixed administrator and the UI
lets the viewer pick whose portfolio to look at from the known users.
"""

from typing import Optional, Dict, Any, List, Iterable, Protocol
import logging

from config.constants import ROLE_TO_ASSESSMENT_LEVEL

logger = logging.getLogger(__name__)

# Known dashboard users with the assessment level their portfolio is rolled up at
AVAILABLE_USERS: List[Dict[str, Any]] = [
    {'id': 1, 'username': 'ani', 'email': 'ani@company.com',
     'role': 'delivery_manager', 'name': 'Ani', 'assessment_level': 'DELIVERY_MANAGER'},
    {'id': 2, 'username': 'raja', 'email': 'raja@company.com',
     'role': 'delivery_manager', 'name': 'Raja', 'assessment_level': 'DELIVERY_MANAGER'},
    {'id': 3, 'username': 'deepa', 'email': 'deepa@company.com',
     'role': 'org_head', 'name': 'Deepa', 'assessment_level': 'ORG_HEAD'},
    {'id': 4, 'username': 'vijo_jacob', 'email': 'vijo.jacob@company.com',
     'role': 'project_manager', 'name': 'Vijo Jacob', 'assessment_level': 'PROJECT_MANAGER'},
    {'id': 5, 'username': 'ashwathy_nair', 'email': 'ashwathy.nair@company.com',
     'role': 'project_manager', 'name': 'Ashwathy Nair', 'assessment_level': 'PROJECT_MANAGER'},
    {'id': 6, 'username': 'srinivasan_kr', 'email': 'srinivasan.kr@company.com',
     'role': 'project_manager', 'name': 'Srinivasan K R', 'assessment_level': 'PROJECT_MANAGER'},
]

ROLE_DISPLAY_NAMES = {
    'admin': 'Admin',
    'delivery_manager': 'Delivery Manager',
    'project_manager': 'Project Manager',
    'org_head': 'Org Head',
    'tower_head': 'Tower Head',
}


class IdentityProvider(Protocol):
    """Source of the user a request acts as."""

    def current_user(self) -> Dict[str, Any]:
        ...


class StaticIdentityProvider:
    """Always returns the same user; stands in for real authentication."""

    def __init__(self, user_id: int = 1, role: str = 'admin'):
        self.user_id = user_id
        self.role = role

    def current_user(self) -> Dict[str, Any]:
        return {'id': self.user_id, 'role': self.role}


def has_role(user: Optional[Dict[str, Any]], roles: Iterable[str]) -> bool:
    """True if the user's role is one of roles."""
    return bool(user) and user.get('role') in tuple(roles)


def role_display_name(role: Optional[str]) -> str:
    if not role:
        return ''
    return ROLE_DISPLAY_NAMES.get(role.lower(), role)


def assessment_level_for(role: Optional[str]) -> Optional[str]:
    """Map a user role to the assessment level its portfolio is assessed at.

    Roles already expressed as levels (e.g. 'ORG_HEAD') map to themselves.
    """
    if not role:
        return None
    return ROLE_TO_ASSESSMENT_LEVEL.get(role.lower(), role.upper())


def selectable_people(external_users: Optional[Iterable[Dict[str, Any]]] = None) -> List[Dict[str, Any]]:
    """People offered by the user selector as {user_id, name, role, level}.

    Uses the users returned by the projects API when there are any, otherwise
    the built-in list.
    """
    people = []
    for user in external_users or []:
        name = user.get('preferredName')
        role = user.get('role')
        if name and role:
            people.append({
                'user_id': user.get('userId'),
                'name': name,
                'role': role,
                'level': assessment_level_for(role),
            })

    if people:
        return people

    return [
        {'user_id': user['id'], 'name': user['name'], 'role': user['role'],
         'level': user['assessment_level']}
        for user in AVAILABLE_USERS
    ]
