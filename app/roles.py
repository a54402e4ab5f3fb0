"""Account roles and the permissions attached to each of them."""
from enum import Enum
from typing import Dict, List

from .errors import InvalidInput


class Role(str, Enum):
    GAMER = 'gamer'
    CONTENT_CREATOR = 'content-creator'
    YOUTH_MENTOR = 'youth-mentor'
    ADMIN = 'admin'
    OWNER = 'owner'

    @classmethod
    def parse(cls, value, default: 'Role' = None) -> 'Role':
        """Return the role named by *value*.

        ``None`` or an empty string resolve to *default* when one is given.

        Raises:
            InvalidInput: *value* is not one of the known roles.
        """
        if isinstance(value, cls):
            return value
        if (value is None or value == '') and default is not None:
            return default
        if isinstance(value, str):
            try:
                return cls(value.strip())
            except ValueError:
                pass
        allowed = ', '.join(r.value for r in cls)
        raise InvalidInput(f"Invalid role '{value}'. Must be one of: {allowed}")


DEFAULT_ROLE = Role.GAMER

ROLE_LABELS: Dict[Role, str] = {
    Role.GAMER: 'Gamer',
    Role.CONTENT_CREATOR: 'Content Creator',
    Role.YOUTH_MENTOR: 'Youth Mentor',
    Role.ADMIN: 'Admin',
    Role.OWNER: 'Owner',
}

_MEMBER = ['read_blogs', 'join_community', 'comment', 'like_content']
_AUTHOR = _MEMBER + ['create_blogs', 'edit_own_blogs', 'delete_own_blogs']

ROLE_PERMISSIONS: Dict[Role, List[str]] = {
    Role.GAMER: _MEMBER,
    Role.CONTENT_CREATOR: _AUTHOR,
    Role.YOUTH_MENTOR: _AUTHOR + ['moderate_comments', 'host_workshops', 'mentor_users'],
    Role.ADMIN: ['all', 'manage_users', 'manage_content', 'manage_roles'],
    Role.OWNER: ['all', 'assign_roles', 'manage_owners', 'manage_users',
                 'manage_content', 'system_control'],
}

BLOG_AUTHOR_ROLES = frozenset({
    Role.CONTENT_CREATOR, Role.YOUTH_MENTOR, Role.ADMIN, Role.OWNER,
})


def permissions_for(role) -> List[str]:
    """Return the permission list for *role*; unknown roles get gamer rights."""
    try:
        return list(ROLE_PERMISSIONS[Role.parse(role)])
    except InvalidInput:
        return list(ROLE_PERMISSIONS[DEFAULT_ROLE])


def can_create_blogs(role) -> bool:
    try:
        return Role.parse(role) in BLOG_AUTHOR_ROLES
    except InvalidInput:
        return False


def catalogue() -> List[Dict]:
    """Describe every role for display: value, label, permissions."""
    return [
        {
            'role': role.value,
            'label': ROLE_LABELS[role],
            'permissions': permissions_for(role),
            'can_create_blogs': can_create_blogs(role),
        }
        for role in Role
    ]
