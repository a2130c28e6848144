"""Shared enums for models."""

from enum import Enum


class InputMethod(str, Enum):
    """How a layout node was produced."""

    TEXT = "text"
    IMAGE = "image"
    IMPROVEMENT = "improvement"
    MANUAL = "manual"


class TeamRole(str, Enum):
    """Member role within a team (admin > editor > viewer > member)."""

    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"
    MEMBER = "member"


class InvitationStatus(str, Enum):
    """Team invitation status. Accepted and rejected are terminal."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class SharePermission(str, Enum):
    """Permission granted by a layout share."""

    VIEWER = "viewer"
    EDITOR = "editor"
    ADMIN = "admin"


class AccessRole(str, Enum):
    """Effective role of a caller on a layout, ordered none < viewer < editor < admin < owner."""

    NONE = "none"
    VIEWER = "viewer"
    EDITOR = "editor"
    ADMIN = "admin"
    OWNER = "owner"

    @property
    def rank(self) -> int:
        return _ACCESS_RANK[self]

    def at_least(self, minimum: "AccessRole") -> bool:
        return self.rank >= minimum.rank


_ACCESS_RANK = {role: rank for rank, role in enumerate(AccessRole)}


class TagMatch(str, Enum):
    """How a multi-tag layout filter is applied."""

    ALL = "all"
    ANY = "any"
