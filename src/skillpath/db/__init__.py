from skillpath.db.base import Base
from skillpath.db.models import ActivityLog, Badge, Profile, User, UserSkill

__all__ = ["ActivityLog", "Badge", "Base", "Profile", "User", "UserSkill"]
