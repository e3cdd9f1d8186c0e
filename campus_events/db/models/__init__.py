from campus_events.db.models.Role import Role, PRIVILEGED_ROLES
from campus_events.db.models.User import User
from campus_events.db.models.Category import Category
from campus_events.db.models.Activity import Activity, ActivityStatus
from campus_events.db.models.ActivityTag import ActivityTag
from campus_events.db.models.Comment import Comment
from campus_events.db.models.Like import Like

__all__ = [
    "Role",
    "PRIVILEGED_ROLES",
    "User",
    "Category",
    "Activity",
    "ActivityStatus",
    "ActivityTag",
    "Comment",
    "Like",
]
