# campus_events/db/models/Role.py
import enum


class Role(str, enum.Enum):
    STUDENT = "STUDENT"
    STUDENT_SENATE = "STUDENT_SENATE"
    ADMIN = "ADMIN"


# roles allowed to manage categories and other users' activities
PRIVILEGED_ROLES = (Role.STUDENT_SENATE, Role.ADMIN)
