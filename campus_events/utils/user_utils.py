from campus_events.schemas.user import UserProfile

USER_COLUMNS = ("id", "email", "username", "first_name", "last_name", "role", "is_active", "created_at")


def format_user_data(user, counts: dict, schema=UserProfile, **extra):
    data = {column: getattr(user, column) for column in USER_COLUMNS}
    data.update(counts=counts, **extra)
    return schema.model_validate(data)
