"""
Activity logging for the Estommy back office.

Every administrative action ends up as one Activity row. Callers pass the acting
user (or None for system actions) and a short description; structured details go
into the metadata JSON.
"""

import logging

logger = logging.getLogger(__name__)


def log_activity(
    action,
    entity_type,
    description="",
    user=None,
    entity_id=None,
    entity_name=None,
    metadata=None,
):
    """
    Append an activity record.

    Args:
        action: One of Activity.ACTION_CHOICES (e.g. Activity.BACKUP)
        entity_type: One of Activity.ENTITY_TYPE_CHOICES
        description: Human-readable summary
        user: Acting user, or None for system actions
        entity_id: ID of the affected entity (optional)
        entity_name: Display name of the affected entity (optional)
        metadata: JSON-serializable details (optional)

    Returns:
        The created Activity
    """
    from apps.core.models import Activity

    if user is not None:
        user_id = str(user.pk)
        user_name = user.display_name
    else:
        user_id = Activity.SYSTEM_USER_ID
        user_name = Activity.SYSTEM_USER_NAME

    activity = Activity.objects.create(
        user_id=user_id,
        user_name=user_name,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        entity_name=entity_name,
        description=description,
        metadata=metadata,
    )

    logger.debug(f"Activity logged: {user_name} {action} {entity_type}")
    return activity
