"""Scoped entity construction errors.

Raised as ``ValueError`` from ``__post_init__``: an entity built with these
problems is a programming error, since command validation runs first.
"""


class EntityError:
    """Entity construction error constants."""

    MISSING_ID = "Entity id cannot be empty"
    MISSING_ACTOR = "created_by cannot be empty"
    MISSING_NAME = "name cannot be empty"
    MISSING_CODE = "code cannot be empty"
    MISSING_ORGANIZATION = "Department must belong to an organization"
    MISSING_USERNAME = "username cannot be empty"
    MISSING_CONTENT = "Template content cannot be empty"
    INVALID_LEVEL = "Department level must be at least 1"
