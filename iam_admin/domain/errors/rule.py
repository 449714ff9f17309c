"""Business rule identifiers carried by BusinessRuleViolation.rule."""


class Rule:
    """Business rule identifiers."""

    UNIQUE_NAME = "unique_name"
    UNIQUE_CODE = "unique_code"
    UNIQUE_DOMAIN = "unique_domain"
    UNIQUE_EMAIL = "unique_email"
    UNIQUE_USERNAME = "unique_username"
    REFERENCE_EXISTS = "reference_exists"
    REFERENCE_IN_SCOPE = "reference_in_scope"
    NO_SELF_PARENT = "no_self_parent"
    NO_HIERARCHY_CYCLE = "no_hierarchy_cycle"
    MAX_HIERARCHY_DEPTH = "max_hierarchy_depth"
    NO_MOVE_WITH_CHILDREN = "no_move_with_children"
    VALID_TRANSITION = "valid_transition"
    NO_CHILDREN = "no_children"
    DECLARED_VARIABLES = "declared_variables"
    VALUES_PROVIDED = "values_provided"
